"""ユーザー辞書"""

import threading
from collections.abc import Mapping
from logging import getLogger
from pathlib import Path
from types import MappingProxyType
from uuid import UUID, uuid4

from pydantic import TypeAdapter, ValidationError

from ..error import UserDictLoadError, UserDictSaveError, WordNotFoundError
from .model import UserDictWord
from .user_dict_word import to_mecab_line

__all__ = ["UserDict"]

logger = getLogger("uvicorn")  # FastAPI / Uvicorn 内からの利用のため

# NOTE: JSON オブジェクトのキー順は挿入順で書き出し・読み込みされる
_user_dict_adapter = TypeAdapter(dict[UUID, UserDictWord])


class UserDict:
    """
    ユーザー辞書

    単語は UUID をキーとして挿入順に保持される。
    更新系の操作は全てロック下で行い、`words()` はロック下で取ったコピーを返す。
    テキスト解析器へ反映するには `OpenJtalk.use_user_dict` を改めて呼ぶ必要がある。
    """

    def __init__(self) -> None:
        self._words: dict[UUID, UserDictWord] = {}
        self._lock = threading.Lock()

    @classmethod
    def from_words(cls, words: Mapping[UUID, UserDictWord]) -> "UserDict":
        """UUID と単語の対応から辞書を生成する。順序は `words` の順序に従う。"""
        user_dict = cls()
        user_dict._words = {
            word_uuid: word.model_copy() for word_uuid, word in words.items()
        }
        return user_dict

    def __len__(self) -> int:
        return len(self._words)

    def __contains__(self, word_uuid: object) -> bool:
        return word_uuid in self._words

    def words(self) -> Mapping[UUID, UserDictWord]:
        """単語の読み取り専用スナップショット（挿入順）を取得する。"""
        with self._lock:
            snapshot = {
                word_uuid: word.model_copy() for word_uuid, word in self._words.items()
            }
        return MappingProxyType(snapshot)

    def add_word(self, word: UserDictWord) -> UUID:
        """単語を末尾へ追加し、割り当てた UUID を返す。"""
        word_uuid = uuid4()
        with self._lock:
            self._words[word_uuid] = word.model_copy()
        return word_uuid

    def update_word(self, word_uuid: UUID, new_word: UserDictWord) -> None:
        """UUID で指定された単語を上書きする。並び順は変わらない。"""
        with self._lock:
            if word_uuid not in self._words:
                raise WordNotFoundError(word_uuid)
            self._words[word_uuid] = new_word.model_copy()

    def remove_word(self, word_uuid: UUID) -> UserDictWord:
        """UUID で指定された単語を削除し、削除した単語を返す。"""
        with self._lock:
            if word_uuid not in self._words:
                raise WordNotFoundError(word_uuid)
            return self._words.pop(word_uuid)

    def import_dict(self, other: "UserDict") -> None:
        """
        他の辞書の単語を取り込む。

        既存の UUID は上書きせず、新しい UUID の単語のみを取り込み元の順序で末尾へ追加する。
        """
        # NOTE: 自身を取り込む場合のデッドロックを避けるため、先にスナップショットを取る
        incoming = other.words()
        with self._lock:
            for word_uuid, word in incoming.items():
                if word_uuid not in self._words:
                    self._words[word_uuid] = word

    def load(self, store_path: str | Path) -> None:
        """
        ファイルから辞書を読み込み、現在の内容を置き換える。

        読み込みに失敗した場合、現在の内容は変更されない。
        """
        store_path = Path(store_path)
        try:
            words = _user_dict_adapter.validate_json(store_path.read_bytes())
        except (OSError, ValidationError) as e:
            raise UserDictLoadError(
                f"ユーザー辞書 {store_path} を読み込めませんでした: {e}",
                path=str(store_path),
            ) from e
        with self._lock:
            self._words = words
        logger.info(f"Loaded user dictionary: {store_path} ({len(words)} words)")

    def save(self, store_path: str | Path) -> None:
        """辞書をファイルへ書き出す。一時ファイルへ書いてから置き換える。"""
        store_path = Path(store_path)
        with self._lock:
            user_dict_json = _user_dict_adapter.dump_json(self._words)
        tmp_path = store_path.with_name(f"{store_path.name}.{uuid4()}.tmp")
        try:
            tmp_path.write_bytes(user_dict_json)
            tmp_path.replace(store_path)
        except OSError as e:
            raise UserDictSaveError(
                f"ユーザー辞書 {store_path} を保存できませんでした: {e}",
                path=str(store_path),
            ) from e
        finally:
            if tmp_path.exists():
                tmp_path.unlink()
        logger.info(f"Saved user dictionary: {store_path}")

    def to_mecab_format(self) -> str:
        """辞書を MeCab の CSV 形式へ変換する。"""
        return "".join(to_mecab_line(word) + "\n" for word in self.words().values())
