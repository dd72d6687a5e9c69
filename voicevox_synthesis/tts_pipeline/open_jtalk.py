"""OpenJTalk によるテキスト解析器"""

import tempfile
import threading
from dataclasses import asdict, dataclass, field
from logging import getLogger
from pathlib import Path
from uuid import uuid4

import pyopenjtalk

from ..error import (
    ExtractFullContextLabelError,
    NotLoadedOpenjtalkDictError,
    UseUserDictError,
)
from ..user_dict.user_dict import UserDict
from .njd_feature_processor import NjdFeature, apply_katakana_english

logger = getLogger("uvicorn")  # FastAPI / Uvicorn 内からの利用のため


def bundled_dict_dir() -> Path:
    """pyopenjtalk が同梱するシステム辞書のディレクトリを取得する。未取得の場合はダウンロードされる。"""
    # NOTE: pyopenjtalk は初回の解析時に辞書を取得する
    pyopenjtalk.run_frontend("あ")
    return Path(pyopenjtalk.OPEN_JTALK_DICT_DIR.decode("utf-8"))


def _remove_compiled_dict(path: Path) -> None:
    """使われなくなったコンパイル済みユーザー辞書を削除する。"""
    try:
        path.unlink(missing_ok=True)
    except OSError as e:
        # 解析中のフロントエンドが開いたままの場合など。一時ディレクトリごと後で削除される。
        logger.warning(f"Failed to remove compiled user dictionary {path}: {e}")


@dataclass(frozen=True)
class _Frontend:
    """OpenJTalk のフロントエンドと、その呼び出しを直列化するロック"""

    jtalk: pyopenjtalk.OpenJTalk
    # 参照しているコンパイル済みユーザー辞書。ユーザー辞書無しの場合は None
    compiled_path: Path | None = None
    # NOTE: OpenJTalk のフロントエンドは再入可能でない
    lock: threading.Lock = field(default_factory=threading.Lock)


class OpenJtalk:
    """
    OpenJTalk によるテキスト解析器

    ユーザー辞書は `use_user_dict` を呼んだ時点の内容が反映される。
    以後に辞書を変更しても、再度 `use_user_dict` を呼ぶまで解析結果は変わらない。
    """

    def __init__(
        self, open_jtalk_dict_dir: str | Path, enable_katakana_english: bool = True
    ) -> None:
        """
        Parameters
        ----------
        open_jtalk_dict_dir : str | Path
            OpenJTalk のシステム辞書のディレクトリ
        enable_katakana_english : bool
            読みが不明な英単語をカタカナ読みにするか否か
        """
        dict_dir = Path(open_jtalk_dict_dir)
        if not dict_dir.is_dir():
            raise NotLoadedOpenjtalkDictError(
                f"OpenJTalk の辞書 {dict_dir} が読み込まれていません",
                path=str(dict_dir),
            )
        self._dict_dir = str(dict_dir.resolve()).encode("utf-8")
        self.enable_katakana_english = enable_katakana_english
        # コンパイル済みユーザー辞書の置き場所。フロントエンドが参照し続けるためインスタンスと共に残す。
        self._compiled_dir = tempfile.TemporaryDirectory(
            prefix="voicevox-synthesis-", ignore_cleanup_errors=True
        )
        self._swap_lock = threading.Lock()
        self._frontend = _Frontend(self._new_jtalk(b""))

    def _new_jtalk(self, userdic: bytes) -> pyopenjtalk.OpenJTalk:
        try:
            return pyopenjtalk.OpenJTalk(self._dict_dir, userdic)
        except Exception as e:
            raise NotLoadedOpenjtalkDictError(
                f"OpenJTalk の辞書 {self._dict_dir.decode('utf-8')} を読み込めませんでした: {e}"
            ) from e

    def use_user_dict(self, user_dict: UserDict) -> None:
        """
        ユーザー辞書のスナップショットをコンパイルし、以後の解析に使う。

        失敗した場合は直前のユーザー辞書を使い続ける。
        """
        csv_text = user_dict.to_mecab_format()
        with self._swap_lock:
            if csv_text == "":
                frontend = _Frontend(self._new_jtalk(b""))
            else:
                compiled_path = self._compile(csv_text)
                try:
                    jtalk = self._new_jtalk(str(compiled_path).encode("utf-8"))
                except NotLoadedOpenjtalkDictError:
                    _remove_compiled_dict(compiled_path)
                    raise
                frontend = _Frontend(jtalk, compiled_path)
            previous, self._frontend = self._frontend, frontend
        if previous.compiled_path is not None:
            _remove_compiled_dict(previous.compiled_path)
        logger.info(f"Applied user dictionary ({len(csv_text.splitlines())} words)")

    def _compile(self, csv_text: str) -> Path:
        """MeCab の CSV 形式の辞書をコンパイルし、コンパイル済み辞書のパスを返す。"""
        base = Path(self._compiled_dir.name) / f"user-{uuid4()}"
        csv_path = base.with_suffix(".csv")
        compiled_path = base.with_suffix(".dic")
        try:
            csv_path.write_text(csv_text, encoding="utf-8")
            pyopenjtalk.create_user_dict(str(csv_path), str(compiled_path))
        except Exception as e:
            raise UseUserDictError(
                f"ユーザー辞書をコンパイルできませんでした: {e}"
            ) from e
        finally:
            csv_path.unlink(missing_ok=True)
        if not compiled_path.is_file():
            raise UseUserDictError("辞書のコンパイル時にエラーが発生しました。")
        return compiled_path

    def _run_frontend(self, frontend: _Frontend, text: str) -> list[NjdFeature]:
        with frontend.lock:
            raw_features = frontend.jtalk.run_frontend(text)
        features = [NjdFeature.from_dict(f) for f in raw_features]
        if self.enable_katakana_english:
            features = apply_katakana_english(features)
        return features

    def analyze(self, text: str) -> list[NjdFeature]:
        """テキストを形態素（読み・アクセント付き）の系列へ変換する。"""
        if len(text.strip()) == 0:
            return []
        return self._run_frontend(self._frontend, text)

    def extract_full_context_label(self, text: str) -> list[str]:
        """テキストからフルコンテキストラベルを生成する。"""
        if len(text.strip()) == 0:
            return []
        # NOTE: 解析とラベル生成で同じフロントエンドを使う
        frontend = self._frontend
        try:
            features = self._run_frontend(frontend, text)
            with frontend.lock:
                labels: list[str] = frontend.jtalk.make_label(
                    [asdict(feature) for feature in features]
                )
        except Exception as e:
            raise ExtractFullContextLabelError(text) from e
        return labels
