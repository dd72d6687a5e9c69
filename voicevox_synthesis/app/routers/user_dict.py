"""ユーザー辞書機能を提供する API Router"""

from pathlib import Path as FilePath
from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Body, Path, Query
from pydantic.json_schema import SkipJsonSchema

from voicevox_synthesis.tts_pipeline.open_jtalk import OpenJtalk
from voicevox_synthesis.user_dict.model import (
    USER_DICT_DEFAULT_PRIORITY,
    USER_DICT_MAX_PRIORITY,
    USER_DICT_MIN_PRIORITY,
    UserDictWord,
    WordTypes,
)
from voicevox_synthesis.user_dict.user_dict import UserDict
from voicevox_synthesis.user_dict.user_dict_word import create_word

_WORD_TYPE_DESCRIPTION = "PROPER_NOUN（固有名詞）、COMMON_NOUN（普通名詞）、VERB（動詞）、ADJECTIVE（形容詞）、SUFFIX（語尾）のいずれか"
_PRIORITY_DESCRIPTION = "単語の優先度（0から10までの整数）。数字が大きいほど優先度が高くなる。1から9までの値を指定することを推奨"


def generate_user_dict_router(
    user_dict: UserDict, open_jtalk: OpenJtalk, user_dict_path: FilePath | None
) -> APIRouter:
    """ユーザー辞書 API Router を生成する"""
    router = APIRouter(tags=["ユーザー辞書"])

    def _apply_user_dict() -> None:
        """変更後の辞書を保存し、テキスト解析器へ反映する。"""
        if user_dict_path is not None:
            user_dict.save(user_dict_path)
        open_jtalk.use_user_dict(user_dict)

    @router.get(
        "/user_dict",
        response_description="単語のUUIDとその詳細",
    )
    def get_user_dict_words() -> dict[str, UserDictWord]:
        """
        ユーザー辞書に登録されている単語の一覧を返します。
        単語の表層形(surface)は正規化済みの物を返します。
        """
        return {
            str(word_uuid): word for word_uuid, word in user_dict.words().items()
        }

    @router.post("/user_dict_word")
    def add_user_dict_word(
        surface: Annotated[str, Query(description="言葉の表層形")],
        pronunciation: Annotated[str, Query(description="言葉の発音（カタカナ）")],
        accent_type: Annotated[
            int, Query(description="アクセント型（音が下がる場所を指す）")
        ],
        word_type: Annotated[
            str | SkipJsonSchema[None], Query(description=_WORD_TYPE_DESCRIPTION)
        ] = None,
        priority: Annotated[
            int | SkipJsonSchema[None],
            Query(
                description=_PRIORITY_DESCRIPTION,
                json_schema_extra={
                    "maximum": USER_DICT_MAX_PRIORITY,
                    "minimum": USER_DICT_MIN_PRIORITY,
                },
            ),
        ] = None,
    ) -> str:
        """
        ユーザー辞書に言葉を追加します。
        """
        word = create_word(
            surface,
            pronunciation,
            accent_type,
            word_type if word_type is not None else WordTypes.COMMON_NOUN,
            priority if priority is not None else USER_DICT_DEFAULT_PRIORITY,
        )
        word_uuid = user_dict.add_word(word)
        _apply_user_dict()
        return str(word_uuid)

    @router.put("/user_dict_word/{word_uuid}", status_code=204)
    def rewrite_user_dict_word(
        surface: Annotated[str, Query(description="言葉の表層形")],
        pronunciation: Annotated[str, Query(description="言葉の発音（カタカナ）")],
        accent_type: Annotated[
            int, Query(description="アクセント型（音が下がる場所を指す）")
        ],
        word_uuid: Annotated[UUID, Path(description="更新する言葉のUUID")],
        word_type: Annotated[
            str | SkipJsonSchema[None], Query(description=_WORD_TYPE_DESCRIPTION)
        ] = None,
        priority: Annotated[
            int | SkipJsonSchema[None],
            Query(
                description=_PRIORITY_DESCRIPTION,
                json_schema_extra={
                    "maximum": USER_DICT_MAX_PRIORITY,
                    "minimum": USER_DICT_MIN_PRIORITY,
                },
            ),
        ] = None,
    ) -> None:
        """
        ユーザー辞書に登録されている言葉を更新します。
        """
        word = create_word(
            surface,
            pronunciation,
            accent_type,
            word_type if word_type is not None else WordTypes.COMMON_NOUN,
            priority if priority is not None else USER_DICT_DEFAULT_PRIORITY,
        )
        user_dict.update_word(word_uuid, word)
        _apply_user_dict()

    @router.delete("/user_dict_word/{word_uuid}", status_code=204)
    def delete_user_dict_word(
        word_uuid: Annotated[UUID, Path(description="削除する言葉のUUID")],
    ) -> None:
        """
        ユーザー辞書に登録されている言葉を削除します。
        """
        user_dict.remove_word(word_uuid)
        _apply_user_dict()

    @router.post("/import_user_dict", status_code=204)
    def import_user_dict_words(
        import_dict_data: Annotated[
            dict[UUID, UserDictWord],
            Body(description="インポートするユーザー辞書のデータ"),
        ],
    ) -> None:
        """
        他のユーザー辞書をインポートします。
        既に登録されているUUIDの言葉は上書きされません。
        """
        user_dict.import_dict(UserDict.from_words(import_dict_data))
        _apply_user_dict()

    return router
