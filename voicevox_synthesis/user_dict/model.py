"""
ユーザー辞書機能に関して API と内部実装が共有するモデル（データ構造）

モデルの注意点は `voicevox_synthesis/model.py` の module docstring を確認すること。
"""

from enum import Enum
from typing import Annotated, Self

from pydantic import AfterValidator, BaseModel, ConfigDict, Field, model_validator
from pydantic.json_schema import SkipJsonSchema

from ..error import InvalidWordError
from ..utility.text_utility import (
    count_mora,
    replace_hankaku_alphabets_with_zenkaku,
    validate_pronunciation,
)


class WordTypes(str, Enum):
    """品詞"""

    PROPER_NOUN = "PROPER_NOUN"
    COMMON_NOUN = "COMMON_NOUN"
    VERB = "VERB"
    ADJECTIVE = "ADJECTIVE"
    SUFFIX = "SUFFIX"


USER_DICT_MIN_PRIORITY = 0
USER_DICT_MAX_PRIORITY = 10
USER_DICT_DEFAULT_PRIORITY = 5


def parse_word_type(value: str) -> WordTypes:
    """品詞を表す文字列を `WordTypes` へ変換する。"""
    try:
        return WordTypes(value)
    except ValueError:
        raise InvalidWordError(f"不明な単語の種類: '{value}'", word_type=value)


def _check_not_empty(text: str) -> str:
    if len(text) == 0:
        raise ValueError("表層形が空です。")
    return text


def _check_newlines_and_null(text: str) -> str:
    if "\n" in text or "\r" in text:
        raise ValueError("ユーザー辞書データ内に改行が含まれています。")
    if "\x00" in text:
        raise ValueError("ユーザー辞書データ内にnull文字が含まれています。")
    return text


def _check_csv_safe(text: str) -> str:
    # MeCab の CSV 形式へそのまま書き出すため、区切り文字を含めない
    if "," in text:
        raise ValueError("ユーザー辞書データ内にカンマが含まれています。")
    if '"' in text:
        raise ValueError("ユーザー辞書データ内にダブルクォートが含まれています。")
    return text


Surface = Annotated[
    str,
    AfterValidator(_check_not_empty),
    AfterValidator(replace_hankaku_alphabets_with_zenkaku),
    AfterValidator(_check_newlines_and_null),
    AfterValidator(_check_csv_safe),
]
Pronunciation = Annotated[
    str,
    AfterValidator(_check_newlines_and_null),
    AfterValidator(validate_pronunciation),
]


class UserDictWord(BaseModel):
    """ユーザー辞書の単語"""

    model_config = ConfigDict(validate_assignment=True)

    surface: Surface = Field(description="表層形")
    pronunciation: Pronunciation = Field(description="発音（カタカナ）")
    accent_type: int = Field(default=0, description="アクセント型")
    word_type: WordTypes = Field(default=WordTypes.COMMON_NOUN, description="品詞")
    priority: int = Field(
        default=USER_DICT_DEFAULT_PRIORITY,
        description="優先度",
        ge=USER_DICT_MIN_PRIORITY,
        le=USER_DICT_MAX_PRIORITY,
    )
    mora_count: int | SkipJsonSchema[None] = Field(default=None, description="モーラ数")

    @model_validator(mode="after")
    def check_mora_count_and_accent_type(self) -> Self:
        """モーラ数が None であれば計算し、アクセント型を検証する。"""
        if self.mora_count is None:
            self.mora_count = count_mora(self.pronunciation)
        if not 0 <= self.accent_type <= self.mora_count:
            msg = f"誤ったアクセント型です({self.accent_type})。 expect: 0 <= accent_type <= {self.mora_count}"
            raise ValueError(msg)
        return self
