"""
音声合成機能に関して API と内部実装が共有するモデル（データ構造）

モデルの注意点は `voicevox_synthesis/model.py` の module docstring を確認すること。
"""

from enum import Enum
from typing import Literal, Self

from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic.json_schema import SkipJsonSchema

from .phoneme import Consonant, Vowel


class Mora(BaseModel):
    """
    モーラ（子音＋母音）ごとの情報
    """

    model_config = ConfigDict(validate_assignment=True)

    text: str = Field(description="文字")
    consonant: Consonant | SkipJsonSchema[None] = Field(
        default=None, description="子音の音素"
    )
    consonant_length: float | SkipJsonSchema[None] = Field(
        default=None, description="子音の音長"
    )
    # NOTE: "sil" は前後に付与する無音モーラ専用
    vowel: Vowel | Literal["sil"] = Field(description="母音の音素")
    vowel_length: float = Field(description="母音の音長")
    pitch: float = Field(
        description="音高"
    )  # デフォルト値をつけるとts側のOpenAPIで生成されたコードの型がOptionalになる

    @classmethod
    def placeholder(cls, text: str, consonant: str | None, vowel: str) -> Self:
        """音素長と音高を 0 で初期化したモーラを生成する。"""
        return cls(
            text=text,
            consonant=consonant,
            consonant_length=0 if consonant is not None else None,
            vowel=vowel,
            vowel_length=0,
            pitch=0,
        )

    @classmethod
    def pause(cls) -> Self:
        """音素長と音高を 0 で初期化した pau モーラ（読点）を生成する。"""
        return cls.placeholder("、", None, "pau")


class AccentPhrase(BaseModel):
    """
    アクセント句ごとの情報
    """

    moras: list[Mora] = Field(min_length=1, description="モーラのリスト")
    accent: int = Field(description="アクセント箇所")
    pause_mora: Mora | SkipJsonSchema[None] = Field(
        default=None, description="後ろに無音を付けるかどうか"
    )
    is_interrogative: bool = Field(default=False, description="疑問系かどうか")

    @model_validator(mode="after")
    def check_accent_position(self) -> Self:
        """アクセント位置がモーラ範囲内 (1 始まり) にあることを検証する。"""
        if not 1 <= self.accent <= len(self.moras):
            msg = f"誤ったアクセント位置です({self.accent})。 expect: 1 <= accent <= {len(self.moras)}"
            raise ValueError(msg)
        return self


class ParseKanaErrorCode(Enum):
    UNKNOWN_TEXT = "判別できない読み仮名があります: {text}"
    ACCENT_TOP = "句頭にアクセントは置けません: {text}"
    ACCENT_TWICE = "1つのアクセント句に二つ以上のアクセントは置けません: {text}"
    ACCENT_NOTFOUND = "アクセントを指定していないアクセント句があります: {text}"
    EMPTY_PHRASE = "{position}番目のアクセント句が空白です"
    INTERROGATION_MARK_NOT_AT_END = "アクセント句末以外に「？」は置けません: {text}"
    INFINITE_LOOP = "処理時に無限ループになってしまいました...バグ報告をお願いします。"
