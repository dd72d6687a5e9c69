"""キャラクター情報とスタイル情報"""

from typing import Literal, NewType

from pydantic import BaseModel, ConfigDict, Field
from pydantic.json_schema import SkipJsonSchema

# NOTE: 循環importを防ぐため、全モジュールから参照される ID 型はここに置く
StyleId = NewType("StyleId", int)
VoiceModelId = NewType("VoiceModelId", str)
StyleType = Literal["talk"]


class StyleMeta(BaseModel):
    """キャラクターのスタイル情報"""

    model_config = ConfigDict(frozen=True)

    id: StyleId = Field(description="スタイルID", ge=0)
    name: str = Field(description="スタイル名")
    type: StyleType = Field(
        default="talk",
        description="スタイルの種類。talk:音声合成クエリの作成と音声合成が可能。",
    )
    order: int | SkipJsonSchema[None] = Field(
        default=None, description="キャラクター内でのスタイルの並び順"
    )


class SpeakerMeta(BaseModel):
    """キャラクター情報"""

    model_config = ConfigDict(frozen=True)

    name: str = Field(description="名前")
    styles: tuple[StyleMeta, ...] = Field(description="スタイルの一覧")
    version: str = Field(description="キャラクターのバージョン")
    speaker_uuid: str = Field(description="キャラクターのUUID")
    order: int | SkipJsonSchema[None] = Field(
        default=None, description="キャラクターの並び順"
    )


def _order_key(order: int | None, fallback: int) -> tuple[int, int]:
    # order 未指定は指定済みの後ろへ回す
    return (0, order) if order is not None else (1, fallback)


def merge_speaker_metas(metas: list[SpeakerMeta]) -> list[SpeakerMeta]:
    """
    複数の音声モデルのキャラクター情報を統合する。

    同一 `speaker_uuid` のキャラクターは 1 つにまとめ、スタイルを結合する。
    キャラクターとスタイルは `order` 順（未指定は末尾、同順位は ID 順）に並べる。
    """
    merged: dict[str, SpeakerMeta] = {}
    for meta in metas:
        if meta.speaker_uuid in merged:
            base = merged[meta.speaker_uuid]
            merged[meta.speaker_uuid] = base.model_copy(
                update={"styles": base.styles + meta.styles}
            )
        else:
            merged[meta.speaker_uuid] = meta

    speakers: list[SpeakerMeta] = []
    for index, speaker in enumerate(merged.values()):
        styles = sorted(speaker.styles, key=lambda s: (_order_key(s.order, s.id), s.id))
        speakers.append(speaker.model_copy(update={"styles": tuple(styles)}))

    return [
        speaker
        for _, speaker in sorted(
            enumerate(speakers), key=lambda p: _order_key(p[1].order, p[0])
        )
    ]
