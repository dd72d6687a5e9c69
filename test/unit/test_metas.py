"""キャラクター情報の統合のテスト"""

from test.utility import SPEAKER_UUID_1, SPEAKER_UUID_2, gen_speaker_meta
from voicevox_synthesis.metas.metas import SpeakerMeta, StyleMeta, merge_speaker_metas


def _gen_speaker(
    speaker_uuid: str, styles: list[tuple[int, str]], order: int | None = None
) -> SpeakerMeta:
    meta = SpeakerMeta.model_validate(gen_speaker_meta("dummy", speaker_uuid, styles))
    return meta.model_copy(update={"order": order})


def test_merge_same_speaker() -> None:
    """同じキャラクターのスタイルは 1 つにまとめられ、ID 順に並ぶ。"""
    metas = merge_speaker_metas(
        [
            _gen_speaker(SPEAKER_UUID_1, [(3, "ささやき")]),
            _gen_speaker(SPEAKER_UUID_2, [(2, "ノーマル")]),
            _gen_speaker(SPEAKER_UUID_1, [(0, "ノーマル")]),
        ]
    )

    assert [speaker.speaker_uuid for speaker in metas] == [
        SPEAKER_UUID_1,
        SPEAKER_UUID_2,
    ]
    assert [style.id for style in metas[0].styles] == [0, 3]


def test_merge_order() -> None:
    """`order` が指定されたキャラクターは指定順で先に並び、未指定は出現順で後ろに並ぶ。"""
    metas = merge_speaker_metas(
        [
            _gen_speaker(SPEAKER_UUID_1, [(0, "ノーマル")]),
            _gen_speaker(SPEAKER_UUID_2, [(1, "ノーマル")], order=0),
        ]
    )
    assert [speaker.speaker_uuid for speaker in metas] == [
        SPEAKER_UUID_2,
        SPEAKER_UUID_1,
    ]


def test_merge_style_order() -> None:
    speaker = SpeakerMeta(
        name="dummy",
        styles=(
            StyleMeta(id=0, name="ノーマル"),
            StyleMeta(id=1, name="あまあま", order=1),
            StyleMeta(id=2, name="ツンツン", order=0),
        ),
        version="0.0.1",
        speaker_uuid=SPEAKER_UUID_1,
    )
    metas = merge_speaker_metas([speaker])
    assert [style.id for style in metas[0].styles] == [2, 1, 0]


def test_merge_empty() -> None:
    assert merge_speaker_metas([]) == []


def test_style_type_default() -> None:
    assert StyleMeta(id=0, name="ノーマル").type == "talk"
