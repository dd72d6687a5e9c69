"""AquesTalk 風記法の変換機能の単体テスト。"""

import pytest

from voicevox_synthesis.error import InvalidInputError
from voicevox_synthesis.tts_pipeline.kana_converter import (
    ParseKanaError,
    create_kana,
    parse_kana,
)
from voicevox_synthesis.tts_pipeline.model import (
    AccentPhrase,
    Mora,
    ParseKanaErrorCode,
)


def _gen_phrase(
    moras: list[tuple[str, str | None, str]],
    accent: int,
    with_pause: bool = False,
    is_interrogative: bool = False,
) -> AccentPhrase:
    return AccentPhrase(
        moras=[Mora.placeholder(text, c, v) for text, c, v in moras],
        accent=accent,
        pause_mora=Mora.pause() if with_pause else None,
        is_interrogative=is_interrogative,
    )


def test_parse_kana_single_phrase() -> None:
    """アクセント位置はアクセント記号より前のモーラ数となる。"""
    assert parse_kana("ミナミ'") == [
        _gen_phrase([("ミ", "m", "i"), ("ナ", "n", "a"), ("ミ", "m", "i")], 3)
    ]
    assert parse_kana("ミ'ナミ") == [
        _gen_phrase([("ミ", "m", "i"), ("ナ", "n", "a"), ("ミ", "m", "i")], 1)
    ]


def test_parse_kana_delimiters() -> None:
    """`、` 区切りはポーズ有り、`/` 区切りはポーズ無しのアクセント句境界となる。"""
    accent_phrases = parse_kana("ア'、イ'/ウ'")

    assert len(accent_phrases) == 3
    assert accent_phrases[0].pause_mora == Mora.pause()
    assert accent_phrases[1].pause_mora is None
    assert accent_phrases[2].pause_mora is None


def test_parse_kana_unvoice() -> None:
    """`_` が付いたモーラの母音は無声化される。"""
    accent_phrases = parse_kana("デ'_ス")
    mora = accent_phrases[0].moras[1]
    assert mora.text == "ス"
    assert mora.consonant == "s"
    assert mora.vowel == "U"


def test_parse_kana_longest_match() -> None:
    """読みは最長一致でモーラへ分割される。"""
    accent_phrases = parse_kana("キャ'ット")
    assert [(m.text, m.consonant, m.vowel) for m in accent_phrases[0].moras] == [
        ("キャ", "ky", "a"),
        ("ッ", None, "cl"),
        ("ト", "t", "o"),
    ]


def test_parse_kana_interrogative() -> None:
    """句末の `？` はモーラを増やさずにアクセント句を疑問形にする。"""
    accent_phrases = parse_kana("ア'/イ'？")
    assert not accent_phrases[0].is_interrogative
    assert accent_phrases[1].is_interrogative
    assert len(accent_phrases[1].moras) == 1


def test_parse_kana_placeholder_values() -> None:
    """生成されるモーラの音素長・音高は 0 で初期化される。"""
    mora = parse_kana("カ'")[0].moras[0]
    assert mora.consonant_length == 0
    assert mora.vowel_length == 0
    assert mora.pitch == 0


@pytest.mark.parametrize(
    ("text", "true_errcode"),
    [
        ("", ParseKanaErrorCode.EMPTY_PHRASE),
        ("'ア", ParseKanaErrorCode.ACCENT_TOP),
        ("ア'イ'", ParseKanaErrorCode.ACCENT_TWICE),
        ("アイ", ParseKanaErrorCode.ACCENT_NOTFOUND),
        ("アX'", ParseKanaErrorCode.UNKNOWN_TEXT),
        ("ア？イ'", ParseKanaErrorCode.INTERROGATION_MARK_NOT_AT_END),
        ("ア'//イ'", ParseKanaErrorCode.EMPTY_PHRASE),
        ("ア'、", ParseKanaErrorCode.EMPTY_PHRASE),
    ],
)
def test_parse_kana_error(text: str, true_errcode: ParseKanaErrorCode) -> None:
    with pytest.raises(ParseKanaError) as e:
        parse_kana(text)
    assert e.value.errcode == true_errcode
    assert e.value.errname == true_errcode.name


def test_parse_kana_error_message() -> None:
    """エラーには位置や問題のテキストが含まれる。"""
    with pytest.raises(ParseKanaError) as e:
        parse_kana("ア'//イ'")
    assert e.value.text == "2番目のアクセント句が空白です"
    assert e.value.kwargs == {"position": 2}

    with pytest.raises(ParseKanaError) as e:
        parse_kana("アX'")
    assert e.value.text == "判別できない読み仮名があります: X"


def test_parse_kana_error_is_invalid_input() -> None:
    with pytest.raises(InvalidInputError):
        parse_kana("アイ")


def test_parse_kana_infinite_loop_guard() -> None:
    """極端に長いアクセント句は処理を打ち切る。"""
    with pytest.raises(ParseKanaError) as e:
        parse_kana("ア" * 400 + "'")
    assert e.value.errcode == ParseKanaErrorCode.INFINITE_LOOP


def test_create_kana() -> None:
    accent_phrases = [
        _gen_phrase(
            [("コ", "k", "o"), ("ン", None, "N"), ("ニ", "n", "i")], 3, with_pause=True
        ),
        _gen_phrase([("ヒ", "h", "i"), ("ホ", "h", "o")], 1),
        _gen_phrase([("デ", "d", "e"), ("ス", "s", "U")], 1, is_interrogative=True),
    ]
    assert create_kana(accent_phrases) == "コンニ'、ヒ'ホ/デ'_ス？"


def test_create_kana_empty() -> None:
    assert create_kana([]) == ""


@pytest.mark.parametrize(
    "kana",
    [
        "コンニチワ'、ヒ'ホデ_ス",
        "ア'/イ'？",
        "キャ'ット、ヴォ'イス/_シ'",
    ],
)
def test_parse_kana_and_create_kana(kana: str) -> None:
    """解析したアクセント句系列から記法を生成すると元の記法に戻る。"""
    assert create_kana(parse_kana(kana)) == kana
