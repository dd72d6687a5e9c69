import pytest

from test.utility import HELLO_HIHO_LABELS
from voicevox_synthesis.error import InvalidInputError
from voicevox_synthesis.tts_pipeline.model import AccentPhrase, Mora
from voicevox_synthesis.tts_pipeline.text_analyzer import (
    UnsupportedPhonemeError,
    full_context_labels_to_accent_phrases,
    mora_to_text,
)


@pytest.fixture
def sil_sil() -> list[str]:
    """無音のみで構成されたフルコンテキストラベル。"""
    return [
        # sil (無音)
        "xx^xx-sil+sil=xx/A:xx+xx+xx/B:xx-xx_xx/C:xx_xx+xx/D:09+xx_xx/E:xx_xx!xx_xx-xx"
        + "/F:xx_xx#xx_xx@xx_xx|xx_xx/G:5_5%0_xx_xx/H:xx_xx/I:xx-xx"
        + "@xx+xx&xx-xx|xx+xx/J:1_5/K:2+2-9",
        # sil (無音)
        "xx^sil-sil+xx=xx/A:xx+xx+xx/B:10-7_2/C:xx_xx+xx/D:xx+xx_xx/E:4_1!0_xx-xx"
        + "/F:xx_xx#xx_xx@xx_xx|xx_xx/G:xx_xx%xx_xx_xx/H:1_4/I:xx-xx"
        + "@xx+xx&xx-xx|xx+xx/J:xx_xx/K:2+2-9",
    ]


def _gen_ko_labels(phoneme: str) -> list[str]:
    """「コ」の後ろに指定の音素が続くフルコンテキストラベル。"""
    return [
        ".^.-sil+.=./A:.+xx+./B:.-._./C:._.+./D:.+._./E:._.!._.-./F:xx_xx#xx_.@xx_.|._./G:._.%._._./H:._./I:.-.@xx+.&.-.|.+./J:._./K:.+.-.",
        ".^.-k+.=./A:.+1+./B:.-._./C:._.+./D:.+._./E:._.!._.-./F:2_1#0_.@1_.|._./G:._.%._._./H:._./I:.-.@1+.&.-.|.+./J:._./K:.+.-.",
        ".^.-o+.=./A:.+1+./B:.-._./C:._.+./D:.+._./E:._.!._.-./F:2_1#0_.@1_.|._./G:._.%._._./H:._./I:.-.@1+.&.-.|.+./J:._./K:.+.-.",
        f".^.-{phoneme}+.=./A:.+2+./B:.-._./C:._.+./D:.+._./E:._.!._.-./F:2_1#0_.@1_.|._./G:._.%._._./H:._./I:.-.@1+.&.-.|.+./J:._./K:.+.-.",
        ".^.-sil+.=./A:.+xx+./B:.-._./C:._.+./D:.+._./E:._.!._.-./F:xx_xx#xx_.@xx_.|._./G:._.%._._./H:._./I:.-.@xx+.&.-.|.+./J:._./K:.+.-.",
    ]


def test_voice() -> None:
    assert mora_to_text("a") == "ア"
    assert mora_to_text("ka") == "カ"
    assert mora_to_text("N") == "ン"
    assert mora_to_text("cl") == "ッ"
    assert mora_to_text("gye") == "ギェ"
    assert mora_to_text("wo") == "ウォ"


def test_unvoice() -> None:
    assert mora_to_text("A") == "ア"
    assert mora_to_text("kA") == "カ"
    assert mora_to_text("gyE") == "ギェ"


def test_invalid_mora() -> None:
    """変なモーラが来ても例外を投げない"""
    assert mora_to_text("x") == "x"
    assert mora_to_text("") == ""


def test_full_context_labels_to_accent_phrases_normal() -> None:
    """`full_context_labels_to_accent_phrases()` は正常な日本語文のフルコンテキストラベルをパースする。"""
    # Expects
    true_accent_phrases = [
        AccentPhrase(
            moras=[
                Mora.placeholder("コ", "k", "o"),
                Mora.placeholder("ン", None, "N"),
                Mora.placeholder("ニ", "n", "i"),
                Mora.placeholder("チ", "ch", "i"),
                Mora.placeholder("ワ", "w", "a"),
            ],
            accent=5,
            pause_mora=Mora.pause(),
        ),
        AccentPhrase(
            moras=[
                Mora.placeholder("ヒ", "h", "i"),
                Mora.placeholder("ホ", "h", "o"),
                Mora.placeholder("デ", "d", "e"),
                Mora.placeholder("ス", "s", "U"),
            ],
            accent=1,
            pause_mora=None,
        ),
    ]
    # Outputs
    accent_phrases = full_context_labels_to_accent_phrases(HELLO_HIHO_LABELS)
    # Tests
    assert accent_phrases == true_accent_phrases


def test_full_context_labels_to_accent_phrases_normal_silence(
    sil_sil: list[str],
) -> None:
    """無音のみのフルコンテキストラベルからは空のアクセント句系列が得られる。"""
    assert full_context_labels_to_accent_phrases(sil_sil) == []


def test_full_context_labels_to_accent_phrases_normal_no_label() -> None:
    assert full_context_labels_to_accent_phrases([]) == []


def test_full_context_labels_to_accent_phrases_non_ojt_phoneme() -> None:
    """OpenJTalk で想定されない音素は受け入れない。"""
    with pytest.raises(UnsupportedPhonemeError) as e:
        full_context_labels_to_accent_phrases(_gen_ko_labels("G"))
    assert e.value.kwargs == {"phoneme": "G"}


def test_full_context_labels_to_accent_phrases_unknown_phoneme() -> None:
    """unknown 音素を含むフルコンテキストラベルは受け入れない。"""
    with pytest.raises(InvalidInputError) as e:
        full_context_labels_to_accent_phrases(_gen_ko_labels("xx"))
    assert "unknown" in e.value.message
