import numpy as np
import pytest

from voicevox_synthesis.error import InvalidInputError
from voicevox_synthesis.tts_pipeline.phoneme import NUM_PHONEME, PHONEME_LIST, Phoneme

TRUE_NUM_PHONEME = 45

# list_idx      0 1 2 3 4 5  6 7 8 9  10 1 2 3 4 5 6 7 8   9
hello_hiho = "sil k o N n i ch i w a pau h i h o d e s U sil".split()
ojt_hello_hiho = [Phoneme(s) for s in hello_hiho]


def test_unknown_phoneme() -> None:
    """Unknown音素 `xx` を入力不正として拒否する"""
    with pytest.raises(InvalidInputError) as e:
        Phoneme("xx")
    assert e.value.kwargs["phoneme"] == "xx"


def test_const() -> None:
    assert NUM_PHONEME == TRUE_NUM_PHONEME
    assert PHONEME_LIST[1] == "A"
    assert PHONEME_LIST[14] == "e"
    assert PHONEME_LIST[26] == "m"
    assert PHONEME_LIST[38] == "ts"
    assert PHONEME_LIST[41] == "v"


def test_convert() -> None:
    assert Phoneme("sil").phoneme == "pau"


def test_phoneme_id() -> None:
    ojt_str_hello_hiho = " ".join([str(p.id) for p in ojt_hello_hiho])
    assert ojt_str_hello_hiho == "0 23 30 4 28 21 10 21 42 7 0 19 21 19 30 12 14 35 6 0"


def test_onehot() -> None:
    for phoneme in ojt_hello_hiho:
        onehot = phoneme.onehot
        assert onehot.shape == (TRUE_NUM_PHONEME,)
        assert onehot.dtype == np.float32
        assert onehot.sum() == 1
        assert onehot[phoneme.id] == 1


@pytest.mark.parametrize(
    ("phoneme", "true_is_mora_tail", "true_is_unvoiced_mora_tail"),
    [
        ("a", True, False),
        ("N", True, False),
        ("U", True, True),
        ("cl", True, True),
        ("pau", True, True),
        ("k", False, False),
    ],
)
def test_mora_tail(
    phoneme: str, true_is_mora_tail: bool, true_is_unvoiced_mora_tail: bool
) -> None:
    assert Phoneme(phoneme).is_mora_tail() == true_is_mora_tail
    assert Phoneme(phoneme).is_unvoiced_mora_tail() == true_is_unvoiced_mora_tail
