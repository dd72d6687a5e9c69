"""音素と音素 ID"""

from typing import Literal

import numpy as np
from numpy.typing import NDArray

from ..error import InvalidInputError

# NOTE: 母音は a/i/u/e/o の有声・無声、無音 pau、撥音 N ("ン")、促音 cl ("ッ") を含む
BaseVowel = Literal["pau", "N", "a", "cl", "e", "i", "o", "u"]
UnvoicedVowel = Literal["A", "E", "I", "O", "U"]
Vowel = BaseVowel | UnvoicedVowel

Consonant = Literal[
    "b", "by", "ch", "d", "dy", "f", "g", "gw", "gy", "h", "hy", "j", "k", "kw", "ky",
    "m", "my", "n", "ny", "p", "py", "r", "ry", "s", "sh", "t", "ts", "ty", "v", "w",
    "y", "z",
]  # fmt: skip

# 音素 ID はこのタプル内の位置。推論モデルの入力と一致させる必要があるため順序を変えてはならない。
PHONEME_LIST: tuple[str, ...] = (
    "pau", "A", "E", "I", "N", "O", "U", "a", "b", "by",
    "ch", "cl", "d", "dy", "e", "f", "g", "gw", "gy", "h",
    "hy", "i", "j", "k", "kw", "ky", "m", "my", "n", "ny",
    "o", "p", "py", "r", "ry", "s", "sh", "t", "ts", "ty",
    "u", "v", "w", "y", "z",
)  # fmt: skip
NUM_PHONEME = len(PHONEME_LIST)

_PHONEME_TO_ID = {phoneme: i for i, phoneme in enumerate(PHONEME_LIST)}

UNVOICED_VOWELS: frozenset[str] = frozenset(["A", "E", "I", "O", "U"])
VOICED_VOWELS: frozenset[str] = frozenset(["a", "e", "i", "o", "u"])
_UNVOICED_MORA_TAIL_PHONEMES = UNVOICED_VOWELS | {"cl", "pau"}
_MORA_TAIL_PHONEMES = VOICED_VOWELS | {"N"} | _UNVOICED_MORA_TAIL_PHONEMES


class Phoneme:
    """音素"""

    def __init__(self, phoneme: str):
        # 無音をポーズに変換
        if "sil" in phoneme:
            phoneme = "pau"
        if phoneme not in _PHONEME_TO_ID:
            raise InvalidInputError(f"未知の音素です: {phoneme}", phoneme=phoneme)
        self._phoneme = phoneme

    def __repr__(self) -> str:
        return f"Phoneme({self._phoneme!r})"

    @property
    def phoneme(self) -> str:
        return self._phoneme

    @property
    def id(self) -> int:
        """音素ID (音素リスト内でのindex) を取得する"""
        return _PHONEME_TO_ID[self._phoneme]

    @property
    def onehot(self) -> NDArray[np.float32]:
        """音素onehotベクトルを取得する"""
        vec = np.zeros(NUM_PHONEME, dtype=np.float32)
        vec[self.id] = 1.0
        return vec

    def is_mora_tail(self) -> bool:
        """この音素はモーラ末尾音素（母音・撥音・促音・無音）である"""
        return self._phoneme in _MORA_TAIL_PHONEMES

    def is_unvoiced_mora_tail(self) -> bool:
        """この音素は無声のモーラ末尾音素（無声母音・促音・無音）である"""
        return self._phoneme in _UNVOICED_MORA_TAIL_PHONEMES
