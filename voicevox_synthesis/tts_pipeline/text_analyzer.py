"""フルコンテキストラベルからアクセント句系列への変換"""

import re
from dataclasses import dataclass
from itertools import groupby
from typing import Protocol, Self, TypeAlias

from ..error import InvalidInputError
from .model import AccentPhrase, Mora
from .mora_mapping import mora_phonemes_to_mora_kana
from .phoneme import UNVOICED_VOWELS, Consonant, Vowel

# NOTE: アクセント句内のモーラ番号の上限。これ以降のモーラはラベルから区切れない。
_MAX_MORA_INDEX = 49

# OpenJTalk が出力する音素の一覧。`xx` は OpenJTalk の unknown 音素。
_OJT_VOWELS = frozenset(
    ["A", "E", "I", "N", "O", "U", "a", "cl", "e", "i", "o", "pau", "sil", "u"]
)
_OJT_CONSONANTS = frozenset(Consonant.__args__)
_OJT_UNKNOWN = "xx"

# フルコンテキストラベルの書式は HTS-2.3 Japanese の data/lab_format.pdf を参照。
# 利用する属性: p3 音素 / a2 モーラ番号 / f1 モーラ数 / f2 アクセント位置 / f3 疑問形 /
# f5 アクセント句番号 / i3 BreathGroup 番号
_LABEL_PATTERN = re.compile(
    r"^(?P<p1>.+?)\^(?P<p2>.+?)\-(?P<p3>.+?)\+(?P<p4>.+?)\=(?P<p5>.+?)"
    r"/A\:(?P<a1>.+?)\+(?P<a2>.+?)\+(?P<a3>.+?)"
    r"/B\:(?P<b1>.+?)\-(?P<b2>.+?)\_(?P<b3>.+?)"
    r"/C\:(?P<c1>.+?)\_(?P<c2>.+?)\+(?P<c3>.+?)"
    r"/D\:(?P<d1>.+?)\+(?P<d2>.+?)\_(?P<d3>.+?)"
    r"/E\:(?P<e1>.+?)\_(?P<e2>.+?)\!(?P<e3>.+?)\_(?P<e4>.+?)\-(?P<e5>.+?)"
    r"/F\:(?P<f1>.+?)\_(?P<f2>.+?)\#(?P<f3>.+?)\_(?P<f4>.+?)\@(?P<f5>.+?)\_(?P<f6>.+?)\|(?P<f7>.+?)\_(?P<f8>.+?)"
    r"/G\:(?P<g1>.+?)\_(?P<g2>.+?)\%(?P<g3>.+?)\_(?P<g4>.+?)\_(?P<g5>.+?)"
    r"/H\:(?P<h1>.+?)\_(?P<h2>.+?)"
    r"/I\:(?P<i1>.+?)\-(?P<i2>.+?)\@(?P<i3>.+?)\+(?P<i4>.+?)\&(?P<i5>.+?)\-(?P<i6>.+?)\|(?P<i7>.+?)\+(?P<i8>.+?)"
    r"/J\:(?P<j1>.+?)\_(?P<j2>.+?)"
    r"/K\:(?P<k1>.+?)\+(?P<k2>.+?)\-(?P<k3>.+?)$"
)


class TextAnalyzer(Protocol):
    """テキストをフルコンテキストラベル系列へ変換できるもの"""

    def extract_full_context_label(self, text: str) -> list[str]: ...


class UnsupportedPhonemeError(InvalidInputError):
    """フルコンテキストラベルに処理できない音素が含まれている。"""

    def __init__(self, phoneme: str) -> None:
        if phoneme == _OJT_UNKNOWN:
            msg = "OpenJTalk の unknown 音素 `xx` は非対応です。"
        else:
            msg = f"OpenJTalk で想定されていない音素 `{phoneme}` が生成されたため処理できません。"
        super().__init__(msg, phoneme=phoneme)


def _optional_int(value: str) -> int | None:
    # pau と sil はアクセント句に属さないため `xx` になる
    return None if value == "xx" else int(value)


@dataclass(frozen=True)
class _Label:
    """フルコンテキストラベルのうち、アクセント句の生成に使う部分。"""

    phoneme: str  # 音素。子音か母音 (無音含む)。
    is_pause: bool  # 無音 (silent/pause) か否か。
    mora_index: int | None  # アクセント句内におけるモーラのインデックス (1 ~ 49)。
    accent_position: int | None  # アクセント句内におけるアクセントの位置 (1 ~ 49)。
    is_interrogative: bool  # 疑問形か否か。
    accent_phrase_index: str  # BreathGroup内におけるアクセント句のインデックス。
    breath_group_index: str  # BreathGroupのインデックス。

    @classmethod
    def from_feature(cls, feature: str) -> Self:
        """フルコンテキストラベル 1 行から生成する"""
        result = _LABEL_PATTERN.search(feature)
        if result is None:
            raise ValueError(feature)
        contexts = result.groupdict()

        phoneme = contexts["p3"]
        if phoneme not in _OJT_VOWELS and phoneme not in _OJT_CONSONANTS:
            raise UnsupportedPhonemeError(phoneme)

        return cls(
            phoneme=phoneme,
            is_pause=contexts["f1"] == "xx",
            mora_index=_optional_int(contexts["a2"]),
            accent_position=_optional_int(contexts["f2"]),
            is_interrogative=contexts["f3"] == "1",
            accent_phrase_index=contexts["f5"],
            breath_group_index=contexts["i3"],
        )


def mora_to_text(mora_phonemes: str) -> str:
    """モーラ相当の音素文字系列を日本語カタカナ文へ変換する（例: 'hO' -> 'ホ')"""
    if mora_phonemes[-1:] in UNVOICED_VOWELS:
        # 無声化母音を小文字に
        mora_phonemes = mora_phonemes[:-1] + mora_phonemes[-1].lower()
    return mora_phonemes_to_mora_kana.get(mora_phonemes, mora_phonemes)


def _generate_mora(consonant: _Label | None, vowel: _Label) -> Mora:
    consonant_phoneme = consonant.phoneme if consonant is not None else None
    vowel_phoneme: Vowel = vowel.phoneme  # type: ignore[assignment]
    return Mora.placeholder(
        mora_to_text((consonant_phoneme or "") + vowel_phoneme),
        consonant_phoneme,
        vowel_phoneme,
    )


def _generate_accent_phrase(labels: list[_Label], with_pau: bool) -> AccentPhrase:
    """ラベル系列とポーズの有無からアクセント句を生成する。"""
    if len(labels) == 0:
        raise ValueError("ラベルが無いためアクセント句を生成できません。")

    moras: list[Mora] = []
    for mora_index, grouped in groupby(labels, lambda label: label.mora_index):
        # モーラ番号の上限以降はラベルのモーラ番号を区切りに使えないため打ち切る
        if mora_index is not None and mora_index >= _MAX_MORA_INDEX:
            break

        mora_labels = list(grouped)
        match len(mora_labels):
            case 1:
                moras.append(_generate_mora(None, mora_labels[0]))
            case 2:
                moras.append(_generate_mora(mora_labels[0], mora_labels[1]))
            case _:
                raise ValueError(mora_labels)

    accent = labels[0].accent_position
    if accent is None:
        raise ValueError("アクセント位置が指定されていません。")
    # アクセント位置がモーラ数を超える場合は末尾に丸める
    accent = min(accent, len(moras))

    return AccentPhrase(
        moras=moras,
        accent=accent,
        pause_mora=Mora.pause() if with_pau else None,
        is_interrogative=labels[-1].is_interrogative,
    )


AccentPhraseLabels: TypeAlias = list[_Label]
PauseGroup: TypeAlias = list[AccentPhraseLabels]


def full_context_labels_to_accent_phrases(
    full_context_labels: list[str],
) -> list[AccentPhrase]:
    """
    フルコンテキストラベルからアクセント句系列（音素長・音高 0 初期化）を生成する。

    無音で区切られた区間ごとに、BreathGroup とアクセント句の番号でラベルを束ねる。
    区間の最後のアクセント句には、最終区間を除いてポーズモーラを付ける。
    """
    all_labels = map(_Label.from_feature, full_context_labels)

    pause_groups: list[PauseGroup] = []
    for is_pause, labels in groupby(all_labels, lambda label: label.is_pause):
        if is_pause:
            continue
        phrase_groups = groupby(
            labels,
            lambda label: (label.breath_group_index, label.accent_phrase_index),
        )
        pause_groups.append([list(group) for _, group in phrase_groups])

    accent_phrases: list[AccentPhrase] = []
    for i_group, pause_group in enumerate(pause_groups):
        is_last_group = i_group == len(pause_groups) - 1
        for i_phrase, labels in enumerate(pause_group):
            with_pau = i_phrase == len(pause_group) - 1 and not is_last_group
            accent_phrases.append(_generate_accent_phrase(labels, with_pau))
    return accent_phrases
