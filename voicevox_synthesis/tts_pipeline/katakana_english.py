"""読みが不明な英単語をカタカナ読みにする処理"""

import re
from typing import NewType, TypeGuard

import kanalizer

# 半角アルファベット文字列を示す型
HankakuAlphabet = NewType("HankakuAlphabet", str)

# OpenJTalk の njd_set_pronunciation が使うアルファベット→カタカナの対応表
ojt_alphabet_kana_mapping: dict[str, str] = {
    "A": "エー", "B": "ビー", "C": "シー", "D": "ディー", "E": "イー", "F": "エフ",
    "G": "ジー", "H": "エイチ", "I": "アイ", "J": "ジェー", "K": "ケー", "L": "エル",
    "M": "エム", "N": "エヌ", "O": "オー", "P": "ピー", "Q": "キュー", "R": "アール",
    "S": "エス", "T": "ティー", "U": "ユー", "V": "ブイ", "W": "ダブリュー",
    "X": "エックス", "Y": "ワイ", "Z": "ズィー",
}  # fmt: skip

_HANKAKU_ALPHABET_PATTERN = re.compile("[a-zA-Z]+")
# キャメルケース的な単語に対応させるため、大文字で区切る
_WORD_PATTERN = re.compile("[a-zA-Z][a-z]*")


def is_hankaku_alphabet(text: str) -> TypeGuard[HankakuAlphabet]:
    """文字列が半角アルファベットのみで構成されているかを判定する"""
    return _HANKAKU_ALPHABET_PATTERN.fullmatch(text) is not None


def _spell_out(word: str) -> str:
    """
    アルファベット列を文字ごとのカタカナ読みへ変換する。

    Examples
    --------
    >>> _spell_out("VOICE")
    "ブイオーアイシーイー"
    """
    return "".join(ojt_alphabet_kana_mapping[char.upper()] for char in word)


def convert_english_to_katakana(string: HankakuAlphabet) -> str:
    """
    英単語をカタカナ読みに変換する。

    単語ごとに、1 文字の単語と全て大文字の単語は文字ごとに読み、それ以外は英単語として読みを推定する。

    Examples
    --------
    >>> convert_english_to_katakana("VoiceVox")  # "Voice" と "Vox" を英単語として読む
    """
    kana = ""
    for word in _WORD_PATTERN.findall(string):
        if len(word) == 1 or word == word.upper():
            kana += _spell_out(word)
        else:
            kana += kanalizer.convert(word.lower())
    return kana
