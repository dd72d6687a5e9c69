"""NJD Featureの処理"""

from dataclasses import dataclass
from typing import Any, Self

from ..utility.text_utility import count_mora, replace_zenkaku_alphabets_with_hankaku
from .katakana_english import convert_english_to_katakana, is_hankaku_alphabet


@dataclass
class NjdFeature:
    """NJD の Feature。形態素 1 つ分の読みとアクセントを表す。"""

    string: str
    pos: str
    pos_group1: str
    pos_group2: str
    pos_group3: str
    ctype: str
    cform: str
    orig: str
    read: str
    pron: str
    acc: int
    mora_size: int
    chain_rule: str
    chain_flag: int

    @classmethod
    def from_dict(cls, feature: dict[str, Any]) -> Self:
        """`pyopenjtalk` の `run_frontend` が返す辞書から生成する"""
        return cls(**feature)

    @classmethod
    def from_english_kana(cls, english: str, kana: str) -> Self:
        """英語のカタカナ読みから固有名詞として生成する"""
        return cls(
            string=english,
            pos="名詞",
            pos_group1="固有名詞",
            pos_group2="一般",
            pos_group3="*",
            ctype="*",
            cform="*",
            orig=english,
            read=kana,
            pron=kana,
            acc=1,
            mora_size=count_mora(kana),
            chain_rule="*",
            chain_flag=-1,
        )

    def is_unknown_reading_word(self) -> bool:
        """読みが不明な単語であるか否かを判定する。"""
        # NOTE: MeCab は未知語の読みを空とし、NJD は空の読みを補完して品詞をフィラーとして扱う
        return self.pos == "フィラー" and self.chain_rule == "*"

    def is_pau_space(self) -> bool:
        """pau として扱われる全角スペースか否かを判定する"""
        return self.string == "　" and self.pron == "、"

    def is_alphabet(self) -> bool:
        return is_hankaku_alphabet(replace_zenkaku_alphabets_with_hankaku(self.string))


def apply_katakana_english(features: list[NjdFeature]) -> list[NjdFeature]:
    """
    読みが不明な英単語へカタカナ読みを与えた、features のコピーを返す。

    英単語間のスペースは pau として扱われて読みが不自然になるため取り除く。
    """
    converted: list[NjdFeature] = []
    for feature in features:
        string = replace_zenkaku_alphabets_with_hankaku(feature.string)
        if feature.is_unknown_reading_word() and is_hankaku_alphabet(string):
            kana = convert_english_to_katakana(string)
            converted.append(NjdFeature.from_english_kana(feature.string, kana))
        else:
            converted.append(feature)

    return [
        feature
        for i, feature in enumerate(converted)
        if not (
            feature.is_pau_space()
            and 0 < i < len(converted) - 1
            and converted[i - 1].is_alphabet()
            and converted[i + 1].is_alphabet()
        )
    ]
