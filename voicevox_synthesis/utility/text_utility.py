"""テキスト処理に関するユーティリティ"""

import re
from typing import Final

_HANKAKU_CHARS: Final = "".join(chr(0x21 + i) for i in range(94))
_ZENKAKU_CHARS: Final = "".join(chr(0xFF01 + i) for i in range(94))

_HANKAKU_TO_ZENKAKU_TABLE: Final = str.maketrans(_HANKAKU_CHARS, _ZENKAKU_CHARS)
_ZENKAKU_TO_HANKAKU_TABLE: Final = str.maketrans(_ZENKAKU_CHARS, _HANKAKU_CHARS)


def replace_hankaku_alphabets_with_zenkaku(string: str) -> str:
    """文字列に含まれる半角英数記号を全角で置き換える。"""
    return string.translate(_HANKAKU_TO_ZENKAKU_TABLE)


def replace_zenkaku_alphabets_with_hankaku(string: str) -> str:
    """文字列に含まれる全角英数記号を半角で置き換える。"""
    return string.translate(_ZENKAKU_TO_HANKAKU_TABLE)


# 複数のカタカナが1つのモーラを構成するパターン
_RULE_OTHERS: Final = (
    "[イ][ェ]|[ヴ][ャュョ]|[ウクグトド][ゥ]|[テデ][ィェャュョ]|[クグ][ヮ]"
)
_RULE_LINE_I: Final = "[キシチニヒミリギジヂビピ][ェャュョ]|[キニヒミリギビピ][ィ]"
_RULE_LINE_U: Final = "[クツフヴグ][ァ]|[ウクスツフヴグズ][ィ]|[ウクツフヴグ][ェォ]"
# 1つのカタカナが1つのモーラを構成するパターン
_RULE_ONE_MORA: Final = "[ァ-ヴー]"

_MORA_PATTERN: Final = re.compile(
    f"(?:{_RULE_OTHERS}|{_RULE_LINE_I}|{_RULE_LINE_U}|{_RULE_ONE_MORA})"
)

_KATAKANA_PATTERN: Final = re.compile(r"[ァ-ヴー]+")
_SUTEGANA: Final = "ァィゥェォャュョヮ"  # 「ッ」以外の捨て仮名


def count_mora(string: str) -> int:
    """文字列に含まれるモーラを数える。"""
    return len(_MORA_PATTERN.findall(string))


def validate_pronunciation(pronunciation: str) -> str:
    """
    発音として扱えるカタカナ列か検証する。

    捨て仮名の連続（「ッ」の後ろの「ッ」以外の捨て仮名を含む）と、「ク」「グ」以外に続く「ヮ」は無効。
    「キャット」のように「ッ」の後ろに通常の仮名が続くのは有効。
    """
    if not _KATAKANA_PATTERN.fullmatch(pronunciation):
        raise ValueError("発音は有効なカタカナでなくてはいけません。")
    for i, char in enumerate(pronunciation):
        following = pronunciation[i + 1] if i + 1 < len(pronunciation) else ""
        if char in _SUTEGANA + "ッ" and following != "":
            if following in _SUTEGANA or (char == "ッ" and following == "ッ"):
                raise ValueError("無効な発音です。(捨て仮名の連続)")
        if char == "ヮ" and i != 0 and pronunciation[i - 1] not in ("ク", "グ"):
            raise ValueError("無効な発音です。(「くゎ」「ぐゎ」以外の「ゎ」の使用)")
    return pronunciation
