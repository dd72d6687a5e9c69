"""
「AquesTalk 風記法」テキストとアクセント句系列の相互変換

記法の規則は以下の通り。

- 読みはカタカナのみ
- `/` で区切り
- `、` で無音付き区切り
- `_` で無声化
- `'` でアクセント位置
- `？` で疑問文
- アクセント位置はちょうど１つ
"""

from typing import Any

from ..error import ErrorKind, InvalidInputError
from .model import AccentPhrase, Mora, ParseKanaErrorCode
from .mora_mapping import mora_kana_to_mora_phonemes
from .phoneme import UNVOICED_VOWELS, VOICED_VOWELS

_LOOP_LIMIT = 300

# 記法の特殊文字
_UNVOICE_SYMBOL = "_"  # 無声化
_ACCENT_SYMBOL = "'"  # アクセント位置
_NOPAUSE_DELIMITER = "/"  # ポーズ無しアクセント句境界
_PAUSE_DELIMITER = "、"  # ポーズ有りアクセント句境界
_WIDE_INTERROGATION_MARK = "？"  # 疑問形


def _build_kana_table() -> dict[str, Mora]:
    """記法の読み (無声化表記を含む) からモーラ (音素長・音高 0 初期化) への表を作る。"""
    table: dict[str, Mora] = {}
    for kana, (consonant, vowel) in mora_kana_to_mora_phonemes.items():
        table[kana] = Mora.placeholder(kana, consonant, vowel)
        if vowel in VOICED_VOWELS:
            # 例: "_ホ" -> "hO"
            table[_UNVOICE_SYMBOL + kana] = Mora.placeholder(
                kana, consonant, vowel.upper()
            )
    return table


_kana2mora = _build_kana_table()


class ParseKanaError(InvalidInputError):
    """AquesTalk 風記法テキストの解析エラー"""

    kind = ErrorKind.PARSE_KANA

    def __init__(self, errcode: ParseKanaErrorCode, **kwargs: Any) -> None:
        self.errcode = errcode
        self.errname = errcode.name
        self.text = errcode.value.format(**kwargs)
        super().__init__(self.text, **kwargs)


def _text_to_accent_phrase(phrase: str) -> AccentPhrase:
    """
    単一アクセント句に相当する記法テキストからアクセント句を生成する。
    最長一致でモーラへ分割するため、入力長 N に対し計算量は O(N^2)。
    ポーズと疑問形はこの関数では扱わない。
    """
    accent_index: int | None = None
    moras: list[Mora] = []

    base_index = 0  # 未処理部分の先頭
    loop_count = 0
    while base_index < len(phrase):
        loop_count += 1
        if loop_count > _LOOP_LIMIT:
            raise ParseKanaError(ParseKanaErrorCode.INFINITE_LOOP)

        if phrase[base_index] == _ACCENT_SYMBOL:
            if len(moras) == 0:
                raise ParseKanaError(ParseKanaErrorCode.ACCENT_TOP, text=phrase)
            if accent_index is not None:
                raise ParseKanaError(ParseKanaErrorCode.ACCENT_TWICE, text=phrase)
            accent_index = len(moras)
            base_index += 1
            continue

        # 次のアクセント記号までの範囲で最長一致する読みを探す
        # 例: "キャ" -> "キ" 検出 -> "キャ" 検出/上書き
        stack = ""
        matched: str | None = None
        for char in phrase[base_index:]:
            if char == _ACCENT_SYMBOL:
                break
            stack += char
            if stack in _kana2mora:
                matched = stack
        if matched is None:
            raise ParseKanaError(ParseKanaErrorCode.UNKNOWN_TEXT, text=stack)
        moras.append(_kana2mora[matched].model_copy(deep=True))
        base_index += len(matched)

    if accent_index is None:
        raise ParseKanaError(ParseKanaErrorCode.ACCENT_NOTFOUND, text=phrase)
    return AccentPhrase(moras=moras, accent=accent_index, pause_mora=None)


def parse_kana(text: str) -> list[AccentPhrase]:
    """
    AquesTalk 風記法テキストからアクセント句系列を生成する。

    Parameters
    ----------
    text : str
        AquesTalk 風記法テキスト
    Returns
    -------
    parsed_results : list[AccentPhrase]
        アクセント句（音素長・モーラ音高 0 初期化）系列
    Raises
    ------
    ParseKanaError
        記法として不正なテキストが与えられた
    """
    if len(text) == 0:
        raise ParseKanaError(ParseKanaErrorCode.EMPTY_PHRASE, position=1)

    parsed_results: list[AccentPhrase] = []
    phrase_base = 0
    for i in range(len(text) + 1):
        # アクセント句境界（`/`か`、`）の出現までインデックス進展
        if i < len(text) and text[i] not in (_PAUSE_DELIMITER, _NOPAUSE_DELIMITER):
            continue

        phrase = text[phrase_base:i]
        if len(phrase) == 0:
            raise ParseKanaError(
                ParseKanaErrorCode.EMPTY_PHRASE, position=len(parsed_results) + 1
            )
        phrase_base = i + 1

        # 疑問形はモーラでなくアクセント句の属性で表す
        is_interrogative = _WIDE_INTERROGATION_MARK in phrase
        if is_interrogative:
            if _WIDE_INTERROGATION_MARK in phrase[:-1]:
                raise ParseKanaError(
                    ParseKanaErrorCode.INTERROGATION_MARK_NOT_AT_END, text=phrase
                )
            phrase = phrase[:-1]

        accent_phrase = _text_to_accent_phrase(phrase)
        if i < len(text) and text[i] == _PAUSE_DELIMITER:
            accent_phrase.pause_mora = Mora.pause()
        accent_phrase.is_interrogative = is_interrogative
        parsed_results.append(accent_phrase)

    return parsed_results


def create_kana(accent_phrases: list[AccentPhrase]) -> str:
    """アクセント句系列から AquesTalk 風記法テキストを生成する。"""
    text = ""
    for i, phrase in enumerate(accent_phrases):
        for j, mora in enumerate(phrase.moras):
            if mora.vowel in UNVOICED_VOWELS:
                text += _UNVOICE_SYMBOL
            text += mora.text
            if j + 1 == phrase.accent:
                text += _ACCENT_SYMBOL

        if phrase.is_interrogative:
            text += _WIDE_INTERROGATION_MARK

        if i < len(accent_phrases) - 1:
            if phrase.pause_mora is None:
                text += _NOPAUSE_DELIMITER
            else:
                text += _PAUSE_DELIMITER
    return text
