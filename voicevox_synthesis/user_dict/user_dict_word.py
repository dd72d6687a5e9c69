"""ユーザー辞書を構成する言葉（単語）関連の処理"""

from dataclasses import dataclass

from pydantic import ValidationError

from ..error import InvalidWordError
from .model import (
    USER_DICT_DEFAULT_PRIORITY,
    USER_DICT_MAX_PRIORITY,
    USER_DICT_MIN_PRIORITY,
    UserDictWord,
    WordTypes,
    parse_word_type,
)


@dataclass(frozen=True)
class _PartOfSpeechDetail:
    """品詞ごとの情報"""

    part_of_speech: str  # 品詞
    part_of_speech_detail_1: str  # 品詞細分類1
    part_of_speech_detail_2: str  # 品詞細分類2
    part_of_speech_detail_3: str  # 品詞細分類3
    context_id: int  # 辞書の左・右文脈ID。mecab-naist-jdic の left-id.def に対応
    cost_candidates: tuple[int, ...]  # 優先度 10 ~ 0 に対応するコスト


part_of_speech_data: dict[WordTypes, _PartOfSpeechDetail] = {
    WordTypes.PROPER_NOUN: _PartOfSpeechDetail(
        "名詞", "固有名詞", "一般", "*", 1348,
        (-988, 3488, 4768, 6048, 7328, 8609, 8734, 8859, 8984, 9110, 14176),
    ),
    WordTypes.COMMON_NOUN: _PartOfSpeechDetail(
        "名詞", "一般", "*", "*", 1345,
        (-4445, 49, 1473, 2897, 4321, 5746, 6554, 7362, 8170, 8979, 15001),
    ),
    WordTypes.VERB: _PartOfSpeechDetail(
        "動詞", "自立", "*", "*", 642,
        (3100, 6160, 6360, 6561, 6761, 6962, 7414, 7866, 8318, 8771, 13433),
    ),
    WordTypes.ADJECTIVE: _PartOfSpeechDetail(
        "形容詞", "自立", "*", "*", 20,
        (1527, 3266, 3561, 3857, 4153, 4449, 5149, 5849, 6549, 7250, 10001),
    ),
    WordTypes.SUFFIX: _PartOfSpeechDetail(
        "名詞", "接尾", "一般", "*", 1358,
        (4399, 5373, 6041, 6710, 7378, 8047, 9440, 10834, 12228, 13622, 15847),
    ),
}  # fmt: skip


def priority2cost(word_type: WordTypes, priority: int) -> int:
    """優先度を MeCab の単語コストへ変換する。優先度が高いほどコストは小さい。"""
    assert USER_DICT_MIN_PRIORITY <= priority <= USER_DICT_MAX_PRIORITY
    cost_candidates = part_of_speech_data[word_type].cost_candidates
    return cost_candidates[USER_DICT_MAX_PRIORITY - priority]


def create_word(
    surface: str,
    pronunciation: str,
    accent_type: int = 0,
    word_type: WordTypes | str = WordTypes.COMMON_NOUN,
    priority: int = USER_DICT_DEFAULT_PRIORITY,
) -> UserDictWord:
    """
    単語オブジェクトを生成する。

    Raises
    ------
    InvalidWordError
        単語の種類が不明、あるいは表層形・発音・アクセント型・優先度が不正
    """
    if not isinstance(word_type, WordTypes):
        word_type = parse_word_type(word_type)
    try:
        return UserDictWord(
            surface=surface,
            pronunciation=pronunciation,
            accent_type=accent_type,
            word_type=word_type,
            priority=priority,
        )
    except ValidationError as e:
        messages = "; ".join(str(err["msg"]) for err in e.errors())
        raise InvalidWordError(f"無効な単語です: {messages}") from e


def to_mecab_line(word: UserDictWord) -> str:
    """単語を MeCab 辞書の CSV 1 行へ変換する。"""
    pos = part_of_speech_data[word.word_type]
    return ",".join(
        [
            word.surface,
            str(pos.context_id),
            str(pos.context_id),
            str(priority2cost(word.word_type, word.priority)),
            pos.part_of_speech,
            pos.part_of_speech_detail_1,
            pos.part_of_speech_detail_2,
            pos.part_of_speech_detail_3,
            "*",  # 活用型
            "*",  # 活用形
            "*",  # 原形
            word.pronunciation,  # 読み
            word.pronunciation,  # 発音
            f"{word.accent_type}/{word.mora_count}",
            "*",  # アクセント結合規則
        ]
    )
