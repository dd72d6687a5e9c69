"""
音声合成エンジンが送出するエラー

エラーは以下の区分に属する。区分ごとに呼び出し側での扱いが決まる。

- 入力不正 (`InvalidInputError`): 状態を変更する前に拒否される。
- 未検出 (`NotFoundError`): 指定されたスタイル・モデル・単語が存在しない。状態は変更されない。
- 競合 (`ConflictError`): 読み込み済みのモデルやスタイルと衝突した。読み込みは全て巻き戻される。
- 読み込み失敗 (`LoadError`): ファイルが読めない、あるいは内容が壊れている。
- 推論失敗 (`InferenceError`): 推論ランタイムの初期化や実行に失敗した。
"""

from enum import Enum
from typing import Any


class ErrorKind(str, Enum):
    """エラーの種類"""

    NOT_LOADED_OPENJTALK_DICT = "NOT_LOADED_OPENJTALK_DICT"
    GPU_SUPPORT = "GPU_SUPPORT"
    INIT_INFERENCE_RUNTIME = "INIT_INFERENCE_RUNTIME"
    OPEN_ZIP_FILE = "OPEN_ZIP_FILE"
    READ_ZIP_ENTRY = "READ_ZIP_ENTRY"
    INVALID_MODEL_DATA = "INVALID_MODEL_DATA"
    MODEL_ALREADY_LOADED = "MODEL_ALREADY_LOADED"
    STYLE_ALREADY_LOADED = "STYLE_ALREADY_LOADED"
    STYLE_NOT_FOUND = "STYLE_NOT_FOUND"
    MODEL_NOT_FOUND = "MODEL_NOT_FOUND"
    RUN_MODEL = "RUN_MODEL"
    EXTRACT_FULL_CONTEXT_LABEL = "EXTRACT_FULL_CONTEXT_LABEL"
    PARSE_KANA = "PARSE_KANA"
    LOAD_USER_DICT = "LOAD_USER_DICT"
    SAVE_USER_DICT = "SAVE_USER_DICT"
    WORD_NOT_FOUND = "WORD_NOT_FOUND"
    USE_USER_DICT = "USE_USER_DICT"
    INVALID_WORD = "INVALID_WORD"
    INVALID_INPUT = "INVALID_INPUT"


class VoicevoxError(Exception):
    """音声合成エンジンのエラーの基底クラス"""

    kind: ErrorKind

    def __init__(self, message: str, **kwargs: Any) -> None:
        super().__init__(message)
        self.message = message
        self.kwargs = kwargs

    def __str__(self) -> str:
        return self.message


class InvalidInputError(VoicevoxError):
    """受け入れ不可能な入力値に起因するエラー"""

    kind = ErrorKind.INVALID_INPUT


class NotFoundError(VoicevoxError):
    """指定された対象が見つからないエラー"""


class ConflictError(VoicevoxError):
    """読み込み済みの対象と衝突するエラー"""


class LoadError(VoicevoxError):
    """ファイルの読み込み・書き込みに失敗したエラー"""


class InferenceError(VoicevoxError):
    """推論ランタイムに起因するエラー"""


class InvalidWordError(InvalidInputError):
    """ユーザー辞書の単語が不正"""

    kind = ErrorKind.INVALID_WORD


class StyleNotFoundError(NotFoundError):
    """スタイル ID に対応するスタイルが読み込まれていない"""

    kind = ErrorKind.STYLE_NOT_FOUND

    def __init__(self, style_id: int) -> None:
        super().__init__(
            f"スタイル {style_id} は現在読み込まれていません", style_id=style_id
        )
        self.style_id = style_id


class ModelNotFoundError(NotFoundError):
    """音声モデル ID に対応するモデルが読み込まれていない"""

    kind = ErrorKind.MODEL_NOT_FOUND

    def __init__(self, model_id: str) -> None:
        super().__init__(
            f"音声モデル {model_id} は読み込まれていません", model_id=model_id
        )
        self.model_id = model_id


class WordNotFoundError(NotFoundError):
    """UUID に対応する単語がユーザー辞書に存在しない"""

    kind = ErrorKind.WORD_NOT_FOUND

    def __init__(self, word_uuid: object) -> None:
        super().__init__(
            f"UUID {word_uuid} に該当するワードが見つかりませんでした",
            word_uuid=str(word_uuid),
        )
        self.word_uuid = word_uuid


class ModelAlreadyLoadedError(ConflictError):
    """同じ ID の音声モデルが既に読み込まれている"""

    kind = ErrorKind.MODEL_ALREADY_LOADED

    def __init__(self, model_id: str) -> None:
        super().__init__(
            f"音声モデル {model_id} は既に読み込まれています", model_id=model_id
        )
        self.model_id = model_id


class StyleAlreadyLoadedError(ConflictError):
    """同じスタイル ID を別の音声モデルが既に提供している"""

    kind = ErrorKind.STYLE_ALREADY_LOADED

    def __init__(self, style_id: int, loaded_model_id: str) -> None:
        super().__init__(
            f"スタイル {style_id} は音声モデル {loaded_model_id} により既に読み込まれています",
            style_id=style_id,
            loaded_model_id=loaded_model_id,
        )
        self.style_id = style_id
        self.loaded_model_id = loaded_model_id


class OpenZipFileError(LoadError):
    """音声モデルファイルを ZIP として開けない"""

    kind = ErrorKind.OPEN_ZIP_FILE


class ReadZipEntryError(LoadError):
    """音声モデルファイル内のエントリを読めない"""

    kind = ErrorKind.READ_ZIP_ENTRY


class InvalidModelDataError(LoadError):
    """音声モデルファイルの内容が不正"""

    kind = ErrorKind.INVALID_MODEL_DATA


class UserDictLoadError(LoadError):
    """ユーザー辞書ファイルの読み込みに失敗した"""

    kind = ErrorKind.LOAD_USER_DICT


class UserDictSaveError(LoadError):
    """ユーザー辞書ファイルの書き込みに失敗した"""

    kind = ErrorKind.SAVE_USER_DICT


class NotLoadedOpenjtalkDictError(LoadError):
    """OpenJTalk のシステム辞書が読み込めない"""

    kind = ErrorKind.NOT_LOADED_OPENJTALK_DICT


class UseUserDictError(LoadError):
    """ユーザー辞書をテキスト解析器へ設定できない"""

    kind = ErrorKind.USE_USER_DICT


class ExtractFullContextLabelError(InferenceError):
    """テキストからフルコンテキストラベルを抽出できない"""

    kind = ErrorKind.EXTRACT_FULL_CONTEXT_LABEL

    def __init__(self, text: str) -> None:
        super().__init__(
            f"入力テキスト「{text}」からフルコンテキストラベルを抽出できませんでした",
            text=text,
        )
        self.text = text


class GpuSupportError(InferenceError):
    """GPU モードが指定されたが、利用可能な GPU が無い"""

    kind = ErrorKind.GPU_SUPPORT


class InitInferenceRuntimeError(InferenceError):
    """推論ランタイムのセッションを生成できない"""

    kind = ErrorKind.INIT_INFERENCE_RUNTIME


class RunModelError(InferenceError):
    """推論の実行に失敗した"""

    kind = ErrorKind.RUN_MODEL
