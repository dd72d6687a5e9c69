"""推論セッションのアダプター"""

import numpy as np
from numpy.typing import NDArray

from ..error import RunModelError
from .runtime import InferenceSessionSet


def _speaker_id(inner_voice_id: int) -> NDArray[np.int64]:
    return np.array(inner_voice_id, dtype=np.int64).reshape(-1)


class InferenceAdapter:
    """
    推論セッションのアダプター。

    「推論モデルの仕様に従う前後無音の付加」「系列長・データ型の変換」「推論失敗の `RunModelError` への変換」を提供する。
    """

    def __init__(self, sessions: InferenceSessionSet, sampling_rate: int) -> None:
        self._sessions = sessions
        self.sampling_rate = sampling_rate

    def predict_duration(
        self, phoneme_ids: NDArray[np.int64], inner_voice_id: int
    ) -> NDArray[np.float32]:
        """音素 ID 系列から音素長系列を生成する。"""
        # 前後無音を付加する
        padded = np.r_[0, phoneme_ids, 0].astype(np.int64)
        try:
            phoneme_length = self._sessions.predict_duration(
                padded, _speaker_id(inner_voice_id)
            )
        except Exception as e:
            raise RunModelError(f"音素長の推論に失敗しました: {e}") from e
        # 前後無音に相当する領域を破棄する
        return phoneme_length[1:-1]

    def predict_intonation(
        self,
        vowel_ids: NDArray[np.int64],
        consonant_ids: NDArray[np.int64],
        start_accent_list: NDArray[np.int64],
        end_accent_list: NDArray[np.int64],
        start_accent_phrase_list: NDArray[np.int64],
        end_accent_phrase_list: NDArray[np.int64],
        inner_voice_id: int,
    ) -> NDArray[np.float32]:
        """モーラ系列の特徴量からモーラ音高系列を生成する。"""
        # 前後無音を付加する。子音無しは -1 で表す。
        vowel_ids = np.r_[0, vowel_ids, 0].astype(np.int64)
        consonant_ids = np.r_[-1, consonant_ids, -1].astype(np.int64)
        start_accent_list = np.r_[0, start_accent_list, 0].astype(np.int64)
        end_accent_list = np.r_[0, end_accent_list, 0].astype(np.int64)
        start_accent_phrase_list = np.r_[0, start_accent_phrase_list, 0].astype(
            np.int64
        )
        end_accent_phrase_list = np.r_[0, end_accent_phrase_list, 0].astype(np.int64)

        try:
            f0 = self._sessions.predict_intonation(
                len(vowel_ids),
                vowel_ids,
                consonant_ids,
                start_accent_list,
                end_accent_list,
                start_accent_phrase_list,
                end_accent_phrase_list,
                _speaker_id(inner_voice_id),
            )
        except Exception as e:
            raise RunModelError(f"音高の推論に失敗しました: {e}") from e
        # 前後無音に相当する領域を破棄する
        return f0[1:-1]

    def decode(
        self,
        phoneme: NDArray[np.float32],
        f0: NDArray[np.float32],
        inner_voice_id: int,
    ) -> NDArray[np.float32]:
        """フレームごとの音素 onehot (shape=(フレーム長, 音素数)) と音高から音声波形を生成する。"""
        try:
            return self._sessions.decode(
                f0.astype(np.float32)[:, np.newaxis],
                phoneme.astype(np.float32),
                _speaker_id(inner_voice_id),
            )
        except Exception as e:
            raise RunModelError(f"音声波形の生成に失敗しました: {e}") from e
