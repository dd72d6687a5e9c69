"""推論ランタイムのモック"""

from typing import TYPE_CHECKING

import numpy as np
from numpy.typing import NDArray

from ...core.runtime import Device, DeviceSupport, InferenceRuntime, InferenceSessionSet

if TYPE_CHECKING:
    from ...voice_model import VoiceModel

# 1 フレームあたりのサンプル数
_FRAME_SIZE = 256


class MockSessionSet(InferenceSessionSet):
    """入力値を反映した決定的な値を返す推論セッション。値に特に意味はない。"""

    def predict_duration(
        self, phoneme_list: NDArray[np.int64], speaker_id: NDArray[np.int64]
    ) -> NDArray[np.float32]:
        """音素ID系列・スタイルIDから音素長系列を生成する"""
        result = np.round(phoneme_list * 0.0625 + speaker_id, 2)
        return result.astype(np.float32)

    def predict_intonation(
        self,
        length: int,
        vowel_phoneme_list: NDArray[np.int64],
        consonant_phoneme_list: NDArray[np.int64],
        start_accent_list: NDArray[np.int64],
        end_accent_list: NDArray[np.int64],
        start_accent_phrase_list: NDArray[np.int64],
        end_accent_phrase_list: NDArray[np.int64],
        speaker_id: NDArray[np.int64],
    ) -> NDArray[np.float32]:
        """モーラ系列の各特徴量の和とスタイルIDからモーラ音高系列を生成する"""
        assert length > 1, "前後無音を必ず付与しなければならない"
        assert vowel_phoneme_list.shape == (length,)

        total = (
            vowel_phoneme_list
            + consonant_phoneme_list
            + start_accent_list
            + end_accent_list
            + start_accent_phrase_list
            + end_accent_phrase_list
        )
        return np.round(total * 0.0625 + speaker_id, 2).astype(np.float32)

    def decode(
        self,
        f0: NDArray[np.float32],
        phoneme: NDArray[np.float32],
        speaker_id: NDArray[np.int64],
    ) -> NDArray[np.float32]:
        """フレーム音高・フレーム音素onehot・スタイルIDから、長さがフレーム数の 256 倍のダミー音声波形を生成する"""
        phoneme_size = phoneme.shape[1]
        phoneme_ids = phoneme.argmax(axis=1)
        frame_values = f0[:, 0] * (phoneme_ids / phoneme_size) + speaker_id
        return np.repeat(frame_values, _FRAME_SIZE).astype(np.float32)


class MockRuntime(InferenceRuntime):
    """
    推論ランタイムのモック

    音声モデルの重みは読まない。テストと `--enable_mock` での起動に用いる。
    """

    def __init__(self, device_support: DeviceSupport | None = None) -> None:
        if device_support is None:
            device_support = DeviceSupport(cpu=True, cuda=False, dml=False)
        self._device_support = device_support

    def supported_devices(self) -> DeviceSupport:
        return self._device_support

    def new_sessions(
        self, model: "VoiceModel", device: Device, cpu_num_threads: int
    ) -> InferenceSessionSet:
        return MockSessionSet()
