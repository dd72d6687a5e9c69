"""ONNX Runtime による推論ランタイム"""

from logging import getLogger
from typing import TYPE_CHECKING

import numpy as np
import onnxruntime
from numpy.typing import NDArray

from ..error import InitInferenceRuntimeError
from .runtime import Device, DeviceSupport, InferenceRuntime, InferenceSessionSet

if TYPE_CHECKING:
    from ..voice_model import VoiceModel

logger = getLogger("uvicorn")  # FastAPI / Uvicorn 内からの利用のため

_CUDA_PROVIDER = "CUDAExecutionProvider"
_DML_PROVIDER = "DmlExecutionProvider"
_CPU_PROVIDER = "CPUExecutionProvider"

_PROVIDERS: dict[Device, list[str]] = {
    "cpu": [_CPU_PROVIDER],
    "cuda": [_CUDA_PROVIDER, _CPU_PROVIDER],
    "dml": [_DML_PROVIDER, _CPU_PROVIDER],
}


class _OnnxSessionSet(InferenceSessionSet):
    """ONNX Runtime のセッション 3 つ（音素長・音高・波形）の組"""

    def __init__(
        self,
        predict_duration: onnxruntime.InferenceSession,
        predict_intonation: onnxruntime.InferenceSession,
        decode: onnxruntime.InferenceSession,
    ) -> None:
        self._predict_duration = predict_duration
        self._predict_intonation = predict_intonation
        self._decode = decode

    def predict_duration(
        self, phoneme_list: NDArray[np.int64], speaker_id: NDArray[np.int64]
    ) -> NDArray[np.float32]:
        (phoneme_length,) = self._predict_duration.run(
            ["phoneme_length"],
            {"phoneme_list": phoneme_list, "speaker_id": speaker_id},
        )
        return np.asarray(phoneme_length, dtype=np.float32).reshape(-1)

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
        (f0_list,) = self._predict_intonation.run(
            ["f0_list"],
            {
                "length": np.array(length, dtype=np.int64),
                "vowel_phoneme_list": vowel_phoneme_list,
                "consonant_phoneme_list": consonant_phoneme_list,
                "start_accent_list": start_accent_list,
                "end_accent_list": end_accent_list,
                "start_accent_phrase_list": start_accent_phrase_list,
                "end_accent_phrase_list": end_accent_phrase_list,
                "speaker_id": speaker_id,
            },
        )
        return np.asarray(f0_list, dtype=np.float32).reshape(-1)

    def decode(
        self,
        f0: NDArray[np.float32],
        phoneme: NDArray[np.float32],
        speaker_id: NDArray[np.int64],
    ) -> NDArray[np.float32]:
        (wave,) = self._decode.run(
            ["wave"], {"f0": f0, "phoneme": phoneme, "speaker_id": speaker_id}
        )
        return np.asarray(wave, dtype=np.float32).reshape(-1)


class OnnxRuntime(InferenceRuntime):
    """
    onnxruntime を用いた推論ランタイム

    音声モデルの重みは ONNX 形式であることを前提とする。
    """

    def supported_devices(self) -> DeviceSupport:
        providers = onnxruntime.get_available_providers()
        return DeviceSupport(
            cpu=True,
            cuda=_CUDA_PROVIDER in providers,
            dml=_DML_PROVIDER in providers,
        )

    def new_sessions(
        self, model: "VoiceModel", device: Device, cpu_num_threads: int
    ) -> InferenceSessionSet:
        options = onnxruntime.SessionOptions()
        if cpu_num_threads > 0:
            options.intra_op_num_threads = cpu_num_threads
            options.inter_op_num_threads = cpu_num_threads

        def _new_session(name: str, weight: bytes) -> onnxruntime.InferenceSession:
            try:
                return onnxruntime.InferenceSession(
                    weight, sess_options=options, providers=_PROVIDERS[device]
                )
            except Exception as e:
                # NOTE: onnxruntime は読み込み失敗時に種類の異なる例外を送出する
                raise InitInferenceRuntimeError(
                    f"音声モデル {model.id} の {name} を推論セッションとして読み込めませんでした: {e}",
                    model_id=model.id,
                ) from e

        weights = model.weights
        logger.info(f"Creating inference sessions: model={model.id} device={device}")
        return _OnnxSessionSet(
            _new_session("predict_duration", weights.predict_duration),
            _new_session("predict_intonation", weights.predict_intonation),
            _new_session("decode", weights.decode),
        )
