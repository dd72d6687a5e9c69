"""推論ランタイムの抽象"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from logging import getLogger
from typing import TYPE_CHECKING, Literal

import numpy as np
from numpy.typing import NDArray

from ..error import GpuSupportError, InvalidInputError

if TYPE_CHECKING:
    from ..voice_model import VoiceModel

logger = getLogger("uvicorn")  # FastAPI / Uvicorn 内からの利用のため

Device = Literal["cpu", "cuda", "dml"]


class AccelerationMode(str, Enum):
    """ハードウェアアクセラレーションモード"""

    AUTO = "AUTO"  # GPU が利用可能なら GPU、そうでなければ CPU
    CPU = "CPU"
    GPU = "GPU"


def parse_acceleration_mode(value: str) -> AccelerationMode:
    """文字列をハードウェアアクセラレーションモードへ変換する。"""
    try:
        return AccelerationMode(value)
    except ValueError:
        raise InvalidInputError(
            f"不明なハードウェアアクセラレーションモードの設定値: '{value}'",
            acceleration_mode=value,
        )


@dataclass(frozen=True)
class InitializeOptions:
    """音声合成器の初期化オプション"""

    acceleration_mode: AccelerationMode = AccelerationMode.AUTO
    cpu_num_threads: int = 0  # 0 は利用可能な全スレッドを使う


@dataclass(frozen=True)
class DeviceSupport:
    """推論ランタイムのデバイス利用可否"""

    cpu: bool
    cuda: bool  # CUDA (Nvidia GPU)
    dml: bool  # DirectML (Nvidia GPU/Radeon GPU等)


def select_device(mode: AccelerationMode, support: DeviceSupport) -> Device:
    """アクセラレーションモードとデバイス利用可否から推論に使うデバイスを決める。"""
    gpu: Device | None = "cuda" if support.cuda else "dml" if support.dml else None
    match mode:
        case AccelerationMode.CPU:
            return "cpu"
        case AccelerationMode.GPU:
            if gpu is None:
                raise GpuSupportError("GPU 機能をサポートすることができません")
            return gpu
        case AccelerationMode.AUTO:
            if gpu is None:
                logger.info("No GPU is available. Running on CPU.")
                return "cpu"
            return gpu


class InferenceSessionSet(ABC):
    """
    1 つの音声モデルに対する推論セッションの組

    入出力は前後無音が付加済みの系列で、バッチ次元を持たない。
    """

    @abstractmethod
    def predict_duration(
        self, phoneme_list: NDArray[np.int64], speaker_id: NDArray[np.int64]
    ) -> NDArray[np.float32]:
        """音素 ID 系列から音素長系列 (秒) を生成する"""
        raise NotImplementedError()

    @abstractmethod
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
        """モーラ系列の母音・子音・アクセント位置・アクセント句区切りからモーラ音高系列を生成する"""
        raise NotImplementedError()

    @abstractmethod
    def decode(
        self,
        f0: NDArray[np.float32],
        phoneme: NDArray[np.float32],
        speaker_id: NDArray[np.int64],
    ) -> NDArray[np.float32]:
        """フレームごとの音高 (shape=(フレーム長, 1)) と音素 onehot から音声波形を生成する"""
        raise NotImplementedError()


class InferenceRuntime(ABC):
    """推論ランタイム"""

    # 1 フレームあたりのサンプル数は 256
    default_sampling_rate: int = 24000

    @abstractmethod
    def supported_devices(self) -> DeviceSupport:
        """利用可能なデバイスの一覧を取得する。"""
        raise NotImplementedError()

    @abstractmethod
    def new_sessions(
        self, model: "VoiceModel", device: Device, cpu_num_threads: int
    ) -> InferenceSessionSet:
        """
        音声モデルの推論セッションを生成する。

        Raises
        ------
        InitInferenceRuntimeError
            重みを推論セッションとして読み込めない
        """
        raise NotImplementedError()
