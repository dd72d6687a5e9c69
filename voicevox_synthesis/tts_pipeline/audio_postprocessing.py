"""音声波形を加工する。"""

import io

import numpy as np
import soundfile
from numpy.typing import NDArray
from soxr import resample

from ..model import AudioQuery


def raw_wave_to_output_wave(
    query: AudioQuery, wave: NDArray[np.float32], sr_wave: int
) -> NDArray[np.float32]:
    """生音声波形に音声合成用のクエリを適用して出力音声波形を生成する"""
    wave = _apply_volume_scale(wave, query)
    wave = _apply_output_sampling_rate(wave, sr_wave, query)
    wave = _apply_output_stereo(wave, query)
    return wave


def _apply_volume_scale(
    wave: NDArray[np.float32], query: AudioQuery
) -> NDArray[np.float32]:
    """音声波形へ音声合成用のクエリがもつ音量スケール（`volumeScale`）を適用する"""
    return wave * query.volume_scale


def _apply_output_sampling_rate(
    wave: NDArray[np.float32], sr_wave: int, query: AudioQuery
) -> NDArray[np.float32]:
    """音声波形へ音声合成用のクエリがもつ出力サンプリングレート（`outputSamplingRate`）を適用する"""
    # サンプリングレート一致のときはスルー
    if sr_wave == query.output_sampling_rate:
        return wave
    return resample(wave, sr_wave, query.output_sampling_rate)


def _apply_output_stereo(
    wave: NDArray[np.float32], query: AudioQuery
) -> NDArray[np.float32]:
    """音声波形へ音声合成用のクエリがもつステレオ出力設定（`outputStereo`）を適用する"""
    if query.output_stereo:
        wave = np.array([wave, wave]).T
    return wave


def to_wav_bytes(wave: NDArray[np.float32], sampling_rate: int) -> bytes:
    """音声波形を 16bit PCM の WAV ファイルのバイト列へ変換する。"""
    with io.BytesIO() as buffer:
        soundfile.write(
            buffer, data=wave, samplerate=sampling_rate, format="WAV", subtype="PCM_16"
        )
        return buffer.getvalue()
