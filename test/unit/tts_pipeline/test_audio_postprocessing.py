"""音声波形の加工の単体テスト。"""

import io

import numpy as np
import soundfile

from voicevox_synthesis.model import AudioQuery
from voicevox_synthesis.tts_pipeline.audio_postprocessing import (
    raw_wave_to_output_wave,
    to_wav_bytes,
)


def _gen_query(
    volume_scale: float = 1.0,
    output_sampling_rate: int = 24000,
    output_stereo: bool = False,
) -> AudioQuery:
    query = AudioQuery.from_accent_phrases([])
    query.volume_scale = volume_scale
    query.output_sampling_rate = output_sampling_rate
    query.output_stereo = output_stereo
    return query


def test_volume_scale() -> None:
    wave = np.array([0.1, -0.2, 0.3], dtype=np.float32)
    result = raw_wave_to_output_wave(_gen_query(volume_scale=2.0), wave, 24000)
    assert np.allclose(result, [0.2, -0.4, 0.6])


def test_same_sampling_rate() -> None:
    """サンプリングレートが一致する場合は変換しない。"""
    wave = np.linspace(-0.5, 0.5, 240, dtype=np.float32)
    result = raw_wave_to_output_wave(_gen_query(), wave, 24000)
    assert np.array_equal(result, wave)


def test_resample() -> None:
    wave = np.zeros(24000, dtype=np.float32)
    result = raw_wave_to_output_wave(
        _gen_query(output_sampling_rate=48000), wave, 24000
    )
    assert len(result) == 48000


def test_stereo() -> None:
    wave = np.array([0.1, 0.2], dtype=np.float32)
    result = raw_wave_to_output_wave(_gen_query(output_stereo=True), wave, 24000)
    assert result.shape == (2, 2)
    assert np.array_equal(result[:, 0], result[:, 1])


def test_to_wav_bytes() -> None:
    """16bit PCM の WAV として読み戻せる。"""
    wave = np.array([0.0, 0.5, -0.5], dtype=np.float32)

    wav = to_wav_bytes(wave, 24000)

    info = soundfile.info(io.BytesIO(wav))
    assert info.samplerate == 24000
    assert info.channels == 1
    assert info.subtype == "PCM_16"
    data, _ = soundfile.read(io.BytesIO(wav))
    assert np.allclose(data, wave, atol=1e-4)
