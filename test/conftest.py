from pathlib import Path

import pytest

from voicevox_synthesis.dev.core.mock import MockRuntime
from voicevox_synthesis.tts_pipeline.synthesizer import Synthesizer
from voicevox_synthesis.voice_model import VoiceModel

from .utility import (
    SPEAKER_UUID_1,
    SPEAKER_UUID_2,
    HelloHihoAnalyzer,
    build_vvm,
    gen_speaker_meta,
)


@pytest.fixture()
def sample_vvm_path(tmp_path: Path) -> Path:
    """スタイル 0, 1 を持つ音声モデルファイル"""
    return build_vvm(
        tmp_path,
        "sample-model",
        [gen_speaker_meta("dummy1", SPEAKER_UUID_1, [(0, "ノーマル"), (1, "あまあま")])],
    )


@pytest.fixture()
def another_vvm_path(tmp_path: Path) -> Path:
    """スタイル 2 を持つ音声モデルファイル"""
    return build_vvm(
        tmp_path,
        "another-model",
        [gen_speaker_meta("dummy2", SPEAKER_UUID_2, [(2, "ノーマル")])],
    )


@pytest.fixture()
def sample_model(sample_vvm_path: Path) -> VoiceModel:
    return VoiceModel.from_path(sample_vvm_path)


@pytest.fixture()
def synthesizer(sample_model: VoiceModel) -> Synthesizer:
    """モック推論ランタイムを使い、スタイル 0, 1 を読み込み済みの音声合成器"""
    synthesizer = Synthesizer(MockRuntime(), HelloHihoAnalyzer())
    synthesizer.load_voice_model(sample_model)
    return synthesizer
