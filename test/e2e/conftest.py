from pathlib import Path

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from voicevox_synthesis.app.application import generate_app
from voicevox_synthesis.dev.core.mock import MockRuntime
from voicevox_synthesis.tts_pipeline.open_jtalk import OpenJtalk, bundled_dict_dir
from voicevox_synthesis.tts_pipeline.synthesizer import Synthesizer
from voicevox_synthesis.user_dict.user_dict import UserDict
from voicevox_synthesis.voice_model import VoiceModel


@pytest.fixture(scope="session")
def open_jtalk() -> OpenJtalk:
    return OpenJtalk(bundled_dict_dir())


@pytest.fixture()
def user_dict_path(tmp_path: Path) -> Path:
    """テスト用に隔離されたユーザー辞書ファイルのパス"""
    return tmp_path / "user_dict.json"


@pytest.fixture()
def app(
    sample_vvm_path: Path, open_jtalk: OpenJtalk, user_dict_path: Path
) -> FastAPI:
    """モック推論ランタイムでスタイル 0, 1 を読み込み済みのアプリケーション"""
    # ユーザー辞書のテストが他のテストへ影響しないよう、辞書を空にしておく
    user_dict = UserDict()
    open_jtalk.use_user_dict(user_dict)

    synthesizer = Synthesizer(MockRuntime(), open_jtalk)
    synthesizer.load_voice_model(VoiceModel.from_path(sample_vvm_path))
    return generate_app(synthesizer, open_jtalk, user_dict, user_dict_path)


@pytest.fixture()
def client(app: FastAPI) -> TestClient:
    return TestClient(app)
