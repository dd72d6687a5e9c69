"""非同期 API のテスト"""

import asyncio
import threading
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
from unittest.mock import patch

import pytest

from test.utility import HelloHihoAnalyzer
from voicevox_synthesis.aio import AsyncSynthesizer, AsyncUserDict, AsyncVoiceModel
from voicevox_synthesis.core.runtime import InitializeOptions
from voicevox_synthesis.dev.core.mock import MockRuntime
from voicevox_synthesis.error import OpenZipFileError, StyleNotFoundError
from voicevox_synthesis.metas.metas import StyleId
from voicevox_synthesis.tts_pipeline.synthesizer import Synthesizer
from voicevox_synthesis.user_dict.user_dict_word import create_word
from voicevox_synthesis.voice_model import VoiceModel


def test_async_synthesizer_matches_sync(sample_vvm_path: Path) -> None:
    """非同期 API は同期 API と同じ結果を返す。"""

    async def run() -> tuple[bytes, bytes]:
        model = await AsyncVoiceModel.from_path(sample_vvm_path)
        async with AsyncSynthesizer(
            MockRuntime(), HelloHihoAnalyzer(), InitializeOptions(cpu_num_threads=2)
        ) as synthesizer:
            await synthesizer.load_voice_model(model)
            assert synthesizer.is_loaded_voice_model(model.id)
            query = await synthesizer.audio_query("こんにちは", StyleId(1))
            result = await synthesizer.synthesis(query, StyleId(1))
            tts_result = await synthesizer.tts("こんにちは", StyleId(1))
        return result.wav, tts_result.wav

    wav, tts_wav = asyncio.run(run())

    synthesizer = Synthesizer(MockRuntime(), HelloHihoAnalyzer())
    model = asyncio.run(AsyncVoiceModel.from_path(sample_vvm_path))
    synthesizer.load_voice_model(model)
    true_wav = synthesizer.tts("こんにちは", StyleId(1)).wav
    assert wav == true_wav
    assert tts_wav == true_wav


def test_async_synthesizer_error(sample_vvm_path: Path) -> None:
    """ワーカースレッドで生じたエラーはそのまま呼び出し側へ伝わる。"""

    async def run() -> None:
        async with AsyncSynthesizer(MockRuntime(), HelloHihoAnalyzer()) as synthesizer:
            await synthesizer.load_voice_model(
                await AsyncVoiceModel.from_path(sample_vvm_path)
            )
            await synthesizer.create_accent_phrases("こんにちは", StyleId(100))

    with pytest.raises(StyleNotFoundError):
        asyncio.run(run())


def test_async_voice_model_error(tmp_path: Path) -> None:
    with pytest.raises(OpenZipFileError):
        asyncio.run(AsyncVoiceModel.from_path(tmp_path / "not_exist.vvm"))


def test_async_user_dict(tmp_path: Path) -> None:
    """非同期に保存した辞書を非同期に読み込める。"""
    store_path = tmp_path / "user_dict.json"

    async def run() -> AsyncUserDict:
        user_dict = AsyncUserDict()
        word_uuid = user_dict.add_word(create_word("南", "ミナミ", accent_type=1))
        await user_dict.save(store_path)

        loaded = AsyncUserDict()
        await loaded.load(store_path)
        assert loaded.words()[word_uuid].surface == "南"
        return loaded

    loaded = asyncio.run(run())
    assert len(loaded) == 1


def test_async_voice_model_runs_on_running_loop_executor(
    sample_vvm_path: Path,
) -> None:
    """読み込みは実行中のイベントループの既定 executor 上のスレッドで行われる。"""
    thread_names: list[str] = []

    def record_thread_name(path: Path) -> Path:
        thread_names.append(threading.current_thread().name)
        return path

    async def run() -> None:
        executor = ThreadPoolExecutor(thread_name_prefix="voicevox-test")
        asyncio.get_running_loop().set_default_executor(executor)
        with patch.object(VoiceModel, "from_path", side_effect=record_thread_name):
            await AsyncVoiceModel.from_path(sample_vvm_path)

    asyncio.run(run())
    assert len(thread_names) == 1
    assert thread_names[0].startswith("voicevox-test")
