"""
非同期 API

同期 API を `ThreadPoolExecutor` 上で実行し、イベントループを塞がずに待てるようにする。
音声モデルファイル・辞書ファイルの I/O と推論はワーカースレッドで行われる。
"""

import asyncio
import os
from collections.abc import Callable
from concurrent.futures import ThreadPoolExecutor
from functools import partial
from pathlib import Path
from typing import Any, TypeVar
from uuid import UUID

from .core.runtime import DeviceSupport, InferenceRuntime, InitializeOptions
from .metas.metas import SpeakerMeta, StyleId, VoiceModelId
from .model import AudioQuery
from .tts_pipeline.model import AccentPhrase
from .tts_pipeline.open_jtalk import OpenJtalk
from .tts_pipeline.synthesizer import SynthesisOptions, SynthesisResult, Synthesizer
from .tts_pipeline.text_analyzer import TextAnalyzer
from .user_dict.model import UserDictWord
from .user_dict.user_dict import UserDict
from .voice_model import VoiceModel

_T = TypeVar("_T")


async def _run(
    executor: ThreadPoolExecutor | None, func: Callable[..., _T], *args: Any
) -> _T:
    loop = asyncio.get_running_loop()
    return await loop.run_in_executor(executor, func, *args)


class AsyncVoiceModel:
    """`VoiceModel` の非同期な読み込み"""

    @staticmethod
    async def from_path(path: str | Path) -> VoiceModel:
        return await _run(None, VoiceModel.from_path, path)


class AsyncUserDict:
    """ファイル I/O を非同期に行うユーザー辞書"""

    def __init__(self, user_dict: UserDict | None = None) -> None:
        self.inner = user_dict if user_dict is not None else UserDict()

    def __len__(self) -> int:
        return len(self.inner)

    def words(self) -> dict[UUID, UserDictWord]:
        return dict(self.inner.words())

    def add_word(self, word: UserDictWord) -> UUID:
        return self.inner.add_word(word)

    def update_word(self, word_uuid: UUID, new_word: UserDictWord) -> None:
        self.inner.update_word(word_uuid, new_word)

    def remove_word(self, word_uuid: UUID) -> UserDictWord:
        return self.inner.remove_word(word_uuid)

    def import_dict(self, other: "AsyncUserDict") -> None:
        self.inner.import_dict(other.inner)

    async def load(self, store_path: str | Path) -> None:
        await _run(None, self.inner.load, store_path)

    async def save(self, store_path: str | Path) -> None:
        await _run(None, self.inner.save, store_path)


class AsyncOpenJtalk:
    """辞書の読み込みとコンパイルを非同期に行う `OpenJtalk`"""

    def __init__(self, inner: OpenJtalk) -> None:
        self.inner = inner

    @classmethod
    async def new(
        cls, open_jtalk_dict_dir: str | Path, enable_katakana_english: bool = True
    ) -> "AsyncOpenJtalk":
        inner = await _run(
            None, partial(OpenJtalk, open_jtalk_dict_dir, enable_katakana_english)
        )
        return cls(inner)

    async def use_user_dict(self, user_dict: AsyncUserDict | UserDict) -> None:
        if isinstance(user_dict, AsyncUserDict):
            user_dict = user_dict.inner
        await _run(None, self.inner.use_user_dict, user_dict)

    async def extract_full_context_label(self, text: str) -> list[str]:
        return await _run(None, self.inner.extract_full_context_label, text)


class AsyncSynthesizer:
    """
    非同期な音声合成器

    推論は `cpu_num_threads` 個（0 の場合は CPU コア数）のワーカースレッドで行う。
    `async with` で使うか、使い終わったら `close` を呼ぶ。
    """

    def __init__(
        self,
        runtime: InferenceRuntime,
        open_jtalk: "AsyncOpenJtalk | TextAnalyzer",
        options: InitializeOptions | None = None,
    ) -> None:
        if isinstance(open_jtalk, AsyncOpenJtalk):
            open_jtalk = open_jtalk.inner
        self.inner = Synthesizer(runtime, open_jtalk, options)
        num_threads = options.cpu_num_threads if options is not None else 0
        self._executor = ThreadPoolExecutor(
            max_workers=num_threads if num_threads > 0 else os.cpu_count() or 1,
            thread_name_prefix="voicevox-synthesis",
        )

    async def __aenter__(self) -> "AsyncSynthesizer":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        self.close()

    def close(self) -> None:
        """ワーカースレッドを停止する。実行中の処理の完了は待つ。"""
        self._executor.shutdown(wait=True)

    async def _run(self, func: Callable[..., _T], *args: Any) -> _T:
        return await _run(self._executor, func, *args)

    @property
    def is_gpu_mode(self) -> bool:
        return self.inner.is_gpu_mode

    @property
    def supported_devices(self) -> DeviceSupport:
        return self.inner.supported_devices

    async def load_voice_model(self, model: VoiceModel) -> None:
        await self._run(self.inner.load_voice_model, model)

    def unload_voice_model(self, model_id: VoiceModelId) -> None:
        self.inner.unload_voice_model(model_id)

    def is_loaded_voice_model(self, model_id: VoiceModelId) -> bool:
        return self.inner.is_loaded_voice_model(model_id)

    def metas(self) -> list[SpeakerMeta]:
        return self.inner.metas()

    async def create_accent_phrases(
        self, text: str, style_id: StyleId
    ) -> list[AccentPhrase]:
        return await self._run(self.inner.create_accent_phrases, text, style_id)

    async def create_accent_phrases_from_kana(
        self, kana: str, style_id: StyleId
    ) -> list[AccentPhrase]:
        return await self._run(
            self.inner.create_accent_phrases_from_kana, kana, style_id
        )

    async def replace_phoneme_length(
        self, accent_phrases: list[AccentPhrase], style_id: StyleId
    ) -> list[AccentPhrase]:
        return await self._run(
            self.inner.replace_phoneme_length, accent_phrases, style_id
        )

    async def replace_mora_pitch(
        self, accent_phrases: list[AccentPhrase], style_id: StyleId
    ) -> list[AccentPhrase]:
        return await self._run(self.inner.replace_mora_pitch, accent_phrases, style_id)

    async def replace_mora_data(
        self, accent_phrases: list[AccentPhrase], style_id: StyleId
    ) -> list[AccentPhrase]:
        return await self._run(self.inner.replace_mora_data, accent_phrases, style_id)

    async def audio_query(self, text: str, style_id: StyleId) -> AudioQuery:
        return await self._run(self.inner.audio_query, text, style_id)

    async def audio_query_from_kana(self, kana: str, style_id: StyleId) -> AudioQuery:
        return await self._run(self.inner.audio_query_from_kana, kana, style_id)

    async def synthesis(
        self,
        query: AudioQuery,
        style_id: StyleId,
        options: SynthesisOptions | None = None,
    ) -> SynthesisResult:
        return await self._run(self.inner.synthesis, query, style_id, options)

    async def tts(
        self, text: str, style_id: StyleId, options: SynthesisOptions | None = None
    ) -> SynthesisResult:
        return await self._run(self.inner.tts, text, style_id, options)

    async def tts_from_kana(
        self, kana: str, style_id: StyleId, options: SynthesisOptions | None = None
    ) -> SynthesisResult:
        return await self._run(self.inner.tts_from_kana, kana, style_id, options)
