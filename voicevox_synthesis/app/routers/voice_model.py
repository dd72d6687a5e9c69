"""音声モデルとキャラクター情報を提供する API Router"""

import asyncio
from typing import Annotated, Self

from fastapi import APIRouter, Path, Query
from pydantic import BaseModel, Field

from voicevox_synthesis.aio import AsyncVoiceModel
from voicevox_synthesis.core.runtime import DeviceSupport
from voicevox_synthesis.metas.metas import SpeakerMeta, VoiceModelId
from voicevox_synthesis.tts_pipeline.synthesizer import Synthesizer


class SupportedDevicesInfo(BaseModel):
    """対応しているデバイスの情報。"""

    cpu: bool = Field(description="CPUに対応しているか")
    cuda: bool = Field(description="CUDA(Nvidia GPU)に対応しているか")
    dml: bool = Field(description="DirectML(Nvidia GPU/Radeon GPU等)に対応しているか")

    @classmethod
    def generate_from(cls, device_support: DeviceSupport) -> Self:
        """`DeviceSupport` インスタンスからこのインスタンスを生成する。"""
        return cls(
            cpu=device_support.cpu,
            cuda=device_support.cuda,
            dml=device_support.dml,
        )


def generate_voice_model_router(synthesizer: Synthesizer) -> APIRouter:
    """音声モデル API Router を生成する"""
    router = APIRouter(tags=["音声モデル"])

    @router.post("/voice_models/load", status_code=204)
    async def load_voice_model(
        path: Annotated[str, Query(description="音声モデルファイル (VVM) のパス")],
    ) -> None:
        """
        音声モデルを読み込みます。
        読み込み済みの音声モデルやスタイルと重複する場合は失敗します。
        """
        model = await AsyncVoiceModel.from_path(path)
        loop = asyncio.get_running_loop()
        await loop.run_in_executor(None, synthesizer.load_voice_model, model)

    @router.delete("/voice_models/{model_id}", status_code=204)
    def unload_voice_model(
        model_id: Annotated[str, Path(description="音声モデルのID")],
    ) -> None:
        """
        音声モデルを解放します。
        解放した音声モデルのスタイルは以後使えなくなります。
        """
        synthesizer.unload_voice_model(VoiceModelId(model_id))

    @router.get("/voice_models/{model_id}/is_loaded")
    def is_loaded_voice_model(
        model_id: Annotated[str, Path(description="音声モデルのID")],
    ) -> bool:
        """音声モデルが読み込まれているかどうかを返します。"""
        return synthesizer.is_loaded_voice_model(VoiceModelId(model_id))

    @router.get("/speakers")
    def speakers() -> list[SpeakerMeta]:
        """読み込み済みの音声モデルが提供するキャラクターの情報の一覧を返します。"""
        return synthesizer.metas()

    @router.get("/supported_devices")
    def supported_devices() -> SupportedDevicesInfo:
        """推論に利用可能なデバイスの一覧を返します。"""
        return SupportedDevicesInfo.generate_from(synthesizer.supported_devices)

    return router
