"""ASGI application の生成"""

from pathlib import Path

from fastapi import FastAPI

from voicevox_synthesis import __version__
from voicevox_synthesis.app.global_exceptions import configure_global_exception_handlers
from voicevox_synthesis.app.middlewares import configure_middlewares
from voicevox_synthesis.app.routers.tts_pipeline import generate_tts_pipeline_router
from voicevox_synthesis.app.routers.user_dict import generate_user_dict_router
from voicevox_synthesis.app.routers.voice_model import generate_voice_model_router
from voicevox_synthesis.setting.model import CorsPolicyMode
from voicevox_synthesis.tts_pipeline.open_jtalk import OpenJtalk
from voicevox_synthesis.tts_pipeline.synthesizer import Synthesizer
from voicevox_synthesis.user_dict.user_dict import UserDict


def generate_app(
    synthesizer: Synthesizer,
    open_jtalk: OpenJtalk,
    user_dict: UserDict,
    user_dict_path: Path | None = None,
    cors_policy_mode: CorsPolicyMode = CorsPolicyMode.localapps,
    allow_origin: list[str] | None = None,
) -> FastAPI:
    """ASGI 'application' 仕様に準拠した音声合成アプリケーションインスタンスを生成する。"""
    app = FastAPI(
        title="VOICEVOX Synthesis",
        description="テキストから日本語音声を合成する音声合成エンジンです。",
        version=__version__,
        separate_input_output_schemas=False,
    )
    app = configure_middlewares(app, cors_policy_mode, allow_origin)
    app = configure_global_exception_handlers(app)

    app.include_router(generate_tts_pipeline_router(synthesizer))
    app.include_router(generate_voice_model_router(synthesizer))
    app.include_router(generate_user_dict_router(user_dict, open_jtalk, user_dict_path))

    return app
