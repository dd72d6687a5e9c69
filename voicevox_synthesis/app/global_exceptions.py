"""グローバルな例外ハンドラの定義と登録"""

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from voicevox_synthesis.error import (
    ConflictError,
    InferenceError,
    InvalidInputError,
    LoadError,
    NotFoundError,
    VoicevoxError,
)
from voicevox_synthesis.tts_pipeline.kana_converter import ParseKanaError
from voicevox_synthesis.tts_pipeline.model import ParseKanaErrorCode


class ParseKanaBadRequest(BaseModel):
    """読み仮名のパースに失敗した。"""

    text: str = Field(description="エラーメッセージ")
    error_name: str = Field(
        description="エラー名\n\n"
        "|name|description|\n|---|---|\n"
        + "\n".join([f"| {e.name} | {e.value} |" for e in list(ParseKanaErrorCode)]),
    )
    error_args: dict[str, str] = Field(description="エラーを起こした箇所")

    def __init__(self, e: ParseKanaError):
        super().__init__(
            text=e.text,
            error_name=e.errname,
            error_args={key: str(value) for key, value in e.kwargs.items()},
        )


def _error_response(status_code: int, e: VoicevoxError) -> JSONResponse:
    return JSONResponse(
        status_code=status_code, content={"message": str(e), "kind": e.kind.value}
    )


def configure_global_exception_handlers(app: FastAPI) -> FastAPI:
    """グローバルな例外ハンドラを app へ設定する。"""

    # 読み仮名のパースに失敗したエラー
    @app.exception_handler(ParseKanaError)
    async def parse_kana_exception_handler(
        request: Request, e: ParseKanaError
    ) -> JSONResponse:
        return JSONResponse(
            status_code=400, content={"detail": ParseKanaBadRequest(e).model_dump()}
        )

    # 入力値が不正なエラー
    @app.exception_handler(InvalidInputError)
    async def invalid_input_exception_handler(
        request: Request, e: InvalidInputError
    ) -> JSONResponse:
        return _error_response(422, e)

    # 指定されたスタイル・モデル・単語が見つからないエラー
    @app.exception_handler(NotFoundError)
    async def not_found_exception_handler(
        request: Request, e: NotFoundError
    ) -> JSONResponse:
        return _error_response(404, e)

    # 読み込み済みのモデル・スタイルと衝突したエラー
    @app.exception_handler(ConflictError)
    async def conflict_exception_handler(
        request: Request, e: ConflictError
    ) -> JSONResponse:
        return _error_response(409, e)

    # ファイルを読み書きできないエラー
    @app.exception_handler(LoadError)
    async def load_exception_handler(request: Request, e: LoadError) -> JSONResponse:
        return _error_response(422, e)

    # 推論に失敗したエラー
    @app.exception_handler(InferenceError)
    async def inference_exception_handler(
        request: Request, e: InferenceError
    ) -> JSONResponse:
        return _error_response(500, e)

    return app
