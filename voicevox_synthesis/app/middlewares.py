"""FastAPI ミドルウェア"""

import re
from collections.abc import Awaitable, Callable
from logging import getLogger

from fastapi import FastAPI, Request, Response
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.middleware.errors import ServerErrorMiddleware

from voicevox_synthesis.setting.model import CorsPolicyMode

logger = getLogger("uvicorn")  # FastAPI / Uvicorn 内からの利用のため

# ローカルホストからのアクセスは常に許可する
_LOCALHOST_PATTERN = re.compile(
    "^https?://(localhost|127\\.0\\.0\\.1|\\[::1\\])(:[0-9]+)?$"
)
# VOICEVOX エディタなどの Electron アプリの Origin
_LOCAL_APP_ORIGIN = "app://."


def resolve_allowed_origins(
    cors_policy_mode: CorsPolicyMode, allow_origin: list[str] | None
) -> list[str]:
    """CORS の許可モードと追加の許可オリジンから、許可するオリジンの一覧を決める。"""
    if cors_policy_mode == CorsPolicyMode.all:
        return ["*"]

    extra_origins = allow_origin or []
    if "*" in extra_origins:
        logger.warning(
            'Deprecated use of "*" in allow_origin. '
            'Use setting "cors_policy_mode: all" instead.'
        )
    return [_LOCAL_APP_ORIGIN, *extra_origins]


def is_allowed_origin(origin: str | None, allowed_origins: list[str]) -> bool:
    """リクエストの Origin ヘッダが許可されているか判定する。"""
    if origin is None:  # ブラウザ以外からの Origin のないリクエスト
        return True
    if "*" in allowed_origins or origin in allowed_origins:
        return True
    return _LOCALHOST_PATTERN.fullmatch(origin) is not None


def configure_middlewares(
    app: FastAPI, cors_policy_mode: CorsPolicyMode, allow_origin: list[str] | None
) -> FastAPI:
    """FastAPI のミドルウェアを設定する。"""

    # 未処理の例外でも CORS ヘッダを付けた 500 応答を返すため、最も外側で例外を受ける
    async def internal_error_handler(request: Request, exc: Exception) -> Response:
        return JSONResponse(status_code=500, content="Internal Server Error")

    app.add_middleware(ServerErrorMiddleware, handler=internal_error_handler)

    allowed_origins = resolve_allowed_origins(cors_policy_mode, allow_origin)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=allowed_origins,
        allow_credentials=True,
        allow_origin_regex=_LOCALHOST_PATTERN.pattern,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.middleware("http")
    async def block_origin_middleware(
        request: Request, call_next: Callable[[Request], Awaitable[Response]]
    ) -> Response:
        if not is_allowed_origin(request.headers.get("Origin"), allowed_origins):
            return JSONResponse(
                status_code=403, content={"detail": "Origin not allowed"}
            )
        return await call_next(request)

    return app
