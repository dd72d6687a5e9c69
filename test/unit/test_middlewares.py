"""CORS とオリジン遮断のテスト"""

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from voicevox_synthesis.app.middlewares import (
    configure_middlewares,
    is_allowed_origin,
    resolve_allowed_origins,
)
from voicevox_synthesis.setting.model import CorsPolicyMode


def test_resolve_allowed_origins() -> None:
    assert resolve_allowed_origins(CorsPolicyMode.all, ["http://example.com"]) == ["*"]
    assert resolve_allowed_origins(CorsPolicyMode.localapps, None) == ["app://."]
    assert resolve_allowed_origins(
        CorsPolicyMode.localapps, ["http://example.com"]
    ) == ["app://.", "http://example.com"]


@pytest.mark.parametrize(
    ("origin", "true_allowed"),
    [
        (None, True),
        ("app://.", True),
        ("http://localhost:5173", True),
        ("http://127.0.0.1", True),
        ("https://[::1]:8080", True),
        ("http://example.com", False),
        ("http://localhost.example.com", False),
    ],
)
def test_is_allowed_origin(origin: str | None, true_allowed: bool) -> None:
    assert is_allowed_origin(origin, ["app://."]) == true_allowed


def test_block_origin_middleware() -> None:
    app = configure_middlewares(FastAPI(), CorsPolicyMode.localapps, None)

    @app.get("/ping")
    def ping() -> str:
        return "pong"

    client = TestClient(app)
    assert client.get("/ping").status_code == 200
    assert client.get("/ping", headers={"Origin": "app://."}).status_code == 200
    assert (
        client.get("/ping", headers={"Origin": "http://example.com"}).status_code
        == 403
    )
