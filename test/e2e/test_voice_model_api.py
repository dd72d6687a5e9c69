"""音声モデル API のテスト"""

from pathlib import Path

from fastapi.testclient import TestClient


def test_音声モデルを読み込める(client: TestClient, another_vvm_path: Path) -> None:
    assert client.get("/voice_models/another-model/is_loaded").json() is False

    response = client.post("/voice_models/load", params={"path": str(another_vvm_path)})

    assert response.status_code == 204
    assert client.get("/voice_models/another-model/is_loaded").json() is True
    speakers = client.get("/speakers").json()
    assert [style["id"] for speaker in speakers for style in speaker["styles"]] == [
        0,
        1,
        2,
    ]
    query = client.post("/audio_query", params={"text": "テストです", "speaker": 2})
    assert query.status_code == 200


def test_読み込み済みの音声モデルは読み込めない(
    client: TestClient, sample_vvm_path: Path
) -> None:
    response = client.post("/voice_models/load", params={"path": str(sample_vvm_path)})
    assert response.status_code == 409
    assert response.json()["kind"] == "MODEL_ALREADY_LOADED"


def test_存在しない音声モデルファイルは読み込めない(
    client: TestClient, tmp_path: Path
) -> None:
    response = client.post(
        "/voice_models/load", params={"path": str(tmp_path / "not_exist.vvm")}
    )
    assert response.status_code == 422
    assert response.json()["kind"] == "OPEN_ZIP_FILE"


def test_音声モデルを解放できる(client: TestClient) -> None:
    response = client.delete("/voice_models/sample-model")

    assert response.status_code == 204
    assert client.get("/voice_models/sample-model/is_loaded").json() is False
    assert client.get("/speakers").json() == []
    query = client.post("/audio_query", params={"text": "テストです", "speaker": 0})
    assert query.status_code == 404


def test_読み込まれていない音声モデルは解放できない(client: TestClient) -> None:
    response = client.delete("/voice_models/not-loaded")
    assert response.status_code == 404
    assert response.json()["kind"] == "MODEL_NOT_FOUND"


def test_対応デバイスが取得できる(client: TestClient) -> None:
    response = client.get("/supported_devices")
    assert response.status_code == 200
    assert response.json() == {"cpu": True, "cuda": False, "dml": False}
