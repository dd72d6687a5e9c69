"""音声合成 API のテスト"""

from typing import Any

import pytest
from fastapi.testclient import TestClient


def _audio_query(client: TestClient, text: str, speaker: int = 0) -> dict[str, Any]:
    response = client.post("/audio_query", params={"text": text, "speaker": speaker})
    assert response.status_code == 200
    return response.json()


def test_音声合成クエリが取得できる(client: TestClient) -> None:
    query = _audio_query(client, "テストです")

    assert query["speedScale"] == 1.0
    assert query["outputSamplingRate"] == 24000
    assert query["outputStereo"] is False
    assert query["kana"] is None
    moras = [mora for phrase in query["accent_phrases"] for mora in phrase["moras"]]
    assert "".join(mora["text"] for mora in moras) == "テストデス"
    assert all(mora["vowel_length"] > 0 for mora in moras)


def test_読み仮名から音声合成クエリが取得できる(client: TestClient) -> None:
    response = client.post(
        "/audio_query", params={"text": "テ'ストデス", "speaker": 0, "is_kana": True}
    )
    assert response.status_code == 200
    query = response.json()
    assert query["kana"] == "テ'ストデス"
    assert query["accent_phrases"][0]["accent"] == 1


def test_読み仮名が不正だとエラー(client: TestClient) -> None:
    response = client.post(
        "/audio_query", params={"text": "テストデス", "speaker": 0, "is_kana": True}
    )
    assert response.status_code == 400
    detail = response.json()["detail"]
    assert detail["error_name"] == "ACCENT_NOTFOUND"
    assert detail["error_args"] == {"text": "テストデス"}


def test_読み込まれていないスタイルを指定するとエラー(client: TestClient) -> None:
    response = client.post("/audio_query", params={"text": "テストです", "speaker": 100})
    assert response.status_code == 404
    assert response.json()["kind"] == "STYLE_NOT_FOUND"


def test_アクセント句が取得できる(client: TestClient) -> None:
    response = client.post(
        "/accent_phrases",
        params={"text": "テ'ストデス/ア'メ", "speaker": 1, "is_kana": True},
    )
    assert response.status_code == 200
    phrases = response.json()
    assert [phrase["accent"] for phrase in phrases] == [1, 1]
    assert all(
        mora["pitch"] > 0 for phrase in phrases for mora in phrase["moras"]
    )


def test_モーラの長さと音高を個別に更新できる(client: TestClient) -> None:
    phrases = _audio_query(client, "テストです")["accent_phrases"]

    length = client.post("/mora_length", params={"speaker": 1}, json=phrases)
    pitch = client.post("/mora_pitch", params={"speaker": 1}, json=phrases)
    data = client.post("/mora_data", params={"speaker": 1}, json=phrases)

    assert length.status_code == pitch.status_code == data.status_code == 200
    for i, phrase in enumerate(data.json()):
        for j, mora in enumerate(phrase["moras"]):
            length_mora = length.json()[i]["moras"][j]
            pitch_mora = pitch.json()[i]["moras"][j]
            assert mora["vowel_length"] == length_mora["vowel_length"]
            assert mora["pitch"] == pitch_mora["pitch"]
            # 長さのみの更新では音高は元の値のまま
            assert length_mora["pitch"] == phrases[i]["moras"][j]["pitch"]


def test_アクセント位置が不正なアクセント句はエラー(client: TestClient) -> None:
    phrases = _audio_query(client, "テストです")["accent_phrases"]
    phrases[0]["accent"] = 0
    response = client.post("/mora_data", params={"speaker": 0}, json=phrases)
    assert response.status_code == 422


@pytest.mark.parametrize("path", ["/mora_data", "/mora_length", "/mora_pitch"])
def test_モーラが空のアクセント句はエラー(client: TestClient, path: str) -> None:
    phrases = [{"moras": [], "accent": 1}]
    response = client.post(path, params={"speaker": 0}, json=phrases)
    assert response.status_code == 422


def test_モーラが空のアクセント句を含むクエリは音声合成できない(
    client: TestClient,
) -> None:
    query = _audio_query(client, "テストです")
    query["accent_phrases"].append({"moras": [], "accent": 1})
    response = client.post("/synthesis", params={"speaker": 0}, json=query)
    assert response.status_code == 422


@pytest.mark.parametrize("path", ["/mora_data", "/mora_length", "/mora_pitch"])
def test_未知の音素を含むアクセント句はエラー(client: TestClient, path: str) -> None:
    phrases = [
        {
            "moras": [{"text": "ア", "vowel": "zz", "vowel_length": 0.1, "pitch": 0}],
            "accent": 1,
        }
    ]
    response = client.post(path, params={"speaker": 0}, json=phrases)
    assert response.status_code == 422


def test_未知の子音を含むクエリは音声合成できない(client: TestClient) -> None:
    query = _audio_query(client, "テストです")
    query["accent_phrases"][0]["moras"][0]["consonant"] = "zz"
    response = client.post("/synthesis", params={"speaker": 0}, json=query)
    assert response.status_code == 422


def test_音声合成できる(client: TestClient) -> None:
    query = _audio_query(client, "テストです")
    response = client.post("/synthesis", params={"speaker": 0}, json=query)

    assert response.status_code == 200
    assert response.headers["content-type"] == "audio/wav"
    assert response.content[:4] == b"RIFF"
    assert response.content[8:12] == b"WAVE"


def test_テキストから直接音声合成できる(client: TestClient) -> None:
    query = _audio_query(client, "テストです")
    synthesis = client.post("/synthesis", params={"speaker": 0}, json=query)
    tts = client.post("/tts", params={"text": "テストです", "speaker": 0})

    assert tts.status_code == 200
    assert tts.content == synthesis.content


def test_疑問文の語尾の自動調整を無効にできる(client: TestClient) -> None:
    enabled = client.post(
        "/tts", params={"text": "テ'ストデスカ？", "speaker": 0, "is_kana": True}
    )
    disabled = client.post(
        "/tts",
        params={
            "text": "テ'ストデスカ？",
            "speaker": 0,
            "is_kana": True,
            "enable_interrogative_upspeak": False,
        },
    )
    assert enabled.status_code == disabled.status_code == 200
    # 語尾にモーラが追加される分だけ長くなる
    assert len(enabled.content) > len(disabled.content)
