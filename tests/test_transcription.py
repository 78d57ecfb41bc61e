import base64

import pytest

from app.main import app as fastapi_app
from app.transcriptionsystem.groq_transcription_client import TranscriptionUnavailable
from app.transcriptionsystem.routes import get_transcription_client

AUDIO = b"\x00\x00\x00\x20ftypM4A fake audio payload"


class FakeTranscriber:
    def __init__(self, error=None):
        self.error = error
        self.calls = []

    async def transcribe(self, audio, platform="android"):
        self.calls.append((audio, platform))
        if self.error:
            raise self.error
        return {"text": "Patient reports fever for three days", "success": True, "duration": 412}


@pytest.fixture()
def transcriber(client):
    fake = FakeTranscriber()
    fastapi_app.dependency_overrides[get_transcription_client] = lambda: fake
    return fake


async def test_transcribe_audio(client, doctor_headers, transcriber):
    payload = {"audioBase64": base64.b64encode(AUDIO).decode(), "platform": "ios"}

    response = await client.post("/transcription/transcribe", json=payload, headers=doctor_headers)

    assert response.status_code == 200
    assert response.json() == {"text": "Patient reports fever for three days", "success": True, "duration": 412}
    assert transcriber.calls == [(AUDIO, "ios")]


async def test_transcribe_accepts_data_url(client, doctor_headers, transcriber):
    data_url = "data:audio/m4a;base64," + base64.b64encode(AUDIO).decode()

    response = await client.post("/transcription/transcribe", json={"audioBase64": data_url}, headers=doctor_headers)

    assert response.status_code == 200
    assert transcriber.calls == [(AUDIO, "android")]


async def test_transcribe_rejects_invalid_base64(client, doctor_headers, transcriber):
    response = await client.post(
        "/transcription/transcribe", json={"audioBase64": "not base64!!"}, headers=doctor_headers
    )

    assert response.status_code == 400
    assert response.json()["message"] == "audioBase64 is not valid base64"
    assert transcriber.calls == []


async def test_transcribe_rejects_unknown_platform(client, doctor_headers, transcriber):
    payload = {"audioBase64": base64.b64encode(AUDIO).decode(), "platform": "symbian"}

    response = await client.post("/transcription/transcribe", json=payload, headers=doctor_headers)

    assert response.status_code == 400


async def test_transcribe_requires_authentication(client, transcriber):
    payload = {"audioBase64": base64.b64encode(AUDIO).decode()}

    response = await client.post("/transcription/transcribe", json=payload)

    assert response.status_code == 401


async def test_upstream_failure_is_503(client, doctor_headers, transcriber):
    transcriber.error = TranscriptionUnavailable("Groq API failed: timeout")
    payload = {"audioBase64": base64.b64encode(AUDIO).decode()}

    response = await client.post("/transcription/transcribe", json=payload, headers=doctor_headers)

    assert response.status_code == 503
    assert response.json()["message"] == "Groq API failed: timeout"


async def test_missing_groq_key_is_503(client, doctor_headers):
    payload = {"audioBase64": base64.b64encode(AUDIO).decode()}

    response = await client.post("/transcription/transcribe", json=payload, headers=doctor_headers)

    assert response.status_code == 503
    assert response.json()["message"] == "GROQ_API_KEY not configured in environment"
