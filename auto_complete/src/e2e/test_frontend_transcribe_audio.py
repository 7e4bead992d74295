import base64
import io
import pytest
from backend.engine import Engine
from backend.errors import SourceError
from frontend.web import app as flask_app


class FakeSTT:
    def __init__(self, text=None):
        self.text = text
        self.calls = []

    def transcribe(self, audio, *, filename="audio.wav", mimetype="audio/wav"):
        self.calls.append((audio, filename, mimetype))
        if self.text is None:
            raise SourceError("stt offline")
        return self.text


def _client(stt):
    eng = Engine(); eng.load(db_dsn="memory://", transcriber=stt, use_generative=False)
    import frontend.web as webmod
    webmod._engine = eng
    return eng, flask_app.test_client()


@pytest.mark.e2e
def test_multipart_audio_is_transcribed():
    stt = FakeSTT("hello world")
    eng, client = _client(stt)
    try:
        rv = client.post(
            "/api/transcribe-audio",
            data={"audio": (io.BytesIO(b"RIFFdata"), "clip.webm", "audio/webm")},
            content_type="multipart/form-data",
        )
        assert rv.status_code == 200
        data = rv.get_json()
        assert data["transcription"] == "hello world"
        assert data["currentText"] == "hello world"
        assert isinstance(data["suggestions"], list) and data["suggestions"]
        assert "note" not in data
        assert stt.calls == [(b"RIFFdata", "clip.webm", "audio/webm")]
    finally:
        eng.shutdown()


@pytest.mark.e2e
def test_json_base64_audio_fallback():
    stt = FakeSTT("typed by voice")
    eng, client = _client(stt)
    try:
        rv = client.post("/api/transcribe-audio", json={"audio": base64.b64encode(b"abc").decode()})
        assert rv.status_code == 200
        assert rv.get_json()["currentText"] == "typed by voice"
        assert stt.calls[0][0] == b"abc"
    finally:
        eng.shutdown()


@pytest.mark.e2e
@pytest.mark.parametrize("kwargs", [
    {"data": {"note": "no file attached"}, "content_type": "multipart/form-data"},
    {"json": {}},
    {"json": {"audio": "***not base64***"}},
])
def test_missing_or_bad_audio_is_400(kwargs):
    stt = FakeSTT("never")
    eng, client = _client(stt)
    try:
        rv = client.post("/api/transcribe-audio", **kwargs)
        assert rv.status_code == 400
        assert "error" in rv.get_json()
        assert stt.calls == []
    finally:
        eng.shutdown()


@pytest.mark.e2e
def test_failed_transcription_uses_flagged_fallback(monkeypatch):
    import backend.config as CFG
    monkeypatch.setattr(CFG, "TRANSCRIPTION_FALLBACK", "Hello world this is a test")
    eng, client = _client(FakeSTT(None))
    try:
        rv = client.post("/api/transcribe-audio", json={"audio": base64.b64encode(b"x").decode()})
        assert rv.status_code == 200
        data = rv.get_json()
        assert data["transcription"] == "Hello world this is a test"
        assert "note" in data
    finally:
        eng.shutdown()


@pytest.mark.e2e
def test_failed_transcription_without_fallback_is_502(monkeypatch):
    import backend.config as CFG
    monkeypatch.setattr(CFG, "TRANSCRIPTION_FALLBACK", "")
    eng, client = _client(FakeSTT(None))
    try:
        rv = client.post("/api/transcribe-audio", json={"audio": base64.b64encode(b"x").decode()})
        assert rv.status_code == 502
        assert "error" in rv.get_json()
    finally:
        eng.shutdown()
