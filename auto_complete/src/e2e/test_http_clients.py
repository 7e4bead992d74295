import pytest
import requests

from backend.errors import SourceError, TranscriptionError
from backend.generative import GenerativeClient
from backend.transcribe import Transcriber, transcribe_with_fallback
import backend.transcribe as T


class FakeResponse:
    def __init__(self, payload, status=200):
        self.payload = payload
        self.status_code = status

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.HTTPError(f"HTTP {self.status_code}")

    def json(self):
        if isinstance(self.payload, Exception):
            raise self.payload
        return self.payload


class FakeSession:
    def __init__(self, result):
        self.result = result
        self.calls = []

    def post(self, url, **kw):
        self.calls.append((url, kw))
        if isinstance(self.result, Exception):
            raise self.result
        return self.result

    def close(self):
        pass


def _client(result, **kw):
    http = FakeSession(result)
    return http, GenerativeClient(base_url="http://llm.local/", api_key="k", model="m",
                                  timeout_s=1.5, session=http, **kw)


@pytest.mark.e2e
def test_chat_completion_content_returned():
    http, c = _client(FakeResponse({"choices": [{"message": {"content": "help, helmet"}}]}))
    assert c.generate("prompt", max_tokens=20, temperature=0.3) == "help, helmet"
    url, kw = http.calls[0]
    assert url == "http://llm.local/v1/chat/completions"
    assert kw["json"]["model"] == "m"
    assert kw["json"]["messages"] == [{"role": "user", "content": "prompt"}]
    assert kw["json"]["max_tokens"] == 20
    assert kw["headers"]["Authorization"] == "Bearer k"
    assert kw["timeout"] == 1.5


@pytest.mark.e2e
@pytest.mark.parametrize("payload", [{"choices": [{"text": "a, b"}]}, {"text": "a, b"}, "a, b"])
def test_alternative_response_shapes(payload):
    _, c = _client(FakeResponse(payload))
    assert c.generate("p") == "a, b"


@pytest.mark.e2e
@pytest.mark.parametrize("result", [
    requests.Timeout("slow"),
    requests.ConnectionError("refused"),
    FakeResponse({}, status=500),
    FakeResponse(ValueError("not json")),
    FakeResponse({"unexpected": 1}),
])
def test_failures_become_source_errors(result):
    _, c = _client(result)
    with pytest.raises(SourceError):
        c.generate("p")


@pytest.mark.e2e
def test_missing_api_key_is_source_error():
    c = GenerativeClient(api_key="", session=FakeSession(FakeResponse("x")))
    with pytest.raises(SourceError):
        c.generate("p")


@pytest.mark.e2e
def test_transcriber_posts_multipart(monkeypatch):
    seen = {}

    def fake_post(url, **kw):
        seen["url"], seen["kw"] = url, kw
        return FakeResponse({"text": "  hello there "})

    monkeypatch.setattr(T.requests, "post", fake_post)
    t = Transcriber(base_url="http://stt.local", api_key="k", model="whisper-1", timeout_s=3)
    assert t.transcribe(b"abc", filename="a.webm", mimetype="audio/webm") == "hello there"
    assert seen["url"] == "http://stt.local/v1/audio/transcriptions"
    name, _, mime = seen["kw"]["files"]["file"]
    assert (name, mime) == ("a.webm", "audio/webm")
    assert seen["kw"]["data"]["model"] == "whisper-1"


@pytest.mark.e2e
def test_transcriber_http_error(monkeypatch):
    monkeypatch.setattr(T.requests, "post", lambda url, **kw: FakeResponse({}, status=503))
    t = Transcriber(base_url="http://stt.local", api_key="k")
    with pytest.raises(SourceError):
        t.transcribe(b"abc")


@pytest.mark.e2e
def test_fallback_only_when_configured():
    out = transcribe_with_fallback(None, b"x", fallback="placeholder")
    assert out.text == "placeholder" and out.note

    with pytest.raises(TranscriptionError):
        transcribe_with_fallback(None, b"x", fallback="")
