"""Speech-to-text: audio bytes in, text out (Whisper-compatible HTTP API)."""
from __future__ import annotations
import io
import logging
from dataclasses import dataclass
from typing import Optional, Protocol

import requests

from . import config as CFG
from .errors import SourceError, TranscriptionError

log = logging.getLogger(__name__)


class SpeechToText(Protocol):
    def transcribe(self, audio: bytes, *, filename: str = "audio.wav", mimetype: str = "audio/wav") -> str: ...


@dataclass(frozen=True)
class Transcript:
    text: str
    note: Optional[str] = None    # set when the fallback text was used


class Transcriber:
    """Posts audio to /v1/audio/transcriptions and returns the plain text."""

    def __init__(
        self,
        base_url: Optional[str] = None,
        api_key: Optional[str] = None,
        model: Optional[str] = None,
        timeout_s: Optional[float] = None,
    ) -> None:
        self.base_url = (base_url or CFG.OPENAI_BASE_URL).rstrip("/")
        self.api_key = CFG.OPENAI_API_KEY if api_key is None else api_key
        self.model = model or CFG.TRANSCRIPTION_MODEL
        self.timeout_s = CFG.TRANSCRIPTION_TIMEOUT_S if timeout_s is None else timeout_s

    @property
    def url(self) -> str:
        return f"{self.base_url}/v1/audio/transcriptions"

    def transcribe(self, audio: bytes, *, filename: str = "audio.wav", mimetype: str = "audio/wav") -> str:
        if not self.api_key:
            raise SourceError("transcription service not configured (OPENAI_API_KEY is empty)")

        files = {"file": (filename, io.BytesIO(audio), mimetype)}
        data = {"model": self.model, "response_format": "json"}
        headers = {"Authorization": f"Bearer {self.api_key}"}
        try:
            resp = requests.post(self.url, files=files, data=data, headers=headers, timeout=self.timeout_s)
            resp.raise_for_status()
            body = resp.json()
        except (requests.RequestException, ValueError) as e:
            raise SourceError(f"transcription request failed: {e}") from e

        text = body.get("text") if isinstance(body, dict) else None
        if not isinstance(text, str):
            raise SourceError("transcription response has no text")
        return text.strip()


def transcribe_with_fallback(
    stt: Optional[SpeechToText],
    audio: bytes,
    *,
    filename: str = "audio.wav",
    mimetype: str = "audio/wav",
    fallback: Optional[str] = None,
) -> Transcript:
    """Run stt; on failure use the configured fallback text, flagged with a note."""
    fallback = CFG.TRANSCRIPTION_FALLBACK if fallback is None else fallback
    try:
        if stt is None:
            raise SourceError("no transcription service configured")
        return Transcript(stt.transcribe(audio, filename=filename, mimetype=mimetype))
    except SourceError as e:
        if not fallback:
            raise TranscriptionError(str(e)) from e
        log.warning("transcription failed, using fallback text: %s", e)
        return Transcript(fallback, note="Transcription unavailable; fallback text was used")
