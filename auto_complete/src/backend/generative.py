"""Generative suggestion client: asks an LLM for candidate words."""
from __future__ import annotations
import logging
from typing import Optional, Protocol

import requests

from . import config as CFG
from .errors import SourceError

log = logging.getLogger(__name__)


class TextGenerator(Protocol):
    """Anything that turns a prompt into comma-separated candidate text."""
    def generate(self, prompt: str, *, max_tokens: int = 50, temperature: float = 0.5) -> str: ...


class GenerativeClient:
    """Client for an OpenAI-compatible chat completions endpoint."""

    def __init__(
        self,
        base_url: Optional[str] = None,
        api_key: Optional[str] = None,
        model: Optional[str] = None,
        timeout_s: Optional[float] = None,
        session: Optional[requests.Session] = None,
    ) -> None:
        self.base_url = (base_url or CFG.OPENAI_BASE_URL).rstrip("/")
        self.api_key = CFG.OPENAI_API_KEY if api_key is None else api_key
        self.model = model or CFG.GENERATIVE_MODEL
        self.timeout_s = CFG.GENERATIVE_TIMEOUT_S if timeout_s is None else timeout_s
        self._http = session or requests.Session()

    @property
    def url(self) -> str:
        return f"{self.base_url}/v1/chat/completions"

    def generate(self, prompt: str, *, max_tokens: int = 50, temperature: float = 0.5) -> str:
        """Send one user message and return the raw reply text.

        Raises SourceError on any transport, HTTP or format problem; callers
        decide how to degrade.
        """
        if not self.api_key:
            raise SourceError("generative service not configured (OPENAI_API_KEY is empty)")

        payload = {
            "model": self.model,
            "messages": [{"role": "user", "content": prompt}],
            "max_tokens": max_tokens,
            "temperature": temperature,
        }
        headers = {"Authorization": f"Bearer {self.api_key}"}
        try:
            resp = self._http.post(self.url, json=payload, headers=headers, timeout=self.timeout_s)
            resp.raise_for_status()
            data = resp.json()
        except requests.Timeout as e:
            raise SourceError(f"generative request timed out after {self.timeout_s}s") from e
        except requests.ConnectionError as e:
            raise SourceError(f"generative service unreachable at {self.url}") from e
        except (requests.RequestException, ValueError) as e:
            raise SourceError(f"generative request failed: {e}") from e

        text = self._extract_text(data)
        if text is None:
            raise SourceError(f"unexpected generative response: {type(data).__name__}")
        log.debug("generative reply for %r: %r", prompt[:60], text)
        return text

    @staticmethod
    def _extract_text(data) -> Optional[str]:
        """
        Supports:
        - {"choices": [{"message": {"content": "..."}}]}
        - {"choices": [{"text": "..."}]}
        - {"text": "..."} / {"output": "..."} / plain string
        """
        if isinstance(data, str):
            return data
        if not isinstance(data, dict):
            return None

        choices = data.get("choices")
        if isinstance(choices, list):
            for choice in choices:
                if not isinstance(choice, dict):
                    continue
                msg = choice.get("message")
                if isinstance(msg, dict) and isinstance(msg.get("content"), str):
                    return msg["content"]
                if isinstance(choice.get("text"), str):
                    return choice["text"]

        for key in ("text", "output", "completion"):
            if isinstance(data.get(key), str):
                return data[key]
        return None

    def close(self) -> None:
        self._http.close()


# /* ~~~ prompts ~~~ */

def completion_prompt(prefix: str, context: str, n: int = CFG.GENERATIVE_CANDIDATES) -> str:
    return (
        f'Complete the word that starts with "{prefix}" in this context: "{context}". '
        f'Provide {n} most likely word completions that start with "{prefix}". '
        "Return only the complete words separated by commas, no explanations."
    )

def next_word_prompt(context: str, n: int = CFG.GENERATIVE_CANDIDATES) -> str:
    return (
        f'Given this text: "{context}", suggest {n} most probable next words '
        "that would naturally continue it. "
        "Return only the words separated by commas, no explanations."
    )
