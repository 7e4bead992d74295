# backend/engine.py
from __future__ import annotations

import os
import logging
from typing import Iterable, List, Optional, Tuple

from . import config as CFG
from .composer import SuggestionComposer
from .DB.api import WordStore, make_store
from .generative import GenerativeClient, TextGenerator
from .models import TextUpdate
from .session import Session, SessionRegistry
from .sources import GenerativeSource
from .state import TextState
from .transcribe import SpeechToText, Transcriber, Transcript, transcribe_with_fallback

log = logging.getLogger(__name__)


class Engine:
    """
    Thin orchestration layer that glues together:
      - word/context storage via a WordStore (SQLite or in-memory),
      - per-session text state (SessionRegistry / TextState),
      - suggestion merging (SuggestionComposer),
      - optional speech-to-text (Transcriber).

    Public API (used by CLI/Flask):
      * load(...):                 open storage, wire collaborators
      * add_character(ch):         type one character
      * remove_character():        backspace
      * process_suggestion(word):  accept a suggestion
      * current_text():            visible text, no suggestions
      * transcribe(audio):         replace the text with a transcription
      * reset():                   start the session over
      * shutdown():                close underlying resources

    After every edit the engine picks the suggestion mode from the state:
    a word in progress asks for completions, otherwise for next words.
    """

    # ------------- lifecycle -------------

    def __init__(self) -> None:
        self._store: Optional[WordStore] = None
        self.composer: Optional[SuggestionComposer] = None
        self.sessions: SessionRegistry = SessionRegistry()
        self._stt: Optional[SpeechToText] = None
        self._owned_client: Optional[GenerativeClient] = None

    # /* ~~~ Open storage and wire up the suggestion sources ~~~ */
    def load(
        self,
        *,
        db_dsn: Optional[str] = None,            # "sqlite:///./words.sqlite" or "memory://"
        generative: Optional[TextGenerator] = None,
        transcriber: Optional[SpeechToText] = None,
        boundaries: Optional[Iterable[str]] = None,
        generative_timeout_s: Optional[float] = None,
        use_generative: bool = True,
        verbose: bool = False,
    ) -> None:
        if verbose:
            logging.basicConfig(level=logging.INFO)
            os.environ["AUTOCOMPLETE_VERBOSE"] = "1"

        dsn = db_dsn or CFG.DB_DSN
        log.info("Initializing word store: %s", dsn)
        self._store = make_store(dsn)

        if generative is None and use_generative and CFG.OPENAI_API_KEY:
            self._owned_client = generative = GenerativeClient(timeout_s=generative_timeout_s)
        if generative is None:
            log.info("No generative service configured; using store and offline tables only")

        self.composer = SuggestionComposer(
            self._store,
            generative=GenerativeSource(generative) if generative is not None else None,
            generative_timeout_s=generative_timeout_s,
        )

        if transcriber is None and CFG.OPENAI_API_KEY:
            transcriber = Transcriber()
        self._stt = transcriber

        self.sessions = SessionRegistry(boundaries)
        log.info(
            "Engine load() complete: words=%d contexts=%d boundaries=%r",
            self._store.count_words(), self._store.count_contexts(), sorted(self.sessions.boundaries),
        )

    @property
    def store(self) -> WordStore:
        if self._store is None:
            raise RuntimeError("Engine not initialized. Call load() first.")
        return self._store

    # ------------- edits -------------

    def add_character(self, ch: str, *, session: Optional[str] = None) -> TextUpdate:
        s = self._session(session)
        with s.lock:
            prior = s.state.sentence
            committed = s.state.insert_character(ch)
            if committed:
                self.composer.commit_word(committed, prior)
                if ch in CFG.SENTENCE_TERMINATORS and CFG.RECORD_TYPED_CONTEXTS:
                    self.composer.record_context(_last_sentence(s.state.sentence))
            return self._update(s.state)

    def remove_character(self, *, session: Optional[str] = None) -> TextUpdate:
        s = self._session(session)
        with s.lock:
            s.state.delete_character()
            return self._update(s.state)

    def process_suggestion(self, suggestion: str, *, session: Optional[str] = None) -> TextUpdate:
        s = self._session(session)
        with s.lock:
            prior = s.state.accept_suggestion(suggestion)
            self.composer.commit_word(suggestion, prior)
            return self._update(s.state)

    def set_text(self, text: str, *, session: Optional[str] = None) -> TextUpdate:
        s = self._session(session)
        with s.lock:
            s.state.replace_sentence(text)
            return self._update(s.state)

    # /* ~~~ Speech in: transcribe, replace the buffer, remember the sentence ~~~ */
    def transcribe(
        self,
        audio: bytes,
        *,
        filename: str = "audio.wav",
        mimetype: str = "audio/wav",
        session: Optional[str] = None,
    ) -> Tuple[Transcript, TextUpdate]:
        transcript = transcribe_with_fallback(self._stt, audio, filename=filename, mimetype=mimetype)
        s = self._session(session)
        with s.lock:
            s.state.replace_sentence(transcript.text)
            self.composer.record_context(transcript.text)
            return transcript, self._update(s.state)

    def reset(self, *, session: Optional[str] = None) -> TextUpdate:
        s = self._session(session)
        with s.lock:
            s.state.reset()
            self.sessions.drop(s.id)
            return self._update(s.state)

    # ------------- queries -------------

    def current_text(self, *, session: Optional[str] = None) -> TextUpdate:
        s = self._session(session)
        with s.lock:
            return TextUpdate(s.state.visible_text, [], not s.state.is_word_in_progress())

    def suggestions_for(self, state: TextState) -> List[str]:
        if state.is_word_in_progress():
            return self.composer.get_completions(state.current_word, state.sentence)
        return self.composer.get_next_word_suggestions(state.sentence)

    # ------------- teardown -------------

    def shutdown(self) -> None:
        try:
            if self.composer:
                self.composer.close()
            if self._owned_client:
                self._owned_client.close()
            if self._store:
                self._store.close()
        finally:
            self._store = None
            self.composer = None
            self._owned_client = None
            log.info("Engine shutdown complete")

    # ------------- internals -------------

    def _session(self, sid: Optional[str]) -> Session:
        if self.composer is None:
            raise RuntimeError("Engine not initialized. Call load() first.")
        return self.sessions.get(sid)

    def _update(self, state: TextState) -> TextUpdate:
        return TextUpdate(
            current_text=state.visible_text,
            suggestions=self.suggestions_for(state),
            is_word_complete=not state.is_word_in_progress(),
        )


def _last_sentence(text: str) -> str:
    """The text after the previous sentence terminator (the one just typed is kept)."""
    body = text.rstrip()
    cut = max(body.rfind(t, 0, len(body) - 1) for t in CFG.SENTENCE_TERMINATORS)
    return body[cut + 1:].strip()
