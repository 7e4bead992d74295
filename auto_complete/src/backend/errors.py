from __future__ import annotations


class AssistError(Exception):
    """Base class for errors raised by the text-entry backend."""


class InvalidInputError(AssistError, ValueError):
    """Caller supplied input the state machine refuses (nothing is mutated)."""


class SourceError(AssistError):
    """A collaborator (store, generative service) could not answer."""


class TranscriptionError(SourceError):
    """The speech-to-text service failed and no fallback text is configured."""
