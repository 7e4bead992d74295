"""Text-entry state machine and suggestion engine."""
from .engine import Engine
from .errors import AssistError, InvalidInputError, SourceError, TranscriptionError
from .models import ContextRecord, TextUpdate, WordRecord
from .state import TextState

__all__ = [
    "Engine", "TextState", "TextUpdate", "WordRecord", "ContextRecord",
    "AssistError", "InvalidInputError", "SourceError", "TranscriptionError",
]
