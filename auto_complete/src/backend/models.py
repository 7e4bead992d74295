from __future__ import annotations
from dataclasses import dataclass, field
from typing import List, Tuple
import time

@dataclass(frozen=True)
class WordRecord:
    word: str                     # lowercase, unique key
    frequency: int = 1            # usage count, +1 per commit
    contexts: Tuple[str, ...] = ()  # distinct sentences the word was seen in
    created_at: float = field(default_factory=time.time)

@dataclass(frozen=True)
class ContextRecord:
    sentence: str                 # full text at time of save
    words: Tuple[str, ...] = ()   # whitespace tokenization of sentence
    created_at: float = field(default_factory=time.time)

    @classmethod
    def from_sentence(cls, sentence: str) -> "ContextRecord":
        return cls(sentence=sentence, words=tuple(sentence.split()))

@dataclass(frozen=True)
class TextUpdate:
    current_text: str
    suggestions: List[str]
    is_word_complete: bool        # True when no word is in progress

    def to_json(self) -> dict:
        return {
            "currentText": self.current_text,
            "suggestions": list(self.suggestions),
            "isWordComplete": self.is_word_complete,
        }
