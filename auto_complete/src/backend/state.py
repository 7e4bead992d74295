"""Text-entry state: the committed sentence plus the word being typed."""
from __future__ import annotations
from typing import Iterable, Optional

from . import config as CFG
from .errors import InvalidInputError


class TextState:
    """
    Tracks what the user has typed, one character at a time.

      sentence      completed text: committed words with their boundary chars
      current_word  the in-progress word (never holds a boundary char)

    The visible text is always sentence + current_word. There are two
    implicit states, "word in progress" and "between words", decided only
    by whether current_word is empty.
    """

    def __init__(self, boundaries: Optional[Iterable[str]] = None) -> None:
        self.boundaries: frozenset[str] = frozenset(
            CFG.BOUNDARY_CHARS if boundaries is None else boundaries
        )
        self.sentence: str = ""
        self.current_word: str = ""

    # ------------- queries -------------

    @property
    def visible_text(self) -> str:
        return self.sentence + self.current_word

    def get_visible_text(self) -> str:
        return self.visible_text

    def is_word_in_progress(self) -> bool:
        return bool(self.current_word)

    def is_boundary(self, ch: str) -> bool:
        return ch in self.boundaries

    # ------------- edits -------------

    # /* ~~~ Add one character; return the committed word when a boundary closes one ~~~ */
    def insert_character(self, ch: str) -> Optional[str]:
        if not isinstance(ch, str) or len(ch) != 1:
            raise InvalidInputError("Character must be a single string character")

        if not self.is_boundary(ch):
            self.current_word += ch
            return None

        word = self.current_word.strip()
        # blank leftovers (e.g. a tab when tabs are not boundaries) flush without a commit
        self.sentence += self.current_word + ch
        self.current_word = ""
        return word or None

    # /* ~~~ Backspace; crossing a boundary brings the whole previous word back ~~~ */
    def delete_character(self) -> None:
        if self.current_word:
            self.current_word = self.current_word[:-1]
            return
        if not self.sentence:
            return

        removed = self.sentence[-1]
        self.sentence = self.sentence[:-1]
        if not self.is_boundary(removed):
            return

        i = len(self.sentence)
        while i > 0 and not self._separates(self.sentence[i - 1]):
            i -= 1
        if i < len(self.sentence):
            self.current_word = self.sentence[i:]
            self.sentence = self.sentence[:i]

    def replace_sentence(self, text: str) -> None:
        """Swap the whole buffer (e.g. for a transcription); no word stays in progress."""
        self.sentence = text
        self.current_word = ""

    # /* ~~~ Apply a chosen suggestion; return the sentence as it was before ~~~ */
    def accept_suggestion(self, chosen: str) -> str:
        if not isinstance(chosen, str) or not chosen.strip():
            raise InvalidInputError("Suggestion must be a non-empty string")

        prior = self.sentence
        if self.current_word:
            # the chosen word replaces the typed prefix wholesale
            self.sentence += chosen
            self.current_word = ""
        else:
            if self.sentence and not self.sentence[-1].isspace():
                self.sentence += " "
            self.sentence += chosen
        return prior

    def reset(self) -> None:
        self.sentence = ""
        self.current_word = ""

    # ------------- internals -------------

    def _separates(self, ch: str) -> bool:
        return ch.isspace() or self.is_boundary(ch)

    def __repr__(self) -> str:
        return f"TextState(sentence={self.sentence!r}, current_word={self.current_word!r})"
