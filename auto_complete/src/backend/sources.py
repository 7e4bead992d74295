"""
Suggestion sources.

Every source answers the same two questions so the composer can treat the
store, the generative model and the offline tables alike:

  try_complete(prefix, context)  -> words that complete `prefix`
  try_next_words(context)        -> words that may follow `context`

A source may raise; the composer isolates failures per source.
"""
from __future__ import annotations
from typing import List, Protocol

from . import config as CFG
from .DB.api import WordStore
from .fallback import complete_from_table, next_from_table
from .generative import TextGenerator, completion_prompt, next_word_prompt
from .normalize import parse_candidates, tokenize


class SuggestionSource(Protocol):
    name: str
    def try_complete(self, prefix: str, context: str) -> List[str]: ...
    def try_next_words(self, context: str) -> List[str]: ...


class StoreSource:
    """Learned words ranked by frequency, plus followers mined from saved sentences."""
    name = "store"

    def __init__(self, store: WordStore) -> None:
        self.store = store

    def try_complete(self, prefix: str, context: str) -> List[str]:
        rows = self.store.search_prefix(prefix.strip().lower(), CFG.STORE_COMPLETION_LIMIT)
        return [r.word for r in rows]

    # /* ~~~ find the last two context tokens in saved sentences; collect what came next ~~~ */
    def try_next_words(self, context: str) -> List[str]:
        tail = tokenize(context)[-2:]
        if not tail:
            return []
        n = len(tail)
        records = self.store.find_contexts(" ".join(tail), CFG.CONTEXT_SCAN_LIMIT)

        followers: List[str] = []
        for rec in records:
            toks = tokenize(rec.sentence)
            for i in range(len(toks) - n):
                if toks[i:i + n] == tail:
                    nxt = toks[i + n]
                    if nxt not in followers:
                        followers.append(nxt)
                    if len(followers) >= CFG.CONTEXT_FOLLOWER_LIMIT:
                        return followers
        return followers


class GenerativeSource:
    """Candidates from a language model, cleaned of whatever formatting it adds."""
    name = "generative"

    def __init__(self, generator: TextGenerator) -> None:
        self.generator = generator

    def try_complete(self, prefix: str, context: str) -> List[str]:
        prompt = completion_prompt(prefix, context + prefix)
        raw = self.generator.generate(prompt, max_tokens=50, temperature=0.3)
        return parse_candidates(raw, prefix=prefix)

    def try_next_words(self, context: str) -> List[str]:
        raw = self.generator.generate(next_word_prompt(context), max_tokens=50, temperature=0.5)
        return parse_candidates(raw)


class StaticSource:
    """Fixed word tables; always available, lowest priority."""
    name = "static"

    def __init__(self, limit: int = CFG.MAX_SUGGESTIONS) -> None:
        self.limit = limit

    def try_complete(self, prefix: str, context: str) -> List[str]:
        return complete_from_table(prefix, self.limit)

    def try_next_words(self, context: str) -> List[str]:
        toks = tokenize(context)
        if not toks:
            return []
        return next_from_table(toks[-1], self.limit)
