# backend/DB/memory_store.py
from __future__ import annotations
import threading
from dataclasses import replace
from typing import Dict, List, Optional
from .api import WordStore
from ..models import WordRecord, ContextRecord

class MemoryStore(WordStore):
    """Simple in-memory store (useful for tests or ephemeral runs)."""
    def __init__(self) -> None:
        self._words: Dict[str, WordRecord] = {}
        self._contexts: List[ContextRecord] = []
        self._lock = threading.Lock()

    # Words
    def upsert_word(self, word: str, context: str) -> WordRecord:
        key = word.lower()
        with self._lock:
            rec = self._words.get(key)
            if rec is None:
                rec = WordRecord(word=key, frequency=1, contexts=(context,))
            else:
                ctxs = rec.contexts if context in rec.contexts else rec.contexts + (context,)
                rec = replace(rec, frequency=rec.frequency + 1, contexts=ctxs)
            self._words[key] = rec
            return rec

    def get_word(self, word: str) -> Optional[WordRecord]:
        return self._words.get(word.lower())

    def search_prefix(self, prefix: str, limit: int) -> List[WordRecord]:
        pfx = prefix.lower()
        with self._lock:
            hits = [r for w, r in self._words.items() if w.startswith(pfx)]
        # frequency desc, then alphabetical for a stable order
        hits.sort(key=lambda r: (-r.frequency, r.word))
        return hits[:limit]

    def count_words(self) -> int:
        return len(self._words)

    # Contexts
    def add_context(self, record: ContextRecord) -> None:
        with self._lock:
            self._contexts.append(record)

    def find_contexts(self, fragment: str, limit: int) -> List[ContextRecord]:
        needle = fragment.casefold()
        out: List[ContextRecord] = []
        with self._lock:
            for rec in self._contexts:
                if needle in rec.sentence.casefold():
                    out.append(rec)
                    if len(out) >= limit:
                        break
        return out

    def count_contexts(self) -> int:
        return len(self._contexts)

    def close(self) -> None:
        with self._lock:
            self._words.clear()
            self._contexts.clear()
