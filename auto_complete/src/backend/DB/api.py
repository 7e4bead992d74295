# backend/DB/api.py
from __future__ import annotations
import os
from typing import Protocol, List, Optional

from ..models import WordRecord, ContextRecord


class WordStore(Protocol):
    # Words
    def upsert_word(self, word: str, context: str) -> WordRecord: ...
    def get_word(self, word: str) -> Optional[WordRecord]: ...
    def search_prefix(self, prefix: str, limit: int) -> List[WordRecord]: ...
    def count_words(self) -> int: ...
    # Contexts
    def add_context(self, record: ContextRecord) -> None: ...
    def find_contexts(self, fragment: str, limit: int) -> List[ContextRecord]: ...
    def count_contexts(self) -> int: ...
    # lifecycle
    def close(self) -> None: ...


def make_store(dsn: str) -> WordStore:
    """
    Factory:
      - sqlite:///path -> SQLiteStore (file and schema created on first use)
      - memory://      -> MemoryStore
    """
    if dsn.startswith("sqlite:///"):
        path = dsn.removeprefix("sqlite:///")
        if path != ":memory:":
            os.makedirs(os.path.dirname(os.path.abspath(path)), exist_ok=True)
        # Lazy import to avoid a circular import through the Protocol
        from .sqlite_store import SQLiteStore
        return SQLiteStore(path)

    if dsn.startswith("memory://"):
        from .memory_store import MemoryStore
        return MemoryStore()

    raise ValueError(f"Unsupported store DSN: {dsn}")
