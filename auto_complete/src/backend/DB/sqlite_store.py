# backend/DB/sqlite_store.py
from __future__ import annotations
import json
import sqlite3
import threading
import time
from typing import List, Optional
from .api import WordStore
from ..models import WordRecord, ContextRecord

_SCHEMA = """
CREATE TABLE IF NOT EXISTS words (
  word TEXT PRIMARY KEY,
  frequency INTEGER NOT NULL DEFAULT 1,
  created_at REAL NOT NULL
);
CREATE TABLE IF NOT EXISTS word_contexts (
  id INTEGER PRIMARY KEY AUTOINCREMENT,
  word TEXT NOT NULL REFERENCES words(word),
  context TEXT NOT NULL,
  UNIQUE(word, context)
);
CREATE TABLE IF NOT EXISTS contexts (
  id INTEGER PRIMARY KEY AUTOINCREMENT,
  sentence TEXT NOT NULL,
  folded TEXT NOT NULL,
  words TEXT NOT NULL,
  created_at REAL NOT NULL
);
CREATE INDEX IF NOT EXISTS words_by_frequency ON words(frequency DESC);
"""

# /* ~~~ one statement: insert at 1 or bump in place (no read-then-write race) ~~~ */
_UPSERT_WORD = (
    "INSERT INTO words(word, frequency, created_at) VALUES (?, 1, ?) "
    "ON CONFLICT(word) DO UPDATE SET frequency = frequency + 1"
)

class SQLiteStore(WordStore):
    """Word/context persistence on a single SQLite file."""
    def __init__(self, db_path: str) -> None:
        self.db_path = db_path
        # shared across request threads and the suggestion pool; guarded by _lock
        self.conn: sqlite3.Connection = sqlite3.connect(db_path, check_same_thread=False)
        self._lock = threading.Lock()
        with self._lock:
            self.conn.executescript(_SCHEMA)
            self._add_folded_column()
            self.conn.commit()

    # ---- Words ----
    def upsert_word(self, word: str, context: str) -> WordRecord:
        key = word.lower()
        with self._lock, self.conn:
            self.conn.execute(_UPSERT_WORD, (key, time.time()))
            self.conn.execute(
                "INSERT OR IGNORE INTO word_contexts(word, context) VALUES (?, ?)",
                (key, context),
            )
            rec = self._read_word(key)
        assert rec is not None
        return rec

    def get_word(self, word: str) -> Optional[WordRecord]:
        with self._lock:
            return self._read_word(word.lower())

    def search_prefix(self, prefix: str, limit: int) -> List[WordRecord]:
        pfx = prefix.lower()
        with self._lock:
            rows = self.conn.execute(
                "SELECT word FROM words WHERE substr(word, 1, ?) = ? "
                "ORDER BY frequency DESC, word ASC LIMIT ?",
                (len(pfx), pfx, int(limit)),
            ).fetchall()
            out = [self._read_word(w) for (w,) in rows]
        return [r for r in out if r is not None]

    def count_words(self) -> int:
        with self._lock:
            return self.conn.execute("SELECT COUNT(*) FROM words").fetchone()[0]

    # ---- Contexts ----
    def add_context(self, record: ContextRecord) -> None:
        with self._lock, self.conn:
            self.conn.execute(
                "INSERT INTO contexts(sentence, folded, words, created_at) VALUES (?,?,?,?)",
                (record.sentence, record.sentence.casefold(), json.dumps(list(record.words)), record.created_at),
            )

    def find_contexts(self, fragment: str, limit: int) -> List[ContextRecord]:
        # sqlite lower() only folds ASCII, so match against the Python-folded copy
        with self._lock:
            rows = self.conn.execute(
                "SELECT sentence, words, created_at FROM contexts "
                "WHERE instr(folded, ?) > 0 ORDER BY id LIMIT ?",
                (fragment.casefold(), int(limit)),
            ).fetchall()
        return [ContextRecord(s, tuple(json.loads(w)), ts) for s, w, ts in rows]

    def count_contexts(self) -> int:
        with self._lock:
            return self.conn.execute("SELECT COUNT(*) FROM contexts").fetchone()[0]

    # ---- lifecycle ----
    def close(self) -> None:
        with self._lock:
            self.conn.close()

    # ---- internals (caller holds _lock) ----
    def _read_word(self, key: str) -> Optional[WordRecord]:
        row = self.conn.execute(
            "SELECT word, frequency, created_at FROM words WHERE word=?", (key,)
        ).fetchone()
        if row is None:
            return None
        ctxs = self.conn.execute(
            "SELECT context FROM word_contexts WHERE word=? ORDER BY id", (key,)
        ).fetchall()
        return WordRecord(word=row[0], frequency=row[1],
                          contexts=tuple(c for (c,) in ctxs), created_at=row[2])

    def _add_folded_column(self) -> None:
        cols = {row[1] for row in self.conn.execute("PRAGMA table_info(contexts)")}
        if "folded" in cols:
            return
        # files written before the folded copy existed
        self.conn.execute("ALTER TABLE contexts ADD COLUMN folded TEXT NOT NULL DEFAULT ''")
        rows = self.conn.execute("SELECT id, sentence FROM contexts").fetchall()
        self.conn.executemany(
            "UPDATE contexts SET folded=? WHERE id=?", [(s.casefold(), i) for i, s in rows]
        )
