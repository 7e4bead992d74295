# backend/composer.py
from __future__ import annotations

import logging
import time
from concurrent.futures import Future, ThreadPoolExecutor, TimeoutError as FutureTimeout
from typing import Callable, List, Optional

from . import config as CFG
from .DB.api import WordStore
from .fallback import STARTER_WORDS
from .models import ContextRecord
from .normalize import merge_unique
from .sources import StaticSource, StoreSource, SuggestionSource

log = logging.getLogger(__name__)


class SuggestionComposer:
    """
    Merges suggestions from up to three sources:
      - store:      learned words / saved sentences (always queried)
      - generative: language model (optional, time-bounded)
      - static:     offline tables, only used when the generative source
                    failed, timed out or had nothing to say

    Store and generative queries run concurrently; results are merged by
    source precedence, never by completion order. A failing source adds
    nothing and is logged.
    """

    def __init__(
        self,
        store: WordStore,
        *,
        generative: Optional[SuggestionSource] = None,
        static: Optional[SuggestionSource] = None,
        generative_timeout_s: Optional[float] = None,
        store_timeout_s: Optional[float] = None,
        max_suggestions: int = CFG.MAX_SUGGESTIONS,
    ) -> None:
        self.store = store
        self.store_source: SuggestionSource = StoreSource(store)
        self.generative = generative
        self.static: SuggestionSource = static if static is not None else StaticSource(max_suggestions)
        self.generative_timeout_s = CFG.GENERATIVE_TIMEOUT_S if generative_timeout_s is None else generative_timeout_s
        self.store_timeout_s = CFG.STORE_TIMEOUT_S if store_timeout_s is None else store_timeout_s
        self.max_suggestions = max_suggestions
        # one pool per source: a model call that outlives its deadline keeps
        # its worker, and must never queue ahead of a store lookup
        self._store_pool = ThreadPoolExecutor(max_workers=CFG.STORE_WORKERS, thread_name_prefix="suggest-store")
        self._gen_pool = ThreadPoolExecutor(max_workers=CFG.GENERATIVE_WORKERS, thread_name_prefix="suggest-gen")

    # ------------- queries -------------

    # /* ~~~ Words completing the in-progress prefix: store, then model, then tables ~~~ */
    def get_completions(self, prefix: str, sentence: str = "") -> List[str]:
        if not prefix or not prefix.strip():
            return []

        start = time.monotonic()
        store_f = self._store_pool.submit(self.store_source.try_complete, prefix, sentence)
        gen_f = self._gen_pool.submit(self.generative.try_complete, prefix, sentence) if self.generative else None

        from_store = self._collect(store_f, self.store_source, start + self.store_timeout_s) or []
        from_model = self._collect(gen_f, self.generative, start + self.generative_timeout_s) if gen_f else None

        groups = [from_store, from_model or []]
        if not from_model:
            groups.append(self._ask_static(self.static.try_complete, prefix, sentence))
        return merge_unique(groups, self.max_suggestions)

    # /* ~~~ Words to follow a finished fragment: model, then saved sentences, then tables ~~~ */
    def get_next_word_suggestions(self, context: str) -> List[str]:
        if not context or not context.strip():
            return list(STARTER_WORDS[: self.max_suggestions])

        start = time.monotonic()
        gen_f = self._gen_pool.submit(self.generative.try_next_words, context) if self.generative else None
        store_f = self._store_pool.submit(self.store_source.try_next_words, context)

        from_model = self._collect(gen_f, self.generative, start + self.generative_timeout_s) if gen_f else None
        from_store = self._collect(store_f, self.store_source, start + self.store_timeout_s) or []

        groups = [from_model or [], from_store]
        if not from_model:
            groups.append(self._ask_static(self.static.try_next_words, context))
        return merge_unique(groups, self.max_suggestions)

    # ------------- persistence -------------

    def commit_word(self, word: str, context: str) -> None:
        """Count one use of `word` and remember the sentence it appeared in."""
        word = word.strip()
        if not word:
            return
        try:
            rec = self.store.upsert_word(word.lower(), context)
            log.info("committed %r (frequency=%d)", rec.word, rec.frequency)
        except Exception as e:
            log.warning("could not save word %r: %s", word, e)

    def record_context(self, sentence: str) -> None:
        """Save a whole sentence so later fragments can be continued from it."""
        if not sentence.strip():
            return
        try:
            self.store.add_context(ContextRecord.from_sentence(sentence.strip()))
        except Exception as e:
            log.warning("could not save context %r: %s", sentence[:60], e)

    # ------------- teardown -------------

    def close(self) -> None:
        # late generative calls are abandoned, not awaited
        self._store_pool.shutdown(wait=False, cancel_futures=True)
        self._gen_pool.shutdown(wait=False, cancel_futures=True)

    # ------------- internals -------------

    def _collect(self, fut: Future, source: SuggestionSource, deadline: float) -> Optional[List[str]]:
        """Result of one source, or None when it failed or missed its deadline."""
        try:
            return list(fut.result(timeout=max(0.0, deadline - time.monotonic())))
        except FutureTimeout:
            fut.cancel()
            log.warning("%s source timed out; continuing without it", source.name)
        except Exception as e:
            log.warning("%s source failed: %s", source.name, e)
        return None

    def _ask_static(self, fn: Callable[..., List[str]], *args) -> List[str]:
        try:
            return list(fn(*args))
        except Exception as e:
            log.warning("%s source failed: %s", self.static.name, e)
            return []
