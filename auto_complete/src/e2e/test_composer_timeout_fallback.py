import threading
import time

import pytest

from backend.composer import SuggestionComposer
from backend.DB.memory_store import MemoryStore
from backend.sources import GenerativeSource


class StallingLLM:
    """Blocks until released, like a model endpoint that never answers in time."""
    def __init__(self):
        self.release = threading.Event()

    def generate(self, prompt, *, max_tokens=50, temperature=0.5):
        self.release.wait(5)
        return "late, answer"


@pytest.fixture
def stalled():
    llm = StallingLLM()
    store = MemoryStore()
    comp = SuggestionComposer(store, generative=GenerativeSource(llm), generative_timeout_s=0.1)
    try:
        yield store, comp
    finally:
        llm.release.set()
        comp.close()
        store.close()


@pytest.mark.e2e
def test_completion_timeout_returns_store_then_tables(stalled):
    store, comp = stalled
    store.upsert_word("helium", "")
    t0 = time.monotonic()
    out = comp.get_completions("hel")
    assert time.monotonic() - t0 < 2.0
    assert out == ["helium", "help", "hello"]
    assert "late" not in out


@pytest.mark.e2e
def test_next_word_timeout_returns_tables(stalled):
    _, comp = stalled
    t0 = time.monotonic()
    out = comp.get_next_word_suggestions("I think that")
    assert time.monotonic() - t0 < 2.0
    assert out == ["is", "was", "will", "can", "could"]


@pytest.mark.e2e
def test_hung_model_calls_do_not_starve_store_lookups(stalled):
    import backend.config as CFG
    store, comp = stalled
    comp.generative_timeout_s = 0.05
    store.upsert_word("helium", "")
    # every call leaves one model worker stuck; go well past the pool size
    for _ in range(CFG.GENERATIVE_WORKERS + 4):
        out = comp.get_completions("hel")
        assert out[0] == "helium"
        assert out == ["helium", "help", "hello"]
