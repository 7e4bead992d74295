import pytest

from backend.normalize import merge_unique, parse_candidates, tokenize


@pytest.mark.e2e
def test_plain_comma_list():
    assert parse_candidates("help, helmet") == ["help", "helmet"]


@pytest.mark.e2e
def test_list_markers_quotes_and_case_are_cleaned():
    raw = '1. "Hello"\n2) Help.\n- helmet\n* HELIX!'
    assert parse_candidates(raw) == ["hello", "help", "helmet", "helix"]


@pytest.mark.e2e
def test_non_alphabetic_and_multiword_tokens_dropped():
    raw = "jumps, 42, ran away, sat, , c3po, don't"
    assert parse_candidates(raw) == ["jumps", "sat", "don't"]


@pytest.mark.e2e
def test_prefix_filter_applies_to_completions():
    assert parse_candidates("hello, world, help", prefix="HEL") == ["hello", "help"]


@pytest.mark.e2e
def test_empty_reply():
    assert parse_candidates("") == []
    assert parse_candidates("   ,  ,") == []


@pytest.mark.e2e
def test_merge_unique_keeps_first_seen_and_caps():
    out = merge_unique([["Hello", "help"], ["hello", "HELP", "helmet"], ["a", "b", "c"]], 5)
    assert out == ["Hello", "help", "helmet", "a", "b"]


@pytest.mark.e2e
def test_tokenize_strips_edge_punctuation():
    assert tokenize("The quick, brown fox.") == ["the", "quick", "brown", "fox"]
    assert tokenize(" -- ") == []
