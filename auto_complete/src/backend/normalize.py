from __future__ import annotations
import re
from typing import Iterable, List, Optional

# /* ~~~ list markers an LLM likes to prepend: "1.", "2)", "-", "*" ~~~ */
_LIST_MARKER = re.compile(r"^\s*(?:\d+[.)]|[-*•])\s*")
_SPLIT = re.compile(r"[,\n;]+")
_ALPHA = re.compile(r"[a-z]+(?:'[a-z]+)?")

def _is_word_char(ch: str) -> bool:
    """Letters, digits and the apostrophe belong to a word; everything else is edge noise."""
    return ch.isalnum() or ch == "'"

def clean_token(tok: str) -> str:
    """Lowercase a token and strip punctuation/quotes from both ends."""
    s = tok.strip().casefold()
    i, j = 0, len(s)
    while i < j and not _is_word_char(s[i]):
        i += 1
    while j > i and not _is_word_char(s[j - 1]):
        j -= 1
    return s[i:j]

def tokenize(text: str) -> List[str]:
    """Whitespace tokens, cleaned; empty leftovers are dropped."""
    return [t for t in (clean_token(w) for w in text.split()) if t]

def parse_candidates(raw: str, *, prefix: Optional[str] = None) -> List[str]:
    """
    Turn free-form model output ("hello, help, 2. helmet") into clean words.
    Rules:
      * split on commas, semicolons and newlines
      * drop list markers, quotes and surrounding punctuation
      * keep purely alphabetic words (one inner apostrophe allowed)
      * with a prefix, keep only words starting with it (case-insensitive)
    Order is preserved; duplicates are left for the merge step.
    """
    out: List[str] = []
    if not raw:
        return out
    pfx = prefix.strip().casefold() if prefix else ""
    for part in _SPLIT.split(raw):
        tok = clean_token(_LIST_MARKER.sub("", part))
        if not tok or not _ALPHA.fullmatch(tok):
            continue
        if pfx and not tok.startswith(pfx):
            continue
        out.append(tok)
    return out

def merge_unique(groups: Iterable[Iterable[str]], limit: int) -> List[str]:
    """Concatenate groups in order, dropping case-insensitive repeats; cap at limit."""
    seen: set[str] = set()
    out: List[str] = []
    for group in groups:
        for s in group:
            key = s.strip().casefold()
            if not key or key in seen:
                continue
            seen.add(key)
            out.append(s.strip())
            if len(out) >= limit:
                return out
    return out
