"""Offline word tables used when no other source has an answer."""
from __future__ import annotations
from typing import Dict, List, Tuple

# Sentence openers, offered when nothing has been typed yet
STARTER_WORDS: Tuple[str, ...] = ("the", "i", "you", "it", "we", "they", "this", "that")

# Followers when the last word has no entry in NEXT_WORDS
GENERIC_NEXT: Tuple[str, ...] = ("and", "the", "to", "of", "in", "for", "with", "on")

NEXT_WORDS: Dict[str, Tuple[str, ...]] = {
    "the": ("cat", "dog", "house", "car", "book", "world", "time", "way"),
    "i": ("am", "was", "will", "have", "think", "want", "like", "need"),
    "you": ("are", "were", "will", "have", "can", "should", "want", "need"),
    "is": ("a", "an", "the", "not", "very", "quite", "really", "being"),
    "are": ("not", "you", "we", "they", "being", "going", "coming", "here"),
    "and": ("the", "i", "you", "we", "they", "it", "then", "now"),
    "to": ("be", "do", "go", "see", "get", "make", "take", "have"),
    "in": ("the", "a", "an", "this", "that", "order", "time", "fact"),
    "on": ("the", "a", "top", "time", "fire", "purpose", "earth", "board"),
    "at": ("the", "a", "least", "last", "first", "home", "work", "school"),
    "will": ("be", "have", "go", "come", "take", "make", "get", "see"),
    "can": ("be", "do", "go", "see", "get", "make", "take", "help"),
    "this": ("is", "was", "will", "can", "could", "should", "would", "might"),
    "that": ("is", "was", "will", "can", "could", "should", "would", "might"),
    "have": ("a", "an", "the", "been", "to", "not", "you", "they"),
    "with": ("a", "an", "the", "you", "me", "him", "her", "them"),
    "for": ("a", "an", "the", "you", "me", "him", "her", "them"),
    "it": ("is", "was", "will", "can", "could", "should", "would", "might"),
    "was": ("a", "an", "the", "not", "very", "quite", "really", "being"),
    "were": ("not", "you", "we", "they", "being", "going", "coming", "here"),
}

# Common English words, roughly by usefulness for completion
COMMON_WORDS: Tuple[str, ...] = tuple("""
the and that have for not with you this but his from they she her been than its who
use may water very what know just first get over think also your work life only can
still should after being now made before here through when where much back time good
way well new want because any these give day most world year come could see him two
how our out up other many then them would like into long make thing look more go do
take people hand place house great right small large help hello happy hope home heart
head health beautiful better best between big black blue book call car care carry case
change child clear close color company country course create different develop door
down during each early easy education end even every example experience fact family far
feel few find follow food form friend full game general government group grow happen
hard hear high history hold hour however human idea important include increase
information inside instead interest issue job keep kind language last late learn least
leave left less level light line list little live local love low machine major market
matter mean meet member method middle might mind minute miss model modern moment money
month morning mother move music must name nation natural nature near need never news
next nice night nothing number often once open order others outside own page paper
parent part party pass past pay peace person phone picture piece plan play point power
practice present pretty price problem process product program project public put
question quickly quite read ready real really reason remember report rest result return
road room rule run safe same save say school science second see sell send sense serve
service set several share short show side simple since sister sit situation size skill
smile social some someone something sometimes soon sort sound space speak special start
state stay step stop store story street strong student study subject success such
summer support sure system table talk teacher team tell test thank their there those
though thought three today together tonight too top town travel tree trip true try turn
under understand until upon used usually value view visit voice wait walk wall watch
week weight what when which while white whole why wife will win window wish within
without woman wonder word worker write wrong yes yet young yourself
""".split())


def complete_from_table(prefix: str, limit: int) -> List[str]:
    pfx = prefix.strip().lower()
    if not pfx:
        return []
    out: List[str] = []
    for w in COMMON_WORDS:
        if w.startswith(pfx) and w not in out:
            out.append(w)
            if len(out) >= limit:
                break
    return out


def next_from_table(last_word: str, limit: int) -> List[str]:
    return list(NEXT_WORDS.get(last_word.lower(), GENERIC_NEXT))[:limit]
