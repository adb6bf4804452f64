"""Name-to-label match scoring used by every search provider.

Scores:
- exact label or alias: 1.0
- one contains the other: 0.85
- word overlap: 0.5 to 0.85, proportional to the overlap
- partial words (shared prefixes): 0.35 to 0.6
- nothing in common: 0.0
"""

import re
from typing import Iterable, Set

EXACT_MATCH = 1.0
SUBSTRING_MATCH = 0.85
WORD_OVERLAP_BASE = 0.5
WORD_OVERLAP_SPAN = 0.35
PARTIAL_BASE = 0.35
PARTIAL_SPAN = 0.25

MIN_PREFIX = 4

_STOPWORDS = {"a", "an", "the", "of", "and", "or", "in", "on", "for", "to", "with"}


def _normalize(text: str) -> str:
    return " ".join(re.sub(r"[^\w\s]", " ", text.casefold()).split())


def _words(text: str) -> Set[str]:
    return {w for w in _normalize(text).split() if w not in _STOPWORDS}


def _prefix_match(a: str, b: str) -> bool:
    n = min(len(a), len(b))
    return n >= MIN_PREFIX and a[:n] == b[:n]


def match_score(query: str, label: str) -> float:
    """How well `label` names the same thing as `query`."""
    q, l = _normalize(query), _normalize(label)
    if not q or not l:
        return 0.0
    if q == l:
        return EXACT_MATCH
    if q in l or l in q:
        return SUBSTRING_MATCH

    q_words, l_words = _words(q), _words(l)
    if not q_words or not l_words:
        return 0.0
    shared = q_words & l_words
    if shared:
        ratio = len(shared) / max(len(q_words), len(l_words))
        return WORD_OVERLAP_BASE + WORD_OVERLAP_SPAN * ratio

    partial = {w for w in q_words if any(_prefix_match(w, o) for o in l_words)}
    if partial:
        ratio = len(partial) / len(q_words)
        return PARTIAL_BASE + PARTIAL_SPAN * ratio
    return 0.0


def best_match(query: str, labels: Iterable[str]) -> float:
    best = 0.0
    for label in labels:
        if not label:
            continue
        best = max(best, match_score(query, label))
        if best == EXACT_MATCH:
            break
    return best
