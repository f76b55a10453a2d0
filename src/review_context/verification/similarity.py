"""String similarity heuristics used for duplicate detection and relocation.

All scores are in ``[0, 1]``. The three fuzzy heuristics are combined with
``max`` so that reordered, partially overlapping and set-wise similar texts
all register as close.
"""

import re

from rapidfuzz import fuzz
from rapidfuzz.utils import default_process

_NORMALIZE_RE = re.compile(r"[^a-z0-9\s]")
_WHITESPACE_RE = re.compile(r"\s+")


def process(text: str) -> str:
    """Lower-case, replace non-alphanumeric characters with spaces and trim."""
    return default_process(text)


def _score(scorer, a: str, b: str) -> float:
    # empty input scores zero rather than rapidfuzz's empty-vs-empty 100
    if not process(a) or not process(b):
        return 0.0
    return scorer(a, b, processor=default_process) / 100


def ratio(a: str, b: str) -> float:
    """Plain sequence similarity; 0.0 when either side is empty."""
    return _score(fuzz.ratio, a, b)


def token_sort_ratio(a: str, b: str) -> float:
    """Similarity of the two texts with their tokens sorted (order-insensitive)."""
    return _score(fuzz.token_sort_ratio, a, b)


def partial_ratio(a: str, b: str) -> float:
    """Best similarity of the shorter text against same-length windows of the longer."""
    return _score(fuzz.partial_ratio, a, b)


def token_set_ratio(a: str, b: str) -> float:
    """Similarity based on shared and differing token sets."""
    return _score(fuzz.token_set_ratio, a, b)


def best_similarity(a: str, b: str) -> float:
    """Maximum of the token-sort, partial and token-set heuristics."""
    return max(token_sort_ratio(a, b), partial_ratio(a, b), token_set_ratio(a, b))


def normalize_words(text: str) -> str:
    text = _NORMALIZE_RE.sub(" ", text.lower())
    return _WHITESPACE_RE.sub(" ", text).strip()


def token_overlap_similarity(a: str, b: str) -> float:
    """Shared normalized words divided by the larger word count."""
    normalized_a = normalize_words(a)
    normalized_b = normalize_words(b)
    if normalized_a == normalized_b:
        return 1.0
    words_a = normalized_a.split()
    words_b = normalized_b.split()
    shared = set(words_a) & set(words_b)
    return len(shared) / max(len(words_a), len(words_b), 1)
