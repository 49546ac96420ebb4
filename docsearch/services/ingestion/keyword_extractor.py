"""Frequency-based keyword extraction for chunk metadata."""

from __future__ import annotations

import re
from collections import Counter

# Anything that is neither an ASCII word character nor whitespace is
# stripped before tokenizing, so "don't" becomes "dont" and "naïve" becomes
# "nave".  Whitespace stays Unicode-aware so a non-breaking space still
# separates words.
_PUNCTUATION_RE = re.compile(r"[^A-Za-z0-9_\s]")

DEFAULT_KEYWORD_LIMIT = 20
_MIN_KEYWORD_LENGTH = 4


def extract_keywords(text: str, limit: int = DEFAULT_KEYWORD_LIMIT) -> list[str]:
    """Return the most frequent words of *text*, most frequent first.

    Words are lowercased, stripped of punctuation, and must be longer than
    three characters.  Ties keep the order in which the words first appear,
    so the result is deterministic for a given input.

    Parameters
    ----------
    text:
        Source text (typically one chunk).
    limit:
        Maximum number of keywords returned.

    Returns
    -------
    list[str]
        At most *limit* distinct keywords.  Empty or punctuation-only input
        yields an empty list.
    """
    if not text or limit <= 0:
        return []

    cleaned = _PUNCTUATION_RE.sub("", text.lower())
    words = [word for word in cleaned.split() if len(word) >= _MIN_KEYWORD_LENGTH]

    # Counter preserves first-insertion order and sorted() is stable, so
    # equal counts stay in first-seen order.
    counts = Counter(words)
    ranked = sorted(counts.items(), key=lambda item: -item[1])
    return [word for word, _ in ranked[:limit]]
