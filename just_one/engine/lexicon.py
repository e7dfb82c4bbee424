"""Word normalization for equivalence checks.

Plurals and verb forms of a word count as the same word everywhere the
game compares words: clue against mystery word, clue against clue, and
guess against mystery word.
"""

from __future__ import annotations

from functools import lru_cache

import snowballstemmer

_stemmer = snowballstemmer.stemmer("porter")


@lru_cache(maxsize=4096)
def normalize(word: str) -> str:
    """Map a raw word to its comparison key (lower-cased Porter stem).

    Examples:
        >>> normalize("  Running ")
        'run'
        >>> normalize("Elephants") == normalize("elephant")
        True
    """
    cleaned = word.lower().strip()
    if not cleaned:
        return ""
    return _stemmer.stemWord(cleaned)


def same_word(a: str, b: str) -> bool:
    """True when both words reduce to the same key."""
    return normalize(a) == normalize(b)
