"""Mystery word source."""

from __future__ import annotations

import random
from pathlib import Path

DEFAULT_WORDLIST = Path(__file__).parent.parent / "data" / "words.txt"


def load_wordlist(path: Path | None = None) -> list[str]:
    """Load the word list from file, one word per line."""
    if path is None:
        path = DEFAULT_WORDLIST

    with open(path, "r") as f:
        words = [line.strip() for line in f if line.strip() and not line.startswith("#")]
    return words


class WordSource:
    """Draws mystery words at random without immediate repeats."""

    def __init__(self, words: list[str] | None = None, seed: int | None = None):
        if words is None:
            words = load_wordlist()
        if not words:
            raise ValueError("Word list is empty")

        self.words = list(words)
        self._rng = random.Random(seed)
        self._last: str | None = None

    def get_random_word(self) -> str:
        candidates = [w for w in self.words if w != self._last] or self.words
        word = self._rng.choice(candidates)
        self._last = word
        return word
