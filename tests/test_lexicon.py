"""Tests for word normalization and the mystery word source."""

import pytest
from pathlib import Path

import sys
sys.path.insert(0, str(Path(__file__).parent.parent))

from just_one.engine import normalize, same_word, WordSource, load_wordlist


# ============================================================================
# Normalization Tests
# ============================================================================

class TestNormalize:
    """Tests for the stem-based comparison key."""

    def test_lowercases_and_strips(self):
        assert normalize("  TRUNK ") == normalize("trunk")

    def test_verb_forms_share_a_stem(self):
        assert normalize("Running") == "run"
        assert same_word("runs", "running")

    def test_plural_matches_singular(self):
        assert same_word("Elephants", "elephant")
        assert same_word("cats", "Cat")

    def test_different_words_differ(self):
        assert not same_word("Trunk", "Elephant")

    def test_empty_word(self):
        assert normalize("") == ""
        assert normalize("   ") == ""


# ============================================================================
# Word Source Tests
# ============================================================================

class TestWordSource:
    """Tests for loading and drawing mystery words."""

    def test_default_wordlist_loads(self):
        words = load_wordlist()

        assert len(words) > 100
        assert all(w and not w.startswith("#") for w in words)
        assert "Elephant" in words

    def test_custom_wordlist_skips_comments_and_blanks(self, tmp_path):
        path = tmp_path / "words.txt"
        path.write_text("# header\nApple\n\n  Pear  \n")

        assert load_wordlist(path) == ["Apple", "Pear"]

    def test_no_immediate_repeats(self):
        source = WordSource(words=["Apple", "Pear"], seed=3)

        draws = [source.get_random_word() for _ in range(20)]

        assert all(a != b for a, b in zip(draws, draws[1:]))

    def test_single_word_list_repeats(self):
        source = WordSource(words=["Apple"])
        assert [source.get_random_word() for _ in range(3)] == ["Apple"] * 3

    def test_seed_makes_draws_reproducible(self):
        words = load_wordlist()
        first = WordSource(words=words, seed=42)
        second = WordSource(words=words, seed=42)

        assert [first.get_random_word() for _ in range(10)] == [second.get_random_word() for _ in range(10)]

    def test_empty_list_rejected(self):
        with pytest.raises(ValueError):
            WordSource(words=[])
