"""Tests for agent response parsing."""

import pytest
from pathlib import Path

import sys
sys.path.insert(0, str(Path(__file__).parent.parent))

from just_one.core import parse_ai_response, clean_single_word


# ============================================================================
# THINKING / CLUE / GUESS Parsing Tests
# ============================================================================

class TestParseAIResponse:
    """Tests for splitting replies into thinking and content."""

    def test_clue_format(self):
        result = parse_ai_response("THINKING: big grey animal\nCLUE: Trunk")

        assert result.thinking == "big grey animal"
        assert result.content == "Trunk"

    def test_guess_format(self):
        result = parse_ai_response("THINKING: trunk and ivory\nGUESS: Elephant")

        assert result.thinking == "trunk and ivory"
        assert result.content == "Elephant"

    def test_multiline_thinking(self):
        result = parse_ai_response("THINKING: first idea\nsecond idea\nGUESS: Elephant")

        assert result.thinking == "first idea\nsecond idea"
        assert result.content == "Elephant"

    def test_missing_thinking(self):
        result = parse_ai_response("CLUE: Trunk")

        assert result.thinking == ""
        assert result.content == "Trunk"

    def test_thinking_only(self):
        result = parse_ai_response("THINKING: not sure yet")

        assert result.thinking == "not sure yet"
        assert result.content == ""

    def test_no_markers(self):
        result = parse_ai_response("I think the answer is elephant")

        assert result.thinking == ""
        assert result.content == ""

    def test_raw_text_is_kept(self):
        raw = "THINKING: x\nCLUE: Trunk"
        assert parse_ai_response(raw).raw_text == raw


class TestCleanSingleWord:
    """Tests for stripping decoration around one-word answers."""

    @pytest.mark.parametrize("raw,expected", [
        ("Trunk", "Trunk"),
        ("  Trunk  ", "Trunk"),
        ("**Trunk**", "Trunk"),
        ('"Trunk."', "Trunk"),
        ("`Trunk!`", "Trunk"),
        ("'Big'", "Big"),
        ("‘Big.’", "Big"),
        ("Trunk\nBecause elephants have one.", "Trunk"),
    ])
    def test_strips_decoration(self, raw, expected):
        assert clean_single_word(raw) == expected

    def test_keeps_phrases_intact(self):
        assert clean_single_word("big animal") == "big animal"

    def test_keeps_apostrophes_inside_words(self):
        assert clean_single_word("rock'n'roll") == "rock'n'roll"
        assert clean_single_word("'tis") == "'tis"

    def test_keeps_error_marker(self):
        assert clean_single_word("[ERROR]") == "[ERROR]"

    def test_empty(self):
        assert clean_single_word("") == ""
        assert clean_single_word("   \n  ") == ""
