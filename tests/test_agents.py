"""Tests for the clue-giver and guesser agents."""

import pytest
from pathlib import Path

import sys
sys.path.insert(0, str(Path(__file__).parent.parent))

from just_one.core import LLMProvider, MockProvider
from just_one.engine import Clue, Player, is_correct_guess, is_valid_clue
from just_one.agents import (
    ERROR_CONTENT, ClueGiverAgent, GuesserAgent, GuessResult,
    format_clues_display, format_other_players,
)


class FailingProvider(LLMProvider):
    """Provider whose every call fails."""

    model = "broken"

    async def complete(self, messages, temperature=0.7, max_tokens=1000):
        raise RuntimeError("service unavailable")


@pytest.fixture
def player():
    return Player(id="p2", name="Bob", model="mock-model", provider="mock")


# ============================================================================
# Clue-giver Tests
# ============================================================================

class TestClueGiverAgent:
    """Tests for clue generation."""

    def test_prompt_names_word_and_other_players(self, player):
        agent = ClueGiverAgent(player, MockProvider())

        prompt = agent.build_prompt("Elephant", ["Carol", "Dave"])

        assert "Elephant" in prompt
        assert "Carol, Dave" in prompt
        assert "CLUE:" in prompt
        assert "GUESS:" not in prompt

    def test_other_players_placeholder(self):
        assert format_other_players([]) == "(nobody else)"

    @pytest.mark.asyncio
    async def test_give_clue(self, player):
        provider = MockProvider(responses=["THINKING: grey and big\nCLUE: **Trunk**"])
        agent = ClueGiverAgent(player, provider)

        clue, trace = await agent.give_clue("Elephant", ["Carol"], round_number=3)

        assert clue.player_id == "p2"
        assert clue.player_name == "Bob"
        assert clue.text == "Trunk"
        assert clue.thinking == "grey and big"
        assert not clue.is_eliminated

        assert trace.role == "clue"
        assert trace.round_number == 3
        assert trace.content == "Trunk"
        assert trace.error is None
        assert "Elephant" in trace.prompt_sent
        assert "CLUE: **Trunk**" in trace.raw_response

    @pytest.mark.asyncio
    async def test_unparseable_reply_gives_empty_clue(self, player):
        agent = ClueGiverAgent(player, MockProvider(responses=["I refuse to play"]))

        clue, _ = await agent.give_clue("Elephant", ["Carol"], round_number=1)

        assert clue.text == ""
        assert not is_valid_clue(clue.text, "Elephant")

    @pytest.mark.asyncio
    async def test_failed_call_becomes_error_clue(self, player):
        agent = ClueGiverAgent(player, FailingProvider())

        clue, trace = await agent.give_clue("Elephant", ["Carol"], round_number=1)

        assert clue.text == ERROR_CONTENT
        assert clue.thinking == "Error calling API: service unavailable"
        assert not is_valid_clue(clue.text, "Elephant")
        assert trace.error == "service unavailable"


# ============================================================================
# Guesser Tests
# ============================================================================

class TestGuesserAgent:
    """Tests for guessing from surviving clues."""

    @pytest.fixture
    def clues(self):
        return [
            Clue(player_id="p2", player_name="Bob", text="Trunk"),
            Clue(player_id="p3", player_name="Carol", text="Ivory"),
        ]

    def test_clues_display_lists_authors(self, clues):
        display = format_clues_display(clues)
        assert display == "- Trunk (from Bob)\n- Ivory (from Carol)"

    def test_prompt_contains_clues_only(self, player, clues):
        agent = GuesserAgent(player, MockProvider())

        prompt = agent.build_prompt(clues)

        assert "Trunk (from Bob)" in prompt
        assert "Ivory (from Carol)" in prompt
        assert "GUESS:" in prompt
        assert "Elephant" not in prompt

    @pytest.mark.asyncio
    async def test_make_guess(self, player, clues):
        provider = MockProvider(responses=["THINKING: trunk plus ivory\nGUESS: Elephant."])
        agent = GuesserAgent(player, provider)

        result, trace = await agent.make_guess(clues, round_number=2)

        assert result == GuessResult(guess="Elephant", thinking="trunk plus ivory")
        assert trace.role == "guess"
        assert trace.content == "Elephant"
        assert provider.call_count == 1

    @pytest.mark.asyncio
    async def test_failed_call_becomes_wrong_guess(self, player, clues):
        agent = GuesserAgent(player, FailingProvider())

        result, trace = await agent.make_guess(clues, round_number=2)

        assert result.guess == ERROR_CONTENT
        assert result.thinking.startswith("Error calling API:")
        assert not is_correct_guess(result.guess, "Elephant")
        assert trace.error == "service unavailable"
