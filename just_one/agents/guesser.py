"""Guesser agent for Just One."""

from __future__ import annotations

import logging

from pydantic import BaseModel

from just_one.core import AgentTrace, LLMProvider, clean_single_word
from just_one.engine import Clue, Player
from .clue_giver import ERROR_CONTENT, error_thinking, load_prompt_template

logger = logging.getLogger(__name__)


class GuessResult(BaseModel):
    """The guesser's answer for one round."""
    guess: str
    thinking: str = ""


def format_clues_display(clues: list[Clue]) -> str:
    """One line per surviving clue, with its author."""
    return "\n".join(f"- {clue.text} (from {clue.player_name})" for clue in clues)


class GuesserAgent:
    """Agent that guesses the mystery word from the surviving clues."""

    def __init__(self, player: Player, provider: LLMProvider):
        self.player = player
        self.provider = provider
        self.turn_prompt_template = load_prompt_template("guess_turn.md")

    def build_prompt(self, active_clues: list[Clue]) -> str:
        return self.turn_prompt_template.format(
            clues_display=format_clues_display(active_clues),
        )

    async def make_guess(
        self,
        active_clues: list[Clue],
        round_number: int,
    ) -> tuple[GuessResult, AgentTrace]:
        """
        Ask the model for a guess.

        The guesser never sees the mystery word or eliminated clues. A
        failed call yields ``ERROR_CONTENT`` as the guess, which is scored
        as a miss.
        """
        prompt = self.build_prompt(active_clues)
        trace = AgentTrace(
            player_id=self.player.id,
            player_name=self.player.name,
            round_number=round_number,
            role="guess",
            model=self.player.model,
            prompt_sent=prompt,
        )

        try:
            response = await self.provider.get_text(prompt)
        except Exception as e:
            logger.warning(f"Guess from {self.player.name} failed: {e}")
            result = GuessResult(guess=ERROR_CONTENT, thinking=error_thinking(e))
            trace = trace.model_copy(update={
                "content": ERROR_CONTENT,
                "thinking": result.thinking,
                "error": str(e),
            })
            return result, trace

        guess = clean_single_word(response.content)
        result = GuessResult(guess=guess, thinking=response.thinking)
        trace = trace.model_copy(update={
            "raw_response": response.raw_text,
            "thinking": response.thinking,
            "content": guess,
            "latency_ms": response.latency_ms,
            "input_tokens": response.input_tokens,
            "output_tokens": response.output_tokens,
        })
        return result, trace
