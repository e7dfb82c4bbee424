"""Clue-giver agent for Just One."""

from __future__ import annotations

import logging
from pathlib import Path

from just_one.core import AgentTrace, LLMProvider, clean_single_word
from just_one.engine import Clue, Player

logger = logging.getLogger(__name__)

# Stand-in content for a call that failed. It can never pass clue validation
# and never stems to a real word, so a failure costs the round, not the game.
ERROR_CONTENT = "[ERROR]"


def load_prompt_template(name: str) -> str:
    """Load a prompt template from the prompts directory."""
    path = Path(__file__).parent / "prompts" / name
    with open(path, "r") as f:
        return f.read()


def error_thinking(error: BaseException) -> str:
    return f"Error calling API: {error}"


def format_other_players(names: list[str]) -> str:
    if not names:
        return "(nobody else)"
    return ", ".join(names)


class ClueGiverAgent:
    """Agent that writes one clue per round for the current mystery word."""

    def __init__(self, player: Player, provider: LLMProvider):
        self.player = player
        self.provider = provider
        self.turn_prompt_template = load_prompt_template("clue_turn.md")

    def build_prompt(self, mystery_word: str, other_players: list[str]) -> str:
        """Build the clue prompt: the mystery word plus the names of the
        other clue-givers whose clues could collide with ours."""
        return self.turn_prompt_template.format(
            mystery_word=mystery_word,
            other_players=format_other_players(other_players),
        )

    async def give_clue(
        self,
        mystery_word: str,
        other_players: list[str],
        round_number: int,
    ) -> tuple[Clue, AgentTrace]:
        """
        Ask the model for a clue.

        A failed call does not raise: it yields a clue whose text is
        ``ERROR_CONTENT`` and whose thinking carries the error, which
        elimination then discards like any other invalid clue.

        Returns:
            Tuple of (Clue, AgentTrace)
        """
        prompt = self.build_prompt(mystery_word, other_players)
        trace = AgentTrace(
            player_id=self.player.id,
            player_name=self.player.name,
            round_number=round_number,
            role="clue",
            model=self.player.model,
            prompt_sent=prompt,
        )

        try:
            response = await self.provider.get_text(prompt)
        except Exception as e:
            logger.warning(f"Clue from {self.player.name} failed: {e}")
            clue = Clue(
                player_id=self.player.id,
                player_name=self.player.name,
                text=ERROR_CONTENT,
                thinking=error_thinking(e),
            )
            trace = trace.model_copy(update={
                "content": ERROR_CONTENT,
                "thinking": clue.thinking,
                "error": str(e),
            })
            return clue, trace

        text = clean_single_word(response.content)
        logger.debug(f"{self.player.name} clue for {mystery_word!r}: {text!r}")

        clue = Clue(
            player_id=self.player.id,
            player_name=self.player.name,
            text=text,
            thinking=response.thinking,
        )
        trace = trace.model_copy(update={
            "raw_response": response.raw_text,
            "thinking": response.thinking,
            "content": text,
            "latency_ms": response.latency_ms,
            "input_tokens": response.input_tokens,
            "output_tokens": response.output_tokens,
        })
        return clue, trace
