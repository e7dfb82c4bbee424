from .clue_giver import (
    ERROR_CONTENT, ClueGiverAgent, load_prompt_template, format_other_players,
)
from .guesser import GuesserAgent, GuessResult, format_clues_display

__all__ = [
    "ERROR_CONTENT", "ClueGiverAgent", "load_prompt_template", "format_other_players",
    "GuesserAgent", "GuessResult", "format_clues_display",
]
