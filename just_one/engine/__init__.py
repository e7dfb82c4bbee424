from .models import FlowState, GameConfig, Player, Clue, GameRound, Score, GameState
from .lexicon import normalize, same_word
from .game import (
    WORD_PATTERN, INVALID_CLUE_REASON, IN_ROUND_PHASES,
    validate_clue, is_valid_clue, process_clue_elimination, get_active_clues,
    is_correct_guess, calculate_score, get_final_score,
    rotate_guesser, get_guesser, get_clue_givers,
    create_game, start_game, add_clue, close_clue_phase, process_clues,
    set_guesser_thinking, apply_guess, skip_guess, complete_round,
    is_last_round, start_new_round, finish_game, set_loading, fail_game,
    abandon_round,
)
from .words import WordSource, load_wordlist

__all__ = [
    "FlowState", "GameConfig", "Player", "Clue", "GameRound", "Score", "GameState",
    "normalize", "same_word",
    "WORD_PATTERN", "INVALID_CLUE_REASON", "IN_ROUND_PHASES",
    "validate_clue", "is_valid_clue", "process_clue_elimination", "get_active_clues",
    "is_correct_guess", "calculate_score", "get_final_score",
    "rotate_guesser", "get_guesser", "get_clue_givers",
    "create_game", "start_game", "add_clue", "close_clue_phase", "process_clues",
    "set_guesser_thinking", "apply_guess", "skip_guess", "complete_round",
    "is_last_round", "start_new_round", "finish_game", "set_loading", "fail_game",
    "abandon_round",
    "WordSource", "load_wordlist",
]
