"""Core game logic for Just One.

Rules (validation, elimination, scoring) are pure functions. Phase
transitions take a GameState and return a new one; they raise
``ValueError`` when called from the wrong phase.
"""

from __future__ import annotations

import re

from .lexicon import normalize, same_word
from .models import Clue, FlowState, GameConfig, GameRound, GameState, Player, Score

WORD_PATTERN = re.compile(r"^[a-zA-Z0-9'-]+$")

INVALID_CLUE_REASON = "Invalid clue"

# Phases in which a round is under way and can be abandoned
IN_ROUND_PHASES = (
    FlowState.GENERATING_CLUES,
    FlowState.PROCESSING_CLUES,
    FlowState.MAKING_GUESS,
    FlowState.ROUND_COMPLETE,
)


# ============================================================================
# Clue validation and elimination
# ============================================================================

def validate_clue(clue: str, mystery_word: str) -> tuple[bool, str | None]:
    """
    Validate a clue against the mystery word.

    Returns:
        (is_valid, error_message) - error_message is None if valid.
    """
    normalized_clue = clue.lower().strip()
    normalized_mystery = mystery_word.lower().strip()

    if not normalized_clue:
        return False, "Clue cannot be empty"

    if normalized_clue == normalized_mystery:
        return False, f"Clue '{clue.strip()}' is the mystery word"

    if normalize(normalized_clue) == normalize(normalized_mystery):
        return False, f"Clue '{clue.strip()}' is a variant of the mystery word"

    # Substring checks use the raw lower-cased strings, not the stems
    if normalized_clue in normalized_mystery:
        return False, f"Clue '{clue.strip()}' is part of the mystery word"
    if normalized_mystery in normalized_clue:
        return False, f"Clue '{clue.strip()}' contains the mystery word"

    if not WORD_PATTERN.match(normalized_clue):
        return False, f"Clue '{clue.strip()}' is not a single word"

    return True, None


def is_valid_clue(clue: str, mystery_word: str) -> bool:
    """Boolean view of ``validate_clue``."""
    is_valid, _ = validate_clue(clue, mystery_word)
    return is_valid


def process_clue_elimination(clues: list[Clue], mystery_word: str) -> list[Clue]:
    """
    Annotate a round's clues with validity and elimination.

    1. Invalid clues are eliminated with reason "Invalid clue".
    2. Every pair of valid clues sharing a stem eliminates both members,
       each citing the other: "Duplicate with <name>".

    Detection is pairwise, so the eliminated/kept partition does not depend
    on input order. A clue with several duplicate partners cites the first
    one in input order. Annotations are recomputed from scratch, so running
    this on its own output changes nothing.
    """
    processed: list[Clue] = []
    for clue in clues:
        is_valid = is_valid_clue(clue.text, mystery_word)
        processed.append(clue.model_copy(update={
            "is_valid": is_valid,
            "is_eliminated": not is_valid,
            "elimination_reason": None if is_valid else INVALID_CLUE_REASON,
        }))

    valid_indices = [i for i, clue in enumerate(processed) if clue.is_valid]
    partners: dict[int, int] = {}
    for pos, i in enumerate(valid_indices):
        for j in valid_indices[pos + 1:]:
            if same_word(processed[i].text, processed[j].text):
                partners.setdefault(i, j)
                partners.setdefault(j, i)

    for i, j in partners.items():
        processed[i] = processed[i].model_copy(update={
            "is_eliminated": True,
            "elimination_reason": f"Duplicate with {processed[j].player_name}",
        })

    return processed


def get_active_clues(clues: list[Clue]) -> list[Clue]:
    """Clues that survived elimination."""
    return [clue for clue in clues if not clue.is_eliminated]


# ============================================================================
# Scoring
# ============================================================================

RATING_BANDS: list[tuple[int, str]] = [
    (90, "Excellent!"),
    (70, "Great job!"),
    (50, "Good effort!"),
    (30, "Keep trying!"),
]
PERFECT_RATING = "Perfect! Can you do it again?"
LOWEST_RATING = "Better luck next time!"


def is_correct_guess(guess: str, mystery_word: str) -> bool:
    """A guess is correct when it stems to the mystery word's stem."""
    if not guess.strip():
        return False
    return same_word(guess, mystery_word)


def calculate_score(correct_guesses: int, total_rounds: int) -> Score:
    """Score equals correct guesses; the rating depends on the hit rate."""
    if correct_guesses == total_rounds:
        return Score(score=correct_guesses, rating=PERFECT_RATING)

    # Integer comparison keeps the inclusive band edges exact
    for percent, rating in RATING_BANDS:
        if correct_guesses * 100 >= total_rounds * percent:
            return Score(score=correct_guesses, rating=rating)

    return Score(score=correct_guesses, rating=LOWEST_RATING)


def get_final_score(state: GameState) -> Score:
    return calculate_score(state.score, state.total_rounds)


# ============================================================================
# Players
# ============================================================================

def rotate_guesser(players: list[Player]) -> list[Player]:
    """Hand the guesser role to the next player in seat order."""
    if not players:
        return []

    current = next((i for i, p in enumerate(players) if p.is_guesser), -1)
    next_index = (current + 1) % len(players)

    return [
        player.model_copy(update={"is_guesser": index == next_index})
        for index, player in enumerate(players)
    ]


def get_guesser(state: GameState) -> Player | None:
    return next((p for p in state.players if p.is_guesser), None)


def get_clue_givers(state: GameState) -> list[Player]:
    return [p for p in state.players if not p.is_guesser]


# ============================================================================
# Phase transitions
# ============================================================================

def _require_phase(state: GameState, *phases: FlowState) -> None:
    if state.phase not in phases:
        expected = ", ".join(p.value for p in phases)
        raise ValueError(f"Cannot do this in phase {state.phase.value} (expected {expected})")


def create_game(players: list[Player], config: GameConfig | None = None) -> GameState:
    """
    Create an idle game for the given players.

    If the players do not carry exactly one guesser, the first player
    becomes the guesser.
    """
    if config is None:
        config = GameConfig()

    players = [p.model_copy() for p in players]
    if sum(1 for p in players if p.is_guesser) != 1:
        players = [
            p.model_copy(update={"is_guesser": index == 0})
            for index, p in enumerate(players)
        ]

    return GameState(players=players, total_rounds=config.total_rounds)


def start_game(
    state: GameState,
    mystery_word: str,
    min_players: int = 3,
    max_players: int = 7,
) -> GameState:
    """
    Start round 1.

    Too few or too many players is a setup error: the game stays idle and
    the message lands in ``state.error``.
    """
    _require_phase(state, FlowState.IDLE)

    if len(state.players) < min_players:
        return state.model_copy(update={
            "error": f"Need at least {min_players} players to start the game",
        })
    if len(state.players) > max_players:
        return state.model_copy(update={
            "error": f"At most {max_players} players can play",
        })
    if not mystery_word.strip():
        raise ValueError("Mystery word cannot be empty")

    new_state = state.model_copy(deep=True)
    new_state.phase = FlowState.GENERATING_CLUES
    new_state.current_round = 1
    new_state.score = 0
    new_state.mystery_word = mystery_word
    new_state.clues = []
    new_state.guesser_thinking = ""
    new_state.current_guess = None
    new_state.rounds = []
    new_state.error = None
    return new_state


def add_clue(state: GameState, clue: Clue) -> GameState:
    """Append one freshly received clue."""
    _require_phase(state, FlowState.GENERATING_CLUES)
    return state.model_copy(update={"clues": [*state.clues, clue]})


def close_clue_phase(state: GameState) -> GameState:
    """
    Move to clue processing with the clues in seat order.

    Clues arrive in completion order; sorting them by seat makes everything
    downstream independent of arrival order.
    """
    _require_phase(state, FlowState.GENERATING_CLUES)

    seat = {p.id: index for index, p in enumerate(state.players)}
    ordered = sorted(state.clues, key=lambda c: seat.get(c.player_id, len(seat)))

    return state.model_copy(update={
        "clues": ordered,
        "phase": FlowState.PROCESSING_CLUES,
    })


def process_clues(state: GameState) -> GameState:
    """Run elimination on the round's clues and move on to guessing."""
    _require_phase(state, FlowState.PROCESSING_CLUES)
    return state.model_copy(update={
        "clues": process_clue_elimination(state.clues, state.mystery_word),
        "phase": FlowState.MAKING_GUESS,
    })


def set_guesser_thinking(state: GameState, thinking: str) -> GameState:
    _require_phase(state, FlowState.MAKING_GUESS)
    return state.model_copy(update={"guesser_thinking": thinking})


def apply_guess(state: GameState, guess: str) -> GameState:
    """Record the guesser's answer and score it."""
    _require_phase(state, FlowState.MAKING_GUESS)
    correct = is_correct_guess(guess, state.mystery_word)
    return state.model_copy(update={
        "current_guess": guess,
        "score": state.score + 1 if correct else state.score,
        "phase": FlowState.ROUND_COMPLETE,
    })


def skip_guess(state: GameState) -> GameState:
    """No clue survived: the round passes without a guess."""
    _require_phase(state, FlowState.MAKING_GUESS)
    return state.model_copy(update={
        "current_guess": None,
        "phase": FlowState.ROUND_COMPLETE,
    })


def complete_round(state: GameState) -> GameState:
    """Archive the finished round into the history."""
    _require_phase(state, FlowState.ROUND_COMPLETE)
    if len(state.rounds) >= state.current_round:
        raise ValueError(f"Round {state.current_round} is already archived")

    guesser = get_guesser(state)
    skipped = state.current_guess is None

    round_record = GameRound(
        round_number=state.current_round,
        mystery_word=state.mystery_word,
        clues=[c.model_copy() for c in state.clues],
        guesser_id=guesser.id if guesser else None,
        guesser_thinking=state.guesser_thinking,
        guess=state.current_guess,
        is_correct=None if skipped else is_correct_guess(state.current_guess, state.mystery_word),
        is_skipped=skipped,
    )

    return state.model_copy(update={"rounds": [*state.rounds, round_record]})


def is_last_round(state: GameState) -> bool:
    return state.current_round >= state.total_rounds


def start_new_round(state: GameState, mystery_word: str) -> GameState:
    """Rotate the guesser, draw the next word and reopen clue generation."""
    _require_phase(state, FlowState.ROUND_COMPLETE)
    if len(state.rounds) < state.current_round:
        raise ValueError(f"Round {state.current_round} has not been archived")
    if is_last_round(state):
        raise ValueError("No rounds left to play")

    return state.model_copy(update={
        "players": rotate_guesser(state.players),
        "current_round": state.current_round + 1,
        "phase": FlowState.GENERATING_CLUES,
        "mystery_word": mystery_word,
        "clues": [],
        "guesser_thinking": "",
        "current_guess": None,
        "error": None,
    })


def finish_game(state: GameState) -> GameState:
    _require_phase(state, FlowState.ROUND_COMPLETE)
    if len(state.rounds) < state.current_round:
        raise ValueError(f"Round {state.current_round} has not been archived")
    return state.model_copy(update={"phase": FlowState.GAME_COMPLETE})


def set_loading(state: GameState, loading: bool) -> GameState:
    return state.model_copy(update={"is_loading": loading})


def fail_game(state: GameState, message: str) -> GameState:
    """Halt the game; only a reset leaves this phase."""
    return state.model_copy(update={
        "phase": FlowState.ERROR,
        "error": message,
        "is_loading": False,
    })


def abandon_round(state: GameState) -> GameState:
    """
    Drop the round in progress and go back to idle.

    History keeps only fully completed rounds, and the score is rebuilt
    from it so an unarchived correct guess does not count.
    """
    _require_phase(state, *IN_ROUND_PHASES)
    return state.model_copy(update={
        "phase": FlowState.IDLE,
        "score": sum(1 for r in state.rounds if r.is_correct),
        "clues": [],
        "guesser_thinking": "",
        "current_guess": None,
        "is_loading": False,
    })
