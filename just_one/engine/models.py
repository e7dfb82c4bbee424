"""Data models for the Just One game engine."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, model_validator


class FlowState(str, Enum):
    """Phases a game passes through, one round at a time."""
    IDLE = "idle"
    GENERATING_CLUES = "generating-clues"
    PROCESSING_CLUES = "processing-clues"
    MAKING_GUESS = "making-guess"
    ROUND_COMPLETE = "round-complete"
    GAME_COMPLETE = "game-complete"
    ERROR = "error"


class GameConfig(BaseModel):
    """Configuration for a Just One game."""
    total_rounds: int = Field(default=13, ge=1)
    min_players: int = 3
    max_players: int = 7
    # Pauses (seconds) that keep turn-taking readable for a viewer.
    skip_delay: float = Field(default=3.0, ge=0)
    guess_delay: float = Field(default=5.0, ge=0)


class Player(BaseModel):
    """A participant backed by one agent gateway."""
    id: str
    name: str
    model: str
    provider: str  # backend kind: openai | anthropic | google | ollama | mock
    is_guesser: bool = False


class Clue(BaseModel):
    """A clue proposed by one clue-giver in the current round."""
    player_id: str
    player_name: str
    text: str
    thinking: str = ""
    is_valid: bool = True
    is_eliminated: bool = False
    elimination_reason: str | None = None

    @model_validator(mode="after")
    def check_reason_matches_elimination(self) -> "Clue":
        """An elimination reason exists exactly when the clue is eliminated."""
        if self.is_eliminated != (self.elimination_reason is not None):
            raise ValueError(
                "elimination_reason must be set if and only if is_eliminated is true"
            )
        return self


class GameRound(BaseModel):
    """A finished round as archived in the game history."""
    model_config = ConfigDict(frozen=True)

    round_number: int
    mystery_word: str
    clues: list[Clue]
    guesser_id: str | None = None
    guesser_thinking: str = ""
    guess: str | None = None  # None means the round was skipped
    is_correct: bool | None = None
    is_skipped: bool = False


class Score(BaseModel):
    """Final score with its qualitative rating."""
    score: int
    rating: str


class GameState(BaseModel):
    """The current state of a Just One game.

    Transitions in ``game.py`` never mutate a state; they return a new one.
    """
    players: list[Player] = Field(default_factory=list)
    total_rounds: int = 13

    current_round: int = 0
    phase: FlowState = FlowState.IDLE
    score: int = 0

    # Working fields of the round in progress
    mystery_word: str = ""
    clues: list[Clue] = Field(default_factory=list)
    guesser_thinking: str = ""
    current_guess: str | None = None

    rounds: list[GameRound] = Field(default_factory=list)

    is_loading: bool = False
    error: str | None = None
