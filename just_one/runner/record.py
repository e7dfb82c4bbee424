"""Persistent record of a finished (or halted) game."""

from __future__ import annotations

import json
import uuid
from datetime import datetime
from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field

from just_one.core import AgentTrace
from just_one.engine import (
    FlowState, GameConfig, GameRound, GameState, Player, get_final_score,
)


class GameRecord(BaseModel):
    """Everything needed to replay or analyse a game after the fact."""
    game_id: str = Field(default_factory=lambda: str(uuid.uuid4())[:8])
    timestamp: datetime = Field(default_factory=datetime.utcnow)
    config: GameConfig
    players: list[Player]
    rounds: list[GameRound] = Field(default_factory=list)
    traces: list[AgentTrace] = Field(default_factory=list)
    score: int = 0
    rating: str = ""
    final_phase: FlowState = FlowState.IDLE
    error: str | None = None
    metadata: dict[str, Any] = Field(default_factory=dict)

    @classmethod
    def from_state(
        cls,
        state: GameState,
        config: GameConfig,
        traces: list[AgentTrace] | None = None,
        **metadata: Any,
    ) -> "GameRecord":
        final = get_final_score(state)
        return cls(
            config=config,
            players=state.players,
            rounds=state.rounds,
            traces=traces or [],
            score=final.score,
            rating=final.rating,
            final_phase=state.phase,
            error=state.error,
            metadata=metadata,
        )

    @property
    def correct_rounds(self) -> int:
        return sum(1 for r in self.rounds if r.is_correct)

    @property
    def skipped_rounds(self) -> int:
        return sum(1 for r in self.rounds if r.is_skipped)

    def to_filename(self) -> str:
        """Generate filename for this game."""
        ts = self.timestamp.strftime("%Y%m%d_%H%M%S")
        return f"game_{self.game_id}_{ts}.json"

    def save(self, directory: Path | str) -> Path:
        """Save the record to a JSON file in ``directory``."""
        directory = Path(directory)
        directory.mkdir(parents=True, exist_ok=True)

        filepath = directory / self.to_filename()
        with open(filepath, "w") as f:
            json.dump(self.model_dump(mode="json"), f, indent=2)

        return filepath

    @classmethod
    def load(cls, filepath: Path | str) -> "GameRecord":
        """Load a record from a JSON file."""
        with open(filepath, "r") as f:
            data = json.load(f)
        return cls.model_validate(data)
