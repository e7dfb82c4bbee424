"""Agent trace models for logging interactions."""

from __future__ import annotations

from pydantic import BaseModel


class AgentTrace(BaseModel):
    """Trace of a single agent call.

    Captures the prompt, the raw reply and what the game made of it.
    A failed call keeps the error message instead of a reply.
    """
    player_id: str
    player_name: str
    round_number: int
    role: str  # "clue" | "guess"
    model: str
    prompt_sent: str
    raw_response: str = ""
    thinking: str = ""
    content: str = ""
    error: str | None = None
    latency_ms: float = 0.0
    input_tokens: int = 0
    output_tokens: int = 0
