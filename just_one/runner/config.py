"""Player setup for Just One games."""

from __future__ import annotations

import re

from pydantic import BaseModel

from just_one.core import PROVIDERS
from just_one.engine import Player

# Model used when a player spec names only the provider
DEFAULT_MODELS: dict[str, str] = {
    "openai": "gpt-4o",
    "anthropic": "claude-sonnet-4-20250514",
    "google": "gemini-2.5-flash",
    "ollama": "llama3.1",
    "mock": "mock-model",
}


class PlayerConfig(BaseModel):
    """One seat at the table, before ids and roles are assigned."""
    provider: str
    model: str
    name: str | None = None

    @property
    def display_name(self) -> str:
        return self.name or self.model


def parse_player_spec(spec: str) -> PlayerConfig:
    """
    Parse ``provider[:model[:name]]`` into a PlayerConfig.

    Examples:
        >>> parse_player_spec("anthropic:claude-sonnet-4-20250514:Claude").name
        'Claude'
        >>> parse_player_spec("mock").model
        'mock-model'
    """
    parts = spec.split(":", 2)
    provider = parts[0].strip().lower()
    if provider not in PROVIDERS:
        raise ValueError(f"Unknown provider: {provider}. Options: {list(PROVIDERS.keys())}")

    model = parts[1].strip() if len(parts) > 1 and parts[1].strip() else DEFAULT_MODELS[provider]
    name = parts[2].strip() if len(parts) > 2 and parts[2].strip() else None
    return PlayerConfig(provider=provider, model=model, name=name)


def _slug(text: str) -> str:
    return re.sub(r"[^a-z0-9]+", "-", text.lower()).strip("-") or "player"


def build_players(configs: list[PlayerConfig]) -> list[Player]:
    """
    Turn player configs into seated players.

    Repeated display names are numbered ("Mock #2", "Mock #3") so every
    player is distinguishable in clues and elimination reasons. The first
    seat starts as the guesser.
    """
    seen: dict[str, int] = {}
    players: list[Player] = []

    for index, config in enumerate(configs):
        base = config.display_name
        count = seen.get(base, 0)
        seen[base] = count + 1
        name = f"{base} #{count + 1}" if count else base

        players.append(Player(
            id=f"p{index + 1}-{_slug(name)}",
            name=name,
            model=config.model,
            provider=config.provider,
            is_guesser=index == 0,
        ))

    return players


def default_player_configs(count: int = 3) -> list[PlayerConfig]:
    """Mock players for demo games."""
    return [PlayerConfig(provider="mock", model="mock-model", name="Mock AI") for _ in range(count)]
