from .events import EventType, GameEvent, GameObserver, EventBus
from .config import (
    DEFAULT_MODELS, PlayerConfig, parse_player_spec, build_players, default_player_configs,
)
from .orchestrator import GameOrchestrator, ProviderFactory, default_provider_factory
from .record import GameRecord

__all__ = [
    "EventType", "GameEvent", "GameObserver", "EventBus",
    "DEFAULT_MODELS", "PlayerConfig", "parse_player_spec", "build_players",
    "default_player_configs",
    "GameOrchestrator", "ProviderFactory", "default_provider_factory",
    "GameRecord",
]
