"""Tests for player setup, the event bus and game records."""

import json
import pytest
from pathlib import Path

import sys
sys.path.insert(0, str(Path(__file__).parent.parent))

from just_one.core import MockProvider
from just_one.engine import FlowState, GameConfig, GameState, WordSource
from just_one.runner import (
    EventBus, EventType, GameEvent, GameOrchestrator, GameRecord, PlayerConfig,
    build_players, default_player_configs, parse_player_spec,
)


# ============================================================================
# Player Setup Tests
# ============================================================================

class TestPlayerSpecs:
    """Tests for parsing provider:model:name strings."""

    def test_full_spec(self):
        config = parse_player_spec("anthropic:claude-sonnet-4-20250514:Claude")

        assert config.provider == "anthropic"
        assert config.model == "claude-sonnet-4-20250514"
        assert config.name == "Claude"

    def test_provider_only_uses_default_model(self):
        config = parse_player_spec("ollama")

        assert config.model == "llama3.1"
        assert config.display_name == "llama3.1"

    def test_model_with_colon_in_name(self):
        config = parse_player_spec("ollama:llama3.1:Local: fast")
        assert config.name == "Local: fast"

    def test_unknown_provider(self):
        with pytest.raises(ValueError, match="Unknown provider"):
            parse_player_spec("skynet:t-800")


class TestBuildPlayers:
    """Tests for seating players."""

    def test_duplicate_names_are_numbered(self):
        players = build_players([
            PlayerConfig(provider="openai", model="gpt-4o"),
            PlayerConfig(provider="openai", model="gpt-4o"),
            PlayerConfig(provider="anthropic", model="claude", name="Claude"),
            PlayerConfig(provider="openai", model="gpt-4o"),
        ])

        assert [p.name for p in players] == ["gpt-4o", "gpt-4o #2", "Claude", "gpt-4o #3"]
        assert len({p.id for p in players}) == 4

    def test_first_player_is_guesser(self):
        players = build_players(default_player_configs(3))
        assert [p.is_guesser for p in players] == [True, False, False]

    def test_default_players_are_mock(self):
        players = build_players(default_player_configs())

        assert len(players) == 3
        assert all(p.provider == "mock" for p in players)
        assert players[1].name == "Mock AI #2"


# ============================================================================
# Event Bus Tests
# ============================================================================

class TestEventBus:
    """Tests for observer fan-out."""

    @pytest.fixture
    def event(self):
        return GameEvent(event_type=EventType.STATE_CHANGED, state=GameState())

    def test_publish_reaches_all_observers(self, event):
        bus = EventBus()
        seen_a, seen_b = [], []
        bus.subscribe(seen_a.append)
        bus.subscribe(seen_b.append)

        bus.publish(event)

        assert seen_a == [event]
        assert seen_b == [event]

    def test_unsubscribe_function(self, event):
        bus = EventBus()
        seen = []
        unsubscribe = bus.subscribe(seen.append)

        unsubscribe()
        unsubscribe()
        bus.publish(event)

        assert seen == []
        assert len(bus) == 0

    def test_raising_observer_is_isolated(self, event):
        bus = EventBus()
        seen = []

        def broken(_event):
            raise RuntimeError("boom")

        bus.subscribe(broken)
        bus.subscribe(seen.append)

        bus.publish(event)

        assert seen == [event]


# ============================================================================
# Game Record Tests
# ============================================================================

class TestGameRecord:
    """Tests for saving and loading finished games."""

    async def play_game(self):
        players = build_players([
            PlayerConfig(provider="mock", model="mock-model", name=name)
            for name in ["Alice", "Bob", "Carol"]
        ])
        providers = {
            players[0].id: MockProvider(responses=["THINKING: a\nCLUE: Trunk"]),
            players[1].id: MockProvider(responses=["THINKING: b\nCLUE: Ivory"]),
            players[2].id: MockProvider(responses=["THINKING: c\nGUESS: Elephant"]),
        }
        config = GameConfig(total_rounds=3, skip_delay=0, guess_delay=0)
        orchestrator = GameOrchestrator(
            players,
            config=config,
            word_source=WordSource(words=["Elephant"]),
            provider_factory=lambda p: providers[p.id],
        )
        state = await orchestrator.start_game()
        return state, config, orchestrator.traces

    @pytest.mark.asyncio
    async def test_from_state(self):
        state, config, traces = await self.play_game()

        record = GameRecord.from_state(state, config, traces, source="test")

        assert record.final_phase == FlowState.GAME_COMPLETE
        assert len(record.rounds) == 3
        assert record.score == state.score == record.correct_rounds
        assert record.rating
        assert record.metadata == {"source": "test"}
        assert len(record.traces) == 9

    @pytest.mark.asyncio
    async def test_save_and_load(self, tmp_path):
        state, config, traces = await self.play_game()
        record = GameRecord.from_state(state, config, traces)

        path = record.save(tmp_path / "games")

        assert path.exists()
        assert path.name == record.to_filename()
        assert path.name.startswith(f"game_{record.game_id}_")
        data = json.loads(path.read_text())
        assert data["final_phase"] == "game-complete"

        loaded = GameRecord.load(path)
        assert loaded == record
