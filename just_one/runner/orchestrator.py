"""Round orchestration for Just One games.

``GameOrchestrator`` owns the only live ``GameState``. Each round it fans
the clue prompt out to every clue-giver at once, waits for all of them,
runs elimination, asks the guesser and scores the answer. Every state
change is published to subscribed observers as it happens.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Callable

from just_one.agents import ClueGiverAgent, GuesserAgent
from just_one.core import AgentTrace, LLMProvider, create_provider
from just_one.engine import (
    FlowState, GameConfig, GameState, Player, WordSource, IN_ROUND_PHASES,
    create_game, start_game, add_clue, close_clue_phase, process_clues,
    set_guesser_thinking, apply_guess, skip_guess, complete_round,
    is_last_round, start_new_round, finish_game, set_loading, fail_game,
    abandon_round, get_guesser, get_clue_givers, get_active_clues,
    is_correct_guess,
)
from .events import EventBus, EventType, GameEvent, GameObserver

logger = logging.getLogger(__name__)

ProviderFactory = Callable[[Player], LLMProvider]

UNEXPECTED_ERROR = "An unexpected error occurred"


def default_provider_factory(player: Player) -> LLMProvider:
    return create_provider(player.provider, player.model)


class GameOrchestrator:
    """Drives a game from ``idle`` to ``game-complete``.

    Usage::

        orchestrator = GameOrchestrator(players, GameConfig(total_rounds=5))
        unsubscribe = orchestrator.subscribe(print_event)
        final_state = await orchestrator.start_game()

    ``stop()`` aborts a running game: in-flight agent calls are cancelled,
    the unfinished round is dropped and the state returns to ``idle``.
    """

    def __init__(
        self,
        players: list[Player],
        config: GameConfig | None = None,
        word_source: WordSource | None = None,
        provider_factory: ProviderFactory | None = None,
    ):
        self.config = config or GameConfig()
        self.word_source = word_source or WordSource()
        self.events = EventBus()
        self.traces: list[AgentTrace] = []

        self._provider_factory = provider_factory or default_provider_factory
        self._providers: dict[str, LLMProvider] = {}
        self._state = create_game(players, self.config)
        self._task: asyncio.Task | None = None
        self._stopped_task: asyncio.Task | None = None
        self._stop_requested = False

    # ------------------------------------------------------------------
    # Observation
    # ------------------------------------------------------------------

    @property
    def state(self) -> GameState:
        return self._state

    @property
    def is_running(self) -> bool:
        return self._task is not None and not self._task.done()

    def subscribe(self, observer: GameObserver) -> Callable[[], None]:
        """Register an observer; returns a function that unsubscribes it."""
        return self.events.subscribe(observer)

    def _publish(self, event_type: EventType, **data: Any) -> None:
        self.events.publish(GameEvent(event_type=event_type, state=self._state, data=data))

    def _apply(self, new_state: GameState, event_type: EventType, **data: Any) -> None:
        old = self._state
        self._state = new_state

        if new_state.phase != old.phase:
            self._publish(
                EventType.PHASE_CHANGED,
                previous=old.phase.value,
                phase=new_state.phase.value,
            )
        if new_state.is_loading != old.is_loading:
            self._publish(EventType.LOADING_CHANGED, is_loading=new_state.is_loading)
        if event_type not in (EventType.PHASE_CHANGED, EventType.LOADING_CHANGED):
            self._publish(event_type, **data)

    def _set_state(
        self,
        new_state: GameState,
        event_type: EventType = EventType.STATE_CHANGED,
        **data: Any,
    ) -> None:
        """Commit a transition made by the game loop.

        Once a stop is requested the loop may not commit anything else,
        including from a cancelled task that has not yet resumed.
        """
        if self._stop_requested or asyncio.current_task() is self._stopped_task:
            raise asyncio.CancelledError()
        self._apply(new_state, event_type, **data)

    # ------------------------------------------------------------------
    # Control
    # ------------------------------------------------------------------

    async def start_game(self) -> GameState:
        """
        Play a full game and return the final state.

        A setup error (wrong player count) leaves the game idle with the
        message in ``state.error``. Orchestration errors end in the
        ``error`` phase. A stopped game ends idle.
        """
        if self._task is not None or self._state.phase != FlowState.IDLE:
            logger.warning("Game already in progress or starting")
            return self._state

        self._stop_requested = False
        self.traces = []

        started = start_game(
            self._state,
            self.word_source.get_random_word(),
            min_players=self.config.min_players,
            max_players=self.config.max_players,
        )
        if started.phase == FlowState.IDLE:
            logger.warning(f"Cannot start game: {started.error}")
            self._apply(started, EventType.ERROR, message=started.error, fatal=False)
            return self._state

        try:
            self._resolve_providers(started.players)
        except Exception as e:
            self._handle_error(e)
            return self._state

        self._set_state(started, round_number=1)
        if self._stop_requested:
            # An observer stopped the game on its very first event
            return self._state
        logger.info(f"Game started with {len(started.players)} players, {started.total_rounds} rounds")

        task = self._task = asyncio.create_task(self._run_game_loop())
        try:
            await task
        except asyncio.CancelledError:
            if self._stopped_task is not task:
                # Cancelled by the caller rather than by stop()
                self._abandon()
                raise
            logger.info("Game stopped")
        except Exception as e:
            self._handle_error(e)
        finally:
            if self._task is task:
                self._task = None

        return self._state

    def stop(self) -> None:
        """Abort the game in progress and return to ``idle``.

        Does nothing unless a round is under way, so ``error`` and
        ``game-complete`` stay put until ``reset()``.
        """
        if self._state.phase not in IN_ROUND_PHASES:
            return
        task = self._task
        if task is not None and not task.done():
            self._stopped_task = task
            task.cancel()
            self._task = None
        self._abandon()

    def _abandon(self) -> None:
        self._stop_requested = True
        if self._state.phase in IN_ROUND_PHASES:
            self._apply(abandon_round(self._state), EventType.STATE_CHANGED, stopped=True)

    def reset(self) -> GameState:
        """Recreate a fresh idle game with the same players."""
        self.stop()

        players = [p.model_copy(update={"is_guesser": False}) for p in self._state.players]
        self._stop_requested = False
        self.traces = []
        self._apply(create_game(players, self.config), EventType.STATE_CHANGED, reset=True)
        return self._state

    def _handle_error(self, error: Exception) -> None:
        message = str(error) or UNEXPECTED_ERROR
        logger.exception(f"Game flow error: {message}")
        self._apply(fail_game(self._state, message), EventType.ERROR, message=message, fatal=True)

    def _resolve_providers(self, players: list[Player]) -> None:
        """Build every player's gateway up front so a bad configuration
        (unknown provider, missing API key) fails before round 1."""
        for player in players:
            self._provider(player)

    def _provider(self, player: Player) -> LLMProvider:
        if player.id not in self._providers:
            self._providers[player.id] = self._provider_factory(player)
        return self._providers[player.id]

    # ------------------------------------------------------------------
    # Game loop
    # ------------------------------------------------------------------

    async def _run_game_loop(self) -> None:
        while True:
            await self._run_round()

            self._set_state(
                complete_round(self._state),
                EventType.ROUND_COMPLETE,
                round_number=self._state.current_round,
            )

            if is_last_round(self._state):
                self._set_state(
                    finish_game(self._state),
                    EventType.GAME_COMPLETE,
                    score=self._state.score,
                )
                logger.info(f"Game complete: {self._state.score}/{self._state.total_rounds}")
                return

            self._set_state(
                start_new_round(self._state, self.word_source.get_random_word()),
                round_number=self._state.current_round + 1,
            )

    async def _run_round(self) -> None:
        await self._generate_clues()

        self._set_state(close_clue_phase(self._state))
        self._process_clues()

        await self._make_guess()

    def _process_clues(self) -> None:
        new_state = process_clues(self._state)
        active = get_active_clues(new_state.clues)
        logger.debug(
            f"Round {new_state.current_round}: {len(active)}/{len(new_state.clues)} clues survived"
        )
        self._set_state(new_state, EventType.CLUES_PROCESSED, active_count=len(active))

    async def _generate_clues(self) -> None:
        """Ask every clue-giver at once and wait for all of them."""
        state = self._state
        clue_givers = get_clue_givers(state)

        self._set_state(set_loading(self._state, True))
        tasks = [
            asyncio.create_task(self._collect_clue(
                player,
                state.mystery_word,
                [p.name for p in clue_givers if p.id != player.id],
                state.current_round,
            ))
            for player in clue_givers
        ]
        try:
            await asyncio.gather(*tasks)
        finally:
            for task in tasks:
                task.cancel()

        self._set_state(set_loading(self._state, False))

    async def _collect_clue(
        self,
        player: Player,
        mystery_word: str,
        other_players: list[str],
        round_number: int,
    ) -> None:
        agent = ClueGiverAgent(player, self._provider(player))
        clue, trace = await agent.give_clue(mystery_word, other_players, round_number)
        self.traces.append(trace)
        self._set_state(
            add_clue(self._state, clue),
            EventType.CLUE_ADDED,
            player_id=player.id,
            text=clue.text,
        )

    async def _make_guess(self) -> None:
        guesser = get_guesser(self._state)
        if guesser is None:
            raise RuntimeError("No guesser found")

        active_clues = get_active_clues(self._state.clues)
        round_number = self._state.current_round

        if not active_clues:
            logger.info(f"Round {round_number}: every clue was eliminated, skipping guess")
            self._set_state(skip_guess(self._state), EventType.ROUND_SKIPPED, round_number=round_number)
            await asyncio.sleep(self.config.skip_delay)
            return

        self._set_state(set_loading(self._state, True))
        agent = GuesserAgent(guesser, self._provider(guesser))
        result, trace = await agent.make_guess(active_clues, round_number)
        self.traces.append(trace)

        self._set_state(set_guesser_thinking(self._state, result.thinking))
        self._set_state(
            set_loading(apply_guess(self._state, result.guess), False),
            EventType.GUESS_MADE,
            guess=result.guess,
            is_correct=is_correct_guess(result.guess, self._state.mystery_word),
        )
        await asyncio.sleep(self.config.guess_delay)
