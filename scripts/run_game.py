#!/usr/bin/env python3
"""Run a single Just One game with LLM players and live output."""

import asyncio
import argparse
import logging
from dotenv import load_dotenv
from pydantic import ValidationError
from pathlib import Path

load_dotenv(Path(__file__).parent.parent / ".env")

from just_one.core import create_provider
from just_one.engine import (
    FlowState, GameConfig, Player, WordSource, get_final_score, get_guesser, load_wordlist,
)
from just_one.runner import (
    EventType, GameEvent, GameOrchestrator, GameRecord,
    build_players, default_player_configs, parse_player_spec,
)


# ANSI colors for terminal output
class Colors:
    RED = "\033[91m"
    GREEN = "\033[92m"
    YELLOW = "\033[93m"
    GRAY = "\033[90m"
    CYAN = "\033[96m"
    BOLD = "\033[1m"
    DIM = "\033[2m"
    RESET = "\033[0m"


def print_round_header(event: GameEvent) -> None:
    state = event.state
    guesser = get_guesser(state)
    print(f"\n{Colors.BOLD}{'=' * 60}{Colors.RESET}")
    print(f"{Colors.BOLD}ROUND {state.current_round}/{state.total_rounds}{Colors.RESET}"
          f"  |  Score: {state.score}")
    print(f"Mystery word: {Colors.CYAN}{state.mystery_word}{Colors.RESET}")
    if guesser:
        print(f"Guesser: {guesser.name}")
    print(f"{'=' * 60}")


def print_clues(event: GameEvent, show_thinking: bool) -> None:
    print(f"\n{Colors.BOLD}Clues:{Colors.RESET}")
    for clue in event.state.clues:
        if clue.is_eliminated:
            print(f"  {Colors.GRAY}{clue.player_name:<20} {clue.text:<15} "
                  f"x {clue.elimination_reason}{Colors.RESET}")
        else:
            print(f"  {clue.player_name:<20} {Colors.GREEN}{clue.text}{Colors.RESET}")
        if show_thinking and clue.thinking:
            print(f"    {Colors.DIM}{clue.thinking[:200]}{Colors.RESET}")


def print_guess(event: GameEvent, show_thinking: bool) -> None:
    state = event.state
    if show_thinking and state.guesser_thinking:
        print(f"\n  {Colors.DIM}{state.guesser_thinking[:300]}{Colors.RESET}")
    if event.data.get("is_correct"):
        print(f"\n{Colors.GREEN}{Colors.BOLD}Guess: {state.current_guess}  CORRECT{Colors.RESET}")
    else:
        print(f"\n{Colors.RED}Guess: {state.current_guess}  WRONG "
              f"(was {state.mystery_word}){Colors.RESET}")


def make_provider_factory(seed: int | None):
    """Seed mock players so demo games are reproducible."""

    def factory(player: Player):
        if player.provider == "mock":
            player_seed = None if seed is None else f"{seed}-{player.id}"
            return create_provider("mock", player.model, seed=player_seed)
        return create_provider(player.provider, player.model)

    return factory


def make_printer(show_thinking: bool):
    """Build the observer that renders the game as it unfolds."""

    def on_event(event: GameEvent) -> None:
        if event.event_type == EventType.PHASE_CHANGED and event.data.get("phase") == FlowState.GENERATING_CLUES.value:
            print_round_header(event)
        elif event.event_type == EventType.CLUE_ADDED:
            print(f"  {Colors.DIM}... clue received from {event.data.get('player_id')}{Colors.RESET}")
        elif event.event_type == EventType.CLUES_PROCESSED:
            print_clues(event, show_thinking)
        elif event.event_type == EventType.ROUND_SKIPPED:
            print(f"\n{Colors.YELLOW}Every clue was eliminated - round skipped{Colors.RESET}")
        elif event.event_type == EventType.GUESS_MADE:
            print_guess(event, show_thinking)
        elif event.event_type == EventType.ERROR:
            print(f"\n{Colors.RED}{Colors.BOLD}ERROR: {event.data.get('message')}{Colors.RESET}")

    return on_event


async def main():
    parser = argparse.ArgumentParser(
        description="Run a Just One game with LLM players",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Demo game with three mock players
  python scripts/run_game.py --skip-delay 0 --guess-delay 0

  # Mixed table (first player guesses first)
  python scripts/run_game.py --player anthropic:claude-sonnet-4-20250514:Claude \\
                             --player openai:gpt-4o \\
                             --player google:gemini-2.5-flash \\
                             --player ollama:llama3.1
        """
    )
    parser.add_argument(
        "--player", action="append", default=None, metavar="PROVIDER[:MODEL[:NAME]]",
        help="Add a player (repeatable, 3-7 players). Default: three mock players.",
    )
    parser.add_argument("--rounds", type=int, default=13, help="Number of rounds")
    parser.add_argument("--skip-delay", type=float, default=3.0,
                        help="Pause in seconds after a skipped round")
    parser.add_argument("--guess-delay", type=float, default=5.0,
                        help="Pause in seconds after a guess")
    parser.add_argument("--seed", type=int, default=None, help="Random seed for word draws")
    parser.add_argument("--words", type=Path, default=None, help="Word list file (one word per line)")
    parser.add_argument("--output", type=Path, default=None, help="Directory to save the game record")
    parser.add_argument("--show-thinking", action="store_true", help="Print agent reasoning")
    parser.add_argument("--verbose", "-v", action="store_true", help="Debug logging")
    parser.add_argument("--quiet", "-q", action="store_true", help="Only warnings and errors")
    args = parser.parse_args()

    if args.quiet:
        logging.basicConfig(level=logging.WARNING)
    elif args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(asctime)s - %(levelname)s - %(message)s")
    else:
        logging.basicConfig(level=logging.INFO, format="%(message)s")

    if args.player:
        try:
            player_configs = [parse_player_spec(spec) for spec in args.player]
        except ValueError as e:
            parser.error(str(e))
    else:
        player_configs = default_player_configs()

    players = build_players(player_configs)
    try:
        config = GameConfig(
            total_rounds=args.rounds,
            skip_delay=args.skip_delay,
            guess_delay=args.guess_delay,
        )
    except ValidationError as e:
        error = e.errors()[0]
        parser.error(f"invalid game settings: {error['loc'][0]}: {error['msg']}")

    word_source = WordSource(
        words=load_wordlist(args.words) if args.words else None,
        seed=args.seed,
    )

    print(f"\n{Colors.BOLD}Players:{Colors.RESET}")
    for player in players:
        role = " (guesser)" if player.is_guesser else ""
        print(f"  {player.name:<24} {player.provider}:{player.model}{role}")

    orchestrator = GameOrchestrator(
        players,
        config=config,
        word_source=word_source,
        provider_factory=make_provider_factory(args.seed),
    )
    orchestrator.subscribe(make_printer(args.show_thinking))

    state = await orchestrator.start_game()

    final = get_final_score(state)
    print(f"\n{Colors.BOLD}{'=' * 60}{Colors.RESET}")
    if state.phase == FlowState.GAME_COMPLETE:
        print(f"{Colors.BOLD}FINAL SCORE: {final.score}/{state.total_rounds}{Colors.RESET}")
        print(f"{Colors.CYAN}{final.rating}{Colors.RESET}")
    else:
        print(f"{Colors.YELLOW}Game ended in phase {state.phase.value}: {state.error or 'stopped'}{Colors.RESET}")

    if args.output:
        record = GameRecord.from_state(state, config, orchestrator.traces)
        path = record.save(args.output)
        print(f"\nGame record saved to {path}")


if __name__ == "__main__":
    asyncio.run(main())
