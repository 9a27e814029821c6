"""Command-line entrypoint for backgammon-engine.

Subcommands:
- ``play``: watch agents play whole games and print the results
- ``serve``: run the JSON API for a browser front end
"""

from __future__ import annotations

import argparse
import logging

from backgammon_engine import __version__
from backgammon_engine.config import GameConfig
from backgammon_engine.core.board import board_to_string
from backgammon_engine.core.dice import random_dice_source
from backgammon_engine.core.types import Player
from backgammon_engine.ai.agents import greedy_agent, random_agent
from backgammon_engine.ai.self_play import compute_game_statistics, play_game

AGENTS = {
    "greedy": lambda seed: greedy_agent(),
    "random": random_agent,
}


def build_parser() -> argparse.ArgumentParser:
    """Build the top-level argument parser."""
    parser = argparse.ArgumentParser(
        prog="backgammon-engine",
        description="Backgammon rules engine",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"backgammon-engine {__version__}",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Log every move")
    subparsers = parser.add_subparsers(dest="command")

    play = subparsers.add_parser("play", help="Play agents against each other")
    play.add_argument("--white", choices=sorted(AGENTS), default="greedy")
    play.add_argument("--black", choices=sorted(AGENTS), default="greedy")
    play.add_argument("--games", type=int, default=1, help="Number of games (default: 1)")
    play.add_argument("--seed", type=int, default=None, help="Dice/agent seed")
    play.add_argument("--max-turns", type=int, default=1000)

    serve = subparsers.add_parser("serve", help="Run the JSON API")
    serve.add_argument("--host", default="localhost", help="Host to bind to (default: localhost)")
    serve.add_argument("--port", type=int, default=8002, help="Port to bind to (default: 8002)")
    serve.add_argument("--vs-ai", action="store_true", help="Let the AI play black")
    serve.add_argument("--seed", type=int, default=None)
    serve.add_argument("--debug", action="store_true", help="Run Flask in debug mode")

    return parser


def run_play(args: argparse.Namespace) -> int:
    config = GameConfig(seed=args.seed, max_turns=args.max_turns)
    dice_source = random_dice_source(args.seed)
    white = AGENTS[args.white](args.seed)
    black = AGENTS[args.black](None if args.seed is None else args.seed + 1)

    games = []
    for index in range(args.games):
        result = play_game(white, black, dice_source, config)
        games.append(result)
        winner = result.winner.value if result.winner else "nobody"
        print(f"Game {index + 1}: {winner} wins after {result.num_turns} turns "
              f"(hits W{result.hits[Player.WHITE]} B{result.hits[Player.BLACK]})")
        if args.games == 1 and result.final_board is not None:
            print(board_to_string(result.final_board))

    if args.games > 1:
        stats = compute_game_statistics(games)
        print(f"White {white.name}: {stats['white_wins']} wins, "
              f"Black {black.name}: {stats['black_wins']} wins, "
              f"unfinished: {stats['unfinished']}, avg turns: {stats['avg_turns']:.1f}")
    return 0


def run_serve(args: argparse.Namespace) -> int:
    from backgammon_engine.web.server import run

    config = GameConfig(vs_ai=args.vs_ai, seed=args.seed)
    print(f"Backgammon server: http://{args.host}:{args.port}")
    run(config, host=args.host, port=args.port, debug=args.debug)
    return 0


def main(argv: list[str] | None = None) -> int:
    """CLI entrypoint used by the `backgammon-engine` console script."""
    parser = build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    if args.command == "play":
        return run_play(args)
    if args.command == "serve":
        return run_serve(args)
    parser.print_help()
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
