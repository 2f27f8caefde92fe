"""CLI entry point: python -m pirate_ladder {play,layout,board}."""

from __future__ import annotations

import argparse
import dataclasses
import sys

from pirate_ladder.board import build_board
from pirate_ladder.chart import make_score_chart, render_board
from pirate_ladder.config import GameConfig
from pirate_ladder.dice import SeededRandomSource
from pirate_ladder.game import TurnEngine
from pirate_ladder.layout import (
    POSITION_FILE,
    default_node_positions,
    load_node_positions,
    save_node_positions,
)
from pirate_ladder.logger_config import configure_logging
from pirate_ladder.scoring import scoreboard_text


def _config_from_args(args: argparse.Namespace) -> GameConfig:
    """Environment defaults, overridden by whatever flags were given.

    Bad settings from either source end the run with a message on stderr.
    """
    overrides = {
        name: getattr(args, name)
        for name in ("size", "shortcut_count", "seed", "max_turns")
        if getattr(args, name, None) is not None
    }
    try:
        return dataclasses.replace(GameConfig.from_env(), **overrides)
    except ValueError as exc:
        print(f"Invalid settings: {exc}", file=sys.stderr)
        sys.exit(1)


# ── play ─────────────────────────────────────────────────────────────

def cmd_play(args: argparse.Namespace) -> None:
    """Auto-play one full game, printing each turn."""
    config = _config_from_args(args)
    engine = TurnEngine(config=config)

    setup = engine.start_game(args.names)
    if not setup.ok:
        print(setup.message, file=sys.stderr)
        sys.exit(1)

    board = engine.board
    print(f"Board: 1..{board.size}, shortcuts: "
          + (", ".join(f"{a}<->{b}" for a, b in board.shortcuts) or "none"))
    print(setup.message)

    turns = 0
    while not engine.game_over and turns < config.max_turns:
        result = engine.roll()
        turns += 1
        print(f"[{turns}] {result.message}")
        if not result.game_over and not result.bonus_turn:
            print(f"     Next: {engine.current_player.name}.")

    if not engine.game_over:
        print(f"\nStopped after {turns} turns without a winner.")

    print()
    print(engine.scoreboard.leaderboard_text(engine.players))
    print()
    print(scoreboard_text(engine.players))

    if args.chart:
        out = make_score_chart(engine.players, output_path=args.chart)
        print(f"Chart saved to {out}")


# ── layout ───────────────────────────────────────────────────────────

def cmd_layout(args: argparse.Namespace) -> None:
    """Write the default node-coordinate file."""
    config = _config_from_args(args)
    points = default_node_positions(args.width, args.height, size=config.size)
    path = save_node_positions(args.output, points)
    print(f"Wrote {len(points)} node positions to {path}")


# ── board ────────────────────────────────────────────────────────────

def cmd_board(args: argparse.Namespace) -> None:
    """Render a freshly built board to PNG."""
    config = _config_from_args(args)
    board = build_board(config.size, config.shortcut_count, SeededRandomSource(config.seed))

    positions = None
    if args.positions:
        positions = load_node_positions(args.positions, size=config.size)
        if positions is None:
            print(f"Could not load {args.positions}; using the default layout.", file=sys.stderr)

    out = render_board(board, output_path=args.output, positions=positions)
    print(f"Board saved to {out}")


# ── main ─────────────────────────────────────────────────────────────

def _add_board_options(p: argparse.ArgumentParser) -> None:
    p.add_argument("--size", type=int, help="Number of nodes (default 64)")
    p.add_argument("--shortcuts", dest="shortcut_count", type=int, help="Shortcut links (default 5)")
    p.add_argument("--seed", type=int, help="Random seed for a reproducible game")


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(
        prog="pirate_ladder",
        description="Pirate-map ladder game with shortcuts, prime boosts and star bonus turns",
    )
    parser.add_argument("--verbose", "-v", action="store_true", help="Debug logging")
    sub = parser.add_subparsers(dest="command")

    p_play = sub.add_parser("play", help="Auto-play a game between named players")
    p_play.add_argument("names", nargs="+", help="2 to 4 distinct player names")
    _add_board_options(p_play)
    p_play.add_argument("--max-turns", type=int, help="Stop after this many rolls")
    p_play.add_argument("--chart", help="Save a leaderboard PNG here")

    p_layout = sub.add_parser("layout", help="Write a default node-coordinate file")
    p_layout.add_argument("--output", "-o", default=POSITION_FILE, help="Output path")
    p_layout.add_argument("--width", type=int, default=640)
    p_layout.add_argument("--height", type=int, default=680)
    p_layout.add_argument("--size", type=int, help="Number of nodes (default 64)")

    p_board = sub.add_parser("board", help="Render a board snapshot")
    _add_board_options(p_board)
    p_board.add_argument("--positions", help="Node-coordinate file to lay nodes out with")
    p_board.add_argument("--output", "-o", default="board.png", help="Output PNG path")

    args = parser.parse_args(argv)
    configure_logging("DEBUG" if args.verbose else "WARNING")

    if args.command == "play":
        cmd_play(args)
    elif args.command == "layout":
        cmd_layout(args)
    elif args.command == "board":
        cmd_board(args)
    else:
        parser.print_help()


if __name__ == "__main__":
    main()
