"""Tests for the PNG renderers."""

import tempfile
from pathlib import Path

from pirate_ladder.board import BoardGraph
from pirate_ladder.chart import make_score_chart, render_board
from pirate_ladder.dice import SeededRandomSource
from pirate_ladder.players import TOKEN_COLORS, Player
from pirate_ladder.scoring import ScoreBoard


def _players():
    return [
        Player("Ann", token_color=TOKEN_COLORS[0], score=25, position=12),
        Player("Bob", token_color=TOKEN_COLORS[1], score=40, position=7),
    ]


def test_make_score_chart_writes_png():
    with tempfile.TemporaryDirectory() as tmp:
        out = make_score_chart(_players(), output_path=str(Path(tmp) / "scores.png"))
        assert Path(out).stat().st_size > 0


def test_render_board_writes_png():
    board = BoardGraph(64, shortcuts=[(3, 40), (10, 55)])
    scoreboard = ScoreBoard(64, SeededRandomSource(1))
    with tempfile.TemporaryDirectory() as tmp:
        out = render_board(
            board,
            output_path=str(Path(tmp) / "board.png"),
            players=_players(),
            scoreboard=scoreboard,
        )
        assert Path(out).stat().st_size > 0
