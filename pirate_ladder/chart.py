"""Static renderings: score leaderboard bars and a board snapshot."""

from __future__ import annotations

from typing import Sequence

import matplotlib
matplotlib.use("Agg")  # non-interactive backend

import matplotlib.pyplot as plt

from pirate_ladder.board import BoardGraph, is_prime, is_star_position
from pirate_ladder.layout import default_node_positions
from pirate_ladder.players import Player
from pirate_ladder.scoring import ScoreBoard


def make_score_chart(
    players: Sequence[Player],
    output_path: str = "leaderboard.png",
    title: str = "Pirate Ladder Leaderboard",
) -> str:
    """Create a horizontal bar chart of player scores, sorted descending.

    Returns the path to the saved PNG.
    """
    ordered = sorted(players, key=lambda p: p.score, reverse=True)
    names = [p.name for p in ordered]
    scores = [p.score for p in ordered]
    colors = [p.token_color for p in ordered]

    fig, ax = plt.subplots(figsize=(8, max(3, len(names) * 0.7)))
    bars = ax.barh(names, scores, color=colors, edgecolor="#3C2814")

    # Annotate bars with score and board position
    for bar, p in zip(bars, ordered):
        ax.text(
            bar.get_width() + 1, bar.get_y() + bar.get_height() / 2,
            f"{p.score}  (node {p.position})",
            va="center", fontsize=11, fontweight="bold",
        )

    ax.set_xlabel("Score")
    ax.set_title(title, fontsize=14, fontweight="bold")
    ax.invert_yaxis()  # highest on top
    ax.set_xlim(left=0, right=max(scores + [1]) * 1.3 + 5)

    plt.tight_layout()
    fig.savefig(output_path, dpi=150)
    plt.close(fig)
    return output_path


def render_board(
    board: BoardGraph,
    output_path: str = "board.png",
    positions: Sequence[tuple[int, int]] | None = None,
    players: Sequence[Player] = (),
    scoreboard: ScoreBoard | None = None,
    title: str = "Pirate Ladder",
) -> str:
    """Draw nodes, the dashed backbone, shortcut links, markers and tokens.

    *positions* are node centres in node-id order (as read from the
    coordinate file); a default winding route is used when omitted.
    """
    if positions is None:
        positions = default_node_positions(size=board.size)
    centers = {i + 1: xy for i, xy in enumerate(positions)}

    fig, ax = plt.subplots(figsize=(8, 8.5))
    ax.set_facecolor("#462814")

    for i in range(1, board.size):
        (x0, y0), (x1, y1) = centers[i], centers[i + 1]
        ax.plot([x0, x1], [y0, y1], linestyle="--", color="#F5F5F5", linewidth=1.5, zorder=1)

    for a, b in board.shortcuts:
        (x0, y0), (x1, y1) = centers[a], centers[b]
        ax.plot([x0, x1], [y0, y1], color="#FFDC50", linewidth=3, zorder=2)

    for node, (x, y) in centers.items():
        ax.scatter([x], [y], s=160, color="#C8965A", edgecolors="#3C2814", zorder=3)
        ax.text(x, y, str(node), ha="center", va="center", fontsize=6, zorder=4)
        if is_star_position(node):
            ax.scatter([x + 12], [y - 12], marker="*", s=60, color="#FFD700", zorder=4)
        if is_prime(node):
            ax.scatter([x - 12], [y - 12], marker="D", s=14, color="#7FDBFF", zorder=4)
        if scoreboard is not None and scoreboard.available(node) > 0:
            ax.text(x, y + 14, f"+{scoreboard.available(node)}", ha="center", fontsize=5, color="#FFF5DC")

    # Offset tokens on a 2×2 grid so players sharing a node stay visible
    for idx, p in enumerate(players):
        x, y = centers[max(1, min(board.size, p.position))]
        dx = (idx % 2) * 10 - 5
        dy = (idx // 2) * 10 - 5
        ax.scatter([x + dx], [y + dy], s=90, color=p.token_color, edgecolors="black", zorder=5, label=p.name)

    if players:
        ax.legend(loc="upper right", fontsize=8)
    ax.set_title(title, fontsize=14, fontweight="bold")
    ax.invert_yaxis()  # screen coordinates: y grows downward
    ax.set_aspect("equal")
    ax.set_xticks([])
    ax.set_yticks([])

    plt.tight_layout()
    fig.savefig(output_path, dpi=150)
    plt.close(fig)
    return output_path
