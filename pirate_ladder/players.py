"""Player tokens and single-hop movement."""

from __future__ import annotations

from dataclasses import dataclass, field

from pirate_ladder.board import BoardGraph

MIN_PLAYERS = 2
MAX_PLAYERS = 4

# Light blue, yellow, pink, green — assigned in seat order
TOKEN_COLORS: tuple[str, ...] = ("#50C8FF", "#FFE650", "#FF78B4", "#78FF78")


@dataclass(eq=False)
class Player:
    """Mutable per-player state.

    ``move_history`` holds every position the token left on a forward hop,
    most recent last.  Backward movement only ever pops this stack.
    """

    name: str
    token_color: str = TOKEN_COLORS[0]
    position: int = 1
    move_history: list[int] = field(default_factory=list)
    score: int = 0

    @property
    def can_retreat(self) -> bool:
        return bool(self.move_history)

    def reset(self) -> None:
        self.position = 1
        self.move_history.clear()
        self.score = 0


def step_forward(player: Player, board: BoardGraph, use_shortest_path: bool) -> int | None:
    """Advance *player* one hop.  Returns the new position, or None at the end."""
    pos = player.position
    if pos >= board.size:
        return None
    player.move_history.append(pos)

    if use_shortest_path:
        new_pos = board.next_on_shortest_path(pos)
    else:
        new_pos = board.next_forward(pos)
    player.position = max(1, min(board.size, new_pos))
    return player.position


def step_backward(player: Player) -> int | None:
    """Undo the most recent forward hop.  Returns None when nothing to undo."""
    if not player.move_history:
        return None
    player.position = player.move_history.pop()
    return player.position
