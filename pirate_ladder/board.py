"""Board topology and movement queries for the pirate-map path game."""

from __future__ import annotations

import logging
from collections import deque

from pirate_ladder.dice import RandomSource, SeededRandomSource

logger = logging.getLogger(__name__)

BOARD_SIZE = 64
SHORTCUT_COUNT = 5
ATTEMPTS_PER_SHORTCUT = 1000


def is_star_position(node: int) -> bool:
    """Every fifth node carries a star (bonus turn when landed on)."""
    return node > 0 and node % 5 == 0


def is_prime(n: int) -> bool:
    if n <= 1:
        return False
    if n <= 3:
        return True
    if n % 2 == 0 or n % 3 == 0:
        return False
    i = 5
    while i * i <= n:
        if n % i == 0 or n % (i + 2) == 0:
            return False
        i += 6
    return True


class BoardGraph:
    """Nodes 1..size joined by a forward backbone plus undirected shortcuts.

    The backbone edge ``i -> i+1`` always exists for ``i < size``.  Each
    shortcut joins two non-adjacent nodes, and no node belongs to more than
    one shortcut.  Build it once per game and only query it afterwards.
    """

    def __init__(self, size: int = BOARD_SIZE, shortcuts=()):
        if size < 2:
            raise ValueError(f"Board needs at least 2 nodes, got {size}.")
        self.size = size
        self.adjacency: dict[int, list[int]] = {
            i: [i + 1] if i < size else [] for i in range(1, size + 1)
        }
        self.shortcuts: list[tuple[int, int]] = []
        self._shortcut_nodes: set[int] = set()
        for a, b in shortcuts:
            if not self.can_link(a, b):
                raise ValueError(f"Invalid shortcut {a}-{b} on a {size}-node board.")
            self._link(a, b)

    # ── construction ────────────────────────────────────────────────

    def can_link(self, a: int, b: int) -> bool:
        """Whether ``a``–``b`` may be added as a new shortcut."""
        if not (1 <= a <= self.size and 1 <= b <= self.size):
            return False
        if a == b or abs(a - b) == 1:
            return False
        if a in self._shortcut_nodes or b in self._shortcut_nodes:
            return False
        return (min(a, b), max(a, b)) not in self.shortcuts

    def _link(self, a: int, b: int) -> None:
        self.adjacency[a].append(b)
        self.adjacency[b].append(a)
        self.shortcuts.append((min(a, b), max(a, b)))
        self._shortcut_nodes.update((a, b))
        logger.debug("Shortcut placed: %d <-> %d", a, b)

    def is_shortcut(self, a: int, b: int) -> bool:
        return (min(a, b), max(a, b)) in self.shortcuts

    # ── queries ─────────────────────────────────────────────────────

    def next_forward(self, pos: int) -> int:
        """Plain one-step advance along the backbone.

        Shortcuts are never taken here; a node with no backbone successor
        (the last node) stays put.
        """
        neighbors = self.adjacency.get(pos)
        if neighbors and pos + 1 in neighbors:
            return pos + 1
        return pos

    def next_on_shortest_path(self, pos: int) -> int:
        """First hop of a shortest route from *pos* to the last node.

        Breadth-first over backbone and shortcuts.  The backbone successor
        is always expanded before any shortcut, so among equally short
        routes the one leaving by the backbone wins.
        """
        target = self.size
        if pos >= target:
            return pos

        prev: dict[int, int] = {pos: pos}
        queue = deque([pos])
        while queue:
            u = queue.popleft()
            if u == target:
                break
            for v in self._ordered_neighbors(u):
                if 1 <= v <= self.size and v not in prev:
                    prev[v] = u
                    queue.append(v)

        if target not in prev:
            logger.warning("No route from %d to %d; falling back to the backbone.", pos, target)
            return min(self.size, pos + 1)

        hop = target
        while prev[hop] != pos:
            hop = prev[hop]
        return hop

    def _ordered_neighbors(self, u: int) -> list[int]:
        neighbors = list(self.adjacency.get(u, ()))
        if u + 1 in neighbors:
            neighbors.remove(u + 1)
            neighbors.insert(0, u + 1)
        return neighbors

    def distance_to_end(self, pos: int) -> int | None:
        """Number of hops on a shortest route to the last node."""
        hops = 0
        seen = {pos}
        frontier = [pos]
        while frontier:
            if self.size in frontier:
                return hops
            nxt = []
            for u in frontier:
                for v in self.adjacency.get(u, ()):
                    if v not in seen:
                        seen.add(v)
                        nxt.append(v)
            frontier = nxt
            hops += 1
        return None


def build_board(
    size: int = BOARD_SIZE,
    shortcut_count: int = SHORTCUT_COUNT,
    rng: RandomSource | None = None,
) -> BoardGraph:
    """Build a board and place up to *shortcut_count* random shortcuts.

    Sampling gives up after ``shortcut_count * 1000`` draws; the board then
    simply has fewer shortcuts.
    """
    if shortcut_count < 0:
        raise ValueError(f"Shortcut count must be non-negative, got {shortcut_count}.")
    rng = rng or SeededRandomSource()
    board = BoardGraph(size)

    attempts = 0
    max_attempts = shortcut_count * ATTEMPTS_PER_SHORTCUT
    while len(board.shortcuts) < shortcut_count and attempts < max_attempts:
        attempts += 1
        a = rng.sample_node(size)
        b = rng.sample_node(size)
        if board.can_link(a, b):
            board._link(a, b)

    if len(board.shortcuts) < shortcut_count:
        logger.warning(
            "Placed %d of %d shortcuts after %d attempts.",
            len(board.shortcuts), shortcut_count, attempts,
        )
    return board
