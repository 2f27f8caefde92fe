"""Node-coordinate file: one ``x,y`` line per node, node 1 first.

The engine never reads this file; it only promises that node ids 1..size
line up with the file's line order.  Renderers use it to place nodes.
"""

from __future__ import annotations

import logging
import math
from pathlib import Path

from pirate_ladder.board import BOARD_SIZE

logger = logging.getLogger(__name__)

POSITION_FILE = "node_positions.txt"

# Winding pirate-map route, as fractions of the drawable area
# fmt: off
ANCHORS: list[tuple[float, float]] = [
    (0.08, 0.85), (0.30, 0.80), (0.48, 0.75),
    (0.70, 0.85), (0.90, 0.65), (0.80, 0.45),
    (0.60, 0.35), (0.35, 0.30), (0.10, 0.40), (0.20, 0.15),
    (0.45, 0.10), (0.70, 0.18), (0.88, 0.35),
]
# fmt: on
MARGIN = 30


def load_node_positions(
    path: Path | str = POSITION_FILE,
    size: int = BOARD_SIZE,
) -> list[tuple[int, int]] | None:
    """Read node centres from *path*.

    Lines that don't have exactly two comma-separated fields are skipped.
    Returns ``None`` ("not loaded") if the file is missing, holds fewer than
    *size* usable lines, or has a non-integer coordinate.
    """
    path = Path(path)
    if not path.exists():
        logger.warning("Node position file %s not found.", path)
        return None

    points: list[tuple[int, int]] = []
    try:
        with path.open() as f:
            for line in f:
                if len(points) >= size:
                    break
                parts = line.split(",")
                if len(parts) != 2:
                    continue
                points.append((int(parts[0].strip()), int(parts[1].strip())))
    except (OSError, ValueError) as exc:
        logger.warning("Could not read node positions from %s: %s", path, exc)
        return None

    if len(points) < size:
        logger.warning("Node position file %s has %d of %d nodes.", path, len(points), size)
        return None
    return points


def save_node_positions(path: Path | str, points: list[tuple[int, int]]) -> Path:
    """Write one ``x,y`` line per node.  Returns the path written."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text("".join(f"{x},{y}\n" for x, y in points))
    return path


def default_node_positions(
    width: int = 640,
    height: int = 680,
    size: int = BOARD_SIZE,
) -> list[tuple[int, int]]:
    """Spread *size* nodes evenly (by arc length) along the anchor route."""
    board_w = width - 2 * MARGIN
    board_h = height - 2 * MARGIN
    pts = [(MARGIN + ax * board_w, MARGIN + ay * board_h) for ax, ay in ANCHORS]
    seg_len = [math.dist(pts[i], pts[i + 1]) for i in range(len(pts) - 1)]
    total = sum(seg_len)

    centers: list[tuple[int, int]] = []
    for idx in range(size):
        dist = total * idx / (size - 1) if size > 1 else 0.0
        acc = 0.0
        seg = 0
        while seg < len(seg_len) and acc + seg_len[seg] < dist:
            acc += seg_len[seg]
            seg += 1
        if seg >= len(seg_len):
            seg = len(seg_len) - 1
            t = 1.0
        else:
            t = (dist - acc) / seg_len[seg]
        (x0, y0), (x1, y1) = pts[seg], pts[seg + 1]
        centers.append((int(x0 + (x1 - x0) * t), int(y0 + (y1 - y0) * t)))
    return centers
