"""Game settings, with environment-variable overrides."""

from __future__ import annotations

import os
from dataclasses import dataclass

from pirate_ladder.board import BOARD_SIZE, SHORTCUT_COUNT

ENV_PREFIX = "PIRATE_LADDER_"


@dataclass(frozen=True)
class GameConfig:
    size: int = BOARD_SIZE
    shortcut_count: int = SHORTCUT_COUNT
    seed: int | None = None  # None = OS entropy
    max_turns: int = 1000  # auto-play safety valve

    def __post_init__(self):
        if self.size < 2:
            raise ValueError(f"size must be at least 2, got {self.size}")
        if self.shortcut_count < 0:
            raise ValueError(f"shortcut_count must be non-negative, got {self.shortcut_count}")
        if self.max_turns < 1:
            raise ValueError(f"max_turns must be positive, got {self.max_turns}")

    @classmethod
    def from_env(cls, environ=None) -> GameConfig:
        """Build a config from ``PIRATE_LADDER_*`` variables, defaulting the rest."""
        environ = os.environ if environ is None else environ
        defaults = cls()
        return cls(
            size=_int_var(environ, "SIZE", defaults.size),
            shortcut_count=_int_var(environ, "SHORTCUTS", defaults.shortcut_count),
            seed=_int_var(environ, "SEED", defaults.seed),
            max_turns=_int_var(environ, "MAX_TURNS", defaults.max_turns),
        )


def _int_var(environ, name: str, default: int | None) -> int | None:
    key = ENV_PREFIX + name
    raw = environ.get(key)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError:
        raise ValueError(f"{key} must be an integer, got {raw!r}") from None
