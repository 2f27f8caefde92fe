"""Randomness used by the game: die, roll sign, node sampling, node rewards."""

from __future__ import annotations

import random
from typing import Protocol, runtime_checkable

POSITIVE_PROBABILITY = 0.7


@runtime_checkable
class RandomSource(Protocol):
    """Structural interface — anything with these methods can drive a game.

    Tests swap in a scripted implementation; the CLI uses a seeded one.
    """

    def roll_die(self) -> int: ...

    def roll_sign(self) -> bool: ...

    def sample_node(self, size: int) -> int: ...

    def draw_reward(self, low: int, high: int) -> int: ...


class SeededRandomSource:
    """Default source backed by a private ``random.Random``.

    ``seed=None`` draws from OS entropy, so two sources never share state.
    """

    def __init__(self, seed: int | None = None):
        self.seed = seed
        self._random = random.Random(seed)

    def roll_die(self) -> int:
        """Uniform value 1–6."""
        return self._random.randint(1, 6)

    def roll_sign(self) -> bool:
        """True (move forward) with probability 0.7."""
        return self._random.random() < POSITIVE_PROBABILITY

    def sample_node(self, size: int) -> int:
        return self._random.randint(1, size)

    def draw_reward(self, low: int, high: int) -> int:
        return self._random.randint(low, high)
