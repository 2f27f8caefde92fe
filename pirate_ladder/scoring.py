"""Per-node treasure and the leaderboard."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Sequence

from pirate_ladder.dice import RandomSource, SeededRandomSource

if TYPE_CHECKING:
    from pirate_ladder.players import Player

REWARD_RANGE = (5, 20)


@dataclass
class RankingRow:
    rank: int
    player: Player
    score: int
    position: int


class ScoreBoard:
    """Claim-once rewards: the first player to land on a node takes its reward."""

    def __init__(self, size: int, rng: RandomSource | None = None):
        self.size = size
        self.node_reward: dict[int, int] = {}
        self.node_claimed: dict[int, bool] = {}
        self.assign_rewards(rng or SeededRandomSource())

    def assign_rewards(self, rng: RandomSource) -> None:
        """Draw a fresh reward for every node and clear all claims.

        Node 1 (the start) never carries a reward.
        """
        low, high = REWARD_RANGE
        for node in range(1, self.size + 1):
            self.node_reward[node] = 0 if node == 1 else rng.draw_reward(low, high)
            self.node_claimed[node] = False

    def reward(self, node: int) -> int:
        return self.node_reward.get(node, 0)

    def is_claimed(self, node: int) -> bool:
        return self.node_claimed.get(node, False)

    def available(self, node: int) -> int:
        """Reward still on offer at *node* (0 once claimed)."""
        if self.is_claimed(node):
            return 0
        return self.reward(node)

    def claim(self, node: int, player: Player) -> bool:
        """Credit *player* with the reward at *node* if nobody has taken it yet."""
        gained = self.available(node)
        if gained <= 0:
            return False
        self.node_claimed[node] = True
        player.score += gained
        return True

    def ranking(self, players: Sequence[Player]) -> list[RankingRow]:
        # sorted() is stable, so tied players keep seating order
        ordered = sorted(players, key=lambda p: p.score, reverse=True)
        return [
            RankingRow(rank=i + 1, player=p, score=p.score, position=p.position)
            for i, p in enumerate(ordered)
        ]

    def leaderboard_text(self, players: Sequence[Player]) -> str:
        lines = ["Leaderboard:", ""]
        for row in self.ranking(players):
            lines.append(f"{row.rank}. {row.player.name}  | Score: {row.score}  | Pos: {row.position}")
        return "\n".join(lines)


def scoreboard_text(players: Sequence[Player]) -> str:
    """Final score sheet in seating order."""
    lines = ["Final scores:", ""]
    for p in players:
        lines.append(f"{p.name} : {p.score}")
    return "\n".join(lines)
