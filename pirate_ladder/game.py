"""Turn engine — runs one game session as an explicit state machine."""

from __future__ import annotations

import logging
from collections import deque
from dataclasses import dataclass, field
from enum import Enum
from typing import Protocol, Sequence

from pirate_ladder.board import BoardGraph, build_board, is_prime, is_star_position
from pirate_ladder.config import GameConfig
from pirate_ladder.dice import RandomSource, SeededRandomSource
from pirate_ladder.players import (
    MAX_PLAYERS,
    MIN_PLAYERS,
    TOKEN_COLORS,
    Player,
    step_backward,
    step_forward,
)
from pirate_ladder.scoring import ScoreBoard

logger = logging.getLogger(__name__)


class EngineState(str, Enum):
    IDLE = "idle"  # no game started yet
    AWAITING_ROLL = "awaiting_roll"
    BONUS_TURN = "bonus_turn"  # same player rolls again
    RESOLVING = "resolving"  # a move is being stepped through
    GAME_OVER = "game_over"


# ── Structured types ────────────────────────────────────────────────

@dataclass
class StepEvent:
    """One single-hop transition of a token."""

    player: Player
    from_position: int
    to_position: int
    direction: str  # "forward" | "backward"
    via_shortcut: bool = False
    remaining: int = 0
    final: bool = False  # last hop of the move; the turn has been resolved


@dataclass
class TurnResult:
    """Outcome of a roll command.

    A rejected command carries ``ok=False`` and a message; nothing else is
    meaningful.  ``resolved`` is False only for the partial result returned
    by :meth:`TurnEngine.begin_roll` while the move is still being stepped.
    """

    ok: bool = True
    message: str = ""
    player: Player | None = None
    dice_value: int | None = None
    is_positive: bool = True
    use_shortest_path: bool = False
    start_position: int | None = None
    final_position: int | None = None
    steps: list[StepEvent] = field(default_factory=list)
    claimed_reward: int | None = None
    bonus_turn: bool = False
    game_over: bool = False
    winner: Player | None = None
    resolved: bool = False


@dataclass
class SetupResult:
    ok: bool = True
    message: str = ""
    players: list[Player] = field(default_factory=list)
    current_player: Player | None = None


@dataclass
class _PendingMove:
    result: TurnResult
    steps_left: int


# ── Observer ────────────────────────────────────────────────────────

class GameObserver(Protocol):
    """Receives events as a game is played (sound, animation, logs...)."""

    def on_step(self, event: StepEvent) -> None: ...

    def on_turn(self, result: TurnResult) -> None: ...


@dataclass
class ListObserver:
    """Default observer — collects events into lists."""

    steps: list[StepEvent] = field(default_factory=list)
    turns: list[TurnResult] = field(default_factory=list)

    def on_step(self, event: StepEvent) -> None:
        self.steps.append(event)

    def on_turn(self, result: TurnResult) -> None:
        self.turns.append(result)


# ── Engine ──────────────────────────────────────────────────────────

class TurnEngine:
    """Own every piece of mutable game state and apply commands to it.

    Commands are ``start_game``, ``roll`` (or ``begin_roll`` followed by
    ``step`` calls from an external ticker) and ``reset``.  The caller must
    not submit commands concurrently.
    """

    def __init__(
        self,
        config: GameConfig | None = None,
        rng: RandomSource | None = None,
        observer: GameObserver | None = None,
    ):
        self.config = config or GameConfig()
        self.rng = rng or SeededRandomSource(self.config.seed)
        self.observer = observer or ListObserver()

        self.state = EngineState.IDLE
        self.players: list[Player] = []
        self.board: BoardGraph | None = None
        self.scoreboard: ScoreBoard | None = None
        self.turn_queue: deque[Player] = deque()
        self.current_player: Player | None = None
        self.winner: Player | None = None
        self.last_result: TurnResult | None = None
        self._pending: _PendingMove | None = None

    @property
    def game_over(self) -> bool:
        return self.state is EngineState.GAME_OVER

    @property
    def pending(self) -> TurnResult | None:
        """The roll currently being stepped through, if any."""
        return self._pending.result if self._pending else None

    # ── setup ───────────────────────────────────────────────────────

    def start_game(
        self,
        names: Sequence[str],
        player_count: int | None = None,
    ) -> SetupResult:
        """Validate the roster and begin a fresh session.

        On rejection the engine is left exactly as it was.
        """
        error = _validate_roster(names, player_count)
        if error:
            logger.info("start_game rejected: %s", error)
            return SetupResult(ok=False, message=error)

        self.players = [
            Player(name=name.strip(), token_color=TOKEN_COLORS[i])
            for i, name in enumerate(names)
        ]
        self._new_session()
        logger.info(
            "Game started: %s on a %d-node board with %d shortcuts.",
            ", ".join(p.name for p in self.players),
            self.board.size, len(self.board.shortcuts),
        )
        return SetupResult(
            ok=True,
            message=f"First turn: {self.current_player.name}.",
            players=list(self.players),
            current_player=self.current_player,
        )

    def reset(self) -> SetupResult:
        """Abort any move in flight and restart the session with the same players."""
        if not self.players:
            return SetupResult(ok=False, message="No game to reset.")

        for p in self.players:
            p.reset()
        self._new_session()
        logger.info("Game reset. First turn: %s.", self.current_player.name)
        return SetupResult(
            ok=True,
            message=f"Game reset. First turn: {self.current_player.name}.",
            players=list(self.players),
            current_player=self.current_player,
        )

    def _new_session(self) -> None:
        self._pending = None
        self.winner = None
        self.last_result = None
        self.board = build_board(self.config.size, self.config.shortcut_count, self.rng)
        self.scoreboard = ScoreBoard(self.config.size, self.rng)
        self.turn_queue = deque(self.players)
        self.current_player = self.turn_queue.popleft()
        self.state = EngineState.AWAITING_ROLL

    # ── rolling ─────────────────────────────────────────────────────

    def roll(self) -> TurnResult:
        """Roll and play the whole move at once."""
        result = self.begin_roll()
        if not result.ok or result.resolved:
            return result
        while True:
            event = self.step()
            if event is None or event.final:
                break
        return self.last_result

    def begin_roll(self) -> TurnResult:
        """Roll the die for the current player and start the move.

        The returned result has no steps yet; drive the move with
        :meth:`step`.  If the token cannot move at all the turn is resolved
        immediately.
        """
        if self.state not in (EngineState.AWAITING_ROLL, EngineState.BONUS_TURN):
            return self._reject(f"Cannot roll while {self.state.value}.")

        player = self.current_player
        dice_value = self.rng.roll_die()
        is_positive = self.rng.roll_sign()
        # Prime boost looks at the position before this move
        use_shortest = is_positive and is_prime(player.position)

        result = TurnResult(
            player=player,
            dice_value=dice_value,
            is_positive=is_positive,
            use_shortest_path=use_shortest,
            start_position=player.position,
        )
        self._pending = _PendingMove(result=result, steps_left=dice_value)
        self.state = EngineState.RESOLVING
        logger.debug(
            "%s rolled %d %s from %d%s",
            player.name, dice_value, "forward" if is_positive else "backward",
            player.position, " (prime boost)" if use_shortest else "",
        )

        if self._move_exhausted():
            self._resolve()
        return result

    def step(self) -> StepEvent | None:
        """Apply one hop of the move in progress.

        Returns None (and changes nothing) when no move is in progress.  The
        hop that finishes the move also resolves the turn and is marked
        ``final``.
        """
        if self.state is not EngineState.RESOLVING or self._pending is None:
            logger.info("step rejected: no move in progress (%s).", self.state.value)
            return None

        pending = self._pending
        result = pending.result
        player = result.player
        before = player.position

        if result.is_positive:
            step_forward(player, self.board, result.use_shortest_path)
            direction = "forward"
        else:
            step_backward(player)
            direction = "backward"
        pending.steps_left -= 1

        event = StepEvent(
            player=player,
            from_position=before,
            to_position=player.position,
            direction=direction,
            via_shortcut=self.board.is_shortcut(before, player.position),
            remaining=pending.steps_left,
        )
        result.steps.append(event)
        logger.debug("%s %s %d -> %d", player.name, direction, before, player.position)

        if self._move_exhausted():
            event.final = True
            event.remaining = 0
            self.observer.on_step(event)
            self._resolve()
        else:
            self.observer.on_step(event)
        return event

    def _move_exhausted(self) -> bool:
        pending = self._pending
        player = pending.result.player
        if pending.steps_left <= 0:
            return True
        if pending.result.is_positive:
            return player.position >= self.board.size
        return not player.can_retreat

    def _resolve(self) -> None:
        """Score the landing node, then grant a bonus turn, end the game, or rotate."""
        result = self._pending.result
        self._pending = None
        player = result.player
        final = player.position
        result.final_position = final
        result.resolved = True

        if self.scoreboard.claim(final, player):
            result.claimed_reward = self.scoreboard.reward(final)
            logger.debug("%s claimed %d at node %d", player.name, result.claimed_reward, final)

        result.bonus_turn = is_star_position(final) and final < self.board.size

        if final >= self.board.size:
            result.game_over = True
            result.winner = player
            self.winner = player
            self.state = EngineState.GAME_OVER
            logger.info("%s wins on node %d with %d points.", player.name, final, player.score)
        elif result.bonus_turn:
            self.state = EngineState.BONUS_TURN
            logger.debug("%s earns a bonus turn on star node %d", player.name, final)
        else:
            self.turn_queue.append(player)
            self.current_player = self.turn_queue.popleft()
            self.state = EngineState.AWAITING_ROLL

        result.message = describe_turn(result)
        self.last_result = result
        self.observer.on_turn(result)

    def _reject(self, message: str) -> TurnResult:
        logger.info("roll rejected: %s", message)
        return TurnResult(ok=False, message=message)


def _validate_roster(names: Sequence[str], player_count: int | None) -> str | None:
    """Return an error message, or None if the roster is acceptable."""
    if not names:
        return "At least one player name is required."
    count = len(names) if player_count is None else player_count
    if not MIN_PLAYERS <= count <= MAX_PLAYERS:
        return f"Player count must be between {MIN_PLAYERS} and {MAX_PLAYERS}, got {count}."
    if len(names) != count:
        return f"Expected {count} player names, got {len(names)}."
    cleaned = [n.strip() if isinstance(n, str) else "" for n in names]
    if any(not n for n in cleaned):
        return "Player names must not be blank."
    if len(set(cleaned)) != len(cleaned):
        return "Every player must have a different name."
    return None


def describe_turn(result: TurnResult) -> str:
    """One-line narrative of a resolved turn."""
    if not result.ok:
        return result.message
    player = result.player
    colour = "forward" if result.is_positive else "backward"
    parts = [f"{player.name} rolled {result.dice_value} ({colour})"]
    if result.use_shortest_path:
        parts.append("PRIME BOOST: shortest path")

    start, final = result.start_position, result.final_position
    if result.is_positive:
        parts.append(f"moved from {start} to {final}")
    elif start == final:
        parts.append("cannot move back any further")
    else:
        parts.append(f"moved back from {start} to {final}")

    if result.claimed_reward:
        parts.append(f"SCORE +{result.claimed_reward} (total {player.score})")
    if result.game_over:
        parts.append(f"{player.name} WINS")
    elif result.bonus_turn:
        parts.append("star node, bonus turn")
    return " | ".join(parts) + "."
