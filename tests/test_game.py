"""Tests for pirate_ladder.game (turn engine)."""

from pirate_ladder.board import BoardGraph
from pirate_ladder.config import GameConfig
from pirate_ladder.game import EngineState, ListObserver, TurnEngine, TurnResult


class ScriptedDice:
    """Deterministic random source — plays a scripted list of (value, forward) rolls."""

    def __init__(self, rolls: list[tuple[int, bool]], reward: int = 10):
        self.rolls = list(rolls)
        self.reward = reward
        self._sign = True

    def roll_die(self) -> int:
        value, self._sign = self.rolls.pop(0)
        return value

    def roll_sign(self) -> bool:
        return self._sign

    def sample_node(self, size: int) -> int:
        return 1

    def draw_reward(self, low: int, high: int) -> int:
        return self.reward


def _engine(rolls, size=10, names=("Ann", "Bob"), reward=10):
    engine = TurnEngine(
        config=GameConfig(size=size, shortcut_count=0),
        rng=ScriptedDice(rolls, reward=reward),
    )
    setup = engine.start_game(list(names))
    assert setup.ok, setup.message
    return engine


def _path(result: TurnResult) -> list[int]:
    return [result.steps[0].from_position] + [s.to_position for s in result.steps]


# ── setup ────────────────────────────────────────────────────────────

def test_start_game_sets_up_players_and_queue():
    engine = _engine([], names=("Ann", "Bob", "Cid"))
    assert engine.state is EngineState.AWAITING_ROLL
    assert [p.name for p in engine.players] == ["Ann", "Bob", "Cid"]
    assert engine.current_player.name == "Ann"
    assert [p.name for p in engine.turn_queue] == ["Bob", "Cid"]
    assert all(p.position == 1 and p.move_history == [] and p.score == 0 for p in engine.players)
    assert len({p.token_color for p in engine.players}) == 3
    assert engine.scoreboard.reward(1) == 0
    assert engine.board.size == 10


def test_start_game_rejects_bad_rosters():
    engine = TurnEngine(config=GameConfig(size=10, shortcut_count=0), rng=ScriptedDice([]))
    for names, count in [
        ([], None),
        (["Solo"], None),
        (["A", "B", "C", "D", "E"], None),
        (["A", "B"], 3),
        (["A", "B", "C"], 5),
        (["A", "A"], None),
        (["A", "  "], None),
    ]:
        setup = engine.start_game(names, count)
        assert not setup.ok, (names, count)
        assert setup.message
    assert engine.state is EngineState.IDLE
    assert engine.players == []
    assert engine.board is None


def test_rejected_restart_keeps_running_game():
    engine = _engine([(3, True)])
    engine.roll()
    before = [(p.name, p.position) for p in engine.players]

    assert not engine.start_game(["Only"]).ok
    assert [(p.name, p.position) for p in engine.players] == before
    assert engine.current_player.name == "Bob"


# ── movement scenarios ───────────────────────────────────────────────

def test_forward_roll_steps_one_node_at_a_time():
    engine = _engine([(3, True)])
    result = engine.roll()

    assert result.ok and result.resolved
    assert (result.dice_value, result.is_positive, result.use_shortest_path) == (3, True, False)
    assert _path(result) == [1, 2, 3, 4]
    assert [s.remaining for s in result.steps] == [2, 1, 0]
    assert [s.final for s in result.steps] == [False, False, True]
    assert result.final_position == 4
    assert engine.players[0].move_history == [1, 2, 3]


def test_forward_roll_stops_early_at_last_node():
    engine = _engine([(5, True)])
    ann = engine.current_player
    ann.position = 9
    ann.move_history = [1, 2, 3, 4, 5, 6, 7, 8]

    result = engine.roll()
    assert _path(result) == [9, 10]
    assert result.final_position == 10
    assert result.game_over is True
    assert result.winner is ann
    assert result.bonus_turn is False  # node 10 is a star, but it's the end
    assert engine.state is EngineState.GAME_OVER
    assert engine.winner is ann


def test_backward_roll_pops_history():
    engine = _engine([(2, False)])
    ann = engine.current_player
    ann.position = 4
    ann.move_history = [1, 2, 3]

    result = engine.roll()
    assert [s.direction for s in result.steps] == ["backward", "backward"]
    assert _path(result) == [4, 3, 2]
    assert ann.position == 2
    assert ann.move_history == [1]


def test_backward_roll_with_empty_history_does_not_move():
    engine = _engine([(4, False)])
    ann = engine.current_player

    result = engine.roll()
    assert result.ok and result.resolved
    assert result.steps == []
    assert result.final_position == 1
    assert result.claimed_reward is None
    assert "cannot move back" in result.message
    assert ann.position == 1
    assert engine.current_player.name == "Bob"


def test_backward_roll_stops_when_history_runs_out():
    engine = _engine([(6, False)])
    ann = engine.current_player
    ann.position = 3
    ann.move_history = [1, 2]

    result = engine.roll()
    assert _path(result) == [3, 2, 1]
    assert ann.move_history == []


def test_prime_boost_follows_shortest_path():
    engine = _engine([(2, True)], size=20)
    engine.board = BoardGraph(20, shortcuts=[(3, 15)])
    ann = engine.current_player
    ann.position = 3
    ann.move_history = [1, 2]

    result = engine.roll()
    assert result.use_shortest_path is True
    assert _path(result) == [3, 15, 16]
    assert [s.via_shortcut for s in result.steps] == [True, False]
    assert ann.move_history == [1, 2, 3, 15]


def test_no_prime_boost_on_composite_start():
    engine = _engine([(2, True)], size=20)
    engine.board = BoardGraph(20, shortcuts=[(4, 15)])
    ann = engine.current_player
    ann.position = 4

    result = engine.roll()
    assert result.use_shortest_path is False
    assert _path(result) == [4, 5, 6]


def test_backward_roll_never_boosts():
    engine = _engine([(1, False)])
    ann = engine.current_player
    ann.position = 3
    ann.move_history = [1, 2]

    result = engine.roll()
    assert result.use_shortest_path is False
    assert ann.position == 2


def test_retreat_undoes_a_shortcut_jump():
    engine = _engine([(1, True), (1, True), (1, False)], size=20)
    engine.board = BoardGraph(20, shortcuts=[(3, 17)])
    ann, bob = engine.players
    ann.position = 3
    ann.move_history = [1, 2]

    jump = engine.roll()
    assert _path(jump) == [3, 17]
    engine.roll()  # Bob: 1 → 2
    back = engine.roll()
    assert _path(back) == [17, 3]
    assert back.steps[0].via_shortcut is True
    assert ann.move_history == [1, 2]
    assert bob.position == 2


def test_prime_boost_can_hop_backward_and_is_undone_exactly():
    engine = _engine([(3, True), (1, True), (3, False)], size=64)
    engine.board = BoardGraph(64, shortcuts=[(20, 31), (21, 63)])
    ann, bob = engine.players
    ann.position = 31
    ann.move_history = [29, 30]

    boosted = engine.roll()
    assert boosted.use_shortest_path is True
    assert _path(boosted) == [31, 20, 21, 63]
    assert [s.via_shortcut for s in boosted.steps] == [True, False, True]
    assert boosted.game_over is False
    assert ann.move_history == [29, 30, 31, 20, 21]
    assert engine.current_player is bob

    engine.roll()  # Bob: 1 → 2
    back = engine.roll()
    assert _path(back) == [63, 21, 20, 31]
    assert ann.position == 31
    assert ann.move_history == [29, 30]


# ── turn resolution ──────────────────────────────────────────────────

def test_star_node_grants_bonus_turn():
    engine = _engine([(4, True), (1, True)], size=20)
    ann = engine.current_player

    first = engine.roll()
    assert first.final_position == 5
    assert first.bonus_turn is True
    assert engine.state is EngineState.BONUS_TURN
    assert engine.current_player is ann
    assert [p.name for p in engine.turn_queue] == ["Bob"]

    second = engine.roll()
    assert second.player is ann
    assert second.use_shortest_path is True  # 5 is prime
    assert second.final_position == 6
    assert second.bonus_turn is False
    assert engine.current_player.name == "Bob"
    assert engine.state is EngineState.AWAITING_ROLL


def test_turns_rotate_through_queue():
    engine = _engine([(1, True)] * 4, size=30, names=("Ann", "Bob", "Cid"))
    order = [engine.roll().player.name for _ in range(4)]
    assert order == ["Ann", "Bob", "Cid", "Ann"]


def test_landing_claims_reward_once():
    engine = _engine([(2, True), (2, True)], reward=7)
    ann, bob = engine.players

    r1 = engine.roll()
    assert r1.final_position == 3
    assert r1.claimed_reward == 7
    assert ann.score == 7
    assert "SCORE +7 (total 7)" in r1.message

    r2 = engine.roll()
    assert r2.final_position == 3
    assert r2.claimed_reward is None
    assert bob.score == 0


def test_only_landing_node_is_claimed():
    engine = _engine([(3, True)], reward=7)
    engine.roll()
    claimed = [n for n, c in engine.scoreboard.node_claimed.items() if c]
    assert claimed == [4]


# ── protocol errors ──────────────────────────────────────────────────

def test_roll_before_start_is_rejected():
    engine = TurnEngine(rng=ScriptedDice([]))
    result = engine.roll()
    assert result.ok is False
    assert "Cannot roll" in result.message
    assert engine.state is EngineState.IDLE


def test_no_rolls_after_game_over():
    engine = _engine([(1, True), (3, True), (3, True)])
    engine.current_player.position = 9
    engine.roll()
    assert engine.game_over

    for _ in range(3):
        result = engine.roll()
        assert not result.ok
    assert engine.step() is None
    assert engine.players[1].position == 1


def test_duplicate_roll_while_moving_is_rejected():
    engine = _engine([(3, True), (6, True)])
    started = engine.begin_roll()
    assert started.ok and not started.resolved
    assert engine.state is EngineState.RESOLVING

    again = engine.begin_roll()
    assert not again.ok
    assert engine.pending is started
    assert engine.pending.dice_value == 3


def test_step_without_roll_returns_none():
    engine = _engine([])
    assert engine.step() is None
    assert engine.state is EngineState.AWAITING_ROLL


# ── stepwise driving ─────────────────────────────────────────────────

def test_stepwise_move_matches_rendered_positions():
    engine = _engine([(3, True)])
    ann = engine.current_player
    engine.begin_roll()

    seen = []
    while True:
        event = engine.step()
        seen.append(ann.position)  # renderer reads position after each tick
        if event.final:
            break

    assert seen == [2, 3, 4]
    assert engine.last_result.final_position == 4
    assert engine.last_result.steps[-1] is event
    assert engine.pending is None
    assert engine.current_player.name == "Bob"


def test_observer_receives_steps_and_turns():
    observer = ListObserver()
    engine = TurnEngine(
        config=GameConfig(size=10, shortcut_count=0),
        rng=ScriptedDice([(2, True), (1, False)]),
        observer=observer,
    )
    engine.start_game(["Ann", "Bob"])
    engine.roll()
    engine.roll()  # Bob has no history — no steps

    assert [(s.from_position, s.to_position) for s in observer.steps] == [(1, 2), (2, 3)]
    assert len(observer.turns) == 2
    assert observer.turns[1].steps == []


# ── reset ────────────────────────────────────────────────────────────

def test_reset_mid_move_restores_everything():
    engine = _engine([(2, True), (5, True), (5, True)], reward=9)
    engine.roll()  # Ann → 3, claims
    engine.begin_roll()  # Bob starts moving
    engine.step()
    assert engine.state is EngineState.RESOLVING

    setup = engine.reset()
    assert setup.ok
    assert engine.state is EngineState.AWAITING_ROLL
    assert engine.pending is None
    assert engine.current_player.name == "Ann"
    assert [p.name for p in engine.turn_queue] == ["Bob"]
    for p in engine.players:
        assert (p.position, p.move_history, p.score) == (1, [], 0)
    assert not any(engine.scoreboard.node_claimed.values())

    result = engine.roll()
    assert result.player.name == "Ann"
    assert result.final_position == 6


def test_reset_after_game_over_allows_play():
    engine = _engine([(1, True), (1, True)])
    engine.current_player.position = 9
    engine.roll()
    assert engine.game_over

    engine.reset()
    assert not engine.game_over
    assert engine.winner is None
    assert engine.roll().ok


def test_reset_before_start_is_rejected():
    engine = TurnEngine(rng=ScriptedDice([]))
    assert engine.reset().ok is False
    assert engine.state is EngineState.IDLE


# ── full games ───────────────────────────────────────────────────────

def test_seeded_games_finish_with_consistent_state():
    for seed in range(5):
        engine = TurnEngine(config=GameConfig(seed=seed))
        engine.start_game(["Bulbasaur", "Charmander", "Squirtle", "Pikachu"])
        rolls = 0
        while not engine.game_over and rolls < 5000:
            result = engine.roll()
            assert result.ok
            rolls += 1
            for p in engine.players:
                assert 1 <= p.position <= engine.board.size

        assert engine.game_over
        assert engine.winner.position == engine.board.size
        claimed_total = sum(
            engine.scoreboard.reward(n)
            for n, c in engine.scoreboard.node_claimed.items() if c
        )
        assert claimed_total == sum(p.score for p in engine.players)


def test_same_seed_replays_same_game():
    def play(seed):
        engine = TurnEngine(config=GameConfig(seed=seed))
        engine.start_game(["A", "B"])
        trail = []
        while not engine.game_over:
            r = engine.roll()
            trail.append((r.player.name, r.dice_value, r.is_positive, r.final_position))
        return engine.board.shortcuts, trail

    assert play(42) == play(42)
