import threading

import numpy as np
import pytest

from tttcore.ai import Difficulty
from tttcore.config import Settings
from tttcore.evaluator import StatusKind
from tttcore.game_basics import EMPTY, O, X
from tttcore.session import GameMode, GameSession, Scores
from tttcore.solver import NO_MOVE


class FakeTimer:
    def __init__(self, interval, function, args=()):
        self.interval = interval
        self.function = function
        self.args = args
        self.started = False
        self.cancelled = False

    def start(self):
        self.started = True

    def cancel(self):
        self.cancelled = True

    def fire(self):
        self.function(*self.args)


@pytest.fixture
def timers():
    return []


@pytest.fixture
def session(timers):
    def factory(interval, function, args=()):
        t = FakeTimer(interval, function, args)
        timers.append(t)
        return t

    return GameSession(rng=np.random.default_rng(0), timer_factory=factory)


def _play(s: GameSession, cells):
    for c in cells:
        assert s.click(c)


def test_defaults_and_status_text(session):
    assert session.mode is GameMode.CPU
    assert session.ai_mark == O
    assert session.difficulty is Difficulty.MEDIUM
    assert session.current_player == X
    assert session.status_text() == "X to play"
    assert session.can_human_click
    assert session.click(4)
    assert session.is_ai_turn
    assert session.status_text() == "Computer is thinking..."
    # human cannot move for the computer
    assert not session.click(0)


def test_ai_move_now_applies_medium_move(session):
    session.click(4)
    mv = session.ai_move_now()
    assert mv in (0, 2, 6, 8)
    assert session.board[mv] == O
    assert session.current_player == X
    # not the AI's turn any more
    assert session.ai_move_now() == NO_MOVE


def test_scheduled_move_fires(session, timers):
    session.click(4)
    assert session.schedule_ai_move()
    assert session.has_pending_move
    (t,) = timers
    assert t.started and t.interval == pytest.approx(0.45)
    t.fire()
    assert sum(1 for v in session.board if v != EMPTY) == 2
    assert not session.has_pending_move


def test_schedule_refused_when_not_ai_turn(session, timers):
    assert not session.schedule_ai_move()
    assert timers == []


def test_reset_abandons_pending_move(session, timers):
    session.click(4)
    session.schedule_ai_move(delay=1.0)
    (t,) = timers
    assert t.interval == 1.0
    session.reset_round()
    assert t.cancelled
    # a timer that fires anyway must not touch the new round
    t.fire()
    assert session.board == [EMPTY] * 9
    assert session.current_player == X


@pytest.mark.parametrize("change", [
    lambda s: s.set_difficulty("impossible"),
    lambda s: s.set_mode("human"),
    lambda s: s.set_ai_mark("X"),
    lambda s: s.cancel_pending(),
])
def test_setting_change_abandons_pending_move(session, timers, change):
    session.click(0)
    session.schedule_ai_move()
    change(session)
    timers[0].fire()
    assert O not in session.board


def test_rescheduling_supersedes_previous_timer(session, timers):
    session.click(4)
    session.schedule_ai_move()
    session.schedule_ai_move()
    first, second = timers
    assert first.cancelled
    first.fire()
    assert O not in session.board
    second.fire()
    assert session.board.count(O) == 1


def test_scores_count_once_per_round():
    s = GameSession(mode="human")
    _play(s, [0, 3, 1, 4, 2])
    st = s.status
    assert st.kind is StatusKind.WON and st.winner == X
    assert s.winning_line == (0, 1, 2)
    assert s.status_text() == "X wins!"
    assert s.scores == Scores(x=1, o=0, draws=0)
    # board is frozen after a win
    assert not s.click(5)
    assert s.scores.x == 1

    s.reset_round()
    assert s.scores.x == 1
    _play(s, [0, 1, 2, 4, 3, 5, 7, 6, 8])
    assert s.status.kind is StatusKind.DRAW
    assert s.status_text() == "It's a draw!"
    assert s.scores == Scores(x=1, o=0, draws=1)

    s.new_match()
    assert s.scores == Scores()
    assert s.board == [EMPTY] * 9


def test_o_win_counted():
    s = GameSession(mode="human")
    _play(s, [0, 3, 1, 4, 8, 5])
    assert s.status.winner == O
    assert s.scores.o == 1


def test_human_mode_has_no_ai_turn():
    s = GameSession(mode="human")
    assert s.click(0)
    assert not s.is_ai_turn
    assert s.status_text() == "O to play"
    assert s.ai_move_now() == NO_MOVE


def test_invalid_clicks_ignored():
    s = GameSession(mode="human")
    assert not s.click(9)
    assert not s.click(-1)
    assert s.click(0)
    assert not s.click(0)


def test_ai_playing_x_moves_first():
    s = GameSession(ai_mark="X", difficulty="impossible")
    assert s.is_ai_turn
    assert not s.can_human_click
    assert s.ai_move_now() == 0
    s.set_difficulty("medium")
    assert s.ai_move_now() == 4


def test_impossible_session_never_loses_to_random_human():
    rng = np.random.default_rng(11)
    s = GameSession(ai_mark="X", difficulty="impossible")
    for _ in range(5):
        s.reset_round()
        while s.can_play:
            if s.is_ai_turn:
                assert s.ai_move_now() != NO_MOVE
            else:
                empties = [i for i, v in enumerate(s.board) if v == EMPTY]
                assert s.click(int(rng.choice(empties)))
        assert s.status.winner != O
    assert s.scores.o == 0


def test_real_timer_applies_move():
    created = []

    def factory(interval, function, args=()):
        t = threading.Timer(interval, function, args=args)
        created.append(t)
        return t

    s = GameSession(ai_delay=0.0, rng=np.random.default_rng(2), timer_factory=factory)
    s.click(4)
    assert s.schedule_ai_move()
    created[0].join(timeout=5)
    assert s.board.count(O) == 1


def test_wait_for_ai_move():
    s = GameSession(ai_delay=0.01, rng=np.random.default_rng(4))
    assert s.wait_for_ai_move()
    s.click(0)
    assert s.schedule_ai_move()
    assert s.wait_for_ai_move(timeout=5)
    assert not s.has_pending_move
    assert s.board.count(O) == 1


def test_from_settings_and_overrides():
    s = GameSession.from_settings(Settings(ai_delay=0.1, difficulty="easy", ai_mark="X", mode="cpu", seed=5))
    assert s.ai_mark == X and s.difficulty is Difficulty.EASY and s.ai_delay == 0.1
    assert s.rng is not None
    s2 = GameSession.from_settings(Settings(), mode="human")
    assert s2.mode is GameMode.HUMAN


def test_bad_settings_rejected():
    with pytest.raises(ValueError):
        GameSession(mode="network")
    with pytest.raises(ValueError):
        GameSession(difficulty="hard")
    with pytest.raises(ValueError):
        GameSession(ai_mark="Z")
