"""
Stateful shell around the pure core: one match of rounds with scores.

The session owns the mutable board, the explicit turn flag, the score tally
and the match settings (mode, AI side, difficulty). Everything about a board
(winner, draw, winning line) is recomputed with ``evaluate`` when asked.

The computer's move can be deferred to simulate thinking. A deferred move
remembers the generation of the state it was scheduled for and is abandoned
if anything changed before it fires.
"""
from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from typing import Callable, List, Optional, Tuple, Union

import numpy as np

from .ai import Difficulty, select_move
from .config import DEFAULT_AI_DELAY, GameMode, Settings
from .evaluator import GameStatus, StatusKind, evaluate
from .game_basics import EMPTY, O, SYMBOLS, X, apply_move, empty_board, parse_mark
from .solver import NO_MOVE

logger = logging.getLogger(__name__)


@dataclass
class Scores:
    x: int = 0
    o: int = 0
    draws: int = 0

    def record(self, status: GameStatus) -> None:
        if status.kind is StatusKind.WON:
            if status.winner == X:
                self.x += 1
            else:
                self.o += 1
        elif status.kind is StatusKind.DRAW:
            self.draws += 1

    def reset(self) -> None:
        self.x = self.o = self.draws = 0


class GameSession:
    """A match between two humans or a human and the computer."""

    def __init__(
        self,
        mode: Union[str, GameMode] = GameMode.CPU,
        ai_mark: Union[int, str] = O,
        difficulty: Union[str, Difficulty] = Difficulty.MEDIUM,
        rng: Optional[np.random.Generator] = None,
        ai_delay: float = DEFAULT_AI_DELAY,
        timer_factory: Callable = threading.Timer,
    ):
        self.mode = GameMode.parse(mode)
        self.ai_mark = parse_mark(ai_mark)
        self.difficulty = Difficulty.parse(difficulty)
        self.rng = rng
        self.ai_delay = ai_delay
        self.board: List[int] = empty_board()
        self.x_next = True
        self.scores = Scores()
        self._timer_factory = timer_factory
        self._timer = None
        self._generation = 0
        self._lock = threading.RLock()

    @classmethod
    def from_settings(cls, settings: Settings, **overrides) -> "GameSession":
        kwargs = dict(
            mode=settings.mode,
            ai_mark=settings.ai_mark,
            difficulty=settings.difficulty,
            ai_delay=settings.ai_delay,
        )
        if settings.seed is not None:
            kwargs["rng"] = np.random.default_rng(settings.seed)
        kwargs.update(overrides)
        return cls(**kwargs)

    # derived state

    @property
    def current_player(self) -> int:
        return X if self.x_next else O

    @property
    def status(self) -> GameStatus:
        return evaluate(self.board)

    @property
    def can_play(self) -> bool:
        return not self.status.is_terminal

    @property
    def is_ai_turn(self) -> bool:
        return self.mode is GameMode.CPU and self.current_player == self.ai_mark and self.can_play

    @property
    def can_human_click(self) -> bool:
        return self.can_play and not self.is_ai_turn

    @property
    def winning_line(self) -> Optional[Tuple[int, int, int]]:
        return self.status.line

    @property
    def has_pending_move(self) -> bool:
        return self._timer is not None

    def status_text(self) -> str:
        status = self.status
        if status.kind is StatusKind.WON:
            return f"{SYMBOLS[status.winner]} wins!"
        if status.kind is StatusKind.DRAW:
            return "It's a draw!"
        if self.mode is GameMode.CPU and self.current_player == self.ai_mark:
            return "Computer is thinking..."
        return f"{SYMBOLS[self.current_player]} to play"

    # mutation

    def _place(self, idx: int) -> GameStatus:
        self.board = apply_move(self.board, idx, self.current_player)
        self.x_next = not self.x_next
        self._invalidate()
        status = evaluate(self.board)
        if status.is_terminal:
            self.scores.record(status)
            logger.debug("round over: %s scores=%s", status.describe(), self.scores)
        return status

    def click(self, idx: int) -> bool:
        """Human move. Returns False when the click is ignored."""
        with self._lock:
            if not self.can_human_click:
                logger.debug("click %s ignored: not accepting human moves", idx)
                return False
            if not 0 <= idx <= 8 or self.board[idx] != EMPTY:
                logger.debug("click %s ignored: cell unavailable", idx)
                return False
            self._place(idx)
            return True

    def ai_move_now(self) -> int:
        """Compute and apply the computer's move; NO_MOVE if none was applied."""
        with self._lock:
            if not self.is_ai_turn:
                return NO_MOVE
            move = select_move(self.board, self.ai_mark, self.difficulty, self.rng)
            if move == NO_MOVE or self.board[move] != EMPTY:
                return NO_MOVE
            self._place(move)
            return move

    def schedule_ai_move(self, delay: Optional[float] = None) -> bool:
        """Arm a deferred computer move. Returns False if it is not the AI's turn."""
        with self._lock:
            if not self.is_ai_turn:
                return False
            self._invalidate()
            token = self._generation
            wait = self.ai_delay if delay is None else delay
            timer = self._timer_factory(wait, self._run_scheduled, args=(token,))
            timer.daemon = True
            self._timer = timer
            logger.debug("AI move scheduled in %.2fs (generation %d)", wait, token)
        timer.start()
        return True

    def _run_scheduled(self, token: int) -> None:
        with self._lock:
            if token != self._generation:
                logger.debug("stale AI move abandoned (generation %d != %d)", token, self._generation)
                return
            self._timer = None
            self.ai_move_now()

    def wait_for_ai_move(self, timeout: Optional[float] = None) -> bool:
        """Block until the pending deferred move has fired or been cancelled.

        Returns False if the timer is still running after ``timeout``.
        """
        with self._lock:
            timer = self._timer
        if timer is None:
            return True
        timer.join(timeout)
        return not timer.is_alive()

    def cancel_pending(self) -> None:
        with self._lock:
            self._invalidate()

    def _cancel_timer(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None

    def _invalidate(self) -> None:
        self._generation += 1
        self._cancel_timer()

    def reset_round(self) -> None:
        with self._lock:
            self.board = empty_board()
            self.x_next = True
            self._invalidate()

    def new_match(self) -> None:
        with self._lock:
            self.reset_round()
            self.scores.reset()

    def set_mode(self, mode: Union[str, GameMode]) -> None:
        with self._lock:
            self.mode = GameMode.parse(mode)
            self.reset_round()

    def set_ai_mark(self, mark: Union[int, str]) -> None:
        with self._lock:
            self.ai_mark = parse_mark(mark)
            self.reset_round()

    def set_difficulty(self, difficulty: Union[str, Difficulty]) -> None:
        with self._lock:
            self.difficulty = Difficulty.parse(difficulty)
            self.reset_round()
