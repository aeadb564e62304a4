"""
AI move selection for three difficulty tiers.

- Easy: uniformly random empty cell.
- Medium: one-ply heuristic (win, block, centre, corner, anything).
- Impossible: exhaustive minimax, see ``tttcore.solver``.

Selectors are stateless over their inputs. Randomness comes from a shared
numpy Generator unless an explicit ``rng`` is passed. Asking for a move on a
full board returns ``NO_MOVE`` instead of raising.
"""
from __future__ import annotations

import logging
from enum import Enum
from typing import Optional, Sequence, Union

import numpy as np

from .game_basics import CENTER, CORNERS, EMPTY, empty_cells
from .solver import NO_MOVE, select_impossible
from .tactics import blocking_moves, immediate_winning_moves

logger = logging.getLogger(__name__)

_rng = np.random.default_rng()


class Difficulty(Enum):
    EASY = "easy"
    MEDIUM = "medium"
    IMPOSSIBLE = "impossible"

    @classmethod
    def parse(cls, value: Union[str, "Difficulty"]) -> "Difficulty":
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            choices = ", ".join(d.value for d in cls)
            raise ValueError(f"Unknown difficulty {value!r} (expected one of: {choices})") from None


def seed(value: Optional[int]) -> None:
    """Reseed the shared random source."""
    global _rng
    _rng = np.random.default_rng(value)


def _choice(cells: Sequence[int], rng: Optional[np.random.Generator]) -> int:
    r = rng if rng is not None else _rng
    return int(cells[int(r.integers(len(cells)))])


def select_easy(board: Sequence[int], rng: Optional[np.random.Generator] = None) -> int:
    open_cells = empty_cells(board)
    if not open_cells:
        return NO_MOVE
    return _choice(open_cells, rng)


def select_medium(board: Sequence[int], ai_mark: int, rng: Optional[np.random.Generator] = None) -> int:
    open_cells = empty_cells(board)
    if not open_cells:
        return NO_MOVE
    wins = immediate_winning_moves(board, ai_mark)
    if wins:
        return wins[0]
    blocks = blocking_moves(board, ai_mark)
    if blocks:
        return blocks[0]
    if board[CENTER] == EMPTY:
        return CENTER
    corners = [i for i in open_cells if i in CORNERS]
    if corners:
        return _choice(corners, rng)
    return _choice(open_cells, rng)


def select_move(
    board: Sequence[int],
    ai_mark: int,
    difficulty: Union[str, Difficulty],
    rng: Optional[np.random.Generator] = None,
) -> int:
    level = Difficulty.parse(difficulty)
    if level is Difficulty.EASY:
        move = select_easy(board, rng)
    elif level is Difficulty.MEDIUM:
        move = select_medium(board, ai_mark, rng)
    else:
        move = select_impossible(board, ai_mark)
    logger.debug("difficulty=%s mark=%d move=%d", level.value, ai_mark, move)
    return move
