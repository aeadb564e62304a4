"""
Game state evaluation: winner, draw or still in progress.

The status is always derived from the board on demand and never stored
alongside it.
"""
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Sequence, Tuple

from .game_basics import EMPTY, SYMBOLS, WIN_LINES, line_owner


class StatusKind(Enum):
    IN_PROGRESS = "in_progress"
    WON = "won"
    DRAW = "draw"


@dataclass(frozen=True)
class GameStatus:
    kind: StatusKind
    winner: Optional[int] = None
    line: Optional[Tuple[int, int, int]] = None

    @classmethod
    def in_progress(cls) -> "GameStatus":
        return cls(StatusKind.IN_PROGRESS)

    @classmethod
    def won(cls, mark: int, line: Tuple[int, int, int]) -> "GameStatus":
        return cls(StatusKind.WON, mark, tuple(line))

    @classmethod
    def draw(cls) -> "GameStatus":
        return cls(StatusKind.DRAW)

    @property
    def is_terminal(self) -> bool:
        return self.kind is not StatusKind.IN_PROGRESS

    def describe(self) -> str:
        if self.kind is StatusKind.WON:
            return f"{SYMBOLS[self.winner]} wins"
        if self.kind is StatusKind.DRAW:
            return "draw"
        return "in progress"


def evaluate(board: Sequence[int]) -> GameStatus:
    """Classify a board.

    Lines are checked in ``WIN_LINES`` order and the first complete line wins.
    A full board without a complete line is a draw.
    """
    for line in WIN_LINES:
        owner = line_owner(board, line)
        if owner is not None:
            return GameStatus.won(owner, line)
    if EMPTY not in board:
        return GameStatus.draw()
    return GameStatus.in_progress()


def winning_line(board: Sequence[int]) -> Optional[Tuple[int, int, int]]:
    return evaluate(board).line
