"""tttcore package.

Tic-tac-toe game-state evaluation, AI move selection and a small game shell.

The names below cover calling the engine from a UI: evaluate a board, ask
for a move at some difficulty, or hold a whole match in a GameSession.
"""

from .ai import Difficulty, select_easy, select_medium, select_move
from .evaluator import GameStatus, StatusKind, evaluate
from .game_basics import EMPTY, O, X
from .session import GameMode, GameSession
from .solver import NO_MOVE, select_impossible

__all__ = [
    "evaluate",
    "select_move",
    "select_easy",
    "select_medium",
    "select_impossible",
    "GameStatus",
    "StatusKind",
    "Difficulty",
    "GameMode",
    "GameSession",
    "NO_MOVE",
    "EMPTY",
    "X",
    "O",
]
