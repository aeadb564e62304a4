"""
Tactics and simple motifs: immediate wins and blocks.
Teaching notes:
- One-ply lookahead is what the Medium selector is built on.
"""
from typing import List, Sequence

from .evaluator import StatusKind, evaluate
from .game_basics import EMPTY, opponent


def immediate_winning_moves(board: Sequence[int], mark: int) -> List[int]:
    wins: List[int] = []
    for i, v in enumerate(board):
        if v != EMPTY:
            continue
        b = list(board)
        b[i] = mark
        status = evaluate(b)
        if status.kind is StatusKind.WON and status.winner == mark:
            wins.append(i)
    return wins


def blocking_moves(board: Sequence[int], mark: int) -> List[int]:
    """Cells where the opponent of ``mark`` would complete a line next turn."""
    return immediate_winning_moves(board, opponent(mark))

