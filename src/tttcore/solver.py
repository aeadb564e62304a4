"""
Exhaustive minimax from the AI's perspective.
Scoring policy:
- Terminal boards score +1 (AI wins), -1 (AI loses) or 0 (draw).
- No depth discounting: a quick win and a slow win score the same.
- Ties keep the first move found, scanning cells 0..8.
The 3x3 tree is small enough that the search runs without pruning or caching.
"""
import logging
from typing import Sequence, Tuple

from .evaluator import StatusKind, evaluate
from .game_basics import EMPTY, opponent

logger = logging.getLogger(__name__)

NO_MOVE = -1

# Fast opening for an empty board: top-left corner. Every opening draws
# under perfect play, and a corner is among the optimal ones.
OPENING_MOVE = 0


def minimax(board: Sequence[int], current: int, ai_mark: int) -> Tuple[int, int]:
    """Return ``(score, move)`` for ``current`` to move on ``board``.

    ``move`` is ``NO_MOVE`` on terminal boards.
    """
    status = evaluate(board)
    if status.kind is StatusKind.DRAW:
        return 0, NO_MOVE
    if status.kind is StatusKind.WON:
        return (1 if status.winner == ai_mark else -1), NO_MOVE

    maximizing = current == ai_mark
    best_score = -2 if maximizing else 2
    best_move = NO_MOVE
    nxt = list(board)
    for i in range(9):
        if nxt[i] != EMPTY:
            continue
        nxt[i] = current
        score, _ = minimax(nxt, opponent(current), ai_mark)
        nxt[i] = EMPTY
        if maximizing:
            if score > best_score:
                best_score, best_move = score, i
        else:
            if score < best_score:
                best_score, best_move = score, i
    return best_score, best_move


def select_impossible(board: Sequence[int], ai_mark: int) -> int:
    if all(v == EMPTY for v in board):
        return OPENING_MOVE
    score, move = minimax(board, ai_mark, ai_mark)
    logger.debug("minimax picked %d (score=%d)", move, score)
    return move
