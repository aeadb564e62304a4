"""
Self-play between move selectors.
"""
import logging
from dataclasses import dataclass, field
from typing import Callable, List, Optional, Sequence, Tuple, Union

import numpy as np

from .ai import Difficulty, select_move
from .evaluator import GameStatus, StatusKind, evaluate
from .game_basics import O, X, apply_move, current_player, empty_board

logger = logging.getLogger(__name__)

Player = Callable[[Sequence[int], int], int]


@dataclass
class GameRecord:
    moves: List[Tuple[int, int]]
    status: GameStatus
    board: List[int]


@dataclass
class ArenaResult:
    x_wins: int = 0
    o_wins: int = 0
    draws: int = 0
    records: List[GameRecord] = field(default_factory=list, repr=False)

    @property
    def games(self) -> int:
        return self.x_wins + self.o_wins + self.draws


def make_player(difficulty: Union[str, Difficulty], rng: Optional[np.random.Generator] = None) -> Player:
    level = Difficulty.parse(difficulty)

    def play(board: Sequence[int], mark: int) -> int:
        return select_move(board, mark, level, rng)

    return play


def play_game(x_player: Player, o_player: Player, start: Optional[Sequence[int]] = None) -> GameRecord:
    """Alternate the two players until the board is terminal.

    Raises ValueError if a player returns an occupied or out-of-range cell.
    """
    board = list(start) if start is not None else empty_board()
    moves: List[Tuple[int, int]] = []
    while True:
        status = evaluate(board)
        if status.is_terminal:
            break
        p = current_player(board)
        mv = (x_player if p == X else o_player)(board, p)
        board = apply_move(board, mv, p)
        moves.append((p, mv))
    return GameRecord(moves=moves, status=status, board=board)


def run_arena(
    x_difficulty: Union[str, Difficulty],
    o_difficulty: Union[str, Difficulty],
    games: int = 100,
    seed: Optional[int] = 42,
) -> ArenaResult:
    rng = np.random.default_rng(seed)
    x_player = make_player(x_difficulty, rng)
    o_player = make_player(o_difficulty, rng)
    result = ArenaResult()
    for _ in range(games):
        rec = play_game(x_player, o_player)
        result.records.append(rec)
        if rec.status.kind is StatusKind.DRAW:
            result.draws += 1
        elif rec.status.winner == X:
            result.x_wins += 1
        elif rec.status.winner == O:
            result.o_wins += 1
    logger.debug("arena %s vs %s: %s", x_difficulty, o_difficulty, result)
    return result
