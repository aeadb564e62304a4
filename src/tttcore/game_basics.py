"""
Game basics: board representation, marks, win lines, parsing and validity.
Teaching notes:
- State is a sequence of 9 cells: 0=empty, 1=X, 2=O. X always starts.
- Index i maps to row i // 3, column i % 3 (row-major).
- Helpers never mutate the board they are given; moves return a new list.
"""
from typing import List, Optional, Sequence, Tuple

EMPTY = 0
X = 1
O = 2

MARKS = (X, O)
CORNERS = (0, 2, 6, 8)
CENTER = 4

WIN_LINES: Tuple[Tuple[int, int, int], ...] = (
    (0, 1, 2), (3, 4, 5), (6, 7, 8),
    (0, 3, 6), (1, 4, 7), (2, 5, 8),
    (0, 4, 8), (2, 4, 6),
)

SYMBOLS = {EMPTY: '.', X: 'X', O: 'O'}

_CELL_CHARS = {
    '0': EMPTY, '.': EMPTY, '-': EMPTY, '_': EMPTY,
    '1': X, 'x': X, 'X': X,
    '2': O, 'o': O, 'O': O,
}


def empty_board() -> List[int]:
    return [EMPTY] * 9


def opponent(mark: int) -> int:
    return O if mark == X else X


def parse_mark(value) -> int:
    """Accept 1/2, 'X'/'O' (any case) or '1'/'2'."""
    if isinstance(value, int) and not isinstance(value, bool):
        if value in MARKS:
            return value
        raise ValueError(f"Unknown mark: {value!r}")
    v = str(value).strip()
    m = _CELL_CHARS.get(v)
    if m is None or m == EMPTY:
        raise ValueError(f"Unknown mark: {value!r}")
    return m


def serialize_board(board: Sequence[int]) -> str:
    return ''.join(str(cell) for cell in board)


def parse_board(board_str: str) -> List[int]:
    raw = board_str.strip()
    if len(raw) != 9:
        raise ValueError(f"Board must have 9 cells, got {len(raw)}: {board_str!r}")
    try:
        return [_CELL_CHARS[c] for c in raw]
    except KeyError as e:
        raise ValueError(f"Invalid cell {e.args[0]!r} in board {board_str!r}") from None


def format_board(board: Sequence[int]) -> str:
    rows = []
    for r in range(3):
        rows.append(' '.join(SYMBOLS[board[3 * r + c]] for c in range(3)))
    return '\n'.join(rows)


def empty_cells(board: Sequence[int]) -> List[int]:
    return [i for i, v in enumerate(board) if v == EMPTY]


def is_full(board: Sequence[int]) -> bool:
    return EMPTY not in board


def apply_move(board: Sequence[int], idx: int, mark: int) -> List[int]:
    if idx < 0 or idx > 8:
        raise ValueError(f"cell out of range: {idx}")
    if board[idx] != EMPTY:
        raise ValueError(f"cell already taken: {idx}")
    nxt = list(board)
    nxt[idx] = mark
    return nxt


def get_piece_counts(board: Sequence[int]) -> Tuple[int, int]:
    cells = list(board)
    return cells.count(X), cells.count(O)


def current_player(board: Sequence[int]) -> int:
    x, o = get_piece_counts(board)
    return X if x == o else O


def line_owner(board: Sequence[int], line: Tuple[int, int, int]) -> Optional[int]:
    a, b, c = line
    v = board[a]
    if v != EMPTY and v == board[b] and v == board[c]:
        return v
    return None


def is_valid_state(board: Sequence[int]) -> bool:
    """Whether the board can arise from legal alternating play starting with X."""
    if len(board) != 9 or any(v not in (EMPTY, X, O) for v in board):
        return False
    x_count, o_count = get_piece_counts(board)
    if not (x_count == o_count or x_count == o_count + 1):
        return False
    owners = {line_owner(board, line) for line in WIN_LINES} - {None}
    # no double winners
    if len(owners) > 1:
        return False
    if X in owners and x_count != o_count + 1:
        return False
    if O in owners and x_count != o_count:
        return False
    return True
