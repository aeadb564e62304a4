from tttcore.game_basics import O, X
from tttcore.tactics import blocking_moves, immediate_winning_moves

A, B, _ = X, O, 0


def test_immediate_wins_in_index_order():
    b = [A, A, _, A, B, _, _, _, B]
    assert immediate_winning_moves(b, A) == [2, 6]
    assert immediate_winning_moves(b, B) == []


def test_blocking_moves_are_opponent_wins():
    b = [A, _, _, _, B, B, _, _, _]
    assert blocking_moves(b, A) == [3]
    assert blocking_moves(b, B) == []


def test_board_not_mutated():
    b = [A, A, _, _, B, _, _, _, _]
    before = list(b)
    immediate_winning_moves(b, A)
    assert b == before
