from itertools import permutations

import pytest

from ddqueens.board import BoardState
from ddqueens.queens import NQueen, NRook, QueenSpec
from ddqueens.solver.engine import count_solutions
from ddqueens.spec import ACCEPT, REJECT


def brute_force_count(n: int, rook_only: bool) -> int:
    count = 0
    for cols in permutations(range(n)):
        if rook_only or (
            len({r - c for r, c in enumerate(cols)}) == n
            and len({r + c for r, c in enumerate(cols)}) == n
        ):
            count += 1
    return count


def rows01(state: BoardState) -> list[str]:
    return [row.to01() for row in state.rows]


@pytest.mark.parametrize(
    "n,expected", [(1, 1), (2, 0), (3, 0), (4, 2), (5, 10), (6, 4), (7, 40), (8, 92)]
)
def test_queen_counts(n, expected):
    assert count_solutions(NQueen(n)) == expected


@pytest.mark.parametrize("n", [1, 2, 3, 4, 5, 6])
@pytest.mark.parametrize("rook_only", [False, True])
def test_counts_match_brute_force(n, rook_only):
    spec = NRook(n) if rook_only else NQueen(n)
    assert count_solutions(spec) == brute_force_count(n, rook_only)


def test_rook_counts():
    assert count_solutions(NRook(4)) == 24
    for first_col in range(4):
        assert count_solutions(NRook(4, first_col)) == 6


@pytest.mark.parametrize("n", [4, 6, 8])
def test_first_columns_partition_solutions(n):
    total = sum(count_solutions(NQueen(n, first_col)) for first_col in range(n))
    assert total == count_solutions(NQueen(n))


@pytest.mark.parametrize("n", [0, -3])
def test_invalid_board_size(n):
    with pytest.raises(ValueError):
        NQueen(n)


@pytest.mark.parametrize("first_col", [-1, 4, 10])
def test_invalid_first_column(first_col):
    with pytest.raises(ValueError):
        NRook(4, first_col)


def test_root():
    state, level = NQueen(4).get_root()
    assert rows01(state) == ["1111"] * 4
    assert level == 16
    assert NQueen(4, 2).get_root()[1] == 14
    assert NQueen(4).array_size == 4


def test_decode():
    spec = NQueen(4)
    assert spec.decode(16) == (3, 3)
    assert spec.decode(9) == (2, 0)
    assert spec.decode(1) == (0, 0)


def test_take_at_root_jumps_to_next_choice():
    spec = NQueen(4)
    state, level = spec.get_root()
    assert spec.get_child(state, level, True) == 9
    assert rows01(state) == ["0110", "1010", "1000", "0000"]


def test_skip_at_root():
    spec = NQueen(4)
    state, level = spec.get_root()
    assert spec.get_child(state, level, False) == 15
    assert rows01(state) == ["1111", "1111", "1111", "1110"]


def test_rook_take_at_root():
    spec = NRook(3)
    state, level = spec.get_root()
    assert spec.get_child(state, level, True) == 5
    assert rows01(state) == ["110", "110", "000"]


def test_take_unavailable_cell_is_rejected():
    spec = NQueen(4)
    state, level = spec.get_root()
    state[3][3] = 0
    assert spec.get_child(state, level, True) == REJECT


def test_skip_at_top_with_first_column_is_rejected():
    spec = NRook(4, 1)
    state, level = spec.get_root()
    assert spec.get_child(state.copy(), level, False) == REJECT
    assert spec.get_child(state, level, True) > 0


def test_single_cell_board():
    spec = NQueen(1)
    state, level = spec.get_root()
    assert spec.get_child(state.copy(), level, True) == ACCEPT
    assert spec.get_child(state, level, False) == REJECT


def test_rejects_two_by_two():
    spec = NQueen(2)
    state, level = spec.get_root()
    # Both cells of the top row leave no column for the bottom row
    assert spec.get_child(state.copy(), level, True) == REJECT
    assert spec.get_child(state, level, False) == REJECT


def test_custom_rook_flag_matches_subclass():
    assert count_solutions(QueenSpec(5, rook_only=True)) == count_solutions(NRook(5))
