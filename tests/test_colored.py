import pytest

from ddqueens.colored import ColoredNQueen, ColoredNRook, ColoredQueenSpec
from ddqueens.solver.engine import count_solutions, decode_solution, enumerate_solutions
from ddqueens.solver.utils import validate_colored_placement
from ddqueens.spec import ACCEPT, REJECT


@pytest.mark.parametrize("n,expected", [(1, 1), (2, 1), (3, 2), (4, 24)])
def test_colored_rook_counts_latin_squares(n, expected):
    # Latin squares of order n with a fixed first row
    assert count_solutions(ColoredNRook(n)) == expected


@pytest.mark.parametrize("n,expected", [(1, 1), (2, 0), (3, 0), (4, 0)])
def test_colored_queen_counts(n, expected):
    assert count_solutions(ColoredNQueen(n)) == expected


def test_colored_queens_exist_for_five():
    spec = ColoredNQueen(5)
    solution = next(enumerate_solutions(spec, limit=1))
    cells = decode_solution(spec, solution)
    assert validate_colored_placement(5, cells)


def test_invalid_board_size():
    with pytest.raises(ValueError):
        ColoredNRook(0)


def test_root_seeds_top_row():
    spec = ColoredNRook(3)
    state, level = spec.get_root()
    assert level == 27
    assert spec.array_size == 9
    assert [row.to01() for row in state.rows] == ["111"] * 6 + ["100", "010", "001"]


def test_decode():
    spec = ColoredNQueen(3)
    assert spec.decode(27) == (2, 2, 2)
    assert spec.decode(25) == (2, 2, 0)
    assert spec.decode(22) == (2, 1, 0)
    assert spec.decode(1) == (0, 0, 0)


def test_skip_at_root_is_rejected():
    spec = ColoredNRook(2)
    state, level = spec.get_root()
    assert spec.get_child(state, level, False) == REJECT


def test_two_by_two_walk():
    spec = ColoredNRook(2)
    state, level = spec.get_root()

    level = spec.get_child(state, level, True)
    assert level == 5
    assert spec.decode(level) == (1, 0, 0)

    level = spec.get_child(state, level, True)
    assert level == 3
    # Row 1 is finished and has been cleared
    assert [row.to01() for row in state.rows] == ["01", "10", "00", "00"]

    level = spec.get_child(state, level, True)
    assert level == 2
    assert spec.get_child(state.copy(), level, False) == REJECT
    assert spec.get_child(state, level, True) == ACCEPT


def test_rook_flag_matches_subclass():
    assert count_solutions(ColoredQueenSpec(3, rook_only=True)) == count_solutions(ColoredNRook(3))


@pytest.mark.parametrize("n", [2, 3, 4])
def test_enumerated_latin_squares_are_valid(n):
    spec = ColoredNRook(n)
    solutions = list(enumerate_solutions(spec))
    assert len(solutions) == count_solutions(spec)
    for levels in solutions:
        cells = decode_solution(spec, levels)
        assert validate_colored_placement(n, cells, rook_only=True)
        # Top row is color c in column c
        assert {(col, color) for row, col, color in cells if row == n - 1} == {
            (c, c) for c in range(n)
        }
