"""Utility functions for checking and printing placements."""

from collections.abc import Sequence

import numpy as np

TIMESTAMP_FMT = "%Y-%m-%d %H:%M:%S.%f %Z%z"

COLOR_CHARS = "0123456789ABCDEFGHIJKLMNOPQRSTUVWXYZ"
"""Characters used to print colors on a board."""


def _all_distinct(values: np.ndarray) -> bool:
    return len(np.unique(values)) == len(values)


def validate_placement(
    n: int, cells: Sequence[tuple[int, int]], *, rook_only: bool = False
) -> bool:
    """Validate a complete placement: one piece per row, no shared column or diagonal.

    Args:
        n (int): Board size.
        cells (Sequence[tuple[int, int]]): (row, column) of each piece.
        rook_only (bool): Skip the diagonal checks.
    """
    if len(cells) != n:
        return False
    placed = np.array(cells, dtype=int).reshape(-1, 2)
    rows, cols = placed[:, 0], placed[:, 1]
    if ((placed < 0) | (placed >= n)).any():
        return False
    if not (_all_distinct(rows) and _all_distinct(cols)):
        return False
    if rook_only:
        return True
    return _all_distinct(rows - cols) and _all_distinct(rows + cols)


def validate_colored_placement(
    n: int, cells: Sequence[tuple[int, int, int]], *, rook_only: bool = False
) -> bool:
    """Validate a colored placement: every cell has one color, and each color is a placement.

    Args:
        n (int): Board size (and number of colors).
        cells (Sequence[tuple[int, int, int]]): (row, column, color) of each piece.
        rook_only (bool): Skip the diagonal checks.
    """
    if len(cells) != n * n:
        return False
    placed = np.array(cells, dtype=int).reshape(-1, 3)
    if ((placed < 0) | (placed >= n)).any():
        return False
    if not _all_distinct(placed[:, 0] * n + placed[:, 1]):
        return False
    for color in range(n):
        color_cells = [(r, c) for r, c, k in placed.tolist() if k == color]
        if not validate_placement(n, color_cells, rook_only=rook_only):
            return False
    return True


def render_placement(n: int, cells: Sequence[tuple[int, int]]) -> str:
    """Return a text board with 'Q' on occupied cells, top row first."""
    grid = np.full((n, n), ".", dtype="<U1")
    for row, col in cells:
        grid[row, col] = "Q"
    return "\n".join(" ".join(grid[row]) for row in range(n - 1, -1, -1))


def render_colored_placement(n: int, cells: Sequence[tuple[int, int, int]]) -> str:
    """Return a text board showing the color of each cell, top row first."""
    grid = np.full((n, n), ".", dtype="<U1")
    for row, col, color in cells:
        grid[row, col] = COLOR_CHARS[color % len(COLOR_CHARS)]
    return "\n".join(" ".join(grid[row]) for row in range(n - 1, -1, -1))
