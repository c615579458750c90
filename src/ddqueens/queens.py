"""N-Queens and N-Rooks specs on a single board.

Levels count down from n*n.  Level `l` decides whether a piece is placed on row
`(l - 1) // n`, column `(l - 1) % n`, so rows are filled from the top row (n - 1)
down to row 0, and within a row from the highest column down to column 0.
"""

from bitarray import bitarray

from ddqueens.board import BoardState, ConflictPropagator, is_feasible
from ddqueens.spec import ACCEPT, REJECT, DdSpec


class QueenSpec(DdSpec):
    """One piece per row, no two pieces sharing a column (or a diagonal, for queens)."""

    def __init__(self, n: int, first_col: int | None = None, *, rook_only: bool = False) -> None:
        """Initialize the spec.

        Args:
            n (int): Board size.
            first_col (int | None): If given, the piece in the top row is forced onto the
                `first_col`-th cell in level order, i.e. column `n - 1 - first_col`.
                Running the spec once for each first column splits the search into
                disjoint parts.
            rook_only (bool): Only enforce column conflicts.
        """
        if n < 1:
            raise ValueError(f"Board size must be at least 1, got {n}.")
        if first_col is not None and not 0 <= first_col < n:
            raise ValueError(f"First column must be in range [0, {n}), got {first_col}.")

        self.n = n
        self.first_col = first_col
        self.rook_only = rook_only
        self.take_top = first_col is not None
        self.top_level = n * n - (first_col or 0)
        self.propagator = ConflictPropagator(n, rook_only=rook_only)

    @property
    def array_size(self) -> int:
        return self.n

    def decode(self, level: int) -> tuple[int, int]:
        """Return the (row, column) decided at `level`."""
        return divmod(level - 1, self.n)

    def get_root(self) -> tuple[BoardState, int]:
        return BoardState.full(self.n, self.n), self.top_level

    def get_child(self, state: BoardState, level: int, take: bool) -> int:
        n = self.n
        rows = state.rows
        i, j = divmod(level - 1, n)

        if take:
            if not rows[i][j]:
                return REJECT

            total = self.propagator.propagate(rows, i, j)
            if total is None or not is_feasible(total, i):
                return REJECT
            if i == 0:
                return ACCEPT

            # Row i is resolved; continue from its lowest cell
            rows[i].setall(0)
            level = i * n + 1
        else:
            if self.take_top and level == self.top_level:
                return REJECT
            rows[i][j] = 0
            if not rows[i].any():
                return REJECT
            assert j >= 1, "Column 0 skipped with columns left in the row."

        return self._skip_ahead(rows, level)

    def _skip_ahead(self, rows: list[bitarray], level: int) -> int:
        """Move down to the next level where both branches are possible.

        Cells that cannot take a piece are cleared from their row on the way.
        """
        n = self.n
        propagator = self.propagator
        while True:
            level -= 1
            i, j = divmod(level - 1, n)
            row = rows[i]

            if row[j]:
                total = propagator.trial(rows, i, j)
                if total is not None and is_feasible(total, i):
                    return level

            row[j] = 0
            if not row.any():
                return REJECT


class NQueen(QueenSpec):
    """N-Queens placements."""

    def __init__(self, n: int, first_col: int | None = None) -> None:
        super().__init__(n, first_col, rook_only=False)


class NRook(QueenSpec):
    """N-Rooks placements (permutation matrices)."""

    def __init__(self, n: int, first_col: int | None = None) -> None:
        super().__init__(n, first_col, rook_only=True)
