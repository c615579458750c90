"""Colored N-Queens and N-Rooks specs.

There are `n` colors and each color forms its own N-Queens (or N-Rooks) placement,
with every cell of the board taking exactly one color.  For rooks this enumerates
Latin squares.  The top row is fixed to color `c` in column `c`.

Level `l` decides whether cell (row `i`, column `j`) takes color `c`, where
`l - 1 == i * n * n + j * n + c`.  The state holds one bitmap per (row, color)
pseudo-row, at index `i * n + c`.
"""

from bitarray import bitarray

from ddqueens.board import BoardState, ConflictPropagator, full_mask, is_feasible, single_bit
from ddqueens.spec import ACCEPT, REJECT, DdSpec


class ColoredQueenSpec(DdSpec):
    """One placement per color, one color per cell."""

    def __init__(self, n: int, *, rook_only: bool = False) -> None:
        if n < 1:
            raise ValueError(f"Board size must be at least 1, got {n}.")

        self.n = n
        self.m = n * n
        self.rook_only = rook_only
        self.top_level = n * n * n
        self.propagator = ConflictPropagator(n, rook_only=rook_only)

    @property
    def array_size(self) -> int:
        return self.m

    def decode(self, level: int) -> tuple[int, int, int]:
        """Return the (row, column, color) decided at `level`."""
        i, rest = divmod(level - 1, self.m)
        j, c = divmod(rest, self.n)
        return i, j, c

    def get_root(self) -> tuple[BoardState, int]:
        n, m = self.n, self.m
        rows = [full_mask(n) for _ in range(m - n)]
        # Top row: color c sits in column c
        rows.extend(single_bit(n, c) for c in range(n))
        return BoardState(rows), self.top_level

    def get_child(self, state: BoardState, level: int, take: bool) -> int:
        n = self.n
        rows = state.rows
        i, j, c = self.decode(level)
        start_row = i
        ic = i * n + c

        if take:
            if not rows[ic][j]:
                return REJECT

            total = self.propagator.propagate(rows, i, j, stride=n, offset=c)
            if total is None or not is_feasible(total, i):
                return REJECT
            if i == 0 and j == 0:
                return ACCEPT

            # The pseudo-row keeps only the column it took; the scan never
            # visits that column again, so the row stays non-empty.
            rows[ic] = single_bit(n, j)
            # Lower colors of the same row can no longer use this cell
            for icc in range(ic - 1, i * n - 1, -1):
                rows[icc][j] = 0
        else:
            rows[ic][j] = 0
            if not rows[ic].any():
                return REJECT
            assert j >= 1, "Column 0 skipped with columns left in the pseudo-row."

        level = self._skip_ahead(rows, level)
        if level > 0:
            self._clear_finished_rows(rows, level, start_row)
        return level

    def _skip_ahead(self, rows: list[bitarray], level: int) -> int:
        """Move down to the next level where both branches are possible."""
        n = self.n
        propagator = self.propagator
        while True:
            level -= 1
            i, j, c = self.decode(level)
            row = rows[i * n + c]

            if row[j]:
                total = propagator.trial(rows, i, j, stride=n, offset=c)
                if total is not None and is_feasible(total, i):
                    return level

            row[j] = 0
            if not row.any():
                return REJECT

    def _clear_finished_rows(self, rows: list[bitarray], level: int, start_row: int) -> None:
        """Empty the pseudo-rows of every row the scan has moved past.

        Those rows are fully assigned and never read again; clearing them lets states
        that differ only in already-finished rows merge.
        """
        n = self.n
        i = (level - 1) // self.m
        for ii in range(i + 1, start_row + 1):
            for ic in range(ii * n, ii * n + n):
                rows[ic].setall(0)


class ColoredNQueen(ColoredQueenSpec):
    """Colored N-Queens."""

    def __init__(self, n: int) -> None:
        super().__init__(n, rook_only=False)


class ColoredNRook(ColoredQueenSpec):
    """Colored N-Rooks (Latin squares with a fixed top row)."""

    def __init__(self, n: int) -> None:
        super().__init__(n, rook_only=True)
