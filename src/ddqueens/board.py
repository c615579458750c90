"""Classes and functions for representing the board state as row bitmaps."""

from collections.abc import Iterable
from typing import TypeAlias

from bitarray import bitarray, frozenbitarray
from bitarray.util import ones, zeros

KeepMasks: TypeAlias = list[list[frozenbitarray]]
"""Element [d][j] keeps every column of a row `d` rows away from a queen in column `j`,
except those the queen attacks."""


def full_mask(n: int) -> bitarray:
    """Return an n-bit bitmap with every column available."""
    return ones(n)


def single_bit(n: int, j: int) -> bitarray:
    """Return an n-bit bitmap with only column `j` available."""
    bits = zeros(n)
    bits[j] = 1
    return bits


def popcount(bits: bitarray) -> int:
    """Number of available columns in a bitmap.

    All feasibility checks count bits through this helper.
    """
    return bits.count(1)


def is_feasible(total: bitarray, remaining_rows: int) -> bool:
    """Necessary condition for completing a placement.

    `total` is the union of the columns still available to the rows that have
    not been assigned yet.  Each of those rows needs its own column, so fewer
    distinct columns than rows means no matching exists.
    """
    return popcount(total) >= remaining_rows


class BoardState:
    """Fixed-length sequence of row bitmaps.

    Bit `j` of row `i` is set when column `j` is still available in that row.
    Rows can be replaced or mutated in place, but the number of rows never changes.
    """

    __slots__ = ("rows",)

    def __init__(self, rows: Iterable[bitarray]) -> None:
        self.rows: list[bitarray] = list(rows)

    @classmethod
    def full(cls, size: int, n: int) -> "BoardState":
        """Create a state of `size` rows with all `n` columns available."""
        return cls(full_mask(n) for _ in range(size))

    def copy(self) -> "BoardState":
        """Generate an independent copy of the state."""
        return BoardState(row.copy() for row in self.rows)

    def key(self) -> tuple[frozenbitarray, ...]:
        """Hashable snapshot used to merge equal states."""
        return tuple(frozenbitarray(row) for row in self.rows)

    def __len__(self) -> int:
        return len(self.rows)

    def __getitem__(self, idx: int) -> bitarray:
        return self.rows[idx]

    def __setitem__(self, idx: int, value: bitarray) -> None:
        if not -len(self.rows) <= idx < len(self.rows):
            raise IndexError("BoardState has a fixed number of rows.")
        self.rows[idx] = value

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, BoardState):
            return NotImplemented
        return self.rows == other.rows

    def __str__(self) -> str:
        """Rows as bit strings (column 0 first), highest row first."""
        return "/".join(row.to01() for row in reversed(self.rows))

    def __repr__(self) -> str:
        return f"BoardState({str(self)!r})"


class ConflictPropagator:
    """Removes the columns attacked by a placed piece from the rows below it.

    The rook-only flag is resolved once, when the keep masks are built, so the
    elimination loop itself is the same for rooks and queens.
    """

    def __init__(self, n: int, *, rook_only: bool = False) -> None:
        self.n = n
        self.keep: KeepMasks = self._build_keep_masks(n, rook_only)

    @staticmethod
    def _build_keep_masks(n: int, rook_only: bool) -> KeepMasks:
        keep: KeepMasks = []
        for d in range(n):
            masks = []
            for j in range(n):
                bits = ones(n)
                bits[j] = 0
                if not rook_only and d > 0:
                    if j - d >= 0:
                        bits[j - d] = 0
                    if j + d < n:
                        bits[j + d] = 0
                masks.append(frozenbitarray(bits))
            keep.append(masks)
        return keep

    def propagate(
        self, rows: list[bitarray], i: int, j: int, *, stride: int = 1, offset: int = 0
    ) -> bitarray | None:
        """Commit a piece at (i, j): clear its column and diagonals from rows i-1..0.

        Row `ii` lives at index `ii * stride + offset` of `rows`.

        Returns:
            The union of the updated rows, or None as soon as one row has no column left.
        """
        keep = self.keep
        total = zeros(self.n)
        for ii in range(i - 1, -1, -1):
            row = rows[ii * stride + offset]
            row &= keep[i - ii][j]
            if not row.any():
                return None
            total |= row
        return total

    def trial(
        self, rows: list[bitarray], i: int, j: int, *, stride: int = 1, offset: int = 0
    ) -> bitarray | None:
        """Same as `propagate`, but leaves `rows` untouched."""
        keep = self.keep
        total = zeros(self.n)
        for ii in range(i - 1, -1, -1):
            row = rows[ii * stride + offset] & keep[i - ii][j]
            if not row.any():
                return None
            total |= row
        return total
