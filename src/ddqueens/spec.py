"""Interface between placement specs and the decision-diagram engine."""

from abc import ABC, abstractmethod

from ddqueens.board import BoardState

REJECT = 0
"""Terminal level: the branch has no valid completion (false sink)."""

ACCEPT = -1
"""Terminal level: every constraint is satisfied (true sink)."""


class DdSpec(ABC):
    """A top-down decision-diagram specification over row bitmaps.

    The engine obtains `(state, level)` from `get_root`, then for each live node and
    each branch calls `get_child` on a private copy of the node's state until a
    terminal level is returned.  Equal states at the same level may be merged.
    """

    n: int
    """Board size."""

    top_level: int
    """Level returned by `get_root`."""

    @property
    @abstractmethod
    def array_size(self) -> int:
        """Number of bitmaps in a state."""

    @abstractmethod
    def get_root(self) -> tuple[BoardState, int]:
        """Return the initial state and level."""

    @abstractmethod
    def get_child(self, state: BoardState, level: int, take: bool) -> int:
        """Apply a branch at `level` to `state` (in place) and return the next level.

        Returns:
            The next decision level, `REJECT` or `ACCEPT`.
        """

    @abstractmethod
    def decode(self, level: int) -> tuple[int, ...]:
        """Return the board cell a level decides on."""
