"""Board configuration: size and rule variant of a placement puzzle."""

from dataclasses import dataclass
from typing import Literal

from ddqueens.colored import ColoredNQueen, ColoredNRook
from ddqueens.queens import NQueen, NRook
from ddqueens.spec import DdSpec

Variant = Literal["queen", "rook"]


@dataclass(frozen=True)
class BoardConfig:
    """A puzzle configuration."""

    n: int
    """Board size."""

    variant: Variant = "queen"
    """Which pieces are placed: queens (columns and diagonals) or rooks (columns only)."""

    colored: bool = False
    """Whether to use the colored (one placement per color) variant."""

    first_col: int | None = None
    """Restrict the top row to the `first_col`-th cell in level order (plain variant only)."""

    def __post_init__(self) -> None:
        """Validate the configuration."""
        if self.n < 1:
            raise ValueError(f"Board size must be at least 1, got {self.n}.")
        if self.variant not in ("queen", "rook"):
            raise ValueError(f"Unknown variant: {self.variant!r}.")
        if self.first_col is not None:
            # The colored root has no first-column restriction
            if self.colored:
                raise ValueError("A first column cannot be combined with the colored variant.")
            if not 0 <= self.first_col < self.n:
                raise ValueError(
                    f"First column must be in range [0, {self.n}), got {self.first_col}."
                )

    def __str__(self) -> str:
        """Return a string representation of the BoardConfig."""
        name = f"{'colored ' if self.colored else ''}{self.n}-{self.variant}"
        if self.first_col is not None:
            name += f" (first column {self.first_col})"
        return name

    @property
    def rook_only(self) -> bool:
        return self.variant == "rook"

    def with_first_col(self, first_col: int | None) -> "BoardConfig":
        """Return a copy of the config restricted to another first column."""
        return BoardConfig(
            n=self.n, variant=self.variant, colored=self.colored, first_col=first_col
        )

    def make_spec(self) -> DdSpec:
        """Build the decision-diagram spec for this configuration."""
        if self.colored:
            return ColoredNRook(self.n) if self.rook_only else ColoredNQueen(self.n)
        if self.rook_only:
            return NRook(self.n, self.first_col)
        return NQueen(self.n, self.first_col)

    def to_dict(self) -> dict:
        """Return a dictionary representation of the BoardConfig for serialization.

        Used to hand the configuration to worker processes.
        """
        return {
            "n": self.n,
            "variant": self.variant,
            "colored": self.colored,
            "first_col": self.first_col,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "BoardConfig":
        """Create a BoardConfig instance from a dictionary representation."""
        return cls(
            n=int(data["n"]),
            variant=data.get("variant", "queen"),
            colored=bool(data.get("colored", False)),
            first_col=data.get("first_col"),
        )
