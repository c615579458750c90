"""N-Queens decision-diagram specs.

Counts and enumerates N-Queens, N-Rooks and colored placements by walking a
top-down decision-diagram spec.  The spec's successor function propagates column
and diagonal conflicts, prunes with a matching bound, and skips levels where no
real choice is left.
"""

import argparse
import sys

from .board_config import BoardConfig
from .solver import solver


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(
        prog="ddqueens", description="Count N-Queens placements with a decision-diagram spec"
    )
    parser.add_argument("n", type=int, help="Board size")
    parser.add_argument("--rook", action="store_true", help="Only enforce column conflicts")
    parser.add_argument("--colored", action="store_true", help="Colored variant")
    parser.add_argument(
        "--first-col", type=int, default=None, help="Restrict the top row to this cell"
    )
    parser.add_argument(
        "--enumerate", action="store_true", help="Print the solutions after counting"
    )
    parser.add_argument(
        "--limit", type=int, default=10, help="Maximum number of solutions to print (default: 10)"
    )
    parser.add_argument(
        "--parallel", action="store_true", default=None, help="Split over first columns"
    )
    parser.add_argument("--workers", type=int, default=None, help="Number of worker processes")
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> None:
    """Main entry point for the ddqueens solver."""
    args = parse_args(argv)
    try:
        if args.limit < 0:
            raise ValueError(f"Solution limit must be non-negative, got {args.limit}.")
        config = BoardConfig(
            n=args.n,
            variant="rook" if args.rook else "queen",
            colored=args.colored,
            first_col=args.first_col,
        )
        # Worker counts are checked when the executor is created
        solver.run(
            config,
            enumerate_limit=args.limit if args.enumerate else None,
            parallel=args.parallel,
            n_workers=args.workers,
        )
    except ValueError as e:
        print(f"Invalid configuration: {e}", file=sys.stderr)
        sys.exit(1)
    except KeyboardInterrupt:
        print("Solver interrupted by user.")
        sys.exit(1)
