"""Reference driver for decision-diagram specs: counting and enumeration.

This is not a diagram package.  It walks a spec top-down the way a breadth-first
diagram builder does, but only keeps path counts per state.
"""

from collections.abc import Iterator
from dataclasses import dataclass
from typing import TextIO

from sortedcontainers import SortedDict

from ddqueens.board import BoardState
from ddqueens.spec import ACCEPT, REJECT, DdSpec

Frontier = dict[tuple, tuple[BoardState, int]]
"""Mapping from state keys to (state, number of paths reaching the state)."""


@dataclass
class EngineStats:
    """Statistics collected while walking a spec."""

    nodes_expanded: int = 0
    """Number of (level, state) nodes whose two branches were evaluated."""

    states_merged: int = 0
    """Number of child states that matched an existing node at the same level."""

    max_frontier: int = 0
    """Largest number of distinct states pending at a single level."""

    levels_expanded: int = 0
    """Number of distinct levels that held at least one node."""


def count_solutions(
    spec: DdSpec,
    *,
    stats: EngineStats | None = None,
    out: TextIO | None = None,
    report_interval: int = 0,
) -> int:
    """Count the paths of a spec that reach the accepting terminal.

    Nodes are expanded level by level, always taking the highest pending level.
    Children at the same level with equal states are merged and their path counts
    summed.

    Args:
        spec (DdSpec): The spec to walk.
        stats (EngineStats | None): If given, updated with walk statistics.
        out (TextIO | None): Output stream for progress reports.
        report_interval (int): Report every this many levels (0 disables reports).

    Returns:
        The number of accepted paths.
    """
    if stats is None:
        stats = EngineStats()

    root, level = spec.get_root()
    if level == ACCEPT:
        return 1
    if level == REJECT:
        return 0

    pending: SortedDict = SortedDict({level: {root.key(): (root, 1)}})
    n_solutions = 0

    while pending:
        level, frontier = pending.popitem(-1)
        stats.levels_expanded += 1
        stats.max_frontier = max(stats.max_frontier, len(frontier))
        if out is not None and report_interval > 0 and stats.levels_expanded % report_interval == 0:
            print(
                f"Level {level}: {len(frontier):,} states, {n_solutions:,} solutions so far.",
                file=out,
                flush=True,
            )

        for state, n_paths in frontier.values():
            stats.nodes_expanded += 1
            for take in (False, True):
                child = state.copy()
                child_level = spec.get_child(child, level, take)
                if child_level == ACCEPT:
                    n_solutions += n_paths
                    continue
                if child_level == REJECT:
                    continue
                assert child_level < level, "Child level must be below its parent."

                bucket: Frontier = pending.setdefault(child_level, {})
                key = child.key()
                if key in bucket:
                    merged_state, merged_paths = bucket[key]
                    bucket[key] = (merged_state, merged_paths + n_paths)
                    stats.states_merged += 1
                else:
                    bucket[key] = (child, n_paths)

    return n_solutions


def enumerate_solutions(spec: DdSpec, *, limit: int | None = None) -> Iterator[tuple[int, ...]]:
    """Yield the levels taken on each accepted path, highest level first.

    Paths are explored depth-first with the take branch before the skip branch.

    Args:
        spec (DdSpec): The spec to walk.
        limit (int | None): Stop after this many solutions. If None (default), no limit.
    """
    root, level = spec.get_root()
    if level == ACCEPT:
        yield ()
        return
    if level == REJECT or limit == 0:
        return

    found = 0
    # (state, level, levels taken so far)
    stack: list[tuple[BoardState, int, tuple[int, ...]]] = [(root, level, ())]
    while stack:
        state, level, taken = stack.pop()

        skip_state = state.copy()
        skip_level = spec.get_child(skip_state, level, False)
        take_level = spec.get_child(state, level, True)

        # Push the skip branch first so the take branch is explored first
        for child_state, child_level, child_taken in (
            (skip_state, skip_level, taken),
            (state, take_level, taken + (level,)),
        ):
            if child_level not in (REJECT, ACCEPT):
                stack.append((child_state, child_level, child_taken))

        if take_level == ACCEPT:
            yield taken + (level,)
            found += 1
            if limit is not None and found >= limit:
                return
        if skip_level == ACCEPT:
            yield taken
            found += 1
            if limit is not None and found >= limit:
                return


def decode_solution(spec: DdSpec, levels: tuple[int, ...]) -> list[tuple[int, ...]]:
    """Convert the levels of a solution into board cells."""
    return [spec.decode(level) for level in levels]
