"""Main solver module: counts and enumerates placements for a board configuration."""

import os
import sys
from concurrent.futures import ProcessPoolExecutor
from dataclasses import dataclass, field
from datetime import datetime
from multiprocessing import Value
from multiprocessing.sharedctypes import Synchronized
from pathlib import Path
from time import time
from typing import TextIO

from setproctitle import setproctitle

from ddqueens.board_config import BoardConfig
from ddqueens.solver.config import config as solver_config
from ddqueens.solver.engine import (
    EngineStats,
    count_solutions,
    decode_solution,
    enumerate_solutions,
)
from ddqueens.solver.parallel import count_with_parallel_first_columns
from ddqueens.solver.task_args import TaskArgs
from ddqueens.solver.utils import (
    TIMESTAMP_FMT,
    render_colored_placement,
    render_placement,
    validate_colored_placement,
    validate_placement,
)
from ddqueens.solver.worker import init_worker_globals
from ddqueens.usage import ElapsedTimeCounter, ResourceUsage


@dataclass
class SolveResult:
    """Outcome of a solver run."""

    config: BoardConfig
    count: int
    solutions: list[list[tuple[int, ...]]] = field(default_factory=list)
    """Enumerated solutions, as lists of board cells."""
    usage: ResourceUsage = field(default_factory=ResourceUsage)
    """Resources used by the run."""
    stats: EngineStats | None = None
    """Engine statistics (None for parallel runs)."""
    enumerate_time: float = 0.0
    """Wall-clock seconds spent enumerating solutions."""


def get_executor(*, n_workers: int | None = None, start_time: float) -> ProcessPoolExecutor:
    """Get a ProcessPoolExecutor.

    Args:
        n_workers (int | None): Number of worker processes to create.  If None,
            defaults to number of CPU cores minus one.
        start_time (float): UNIX timestamp when the solver started.

    Returns:
        A ProcessPoolExecutor instance for worker processes.
    """
    worker_ctr: Synchronized = Value("i", 0)

    cpus = os.cpu_count() or 1  # Fallback to 1 if os.cpu_count() is None
    if n_workers is None:
        n_workers = max(1, cpus - 1)  # Leave one core free
    if n_workers < 1:
        raise ValueError(f"Number of workers must be at least 1, got {n_workers}")
    if n_workers > cpus:
        raise ValueError(
            f"Requested number of workers ({n_workers}) exceeds CPU count ({cpus})",
        )
    return ProcessPoolExecutor(
        max_workers=n_workers,
        initializer=init_worker_globals,
        initargs=(worker_ctr, start_time),
    )


def log_path(config: BoardConfig, log_dir: str) -> Path:
    """Path of the log file for a configuration."""
    name = f"{config.n}-{config.variant}"
    if config.colored:
        name += "-colored"
    if config.first_col is not None:
        name += f"-first{config.first_col}"
    return Path(log_dir) / f"{name}.log"


def run(
    config: BoardConfig,
    *,
    enumerate_limit: int | None = None,
    parallel: bool | None = None,
    n_workers: int | None = None,
) -> SolveResult:
    """Run the solver on the given configuration.

    Output goes to stdout, or to a log file if `log_dir` is configured.

    Args:
        config (BoardConfig): The configuration for the puzzle to solve.
        enumerate_limit (int | None): If given, also enumerate up to this many solutions
            (0 disables enumeration).
        parallel (bool | None): Split over first columns in worker processes.  If None,
            uses the `use_first_column_parallelism` setting.
        n_workers (int | None): Number of worker processes. If None, uses `max_workers`.
    """
    setproctitle(f"ddqueens: main [{config}]")
    print(f"config: {config}")

    if solver_config.log_dir is None:
        return solve_one(
            config,
            logf=sys.stdout,
            enumerate_limit=enumerate_limit,
            parallel=parallel,
            n_workers=n_workers,
        )

    logfile = log_path(config, solver_config.log_dir)
    print(f"Log file: {logfile}")
    logfile.parent.mkdir(parents=True, exist_ok=True)

    with open(logfile, "w", encoding="utf-8") as logf:
        try:
            result = solve_one(
                config,
                logf=logf,
                enumerate_limit=enumerate_limit,
                parallel=parallel,
                n_workers=n_workers,
            )
        except KeyboardInterrupt:
            print("Solver interrupted by user.", file=logf, flush=True)
            raise
    print(f"Solutions: {result.count:,}")
    return result


def solve_one(
    config: BoardConfig,
    *,
    logf: TextIO,
    enumerate_limit: int | None = None,
    parallel: bool | None = None,
    n_workers: int | None = None,
) -> SolveResult:
    """Count (and optionally enumerate) the solutions of one configuration.

    Args:
        config (BoardConfig): The configuration for the puzzle to solve.
        logf: File object to log the solving process.
        enumerate_limit (int | None): Maximum number of solutions to enumerate.
        parallel (bool | None): Split over first columns in worker processes.
        n_workers (int | None): Number of worker processes.
    """
    usage_start = ResourceUsage.snapshot()
    task_args = TaskArgs(config=config)

    print(f"Board: {config}", file=logf, flush=True)
    start_time_str = (
        datetime.fromtimestamp(task_args.start_time).astimezone().strftime(TIMESTAMP_FMT)
    )
    print(f"Start time: {start_time_str}", file=logf, flush=True)

    if parallel is None:
        parallel = solver_config.use_first_column_parallelism
    if parallel and (config.colored or config.first_col is not None):
        print(
            "No first-column split for this configuration; running in one process.",
            file=logf,
            flush=True,
        )
        parallel = False

    stats: EngineStats | None = None
    if parallel:
        with get_executor(
            n_workers=n_workers if n_workers is not None else solver_config.max_workers,
            start_time=task_args.start_time,
        ) as executor:
            try:
                count = count_with_parallel_first_columns(executor, task_args, logf)
            except BaseException:
                executor.shutdown(wait=False, cancel_futures=True)
                raise
    else:
        stats = EngineStats()
        count = count_solutions(
            config.make_spec(),
            stats=stats,
            out=logf,
            report_interval=solver_config.report_interval,
        )
        print(
            f"Nodes expanded: {stats.nodes_expanded:,}, states merged: {stats.states_merged:,}, "
            f"max frontier: {stats.max_frontier:,}",
            file=logf,
            flush=True,
        )

    print(f"Solutions: {count:,}", file=logf, flush=True)

    solutions: list[list[tuple[int, ...]]] = []
    enumerate_timer = ElapsedTimeCounter()
    if enumerate_limit:
        enumerate_timer.start()
        solutions = enumerate_boards(config, limit=enumerate_limit, logf=logf)
        enumerate_timer.stop()
        print(f"Enumeration time: {enumerate_timer}", file=logf, flush=True)

    usage = ResourceUsage.snapshot() - usage_start
    if solver_config.show_usage:
        print(f"Usage: {usage}", file=logf, flush=True)
    print(f"Total time: {time() - task_args.start_time:.2f}s", file=logf, flush=True)

    return SolveResult(
        config=config,
        count=count,
        solutions=solutions,
        usage=usage,
        stats=stats,
        enumerate_time=float(enumerate_timer),
    )


def enumerate_boards(
    config: BoardConfig, *, limit: int | None, logf: TextIO
) -> list[list[tuple[int, ...]]]:
    """Enumerate, validate and print up to `limit` solutions.

    Raises:
        RuntimeError: If validation is enabled and a solution has a conflict.
    """
    spec = config.make_spec()
    solutions: list[list[tuple[int, ...]]] = []
    for levels in enumerate_solutions(spec, limit=limit):
        cells = decode_solution(spec, levels)
        if config.colored:
            valid = validate_colored_placement(config.n, cells, rook_only=config.rook_only)
            board_str = render_colored_placement(config.n, cells)
        else:
            valid = validate_placement(config.n, cells, rook_only=config.rook_only)
            board_str = render_placement(config.n, cells)
        if solver_config.validate_solutions and not valid:
            raise RuntimeError(f"Enumerated an invalid placement: {cells}")

        solutions.append(cells)
        print(f"Solution {len(solutions)}:", file=logf, flush=True)
        print(board_str, file=logf, flush=True)
        print("", file=logf, flush=True)
    return solutions
