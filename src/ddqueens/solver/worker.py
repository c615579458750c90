"""Worker tasks for the parallel first-column split."""

from dataclasses import dataclass
from multiprocessing.sharedctypes import Synchronized
from time import time

from setproctitle import setproctitle

from ddqueens.board_config import BoardConfig
from ddqueens.solver.engine import EngineStats, count_solutions


@dataclass(kw_only=True)
class WorkerState:
    """Global state maintained by each worker process."""

    worker_idx: int
    """Index of the worker process."""

    start_time: float
    """Timestamp when the solver started, in seconds since the epoch."""

    n_tasks_done: int = 0
    """Number of first-column tasks finished by this worker."""

    n_nodes_expanded: int = 0
    """Number of spec nodes expanded by this worker, over all its tasks."""


worker_state: WorkerState | None = None
"""Global state for each worker process."""


def init_worker_globals(worker_ctr: Synchronized, start_time: float) -> None:
    """Initialize global variables for worker processes.

    Args:
        worker_ctr (Synchronized[int]): Shared counter for workers.
        start_time (float): UNIX timestamp when the solver started.
    """
    global worker_state  # noqa: PLW0603
    with worker_ctr.get_lock():
        # Get and set the shared worker counter atomically, using the obtained value
        # as the worker index
        worker_idx = worker_ctr.value
        worker_ctr.value += 1

    worker_state = WorkerState(worker_idx=worker_idx, start_time=start_time)
    setproctitle(f"ddqueens: worker {worker_idx}")
    print(f"Worker {worker_idx} initialized.", flush=True)


def worker_task(first_col: int, board_config: dict) -> int:
    """Count the solutions whose top-row piece sits on the given first column.

    Args:
        first_col (int): The first column to restrict the top row to.
        board_config (dict): Dict representation of a BoardConfig.

    Returns:
        The number of solutions for this first column.
    """
    # Ensure worker_state is initialized
    if not worker_state:
        raise RuntimeError("Worker state not initialized. Call init_worker_globals first.")

    config = BoardConfig.from_dict(board_config).with_first_col(first_col)
    stats = EngineStats()
    count = count_solutions(config.make_spec(), stats=stats)

    worker_state.n_tasks_done += 1
    worker_state.n_nodes_expanded += stats.nodes_expanded
    print(
        f"Worker {worker_state.worker_idx}, first column {first_col}: "
        f"{count:,} solutions, {stats.nodes_expanded:,} nodes expanded "
        f"({time() - worker_state.start_time:.2f}s since start). "
        f"Worker totals: {worker_state.n_tasks_done} tasks, "
        f"{worker_state.n_nodes_expanded:,} nodes expanded.",
        flush=True,
    )
    return count
