"""Implementation of the parallel solver: task distribution over first columns."""

import traceback
from concurrent.futures import ProcessPoolExecutor, as_completed
from dataclasses import dataclass
from pprint import pprint
from typing import Literal, TextIO, TypedDict

from ddqueens.board_config import BoardConfig
from ddqueens.solver.config import config as solver_config
from ddqueens.solver.task_args import TaskArgs
from ddqueens.solver.worker import worker_task


class WorkerTaskPayload(TypedDict):
    """Payload submitted to worker processes."""

    first_col: int
    """First column the top-row piece is restricted to."""
    board_config: dict
    """Dict representation of a BoardConfig."""


@dataclass
class Result:
    """Wrapper for worker task results."""

    first_col: int
    status: Literal["success", "error"]
    count: int | None
    err_msg: str | None = None


def count_with_parallel_first_columns(
    executor: ProcessPoolExecutor,
    task_args: TaskArgs,
    logf: TextIO,
) -> int:
    """Count solutions by running one worker task per first column.

    The first columns partition the solutions of the unrestricted puzzle, so the
    per-column counts add up to the total.

    Args:
        executor (ProcessPoolExecutor): Executor for managing worker processes.
        task_args (TaskArgs): Arguments to pass to worker tasks, in addition to the first column.
        logf: File object to log the solving process.

    Returns:
        The total number of solutions.

    Raises:
        ValueError: If the configuration has no first-column split (colored variant, or
            a first column already fixed).
        RuntimeError: If any worker task fails.
    """
    print("Solver config:", file=logf, flush=True)
    pprint(solver_config.model_dump(), stream=logf, width=120)
    print("Solver initialized with:", file=logf, flush=True)
    pprint(task_args.summary(), stream=logf, width=120)
    print("", file=logf, flush=True)

    board_config = BoardConfig.from_dict(task_args.board_config)
    if board_config.colored or board_config.first_col is not None:
        raise ValueError(f"Cannot split {board_config} by first column.")

    tasks: list[WorkerTaskPayload] = [
        {"first_col": first_col, "board_config": task_args.board_config}
        for first_col in task_args.first_columns()
    ]
    print(f"Starting {len(tasks)} first-column tasks...", file=logf, flush=True)

    futures = [executor.submit(_worker_task, task) for task in tasks]
    counts: dict[int, int] = {}
    errors: list[Result] = []
    for future in as_completed(futures):
        result = future.result()
        if result.status == "success" and result.count is not None:
            counts[result.first_col] = result.count
            print(
                f"  first column {result.first_col:3d}: {result.count:,}",
                file=logf,
                flush=True,
            )
        else:
            print(
                f"Worker for first column {result.first_col} encountered an error:",
                file=logf,
                flush=True,
            )
            print(result.err_msg, file=logf, flush=True)
            errors.append(result)

    if errors:
        executor.shutdown(wait=False, cancel_futures=True)
        failed = ", ".join(str(result.first_col) for result in errors)
        raise RuntimeError(f"Worker tasks failed for first columns: {failed}")

    print("All first columns processed.", file=logf, flush=True)
    return sum(counts.values())


def _worker_task(args: WorkerTaskPayload) -> Result:
    """Worker task to count solutions for a given first column.

    Args:
        args (dict): Dictionary received from `executor.submit` containing:
            - "first_col": The first column to restrict the top row to.
            - "board_config": Dict representation of a BoardConfig.

    Returns:
        A Result wrapper.
    """
    try:
        count = worker_task(**args)
        return Result(first_col=args["first_col"], status="success", count=count)
    except Exception as e:
        return Result(
            first_col=args.get("first_col", -1),
            status="error",
            count=None,
            err_msg=f"Worker encountered an error: {str(e)}\n{traceback.format_exc()}",
        )
