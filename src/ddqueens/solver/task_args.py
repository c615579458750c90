"""Task arguments shared by the solver and its worker processes."""

from datetime import datetime
from time import time

from ddqueens.board_config import BoardConfig
from ddqueens.solver.utils import TIMESTAMP_FMT


class TaskArgs:
    """Wrapper for task arguments for the solver.

    Pickleable, so that it can be used with multiprocessing (passed to worker processes).
    """

    def __init__(self, *, config: BoardConfig) -> None:
        """Initialize the task arguments for the given board configuration.

        Args:
            config (BoardConfig): The configuration for the puzzle.
        """
        self.board_config = config.to_dict()
        """dict representing the board configuration."""

        self.start_time = time()
        """Timestamp when the solver started, in seconds since the epoch."""

    def first_columns(self) -> list[int]:
        """First columns to split the search over, one worker task each."""
        return list(range(self.board_config["n"]))

    def summary(self) -> dict[str, object]:
        """Return a dictionary-based summary of the task arguments."""
        return {
            "board_config": dict(self.board_config),
            "start_time": datetime.fromtimestamp(self.start_time)
            .astimezone()
            .strftime(TIMESTAMP_FMT),
        }
