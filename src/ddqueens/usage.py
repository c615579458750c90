"""Process resource usage snapshots for reporting."""

import resource
from dataclasses import dataclass
from time import time


def time_str(seconds: float) -> str:
    """Format a duration as "1.23s"."""
    return f"{seconds:.2f}s"


def memory_str(kib: int) -> str:
    """Format a size given in KiB as whole megabytes."""
    return f"{kib / 1024:.0f}MB"


@dataclass
class ResourceUsage:
    """Elapsed time, CPU times and peak memory of the current process.

    Take a snapshot before and after a phase; their difference is the cost of the
    phase.  Peak memory is not additive, so both `+` and `-` keep the larger value.
    """

    etime: float = 0.0
    """Wall-clock time, in seconds since the epoch (or a duration, for differences)."""

    utime: float = 0.0
    """User CPU time, in seconds."""

    stime: float = 0.0
    """System CPU time, in seconds."""

    maxrss: int = 0
    """Peak resident set size, in KiB."""

    @classmethod
    def snapshot(cls) -> "ResourceUsage":
        """Return the usage of the current process at this moment."""
        return cls().update()

    def update(self) -> "ResourceUsage":
        """Refresh all fields from the current process."""
        usage = resource.getrusage(resource.RUSAGE_SELF)
        self.etime = time()
        self.utime = usage.ru_utime
        self.stime = usage.ru_stime
        self.maxrss = usage.ru_maxrss
        return self

    def __add__(self, other: "ResourceUsage") -> "ResourceUsage":
        return ResourceUsage(
            self.etime + other.etime,
            self.utime + other.utime,
            self.stime + other.stime,
            max(self.maxrss, other.maxrss),
        )

    def __sub__(self, other: "ResourceUsage") -> "ResourceUsage":
        return ResourceUsage(
            self.etime - other.etime,
            self.utime - other.utime,
            self.stime - other.stime,
            max(self.maxrss, other.maxrss),
        )

    def __iadd__(self, other: "ResourceUsage") -> "ResourceUsage":
        self.etime += other.etime
        self.utime += other.utime
        self.stime += other.stime
        self.maxrss = max(self.maxrss, other.maxrss)
        return self

    def __isub__(self, other: "ResourceUsage") -> "ResourceUsage":
        self.etime -= other.etime
        self.utime -= other.utime
        self.stime -= other.stime
        self.maxrss = max(self.maxrss, other.maxrss)
        return self

    def elapsed_time(self) -> str:
        return time_str(self.etime)

    def user_time(self) -> str:
        return time_str(self.utime)

    def system_time(self) -> str:
        return time_str(self.stime)

    def memory(self) -> str:
        return memory_str(self.maxrss)

    def __str__(self) -> str:
        return f"{self.elapsed_time()} elapsed, {self.user_time()} user, {self.memory()}"


class ElapsedTimeCounter:
    """Accumulates wall-clock time over several start/stop intervals."""

    def __init__(self) -> None:
        self.total_time = 0.0
        self.start_time = 0.0

    def reset(self) -> "ElapsedTimeCounter":
        self.total_time = 0.0
        return self

    def start(self) -> "ElapsedTimeCounter":
        self.start_time = time()
        return self

    def stop(self) -> "ElapsedTimeCounter":
        self.total_time += time() - self.start_time
        return self

    def __float__(self) -> float:
        return self.total_time

    def __str__(self) -> str:
        return time_str(self.total_time)
