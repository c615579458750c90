"""Solver configuration."""

from dotenv import find_dotenv
from pydantic_settings import BaseSettings, SettingsConfigDict

# Determine the environment file path, or None if not found
ENV_FILE = find_dotenv() or None


class SolverConfig(BaseSettings):
    """Configuration settings for the ddqueens solver."""

    max_workers: int | None = None
    """Maximum number of worker processes to use. If None (default), uses os.cpu_count() - 1."""

    use_first_column_parallelism: bool = False
    """Whether to split plain-variant runs into one worker task per first column.

    Default: False.
    """

    validate_solutions: bool = True
    """Whether to check every enumerated solution for conflicts. Default: True."""

    show_usage: bool = True
    """Whether to report elapsed time, CPU time and peak memory. Default: True."""

    report_interval: int = 0
    """Report progress every this many expanded levels (0 disables progress reports)."""

    log_dir: str | None = None
    """Directory for per-run log files. If None (default), only stdout is used."""

    model_config = SettingsConfigDict(
        env_prefix="DDQUEENS_",
        env_file=ENV_FILE,
        env_file_encoding="utf-8",
        extra="forbid",
    )


config = SolverConfig()
