import io
from multiprocessing import Value
from time import time

import pytest

from ddqueens import main, parse_args
from ddqueens.board_config import BoardConfig
from ddqueens.solver import solver
from ddqueens.solver.config import config as solver_config
from ddqueens.solver.task_args import TaskArgs
from ddqueens.solver.utils import (
    render_colored_placement,
    render_placement,
    validate_colored_placement,
    validate_placement,
)
from ddqueens.solver.worker import init_worker_globals, worker_task


def test_validate_placement():
    assert validate_placement(4, [(0, 1), (1, 3), (2, 0), (3, 2)])
    # Shared diagonal
    assert not validate_placement(4, [(0, 0), (1, 1), (2, 3), (3, 2)])
    assert validate_placement(4, [(0, 0), (1, 1), (2, 3), (3, 2)], rook_only=True)
    # Shared column
    assert not validate_placement(3, [(0, 0), (1, 0), (2, 1)], rook_only=True)
    # Missing row
    assert not validate_placement(3, [(0, 0), (1, 1)], rook_only=True)
    # Off the board
    assert not validate_placement(2, [(0, 0), (1, 2)], rook_only=True)


def test_validate_colored_placement():
    latin = [(0, 0, 1), (0, 1, 0), (1, 0, 0), (1, 1, 1)]
    assert validate_colored_placement(2, latin, rook_only=True)
    assert not validate_colored_placement(2, latin)
    # Same cell colored twice
    clash = [(0, 0, 1), (0, 0, 0), (1, 0, 0), (1, 1, 1)]
    assert not validate_colored_placement(2, clash, rook_only=True)


def test_render_placement():
    board = render_placement(4, [(0, 1), (1, 3), (2, 0), (3, 2)])
    assert board.splitlines() == [". . Q .", "Q . . .", ". . . Q", ". Q . ."]


def test_render_colored_placement():
    board = render_colored_placement(2, [(0, 0, 1), (0, 1, 0), (1, 0, 0), (1, 1, 1)])
    assert board.splitlines() == ["0 1", "1 0"]


def test_task_args_summary():
    task_args = TaskArgs(config=BoardConfig(n=5, variant="rook"))
    summary = task_args.summary()
    assert summary["board_config"]["n"] == 5
    assert summary["board_config"]["variant"] == "rook"
    assert task_args.first_columns() == [0, 1, 2, 3, 4]


def test_solve_one_counts_and_enumerates():
    logf = io.StringIO()
    result = solver.solve_one(BoardConfig(n=6), logf=logf, enumerate_limit=10, parallel=False)
    assert result.count == 4
    assert len(result.solutions) == 4
    assert result.stats is not None and result.stats.nodes_expanded > 0
    for cells in result.solutions:
        assert validate_placement(6, cells)
    output = logf.getvalue()
    assert "Solutions: 4" in output
    assert "Solution 4:" in output
    assert "Enumeration time:" in output
    assert result.enumerate_time >= 0.0


def test_solve_one_without_enumeration_skips_timer():
    logf = io.StringIO()
    result = solver.solve_one(BoardConfig(n=5), logf=logf, parallel=False)
    assert result.count == 10
    assert result.solutions == []
    assert result.enumerate_time == 0.0
    assert "Enumeration time:" not in logf.getvalue()


def test_solve_one_colored():
    logf = io.StringIO()
    result = solver.solve_one(
        BoardConfig(n=3, variant="rook", colored=True), logf=logf, enumerate_limit=5
    )
    assert result.count == 2
    assert len(result.solutions) == 2


def test_colored_run_ignores_parallel_flag():
    logf = io.StringIO()
    result = solver.solve_one(BoardConfig(n=2, colored=True), logf=logf, parallel=True)
    assert result.count == 0
    assert "running in one process" in logf.getvalue()


def test_worker_task_counts_one_first_column(capsys):
    init_worker_globals(Value("i", 0), time())
    config = BoardConfig(n=4, variant="rook")
    assert worker_task(0, config.to_dict()) == 6
    assert sum(worker_task(k, config.to_dict()) for k in range(4)) == 24
    out = capsys.readouterr().out
    assert "Worker totals: 1 tasks" in out
    assert "Worker totals: 5 tasks" in out


def test_parallel_matches_sequential():
    logf = io.StringIO()
    result = solver.solve_one(BoardConfig(n=6), logf=logf, parallel=True, n_workers=1)
    assert result.count == 4
    assert result.stats is None
    assert "All first columns processed." in logf.getvalue()


def test_get_executor_rejects_too_many_workers():
    with pytest.raises(ValueError):
        solver.get_executor(n_workers=100_000, start_time=time())


def test_run_writes_log_file(tmp_path, monkeypatch, capsys):
    monkeypatch.setattr(solver_config, "log_dir", str(tmp_path))
    config = BoardConfig(n=5, variant="rook", first_col=1)
    result = solver.run(config)
    assert result.count == 24

    logfile = tmp_path / "5-rook-first1.log"
    assert logfile.is_file()
    assert "Solutions: 24" in logfile.read_text(encoding="utf-8")
    assert "Solutions: 24" in capsys.readouterr().out


def test_parse_args():
    args = parse_args(["8", "--rook", "--first-col", "2", "--enumerate", "--limit", "3"])
    assert args.n == 8
    assert args.rook
    assert args.first_col == 2
    assert args.enumerate
    assert args.limit == 3
    assert args.parallel is None


def test_main_prints_count(monkeypatch, capsys):
    monkeypatch.setattr(solver_config, "log_dir", None)
    main(["4", "--enumerate"])
    out = capsys.readouterr().out
    assert "Solutions: 2" in out
    assert "Solution 2:" in out


@pytest.mark.parametrize(
    "argv",
    [
        ["0"],
        ["4", "--colored", "--first-col", "1"],
        ["4", "--first-col", "9"],
        ["4", "--enumerate", "--limit", "-1"],
        ["4", "--parallel", "--workers", "0"],
        ["4", "--parallel", "--workers", "100000"],
    ],
)
def test_main_rejects_invalid_configuration(argv, monkeypatch, capsys):
    monkeypatch.setattr(solver_config, "log_dir", None)
    with pytest.raises(SystemExit) as exc_info:
        main(argv)
    assert exc_info.value.code == 1
    assert "Invalid configuration" in capsys.readouterr().err
