from __future__ import annotations

import subprocess
import sys

import pytest

from readqc.utils.runner import run_command


def _py(code: str):
    return [sys.executable, "-c", code]


def test_output_is_teed_to_log(tmp_path):
    log = tmp_path / "logs" / "tool.log"
    res = run_command(_py("import sys; print('out'); print('err', file=sys.stderr)"), log_path=log)
    assert res.returncode == 0
    assert sorted(log.read_text().splitlines()) == ["err", "out"]
    assert "out" in res.stdout


def test_nonzero_exit_is_returned_not_raised(tmp_path):
    res = run_command(_py("raise SystemExit(7)"))
    assert res.returncode == 7


def test_check_raises(tmp_path):
    with pytest.raises(subprocess.CalledProcessError):
        run_command(_py("raise SystemExit(1)"), check=True)


def test_dry_run_executes_nothing(tmp_path):
    marker = tmp_path / "ran"
    res = run_command(_py(f"open({str(marker)!r}, 'w').close()"), dry_run=True, log_path=tmp_path / "x.log")
    assert res.returncode == 0
    assert not marker.exists()
    assert not (tmp_path / "x.log").exists()


def test_env_is_merged(tmp_path):
    res = run_command(
        _py("import os; print(os.environ['READQC_T'], bool(os.environ.get('PATH')))"),
        env={"READQC_T": "42"},
    )
    assert res.stdout.strip() == "42 True"


def test_missing_executable(tmp_path):
    with pytest.raises(FileNotFoundError):
        run_command([str(tmp_path / "nope")])
