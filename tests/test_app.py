import subprocess
import sys


def test_app_help_runs():
    proc = subprocess.run(
        [sys.executable, "-m", "order_bots.app", "-h"],
        capture_output=True,
        text=True,
        check=False,
    )
    assert proc.returncode == 0
    out = proc.stdout + proc.stderr
    assert "main entrypoint" in out
    assert "run" in out
    assert "dashboard" in out


def test_run_help_runs():
    proc = subprocess.run(
        [sys.executable, "-m", "order_bots.app", "run", "-h"],
        capture_output=True,
        text=True,
        check=False,
    )
    assert proc.returncode == 0
    out = proc.stdout + proc.stderr
    assert "--tick-ms" in out
    assert "--bots" in out
    assert "--publish" in out
