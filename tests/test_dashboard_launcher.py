import os
import sys

from portfolio_dashboard import run_dashboard


def test_launcher_passes_data_dir_and_streamlit_args(monkeypatch, tmp_path):
    calls = []

    def fake_call(command, env):
        calls.append((command, env))
        return 0

    monkeypatch.setattr(run_dashboard.subprocess, "call", fake_call)
    code = run_dashboard.main(["--data-dir", str(tmp_path), "--log-level", "debug", "--server.port", "8600"])

    assert code == 0
    command, env = calls[0]
    assert command[:4] == [sys.executable, "-m", "streamlit", "run"]
    assert os.path.basename(command[4]) == "app.py"
    assert command[5:] == ["--server.port", "8600"]
    assert env["PORTFOLIO_TRACKER_HOME"] == str(tmp_path)
    assert env["PORTFOLIO_TRACKER_LOG_LEVEL"] == "DEBUG"


def test_launcher_without_options_keeps_environment(monkeypatch):
    monkeypatch.delenv("PORTFOLIO_TRACKER_HOME", raising=False)
    captured = {}
    monkeypatch.setattr(run_dashboard.subprocess, "call", lambda command, env: captured.update(env=env) or 3)
    assert run_dashboard.main([]) == 3
    assert "PORTFOLIO_TRACKER_HOME" not in captured["env"]
