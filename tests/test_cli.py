from __future__ import annotations

import pytest

from pyrelay import _cli


def test_cli_flags_override_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("PYRELAY_PORT", "2222")

    config = _cli.build_config(_cli._parse_args(["--port", "3333", "--log-payloads", "--max-queue", "8"]))

    assert config.port == 3333
    assert config.log_verbose is True
    assert config.max_queue == 8


def test_cli_reports_bad_config(monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]) -> None:
    monkeypatch.setattr(_cli, "run", lambda _config: pytest.fail("server must not start"))

    assert _cli.main(["--port", "99999"]) == 2
    assert "port" in capsys.readouterr().err


def test_cli_runs_server_with_config(monkeypatch: pytest.MonkeyPatch) -> None:
    started = []
    monkeypatch.setattr(_cli, "run", started.append)

    assert _cli.main(["--host", "127.0.0.1"]) == 0
    assert started[0].host == "127.0.0.1"
