from __future__ import annotations

import pytest
from click.testing import CliRunner

from pharmacy_worklist import __version__
from pharmacy_worklist.cli import main


class TestCli:
    def test_version(self) -> None:
        result = CliRunner().invoke(main, ["version"])
        assert result.exit_code == 0
        assert __version__ in result.output

    def test_snapshot_reports_load_failure(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr("pharmacy_worklist.utils.logger.setup_logging", lambda level: None)
        result = CliRunner().invoke(main, ["snapshot", "--api-base", "http://127.0.0.1:9"])
        assert result.exit_code != 0
        assert "Load failed" in result.output
