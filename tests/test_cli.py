"""Tests for the command-line entry point."""

from __future__ import annotations

from unittest.mock import patch

import pytest

from screenbounds import __version__
from screenbounds.cli import main


class TestMain:
    """Tests for main()."""

    def test_version(self, capsys: pytest.CaptureFixture[str]) -> None:
        with pytest.raises(SystemExit) as exc_info:
            main(["--version"])
        assert exc_info.value.code == 0
        assert __version__ in capsys.readouterr().out

    def test_runs_uvicorn_with_arguments(self) -> None:
        with (
            patch("screenbounds.cli.uvicorn.run") as run,
            patch("screenbounds.cli.configure_logging") as configure,
        ):
            assert main(["--host", "0.0.0.0", "--port", "9001"]) == 0

        configure.assert_called_once_with()
        run.assert_called_once_with(
            "screenbounds.server.app:app", host="0.0.0.0", port=9001, reload=False
        )
