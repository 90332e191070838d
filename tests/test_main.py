# ABOUTME: Tests for the command-line entry point.
# ABOUTME: Covers fatal startup errors, exit codes, and where log records are sent.

import logging
import os

import pytest
from textual.logging import TextualHandler

from weather_tui import __main__ as cli
from weather_tui.app import WeatherApp
from weather_tui.config import load_settings


@pytest.fixture
def no_logging_setup(monkeypatch):
    monkeypatch.setattr(cli, "configure_logging", lambda settings: None)


@pytest.fixture
def api_key(monkeypatch, tmp_path):
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("API_KEY", "abc123")


def _terminal_size(columns: int = 80, lines: int = 24):
    return lambda fd=None: os.terminal_size((columns, lines))


class TestMain:
    def test_missing_api_key_exits_1(self, monkeypatch, tmp_path, capsys, no_logging_setup):
        """A missing credential is fatal before the UI starts.

        Implementation: Clears API_KEY and runs main() from a directory without a .env.
        Passing implies: ConfigError is reported on stderr with exit status 1.
        """
        monkeypatch.chdir(tmp_path)
        monkeypatch.setenv("API_KEY", "placeholder")
        monkeypatch.delenv("API_KEY")
        ran = []
        monkeypatch.setattr(WeatherApp, "run", lambda self: ran.append(True))

        assert cli.main() == 1
        assert "API_KEY" in capsys.readouterr().err
        assert ran == []

    def test_terminal_size_failure_exits_1(self, monkeypatch, capsys, api_key, no_logging_setup):
        """An unreadable terminal size is fatal.

        Implementation: Makes os.get_terminal_size raise OSError.
        Passing implies: The error reaches stderr and the app never runs.
        """

        def broken(fd=None):
            raise OSError("not a terminal")

        monkeypatch.setattr(os, "get_terminal_size", broken)
        ran = []
        monkeypatch.setattr(WeatherApp, "run", lambda self: ran.append(True))

        assert cli.main() == 1
        err = capsys.readouterr().err
        assert "cannot determine terminal size" in err
        assert "not a terminal" in err
        assert ran == []

    def test_app_start_failure_exits_1(self, monkeypatch, capsys, api_key, no_logging_setup):
        """A render loop that fails to start is fatal.

        Implementation: Makes WeatherApp.run raise RuntimeError.
        Passing implies: The failure is reported on stderr with exit status 1.
        """
        monkeypatch.setattr(os, "get_terminal_size", _terminal_size())

        def fail(self):
            raise RuntimeError("driver unavailable")

        monkeypatch.setattr(WeatherApp, "run", fail)

        assert cli.main() == 1
        assert "driver unavailable" in capsys.readouterr().err

    def test_normal_quit_exits_0(self, monkeypatch, api_key, no_logging_setup):
        """A clean run returns 0 and starts the app with the terminal size.

        Implementation: Replaces WeatherApp.run with a recorder.
        Passing implies: The initial viewport comes from the terminal query.
        """
        monkeypatch.setattr(os, "get_terminal_size", _terminal_size(120, 40))
        seen = []
        monkeypatch.setattr(WeatherApp, "run", lambda self: seen.append(self.session.viewport))

        assert cli.main() == 0
        assert len(seen) == 1
        assert (seen[0].width, seen[0].height) == (120, 40)


class TestConfigureLogging:
    def _capture(self, monkeypatch) -> dict:
        captured: dict = {}
        monkeypatch.setattr(logging, "basicConfig", lambda **kwargs: captured.update(kwargs))
        return captured

    def test_log_file_uses_file_handler(self, monkeypatch, tmp_path):
        """WEATHER_TUI_LOG_FILE sends records to that file.

        Implementation: Configures logging with a temp log path.
        Passing implies: Logs never draw over the full-screen UI.
        """
        captured = self._capture(monkeypatch)
        log_path = tmp_path / "weather.log"
        cli.configure_logging(
            load_settings({"API_KEY": "abc", "WEATHER_TUI_LOG_FILE": str(log_path), "WEATHER_TUI_LOG_LEVEL": "info"})
        )

        (handler,) = captured["handlers"]
        try:
            assert isinstance(handler, logging.FileHandler)
            assert handler.baseFilename == str(log_path)
            assert captured["level"] == "INFO"
        finally:
            handler.close()

    def test_default_uses_textual_handler(self, monkeypatch):
        """Without a log file, records go to textual's devtools console.

        Implementation: Configures logging with only an API key.
        Passing implies: stderr stays free for the terminal UI.
        """
        captured = self._capture(monkeypatch)
        cli.configure_logging(load_settings({"API_KEY": "abc"}))

        (handler,) = captured["handlers"]
        assert isinstance(handler, TextualHandler)
        assert captured["level"] == "WARNING"
