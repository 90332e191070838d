# ABOUTME: Command-line entry point for the weather TUI.
# ABOUTME: Loads settings, configures logging, sizes the terminal, and runs the textual app.

import logging
import os
import sys

from textual.logging import TextualHandler

from weather_tui.app import WeatherApp
from weather_tui.config import ConfigError, Settings, load_settings
from weather_tui.deps import create_deps
from weather_tui.models import Viewport

logger = logging.getLogger(__name__)


def configure_logging(settings: Settings) -> None:
    """Route log records away from the terminal the UI is drawing on."""
    handler: logging.Handler
    if settings.log_file:
        handler = logging.FileHandler(settings.log_file)
    else:
        handler = TextualHandler()
    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        handlers=[handler],
    )


def terminal_viewport() -> Viewport:
    size = os.get_terminal_size(sys.__stdout__.fileno())
    return Viewport(width=size.columns, height=size.lines)


def main() -> int:
    try:
        settings = load_settings()
    except ConfigError as e:
        print(f"weather-tui: {e}", file=sys.stderr)
        return 1

    configure_logging(settings)

    try:
        viewport = terminal_viewport()
    except (OSError, ValueError, AttributeError) as e:
        print(f"weather-tui: cannot determine terminal size: {e}", file=sys.stderr)
        return 1

    deps = create_deps(settings)
    app = WeatherApp(fetcher=deps.fetch, viewport=viewport, on_close=deps.aclose)
    try:
        app.run()
    except Exception as e:
        logger.exception("Render loop failed")
        print(f"weather-tui: {e}", file=sys.stderr)
        return 1
    return app.return_code or 0


if __name__ == "__main__":
    sys.exit(main())
