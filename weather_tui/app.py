# ABOUTME: Textual application that feeds terminal events through the reducer and paints frames.
# ABOUTME: Spawns the weather fetch as a worker and posts its outcome back as a FetchCompleted event.

import logging
from collections.abc import Awaitable, Callable

from textual import events
from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.widgets import Static

from weather_tui.models import FailureKind, FetchFailure, FetchOutcome, Viewport
from weather_tui.render import DEFAULT_THEME, Theme, render_frame
from weather_tui.state import Event, FetchCompleted, KeyPressed, Phase, Resized, Session, TimerTick, reduce

logger = logging.getLogger(__name__)

Fetcher = Callable[[str], Awaitable[FetchOutcome]]

SPINNER_INTERVAL = 0.1


class WeatherApp(App):
    """Full-screen prompt, spinner and result box around one weather lookup."""

    CSS = """
    Screen {
        overflow: hidden;
    }
    #frame {
        width: 100%;
        height: 100%;
    }
    """

    ENABLE_COMMAND_PALETTE = False

    # Override the default quit bindings so every key reaches the reducer.
    BINDINGS = [
        Binding("ctrl+c", "interrupt('ctrl+c')", "Quit", show=False, priority=True),
        Binding("ctrl+q", "interrupt('ctrl+q')", "Quit", show=False, priority=True),
    ]

    def __init__(
        self,
        fetcher: Fetcher,
        theme: Theme = DEFAULT_THEME,
        viewport: Viewport | None = None,
        on_close: Callable[[], Awaitable[None]] | None = None,
    ):
        super().__init__()
        self.fetcher = fetcher
        self.frame_theme = theme
        self.session = Session(viewport=viewport or Viewport())
        self._on_close = on_close
        self._frame: Static | None = None

    def compose(self) -> ComposeResult:
        yield Static(id="frame")

    def on_mount(self) -> None:
        self._frame = self.query_one("#frame", Static)
        self.set_interval(SPINNER_INTERVAL, self._tick)
        self._paint()

    async def on_unmount(self) -> None:
        if self._on_close is not None:
            await self._on_close()

    def on_key(self, event: events.Key) -> None:
        event.stop()
        self.feed(KeyPressed(key=event.key, character=event.character if event.is_printable else None))

    def on_resize(self, event: events.Resize) -> None:
        self.feed(Resized(width=event.size.width, height=event.size.height))

    def action_interrupt(self, key: str) -> None:
        self.feed(KeyPressed(key=key))

    def _tick(self) -> None:
        self.feed(TimerTick())

    def feed(self, event: Event) -> None:
        """Run `event` through the reducer and act on the resulting phase change."""
        previous = self.session
        self.session = reduce(previous, event)

        if self.session.is_terminated:
            if not previous.is_terminated:
                logger.info("Quit requested during %s", previous.phase.value)
                self.exit(0)
            return

        if self.session.phase is Phase.LOADING and self.session.generation != previous.generation:
            self._start_fetch(self.session.pending_query or "", self.session.generation)

        if self.session is not previous:
            self._paint()

    def _start_fetch(self, query: str, generation: int) -> None:
        self.run_worker(self._fetch(query, generation), name=f"fetch-{generation}", group="fetch")

    async def _fetch(self, query: str, generation: int) -> None:
        try:
            outcome = await self.fetcher(query)
        except Exception as e:
            logger.exception("Weather fetch for %r raised", query)
            outcome = FetchFailure(kind=FailureKind.NETWORK, message=str(e) or type(e).__name__)
        self.feed(FetchCompleted(generation=generation, outcome=outcome))

    def _paint(self) -> None:
        if self._frame is not None:
            self._frame.update(render_frame(self.session, self.frame_theme))
