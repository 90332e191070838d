# ABOUTME: Session state, input events, and the pure reducer driving the typing/loading/result flow.
# ABOUTME: All phase transitions live in reduce(); the runtime only feeds events and reads sessions.

import logging
from enum import Enum

from pydantic import BaseModel, ConfigDict

from weather_tui.models import FetchOutcome, FetchSuccess, Viewport, WeatherReading

logger = logging.getLogger(__name__)

QUIT_KEYS = frozenset({"q", "ctrl+c", "ctrl+q"})
SUBMIT_KEY = "enter"
RESET_KEY = "escape"


class Phase(str, Enum):
    TYPING = "typing"
    LOADING = "loading"
    RESULT = "result"
    ERROR = "error"
    TERMINATED = "terminated"


class KeyPressed(BaseModel):
    """A key from the terminal; `character` is set for printable keys."""

    model_config = ConfigDict(frozen=True)

    key: str
    character: str | None = None


class Resized(BaseModel):
    model_config = ConfigDict(frozen=True)

    width: int
    height: int


class FetchCompleted(BaseModel):
    """Outcome of the fetch started under `generation`."""

    model_config = ConfigDict(frozen=True)

    generation: int
    outcome: FetchOutcome


class TimerTick(BaseModel):
    model_config = ConfigDict(frozen=True)


Event = KeyPressed | Resized | FetchCompleted | TimerTick


class Session(BaseModel):
    """The single UI record; a new value is produced for every event."""

    model_config = ConfigDict(frozen=True)

    phase: Phase = Phase.TYPING
    query_buffer: str = ""
    cursor: int = 0
    last_result: WeatherReading | None = None
    last_error: str | None = None
    viewport: Viewport = Viewport()
    spinner_frame: int = 0
    generation: int = 0
    pending_query: str | None = None

    @property
    def is_terminated(self) -> bool:
        return self.phase is Phase.TERMINATED


def reduce(session: Session, event: Event) -> Session:
    """Return the session that follows `event`.

    Pure: the caller decides what to do when the phase changes (start a
    fetch on entering LOADING, exit on TERMINATED).
    """
    if session.is_terminated:
        return session

    if isinstance(event, Resized):
        viewport = Viewport(width=max(event.width, 0), height=max(event.height, 0))
        return session.model_copy(update={"viewport": viewport})

    if isinstance(event, KeyPressed) and event.key in QUIT_KEYS:
        return session.model_copy(update={"phase": Phase.TERMINATED, "pending_query": None})

    if session.phase is Phase.TYPING:
        return _reduce_typing(session, event)
    if session.phase is Phase.LOADING:
        return _reduce_loading(session, event)
    return _reduce_showing(session, event)


def _reduce_typing(session: Session, event: Event) -> Session:
    if not isinstance(event, KeyPressed):
        if isinstance(event, FetchCompleted):
            logger.debug("Dropping fetch result for generation %d while typing", event.generation)
        return session

    if event.key == SUBMIT_KEY:
        query = session.query_buffer.strip()
        if not query:
            return session
        return session.model_copy(
            update={
                "phase": Phase.LOADING,
                "generation": session.generation + 1,
                "pending_query": query,
                "spinner_frame": 0,
            }
        )
    buffer, cursor = edit_buffer(session.query_buffer, session.cursor, event)
    return session.model_copy(update={"query_buffer": buffer, "cursor": cursor})


def _reduce_loading(session: Session, event: Event) -> Session:
    if isinstance(event, TimerTick):
        return session.model_copy(update={"spinner_frame": session.spinner_frame + 1})

    if isinstance(event, FetchCompleted):
        if event.generation != session.generation:
            logger.debug(
                "Dropping stale fetch result (generation %d, current %d)", event.generation, session.generation
            )
            return session
        return complete_fetch(session, event.outcome)

    return session


def _reduce_showing(session: Session, event: Event) -> Session:
    if isinstance(event, KeyPressed) and event.key == RESET_KEY:
        return session.model_copy(
            update={
                "phase": Phase.TYPING,
                "query_buffer": "",
                "cursor": 0,
                "last_result": None,
                "last_error": None,
                "pending_query": None,
            }
        )
    return session


def complete_fetch(session: Session, outcome: FetchOutcome) -> Session:
    """Move a loading session to RESULT or ERROR according to `outcome`."""
    if isinstance(outcome, FetchSuccess):
        return session.model_copy(
            update={
                "phase": Phase.RESULT,
                "last_result": outcome.reading,
                "last_error": None,
                "pending_query": None,
            }
        )
    return session.model_copy(
        update={
            "phase": Phase.ERROR,
            "last_result": None,
            "last_error": outcome.message,
            "pending_query": None,
        }
    )


def edit_buffer(buffer: str, cursor: int, event: KeyPressed) -> tuple[str, int]:
    """Apply a single editing key to the input line.

    Returns the new buffer and cursor. The cursor is an insertion point in
    ``0..len(buffer)``; bindings follow readline (ctrl+a/e, ctrl+u/k, ctrl+w).
    """
    cursor = min(max(cursor, 0), len(buffer))
    key = event.key

    if key in ("left", "ctrl+b"):
        return buffer, max(cursor - 1, 0)
    if key in ("right", "ctrl+f"):
        return buffer, min(cursor + 1, len(buffer))
    if key in ("home", "ctrl+a"):
        return buffer, 0
    if key in ("end", "ctrl+e"):
        return buffer, len(buffer)
    if key in ("backspace", "ctrl+h"):
        if cursor == 0:
            return buffer, cursor
        return buffer[: cursor - 1] + buffer[cursor:], cursor - 1
    if key in ("delete", "ctrl+d"):
        return buffer[:cursor] + buffer[cursor + 1 :], cursor
    if key == "ctrl+u":
        return buffer[cursor:], 0
    if key == "ctrl+k":
        return buffer[:cursor], cursor
    if key == "ctrl+w":
        start = len(buffer[:cursor].rstrip())
        start = buffer.rfind(" ", 0, start) + 1
        return buffer[:start] + buffer[cursor:], start
    if event.character and event.character.isprintable():
        return buffer[:cursor] + event.character + buffer[cursor:], cursor + len(event.character)
    return buffer, cursor
