# ABOUTME: Pure rendering of a Session into a rich renderable frame.
# ABOUTME: Styles come from an immutable Theme built once at startup and passed in explicitly.

from io import StringIO

from pydantic import BaseModel, ConfigDict
from rich import box
from rich.align import Align
from rich.console import Console, Group, RenderableType
from rich.panel import Panel
from rich.text import Text

from weather_tui.state import Phase, Session

MAX_DIALOG_WIDTH = 50
MIN_DIALOG_WIDTH = 20
# Borders plus horizontal padding of the value box.
VALUE_BOX_CHROME = 8

# Braille "dot" spinner.
SPINNER_FRAMES = ("⣾", "⣽", "⣻", "⢿", "⡿", "⣟", "⣯", "⣷")

PROMPT_TEXT = "Enter the name of location"
LOADING_TEXT = "Fetching weather for you"
ERROR_PREFIX = "Could not fetch weather: "
HELP_TEXT = "| Press q or ctrl+c to Quit |\n\n| Press Esc to search weather of a different city |"


class Theme(BaseModel):
    """Colors and borders for every layout."""

    model_config = ConfigDict(frozen=True)

    subtle: str = "#808080"
    foreground: str = "#ffffff"
    error: str = "#ff0000"
    border: str = "#808080"
    city: str = "bold underline #ffffff"
    value: str = "bold #ffffff"
    cursor: str = "reverse"


DEFAULT_THEME = Theme()


def format_temperature(value: float) -> str:
    """Shortest round-trip form: 18.5 -> '18.5', 18.0 -> '18'."""
    text = repr(float(value))
    if text.endswith(".0"):
        text = text[:-2]
    return text


def spinner_glyph(frame: int) -> str:
    return SPINNER_FRAMES[frame % len(SPINNER_FRAMES)]


def dialog_width(session: Session) -> int:
    return max(min(session.viewport.width, MAX_DIALOG_WIDTH), MIN_DIALOG_WIDTH)


def input_window(buffer: str, cursor: int, size: int) -> tuple[str, int]:
    """Slice of `buffer` that fits `size` cells with the cursor on screen.

    Returns the visible text and the cursor column within it. The cursor may
    sit one past the last character, so that cell is reserved.
    """
    size = max(size, 1)
    cursor = min(max(cursor, 0), len(buffer))
    start = max(cursor - size + 1, 0)
    return buffer[start : start + size], cursor - start


def render_frame(session: Session, theme: Theme = DEFAULT_THEME) -> RenderableType:
    """Build the full-screen frame for `session` without side effects."""
    if session.phase is Phase.TERMINATED:
        return Text("")

    width = dialog_width(session)
    dialog = Panel(
        _body(session, theme, width),
        box=box.ROUNDED,
        border_style=theme.border,
        padding=(1, 0),
        width=width + 2,
        expand=False,
    )
    help_line = Text(HELP_TEXT, style=theme.subtle, justify="center")
    complete = Group(Align.center(dialog), Text(""), Align.center(help_line))
    return Align(
        complete,
        align="center",
        vertical="middle",
        width=session.viewport.width,
        height=session.viewport.height,
    )


def frame_text(session: Session, theme: Theme = DEFAULT_THEME) -> str:
    """Render the frame to plain text at the session's viewport size."""
    out = StringIO()
    console = Console(
        file=out,
        width=max(session.viewport.width, 1),
        height=max(session.viewport.height, 1),
        color_system=None,
        force_terminal=False,
        legacy_windows=False,
    )
    console.print(render_frame(session, theme))
    return out.getvalue()


def _body(session: Session, theme: Theme, width: int) -> RenderableType:
    if session.phase is Phase.LOADING:
        return _labelled_box(Text(LOADING_TEXT, style=theme.subtle), spinner_glyph(session.spinner_frame), theme, width)

    if session.phase is Phase.ERROR:
        return Text(f"{ERROR_PREFIX}{session.last_error or 'unknown error'}", style=theme.error, justify="center")

    if session.phase is Phase.RESULT and session.last_result is not None:
        reading = session.last_result
        heading = Text.assemble(
            ("Current Temperature of ", theme.foreground),
            (reading.name, theme.city),
        )
        return _labelled_box(heading, f"{format_temperature(reading.temperature)} °C", theme, width)

    return _labelled_box(Text(PROMPT_TEXT, style=theme.subtle), _input_line(session, theme, width), theme, width)


def _labelled_box(label: Text, content: str | Text, theme: Theme, width: int) -> RenderableType:
    """A centered caption above a small bordered value box."""
    label.justify = "center"
    if isinstance(content, str):
        content = Text(content, style=theme.value, no_wrap=True, overflow="crop")
    value = Panel(
        content,
        box=box.ROUNDED,
        border_style=theme.border,
        padding=(0, 3),
        expand=False,
    )
    return Group(label, Align.center(value, width=width))


def _input_line(session: Session, theme: Theme, width: int) -> Text:
    visible, column = input_window(session.query_buffer, session.cursor, width - VALUE_BOX_CHROME)
    line = Text(no_wrap=True, overflow="crop", style=theme.value)
    line.append(visible[:column])
    line.append(visible[column : column + 1] or " ", style=theme.cursor)
    line.append(visible[column + 1 :])
    return line
