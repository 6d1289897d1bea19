"""Date entry modal for the sales dashboard."""

from __future__ import annotations

from datetime import date, timedelta

from rich.text import Text
from textual.app import ComposeResult
from textual.binding import Binding
from textual.containers import Vertical
from textual.events import Key
from textual.screen import ModalScreen
from textual.widgets import Static

DIGITS = 8


def format_digits(value: str) -> str:
    """Show typed digits as YYYY-MM-DD while they are entered."""
    parts = [value[:4], value[4:6], value[6:8]]
    return "-".join(part for part in parts if part)


def parse_digits(value: str) -> date:
    """Parse eight digits (YYYYMMDD) into a date; raises ValueError otherwise."""
    if len(value) != DIGITS or not value.isdigit():
        raise ValueError("Enter eight digits: YYYYMMDD.")
    return date(int(value[:4]), int(value[4:6]), int(value[6:8]))


class DateModal(ModalScreen[date | None]):
    """Prompt for the sales day to show. Left/Right step one day."""

    BINDINGS = [
        Binding("escape", "cancel", "Cancel", priority=True),
        Binding("enter", "confirm", "Show day", priority=True),
        Binding("backspace", "erase", "Erase", priority=True),
        Binding("left", "step(-1)", "Previous day", priority=True),
        Binding("right", "step(1)", "Next day", priority=True),
    ]

    CSS = """
    DateModal {
        align: center middle;
        background: $background 70%;
    }

    #date-box {
        width: 48;
        height: auto;
        border: heavy $accent;
        background: $surface;
        padding: 1 2;
    }

    #date-input {
        border: tall $primary;
        padding: 0 1;
        text-align: center;
    }

    #date-problem {
        color: $error;
        height: auto;
    }

    #date-hint {
        margin-top: 1;
        color: $text-muted;
    }
    """

    def __init__(self, initial: date | None = None) -> None:
        super().__init__()
        self.value = initial.strftime("%Y%m%d") if initial is not None else ""
        self.problem = ""

    def compose(self) -> ComposeResult:
        with Vertical(id="date-box"):
            yield Static("Sales day", classes="pane-title")
            yield Static(id="date-input")
            yield Static(id="date-problem")
            yield Static("Type YYYYMMDD · ←/→ one day · Enter show · Esc cancel", id="date-hint")

    def on_mount(self) -> None:
        self._show_value()

    def action_cancel(self) -> None:
        self.dismiss(None)

    def action_confirm(self) -> None:
        try:
            self.dismiss(parse_digits(self.value))
        except ValueError as exc:
            self.problem = str(exc) if self.value else "A date is required."
            self._show_value()

    def action_erase(self) -> None:
        self.value = self.value[:-1]
        self.problem = ""
        self._show_value()

    def action_step(self, days: int) -> None:
        try:
            current = parse_digits(self.value)
        except ValueError:
            current = date.today()
        self.value = (current + timedelta(days=days)).strftime("%Y%m%d")
        self.problem = ""
        self._show_value()

    def on_key(self, event: Key) -> None:
        event.stop()
        if event.character and event.character.isdigit() and len(self.value) < DIGITS:
            self.value += event.character
            self.problem = ""
            self._show_value()

    def _show_value(self) -> None:
        shown = Text(format_digits(self.value) or "YYYY-MM-DD", style="bold" if self.value else "dim")
        self.query_one("#date-input", Static).update(shown)
        self.query_one("#date-problem", Static).update(self.problem)
