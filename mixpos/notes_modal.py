"""Free-text notes modal for one cart line."""

from __future__ import annotations

from rich.text import Text
from textual.app import ComposeResult
from textual.binding import Binding
from textual.containers import Vertical
from textual.events import Key
from textual.screen import ModalScreen
from textual.widgets import Static

from mixpos.models import OrderItem
from mixpos.rendering import format_item_line

MAX_NOTES_LENGTH = 80


class NotesModal(ModalScreen[str | None]):
    """Type the kitchen notes of one line.

    Dismisses with the new notes text, or ``None`` when cancelled. An empty
    result clears the notes.
    """

    BINDINGS = [
        Binding("escape", "cancel", "Cancel", priority=True),
        Binding("enter", "confirm", "Confirm", priority=True),
        Binding("backspace", "erase", "Erase", priority=True),
        Binding("ctrl+u", "clear", "Clear", priority=True),
    ]

    CSS = """
    NotesModal {
        align: center middle;
        background: $background 70%;
    }

    #notes-box {
        width: 70;
        height: auto;
        border: heavy $accent;
        background: $surface;
        padding: 1 2;
    }

    #notes-line {
        margin-bottom: 1;
    }

    #notes-input {
        border: tall $primary;
        padding: 0 1;
    }

    #notes-hint {
        margin-top: 1;
        color: $text-muted;
    }
    """

    def __init__(self, item: OrderItem) -> None:
        super().__init__()
        self.item = item
        self.value = item.notes

    def compose(self) -> ComposeResult:
        with Vertical(id="notes-box"):
            yield Static(format_item_line(self.item), id="notes-line")
            yield Static(id="notes-input")
            yield Static(f"Enter save · Ctrl+U clear · Esc cancel · max {MAX_NOTES_LENGTH} chars", id="notes-hint")

    def on_mount(self) -> None:
        self._show_value()

    def action_cancel(self) -> None:
        self.dismiss(None)

    def action_confirm(self) -> None:
        self.dismiss(self.value.strip())

    def action_erase(self) -> None:
        self.value = self.value[:-1]
        self._show_value()

    def action_clear(self) -> None:
        self.value = ""
        self._show_value()

    def on_key(self, event: Key) -> None:
        event.stop()
        if not (event.is_printable and event.character):
            return
        if len(self.value) < MAX_NOTES_LENGTH:
            self.value += event.character
            self._show_value()

    def _show_value(self) -> None:
        text = Text()
        text.append("Note: ", style="dim")
        text.append(self.value, style="bold")
        text.append("▏", style="blink")
        self.query_one("#notes-input", Static).update(text)
