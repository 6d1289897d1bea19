"""Waiter view: the grid of tables."""

from __future__ import annotations

from typing import Callable

from rich.text import Text
from textual.app import ComposeResult
from textual.containers import Vertical
from textual.css.query import NoMatches
from textual.reactive import reactive
from textual.screen import Screen
from textual.widgets import Header, Static

from mixpos.context import AppContext
from mixpos.models import Table
from mixpos.rendering import format_money, format_table_cell
from mixpos.store import TableFilter

_FILTER_LABELS: dict[TableFilter, str] = {
    TableFilter.ALL: "All",
    TableFilter.AVAILABLE: "Free",
    TableFilter.OCCUPIED: "Occupied",
}


class TableGridScreen(Screen[None]):
    """Tables laid out in rows; Enter opens the order editor for one."""

    COLUMNS = 5

    CSS = """
    #grid-pane {
        height: 1fr;
        border: round $primary;
        padding: 1;
    }

    #filter-bar {
        border: heavy $secondary;
        padding: 0 1;
        margin-bottom: 1;
        height: 3;
    }

    #table-grid {
        height: 1fr;
    }

    #grid-status {
        color: $text-muted;
        height: 2;
    }
    """

    selected_index = reactive(0)
    table_filter = reactive(TableFilter.ALL)

    BINDINGS = [
        ("left", "move(-1)", "Previous table"),
        ("right", "move(1)", "Next table"),
        ("up", "move_row(-1)", "Row up"),
        ("down", "move_row(1)", "Row down"),
        ("enter", "open_table", "Open table"),
        ("f", "cycle_filter", "Filter"),
    ]

    def __init__(self, ctx: AppContext) -> None:
        super().__init__()
        self.ctx = ctx
        self._unsubscribe: Callable[[], None] | None = None

    def compose(self) -> ComposeResult:
        yield Header()
        with Vertical(id="grid-pane"):
            yield Static(id="filter-bar")
            yield Static(id="table-grid")
            yield Static(id="grid-status")

    def on_mount(self) -> None:
        self._unsubscribe = self.ctx.store.subscribe(self._refresh_all)
        self._refresh_all()

    def on_unmount(self) -> None:
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None

    def visible_tables(self) -> list[Table]:
        return self.ctx.store.tables_filtered(self.table_filter)

    def selected_table(self) -> Table | None:
        tables = self.visible_tables()
        if not (0 <= self.selected_index < len(tables)):
            return None
        return tables[self.selected_index]

    def action_move(self, delta: int) -> None:
        tables = self.visible_tables()
        if not tables:
            return
        self.selected_index = (self.selected_index + delta) % len(tables)
        self._refresh_grid()

    def action_move_row(self, delta: int) -> None:
        tables = self.visible_tables()
        if not tables:
            return
        target = self.selected_index + delta * self.COLUMNS
        if 0 <= target < len(tables):
            self.selected_index = target
            self._refresh_grid()

    def action_cycle_filter(self) -> None:
        order = list(TableFilter)
        self.table_filter = order[(order.index(self.table_filter) + 1) % len(order)]
        self.selected_index = 0
        self._refresh_all()

    def action_open_table(self) -> None:
        table = self.selected_table()
        if table is None:
            return
        # Imported here to avoid a cycle: the editor navigates back to this screen.
        from mixpos.order_editor_screen import OrderEditorScreen

        self.app.switch_screen(OrderEditorScreen(self.ctx, table.id))

    def _refresh_all(self) -> None:
        self._refresh_filter_bar()
        self._refresh_grid()

    def _refresh_filter_bar(self) -> None:
        try:
            bar = self.query_one("#filter-bar", Static)
        except NoMatches:
            return
        text = Text()
        for idx, table_filter in enumerate(TableFilter):
            if idx > 0:
                text.append("  ")
            label = f" {_FILTER_LABELS[table_filter]} "
            if table_filter is self.table_filter:
                text.append(label, style="bold #ffffff on #b23a48")
            else:
                text.append(label, style="dim")
        text.append("   F filter · arrows move · Enter open", style="dim")
        bar.update(text)

    def _refresh_grid(self) -> None:
        try:
            grid = self.query_one("#table-grid", Static)
            status = self.query_one("#grid-status", Static)
        except NoMatches:
            return

        store = self.ctx.store
        if store.loading:
            grid.update("Loading tables…")
            status.update("")
            return

        tables = self.visible_tables()
        if not tables:
            self.selected_index = 0
            grid.update("(no tables match this filter)")
            status.update("")
            return

        if self.selected_index >= len(tables):
            self.selected_index = len(tables) - 1

        lines = Text()
        for row_start in range(0, len(tables), self.COLUMNS):
            row = tables[row_start : row_start + self.COLUMNS]
            tops = Text()
            bottoms = Text()
            for offset, table in enumerate(row):
                if offset > 0:
                    tops.append("  ")
                    bottoms.append("  ")
                top, bottom = format_table_cell(
                    table,
                    store.active_order_for_table(table.id),
                    selected=row_start + offset == self.selected_index,
                )
                tops.append_text(top)
                bottoms.append_text(bottom)
            if row_start > 0:
                lines.append("\n\n")
            lines.append_text(tops)
            lines.append("\n")
            lines.append_text(bottoms)
        grid.update(lines)

        table = tables[self.selected_index]
        order = store.active_order_for_table(table.id)
        if order is None:
            status.update(f"Table {table.id}: free")
        else:
            status.update(
                f"Table {table.id}: {order.status.value} · {order.item_count} items · {format_money(order.total)}"
            )
