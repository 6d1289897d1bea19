"""Sales dashboard over the PAID ledger."""

from __future__ import annotations

from datetime import date
from typing import Callable

from rich.text import Text
from textual.app import ComposeResult
from textual.containers import Horizontal, Vertical
from textual.css.query import NoMatches
from textual.reactive import reactive
from textual.screen import Screen
from textual.widgets import Header, Static

from mixpos.confirm_modal import ConfirmModal
from mixpos.context import AppContext
from mixpos.date_modal import DateModal
from mixpos.models import Order
from mixpos.rendering import POINTER, NO_POINTER, format_bar_chart, format_money, window_bounds
from mixpos.reports import SalesPeriod, SalesSummary, resolve_day, summarize

_PERIOD_LABELS: dict[SalesPeriod, str] = {
    SalesPeriod.TODAY: "Today",
    SalesPeriod.YESTERDAY: "Yesterday",
    SalesPeriod.DATE: "Date",
}


class DashboardScreen(Screen[None]):
    """Revenue, best sellers and the list of closed sales for one day."""

    CSS = """
    #dashboard-layout {
        height: 1fr;
    }

    #summary-pane {
        width: 1fr;
        border: round $primary;
        padding: 1;
    }

    #sales-pane {
        width: 1fr;
        border: round $secondary;
        padding: 1;
    }

    #period-bar {
        border: heavy $secondary;
        padding: 0 1;
        margin-bottom: 1;
        height: 3;
    }

    #sales-list {
        height: 1fr;
    }

    .pane-title {
        text-style: bold;
        margin-bottom: 1;
    }
    """

    selected_index = reactive(0)

    BINDINGS = [
        ("t", "set_period('TODAY')", "Today"),
        ("y", "set_period('YESTERDAY')", "Yesterday"),
        ("d", "pick_date", "Pick date"),
        ("up", "move(-1)", "Previous sale"),
        ("down", "move(1)", "Next sale"),
        ("x", "delete_selected", "Delete sale"),
        ("delete", "delete_selected", "Delete sale"),
    ]

    def __init__(self, ctx: AppContext) -> None:
        super().__init__()
        self.ctx = ctx
        self.period = SalesPeriod.TODAY
        self.custom_day: date | None = None
        self.busy = False
        self._unsubscribe: Callable[[], None] | None = None

    def compose(self) -> ComposeResult:
        yield Header()
        yield Static(id="period-bar")
        with Horizontal(id="dashboard-layout"):
            with Vertical(id="summary-pane"):
                yield Static("Summary", classes="pane-title")
                yield Static(id="summary-figures")
                yield Static("Top products", classes="pane-title")
                yield Static(id="top-products")
            with Vertical(id="sales-pane"):
                yield Static("Sales", classes="pane-title")
                yield Static(id="sales-list")

    def on_mount(self) -> None:
        self._unsubscribe = self.ctx.store.subscribe(self._refresh_all)
        self._refresh_all()

    def on_unmount(self) -> None:
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None

    def summary(self) -> SalesSummary:
        day = resolve_day(self.period, self.custom_day)
        return summarize(self.ctx.store.orders, day)

    def action_set_period(self, period: str) -> None:
        self.period = SalesPeriod(period)
        self.selected_index = 0
        self._refresh_all()

    def action_pick_date(self) -> None:
        def chosen(day: date | None) -> None:
            if day is None:
                return
            self.custom_day = day
            self.period = SalesPeriod.DATE
            self.selected_index = 0
            self._refresh_all()

        self.app.push_screen(DateModal(self.custom_day or date.today()), chosen)

    def action_move(self, delta: int) -> None:
        orders = self.summary().orders
        if not orders:
            return
        self.selected_index = (self.selected_index + delta) % len(orders)
        self._refresh_sales(self.summary())

    def action_delete_selected(self) -> None:
        if self.busy:
            return
        orders = self.summary().orders
        if not (0 <= self.selected_index < len(orders)):
            return
        order = orders[self.selected_index]

        async def confirmed(answer: bool | None) -> None:
            if not answer:
                return
            self.busy = True
            try:
                result = await self.ctx.store.delete_history_order(order.id)
            finally:
                self.busy = False
            if not result:
                self.app.notify(f"Could not delete the sale: {result.message}", severity="error")
            self._refresh_all()

        self.app.push_screen(
            ConfirmModal(
                "Delete sale",
                f"Remove the table {order.table_id} sale of {format_money(order.total)} permanently?",
            ),
            confirmed,
        )

    def _refresh_all(self) -> None:
        summary = self.summary()
        self._refresh_period_bar(summary)
        self._refresh_figures(summary)
        self._refresh_sales(summary)

    def _refresh_period_bar(self, summary: SalesSummary) -> None:
        try:
            bar = self.query_one("#period-bar", Static)
        except NoMatches:
            return
        text = Text()
        for idx, period in enumerate(SalesPeriod):
            if idx > 0:
                text.append("  ")
            label = f" {_PERIOD_LABELS[period]} "
            style = "bold #ffffff on #b23a48" if period is self.period else "dim"
            text.append(label, style=style)
        text.append(f"   {summary.day.isoformat()}   T today · Y yesterday · D date · X delete", style="dim")
        bar.update(text)

    def _refresh_figures(self, summary: SalesSummary) -> None:
        try:
            figures = self.query_one("#summary-figures", Static)
            chart = self.query_one("#top-products", Static)
        except NoMatches:
            return
        text = Text()
        text.append("Revenue  ")
        text.append(format_money(summary.revenue), style="bold #5fbf72")
        text.append(f"\nOrders   {summary.order_count}")
        text.append(f"\nItems    {summary.item_count}\n")
        figures.update(text)
        chart.update(format_bar_chart(summary.top_products))

    def _refresh_sales(self, summary: SalesSummary) -> None:
        try:
            widget = self.query_one("#sales-list", Static)
        except NoMatches:
            return
        orders = summary.orders
        if not orders:
            self.selected_index = 0
            widget.update("(no sales for this day)")
            return

        if self.selected_index >= len(orders):
            self.selected_index = len(orders) - 1

        height = widget.size.height
        start, end = window_bounds(len(orders), height if height > 0 else 8, self.selected_index)
        text = Text()
        if start > 0:
            text.append("⋮\n", style="dim")
        for idx in range(start, end):
            if idx > start:
                text.append("\n")
            text.append_text(self._format_sale(orders[idx], idx == self.selected_index))
        if end < len(orders):
            text.append("\n⋮", style="dim")
        widget.update(text)

    def _format_sale(self, order: Order, selected: bool) -> Text:
        text = Text()
        text.append(POINTER if selected else NO_POINTER)
        text.append(order.created_at.astimezone().strftime("%H:%M"), style="dim")
        text.append(f"  Table {order.table_id:02d}  ")
        text.append(format_money(order.total), style="bold")
        text.append(f"  ({order.item_count} items)", style="dim")
        return text
