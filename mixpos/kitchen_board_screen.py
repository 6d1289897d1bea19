"""Kitchen view: active orders and their lifecycle."""

from __future__ import annotations

from typing import Callable

from rich.text import Text
from textual.app import ComposeResult
from textual.containers import Vertical
from textual.css.query import NoMatches
from textual.reactive import reactive
from textual.screen import Screen
from textual.widgets import Header, Static

from mixpos.confirm_modal import ConfirmModal
from mixpos.context import AppContext
from mixpos.models import KITCHEN_NEXT_STATUS, Order
from mixpos.rendering import POINTER, NO_POINTER, format_item_line, format_money, format_status_badge


class KitchenBoardScreen(Screen[None]):
    """Active orders, oldest first, with status advance and close-out."""

    CSS = """
    #kitchen-pane {
        height: 1fr;
        border: round $primary;
        padding: 1;
    }

    #kitchen-orders {
        height: 1fr;
    }

    #kitchen-help {
        color: $text-muted;
        height: 1;
    }

    .pane-title {
        text-style: bold;
        margin-bottom: 1;
    }
    """

    selected_index = reactive(0)

    BINDINGS = [
        ("up", "move(-1)", "Previous order"),
        ("down", "move(1)", "Next order"),
        ("k", "move(-1)", "Previous order"),
        ("j", "move(1)", "Next order"),
        ("p", "advance", "Advance status"),
        ("c", "close_selected", "Close out"),
    ]

    def __init__(self, ctx: AppContext) -> None:
        super().__init__()
        self.ctx = ctx
        self.busy = False
        self._unsubscribe: Callable[[], None] | None = None

    def compose(self) -> ComposeResult:
        yield Header()
        with Vertical(id="kitchen-pane"):
            yield Static("Kitchen", classes="pane-title")
            yield Static(id="kitchen-orders")
            yield Static("J/K move · P advance status · C close out (paid)", id="kitchen-help")

    def on_mount(self) -> None:
        self._unsubscribe = self.ctx.store.subscribe(self._refresh_orders)
        self._refresh_orders()

    def on_unmount(self) -> None:
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None

    def board_orders(self) -> list[Order]:
        return sorted(self.ctx.store.active_orders(), key=lambda order: order.created_at)

    def selected_order(self) -> Order | None:
        orders = self.board_orders()
        if not (0 <= self.selected_index < len(orders)):
            return None
        return orders[self.selected_index]

    def action_move(self, delta: int) -> None:
        orders = self.board_orders()
        if not orders:
            return
        self.selected_index = (self.selected_index + delta) % len(orders)
        self._refresh_orders()

    async def action_advance(self) -> None:
        if self.busy:
            return
        order = self.selected_order()
        if order is None:
            return
        target = KITCHEN_NEXT_STATUS.get(order.status)
        if target is None:
            self.app.notify(f"Table {order.table_id} is {order.status.value}; close it out with C.")
            return

        self.busy = True
        try:
            result = await self.ctx.store.update_order_status(order.id, target)
        finally:
            self.busy = False
        if not result:
            self.app.notify(f"Could not update the order: {result.message}", severity="error")
        self._refresh_orders()

    def action_close_selected(self) -> None:
        if self.busy:
            return
        order = self.selected_order()
        if order is None:
            return

        async def confirmed(answer: bool | None) -> None:
            if not answer:
                return
            self.busy = True
            try:
                result = await self.ctx.store.close_order(order.id)
            finally:
                self.busy = False
            if result:
                self.app.notify(f"Table {order.table_id} closed: {format_money(order.total)}.")
            else:
                self.app.notify(f"Could not close the order: {result.message}", severity="error")
            self._refresh_orders()

        self.app.push_screen(
            ConfirmModal("Close out", f"Mark table {order.table_id} as paid ({format_money(order.total)})?"),
            confirmed,
        )

    def _refresh_orders(self) -> None:
        try:
            widget = self.query_one("#kitchen-orders", Static)
        except NoMatches:
            return

        orders = self.board_orders()
        if not orders:
            self.selected_index = 0
            widget.update("(no active orders)")
            return

        if self.selected_index >= len(orders):
            self.selected_index = len(orders) - 1

        text = Text()
        for idx, order in enumerate(orders):
            if idx > 0:
                text.append("\n\n")
            selected = idx == self.selected_index
            text.append(POINTER if selected else NO_POINTER)
            text.append(f"Table {order.table_id:02d} ", style="bold" if selected else "")
            text.append_text(format_status_badge(order.status))
            text.append(f"  {order.created_at.astimezone().strftime('%H:%M')}", style="dim")
            text.append(f"  {format_money(order.total)}")
            for item in order.items:
                text.append("\n  ")
                text.append_text(format_item_line(item))
        widget.update(text)
