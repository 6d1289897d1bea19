"""Item picker and running order for one table."""

from __future__ import annotations

from rich.text import Text
from textual.app import ComposeResult
from textual.binding import Binding
from textual.containers import Horizontal, Vertical
from textual.css.query import NoMatches
from textual.reactive import reactive
from textual.screen import Screen
from textual.widgets import Header, Static

from mixpos import cart as cart_ops
from mixpos.confirm_modal import ConfirmModal
from mixpos.context import AppContext
from mixpos.errors import ProductUnavailableError
from mixpos.models import Order, OrderItem, Product
from mixpos.notes_modal import NotesModal
from mixpos.rendering import (
    format_item_line,
    format_money,
    format_product_line,
    format_status_badge,
    window_bounds,
)
from mixpos.table_grid_screen import TableGridScreen


class OrderEditorScreen(Screen[None]):
    """Edit the cart of one table and send it as that table's order."""

    CSS = """
    #editor-layout {
        height: 1fr;
    }

    #picker-pane {
        width: 3fr;
        border: round $primary;
        padding: 1;
    }

    #cart-pane {
        width: 2fr;
        border: round $secondary;
        padding: 1;
    }

    #category-bar {
        border: heavy $secondary;
        padding: 0 1;
        margin-bottom: 1;
        height: 3;
    }

    #products, #cart-lines {
        height: 1fr;
        border: tall $surface;
        padding: 0 1;
    }

    #cart-footer {
        height: 3;
        margin-top: 1;
    }

    .pane-title {
        text-style: bold;
        margin-bottom: 1;
    }
    """

    category_index = reactive(0)
    product_index = reactive(0)
    line_index = reactive(None)

    BINDINGS = [
        ("left", "cycle_category(-1)", "Previous category"),
        ("right", "cycle_category(1)", "Next category"),
        ("up", "move_product(-1)", "Previous product"),
        ("down", "move_product(1)", "Next product"),
        ("tab", "move_product(1)", "Next product"),
        ("enter", "add_selected", "Add item"),
        ("j", "move_line(1)", "Next line"),
        ("k", "move_line(-1)", "Previous line"),
        ("minus", "remove_line", "Remove one"),
        ("d", "remove_line", "Remove one"),
        ("n", "edit_notes", "Notes"),
        Binding("ctrl+s", "save", "Send order", priority=True),
        Binding("ctrl+x", "cancel_order", "Delete order", priority=True),
        ("escape", "back", "Back"),
    ]

    def __init__(self, ctx: AppContext, table_id: int) -> None:
        super().__init__()
        self.ctx = ctx
        self.table_id = table_id
        self.busy = False
        active = ctx.store.active_order_for_table(table_id)
        self.cart: cart_ops.Cart = active.items if active is not None else ()

    def compose(self) -> ComposeResult:
        yield Header()
        with Horizontal(id="editor-layout"):
            with Vertical(id="picker-pane"):
                yield Static(id="category-bar")
                yield Static(id="products")
            with Vertical(id="cart-pane"):
                yield Static(f"Table {self.table_id}", id="cart-title", classes="pane-title")
                yield Static(id="cart-lines")
                yield Static(id="cart-footer")

    def on_mount(self) -> None:
        self._refresh_all()

    @property
    def active_order(self) -> Order | None:
        return self.ctx.store.active_order_for_table(self.table_id)

    def current_products(self) -> list[Product]:
        categories = self.ctx.catalog.categories
        if not categories:
            return []
        return self.ctx.catalog.products_in(categories[self.category_index].id)

    def selected_line(self) -> OrderItem | None:
        if self.line_index is None or not (0 <= self.line_index < len(self.cart)):
            return None
        return self.cart[self.line_index]

    def action_cycle_category(self, delta: int) -> None:
        categories = self.ctx.catalog.categories
        if not categories:
            return
        self.category_index = (self.category_index + delta) % len(categories)
        self.product_index = 0
        self._refresh_picker()

    def action_move_product(self, delta: int) -> None:
        products = self.current_products()
        if not products:
            return
        self.product_index = (self.product_index + delta) % len(products)
        self._refresh_products()

    def action_add_selected(self) -> None:
        if self.busy:
            return
        products = self.current_products()
        if not products:
            return
        product = products[self.product_index]
        try:
            self.cart = cart_ops.add_product(self.cart, product)
        except ProductUnavailableError as exc:
            self.app.notify(str(exc), severity="warning")
            return
        self.line_index = next(
            (idx for idx, line in enumerate(self.cart) if line.product_id == product.id and not line.notes),
            len(self.cart) - 1,
        )
        self._refresh_cart()

    def action_move_line(self, delta: int) -> None:
        if not self.cart:
            return
        if self.line_index is None:
            self.line_index = 0 if delta > 0 else len(self.cart) - 1
        else:
            self.line_index = (self.line_index + delta) % len(self.cart)
        self._refresh_cart()

    def action_remove_line(self) -> None:
        if self.busy:
            return
        line = self.selected_line()
        if line is None:
            return
        self.cart = cart_ops.remove_one(self.cart, line.id)
        if not self.cart:
            self.line_index = None
        else:
            self.line_index = min(self.line_index or 0, len(self.cart) - 1)
        self._refresh_cart()

    def action_edit_notes(self) -> None:
        if self.busy:
            return
        line = self.selected_line()
        if line is None:
            return

        def apply_notes(notes: str | None) -> None:
            if notes is None:
                return
            self.cart = cart_ops.set_notes(self.cart, line.id, notes)
            self._refresh_cart()

        self.app.push_screen(NotesModal(line), apply_notes)

    async def action_save(self) -> None:
        if self.busy:
            return
        if not self.cart:
            self.app.notify("Add at least one item before sending.", severity="warning")
            return

        self.busy = True
        self._refresh_footer()
        try:
            order = cart_ops.build_order(self.table_id, self.cart, self.active_order)
            result = await self.ctx.store.add_or_update_order(order)
        finally:
            self.busy = False

        if result:
            self.app.notify(f"Order sent for table {self.table_id}.")
            self._leave()
            return
        self.app.notify(f"Could not save the order: {result.message}", severity="error")
        self._refresh_footer()

    def action_cancel_order(self) -> None:
        if self.busy:
            return
        order = self.active_order
        if order is None:
            self._leave()
            return

        async def confirmed(answer: bool | None) -> None:
            if not answer:
                return
            self.busy = True
            self._refresh_footer()
            try:
                result = await self.ctx.store.cancel_order_action(order.id, self.table_id)
            finally:
                self.busy = False
            if result:
                self.app.notify(f"Order for table {self.table_id} deleted.")
                self._leave()
                return
            self.app.notify(f"Could not delete the order: {result.message}", severity="error")
            self._refresh_footer()

        self.app.push_screen(
            ConfirmModal("Delete order", f"Permanently delete the order of table {self.table_id}?"),
            confirmed,
        )

    def action_back(self) -> None:
        if self.busy:
            return
        self._leave()

    def _leave(self) -> None:
        self.app.switch_screen(TableGridScreen(self.ctx))

    def _refresh_all(self) -> None:
        self._refresh_picker()
        self._refresh_cart()

    def _refresh_picker(self) -> None:
        self._refresh_category_bar()
        self._refresh_products()

    def _refresh_cart(self) -> None:
        self._refresh_cart_lines()
        self._refresh_footer()

    def _refresh_category_bar(self) -> None:
        try:
            bar = self.query_one("#category-bar", Static)
        except NoMatches:
            return
        categories = self.ctx.catalog.categories
        if not categories:
            bar.update("(empty catalog)")
            return
        current = categories[self.category_index]
        text = Text()
        text.append(f" {current.icon} {current.name} ", style="bold #ffffff on #b23a48")
        text.append(f"  {self.category_index + 1}/{len(categories)}  ← → category", style="dim")
        bar.update(text)

    def _visible_rows(self, widget: Static) -> int:
        height = widget.size.height
        if height <= 0:
            return 8
        return max(1, height)

    def _refresh_products(self) -> None:
        try:
            widget = self.query_one("#products", Static)
        except NoMatches:
            return
        products = self.current_products()
        if not products:
            widget.update("No products")
            return

        if self.product_index >= len(products):
            self.product_index = 0

        start, end = window_bounds(len(products), self._visible_rows(widget), self.product_index)
        lines = Text()
        if start > 0:
            lines.append("⋮\n", style="dim")
        for idx in range(start, end):
            if idx > start:
                lines.append("\n")
            lines.append_text(format_product_line(products[idx], pointer=idx == self.product_index))
        if end < len(products):
            lines.append("\n⋮", style="dim")
        widget.update(lines)

    def _refresh_cart_lines(self) -> None:
        try:
            widget = self.query_one("#cart-lines", Static)
        except NoMatches:
            return
        if not self.cart:
            self.line_index = None
            widget.update("(no items yet)")
            return

        if self.line_index is not None and self.line_index >= len(self.cart):
            self.line_index = len(self.cart) - 1

        start, end = window_bounds(len(self.cart), self._visible_rows(widget), self.line_index)
        lines = Text()
        if start > 0:
            lines.append("⋮\n", style="dim")
        for idx in range(start, end):
            if idx > start:
                lines.append("\n")
            lines.append_text(format_item_line(self.cart[idx], pointer=idx == self.line_index))
        if end < len(self.cart):
            lines.append("\n⋮", style="dim")
        widget.update(lines)

    def _refresh_footer(self) -> None:
        try:
            footer = self.query_one("#cart-footer", Static)
        except NoMatches:
            return
        text = Text()
        active = self.active_order
        if active is not None:
            text.append_text(format_status_badge(active.status))
            text.append(" ")
        text.append(f"{cart_ops.cart_count(self.cart)} items · ", style="bold")
        text.append(format_money(cart_ops.cart_total(self.cart)), style="bold")
        text.append("\n")
        if self.busy:
            text.append("Saving…", style="italic")
        else:
            text.append("Ctrl+S send · Ctrl+X delete · N notes · D remove · Esc back", style="dim")
        footer.update(text)
