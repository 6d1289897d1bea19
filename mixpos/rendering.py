"""Rendering helpers shared by the screens."""

from __future__ import annotations

from rich.text import Text

from mixpos.config import CURRENCY_SYMBOL
from mixpos.models import Order, OrderItem, OrderStatus, Product, Table, TableStatus

_ORDER_STATUS_STYLES: dict[OrderStatus, str] = {
    OrderStatus.OPEN: "bold #ffffff on #2f6db5",
    OrderStatus.PREPARING: "bold #1f1400 on #f0b429",
    OrderStatus.READY: "bold #0b1f0f on #5fbf72",
    OrderStatus.PAID: "bold #ffffff on #4a4a4a",
    OrderStatus.CANCELLED: "bold #ffffff on #7a1f2b",
}

_TABLE_STATUS_STYLES: dict[TableStatus, str] = {
    TableStatus.AVAILABLE: "#0b1f0f on #d9f2de",
    TableStatus.OCCUPIED: "bold #ffffff on #b23a48",
    TableStatus.WAITING_PAYMENT: "bold #1f1400 on #f0b429",
}

POINTER = "➤ "
NO_POINTER = "  "


def format_money(value: float) -> str:
    return f"{CURRENCY_SYMBOL} {value:.2f}"


def badge_style(status: OrderStatus) -> str:
    """Return a consistent badge style for an order status."""
    return _ORDER_STATUS_STYLES[status]


def format_status_badge(status: OrderStatus) -> Text:
    return Text(f" {status.value} ", style=badge_style(status))


def format_table_cell(table: Table, order: Order | None, selected: bool, width: int = 14) -> tuple[Text, Text]:
    """Render one table tile as two lines: number, then running total."""
    style = _TABLE_STATUS_STYLES[table.status]
    if selected:
        style = f"{style} reverse"
    label = f"Table {table.id:02d}"
    detail = format_money(order.total) if order is not None else "free"
    if table.status is TableStatus.WAITING_PAYMENT:
        detail = "bill"
    return (Text(label.center(width), style=style), Text(detail.center(width), style=style))


def format_item_line(item: OrderItem, pointer: bool = False) -> Text:
    """Render a cart or order line with its notes."""
    text = Text()
    text.append(POINTER if pointer else NO_POINTER)
    text.append(f"{item.quantity}x ", style="bold")
    text.append(item.name)
    text.append(f"  {format_money(item.line_total)}", style="dim")
    if item.notes:
        text.append("\n      ")
        text.append_text(format_note_tags([item.notes]))
    return text


def format_note_tags(notes: list[str]) -> Text:
    """Render notes as compact tags."""
    text = Text()
    for idx, note in enumerate(notes):
        if idx > 0:
            text.append(" ")
        text.append(f"[Note: {note}]", style="bold #ff8fa3")
    return text


def format_product_line(product: Product, pointer: bool = False) -> Text:
    text = Text()
    text.append(POINTER if pointer else NO_POINTER)
    if product.is_available:
        text.append(product.name)
        text.append(f"  {format_money(product.price)}", style="bold")
    else:
        text.append(product.name, style="dim strike")
        text.append("  unavailable", style="dim")
    return text


def format_bar_chart(rows: list[tuple[str, int]], width: int = 30, label_width: int = 24) -> Text:
    """Horizontal bar chart scaled to the largest value."""
    if not rows:
        return Text("(no sales)", style="dim")
    peak = max(value for _, value in rows) or 1
    text = Text()
    for idx, (label, value) in enumerate(rows):
        if idx > 0:
            text.append("\n")
        shown = label if len(label) <= label_width else f"{label[: label_width - 1]}…"
        bar_len = max(1, round(width * value / peak))
        text.append(f"{shown:<{label_width}} ")
        text.append("█" * bar_len, style="#e11d48")
        text.append(f" {value}")
    return text


def window_bounds(total: int, rows: int, selected: int | None) -> tuple[int, int]:
    """Slice of a list that keeps the selected row visible."""
    if total <= 0:
        return (0, 0)

    rows = max(1, rows)
    if total <= rows:
        return (0, total)

    if selected is None:
        start = 0
    else:
        half = rows // 2
        start = selected - half
        start = max(0, start)
        start = min(start, total - rows)

    return (start, start + rows)
