"""Cart helpers for the order editor.

A cart is an immutable tuple of ``OrderItem`` lines. Every helper returns a
new tuple so the editor can keep the previous cart around cheaply.
"""

from __future__ import annotations

from dataclasses import replace

from mixpos.errors import ProductUnavailableError
from mixpos.models import Order, OrderItem, OrderStatus, Product, items_total

Cart = tuple[OrderItem, ...]


def add_product(cart: Cart, product: Product) -> Cart:
    """Add one unit, merging into an existing line without notes."""
    if not product.is_available:
        raise ProductUnavailableError(f"{product.name} is unavailable")

    for idx, line in enumerate(cart):
        if line.product_id == product.id and not line.notes:
            merged = replace(line, quantity=line.quantity + 1)
            return cart[:idx] + (merged,) + cart[idx + 1 :]

    line = OrderItem(product_id=product.id, name=product.name, price=product.price)
    return cart + (line,)


def remove_one(cart: Cart, item_id: str) -> Cart:
    """Remove one unit of a line, dropping the line when it reaches zero."""
    result: list[OrderItem] = []
    for line in cart:
        if line.id != item_id:
            result.append(line)
        elif line.quantity > 1:
            result.append(replace(line, quantity=line.quantity - 1))
    return tuple(result)


def set_notes(cart: Cart, item_id: str, notes: str) -> Cart:
    """Replace the notes of one line."""
    normalized = notes.strip()
    return tuple(replace(line, notes=normalized) if line.id == item_id else line for line in cart)


def cart_total(cart: Cart) -> float:
    return items_total(cart)


def cart_count(cart: Cart) -> int:
    return sum(line.quantity for line in cart)


def build_order(table_id: int, cart: Cart, active: Order | None = None) -> Order:
    """Turn a cart into a new OPEN order, or into an update of ``active``."""
    if active is not None:
        return replace(active, items=tuple(cart), total=items_total(cart))
    return Order(table_id=table_id, items=tuple(cart), status=OrderStatus.OPEN, total=items_total(cart))
