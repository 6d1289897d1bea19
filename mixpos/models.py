"""Domain models for mixpos."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from enum import Enum
from typing import Any
from uuid import uuid4


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def new_id() -> str:
    return uuid4().hex


def _parse_ts(value: str) -> datetime:
    parsed = datetime.fromisoformat(value)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


class TableStatus(str, Enum):
    AVAILABLE = "AVAILABLE"
    OCCUPIED = "OCCUPIED"
    WAITING_PAYMENT = "WAITING_PAYMENT"


class OrderStatus(str, Enum):
    OPEN = "OPEN"
    PREPARING = "PREPARING"
    READY = "READY"
    PAID = "PAID"
    CANCELLED = "CANCELLED"

    @property
    def is_terminal(self) -> bool:
        return self in TERMINAL_STATUSES


TERMINAL_STATUSES = frozenset({OrderStatus.PAID, OrderStatus.CANCELLED})

# Forward kitchen flow; PAID closes out from any active status.
ORDER_TRANSITIONS: dict[OrderStatus, frozenset[OrderStatus]] = {
    OrderStatus.OPEN: frozenset({OrderStatus.PREPARING, OrderStatus.PAID, OrderStatus.CANCELLED}),
    OrderStatus.PREPARING: frozenset({OrderStatus.READY, OrderStatus.PAID, OrderStatus.CANCELLED}),
    OrderStatus.READY: frozenset({OrderStatus.PAID, OrderStatus.CANCELLED}),
    OrderStatus.PAID: frozenset(),
    OrderStatus.CANCELLED: frozenset(),
}

KITCHEN_NEXT_STATUS: dict[OrderStatus, OrderStatus] = {
    OrderStatus.OPEN: OrderStatus.PREPARING,
    OrderStatus.PREPARING: OrderStatus.READY,
}


def can_transition(current: OrderStatus, target: OrderStatus) -> bool:
    """Return whether an order may move from ``current`` to ``target``."""
    return target in ORDER_TRANSITIONS[current]


@dataclass(frozen=True)
class Category:
    """A product group shown as a tab in the item picker."""

    id: str
    name: str
    icon: str = ""


@dataclass(frozen=True)
class Product:
    """A static catalog entry. A zero price marks it unavailable."""

    id: str
    name: str
    price: float
    category: str
    image: str | None = None

    @property
    def is_available(self) -> bool:
        return self.price > 0


@dataclass(frozen=True)
class Table:
    id: int
    status: TableStatus = TableStatus.AVAILABLE

    def to_document(self) -> dict[str, Any]:
        return {"id": self.id, "status": self.status.value}

    @classmethod
    def from_document(cls, doc: dict[str, Any]) -> Table:
        return cls(id=int(doc["id"]), status=TableStatus(doc.get("status", TableStatus.AVAILABLE.value)))


@dataclass(frozen=True)
class OrderItem:
    """One line of an order."""

    product_id: str
    name: str
    price: float
    quantity: int = 1
    notes: str = ""
    id: str = field(default_factory=new_id)
    timestamp: datetime = field(default_factory=utc_now)

    @property
    def line_total(self) -> float:
        return round(self.price * self.quantity, 2)

    def to_document(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "product_id": self.product_id,
            "name": self.name,
            "price": self.price,
            "quantity": self.quantity,
            "notes": self.notes,
            "timestamp": self.timestamp.isoformat(),
        }

    @classmethod
    def from_document(cls, doc: dict[str, Any]) -> OrderItem:
        return cls(
            id=str(doc["id"]),
            product_id=str(doc["product_id"]),
            name=str(doc["name"]),
            price=float(doc["price"]),
            quantity=int(doc["quantity"]),
            notes=str(doc.get("notes") or ""),
            timestamp=_parse_ts(doc["timestamp"]),
        )


def items_total(items: tuple[OrderItem, ...]) -> float:
    """Sum of line totals, rounded to cents."""
    return round(sum(item.price * item.quantity for item in items), 2)


@dataclass(frozen=True)
class Order:
    """A table's running order."""

    table_id: int
    items: tuple[OrderItem, ...] = ()
    status: OrderStatus = OrderStatus.OPEN
    id: str = field(default_factory=new_id)
    created_at: datetime = field(default_factory=utc_now)
    total: float = 0.0

    @property
    def is_active(self) -> bool:
        return not self.status.is_terminal

    @property
    def item_count(self) -> int:
        return sum(item.quantity for item in self.items)

    def recalculated(self) -> Order:
        """Return a copy whose total matches its lines."""
        return replace(self, total=items_total(self.items))

    def to_document(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "table_id": self.table_id,
            "items": [item.to_document() for item in self.items],
            "status": self.status.value,
            "created_at": self.created_at.isoformat(),
            "total": self.total,
        }

    @classmethod
    def from_document(cls, doc: dict[str, Any]) -> Order:
        return cls(
            id=str(doc["id"]),
            table_id=int(doc["table_id"]),
            items=tuple(OrderItem.from_document(item) for item in doc.get("items", [])),
            status=OrderStatus(doc["status"]),
            created_at=_parse_ts(doc["created_at"]),
            total=float(doc.get("total", 0.0)),
        )


def sort_orders(orders: list[Order]) -> list[Order]:
    """Newest first, the order every backend delivers to subscribers."""
    return sorted(orders, key=lambda order: order.created_at, reverse=True)


def sort_tables(tables: list[Table]) -> list[Table]:
    return sorted(tables, key=lambda table: table.id)
