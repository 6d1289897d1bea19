"""Sales ledger aggregation for the dashboard."""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass
from datetime import date, datetime, timedelta, tzinfo
from enum import Enum
from typing import Iterable

from mixpos.models import Order, OrderStatus, sort_orders

TOP_PRODUCTS_LIMIT = 5


class SalesPeriod(str, Enum):
    TODAY = "TODAY"
    YESTERDAY = "YESTERDAY"
    DATE = "DATE"


@dataclass(frozen=True)
class SalesSummary:
    day: date
    orders: list[Order]
    revenue: float
    item_count: int
    top_products: list[tuple[str, int]]

    @property
    def order_count(self) -> int:
        return len(self.orders)


def local_day(moment: datetime, tz: tzinfo | None = None) -> date:
    """Calendar day of ``moment`` in ``tz`` (the system zone when omitted)."""
    return moment.astimezone(tz).date()


def resolve_day(
    period: SalesPeriod,
    custom_day: date | None = None,
    now: datetime | None = None,
    tz: tzinfo | None = None,
) -> date:
    """Map a dashboard period to the calendar day it covers."""
    today = local_day(now or datetime.now().astimezone(), tz)
    if period is SalesPeriod.TODAY:
        return today
    if period is SalesPeriod.YESTERDAY:
        return today - timedelta(days=1)
    if custom_day is None:
        raise ValueError("A custom day is required for the DATE period")
    return custom_day


def paid_orders_on(orders: Iterable[Order], day: date, tz: tzinfo | None = None) -> list[Order]:
    return sort_orders(
        [order for order in orders if order.status is OrderStatus.PAID and local_day(order.created_at, tz) == day]
    )


def top_products(orders: Iterable[Order], limit: int = TOP_PRODUCTS_LIMIT) -> list[tuple[str, int]]:
    """Best sellers by quantity; ties keep first-seen order."""
    counts: Counter[str] = Counter()
    for order in orders:
        for item in order.items:
            counts[item.name] += item.quantity
    return counts.most_common(limit)


def summarize(orders: Iterable[Order], day: date, tz: tzinfo | None = None) -> SalesSummary:
    """Build the dashboard figures for one day of PAID orders."""
    matching = paid_orders_on(orders, day, tz)
    return SalesSummary(
        day=day,
        orders=matching,
        revenue=round(sum(order.total for order in matching), 2),
        item_count=sum(order.item_count for order in matching),
        top_products=top_products(matching),
    )
