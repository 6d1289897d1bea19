from __future__ import annotations

from dataclasses import replace
from datetime import date, datetime, timezone

import pytest
from conftest import PRODUCT_BURGER, PRODUCT_SODA, make_order

from mixpos.models import OrderStatus
from mixpos.reports import SalesPeriod, local_day, resolve_day, summarize, top_products

NOW = datetime(2024, 3, 15, 20, 30, tzinfo=timezone.utc)


def paid(order, created_at):
    return replace(order, status=OrderStatus.PAID, created_at=created_at)


def test_resolve_day_periods():
    assert resolve_day(SalesPeriod.TODAY, now=NOW, tz=timezone.utc) == date(2024, 3, 15)
    assert resolve_day(SalesPeriod.YESTERDAY, now=NOW, tz=timezone.utc) == date(2024, 3, 14)
    assert resolve_day(SalesPeriod.DATE, date(2024, 1, 2), now=NOW, tz=timezone.utc) == date(2024, 1, 2)


def test_resolve_day_needs_a_custom_day():
    with pytest.raises(ValueError):
        resolve_day(SalesPeriod.DATE, now=NOW, tz=timezone.utc)


def test_yesterday_crosses_month_boundary():
    first = datetime(2024, 3, 1, 9, 0, tzinfo=timezone.utc)
    assert resolve_day(SalesPeriod.YESTERDAY, now=first, tz=timezone.utc) == date(2024, 2, 29)


def test_local_day_uses_the_given_zone():
    late = datetime(2024, 3, 15, 23, 30, tzinfo=timezone.utc)
    assert local_day(late, timezone.utc) == date(2024, 3, 15)


def test_summary_counts_only_paid_orders_of_the_day():
    today_paid = paid(make_order(1, (PRODUCT_BURGER, 2)), NOW)
    today_open = replace(make_order(2, (PRODUCT_SODA, 5)), created_at=NOW)
    today_cancelled = replace(
        make_order(3, (PRODUCT_SODA, 1)), status=OrderStatus.CANCELLED, created_at=NOW
    )
    yesterday_paid = paid(make_order(4, (PRODUCT_SODA, 1)), datetime(2024, 3, 14, 12, 0, tzinfo=timezone.utc))

    summary = summarize([today_paid, today_open, today_cancelled, yesterday_paid], date(2024, 3, 15), timezone.utc)

    assert summary.orders == [today_paid]
    assert summary.order_count == 1
    assert summary.revenue == 29.98
    assert summary.item_count == 2
    assert summary.top_products == [("Mix Burguer", 2)]


def test_summary_for_empty_day():
    summary = summarize([], date(2024, 3, 15), timezone.utc)
    assert summary.orders == []
    assert summary.revenue == 0
    assert summary.item_count == 0
    assert summary.top_products == []


def test_revenue_sums_totals_of_several_orders():
    orders = [
        paid(make_order(1, (PRODUCT_BURGER, 1)), NOW),
        paid(make_order(2, (PRODUCT_SODA, 3)), NOW),
    ]
    summary = summarize(orders, date(2024, 3, 15), timezone.utc)
    assert summary.revenue == 32.99
    assert summary.item_count == 4


def test_top_products_are_ranked_by_quantity_and_capped():
    names = ["A", "B", "C", "D", "E", "F"]
    orders = []
    for rank, name in enumerate(names):
        product = replace(PRODUCT_SODA, id=f"p{rank}", name=name)
        orders.append(paid(make_order(1, (product, len(names) - rank)), NOW))
    ranked = top_products(orders)
    assert ranked == [("A", 6), ("B", 5), ("C", 4), ("D", 3), ("E", 2)]


def test_top_products_merge_lines_with_the_same_name():
    order = paid(make_order(1, (PRODUCT_BURGER, 1), (PRODUCT_SODA, 1)), NOW)
    noted = replace(order.items[0], id="second-line", notes="no onion", quantity=2)
    order = replace(order, items=order.items + (noted,)).recalculated()
    assert top_products([order])[0] == ("Mix Burguer", 3)
