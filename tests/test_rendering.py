from __future__ import annotations

from dataclasses import replace
from datetime import date

import pytest
from conftest import PRODUCT_BURGER, PRODUCT_SODA, make_order

from mixpos.config import CURRENCY_SYMBOL
from mixpos.date_modal import format_digits, parse_digits
from mixpos.models import Table, TableStatus
from mixpos.rendering import (
    format_bar_chart,
    format_item_line,
    format_money,
    format_product_line,
    format_table_cell,
    window_bounds,
)


def test_format_money():
    assert format_money(35.5) == f"{CURRENCY_SYMBOL} 35.50"


def test_table_cell_shows_total_or_free():
    order = make_order(7, (PRODUCT_BURGER, 1))
    top, bottom = format_table_cell(Table(id=7, status=TableStatus.OCCUPIED), order, selected=False)
    assert top.plain.strip() == "Table 07"
    assert bottom.plain.strip() == format_money(14.99)

    _, free = format_table_cell(Table(id=8), None, selected=True)
    assert free.plain.strip() == "free"
    assert "reverse" in str(free.style)


def test_item_line_includes_notes():
    item = replace(make_order(1, (PRODUCT_SODA, 2)).items[0], notes="no ice")
    plain = format_item_line(item, pointer=True).plain
    assert plain.startswith("➤ 2x Lata 350ml")
    assert "[Note: no ice]" in plain


def test_unavailable_product_is_marked():
    sold_out = replace(PRODUCT_BURGER, price=0)
    assert "unavailable" in format_product_line(sold_out).plain
    assert format_money(14.99) in format_product_line(PRODUCT_BURGER).plain


def test_bar_chart_scales_to_peak():
    chart = format_bar_chart([("Burger", 10), ("Soda", 5)], width=10).plain.splitlines()
    assert chart[0].count("█") == 10
    assert chart[1].count("█") == 5
    assert format_bar_chart([]).plain == "(no sales)"


@pytest.mark.parametrize(
    ("total", "rows", "selected", "expected"),
    [
        (0, 5, None, (0, 0)),
        (3, 5, 2, (0, 3)),
        (20, 5, None, (0, 5)),
        (20, 5, 10, (8, 13)),
        (20, 5, 19, (15, 20)),
    ],
)
def test_window_bounds(total, rows, selected, expected):
    assert window_bounds(total, rows, selected) == expected


def test_date_digits():
    assert format_digits("202403") == "2024-03"
    assert parse_digits("20240315") == date(2024, 3, 15)
    with pytest.raises(ValueError):
        parse_digits("2024031")
    with pytest.raises(ValueError):
        parse_digits("20241340")
