from __future__ import annotations

from dataclasses import replace

from conftest import PRODUCT_BURGER, PRODUCT_SODA, make_order

from mixpos.models import OrderStatus, Table, TableStatus
from mixpos.persistence import LocalStore


def test_seed_creates_available_tables_once(local: LocalStore):
    assert local.seed_tables(6) is True
    assert local.seed_tables(10) is False
    tables = local.load_tables()
    assert [table.id for table in tables] == [1, 2, 3, 4, 5, 6]
    assert all(table.status is TableStatus.AVAILABLE for table in tables)


def test_bootstrap_is_idempotent(tmp_path):
    store = LocalStore(tmp_path / "nested" / "pos.db")
    store.bootstrap_schema()
    store.bootstrap_schema()
    assert store.count_tables() == 0


def test_save_order_keeps_line_order_and_notes(local: LocalStore):
    order = make_order(2, (PRODUCT_SODA, 2), (PRODUCT_BURGER, 1))
    order = replace(order, items=(order.items[0], replace(order.items[1], notes="sem picles")))
    local.save_order(order)
    assert local.load_orders() == [order]


def test_save_order_upserts(local: LocalStore):
    order = make_order(1, (PRODUCT_BURGER, 1))
    local.save_order(order)
    paid = replace(order, status=OrderStatus.PAID, items=order.items[:0]).recalculated()
    local.save_order(paid)
    loaded = local.load_orders()
    assert len(loaded) == 1
    assert loaded[0].status is OrderStatus.PAID
    assert loaded[0].items == ()


def test_delete_order_removes_its_lines(local: LocalStore):
    order = make_order(1, (PRODUCT_BURGER, 2))
    local.save_order(order)
    local.delete_order(order.id)
    assert local.load_orders() == []
    # Saving again must not collide with orphaned lines.
    local.save_order(order)
    assert local.load_orders() == [order]


def test_update_table_status(local: LocalStore):
    local.seed_tables(3)
    local.update_table_status(2, TableStatus.OCCUPIED)
    assert local.load_tables()[1] == Table(id=2, status=TableStatus.OCCUPIED)


def test_replace_all_rewrites_both_collections(local: LocalStore):
    local.seed_tables(3)
    local.save_order(make_order(1, (PRODUCT_BURGER, 1)))
    kept = make_order(2, (PRODUCT_SODA, 1))
    local.replace_all([Table(id=9, status=TableStatus.OCCUPIED)], [kept])
    assert local.load_tables() == [Table(id=9, status=TableStatus.OCCUPIED)]
    assert local.load_orders() == [kept]
