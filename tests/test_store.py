from __future__ import annotations

from dataclasses import replace

from conftest import PRODUCT_BURGER, PRODUCT_SODA, FakeRemote, make_order, settle

from mixpos.errors import (
    EmptyOrderError,
    InvalidTransitionError,
    OrderConflictError,
    OrderStateError,
    RemoteSyncError,
    UnknownOrderError,
    UnknownTableError,
)
from mixpos.models import OrderStatus, TableStatus
from mixpos.store import Store, TableFilter


def assert_occupancy_matches_orders(store: Store) -> None:
    active_tables = {order.table_id for order in store.orders if order.is_active}
    for table in store.tables:
        assert (table.status is TableStatus.OCCUPIED) == (table.id in active_tables), table


async def test_start_loads_seeded_tables(store: Store):
    assert store.loading is False
    assert [table.id for table in store.tables] == [1, 2, 3, 4]
    assert store.orders == []
    assert store.is_cloud_active() is False


async def test_new_order_occupies_its_table(store: Store):
    result = await store.add_or_update_order(make_order(2, (PRODUCT_BURGER, 1)))
    assert result
    assert store.get_table(2).status is TableStatus.OCCUPIED
    assert_occupancy_matches_orders(store)


async def test_saved_total_is_recomputed_from_lines(store: Store):
    order = replace(make_order(1, (PRODUCT_BURGER, 2), (PRODUCT_SODA, 1)), total=1.0)
    assert await store.add_or_update_order(order)
    saved = store.get_order(order.id)
    assert saved.total == 35.98
    assert store.adapter.local.load_orders()[0].total == 35.98


async def test_updating_an_order_keeps_one_active_order(store: Store):
    order = make_order(1, (PRODUCT_BURGER, 1))
    await store.add_or_update_order(order)
    more = replace(order, items=order.items + make_order(1, (PRODUCT_SODA, 2)).items)
    assert await store.add_or_update_order(more)
    assert len(store.orders) == 1
    assert store.active_order_for_table(1).total == 26.99


async def test_second_active_order_on_a_table_is_refused(store: Store):
    await store.add_or_update_order(make_order(1, (PRODUCT_BURGER, 1)))
    result = await store.add_or_update_order(make_order(1, (PRODUCT_SODA, 1)))
    assert not result
    assert isinstance(result.error, OrderConflictError)
    assert len(store.orders) == 1


async def test_invalid_orders_are_rejected_without_side_effects(store: Store):
    before = store.snapshot()
    empty = await store.add_or_update_order(make_order(1))
    unknown_table = await store.add_or_update_order(make_order(99, (PRODUCT_SODA, 1)))
    assert isinstance(empty.error, EmptyOrderError)
    assert isinstance(unknown_table.error, UnknownTableError)
    assert store.snapshot() == before


async def test_close_order_marks_paid_and_frees_table(store: Store):
    order = make_order(3, (PRODUCT_BURGER, 1))
    await store.add_or_update_order(order)
    assert await store.close_order(order.id)
    assert store.get_order(order.id).status is OrderStatus.PAID
    assert store.get_table(3).status is TableStatus.AVAILABLE
    assert store.paid_orders() == [store.get_order(order.id)]
    assert_occupancy_matches_orders(store)


async def test_table_can_be_reopened_after_close(store: Store):
    first = make_order(3, (PRODUCT_BURGER, 1))
    await store.add_or_update_order(first)
    await store.close_order(first.id)
    assert await store.add_or_update_order(make_order(3, (PRODUCT_SODA, 1)))
    assert store.get_table(3).status is TableStatus.OCCUPIED


async def test_cancel_removes_order_and_frees_table(store: Store):
    order = make_order(4, (PRODUCT_SODA, 2))
    await store.add_or_update_order(order)
    assert await store.cancel_order_action(order.id, 4)
    assert store.get_order(order.id) is None
    assert store.get_table(4).status is TableStatus.AVAILABLE
    assert store.adapter.local.load_orders() == []


async def test_cancel_checks_the_table(store: Store):
    order = make_order(4, (PRODUCT_SODA, 1))
    await store.add_or_update_order(order)
    result = await store.cancel_order_action(order.id, 2)
    assert isinstance(result.error, OrderConflictError)
    assert store.get_table(4).status is TableStatus.OCCUPIED


async def test_kitchen_flow_then_close(store: Store):
    order = make_order(1, (PRODUCT_BURGER, 1))
    await store.add_or_update_order(order)
    assert await store.update_order_status(order.id, OrderStatus.PREPARING)
    assert await store.update_order_status(order.id, OrderStatus.READY)
    assert store.get_table(1).status is TableStatus.OCCUPIED
    assert await store.update_order_status(order.id, OrderStatus.PAID)
    assert store.get_table(1).status is TableStatus.AVAILABLE


async def test_cancelled_status_frees_table_and_keeps_record(store: Store):
    order = make_order(2, (PRODUCT_BURGER, 1))
    await store.add_or_update_order(order)
    assert await store.update_order_status(order.id, OrderStatus.CANCELLED)
    assert store.get_order(order.id).status is OrderStatus.CANCELLED
    assert_occupancy_matches_orders(store)


async def test_invalid_transitions_are_rejected(store: Store):
    order = make_order(1, (PRODUCT_BURGER, 1))
    await store.add_or_update_order(order)
    skipped = await store.update_order_status(order.id, OrderStatus.READY)
    assert isinstance(skipped.error, InvalidTransitionError)

    await store.close_order(order.id)
    reopened = await store.update_order_status(order.id, OrderStatus.OPEN)
    assert isinstance(reopened.error, InvalidTransitionError)

    missing = await store.update_order_status("nope", OrderStatus.PAID)
    assert isinstance(missing.error, UnknownOrderError)


async def test_paid_orders_cannot_be_edited(store: Store):
    order = make_order(1, (PRODUCT_BURGER, 1))
    await store.add_or_update_order(order)
    await store.close_order(order.id)
    result = await store.add_or_update_order(store.get_order(order.id))
    assert isinstance(result.error, OrderStateError)


async def test_delete_history_only_for_closed_orders(store: Store):
    order = make_order(1, (PRODUCT_BURGER, 1))
    await store.add_or_update_order(order)
    active = await store.delete_history_order(order.id)
    assert not active

    await store.close_order(order.id)
    assert await store.delete_history_order(order.id)
    assert store.orders == []
    assert store.get_table(1).status is TableStatus.AVAILABLE


async def test_listeners_are_notified_and_can_unsubscribe(store: Store):
    calls: list[int] = []
    unsubscribe = store.subscribe(lambda: calls.append(1))
    await store.add_or_update_order(make_order(1, (PRODUCT_BURGER, 1)))
    assert calls
    unsubscribe()
    count = len(calls)
    await store.add_or_update_order(make_order(2, (PRODUCT_BURGER, 1)))
    assert len(calls) == count


async def test_tables_filtered(store: Store):
    await store.add_or_update_order(make_order(2, (PRODUCT_BURGER, 1)))
    assert [table.id for table in store.tables_filtered(TableFilter.OCCUPIED)] == [2]
    assert [table.id for table in store.tables_filtered(TableFilter.AVAILABLE)] == [1, 3, 4]
    assert len(store.tables_filtered(TableFilter.ALL)) == 4


async def test_failed_save_restores_pre_mutation_state(cloud_store: Store, remote: FakeRemote):
    existing = make_order(1, (PRODUCT_BURGER, 1))
    assert await cloud_store.add_or_update_order(existing)
    before = cloud_store.snapshot()

    remote.fail_writes = True
    result = await cloud_store.add_or_update_order(make_order(2, (PRODUCT_SODA, 1)))

    assert not result
    assert isinstance(result.error, RemoteSyncError)
    assert result.pre_image == before
    assert cloud_store.snapshot() == before
    local = cloud_store.adapter.local
    assert local.load_orders() == list(before.orders)
    assert local.load_tables() == list(before.tables)


async def test_failed_close_keeps_order_open(cloud_store: Store, remote: FakeRemote):
    order = make_order(3, (PRODUCT_BURGER, 1))
    await cloud_store.add_or_update_order(order)
    remote.fail_writes = True
    result = await cloud_store.close_order(order.id)
    assert not result
    assert cloud_store.get_order(order.id).status is OrderStatus.OPEN
    assert cloud_store.get_table(3).status is TableStatus.OCCUPIED
    assert_occupancy_matches_orders(cloud_store)


async def test_failed_cancel_puts_the_order_back(cloud_store: Store, remote: FakeRemote):
    order = make_order(2, (PRODUCT_SODA, 1))
    await cloud_store.add_or_update_order(order)
    before = cloud_store.snapshot()
    remote.fail_writes = True
    assert not await cloud_store.cancel_order_action(order.id, 2)
    assert cloud_store.snapshot() == before


async def test_half_written_remote_save_is_undone(cloud_store: Store, remote: FakeRemote):
    await settle()
    before = cloud_store.snapshot()
    remote.fail_collections.add("tables")

    result = await cloud_store.add_or_update_order(make_order(2, (PRODUCT_SODA, 1)))
    assert not result
    await settle()

    assert remote.collections["orders"] == {}
    assert cloud_store.snapshot() == before
    assert cloud_store.get_table(2).status is TableStatus.AVAILABLE
    assert_occupancy_matches_orders(cloud_store)


async def test_half_written_remote_edit_restores_previous_order(cloud_store: Store, remote: FakeRemote):
    order = make_order(1, (PRODUCT_BURGER, 1))
    assert await cloud_store.add_or_update_order(order)
    await settle()
    before = cloud_store.snapshot()

    remote.fail_collections.add("tables")
    result = await cloud_store.close_order(order.id)
    assert not result
    await settle()

    assert cloud_store.snapshot() == before
    assert cloud_store.get_order(order.id).status is OrderStatus.OPEN
    assert_occupancy_matches_orders(cloud_store)


async def test_cancel_refuses_closed_orders(store: Store):
    closed = make_order(3, (PRODUCT_BURGER, 1))
    await store.add_or_update_order(closed)
    await store.close_order(closed.id)
    current = make_order(3, (PRODUCT_SODA, 1))
    await store.add_or_update_order(current)

    result = await store.cancel_order_action(closed.id, 3)

    assert isinstance(result.error, OrderStateError)
    assert store.get_order(closed.id).status is OrderStatus.PAID
    assert store.get_table(3).status is TableStatus.OCCUPIED
    assert store.active_order_for_table(3).id == current.id


async def test_listeners_hear_connection_changes(cloud_store: Store, remote: FakeRemote):
    calls: list[bool] = []
    cloud_store.subscribe(lambda: calls.append(cloud_store.is_cloud_active()))
    remote.fail_writes = True
    await cloud_store.add_or_update_order(make_order(1, (PRODUCT_BURGER, 1)))
    assert cloud_store.is_cloud_active() is False
    assert False in calls
