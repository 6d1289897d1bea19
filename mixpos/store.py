"""In-memory order/table store with optimistic mutations.

Every mutation snapshots the current state, applies the change in memory so
views update at once, then awaits the persistence adapter. If the adapter
raises, the snapshot is put back both in memory and in the local cache.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from enum import Enum
from typing import Awaitable, Callable

from mixpos.adapter import PersistenceAdapter
from mixpos.config import INITIAL_TABLE_COUNT
from mixpos.errors import (
    EmptyOrderError,
    InvalidTransitionError,
    MixposError,
    OrderConflictError,
    OrderStateError,
    PersistenceError,
    UnknownOrderError,
    UnknownTableError,
)
from mixpos.models import Order, OrderStatus, Table, TableStatus, can_transition, sort_orders

logger = logging.getLogger(__name__)

Listener = Callable[[], None]


class TableFilter(str, Enum):
    ALL = "ALL"
    AVAILABLE = "AVAILABLE"
    OCCUPIED = "OCCUPIED"


@dataclass(frozen=True)
class Snapshot:
    """An immutable copy of the store's collections."""

    tables: tuple[Table, ...]
    orders: tuple[Order, ...]


@dataclass(frozen=True)
class MutationResult:
    """Outcome of a store mutation; truthy only on success."""

    ok: bool
    pre_image: Snapshot
    error: MixposError | None = None

    def __bool__(self) -> bool:
        return self.ok

    @property
    def message(self) -> str:
        return str(self.error) if self.error is not None else ""


class Store:
    """Cache of tables and orders derived from a ``PersistenceAdapter``."""

    def __init__(self, adapter: PersistenceAdapter, table_count: int = INITIAL_TABLE_COUNT) -> None:
        self.adapter = adapter
        self.table_count = table_count
        self._tables: list[Table] = []
        self._orders: list[Order] = []
        self._loading = True
        self._listeners: list[Listener] = []
        self._unsubscribers: list[Callable[[], None]] = []

    async def start(self) -> None:
        """Initialise the adapter and follow its collections."""
        await self.adapter.init(self.table_count)
        self._unsubscribers = [
            self.adapter.subscribe_tables(self._on_tables),
            self.adapter.subscribe_orders(self._on_orders),
            self.adapter.subscribe_status(self._on_status),
        ]

    async def stop(self) -> None:
        for unsubscribe in self._unsubscribers:
            unsubscribe()
        self._unsubscribers = []
        await self.adapter.close()

    @property
    def tables(self) -> list[Table]:
        return list(self._tables)

    @property
    def orders(self) -> list[Order]:
        return list(self._orders)

    @property
    def loading(self) -> bool:
        return self._loading

    def is_cloud_active(self) -> bool:
        return self.adapter.is_cloud_active()

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Call ``listener`` whenever tables or orders change."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def snapshot(self) -> Snapshot:
        return Snapshot(tables=tuple(self._tables), orders=tuple(self._orders))

    def get_table(self, table_id: int) -> Table | None:
        for table in self._tables:
            if table.id == table_id:
                return table
        return None

    def get_order(self, order_id: str) -> Order | None:
        for order in self._orders:
            if order.id == order_id:
                return order
        return None

    def active_order_for_table(self, table_id: int) -> Order | None:
        for order in self._orders:
            if order.table_id == table_id and order.is_active:
                return order
        return None

    def active_orders(self) -> list[Order]:
        return [order for order in self._orders if order.is_active]

    def paid_orders(self) -> list[Order]:
        return [order for order in self._orders if order.status is OrderStatus.PAID]

    def tables_filtered(self, table_filter: TableFilter) -> list[Table]:
        if table_filter is TableFilter.AVAILABLE:
            return [table for table in self._tables if table.status is TableStatus.AVAILABLE]
        if table_filter is TableFilter.OCCUPIED:
            return [table for table in self._tables if table.status is TableStatus.OCCUPIED]
        return list(self._tables)

    async def add_or_update_order(self, order: Order) -> MutationResult:
        """Save an order and mark its table OCCUPIED."""
        pre_image = self.snapshot()
        try:
            self._validate_order(order)
        except OrderStateError as exc:
            return self._rejected(pre_image, "add_or_update_order", exc)

        order = order.recalculated()

        def apply() -> None:
            self._put_order(order)
            self._put_table_status(order.table_id, TableStatus.OCCUPIED)

        async def commit() -> None:
            await self.adapter.save_order(order)
            await self.adapter.update_table_status(order.table_id, TableStatus.OCCUPIED)

        logger.info("Saving order %s for table %s (total=%.2f)", order.id, order.table_id, order.total)
        return await self._mutate(pre_image, "add_or_update_order", apply, commit)

    async def update_order_status(self, order_id: str, status: OrderStatus) -> MutationResult:
        """Move an order along its lifecycle; terminal statuses free the table."""
        pre_image = self.snapshot()
        order = self.get_order(order_id)
        try:
            if order is None:
                raise UnknownOrderError(f"Order {order_id} not found")
            if not can_transition(order.status, status):
                raise InvalidTransitionError(f"Order {order_id} cannot go from {order.status.value} to {status.value}")
        except OrderStateError as exc:
            return self._rejected(pre_image, "update_order_status", exc)

        updated = replace(order, status=status)
        frees_table = status.is_terminal

        def apply() -> None:
            self._put_order(updated)
            if frees_table:
                self._put_table_status(updated.table_id, TableStatus.AVAILABLE)

        async def commit() -> None:
            await self.adapter.save_order(updated)
            if frees_table:
                await self.adapter.update_table_status(updated.table_id, TableStatus.AVAILABLE)

        logger.info("Order %s: %s -> %s", order_id, order.status.value, status.value)
        return await self._mutate(pre_image, "update_order_status", apply, commit)

    async def close_order(self, order_id: str) -> MutationResult:
        """Mark an order PAID and free its table."""
        return await self.update_order_status(order_id, OrderStatus.PAID)

    async def cancel_order_action(self, order_id: str, table_id: int) -> MutationResult:
        """Delete an active order and free its table."""
        pre_image = self.snapshot()
        order = self.get_order(order_id)
        try:
            if order is None:
                raise UnknownOrderError(f"Order {order_id} not found")
            if order.table_id != table_id:
                raise OrderConflictError(f"Order {order_id} belongs to table {order.table_id}, not {table_id}")
            if not order.is_active:
                raise OrderStateError(
                    f"Order {order_id} is already {order.status.value}; delete it from history instead"
                )
        except OrderStateError as exc:
            return self._rejected(pre_image, "cancel_order_action", exc)

        def apply() -> None:
            self._orders = [existing for existing in self._orders if existing.id != order_id]
            self._put_table_status(table_id, TableStatus.AVAILABLE)

        async def commit() -> None:
            await self.adapter.delete_order(order_id, table_id)

        logger.info("Cancelling order %s on table %s", order_id, table_id)
        return await self._mutate(pre_image, "cancel_order_action", apply, commit)

    async def delete_history_order(self, order_id: str) -> MutationResult:
        """Remove a closed order from the sales ledger."""
        pre_image = self.snapshot()
        order = self.get_order(order_id)
        try:
            if order is None:
                raise UnknownOrderError(f"Order {order_id} not found")
            if order.is_active:
                raise OrderStateError(f"Order {order_id} is still {order.status.value}; close or cancel it first")
        except OrderStateError as exc:
            return self._rejected(pre_image, "delete_history_order", exc)

        def apply() -> None:
            self._orders = [existing for existing in self._orders if existing.id != order_id]

        async def commit() -> None:
            await self.adapter.delete_history_order(order_id)

        logger.info("Deleting history order %s", order_id)
        return await self._mutate(pre_image, "delete_history_order", apply, commit)

    def _validate_order(self, order: Order) -> None:
        if self.get_table(order.table_id) is None:
            raise UnknownTableError(f"Table {order.table_id} does not exist")
        if not order.items:
            raise EmptyOrderError("An order needs at least one item")
        if order.status.is_terminal:
            raise OrderStateError(f"Order {order.id} is already {order.status.value}")
        active = self.active_order_for_table(order.table_id)
        if active is not None and active.id != order.id:
            raise OrderConflictError(f"Table {order.table_id} already has active order {active.id}")
        existing = self.get_order(order.id)
        if existing is not None and existing.table_id != order.table_id:
            raise OrderConflictError(f"Order {order.id} belongs to table {existing.table_id}")

    async def _mutate(
        self,
        pre_image: Snapshot,
        action: str,
        apply: Callable[[], None],
        commit: Callable[[], Awaitable[None]],
    ) -> MutationResult:
        apply()
        applied = self.snapshot()
        self._notify()
        try:
            await commit()
        except PersistenceError as exc:
            logger.warning("%s failed, rolling back: %s", action, exc)
            await self._rollback(pre_image, applied)
            return MutationResult(ok=False, pre_image=pre_image, error=exc)
        return MutationResult(ok=True, pre_image=pre_image)

    async def _rollback(self, pre_image: Snapshot, applied: Snapshot) -> None:
        order_ids, table_ids = _changed_ids(pre_image, applied)
        try:
            await self.adapter.restore(pre_image.tables, pre_image.orders, order_ids, table_ids)
        except PersistenceError as exc:
            logger.error("Local cache restore failed: %s", exc)
        # The restore emits the cache contents; pin memory to the pre-image regardless.
        self._tables = list(pre_image.tables)
        self._orders = list(pre_image.orders)
        self._notify()

    def _rejected(self, pre_image: Snapshot, action: str, exc: OrderStateError) -> MutationResult:
        logger.warning("%s rejected: %s", action, exc)
        return MutationResult(ok=False, pre_image=pre_image, error=exc)

    def _put_order(self, order: Order) -> None:
        others = [existing for existing in self._orders if existing.id != order.id]
        self._orders = sort_orders(others + [order])

    def _put_table_status(self, table_id: int, status: TableStatus) -> None:
        self._tables = [replace(table, status=status) if table.id == table_id else table for table in self._tables]

    def _on_tables(self, tables: list[Table]) -> None:
        self._tables = list(tables)
        self._notify()

    def _on_orders(self, orders: list[Order]) -> None:
        self._orders = list(orders)
        self._loading = False
        self._notify()

    def _on_status(self, active: bool) -> None:
        self._notify()

    def _notify(self) -> None:
        for listener in list(self._listeners):
            listener()


def _changed_ids(before: Snapshot, after: Snapshot) -> tuple[list[str], list[int]]:
    """Ids of the orders and tables that differ between two snapshots."""
    orders_before = {order.id: order for order in before.orders}
    orders_after = {order.id: order for order in after.orders}
    order_ids = sorted(
        order_id
        for order_id in orders_before.keys() | orders_after.keys()
        if orders_before.get(order_id) != orders_after.get(order_id)
    )
    tables_before = {table.id: table for table in before.tables}
    table_ids = sorted(table.id for table in after.tables if tables_before.get(table.id) != table)
    return order_ids, table_ids
