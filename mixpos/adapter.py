"""Dual-backend persistence adapter.

Writes always land in the local SQLite cache first and are then mirrored to
the remote document store when it is live. Subscribers are called once with
the current state and again after every change, whichever backend caused it.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Awaitable, Callable, Iterable

from redis.exceptions import RedisError

from mixpos.config import LISTENER_BACKOFF_MAX_SECONDS, LISTENER_BACKOFF_START_SECONDS
from mixpos.errors import RemoteSyncError
from mixpos.models import Order, Table, TableStatus, sort_orders, sort_tables
from mixpos.persistence import LocalStore
from mixpos.remote import ORDERS, TABLES, RedisDocumentStore

logger = logging.getLogger(__name__)

OrdersCallback = Callable[[list[Order]], None]
TablesCallback = Callable[[list[Table]], None]
StatusCallback = Callable[[bool], None]
Unsubscribe = Callable[[], None]

# Connection-level failures surface as OSError subclasses before redis wraps them.
_REMOTE_ERRORS = (RedisError, OSError)


def _subscribe(listeners: list, callback: Callable) -> Unsubscribe:
    listeners.append(callback)

    def unsubscribe() -> None:
        if callback in listeners:
            listeners.remove(callback)

    return unsubscribe


class PersistenceAdapter:
    """Local-first persistence with an optional remote mirror."""

    def __init__(self, local: LocalStore, remote: RedisDocumentStore | None = None) -> None:
        self.local = local
        self.remote = remote
        # Set once init() reached the remote; writes are mirrored from then on.
        self._linked: RedisDocumentStore | None = None
        self._cloud_active = False
        self._order_listeners: list[OrdersCallback] = []
        self._table_listeners: list[TablesCallback] = []
        self._status_listeners: list[StatusCallback] = []
        self._listener_task: asyncio.Task[None] | None = None

    def is_cloud_active(self) -> bool:
        return self._cloud_active

    async def init(self, table_count: int) -> None:
        """Prepare both backends and seed tables where none exist."""
        self.local.bootstrap_schema()
        if self.local.seed_tables(table_count):
            logger.info("Seeded %d local tables", table_count)

        remote = self.remote
        if remote is None:
            logger.info("No remote backend configured; running local only")
            return

        try:
            await remote.connect()
            if await remote.count(TABLES) == 0:
                await remote.put_documents(
                    TABLES,
                    {str(table_id): Table(id=table_id).to_document() for table_id in range(1, table_count + 1)},
                )
                logger.info("Seeded %d remote tables", table_count)
        except _REMOTE_ERRORS as exc:
            logger.warning("Cloud sync offline, using local cache: %s", exc)
            await self._safe_close_remote()
            return

        self._linked = remote
        self._set_cloud_active(True)
        await self._pull(remote, TABLES)
        await self._pull(remote, ORDERS)
        self._listener_task = asyncio.create_task(self._listen(remote), name="mixpos-remote-listener")

    async def close(self) -> None:
        if self._listener_task is not None:
            self._listener_task.cancel()
            try:
                await self._listener_task
            except asyncio.CancelledError:
                pass
            self._listener_task = None
        await self._safe_close_remote()
        self._linked = None
        self._set_cloud_active(False)

    def subscribe_orders(self, callback: OrdersCallback) -> Unsubscribe:
        unsubscribe = _subscribe(self._order_listeners, callback)
        callback(self.local.load_orders())
        return unsubscribe

    def subscribe_tables(self, callback: TablesCallback) -> Unsubscribe:
        unsubscribe = _subscribe(self._table_listeners, callback)
        callback(self.local.load_tables())
        return unsubscribe

    def subscribe_status(self, callback: StatusCallback) -> Unsubscribe:
        """Call ``callback`` with the Online/Offline flag now and on every change."""
        unsubscribe = _subscribe(self._status_listeners, callback)
        callback(self._cloud_active)
        return unsubscribe

    async def save_order(self, order: Order) -> None:
        """Upsert an order."""
        self.local.save_order(order)
        self._emit_orders()
        await self._mirror(
            f"save order {order.id}", lambda remote: remote.put_document(ORDERS, order.id, order.to_document())
        )

    async def delete_order(self, order_id: str, table_id: int) -> None:
        """Remove an order and free its table."""
        self.local.delete_order(order_id)
        self.local.update_table_status(table_id, TableStatus.AVAILABLE)
        self._emit_orders()
        self._emit_tables()
        await self._mirror(
            f"delete order {order_id}", lambda remote: self._remote_delete_and_free(remote, order_id, table_id)
        )

    async def delete_history_order(self, order_id: str) -> None:
        """Remove a closed order without touching table state."""
        self.local.delete_order(order_id)
        self._emit_orders()
        await self._mirror(
            f"delete history order {order_id}", lambda remote: remote.delete_document(ORDERS, order_id)
        )

    async def update_table_status(self, table_id: int, status: TableStatus) -> None:
        self.local.update_table_status(table_id, status)
        self._emit_tables()
        table = Table(id=table_id, status=status)
        await self._mirror(
            f"update table {table_id}", lambda remote: remote.put_document(TABLES, table_id, table.to_document())
        )

    async def restore(
        self,
        tables: Iterable[Table],
        orders: Iterable[Order],
        order_ids: Iterable[str] = (),
        table_ids: Iterable[int] = (),
    ) -> None:
        """Rewrite the local cache from a snapshot and notify subscribers.

        ``order_ids`` and ``table_ids`` name the documents a failed write may
        have reached; while linked to the remote they are put back to their
        snapshot value (or deleted when absent from it).
        """
        tables = list(tables)
        orders = list(orders)
        self.local.replace_all(tables, orders)
        self._emit_tables()
        self._emit_orders()

        remote = self._linked
        if remote is None:
            return
        orders_by_id = {order.id: order for order in orders}
        tables_by_id = {table.id: table for table in tables}
        for order_id in order_ids:
            before = orders_by_id.get(order_id)
            if before is None:
                await self._revert(remote.delete_document(ORDERS, order_id), f"order {order_id}")
            else:
                await self._revert(remote.put_document(ORDERS, order_id, before.to_document()), f"order {order_id}")
        for table_id in table_ids:
            table = tables_by_id.get(table_id)
            if table is not None:
                await self._revert(remote.put_document(TABLES, table_id, table.to_document()), f"table {table_id}")

    async def _revert(self, write: Awaitable[None], what: str) -> None:
        try:
            await write
        except _REMOTE_ERRORS as exc:
            self._set_cloud_active(False)
            logger.warning("Could not revert remote %s: %s", what, exc)

    async def _mirror(self, action: str, write: Callable[[RedisDocumentStore], Awaitable[None]]) -> None:
        remote = self._linked
        if remote is None:
            return
        try:
            await write(remote)
        except _REMOTE_ERRORS as exc:
            self._set_cloud_active(False)
            logger.error("Remote write failed (%s): %s", action, exc, exc_info=exc)
            raise RemoteSyncError(f"Could not {action} in the cloud: {exc}") from exc
        self._set_cloud_active(True)

    @staticmethod
    async def _remote_delete_and_free(remote: RedisDocumentStore, order_id: str, table_id: int) -> None:
        await remote.delete_document(ORDERS, order_id)
        await remote.put_document(TABLES, table_id, Table(id=table_id).to_document())

    async def _pull(self, remote: RedisDocumentStore, collection: str) -> None:
        """Mirror one remote collection into the local cache, then notify."""
        try:
            docs = await remote.load_collection(collection)
        except _REMOTE_ERRORS as exc:
            self._set_cloud_active(False)
            logger.warning("Remote read of %s failed, serving local cache: %s", collection, exc)
        else:
            if collection == ORDERS:
                self.local.replace_orders(sort_orders([Order.from_document(doc) for doc in docs]))
            else:
                self.local.replace_tables(sort_tables([Table.from_document(doc) for doc in docs]))

        if collection == ORDERS:
            self._emit_orders()
        else:
            self._emit_tables()

    async def _listen(self, remote: RedisDocumentStore) -> None:
        backoff = LISTENER_BACKOFF_START_SECONDS
        resync = False
        while True:
            try:
                if resync:
                    await self._resync(remote)
                    resync = False
                async for collection in remote.changes():
                    self._set_cloud_active(True)
                    await self._pull(remote, collection)
                    backoff = LISTENER_BACKOFF_START_SECONDS
            except _REMOTE_ERRORS as exc:
                self._set_cloud_active(False)
                logger.warning("Remote listener dropped, retrying in %.0fs: %s", backoff, exc)
                resync = True
                await asyncio.sleep(backoff)
                backoff = min(backoff * 2, LISTENER_BACKOFF_MAX_SECONDS)
            else:
                # The change stream ended cleanly; reopen it.
                await asyncio.sleep(backoff)

    async def _resync(self, remote: RedisDocumentStore) -> None:
        """Reload both collections after a dropped listener; raises while still unreachable."""
        await remote.count(TABLES)
        self._set_cloud_active(True)
        logger.info("Remote backend reachable again, resyncing")
        await self._pull(remote, TABLES)
        await self._pull(remote, ORDERS)

    async def _safe_close_remote(self) -> None:
        if self.remote is None:
            return
        try:
            await self.remote.close()
        except _REMOTE_ERRORS as exc:
            logger.warning("Error closing remote backend: %s", exc)

    def _set_cloud_active(self, active: bool) -> None:
        if active == self._cloud_active:
            return
        self._cloud_active = active
        logger.info("Cloud sync %s", "online" if active else "offline")
        for callback in list(self._status_listeners):
            callback(active)

    def _emit_orders(self) -> None:
        if not self._order_listeners:
            return
        orders = self.local.load_orders()
        for callback in list(self._order_listeners):
            callback(orders)

    def _emit_tables(self) -> None:
        if not self._table_listeners:
            return
        tables = self.local.load_tables()
        for callback in list(self._table_listeners):
            callback(tables)
