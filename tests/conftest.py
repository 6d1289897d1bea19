from __future__ import annotations

import asyncio
import json
from typing import Any, AsyncIterator

import pytest
from redis.exceptions import ConnectionError as RedisConnectionError

from mixpos.adapter import PersistenceAdapter
from mixpos.data import DEFAULT_CATALOG
from mixpos.models import Order, OrderItem, Product
from mixpos.persistence import LocalStore
from mixpos.store import Store


class FakeRemote:
    """In-memory stand-in for RedisDocumentStore used by the tests."""

    def __init__(self) -> None:
        self.collections: dict[str, dict[str, str]] = {"orders": {}, "tables": {}}
        self.connected = False
        self.fail_connect = False
        self.fail_writes = False
        self.fail_reads = False
        self.fail_collections: set[str] = set()
        self.writes: list[tuple[str, str, str]] = []
        self._subscribers: list[asyncio.Queue[str | None]] = []

    async def connect(self) -> None:
        if self.fail_connect:
            raise RedisConnectionError("connection refused")
        self.connected = True

    async def close(self) -> None:
        self.connected = False

    async def count(self, collection: str) -> int:
        if self.fail_reads:
            raise RedisConnectionError("read failed")
        return len(self.collections[collection])

    async def load_collection(self, collection: str) -> list[dict[str, Any]]:
        if self.fail_reads:
            raise RedisConnectionError("read failed")
        return [json.loads(value) for value in self.collections[collection].values()]

    async def put_document(self, collection: str, doc_id: str | int, doc: dict[str, Any]) -> None:
        self._check_write(collection)
        self.collections[collection][str(doc_id)] = json.dumps(doc)
        self.writes.append(("put", collection, str(doc_id)))
        self.publish(collection)

    async def put_documents(self, collection: str, docs: dict[str, dict[str, Any]]) -> None:
        for doc_id, doc in docs.items():
            await self.put_document(collection, doc_id, doc)

    async def delete_document(self, collection: str, doc_id: str | int) -> None:
        self._check_write(collection)
        self.collections[collection].pop(str(doc_id), None)
        self.writes.append(("delete", collection, str(doc_id)))
        self.publish(collection)

    def _check_write(self, collection: str) -> None:
        if self.fail_writes or collection in self.fail_collections:
            raise RedisConnectionError("write failed")

    def drop_listeners(self) -> None:
        for queue in self._subscribers:
            queue.put_nowait(None)

    def publish(self, collection: str) -> None:
        for queue in self._subscribers:
            queue.put_nowait(collection)

    async def changes(self) -> AsyncIterator[str]:
        queue: asyncio.Queue[str | None] = asyncio.Queue()
        self._subscribers.append(queue)
        try:
            while True:
                collection = await queue.get()
                if collection is None:
                    raise RedisConnectionError("listener dropped")
                yield collection
        finally:
            self._subscribers.remove(queue)


async def settle() -> None:
    """Let background listener tasks run."""
    for _ in range(10):
        await asyncio.sleep(0)


PRODUCT_BURGER = Product(id="tr1", name="Mix Burguer", price=14.99, category="tradicionais")
PRODUCT_SODA = Product(id="dr4", name="Lata 350ml", price=6.00, category="drinks")


def make_order(table_id: int, *lines: tuple[Product, int]) -> Order:
    items = tuple(
        OrderItem(product_id=product.id, name=product.name, price=product.price, quantity=quantity)
        for product, quantity in lines
    )
    return Order(table_id=table_id, items=items).recalculated()


@pytest.fixture
def catalog():
    return DEFAULT_CATALOG


@pytest.fixture
def local(tmp_path) -> LocalStore:
    store = LocalStore(tmp_path / "mixpos.db")
    store.bootstrap_schema()
    return store


@pytest.fixture
def remote() -> FakeRemote:
    return FakeRemote()


@pytest.fixture
async def store(local):
    s = Store(PersistenceAdapter(local), table_count=4)
    await s.start()
    yield s
    await s.stop()


@pytest.fixture
async def cloud_store(local, remote):
    s = Store(PersistenceAdapter(local, remote), table_count=4)
    await s.start()
    yield s
    await s.stop()
