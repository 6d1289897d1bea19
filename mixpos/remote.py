"""Redis-backed remote document store.

Each collection is a Redis hash ``<namespace>:<collection>`` mapping a
document id to its JSON encoding. Every write publishes the collection name
on ``<namespace>:changes`` so other terminals can refresh.
"""

from __future__ import annotations

import json
import logging
from typing import Any, AsyncIterator

from redis.asyncio import Redis

from mixpos.config import REDIS_NAMESPACE, REDIS_TIMEOUT_SECONDS

logger = logging.getLogger(__name__)

ORDERS = "orders"
TABLES = "tables"
COLLECTIONS = frozenset({ORDERS, TABLES})


class RedisDocumentStore:
    """Thin async document API over Redis hashes and pub/sub."""

    def __init__(
        self,
        url: str,
        namespace: str = REDIS_NAMESPACE,
        timeout: float = REDIS_TIMEOUT_SECONDS,
    ) -> None:
        self.url = url
        self.namespace = namespace
        self.timeout = timeout
        self._client: Redis | None = None

    @property
    def channel(self) -> str:
        return f"{self.namespace}:changes"

    def _key(self, collection: str) -> str:
        return f"{self.namespace}:{collection}"

    @property
    def client(self) -> Redis:
        if self._client is None:
            raise RuntimeError("RedisDocumentStore is not connected")
        return self._client

    async def connect(self) -> None:
        """Open the client and ping it; raises on an unreachable server."""
        if self._client is not None:
            return
        client = Redis.from_url(
            self.url,
            decode_responses=True,
            socket_connect_timeout=self.timeout,
            socket_timeout=self.timeout,
        )
        try:
            await client.ping()
        except Exception:
            await client.aclose()
            raise
        self._client = client
        logger.info("Connected to Redis at %s (namespace=%s)", self.url, self.namespace)

    async def close(self) -> None:
        if self._client is not None:
            try:
                await self._client.aclose()
            finally:
                self._client = None

    async def count(self, collection: str) -> int:
        return int(await self.client.hlen(self._key(collection)))

    async def load_collection(self, collection: str) -> list[dict[str, Any]]:
        raw = await self.client.hgetall(self._key(collection))
        return [json.loads(value) for value in raw.values()]

    async def put_document(self, collection: str, doc_id: str | int, doc: dict[str, Any]) -> None:
        await self.client.hset(self._key(collection), str(doc_id), json.dumps(doc, ensure_ascii=False))
        await self.client.publish(self.channel, collection)

    async def put_documents(self, collection: str, docs: dict[str, dict[str, Any]]) -> None:
        if not docs:
            return
        mapping = {doc_id: json.dumps(doc, ensure_ascii=False) for doc_id, doc in docs.items()}
        await self.client.hset(self._key(collection), mapping=mapping)
        await self.client.publish(self.channel, collection)

    async def delete_document(self, collection: str, doc_id: str | int) -> None:
        await self.client.hdel(self._key(collection), str(doc_id))
        await self.client.publish(self.channel, collection)

    async def changes(self) -> AsyncIterator[str]:
        """Yield the name of each collection changed by any writer."""
        # Pub/sub blocks between messages; it needs its own client without a read timeout.
        listener = Redis.from_url(self.url, decode_responses=True, socket_connect_timeout=self.timeout)
        pubsub = listener.pubsub(ignore_subscribe_messages=True)
        try:
            await pubsub.subscribe(self.channel)
            async for message in pubsub.listen():
                data = message.get("data")
                if data in COLLECTIONS:
                    yield data
        finally:
            await pubsub.aclose()
            await listener.aclose()
