"""Entry point for the mixpos Textual app."""

from __future__ import annotations

from mixpos.adapter import PersistenceAdapter
from mixpos.config import DB_PATH, INITIAL_TABLE_COUNT, REDIS_URL
from mixpos.context import AppContext
from mixpos.log import configure_logging
from mixpos.persistence import LocalStore
from mixpos.pos_app import PosApp
from mixpos.remote import RedisDocumentStore
from mixpos.store import Store


def build_context(db_path: str = DB_PATH, redis_url: str = REDIS_URL, table_count: int = INITIAL_TABLE_COUNT) -> AppContext:
    """Wire the local cache, optional remote backend and store."""
    remote = RedisDocumentStore(redis_url) if redis_url else None
    adapter = PersistenceAdapter(LocalStore(db_path), remote)
    return AppContext(store=Store(adapter, table_count=table_count))


def main() -> None:
    """Run the Textual application."""
    configure_logging()
    PosApp(build_context()).run()


if __name__ == "__main__":
    main()
