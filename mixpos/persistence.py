"""SQLite local cache for tables and orders."""

from __future__ import annotations

import sqlite3
from contextlib import closing
from dataclasses import replace
from pathlib import Path
from typing import Iterable

from mixpos.config import DB_PATH
from mixpos.errors import LocalStoreError
from mixpos.models import Order, OrderItem, Table, TableStatus, sort_orders, sort_tables

_SCHEMA = """
CREATE TABLE IF NOT EXISTS tables (
    id INTEGER PRIMARY KEY,
    status TEXT NOT NULL
);

CREATE TABLE IF NOT EXISTS orders (
    id TEXT PRIMARY KEY,
    table_id INTEGER NOT NULL,
    status TEXT NOT NULL,
    created_at TEXT NOT NULL,
    total REAL NOT NULL
);

CREATE TABLE IF NOT EXISTS order_items (
    id TEXT NOT NULL,
    order_id TEXT NOT NULL,
    line_index INTEGER NOT NULL,
    product_id TEXT NOT NULL,
    name TEXT NOT NULL,
    price REAL NOT NULL,
    quantity INTEGER NOT NULL,
    notes TEXT NOT NULL DEFAULT '',
    timestamp TEXT NOT NULL,
    PRIMARY KEY (order_id, id),
    FOREIGN KEY(order_id) REFERENCES orders(id) ON DELETE CASCADE
);

CREATE INDEX IF NOT EXISTS idx_order_items_order_id_line
    ON order_items(order_id, line_index);
"""


class LocalStore:
    """Synchronous SQLite mirror of the table and order documents."""

    def __init__(self, db_path: str | Path = DB_PATH) -> None:
        self.db_path = Path(db_path)

    def _connect(self) -> sqlite3.Connection:
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        conn = sqlite3.connect(self.db_path)
        conn.execute("PRAGMA foreign_keys = ON")
        return conn

    def bootstrap_schema(self) -> None:
        """Create the cache schema if it does not already exist."""
        try:
            with closing(self._connect()) as conn:
                conn.executescript(_SCHEMA)
        except sqlite3.Error as exc:
            raise LocalStoreError(f"Cannot bootstrap local cache: {exc}") from exc

    def load_tables(self) -> list[Table]:
        with closing(self._connect()) as conn:
            rows = conn.execute("SELECT id, status FROM tables ORDER BY id").fetchall()
        return [Table(id=row[0], status=TableStatus(row[1])) for row in rows]

    def load_orders(self) -> list[Order]:
        with closing(self._connect()) as conn:
            order_rows = conn.execute("SELECT id, table_id, status, created_at, total FROM orders").fetchall()
            item_rows = conn.execute(
                """
                SELECT order_id, id, product_id, name, price, quantity, notes, timestamp
                FROM order_items
                ORDER BY order_id, line_index
                """
            ).fetchall()

        items_by_order: dict[str, list[OrderItem]] = {}
        for order_id, item_id, product_id, name, price, quantity, notes, timestamp in item_rows:
            items_by_order.setdefault(order_id, []).append(
                OrderItem.from_document(
                    {
                        "id": item_id,
                        "product_id": product_id,
                        "name": name,
                        "price": price,
                        "quantity": quantity,
                        "notes": notes,
                        "timestamp": timestamp,
                    }
                )
            )

        orders = [
            replace(
                Order.from_document(
                    {
                        "id": order_id,
                        "table_id": table_id,
                        "status": status,
                        "created_at": created_at,
                        "total": total,
                    }
                ),
                items=tuple(items_by_order.get(order_id, [])),
            )
            for order_id, table_id, status, created_at, total in order_rows
        ]
        return sort_orders(orders)

    def count_tables(self) -> int:
        with closing(self._connect()) as conn:
            return int(conn.execute("SELECT COUNT(*) FROM tables").fetchone()[0])

    def seed_tables(self, table_count: int) -> bool:
        """Create ``table_count`` AVAILABLE tables when none exist."""
        try:
            with closing(self._connect()) as conn, conn:
                existing = conn.execute("SELECT COUNT(*) FROM tables").fetchone()[0]
                if existing:
                    return False
                conn.executemany(
                    "INSERT INTO tables (id, status) VALUES (?, ?)",
                    [(table_id, TableStatus.AVAILABLE.value) for table_id in range(1, table_count + 1)],
                )
        except sqlite3.Error as exc:
            raise LocalStoreError(f"Cannot seed tables: {exc}") from exc
        return True

    def save_order(self, order: Order) -> None:
        """Upsert an order and rewrite its lines."""
        try:
            with closing(self._connect()) as conn, conn:
                self._write_order(conn, order)
        except sqlite3.Error as exc:
            raise LocalStoreError(f"Cannot save order {order.id}: {exc}") from exc

    def delete_order(self, order_id: str) -> None:
        try:
            with closing(self._connect()) as conn, conn:
                conn.execute("DELETE FROM orders WHERE id = ?", (order_id,))
        except sqlite3.Error as exc:
            raise LocalStoreError(f"Cannot delete order {order_id}: {exc}") from exc

    def update_table_status(self, table_id: int, status: TableStatus) -> None:
        try:
            with closing(self._connect()) as conn, conn:
                conn.execute("UPDATE tables SET status = ? WHERE id = ?", (status.value, table_id))
        except sqlite3.Error as exc:
            raise LocalStoreError(f"Cannot update table {table_id}: {exc}") from exc

    def replace_tables(self, tables: Iterable[Table]) -> None:
        """Rewrite the whole tables collection."""
        try:
            with closing(self._connect()) as conn, conn:
                self._write_tables(conn, tables)
        except sqlite3.Error as exc:
            raise LocalStoreError(f"Cannot replace tables: {exc}") from exc

    def replace_orders(self, orders: Iterable[Order]) -> None:
        """Rewrite the whole orders collection."""
        try:
            with closing(self._connect()) as conn, conn:
                self._write_orders(conn, orders)
        except sqlite3.Error as exc:
            raise LocalStoreError(f"Cannot replace orders: {exc}") from exc

    def replace_all(self, tables: Iterable[Table], orders: Iterable[Order]) -> None:
        """Rewrite both collections in one transaction."""
        try:
            with closing(self._connect()) as conn, conn:
                self._write_tables(conn, tables)
                self._write_orders(conn, orders)
        except sqlite3.Error as exc:
            raise LocalStoreError(f"Cannot restore local cache: {exc}") from exc

    def _write_tables(self, conn: sqlite3.Connection, tables: Iterable[Table]) -> None:
        conn.execute("DELETE FROM tables")
        conn.executemany(
            "INSERT INTO tables (id, status) VALUES (?, ?)",
            [(table.id, table.status.value) for table in sort_tables(list(tables))],
        )

    def _write_orders(self, conn: sqlite3.Connection, orders: Iterable[Order]) -> None:
        conn.execute("DELETE FROM orders")
        for order in orders:
            self._write_order(conn, order)

    def _write_order(self, conn: sqlite3.Connection, order: Order) -> None:
        conn.execute(
            """
            INSERT INTO orders (id, table_id, status, created_at, total)
            VALUES (?, ?, ?, ?, ?)
            ON CONFLICT(id) DO UPDATE SET
                table_id = excluded.table_id,
                status = excluded.status,
                created_at = excluded.created_at,
                total = excluded.total
            """,
            (order.id, order.table_id, order.status.value, order.created_at.isoformat(), order.total),
        )
        conn.execute("DELETE FROM order_items WHERE order_id = ?", (order.id,))
        conn.executemany(
            """
            INSERT INTO order_items
                (id, order_id, line_index, product_id, name, price, quantity, notes, timestamp)
            VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)
            """,
            [
                (
                    item.id,
                    order.id,
                    idx,
                    item.product_id,
                    item.name,
                    item.price,
                    item.quantity,
                    item.notes,
                    item.timestamp.isoformat(),
                )
                for idx, item in enumerate(order.items)
            ],
        )
