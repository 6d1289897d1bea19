"""Explicit dependencies handed to every screen."""

from __future__ import annotations

from dataclasses import dataclass, field

from mixpos.data import DEFAULT_CATALOG, Catalog
from mixpos.store import Store


@dataclass
class AppContext:
    store: Store
    catalog: Catalog = field(default=DEFAULT_CATALOG)
