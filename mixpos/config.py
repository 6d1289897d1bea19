"""Runtime configuration defaults for persistence, sync and logging."""

from __future__ import annotations

import os

DB_PATH = os.environ.get("MIXPOS_DB_PATH", "data/mixpos.db")

# Empty URL keeps the app on the local cache only.
REDIS_URL = os.environ.get("MIXPOS_REDIS_URL", "").strip()
REDIS_NAMESPACE = os.environ.get("MIXPOS_REDIS_NAMESPACE", "mixpos")
REDIS_TIMEOUT_SECONDS = float(os.environ.get("MIXPOS_REDIS_TIMEOUT", "2.0"))

INITIAL_TABLE_COUNT = int(os.environ.get("MIXPOS_TABLE_COUNT", "15"))

LOG_PATH = os.environ.get("MIXPOS_LOG_PATH", "/tmp/mixpos.log")
LOG_LEVEL = os.environ.get("MIXPOS_LOG_LEVEL", "INFO").upper()

CURRENCY_SYMBOL = os.environ.get("MIXPOS_CURRENCY", "R$")

# Listener reconnect backoff bounds.
LISTENER_BACKOFF_START_SECONDS = 1.0
LISTENER_BACKOFF_MAX_SECONDS = 15.0
