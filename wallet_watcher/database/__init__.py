"""
Database layer — watched addresses with cursors, normalized events, history.

SQLAlchemy over PostgreSQL (production) or SQLite (local, tests); the same
Store API either way.
"""

from wallet_watcher.database.models import (
    NormalizedEvent,
    TxEvent,
    WatchedAddress,
    isoformat_utc,
    parse_timestamp,
)
from wallet_watcher.database.store import Store, clamp_history_limit, get_store

__all__ = [
    "NormalizedEvent",
    "Store",
    "TxEvent",
    "WatchedAddress",
    "clamp_history_limit",
    "get_store",
    "isoformat_utc",
    "parse_timestamp",
]
