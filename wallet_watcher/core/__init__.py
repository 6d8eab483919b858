"""
Core definitions shared across chain clients, store, workers, and API server.

Error taxonomy and chain identifiers.
"""

from wallet_watcher.core.chains import Chain, parse_chain
from wallet_watcher.core.exceptions import (
    DecodeError,
    PersistenceError,
    RpcApplicationError,
    TransportError,
    ValidationError,
    WatcherError,
)

__all__ = [
    "Chain",
    "parse_chain",
    "DecodeError",
    "PersistenceError",
    "RpcApplicationError",
    "TransportError",
    "ValidationError",
    "WatcherError",
]
