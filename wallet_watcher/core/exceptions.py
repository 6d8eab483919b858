"""
Application-level exceptions.

Taxonomy used by chain clients, store, sync workers, and API server:
- TransportError: network failure, timeout, or an undecodable response body.
- RpcApplicationError: remote node reported an error (code + message).
- DecodeError: response decoded but had an unexpected shape.
- PersistenceError: store unavailable or statement failed.
- ValidationError: malformed chain/address input (surfaced at the HTTP boundary).

Inside a sync tick every kind is caught per address or per candidate, logged,
and skipped. Only store setup at startup is fatal.
"""

from __future__ import annotations

# JSON-RPC 2.0 "method not found"
METHOD_NOT_FOUND = -32601


class WatcherError(Exception):
    """Base class for all Wallet Watcher errors."""


class TransportError(WatcherError):
    """RPC request did not produce a JSON-RPC envelope (connection, timeout, bad body)."""

    def __init__(self, message: str, *, method: str | None = None) -> None:
        super().__init__(message)
        self.method = method


class RpcApplicationError(WatcherError):
    """Remote node answered with a JSON-RPC error object."""

    def __init__(self, code: int, message: str, *, method: str | None = None) -> None:
        super().__init__(f"rpc error {code}: {message}")
        self.code = code
        self.message = message
        self.method = method

    @property
    def is_method_not_found(self) -> bool:
        return self.code == METHOD_NOT_FOUND


class DecodeError(WatcherError):
    """Payload was valid JSON but not the shape the decoder expects."""


class PersistenceError(WatcherError):
    """Store operation failed."""


class ValidationError(WatcherError):
    """Malformed chain or address input."""
