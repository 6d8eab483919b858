"""
Domain models for store entities.

Watched addresses with their cursor, normalized events on the way in, and
stored events on the way out. No ORM coupling; tables live in tables.py.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any

from wallet_watcher.core.chains import Chain


def as_utc(ts: datetime) -> datetime:
    """Return ts as an aware UTC datetime; naive values are taken to be UTC already."""
    if ts.tzinfo is None:
        return ts.replace(tzinfo=timezone.utc)
    return ts.astimezone(timezone.utc)


def isoformat_utc(ts: datetime) -> str:
    """ISO 8601 / RFC 3339 with a Z suffix, e.g. 2024-05-01T12:00:00.250000Z."""
    return as_utc(ts).isoformat().replace("+00:00", "Z")


def parse_timestamp(raw: str) -> datetime:
    """Parse an RFC 3339 timestamp (Z or offset; naive taken as UTC). Raises ValueError."""
    value = raw.strip()
    if value.endswith(("Z", "z")):
        value = value[:-1] + "+00:00"
    return as_utc(datetime.fromisoformat(value))


@dataclass
class WatchedAddress:
    """One (chain, address) registration with its last processed position."""

    chain: Chain
    address: str
    cursor: int | None
    """Solana: highest ingested slot. Sui: highest fully processed checkpoint. None before first advance."""
    created_at: datetime | None = None


@dataclass
class NormalizedEvent:
    """
    Chain-agnostic transaction record produced by a sync worker.

    (transaction_id, timestamp) is the dedup key within a chain. Typed fields
    are best-effort projections; raw keeps the decoded payload.
    """

    transaction_id: str
    timestamp: datetime
    sender: str | None = None
    receiver: str | None = None
    token: str | None = None
    amount: int | None = None
    fee: int | None = None
    method: str | None = None
    raw: Any = field(default=None, repr=False)

    def raw_json(self) -> str | None:
        if self.raw is None:
            return None
        return json.dumps(self.raw, separators=(",", ":"), default=str)


@dataclass
class TxEvent:
    """Stored event row as returned by history queries."""

    tx_hash: str
    ts: datetime
    sender: str | None = None
    receiver: str | None = None
    token: str | None = None
    amount: int | None = None
    fee: int | None = None
    method: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "tx_hash": self.tx_hash,
            "ts": isoformat_utc(self.ts),
            "sender": self.sender,
            "receiver": self.receiver,
            "token": self.token,
            "amount": self.amount,
            "fee": self.fee,
            "method": self.method,
        }
