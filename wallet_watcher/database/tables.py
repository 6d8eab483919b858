"""
SQLAlchemy tables: watched addresses (with cursor) and transaction events.

Both chains share each table, partitioned by the chain column. Unique keys:
(chain, address) for registrations, (chain, tx_hash, ts) for events.
"""

from __future__ import annotations

from datetime import datetime, timezone

from sqlalchemy import (
    BigInteger,
    Column,
    DateTime,
    Index,
    Integer,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import declarative_base

Base = declarative_base()


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class WatchedAddressRow(Base):
    """One watched address per chain; cursor only moves forward."""

    __tablename__ = "watched_addresses"
    __table_args__ = (
        UniqueConstraint("chain", "address", name="uq_watched_addresses_chain_address"),
        Index("ix_watched_addresses_chain_created", "chain", "created_at"),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    chain = Column(String(16), nullable=False)
    address = Column(String(128), nullable=False)
    cursor = Column("last_position", BigInteger, nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow)
    updated_at = Column(DateTime(timezone=True), nullable=True)


class TxEventRow(Base):
    """Append-only normalized transaction event."""

    __tablename__ = "tx_events"
    __table_args__ = (
        UniqueConstraint("chain", "tx_hash", "ts", name="uq_tx_events_chain_hash_ts"),
        Index("ix_tx_events_chain_ts", "chain", "ts"),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    chain = Column(String(16), nullable=False)
    tx_hash = Column(String(128), nullable=False)
    ts = Column(DateTime(timezone=True), nullable=False)
    sender = Column(String(128), nullable=True)
    receiver = Column(String(128), nullable=True)
    token = Column(String(256), nullable=True)
    amount = Column(BigInteger, nullable=True)
    fee = Column(BigInteger, nullable=True)
    method = Column(String(256), nullable=True)
    raw = Column(Text, nullable=True)  # JSON payload as text
    created_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow)
