"""
Store: cursor store, event store, registrations, and history queries.

SQLAlchemy-backed. DATABASE_URL selects PostgreSQL (psycopg) in production;
SQLite otherwise. One Store owns one engine and its connection pool, shared by
the sync workers and the API server. Every public operation runs in its own
short transaction; no transaction spans two operations.

Write contracts:
- advance_cursor() is a single UPDATE computing max(existing, candidate), so it
  never regresses, whatever order callers arrive in.
- insert_event() is INSERT ... ON CONFLICT DO NOTHING on (chain, tx_hash, ts);
  a duplicate is a no-op, never an error.
"""

from __future__ import annotations

from contextlib import contextmanager
from datetime import datetime, timezone
from typing import Any, Iterator

from sqlalchemy import String, Text, case, create_engine, func, or_, select, text, update
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.engine import Engine
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from wallet_watcher.core.chains import Chain
from wallet_watcher.core.exceptions import PersistenceError
from wallet_watcher.database.models import NormalizedEvent, TxEvent, WatchedAddress, as_utc
from wallet_watcher.database.tables import Base, TxEventRow, WatchedAddressRow
from wallet_watcher.utils.address import strip_hex_prefix
from wallet_watcher.watcher_logging import get_logger

logger = get_logger(__name__)

DEFAULT_WATCH_LIMIT = 200
MAX_WATCH_LIMIT = 1000
DEFAULT_HISTORY_LIMIT = 50
MAX_HISTORY_LIMIT = 200


def clamp_history_limit(limit: int | None) -> int:
    """Page size for history: 1..200, anything else becomes the default 50."""
    if limit is None or limit <= 0 or limit > MAX_HISTORY_LIMIT:
        return DEFAULT_HISTORY_LIMIT
    return limit


def _clamp_watch_limit(limit: int | None) -> int:
    if limit is None or limit <= 0 or limit > MAX_WATCH_LIMIT:
        return DEFAULT_WATCH_LIMIT
    return limit


class Store:
    """Persistence facade over one SQLAlchemy engine."""

    def __init__(self, engine: Engine) -> None:
        self._engine = engine
        self._session_factory = sessionmaker(
            bind=engine, autoflush=False, expire_on_commit=False
        )

    @classmethod
    def from_url(cls, url: str) -> "Store":
        connect_args: dict[str, Any] = {}
        if url.startswith("sqlite"):
            connect_args["check_same_thread"] = False
        engine = create_engine(url, connect_args=connect_args, pool_pre_ping=True)
        return cls(engine)

    @property
    def engine(self) -> Engine:
        return self._engine

    @contextmanager
    def _session_scope(self) -> Iterator[Session]:
        """Single session. Commits on success, rolls back on error; SQLAlchemy errors become PersistenceError."""
        session = self._session_factory()
        try:
            yield session
            session.commit()
        except SQLAlchemyError as e:
            session.rollback()
            raise PersistenceError(str(e)) from e
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    # --- Lifecycle ---

    def ensure_schema(self) -> None:
        """Create tables and indexes if they do not exist. Safe to call on every startup."""
        try:
            Base.metadata.create_all(bind=self._engine)
        except SQLAlchemyError as e:
            raise PersistenceError(f"schema setup failed: {e}") from e

    def ping(self) -> None:
        """Round-trip SELECT 1; raises PersistenceError when the database is unreachable."""
        with self._session_scope() as session:
            session.execute(text("SELECT 1"))

    def close(self) -> None:
        self._engine.dispose()

    # --- Registrations / cursor store ---

    def upsert_watched_address(self, chain: Chain, address: str) -> bool:
        """Register (chain, address). Returns True if inserted, False if it was already present."""
        values = {
            "chain": chain.value,
            "address": address,
            "created_at": datetime.now(timezone.utc),
        }
        with self._session_scope() as session:
            inserted = self._insert_ignore(
                session, WatchedAddressRow, values, ["chain", "address"]
            )
        if inserted:
            logger.info("watched_address_registered", chain=chain.value, address=address)
        return inserted

    def get_watched(self, chain: Chain, address: str) -> WatchedAddress | None:
        with self._session_scope() as session:
            row = session.execute(
                select(WatchedAddressRow).where(
                    WatchedAddressRow.chain == chain.value,
                    WatchedAddressRow.address == address,
                )
            ).scalar_one_or_none()
            return _to_watched(row) if row is not None else None

    def list_watched(self, chain: Chain, limit: int = DEFAULT_WATCH_LIMIT) -> list[WatchedAddress]:
        """Watched addresses for chain in creation order (limit outside 1..1000 becomes 200)."""
        with self._session_scope() as session:
            rows = session.execute(
                select(WatchedAddressRow)
                .where(WatchedAddressRow.chain == chain.value)
                .order_by(WatchedAddressRow.created_at.asc(), WatchedAddressRow.id.asc())
                .limit(_clamp_watch_limit(limit))
            ).scalars().all()
            return [_to_watched(r) for r in rows]

    def advance_cursor(self, chain: Chain, address: str, candidate: int) -> None:
        """Set cursor = max(cursor, candidate); an absent cursor counts as the minimum."""
        current = WatchedAddressRow.cursor
        with self._session_scope() as session:
            session.execute(
                update(WatchedAddressRow)
                .where(
                    WatchedAddressRow.chain == chain.value,
                    WatchedAddressRow.address == address,
                )
                .values(
                    {
                        current: case(
                            (current.is_(None), candidate),
                            (current < candidate, candidate),
                            else_=current,
                        ),
                        WatchedAddressRow.updated_at: datetime.now(timezone.utc),
                    }
                )
                .execution_options(synchronize_session=False)
            )

    # --- Event store ---

    def insert_event(self, chain: Chain, event: NormalizedEvent) -> bool:
        """Insert if (chain, tx_hash, ts) is new; otherwise no-op. Returns True if a row was written."""
        values = {
            "chain": chain.value,
            "tx_hash": event.transaction_id,
            "ts": as_utc(event.timestamp),
            "sender": event.sender,
            "receiver": event.receiver,
            "token": event.token,
            "amount": event.amount,
            "fee": event.fee,
            "method": event.method,
            "raw": event.raw_json(),
            "created_at": datetime.now(timezone.utc),
        }
        with self._session_scope() as session:
            return self._insert_ignore(
                session, TxEventRow, values, ["chain", "tx_hash", "ts"]
            )

    def list_events(
        self,
        chain: Chain,
        address: str | None = None,
        limit: int = DEFAULT_HISTORY_LIMIT,
        before: datetime | None = None,
    ) -> list[TxEvent]:
        """
        Events for chain, newest first.

        address matches sender, receiver, or anywhere in the raw payload. For Sui
        the comparison ignores case and an optional 0x prefix. before keeps only
        events strictly older than it.
        """
        stmt = select(TxEventRow).where(TxEventRow.chain == chain.value)
        address = (address or "").strip()
        if address:
            stmt = stmt.where(_address_filter(chain, address))
        if before is not None:
            stmt = stmt.where(TxEventRow.ts < as_utc(before))
        stmt = stmt.order_by(TxEventRow.ts.desc(), TxEventRow.id.desc()).limit(
            clamp_history_limit(limit)
        )
        with self._session_scope() as session:
            rows = session.execute(stmt).scalars().all()
            return [_to_tx_event(r) for r in rows]

    def count_events(self, chain: Chain) -> int:
        with self._session_scope() as session:
            return session.execute(
                select(func.count()).select_from(TxEventRow).where(TxEventRow.chain == chain.value)
            ).scalar_one()

    # --- Helpers ---

    def _insert_ignore(
        self,
        session: Session,
        table: type[Base],
        values: dict[str, Any],
        conflict_columns: list[str],
    ) -> bool:
        """INSERT ... ON CONFLICT DO NOTHING; savepoint + IntegrityError on other dialects."""
        dialect = self._engine.dialect.name
        if dialect in ("postgresql", "sqlite"):
            insert = postgresql.insert if dialect == "postgresql" else sqlite.insert
            stmt = insert(table).values(**values).on_conflict_do_nothing(
                index_elements=conflict_columns
            )
            return session.execute(stmt).rowcount == 1
        try:
            with session.begin_nested():
                session.add(table(**values))
        except IntegrityError:
            return False
        return True


def _address_filter(chain: Chain, address: str) -> Any:
    if chain is Chain.SUI:
        norm = strip_hex_prefix(address).lower()
        candidates = [norm, "0x" + norm]
        return or_(
            func.lower(TxEventRow.sender, type_=String).in_(candidates),
            func.lower(TxEventRow.receiver, type_=String).in_(candidates),
            func.lower(TxEventRow.raw, type_=Text).contains(norm, autoescape=True),
        )
    return or_(
        TxEventRow.sender == address,
        TxEventRow.receiver == address,
        TxEventRow.raw.contains(address, autoescape=True),
    )


def _to_watched(row: WatchedAddressRow) -> WatchedAddress:
    return WatchedAddress(
        chain=Chain(row.chain),
        address=row.address,
        cursor=row.cursor,
        created_at=as_utc(row.created_at) if row.created_at is not None else None,
    )


def _to_tx_event(row: TxEventRow) -> TxEvent:
    return TxEvent(
        tx_hash=row.tx_hash,
        ts=as_utc(row.ts),
        sender=row.sender,
        receiver=row.receiver,
        token=row.token,
        amount=row.amount,
        fee=row.fee,
        method=row.method,
    )


def get_store(url: str) -> Store:
    """
    Build a Store for url, create the schema, and verify connectivity.

    Raises PersistenceError when the database cannot be reached; callers treat
    that as fatal at startup.
    """
    store = Store.from_url(url)
    store.ensure_schema()
    store.ping()
    logger.info("store_ready", url=url, dialect=store.engine.dialect.name)
    return store
