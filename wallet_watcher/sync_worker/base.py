"""
Synchronization worker base.

A worker owns its store handle, chain client, and batch size; there is no
module-level state. tick() runs one pass over the chain's watch list:
every address is processed independently, and a failure on one address is
logged and never stops the others. Events are persisted before the cursor
is advanced, so a crash between the two only causes a harmless re-ingest.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Iterable

from wallet_watcher.core.chains import Chain
from wallet_watcher.database import Store, WatchedAddress
from wallet_watcher.watcher_logging import bind_chain

DEFAULT_BATCH_SIZE = 10
DEFAULT_WATCH_LIMIT = 200


@dataclass
class TickStats:
    """Counters for one tick."""

    addresses: int = 0
    inserted: int = 0
    failed_addresses: int = 0


def next_cursor(
    previous: int | None,
    succeeded: Iterable[int],
    failed: Iterable[int],
) -> int | None:
    """
    Position the cursor may move to after one address pass, or None to leave it.

    Only successful positions beyond previous count, and only those strictly
    below the lowest failed position, so a failure is retried next tick.
    """
    failed = list(failed)
    ceiling = min(failed) if failed else None
    eligible = [
        p
        for p in succeeded
        if (previous is None or p > previous) and (ceiling is None or p < ceiling)
    ]
    return max(eligible) if eligible else None


class SyncWorker(ABC):
    """One chain's polling loop body."""

    chain: Chain

    def __init__(
        self,
        store: Store,
        client: Any,
        batch_size: int = DEFAULT_BATCH_SIZE,
        watch_limit: int = DEFAULT_WATCH_LIMIT,
    ) -> None:
        self.store = store
        self.client = client
        self.batch_size = batch_size if batch_size > 0 else DEFAULT_BATCH_SIZE
        self.watch_limit = watch_limit if watch_limit > 0 else DEFAULT_WATCH_LIMIT
        self.log = bind_chain(type(self).__module__, self.chain.value)

    def tick(self) -> TickStats:
        """One pass over the watch list. Raises only if the watch list cannot be read."""
        stats = TickStats()
        watched = self.store.list_watched(self.chain, limit=self.watch_limit)
        for entry in watched:
            stats.addresses += 1
            try:
                stats.inserted += self.sync_address(entry)
            except Exception as e:
                stats.failed_addresses += 1
                self.log.warning(
                    "address_sync_failed",
                    address=entry.address,
                    cursor=entry.cursor,
                    error=str(e),
                )
        self.log.info(
            "tick_done",
            addresses=stats.addresses,
            inserted=stats.inserted,
            failed_addresses=stats.failed_addresses,
        )
        return stats

    @abstractmethod
    def sync_address(self, entry: WatchedAddress) -> int:
        """Ingest new activity for one address and advance its cursor. Returns rows inserted."""

    def _advance(self, entry: WatchedAddress, succeeded: list[int], failed: list[int]) -> None:
        target = next_cursor(entry.cursor, succeeded, failed)
        if target is None:
            return
        self.store.advance_cursor(self.chain, entry.address, target)
        self.log.debug(
            "cursor_advanced",
            address=entry.address,
            previous=entry.cursor,
            cursor=target,
        )

    def close(self) -> None:
        close = getattr(self.client, "close", None)
        if close is not None:
            close()
