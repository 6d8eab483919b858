"""
Solana sync worker.

Cursor = highest slot of any ingested transaction for the address. Each tick
asks for the newest batch_size signatures, keeps those above the cursor, and
ingests them oldest first.
"""

from __future__ import annotations

from wallet_watcher.chains.solana import SolanaClient
from wallet_watcher.core.chains import Chain
from wallet_watcher.core.exceptions import WatcherError
from wallet_watcher.database import Store, WatchedAddress
from wallet_watcher.sync_worker.base import DEFAULT_BATCH_SIZE, DEFAULT_WATCH_LIMIT, SyncWorker
from wallet_watcher.sync_worker.extraction import solana_event


class SolanaWorker(SyncWorker):
    chain = Chain.SOLANA

    def __init__(
        self,
        store: Store,
        client: SolanaClient,
        batch_size: int = DEFAULT_BATCH_SIZE,
        watch_limit: int = DEFAULT_WATCH_LIMIT,
    ) -> None:
        super().__init__(store, client, batch_size, watch_limit)

    def sync_address(self, entry: WatchedAddress) -> int:
        signatures = self.client.list_recent_activity(entry.address, self.batch_size)
        fresh = [s for s in signatures if entry.cursor is None or s.slot > entry.cursor]
        fresh.sort(key=lambda s: s.slot)

        inserted = 0
        succeeded: list[int] = []
        failed: list[int] = []
        for info in fresh:
            try:
                detail = self.client.fetch_detail(info.signature)
                if self.store.insert_event(self.chain, solana_event(info, detail)):
                    inserted += 1
            except WatcherError as e:
                failed.append(info.slot)
                self.log.warning(
                    "transaction_ingest_failed",
                    address=entry.address,
                    signature=info.signature,
                    slot=info.slot,
                    error=str(e),
                )
                continue
            succeeded.append(info.slot)

        self._advance(entry, succeeded, failed)
        if fresh:
            self.log.debug(
                "address_synced",
                address=entry.address,
                candidates=len(fresh),
                inserted=inserted,
                failed=len(failed),
            )
        return inserted
