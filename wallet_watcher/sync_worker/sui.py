"""
Sui sync worker.

Cursor = highest fully processed checkpoint sequence number. With a cursor the
worker pages forward (ascending) from it; without one it takes the newest page
so a freshly registered address starts at the chain tip rather than genesis.

Checkpoint summaries carry no address index, so every successful transaction
in a fetched checkpoint is persisted; history queries filter by address. A
checkpoint counts as failed when any of its transactions could not be fetched
or stored, and the cursor stays below it until a later tick succeeds.
"""

from __future__ import annotations

from wallet_watcher.chains.sui import Checkpoint, SuiClient
from wallet_watcher.core.chains import Chain
from wallet_watcher.core.exceptions import WatcherError
from wallet_watcher.database import Store, WatchedAddress
from wallet_watcher.sync_worker.base import DEFAULT_BATCH_SIZE, DEFAULT_WATCH_LIMIT, SyncWorker
from wallet_watcher.sync_worker.extraction import sui_event


class SuiWorker(SyncWorker):
    chain = Chain.SUI

    def __init__(
        self,
        store: Store,
        client: SuiClient,
        batch_size: int = DEFAULT_BATCH_SIZE,
        watch_limit: int = DEFAULT_WATCH_LIMIT,
    ) -> None:
        super().__init__(store, client, batch_size, watch_limit)

    def sync_address(self, entry: WatchedAddress) -> int:
        page = self.client.fetch_checkpoint_page(
            entry.cursor, self.batch_size, descending=entry.cursor is None
        )
        fresh = [
            cp for cp in page.checkpoints
            if entry.cursor is None or cp.sequence_number > entry.cursor
        ]
        fresh.sort(key=lambda cp: cp.sequence_number)

        inserted = 0
        succeeded: list[int] = []
        failed: list[int] = []
        for checkpoint in fresh:
            written, ok = self._ingest_checkpoint(entry, checkpoint)
            inserted += written
            (succeeded if ok else failed).append(checkpoint.sequence_number)

        self._advance(entry, succeeded, failed)
        if fresh:
            self.log.debug(
                "address_synced",
                address=entry.address,
                checkpoints=len(fresh),
                inserted=inserted,
                failed=len(failed),
            )
        return inserted

    def _ingest_checkpoint(self, entry: WatchedAddress, checkpoint: Checkpoint) -> tuple[int, bool]:
        """Returns (rows inserted, every transaction handled)."""
        inserted = 0
        ok = True
        for digest in checkpoint.transactions:
            try:
                detail = self.client.fetch_transaction_detail(digest)
                if not detail.succeeded:
                    self.log.debug("transaction_skipped", digest=digest, status=detail.status)
                    continue
                if self.store.insert_event(self.chain, sui_event(detail, checkpoint.timestamp_ms)):
                    inserted += 1
            except WatcherError as e:
                ok = False
                self.log.warning(
                    "transaction_ingest_failed",
                    address=entry.address,
                    digest=digest,
                    checkpoint=checkpoint.sequence_number,
                    error=str(e),
                )
        return inserted, ok
