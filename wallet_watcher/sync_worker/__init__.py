"""
Chain synchronization workers.

One worker per chain polls its RPC endpoint for new activity of watched
addresses, persists normalized events, and advances each address cursor.
"""

from wallet_watcher.sync_worker.base import SyncWorker, TickStats, next_cursor
from wallet_watcher.sync_worker.runner import (
    build_workers,
    run_periodic_worker,
    start_worker_threads,
    stop_worker_threads,
)
from wallet_watcher.sync_worker.solana import SolanaWorker
from wallet_watcher.sync_worker.sui import SuiWorker

__all__ = [
    "SolanaWorker",
    "SuiWorker",
    "SyncWorker",
    "TickStats",
    "build_workers",
    "next_cursor",
    "run_periodic_worker",
    "start_worker_threads",
    "stop_worker_threads",
]
