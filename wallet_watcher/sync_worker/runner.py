"""
Worker runner — periodic loop and thread lifecycle.

- run_periodic_worker(): tick a worker every interval_sec until stop_event is set.
- build_workers(): one worker per enabled chain, each with its own RPC client.
- start_worker_threads(): run each worker loop in a daemon thread (one writer per chain).
"""

from __future__ import annotations

import threading
import time

from wallet_watcher.chains.solana import SolanaClient
from wallet_watcher.chains.sui import SuiClient
from wallet_watcher.config import Settings
from wallet_watcher.core.chains import Chain
from wallet_watcher.database import Store
from wallet_watcher.sync_worker.base import SyncWorker
from wallet_watcher.sync_worker.solana import SolanaWorker
from wallet_watcher.sync_worker.sui import SuiWorker
from wallet_watcher.watcher_logging import get_logger

logger = get_logger(__name__)

MIN_INTERVAL_SEC = 0.05
SHUTDOWN_JOIN_TIMEOUT_SEC = 15.0


def run_periodic_worker(
    worker: SyncWorker,
    interval_sec: float,
    stop_event: threading.Event,
) -> None:
    """
    Run worker.tick() every interval_sec until stop_event is set.

    The interval is measured from the start of each tick and ticks never
    overlap: a tick that overruns is followed immediately by the next one.
    Exceptions escaping a tick are logged and the loop continues.
    """
    chain = worker.chain.value
    interval = max(MIN_INTERVAL_SEC, interval_sec)
    logger.info("worker_started", chain=chain, interval_sec=interval, batch_size=worker.batch_size)
    tick_count = 0
    while not stop_event.is_set():
        tick_start = time.monotonic()
        tick_count += 1
        try:
            worker.tick()
        except Exception as e:
            logger.exception("tick_failed", chain=chain, tick=tick_count, error=str(e))
        # Sleep until next tick; wake early on stop
        remaining = tick_start + interval - time.monotonic()
        if remaining > 0:
            stop_event.wait(timeout=remaining)
    logger.info("worker_stopped", chain=chain, tick_count=tick_count)


def build_workers(settings: Settings, store: Store) -> list[SyncWorker]:
    workers: list[SyncWorker] = []
    for chain in settings.enabled_chains:
        url = settings.rpc_url_for(chain)
        if chain is Chain.SOLANA:
            workers.append(
                SolanaWorker(
                    store,
                    SolanaClient(url, timeout_sec=settings.rpc_timeout_sec),
                    batch_size=settings.batch_size,
                    watch_limit=settings.watch_list_limit,
                )
            )
        elif chain is Chain.SUI:
            workers.append(
                SuiWorker(
                    store,
                    SuiClient(url, timeout_sec=settings.rpc_timeout_sec),
                    batch_size=settings.batch_size,
                    watch_limit=settings.watch_list_limit,
                )
            )
    return workers


def start_worker_threads(
    workers: list[SyncWorker],
    interval_sec: float,
    stop_event: threading.Event,
) -> list[threading.Thread]:
    threads: list[threading.Thread] = []
    for worker in workers:
        thread = threading.Thread(
            target=run_periodic_worker,
            args=(worker, interval_sec, stop_event),
            name=f"sync-{worker.chain.value}",
            daemon=True,
        )
        thread.start()
        threads.append(thread)
    return threads


def stop_worker_threads(
    threads: list[threading.Thread],
    stop_event: threading.Event,
    timeout_sec: float = SHUTDOWN_JOIN_TIMEOUT_SEC,
) -> None:
    """Signal stop and join each thread; a thread stuck in an RPC call is left to die with the process."""
    stop_event.set()
    for thread in threads:
        thread.join(timeout=timeout_sec)
        if thread.is_alive():
            logger.warning("worker_join_timeout", thread=thread.name, timeout_sec=timeout_sec)
