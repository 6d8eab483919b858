"""Periodic runner loop and worker construction."""

from __future__ import annotations

import threading

from wallet_watcher.config import Settings
from wallet_watcher.core.chains import Chain
from wallet_watcher.sync_worker import (
    SolanaWorker,
    SuiWorker,
    TickStats,
    build_workers,
    run_periodic_worker,
    start_worker_threads,
    stop_worker_threads,
)


class CountingWorker:
    """Stands in for a SyncWorker; stops the loop after a number of ticks."""

    chain = Chain.SOLANA
    batch_size = 10

    def __init__(self, stop_event, stop_after, fail_on=()):
        self.stop_event = stop_event
        self.stop_after = stop_after
        self.fail_on = set(fail_on)
        self.ticks = 0
        self.ticked = threading.Event()

    def tick(self):
        self.ticks += 1
        self.ticked.set()
        if self.ticks >= self.stop_after:
            self.stop_event.set()
        if self.ticks in self.fail_on:
            raise RuntimeError("tick exploded")
        return TickStats()


def test_runner_keeps_going_after_tick_exception():
    stop = threading.Event()
    worker = CountingWorker(stop, stop_after=3, fail_on={1, 2})
    run_periodic_worker(worker, 0.01, stop)
    assert worker.ticks == 3


def test_runner_returns_immediately_when_stopped():
    stop = threading.Event()
    stop.set()
    worker = CountingWorker(stop, stop_after=1)
    run_periodic_worker(worker, 10.0, stop)
    assert worker.ticks == 0


def test_worker_threads_start_and_stop():
    stop = threading.Event()
    worker = CountingWorker(threading.Event(), stop_after=10**9)
    threads = start_worker_threads([worker], 0.01, stop)
    assert threads[0].daemon
    assert threads[0].name == "sync-solana"
    assert worker.ticked.wait(timeout=5.0)
    stop_worker_threads(threads, stop, timeout_sec=5.0)
    assert not threads[0].is_alive()


def test_build_workers_per_enabled_chain(store):
    settings = Settings(enabled_chains=(Chain.SUI,), batch_size=25, watch_list_limit=50)
    [worker] = build_workers(settings, store)
    assert isinstance(worker, SuiWorker)
    assert worker.batch_size == 25
    assert worker.watch_limit == 50
    worker.close()

    workers = build_workers(Settings(), store)
    assert [type(w) for w in workers] == [SolanaWorker, SuiWorker]
    for w in workers:
        w.close()
