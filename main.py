"""
Main entrypoint: sync workers (one daemon thread per chain) + FastAPI server in main thread.

Modes:
  --mode all     workers in background threads, API in the main thread (default)
  --mode worker  workers only; blocks until SIGINT/SIGTERM
  --mode api     API only

The store is opened before anything starts; if the database is unreachable the
process exits with status 1. Configuration comes from the environment (.env is
loaded): DATABASE_URL, SOLANA_RPC_URL, SUI_RPC_URL, POLL_INTERVAL_SEC,
BATCH_SIZE, ENABLED_CHAINS, API_HOST, API_PORT, LOG_LEVEL, LOG_FORMAT.

API-only without this script: uvicorn wallet_watcher.api_server.app:app --port 8080
"""

import argparse
import os
import signal
import sys
import threading

# Configure structured logging before other imports that may log
from wallet_watcher.watcher_logging import get_logger

logger = get_logger("main")

MODES = ("all", "worker", "api")


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Wallet Watcher: chain sync workers and HTTP API")
    parser.add_argument("--mode", choices=MODES, default="all", help="What to run (default: all)")
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> None:
    args = parse_args(argv)

    from wallet_watcher.config import get_settings
    from wallet_watcher.core.exceptions import PersistenceError
    from wallet_watcher.database import get_store
    from wallet_watcher.sync_worker import build_workers, start_worker_threads, stop_worker_threads

    settings = get_settings()
    try:
        store = get_store(settings.database_url)
    except PersistenceError as e:
        logger.error("main_store_unavailable", url=settings.database_url, error=str(e))
        sys.exit(1)

    stop_event = threading.Event()
    threads: list[threading.Thread] = []
    workers = []
    if args.mode in ("all", "worker"):
        workers = build_workers(settings, store)
        threads = start_worker_threads(workers, settings.poll_interval_sec, stop_event)
        logger.info(
            "main_workers_started",
            chains=[w.chain.value for w in workers],
            interval_sec=settings.poll_interval_sec,
            batch_size=settings.batch_size,
        )

    try:
        if args.mode == "worker":
            for sig in (signal.SIGINT, signal.SIGTERM):
                signal.signal(sig, lambda *_: stop_event.set())
            stop_event.wait()
            logger.info("main_shutdown_requested")
        else:
            from wallet_watcher.api_server.server import create_app
            import uvicorn

            app = create_app(store=store, settings=settings)
            logger.info("main_server_starting", host=settings.api_host, port=settings.api_port)
            uvicorn.run(
                app,
                host=settings.api_host,
                port=settings.api_port,
                log_level=os.getenv("LOG_LEVEL", "info").lower(),
            )
    finally:
        stop_worker_threads(threads, stop_event)
        for worker in workers:
            worker.close()
        store.close()
        logger.info("main_stopped")


if __name__ == "__main__":
    main()
