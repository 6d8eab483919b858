"""
FastAPI server — registration, event history, and live balances.

create_app() builds the application around a Store and Settings. When no
store is supplied, the lifespan opens one from DATABASE_URL (startup fails if
the database is unreachable). With run_workers=True the lifespan also starts
one sync worker thread per enabled chain and stops them on shutdown.

Errors: bad input is 400 with a message naming the field; anything else is
500 with a fixed message (internal error text is logged, never returned).
"""

from __future__ import annotations

import threading
from contextlib import asynccontextmanager
from typing import Any

from fastapi import FastAPI, HTTPException, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from wallet_watcher import __version__
from wallet_watcher.chains.solana import SolanaClient
from wallet_watcher.chains.sui import SuiClient
from wallet_watcher.config import Settings, get_settings
from wallet_watcher.core.chains import Chain, parse_chain
from wallet_watcher.core.exceptions import ValidationError, WatcherError
from wallet_watcher.database import (
    Store,
    clamp_history_limit,
    get_store,
    isoformat_utc,
    parse_timestamp,
)
from wallet_watcher.sync_worker import build_workers, start_worker_threads, stop_worker_threads
from wallet_watcher.utils.address import validate_chain_and_address
from wallet_watcher.watcher_logging import get_logger

logger = get_logger(__name__)


# -----------------------------------------------------------------------------
# Request / response models
# -----------------------------------------------------------------------------

class RegisterRequest(BaseModel):
    """POST /register body."""

    chain: str = Field("", description="solana or sui")
    address: str = Field("", description="Solana base58 public key or Sui hex address")


class RegisterResponse(BaseModel):
    chain: str
    address: str = Field(..., description="Canonical address as stored")
    registered: bool = Field(..., description="True if newly added, False if already watched")


class EventResponse(BaseModel):
    """One stored event, newest-first in history responses."""

    tx_hash: str
    ts: str = Field(..., description="RFC 3339 UTC timestamp")
    sender: str | None = None
    receiver: str | None = None
    token: str | None = None
    amount: int | None = None
    fee: int | None = None
    method: str | None = None


class HistoryResponse(BaseModel):
    events: list[EventResponse]
    next_before: str | None = Field(
        None, description="Pass as before= to fetch the next page; present only when the page is full"
    )


class BalanceResponse(BaseModel):
    token: str
    amount: int


class BalancesResponse(BaseModel):
    address: str
    balances: list[BalanceResponse]


# -----------------------------------------------------------------------------
# Dependencies
# -----------------------------------------------------------------------------

def _store(request: Request) -> Store:
    store = request.app.state.store
    if store is None:
        raise HTTPException(status_code=503, detail="Store not ready")
    return store


def _balance_client(request: Request, chain: Chain) -> Any:
    """Per-app RPC client for chain, created on first use."""
    clients: dict[Chain, Any] = request.app.state.balance_clients
    with request.app.state.clients_lock:
        client = clients.get(chain)
        if client is None:
            settings: Settings = request.app.state.settings
            factory = SolanaClient if chain is Chain.SOLANA else SuiClient
            client = factory(settings.rpc_url_for(chain), timeout_sec=settings.rpc_timeout_sec)
            clients[chain] = client
            request.app.state.owned_clients.append(client)
    return client


def _parse_limit(raw: str | None) -> int:
    if raw is None or not raw.strip():
        return clamp_history_limit(None)
    try:
        return clamp_history_limit(int(raw))
    except ValueError:
        return clamp_history_limit(None)


# -----------------------------------------------------------------------------
# App factory
# -----------------------------------------------------------------------------

def create_app(
    store: Store | None = None,
    settings: Settings | None = None,
    *,
    balance_clients: dict[Chain, Any] | None = None,
    run_workers: bool = False,
) -> FastAPI:
    settings = settings or get_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Open the store if needed and run sync workers in background threads; stop them on shutdown."""
        owns_store = app.state.store is None
        if owns_store:
            app.state.store = get_store(settings.database_url)

        stop_event = threading.Event()
        workers = []
        threads: list[threading.Thread] = []
        if run_workers:
            workers = build_workers(settings, app.state.store)
            threads = start_worker_threads(workers, settings.poll_interval_sec, stop_event)
            logger.info(
                "api_workers_started",
                chains=[w.chain.value for w in workers],
                interval_sec=settings.poll_interval_sec,
            )

        yield

        stop_worker_threads(threads, stop_event)
        for worker in workers:
            worker.close()
        for client in app.state.owned_clients:
            client.close()
        if owns_store:
            app.state.store.close()
        logger.info("api_stopped")

    app = FastAPI(
        title="Wallet Watcher API",
        description="Register addresses, query ingested transaction history, and read live balances.",
        version=__version__,
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.store = store
    app.state.balance_clients = dict(balance_clients or {})
    app.state.owned_clients = []
    app.state.clients_lock = threading.Lock()

    @app.get("/health")
    def health() -> dict[str, str]:
        """Liveness probe: API is up."""
        return {"status": "ok"}

    @app.post("/register", response_model=RegisterResponse)
    def register(body: RegisterRequest, request: Request) -> JSONResponse:
        """
        Start watching (chain, address). Returns 201 when newly added, 200 when
        already watched. Sui addresses are stored as lowercase 0x-hex.
        """
        try:
            chain, address = validate_chain_and_address(body.chain, body.address)
        except ValidationError as e:
            raise HTTPException(status_code=400, detail=str(e)) from e
        try:
            registered = _store(request).upsert_watched_address(chain, address)
        except WatcherError as e:
            logger.exception("register_failed", chain=chain.value, address=address, error=str(e))
            raise HTTPException(status_code=500, detail="Failed to register address") from e
        return JSONResponse(
            status_code=201 if registered else 200,
            content=RegisterResponse(
                chain=chain.value, address=address, registered=registered
            ).model_dump(),
        )

    @app.get("/history", response_model=HistoryResponse, response_model_exclude_unset=True)
    def history(
        request: Request,
        chain: str = "",
        address: str | None = None,
        limit: str | None = None,
        before: str | None = None,
    ) -> HistoryResponse:
        """
        Stored events for chain, newest first, optionally filtered by address.

        limit outside 1..200 (or unparseable) falls back to 50. before is an
        RFC 3339 timestamp; only strictly older events are returned.
        """
        try:
            parsed_chain = parse_chain(chain)
        except ValidationError as e:
            raise HTTPException(status_code=400, detail=str(e)) from e
        before_ts = None
        if before:
            try:
                before_ts = parse_timestamp(before)
            except ValueError as e:
                raise HTTPException(
                    status_code=400, detail="invalid 'before' (use RFC 3339)"
                ) from e
        page_size = _parse_limit(limit)
        try:
            events = _store(request).list_events(
                parsed_chain, address=address, limit=page_size, before=before_ts
            )
        except WatcherError as e:
            logger.exception("history_failed", chain=parsed_chain.value, error=str(e))
            raise HTTPException(status_code=500, detail="Failed to list events") from e
        resp = HistoryResponse(events=[EventResponse(**e.to_dict()) for e in events])
        if len(events) == page_size:
            resp.next_before = isoformat_utc(events[-1].ts)
        return resp

    def _balances(request: Request, chain: str, address: str) -> BalancesResponse:
        try:
            parsed_chain, canonical = validate_chain_and_address(chain, address)
        except ValidationError as e:
            raise HTTPException(status_code=400, detail=str(e)) from e
        try:
            balances = _balance_client(request, parsed_chain).get_balances(canonical)
        except WatcherError as e:
            logger.warning(
                "balances_failed", chain=parsed_chain.value, address=canonical, error=str(e)
            )
            raise HTTPException(status_code=500, detail="Failed to get balances") from e
        return BalancesResponse(
            address=canonical,
            balances=[BalanceResponse(**b.to_dict()) for b in balances],
        )

    @app.get("/balances", response_model=BalancesResponse)
    def balances_query(request: Request, chain: str = "", address: str = "") -> BalancesResponse:
        """Live balances read from the chain's RPC node (not from the store)."""
        return _balances(request, chain, address)

    @app.get("/{chain}/balances/{address}", response_model=BalancesResponse)
    def balances_path(request: Request, chain: str, address: str) -> BalancesResponse:
        return _balances(request, chain, address)

    @app.exception_handler(RequestValidationError)
    def request_validation_handler(request: Any, exc: RequestValidationError) -> JSONResponse:
        """Malformed request bodies are client errors, reported as 400 like every other input error."""
        return JSONResponse(status_code=400, content={"detail": "invalid request body"})

    @app.exception_handler(HTTPException)
    def http_exception_handler(request: Any, exc: HTTPException) -> JSONResponse:
        """Consistent JSON error response for HTTPException."""
        return JSONResponse(
            status_code=exc.status_code,
            content={"detail": exc.detail},
        )

    return app
