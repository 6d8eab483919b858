"""
Structured logging for the sync workers, store, and API.

Every line is one JSON object (LOG_FORMAT=json, the default) or a console
rendering (any other LOG_FORMAT) with:
- timestamp: ISO 8601, UTC
- level
- event_type: snake_case event name (first positional argument)
- logger: module name
- keyword context such as chain, address, signature, digest, error

Values under url-like keys are masked before rendering, so RPC api keys and
database passwords never reach the log stream.

No wallet_watcher imports here; everything else imports this module.
"""

from __future__ import annotations

import logging
import os
import sys
from datetime import datetime, timezone
from typing import Any

import structlog

URL_KEYS = ("url", "rpc_url", "database_url")


def mask_url(url: str) -> str:
    """Hide api keys and credentials in URLs before logging."""
    if "api-key=" in url:
        url = url.split("api-key=")[0] + "api-key=***"
    if "@" in url and "://" in url:
        scheme, rest = url.split("://", 1)
        url = f"{scheme}://***@{rest.split('@', 1)[1]}"
    return url


def _add_timestamp(logger: Any, method_name: str, event_dict: dict[str, Any]) -> dict[str, Any]:
    event_dict.setdefault("timestamp", datetime.now(timezone.utc).isoformat())
    return event_dict


def _event_type(logger: Any, method_name: str, event_dict: dict[str, Any]) -> dict[str, Any]:
    """structlog's positional 'event' becomes event_type."""
    if "event" in event_dict and "event_type" not in event_dict:
        event_dict["event_type"] = event_dict.pop("event")
    return event_dict


def _mask_urls(logger: Any, method_name: str, event_dict: dict[str, Any]) -> dict[str, Any]:
    for key in URL_KEYS:
        value = event_dict.get(key)
        if isinstance(value, str):
            event_dict[key] = mask_url(value)
    return event_dict


def configure_structlog(level: str | None = None, fmt: str | None = None) -> None:
    """
    (Re)configure structlog. Defaults come from LOG_LEVEL (INFO) and
    LOG_FORMAT (json). Called once on import; call again to change either.
    """
    level_name = (level or os.getenv("LOG_LEVEL") or "INFO").strip().upper()
    level_value = getattr(logging, level_name, logging.INFO)
    render_json = (fmt or os.getenv("LOG_FORMAT") or "json").strip().lower() == "json"

    processors: list[Any] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.format_exc_info,
        _add_timestamp,
        _event_type,
        _mask_urls,
    ]
    if render_json:
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty()))
    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(level_value),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=sys.stdout),
        cache_logger_on_first_use=True,
    )


if not structlog.is_configured():
    configure_structlog()


def get_logger(name: str) -> structlog.BoundLogger:
    """
    Return a structured logger for the given module name.

        logger = get_logger(__name__)
        logger.info("tick_done", chain="solana", addresses=3, inserted=7)
    """
    return structlog.get_logger(name).bind(logger=name)


def bind_chain(name: str, chain: str) -> structlog.BoundLogger:
    """Logger with chain bound to every call; each sync worker holds one."""
    return get_logger(name).bind(chain=chain)
