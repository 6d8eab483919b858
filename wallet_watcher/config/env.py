"""
Environment variable loading for Wallet Watcher.

- DATABASE_URL: SQLAlchemy URL (PostgreSQL in production, SQLite locally)
- SOLANA_RPC_URL / SUI_RPC_URL: JSON-RPC endpoints
- Loads .env from project root when available.
"""

from __future__ import annotations

import os
from pathlib import Path

from dotenv import load_dotenv

# Project root: config is wallet_watcher/config/, root is 2 levels up
_CONFIG_DIR = Path(__file__).resolve().parent
_PACKAGE_DIR = _CONFIG_DIR.parent
_ROOT = _PACKAGE_DIR.parent
_ENV_PATH = _ROOT / ".env"

SOLANA_MAINNET_RPC_URL = "https://api.mainnet-beta.solana.com"
SUI_MAINNET_RPC_URL = "https://fullnode.mainnet.sui.io:443"
DEFAULT_DATABASE_URL = "sqlite:///wallet_watcher.db"


def load_watcher_env() -> None:
    """Load .env from project root. Existing env vars win. Safe to call multiple times."""
    load_dotenv(_ENV_PATH)


def env_str(name: str, default: str) -> str:
    """Return stripped env value, or default when unset or blank."""
    raw = (os.getenv(name) or "").strip()
    return raw or default


def env_int(name: str, default: int, *, minimum: int = 1) -> int:
    """Return env value as int; unparseable or below minimum falls back to default."""
    raw = (os.getenv(name) or "").strip()
    if not raw:
        return default
    try:
        value = int(raw)
    except ValueError:
        return default
    return value if value >= minimum else default


def env_float(name: str, default: float) -> float:
    """Return env value as a positive float; otherwise default."""
    raw = (os.getenv(name) or "").strip()
    if not raw:
        return default
    try:
        value = float(raw)
    except ValueError:
        return default
    return value if value > 0 else default


def env_list(name: str, default: tuple[str, ...]) -> tuple[str, ...]:
    """Return comma-separated env value as a lowercase tuple; empty falls back to default."""
    raw = (os.getenv(name) or "").strip()
    items = tuple(p.strip().lower() for p in raw.split(",") if p.strip())
    return items or default

