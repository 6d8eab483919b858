"""
Application settings.

Typed, immutable view of the environment: RPC endpoints, database URL,
poll interval, batch size, and API bind address. Read once at process start
and passed explicitly to the store, workers, and API server.
"""

from __future__ import annotations

from dataclasses import dataclass

from wallet_watcher.config.env import (
    DEFAULT_DATABASE_URL,
    SOLANA_MAINNET_RPC_URL,
    SUI_MAINNET_RPC_URL,
    env_float,
    env_int,
    env_list,
    env_str,
    load_watcher_env,
)
from wallet_watcher.core.chains import Chain

DEFAULT_POLL_INTERVAL_SEC = 5.0
DEFAULT_BATCH_SIZE = 10
DEFAULT_WATCH_LIST_LIMIT = 200
DEFAULT_RPC_TIMEOUT_SEC = 15.0
DEFAULT_API_PORT = 8080


@dataclass(frozen=True)
class Settings:
    """Process configuration read from the environment."""

    database_url: str = DEFAULT_DATABASE_URL
    solana_rpc_url: str = SOLANA_MAINNET_RPC_URL
    sui_rpc_url: str = SUI_MAINNET_RPC_URL
    poll_interval_sec: float = DEFAULT_POLL_INTERVAL_SEC
    batch_size: int = DEFAULT_BATCH_SIZE
    watch_list_limit: int = DEFAULT_WATCH_LIST_LIMIT
    rpc_timeout_sec: float = DEFAULT_RPC_TIMEOUT_SEC
    enabled_chains: tuple[Chain, ...] = (Chain.SOLANA, Chain.SUI)
    api_host: str = "0.0.0.0"
    api_port: int = DEFAULT_API_PORT

    def rpc_url_for(self, chain: Chain) -> str:
        return self.solana_rpc_url if chain is Chain.SOLANA else self.sui_rpc_url


def _parse_chains(names: tuple[str, ...]) -> tuple[Chain, ...]:
    chains: list[Chain] = []
    for name in names:
        try:
            chain = Chain(name)
        except ValueError:
            continue
        if chain not in chains:
            chains.append(chain)
    return tuple(chains) or (Chain.SOLANA, Chain.SUI)


def get_settings() -> Settings:
    """
    Return settings built from the current environment (after loading .env).

    Unparseable numeric values fall back to their defaults.
    """
    load_watcher_env()
    return Settings(
        database_url=env_str("DATABASE_URL", DEFAULT_DATABASE_URL),
        solana_rpc_url=env_str("SOLANA_RPC_URL", SOLANA_MAINNET_RPC_URL),
        sui_rpc_url=env_str("SUI_RPC_URL", SUI_MAINNET_RPC_URL),
        poll_interval_sec=env_float("POLL_INTERVAL_SEC", DEFAULT_POLL_INTERVAL_SEC),
        batch_size=env_int("BATCH_SIZE", DEFAULT_BATCH_SIZE),
        watch_list_limit=env_int("WATCH_LIST_LIMIT", DEFAULT_WATCH_LIST_LIMIT),
        rpc_timeout_sec=env_float("RPC_TIMEOUT_SEC", DEFAULT_RPC_TIMEOUT_SEC),
        enabled_chains=_parse_chains(env_list("ENABLED_CHAINS", ("solana", "sui"))),
        api_host=env_str("API_HOST", "0.0.0.0"),
        api_port=env_int("API_PORT", DEFAULT_API_PORT),
    )
