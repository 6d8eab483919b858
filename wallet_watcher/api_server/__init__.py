"""HTTP API: register watched addresses, query history, read balances."""

from wallet_watcher.api_server.server import create_app

__all__ = ["create_app"]
