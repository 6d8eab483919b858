"""
Wallet Watcher — incremental Solana and Sui account activity tracker.

Polls each chain's JSON-RPC interface for watched addresses, normalizes
transactions into a uniform event record, and stores each event exactly once.
Modular layout: chain clients, store, sync workers, and API server.
"""

__version__ = "0.1.0"
