"""
Configuration management for Wallet Watcher.

Loads settings from environment variables and an optional .env file.
Exposes a single source of truth for RPC endpoints, polling cadence, and storage.
"""

from wallet_watcher.config.settings import Settings, get_settings  # noqa: F401

__all__ = ["Settings", "get_settings"]
