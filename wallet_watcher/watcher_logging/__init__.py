"""
Structured logging for Wallet Watcher.

JSON logs with timestamp, event_type, chain, and address context; URLs masked.
Use get_logger() in all modules for aggregation-friendly output.
"""

from wallet_watcher.watcher_logging.logger import bind_chain, configure_structlog, get_logger, mask_url

__all__ = ["bind_chain", "configure_structlog", "get_logger", "mask_url"]
