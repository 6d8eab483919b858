"""
Best-effort projection of chain payloads into NormalizedEvent.

Typed fields are heuristics: Solana sender/receiver are the first two account
keys, Sui sender is the first pure address input. Anything that cannot be
derived stays None; raw always carries the full decoded payload. Stricter
per-program decoding can replace these functions without touching the workers.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any

from wallet_watcher.chains.solana import SignatureInfo
from wallet_watcher.chains.solana import TransactionDetail as SolanaTransaction
from wallet_watcher.chains.sui import TransactionDetail as SuiTransaction
from wallet_watcher.database import NormalizedEvent

INPUT_TYPE_PURE = "pure"
VALUE_TYPE_ADDRESS = "address"


def timestamp_from_seconds(seconds: int | None) -> datetime:
    """Unix seconds to UTC; missing or non-positive values fall back to now."""
    if seconds is None or seconds <= 0:
        return datetime.now(timezone.utc)
    return datetime.fromtimestamp(seconds, tz=timezone.utc)


def timestamp_from_millis(millis: int | None) -> datetime:
    """Unix milliseconds to UTC, keeping the sub-second part; falls back to now."""
    if millis is None or millis <= 0:
        return datetime.now(timezone.utc)
    seconds, remainder = divmod(millis, 1000)
    return datetime.fromtimestamp(seconds, tz=timezone.utc).replace(microsecond=remainder * 1000)


def solana_event(info: SignatureInfo, tx: SolanaTransaction) -> NormalizedEvent:
    keys = tx.account_keys
    block_time = tx.block_time if tx.block_time is not None else info.block_time
    return NormalizedEvent(
        transaction_id=info.signature,
        timestamp=timestamp_from_seconds(block_time),
        sender=keys[0] if len(keys) > 0 else None,
        receiver=keys[1] if len(keys) > 1 else None,
        fee=tx.fee,
        raw=tx.raw,
    )


def sui_sender(tx: SuiTransaction) -> str | None:
    for item in tx.inputs:
        if item.type == INPUT_TYPE_PURE and item.value_type == VALUE_TYPE_ADDRESS:
            if isinstance(item.value, str) and item.value:
                return item.value
    return None


def sui_fee(tx: SuiTransaction) -> int | None:
    """computationCost + storageCost; the storage rebate is not subtracted."""
    gas = tx.gas_used
    if gas.computation_cost is None and gas.storage_cost is None:
        return None
    return (gas.computation_cost or 0) + (gas.storage_cost or 0)


def sui_method(tx: SuiTransaction) -> str | None:
    """Kind of the first programmable command, e.g. MoveCall or TransferObjects."""
    if not tx.commands:
        return None
    return _command_kind(tx.commands[0])


def _command_kind(command: Any) -> str | None:
    if isinstance(command, str):
        return command
    if not isinstance(command, dict):
        return None
    kind = command.get("kind")
    if isinstance(kind, str) and kind:
        return kind
    # {"MoveCall": {...}} style
    if len(command) == 1:
        return next(iter(command))
    return None


def sui_event(tx: SuiTransaction, checkpoint_timestamp_ms: int | None) -> NormalizedEvent:
    millis = checkpoint_timestamp_ms if checkpoint_timestamp_ms else tx.timestamp_ms
    return NormalizedEvent(
        transaction_id=tx.digest,
        timestamp=timestamp_from_millis(millis),
        sender=sui_sender(tx),
        fee=sui_fee(tx),
        method=sui_method(tx),
        raw=tx.raw,
    )
