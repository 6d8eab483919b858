"""
Data models for Solana RPC responses.

Each model decodes one result shape defensively and raises DecodeError when a
required field is missing or mistyped. Optional fields degrade to None.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from wallet_watcher.chains.flex import decode_flex_uint, require_flex_uint
from wallet_watcher.core.exceptions import DecodeError


def _optional_int(value: Any) -> int | None:
    """blockTime may be null, missing, or (rarely) negative; keep plain ints only."""
    if isinstance(value, int) and not isinstance(value, bool):
        return value
    return None


@dataclass(frozen=True)
class SignatureInfo:
    """
    One getSignaturesForAddress item; the unit of candidate work for the Solana worker.
    """

    signature: str
    slot: int
    err: Any  # None if success; dict/object from RPC if failed
    block_time: int | None  # Unix timestamp; None if not available
    memo: str | None
    confirmation_status: str | None  # processed | confirmed | finalized

    @classmethod
    def from_rpc_item(cls, item: Any) -> "SignatureInfo":
        """Build from a single getSignaturesForAddress result item."""
        if not isinstance(item, dict):
            raise DecodeError(f"signature item is not an object: {item!r}")
        sig = item.get("signature")
        if not isinstance(sig, str) or not sig:
            raise DecodeError("signature item has no signature")
        return cls(
            signature=sig,
            slot=require_flex_uint(item.get("slot"), "slot"),
            err=item.get("err"),
            block_time=_optional_int(item.get("blockTime")),
            memo=item.get("memo") if isinstance(item.get("memo"), str) else None,
            confirmation_status=item.get("confirmationStatus"),
        )


def get_account_keys(message: dict[str, Any], meta: dict[str, Any] | None = None) -> list[str]:
    """
    Resolve accountKeys to a list of base58 strings (handles json vs jsonParsed).
    For versioned transactions, appends meta.loadedAddresses (writable + readonly).
    """
    keys = message.get("accountKeys") or []
    out: list[str] = []
    for k in keys:
        if isinstance(k, str):
            out.append(k)
        elif isinstance(k, dict) and isinstance(k.get("pubkey"), str):
            out.append(k["pubkey"])
    loaded = (meta or {}).get("loadedAddresses") or {}
    if isinstance(loaded, dict):
        for role in ("writable", "readonly"):
            for addr in loaded.get(role) or []:
                if isinstance(addr, str):
                    out.append(addr)
    return out


@dataclass(frozen=True)
class TransactionDetail:
    """getTransaction result projected to what normalization needs; raw keeps everything."""

    signature: str
    slot: int
    block_time: int | None
    fee: int | None
    account_keys: list[str]
    raw: dict[str, Any] = field(repr=False)

    @classmethod
    def from_rpc_result(cls, signature: str, result: Any) -> "TransactionDetail":
        if result is None:
            raise DecodeError(f"transaction {signature} not available")
        if not isinstance(result, dict):
            raise DecodeError("getTransaction result is not an object")
        tx = result.get("transaction")
        if not isinstance(tx, dict) or not isinstance(tx.get("message"), dict):
            raise DecodeError("getTransaction result has no transaction.message")
        meta = result.get("meta")
        if meta is not None and not isinstance(meta, dict):
            raise DecodeError("getTransaction meta is not an object")
        fee = decode_flex_uint(meta.get("fee")) if meta else None
        return cls(
            signature=signature,
            slot=require_flex_uint(result.get("slot"), "slot"),
            block_time=_optional_int(result.get("blockTime")),
            fee=fee,
            account_keys=get_account_keys(tx["message"], meta),
            raw=result,
        )
