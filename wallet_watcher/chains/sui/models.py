"""
Data models for Sui RPC responses.

Sui nodes vary by version: integers arrive as numbers or strings, and the
programmable transaction body sits under transaction.data.transaction on
current nodes and transaction.data.message on older ones. Decoders accept
both and route every integer through the flexible decoder.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from wallet_watcher.chains.flex import decode_flex_uint, require_flex_uint
from wallet_watcher.core.exceptions import DecodeError

STATUS_SUCCESS = "success"


def _require_object(value: Any, what: str) -> dict[str, Any]:
    if not isinstance(value, dict):
        raise DecodeError(f"{what} is not an object")
    return value


def _optional_object(value: Any, what: str) -> dict[str, Any]:
    if value is None:
        return {}
    return _require_object(value, what)


@dataclass(frozen=True)
class TransactionSummary:
    """Digest plus optional timestamp of a transaction block."""

    digest: str
    timestamp_ms: int | None

    @classmethod
    def from_rpc_result(cls, digest: str, result: Any) -> "TransactionSummary":
        obj = _require_object(result, "getTransactionBlock result")
        got = obj.get("digest")
        return cls(
            digest=got if isinstance(got, str) and got else digest,
            timestamp_ms=decode_flex_uint(obj.get("timestampMs")),
        )


@dataclass(frozen=True)
class Checkpoint:
    """Checkpoint summary: sequence number, timestamp, and contained transaction digests."""

    sequence_number: int
    timestamp_ms: int | None
    transactions: list[str]

    @classmethod
    def from_rpc_item(cls, item: Any) -> "Checkpoint":
        obj = _require_object(item, "checkpoint")
        txs = obj.get("transactions") or []
        if not isinstance(txs, list) or not all(isinstance(t, str) for t in txs):
            raise DecodeError("checkpoint transactions is not a list of digests")
        return cls(
            sequence_number=require_flex_uint(obj.get("sequenceNumber"), "sequenceNumber"),
            timestamp_ms=decode_flex_uint(obj.get("timestampMs")),
            transactions=list(txs),
        )


@dataclass(frozen=True)
class CheckpointPage:
    """One page of sui_getCheckpoints."""

    checkpoints: list[Checkpoint]
    next_cursor: str | None
    has_next_page: bool

    @classmethod
    def from_rpc_result(cls, result: Any) -> "CheckpointPage":
        obj = _require_object(result, "getCheckpoints result")
        data = obj.get("data") or []
        if not isinstance(data, list):
            raise DecodeError("getCheckpoints data is not a list")
        next_cursor = obj.get("nextCursor")
        return cls(
            checkpoints=[Checkpoint.from_rpc_item(item) for item in data],
            next_cursor=str(next_cursor) if next_cursor is not None else None,
            has_next_page=bool(obj.get("hasNextPage", False)),
        )


@dataclass(frozen=True)
class GasUsed:
    computation_cost: int | None
    storage_cost: int | None
    storage_rebate: int | None

    @classmethod
    def from_rpc(cls, value: Any) -> "GasUsed":
        obj = _optional_object(value, "effects.gasUsed")
        return cls(
            computation_cost=decode_flex_uint(obj.get("computationCost")),
            storage_cost=decode_flex_uint(obj.get("storageCost")),
            storage_rebate=decode_flex_uint(obj.get("storageRebate")),
        )


@dataclass(frozen=True)
class TransactionInput:
    """Programmable transaction input (pure value or object reference)."""

    type: str | None
    value_type: str | None
    value: Any

    @classmethod
    def from_rpc(cls, item: Any) -> "TransactionInput":
        obj = _require_object(item, "transaction input")
        kind = obj.get("type")
        value_type = obj.get("valueType")
        return cls(
            type=kind if isinstance(kind, str) else None,
            value_type=value_type if isinstance(value_type, str) else None,
            value=obj.get("value"),
        )


def _programmable_body(tx_block: dict[str, Any]) -> dict[str, Any]:
    """transaction.data.transaction (current nodes) or transaction.data.message (older nodes)."""
    tx = _optional_object(tx_block.get("transaction"), "transaction")
    data = _optional_object(tx.get("data"), "transaction.data")
    for key in ("transaction", "message"):
        body = data.get(key)
        if isinstance(body, dict):
            return body
    return {}


@dataclass(frozen=True)
class TransactionDetail:
    """getTransactionBlock with input and effects, projected for normalization."""

    digest: str
    status: str | None
    gas_used: GasUsed
    inputs: list[TransactionInput]
    commands: list[Any]
    timestamp_ms: int | None
    raw: dict[str, Any] = field(repr=False)

    @property
    def succeeded(self) -> bool:
        return self.status == STATUS_SUCCESS

    @classmethod
    def from_rpc_result(cls, digest: str, result: Any) -> "TransactionDetail":
        obj = _require_object(result, "getTransactionBlock result")
        effects = _optional_object(obj.get("effects"), "effects")
        status_obj = _optional_object(effects.get("status"), "effects.status")
        status = status_obj.get("status")
        body = _programmable_body(obj)
        inputs = body.get("inputs") or []
        commands = body.get("transactions") or body.get("commands") or []
        if not isinstance(inputs, list) or not isinstance(commands, list):
            raise DecodeError("transaction inputs/commands are not lists")
        got = obj.get("digest")
        return cls(
            digest=got if isinstance(got, str) and got else digest,
            status=status if isinstance(status, str) else None,
            gas_used=GasUsed.from_rpc(effects.get("gasUsed")),
            inputs=[TransactionInput.from_rpc(i) for i in inputs],
            commands=list(commands),
            timestamp_ms=decode_flex_uint(obj.get("timestampMs")),
            raw=obj,
        )
