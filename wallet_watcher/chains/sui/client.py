"""
Sui JSON-RPC client.

Each operation is declared as an ordered tuple of MethodAttempt values; the
fallback policy itself lives in JsonRpcClient.call_with_fallback. Parameter
adapters differ per method because older nodes take a flat query object for
sui_queryTransactionBlocks.
"""

from __future__ import annotations

from typing import Any

import httpx

from wallet_watcher.chains.balance import Balance
from wallet_watcher.chains.flex import decode_flex_uint
from wallet_watcher.chains.jsonrpc import DEFAULT_TIMEOUT_SEC, JsonRpcClient, MethodAttempt
from wallet_watcher.chains.sui.models import CheckpointPage, TransactionDetail, TransactionSummary
from wallet_watcher.core.exceptions import DecodeError

DEFAULT_CHECKPOINT_PAGE_LIMIT = 10

_DETAIL_OPTIONS = {
    "showInput": True,
    "showEffects": True,
    "showEvents": True,
    "showObjectChanges": True,
    "showBalanceChanges": True,
}


def _query_by_to_address(address: str) -> list[Any]:
    return [
        {"filter": {"ToAddress": address}, "options": {"showInput": False}},
        None,  # cursor
        1,  # limit
        True,  # descending
    ]


def _legacy_query_by_to_address(address: str) -> list[Any]:
    return [{"ToAddress": address}, None, 1, True]


def _summary_params(digest: str) -> list[Any]:
    return [digest, {"showDigest": True}]


def _detail_params(digest: str) -> list[Any]:
    return [digest, dict(_DETAIL_OPTIONS)]


def _checkpoint_params(cursor: int | None, limit: int, descending: bool) -> list[Any]:
    return [str(cursor) if cursor is not None else None, limit, descending]


def _address_params(address: str) -> list[Any]:
    return [address]


QUERY_ONE_TX_ATTEMPTS = (
    MethodAttempt("suix_queryTransactionBlocks", _query_by_to_address),
    MethodAttempt("sui_queryTransactionBlocks", _legacy_query_by_to_address),
)
TX_SUMMARY_ATTEMPTS = (
    MethodAttempt("suix_getTransactionBlock", _summary_params),
    MethodAttempt("sui_getTransactionBlock", _summary_params),
)
TX_DETAIL_ATTEMPTS = (
    MethodAttempt("suix_getTransactionBlock", _detail_params),
    MethodAttempt("sui_getTransactionBlock", _detail_params),
)
CHECKPOINT_ATTEMPTS = (MethodAttempt("sui_getCheckpoints", _checkpoint_params),)
ALL_BALANCES_ATTEMPTS = (
    MethodAttempt("suix_getAllBalances", _address_params),
    MethodAttempt("sui_getAllBalances", _address_params),
)


class SuiClient:
    """Typed Sui RPC operations over one endpoint; method-version differences stay inside."""

    def __init__(
        self,
        url: str,
        *,
        timeout_sec: float = DEFAULT_TIMEOUT_SEC,
        http_client: httpx.Client | None = None,
    ) -> None:
        self.rpc = JsonRpcClient(url, timeout_sec=timeout_sec, http_client=http_client)

    def close(self) -> None:
        self.rpc.close()

    def resolve_one_transaction_for_address(self, address: str) -> str | None:
        """Existence probe: digest of the newest transaction sent to address, or None."""
        result = self.rpc.call_with_fallback(QUERY_ONE_TX_ATTEMPTS, address)
        if result is None:
            return None
        if not isinstance(result, dict):
            raise DecodeError("queryTransactionBlocks result is not an object")
        data = result.get("data") or []
        if not isinstance(data, list):
            raise DecodeError("queryTransactionBlocks data is not a list")
        if not data:
            return None
        first = data[0]
        digest = first.get("digest") if isinstance(first, dict) else None
        if not isinstance(digest, str) or not digest:
            raise DecodeError("queryTransactionBlocks item has no digest")
        return digest

    def fetch_transaction_summary(self, digest: str) -> TransactionSummary:
        result = self.rpc.call_with_fallback(TX_SUMMARY_ATTEMPTS, digest)
        return TransactionSummary.from_rpc_result(digest, result)

    def fetch_checkpoint_page(
        self,
        cursor: int | None,
        limit: int,
        *,
        descending: bool = False,
    ) -> CheckpointPage:
        """
        Page of checkpoint summaries after cursor (exclusive) in ascending order,
        or the newest page when descending is True.
        """
        if limit <= 0:
            limit = DEFAULT_CHECKPOINT_PAGE_LIMIT
        result = self.rpc.call_with_fallback(CHECKPOINT_ATTEMPTS, cursor, limit, descending)
        return CheckpointPage.from_rpc_result(result)

    def fetch_transaction_detail(self, digest: str) -> TransactionDetail:
        result = self.rpc.call_with_fallback(TX_DETAIL_ATTEMPTS, digest)
        return TransactionDetail.from_rpc_result(digest, result)

    def get_balances(self, address: str) -> list[Balance]:
        """Total balance per coin type; zero balances omitted."""
        result = self.rpc.call_with_fallback(ALL_BALANCES_ATTEMPTS, address)
        if not isinstance(result, list):
            raise DecodeError("getAllBalances result is not a list")
        balances: list[Balance] = []
        for item in result:
            if not isinstance(item, dict) or not isinstance(item.get("coinType"), str):
                raise DecodeError("getAllBalances item has no coinType")
            amount = decode_flex_uint(item.get("totalBalance"))
            if amount:
                balances.append(Balance(token=item["coinType"], amount=amount))
        return balances
