"""
Solana JSON-RPC client.

High-level operations used by the Solana sync worker (recent signatures,
transaction detail) and by the balances endpoint. Solana exposes a single
method name per capability, so calls go straight through JsonRpcClient.call.
"""

from __future__ import annotations

from collections import defaultdict
from typing import Any

import httpx

from wallet_watcher.chains.balance import Balance
from wallet_watcher.chains.flex import decode_flex_uint
from wallet_watcher.chains.jsonrpc import DEFAULT_TIMEOUT_SEC, JsonRpcClient
from wallet_watcher.chains.solana.models import SignatureInfo, TransactionDetail
from wallet_watcher.core.exceptions import DecodeError

TOKEN_PROGRAM_ID = "TokenkegQfeZyiNwAJbNbGKPFXCWuBvf9Ss623VQ5DA"
NATIVE_TOKEN = "SOL"


class SolanaClient:
    """Typed Solana RPC operations over one endpoint."""

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

    def list_recent_activity(self, address: str, limit: int) -> list[SignatureInfo]:
        """Return up to limit signatures touching address, newest first."""
        if limit <= 0:
            limit = 1
        result = self.rpc.call("getSignaturesForAddress", [address, {"limit": limit}])
        if not isinstance(result, list):
            raise DecodeError("getSignaturesForAddress result is not a list")
        return [SignatureInfo.from_rpc_item(item) for item in result]

    def fetch_detail(self, signature: str) -> TransactionDetail:
        """Fetch one transaction by signature (json encoding, v0 transactions allowed)."""
        result = self.rpc.call(
            "getTransaction",
            [signature, {"encoding": "json", "maxSupportedTransactionVersion": 0}],
        )
        return TransactionDetail.from_rpc_result(signature, result)

    def get_balances(self, address: str) -> list[Balance]:
        """Native SOL balance (lamports) plus SPL token balances summed per mint; zeros omitted."""
        balances: list[Balance] = []
        lamports = self._get_native_balance(address)
        if lamports > 0:
            balances.append(Balance(token=NATIVE_TOKEN, amount=lamports))
        balances.extend(self._get_token_balances(address))
        return balances

    def _get_native_balance(self, address: str) -> int:
        result = self.rpc.call("getBalance", [address])
        value = result.get("value") if isinstance(result, dict) else result
        lamports = decode_flex_uint(value)
        if lamports is None:
            raise DecodeError("getBalance returned no value")
        return lamports

    def _get_token_balances(self, address: str) -> list[Balance]:
        result = self.rpc.call(
            "getTokenAccountsByOwner",
            [address, {"programId": TOKEN_PROGRAM_ID}, {"encoding": "jsonParsed"}],
        )
        accounts = result.get("value") if isinstance(result, dict) else None
        if not isinstance(accounts, list):
            raise DecodeError("getTokenAccountsByOwner result has no value list")
        totals: dict[str, int] = defaultdict(int)
        for acc in accounts:
            info = _parsed_token_info(acc)
            if info is None:
                continue
            mint = info.get("mint")
            token_amount = info.get("tokenAmount")
            if not isinstance(token_amount, dict):
                continue
            amount = decode_flex_uint(token_amount.get("amount"))
            if isinstance(mint, str) and amount:
                totals[mint] += amount
        return [Balance(token=mint, amount=amount) for mint, amount in totals.items() if amount > 0]


def _parsed_token_info(acc: Any) -> dict[str, Any] | None:
    """account.data.parsed.info of a jsonParsed token account, or None."""
    try:
        info = acc["account"]["data"]["parsed"]["info"]
    except (KeyError, TypeError):
        return None
    return info if isinstance(info, dict) else None
