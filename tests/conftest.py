"""
Pytest fixtures for Wallet Watcher tests.

Uses a temporary SQLite store per test and fakes JSON-RPC nodes with
httpx.MockTransport, so no test touches the network.
"""

from __future__ import annotations

import json
from typing import Any, Callable

import httpx
import pytest

# Valid Solana pubkeys (base58, 32 bytes)
SOLANA_WALLET = "9QCfNuQuxct1Xk9ytFYgxc5fThmTzL4pHQnSjjrVUrka"
SOLANA_WALLET_2 = "7F1WzVNQ1Qpurqxxdyv3UrFQR3uoNepULVW9A4bAJ5nZ"
SUI_ADDRESS = "0x" + "ab" * 32


def sui_tx_block(digest="D1", status="success", sender=SUI_ADDRESS, body_key="transaction"):
    """getTransactionBlock result with input and effects, shaped like a mainnet fullnode answer."""
    return {
        "digest": digest,
        "timestampMs": "1700000000250",
        "transaction": {
            "data": {
                body_key: {
                    "kind": "ProgrammableTransaction",
                    "inputs": [
                        {"type": "pure", "valueType": "u64", "value": "1000"},
                        {"type": "pure", "valueType": "address", "value": sender},
                        {"type": "object", "objectType": "immOrOwnedObject", "objectId": "0x5"},
                    ],
                    "transactions": [{"SplitCoins": ["GasCoin", [{"Input": 0}]]}, {"TransferObjects": []}],
                }
            }
        },
        "effects": {
            "status": {"status": status},
            "gasUsed": {"computationCost": "1000", "storageCost": 2000, "storageRebate": "500"},
        },
    }


class FakeRpcNode:
    """
    JSON-RPC node double. Register a result (or a callable of params) per method;
    unknown methods answer -32601 like a real node. Every call is recorded.
    """

    def __init__(self) -> None:
        self.handlers: dict[str, Callable[[Any], Any]] = {}
        self.errors: dict[str, tuple[int, str]] = {}
        self.calls: list[tuple[str, Any]] = []

    def on(self, method: str, result: Any) -> None:
        self.handlers[method] = result if callable(result) else (lambda _params, r=result: r)

    def fail(self, method: str, code: int, message: str = "boom") -> None:
        self.errors[method] = (code, message)

    def methods_called(self) -> list[str]:
        return [m for m, _ in self.calls]

    def __call__(self, request: httpx.Request) -> httpx.Response:
        body = json.loads(request.content)
        method, params = body["method"], body.get("params")
        self.calls.append((method, params))
        envelope: dict[str, Any] = {"jsonrpc": "2.0", "id": body["id"]}
        if method in self.errors:
            code, message = self.errors[method]
            envelope["error"] = {"code": code, "message": message}
        elif method in self.handlers:
            envelope["result"] = self.handlers[method](params)
        else:
            envelope["error"] = {"code": -32601, "message": "Method not found"}
        return httpx.Response(200, json=envelope)

    def http_client(self) -> httpx.Client:
        return httpx.Client(transport=httpx.MockTransport(self))


@pytest.fixture
def rpc_node():
    return FakeRpcNode()


@pytest.fixture
def solana_client(rpc_node):
    from wallet_watcher.chains.solana import SolanaClient

    client = SolanaClient("http://solana.test", http_client=rpc_node.http_client())
    yield client
    client.close()


@pytest.fixture
def sui_client(rpc_node):
    from wallet_watcher.chains.sui import SuiClient

    client = SuiClient("http://sui.test", http_client=rpc_node.http_client())
    yield client
    client.close()


@pytest.fixture
def store(tmp_path, monkeypatch):
    """Fresh SQLite-backed Store with schema created. Unset DATABASE_URL so nothing leaks in."""
    monkeypatch.delenv("DATABASE_URL", raising=False)
    from wallet_watcher.database import get_store

    st = get_store(f"sqlite:///{tmp_path / 'watcher.db'}")
    yield st
    st.close()


@pytest.fixture
def api_client(store, solana_client, sui_client):
    """FastAPI TestClient around the temp store; balance lookups go to the fake RPC node."""
    from fastapi.testclient import TestClient

    from wallet_watcher.api_server import create_app
    from wallet_watcher.config import Settings
    from wallet_watcher.core.chains import Chain

    app = create_app(
        store=store,
        settings=Settings(),
        balance_clients={Chain.SOLANA: solana_client, Chain.SUI: sui_client},
    )
    with TestClient(app) as client:
        yield client
