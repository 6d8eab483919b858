"""Sui client: method fallback per operation, checkpoint paging, detail decoding, balances."""

from __future__ import annotations

import pytest

from conftest import SUI_ADDRESS, sui_tx_block
from wallet_watcher.core.exceptions import DecodeError, RpcApplicationError


def test_resolve_one_transaction_prefers_suix(sui_client, rpc_node):
    rpc_node.on("suix_queryTransactionBlocks", {"data": [{"digest": "D9"}], "hasNextPage": True})
    assert sui_client.resolve_one_transaction_for_address(SUI_ADDRESS) == "D9"
    method, params = rpc_node.calls[0]
    assert method == "suix_queryTransactionBlocks"
    assert params[0]["filter"] == {"ToAddress": SUI_ADDRESS}
    assert params[1:] == [None, 1, True]


def test_resolve_one_transaction_falls_back_to_legacy(sui_client, rpc_node):
    rpc_node.on("sui_queryTransactionBlocks", {"data": []})
    assert sui_client.resolve_one_transaction_for_address(SUI_ADDRESS) is None
    assert rpc_node.methods_called() == ["suix_queryTransactionBlocks", "sui_queryTransactionBlocks"]
    assert rpc_node.calls[1][1] == [{"ToAddress": SUI_ADDRESS}, None, 1, True]


def test_resolve_one_transaction_all_methods_missing(sui_client, rpc_node):
    with pytest.raises(RpcApplicationError) as info:
        sui_client.resolve_one_transaction_for_address(SUI_ADDRESS)
    assert info.value.is_method_not_found


def test_fetch_transaction_summary(sui_client, rpc_node):
    rpc_node.on("sui_getTransactionBlock", {"digest": "D1", "timestampMs": 1700000000000})
    summary = sui_client.fetch_transaction_summary("D1")
    assert summary.digest == "D1"
    assert summary.timestamp_ms == 1700000000000
    assert rpc_node.calls[-1] == ("sui_getTransactionBlock", ["D1", {"showDigest": True}])


def test_fetch_checkpoint_page_ascending_after_cursor(sui_client, rpc_node):
    rpc_node.on(
        "sui_getCheckpoints",
        {
            "data": [
                {"sequenceNumber": "101", "timestampMs": "1700000000000", "transactions": ["D1", "D2"]},
                {"sequenceNumber": 102, "timestampMs": None, "transactions": []},
            ],
            "nextCursor": "102",
            "hasNextPage": True,
        },
    )
    page = sui_client.fetch_checkpoint_page(100, 2)
    assert rpc_node.calls[0] == ("sui_getCheckpoints", ["100", 2, False])
    assert [cp.sequence_number for cp in page.checkpoints] == [101, 102]
    assert page.checkpoints[0].transactions == ["D1", "D2"]
    assert page.checkpoints[1].timestamp_ms is None
    assert page.next_cursor == "102"
    assert page.has_next_page is True


def test_fetch_checkpoint_page_defaults(sui_client, rpc_node):
    rpc_node.on("sui_getCheckpoints", {"data": [], "nextCursor": None, "hasNextPage": False})
    page = sui_client.fetch_checkpoint_page(None, 0, descending=True)
    assert rpc_node.calls[0] == ("sui_getCheckpoints", [None, 10, True])
    assert page.checkpoints == []
    assert page.next_cursor is None


def test_fetch_checkpoint_page_bad_sequence_number(sui_client, rpc_node):
    rpc_node.on("sui_getCheckpoints", {"data": [{"sequenceNumber": "abc", "transactions": []}]})
    with pytest.raises(DecodeError):
        sui_client.fetch_checkpoint_page(None, 5)


def test_fetch_transaction_detail(sui_client, rpc_node):
    rpc_node.on("suix_getTransactionBlock", sui_tx_block())
    tx = sui_client.fetch_transaction_detail("D1")
    assert tx.digest == "D1"
    assert tx.succeeded
    assert tx.gas_used.computation_cost == 1000
    assert tx.gas_used.storage_cost == 2000
    assert tx.gas_used.storage_rebate == 500
    assert tx.inputs[1].value_type == "address"
    assert tx.inputs[1].value == SUI_ADDRESS
    assert len(tx.commands) == 2
    assert tx.timestamp_ms == 1700000000250
    options = rpc_node.calls[0][1][1]
    assert options["showInput"] and options["showEffects"] and options["showBalanceChanges"]


def test_fetch_transaction_detail_legacy_message_body(sui_client, rpc_node):
    rpc_node.on("sui_getTransactionBlock", sui_tx_block(status="failure", body_key="message"))
    tx = sui_client.fetch_transaction_detail("D1")
    assert not tx.succeeded
    assert tx.status == "failure"
    assert len(tx.inputs) == 3
    assert rpc_node.methods_called() == ["suix_getTransactionBlock", "sui_getTransactionBlock"]


def test_get_balances(sui_client, rpc_node):
    rpc_node.on(
        "suix_getAllBalances",
        [
            {"coinType": "0x2::sui::SUI", "coinObjectCount": 3, "totalBalance": "1500000000"},
            {"coinType": "0xdead::usdc::USDC", "totalBalance": 0},
        ],
    )
    balances = sui_client.get_balances(SUI_ADDRESS)
    assert [b.to_dict() for b in balances] == [{"token": "0x2::sui::SUI", "amount": 1500000000}]
    assert rpc_node.calls[0] == ("suix_getAllBalances", [SUI_ADDRESS])


def test_get_balances_legacy_method(sui_client, rpc_node):
    rpc_node.on("sui_getAllBalances", [{"coinType": "0x2::sui::SUI", "totalBalance": 7}])
    assert [b.amount for b in sui_client.get_balances(SUI_ADDRESS)] == [7]
