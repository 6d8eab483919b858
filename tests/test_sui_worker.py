"""
Sui sync worker: checkpoint bootstrap at the tip, forward paging, failure
tracking per checkpoint, and best-effort field extraction.
"""

from __future__ import annotations

from datetime import datetime, timezone

from conftest import SUI_ADDRESS, sui_tx_block
from wallet_watcher.core.chains import Chain
from wallet_watcher.sync_worker import SuiWorker

CP_TIME_MS = 1_700_000_100_500


def _checkpoint(seq, digests, ts_ms=CP_TIME_MS):
    return {"sequenceNumber": str(seq), "timestampMs": str(ts_ms), "transactions": digests}


def _page(*checkpoints):
    return {"data": list(checkpoints), "nextCursor": None, "hasNextPage": False}


def test_first_tick_starts_at_tip_then_pages_forward(store, sui_client, rpc_node):
    store.upsert_watched_address(Chain.SUI, SUI_ADDRESS)
    details = {
        "D1": sui_tx_block("D1"),
        "D2": sui_tx_block("D2"),
        "D3": sui_tx_block("D3", status="failure"),
    }
    rpc_node.on("suix_getTransactionBlock", lambda params: details.get(params[0]))
    rpc_node.on("sui_getCheckpoints", _page(_checkpoint(101, ["D2", "D3"]), _checkpoint(100, ["D1"])))
    worker = SuiWorker(store, sui_client, batch_size=2)

    stats = worker.tick()
    assert rpc_node.calls[0] == ("sui_getCheckpoints", [None, 2, True])
    assert stats.inserted == 2
    assert {e.tx_hash for e in store.list_events(Chain.SUI)} == {"D1", "D2"}
    assert store.get_watched(Chain.SUI, SUI_ADDRESS).cursor == 101

    rpc_node.calls.clear()
    rpc_node.on("sui_getCheckpoints", _page())
    stats = worker.tick()
    assert stats.inserted == 0
    assert rpc_node.calls == [("sui_getCheckpoints", ["101", 2, False])]
    assert store.get_watched(Chain.SUI, SUI_ADDRESS).cursor == 101


def test_failed_checkpoint_holds_cursor(store, sui_client, rpc_node):
    store.upsert_watched_address(Chain.SUI, SUI_ADDRESS)
    store.advance_cursor(Chain.SUI, SUI_ADDRESS, 101)
    details = {"D4": sui_tx_block("D4"), "D6": sui_tx_block("D6")}  # D5 unavailable
    rpc_node.on("suix_getTransactionBlock", lambda params: details.get(params[0]))
    rpc_node.on(
        "sui_getCheckpoints",
        _page(_checkpoint(102, ["D4"]), _checkpoint(103, ["D5"]), _checkpoint(104, ["D6"])),
    )
    worker = SuiWorker(store, sui_client)

    stats = worker.tick()
    assert stats.inserted == 2
    assert stats.failed_addresses == 0
    assert store.get_watched(Chain.SUI, SUI_ADDRESS).cursor == 102

    details["D5"] = sui_tx_block("D5")
    stats = worker.tick()
    assert stats.inserted == 1
    assert store.get_watched(Chain.SUI, SUI_ADDRESS).cursor == 104


def test_checkpoints_at_or_below_cursor_are_skipped(store, sui_client, rpc_node):
    store.upsert_watched_address(Chain.SUI, SUI_ADDRESS)
    store.advance_cursor(Chain.SUI, SUI_ADDRESS, 50)
    rpc_node.on("suix_getTransactionBlock", lambda params: sui_tx_block(params[0]))
    rpc_node.on("sui_getCheckpoints", _page(_checkpoint(50, ["OLD"]), _checkpoint(51, ["NEW"])))
    SuiWorker(store, sui_client).tick()
    assert [e.tx_hash for e in store.list_events(Chain.SUI)] == ["NEW"]
    assert store.get_watched(Chain.SUI, SUI_ADDRESS).cursor == 51


def test_event_fields(store, sui_client, rpc_node):
    store.upsert_watched_address(Chain.SUI, SUI_ADDRESS)
    rpc_node.on("suix_getTransactionBlock", lambda params: sui_tx_block(params[0]))
    rpc_node.on("sui_getCheckpoints", _page(_checkpoint(7, ["D1"])))
    SuiWorker(store, sui_client).tick()
    [event] = store.list_events(Chain.SUI, SUI_ADDRESS)
    assert event.tx_hash == "D1"
    assert event.ts == datetime(2023, 11, 14, 22, 15, 0, 500000, tzinfo=timezone.utc)
    assert event.sender == SUI_ADDRESS
    assert event.receiver is None
    assert event.fee == 3000
    assert event.method == "SplitCoins"


def test_checkpoint_page_failure_is_per_address(store, sui_client, rpc_node):
    store.upsert_watched_address(Chain.SUI, SUI_ADDRESS)
    rpc_node.fail("sui_getCheckpoints", -32000, "node overloaded")
    stats = SuiWorker(store, sui_client).tick()
    assert (stats.addresses, stats.inserted, stats.failed_addresses) == (1, 0, 1)
    assert store.get_watched(Chain.SUI, SUI_ADDRESS).cursor is None
