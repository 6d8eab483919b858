"""
Sui (checkpoint-keyed chain) RPC client.

Every high-level operation is an ordered list of method attempts: the
namespaced suix_* name first, the legacy sui_* name when the node reports
"method not found".
"""

from wallet_watcher.chains.sui.client import SuiClient
from wallet_watcher.chains.sui.models import (
    Checkpoint,
    CheckpointPage,
    GasUsed,
    TransactionDetail,
    TransactionInput,
    TransactionSummary,
)

__all__ = [
    "Checkpoint",
    "CheckpointPage",
    "GasUsed",
    "SuiClient",
    "TransactionDetail",
    "TransactionInput",
    "TransactionSummary",
]
