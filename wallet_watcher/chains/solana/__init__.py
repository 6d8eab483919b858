"""
Solana (account-keyed chain) RPC client.

Lists recent signatures for an address, fetches transaction detail, and
reads balances. Responses are decoded into closed dataclasses.
"""

from wallet_watcher.chains.balance import Balance
from wallet_watcher.chains.solana.client import SolanaClient
from wallet_watcher.chains.solana.models import SignatureInfo, TransactionDetail

__all__ = ["Balance", "SignatureInfo", "SolanaClient", "TransactionDetail"]
