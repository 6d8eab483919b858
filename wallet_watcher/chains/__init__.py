"""
Chain RPC clients.

JSON-RPC transport with method fallback (jsonrpc), the flexible numeric
decoder (flex), and typed per-chain clients (solana, sui).
"""

from wallet_watcher.chains.flex import decode_flex_uint, require_flex_uint
from wallet_watcher.chains.jsonrpc import JsonRpcClient, MethodAttempt

__all__ = [
    "JsonRpcClient",
    "MethodAttempt",
    "decode_flex_uint",
    "require_flex_uint",
]
