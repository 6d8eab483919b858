"""
Flexible unsigned integer decoding.

Sui nodes encode 64-bit integers inconsistently across methods and server
versions: as JSON numbers, as decimal strings, or as null. Every sequence
number, timestamp, and gas field goes through decode_flex_uint.
"""

from __future__ import annotations

from typing import Any

from wallet_watcher.core.exceptions import DecodeError

U64_MAX = 2**64 - 1


def decode_flex_uint(value: Any) -> int | None:
    """
    Decode null / number / numeric string into an optional unsigned 64-bit int.

    None and "" yield None. Objects, arrays, booleans, floats, negatives,
    non-numeric strings, and values above 2**64-1 raise DecodeError.
    """
    if value is None:
        return None
    if isinstance(value, bool):
        raise DecodeError(f"invalid flexible integer: {value!r}")
    if isinstance(value, int):
        parsed = value
    elif isinstance(value, str):
        if value == "":
            return None
        if not (value.isascii() and value.isdigit()):
            raise DecodeError(f"invalid flexible integer: {value!r}")
        parsed = int(value)
    else:
        raise DecodeError(f"invalid flexible integer: {value!r}")
    if parsed < 0 or parsed > U64_MAX:
        raise DecodeError(f"flexible integer out of range: {value!r}")
    return parsed


def require_flex_uint(value: Any, field: str) -> int:
    """Like decode_flex_uint, but a missing value is also a DecodeError."""
    parsed = decode_flex_uint(value)
    if parsed is None:
        raise DecodeError(f"missing required integer field: {field}")
    return parsed
