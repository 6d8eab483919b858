"""Flexible unsigned integer decoding (null / number / numeric string)."""

from __future__ import annotations

import pytest

from wallet_watcher.chains.flex import U64_MAX, decode_flex_uint, require_flex_uint
from wallet_watcher.core.exceptions import DecodeError


@pytest.mark.parametrize(
    "value, expected",
    [
        (None, None),
        ("", None),
        (42, 42),
        ("42", 42),
        (0, 0),
        ("0", 0),
        (str(U64_MAX), U64_MAX),
    ],
)
def test_decode_accepts(value, expected):
    assert decode_flex_uint(value) == expected


@pytest.mark.parametrize(
    "value",
    ["abc", {}, [], True, 1.5, -1, "-1", " 42", "4 2", str(U64_MAX + 1), "١٢"],
)
def test_decode_rejects(value):
    with pytest.raises(DecodeError):
        decode_flex_uint(value)


def test_require_rejects_missing():
    with pytest.raises(DecodeError, match="sequenceNumber"):
        require_flex_uint(None, "sequenceNumber")
    assert require_flex_uint("7", "sequenceNumber") == 7
