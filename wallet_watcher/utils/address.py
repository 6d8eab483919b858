"""Chain and address validation for registration and query input."""

from __future__ import annotations

import re

from solders.pubkey import Pubkey

from wallet_watcher.core.chains import Chain, parse_chain
from wallet_watcher.core.exceptions import ValidationError

_SUI_HEX = re.compile(r"^[0-9a-fA-F]{1,64}$")


def strip_hex_prefix(address: str) -> str:
    """Drop a leading 0x / 0X marker."""
    if address[:2].lower() == "0x":
        return address[2:]
    return address


def is_valid_solana_address(address: str) -> bool:
    """Return True if address parses as a Solana public key (base58, 32 bytes)."""
    try:
        Pubkey.from_string(address.strip())
        return True
    except Exception:
        return False


def normalize_sui_address(address: str) -> str:
    """Lowercase 0x-prefixed hex form; raises ValidationError for anything that is not 1-64 hex digits."""
    body = strip_hex_prefix(address.strip())
    if not _SUI_HEX.match(body):
        raise ValidationError("invalid Sui address")
    return "0x" + body.lower()


def validate_chain_and_address(chain: str | Chain, address: str | None) -> tuple[Chain, str]:
    """
    Validate a (chain, address) pair from user input.

    Returns the Chain and the canonical address (Solana unchanged, Sui
    lowercase 0x-hex). Raises ValidationError.
    """
    parsed = chain if isinstance(chain, Chain) else parse_chain(chain)
    address = (address or "").strip()
    if not address:
        raise ValidationError("address is required")
    if parsed is Chain.SOLANA:
        if not is_valid_solana_address(address):
            raise ValidationError("invalid Solana address")
        return parsed, address
    return parsed, normalize_sui_address(address)
