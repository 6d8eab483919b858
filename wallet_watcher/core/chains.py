"""Chain identifiers used on the wire, in storage, and in log context."""

from __future__ import annotations

from enum import Enum

from wallet_watcher.core.exceptions import ValidationError


class Chain(str, Enum):
    """Supported chains. Solana is account-keyed (slot cursor); Sui is checkpoint-keyed."""

    SOLANA = "solana"
    SUI = "sui"


def parse_chain(raw: str | None) -> Chain:
    """Return the Chain for a case-insensitive name; raise ValidationError otherwise."""
    value = (raw or "").strip().lower()
    try:
        return Chain(value)
    except ValueError:
        raise ValidationError("chain must be 'solana' or 'sui'") from None
