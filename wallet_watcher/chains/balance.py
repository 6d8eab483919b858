"""Token holding returned by the balance lookups of both chains."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class Balance:
    """Holding of one token in base units ("SOL" lamports, an SPL mint, or a Sui coin type)."""

    token: str
    amount: int

    def to_dict(self) -> dict[str, Any]:
        return {"token": self.token, "amount": self.amount}
