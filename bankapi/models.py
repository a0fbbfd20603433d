"""Records stored by the bank: accounts, ledger entries and transfers."""

from __future__ import annotations

import enum
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Optional

# The zero instant used where a timestamp is missing.
_ZERO_TIME = datetime.min


class Currency(str, enum.Enum):
    """Currencies an account may hold."""

    USD = "USD"
    EUR = "EUR"

    def __str__(self) -> str:
        return self.value


def _iso(ts: Optional[datetime]) -> Optional[str]:
    return None if ts is None else ts.isoformat()


@dataclass(frozen=True)
class Account:
    """A customer account with its running balance."""

    id: int
    owner: str
    currency: Currency
    balance: float
    created_at: Optional[datetime] = None

    def to_dict(self) -> dict[str, Any]:
        """Return the account as a JSON-ready mapping."""
        return {
            "id": self.id,
            "owner": self.owner,
            "currency": str(self.currency),
            "balance": self.balance,
            "created_at": _iso(self.created_at),
        }


@dataclass(frozen=True)
class Entry:
    """A single ledger movement on one account; the amount may be negative."""

    id: int
    account_id: int
    amount: float
    created_at: Optional[datetime] = None

    def to_dict(self) -> dict[str, Any]:
        """Return the entry as a JSON-ready mapping."""
        return {
            "id": self.id,
            "account_id": self.account_id,
            "amount": self.amount,
            "created_at": _iso(self.created_at),
        }


@dataclass(frozen=True)
class Transfer:
    """A movement of a positive amount from one account to another."""

    id: int
    from_account_id: int
    to_account_id: int
    amount: float
    created_at: Optional[datetime] = None

    def to_dict(self) -> dict[str, Any]:
        """Return the transfer as a JSON-ready mapping."""
        return {
            "id": self.id,
            "from_account_id": self.from_account_id,
            "to_account_id": self.to_account_id,
            "amount": self.amount,
            "created_at": _iso(self.created_at),
        }


_SUPPORTED = frozenset(c.value for c in Currency)


def is_supported_currency(currency: object) -> bool:
    """Tell whether ``currency`` names a currency the bank handles."""
    return isinstance(currency, str) and currency in _SUPPORTED


def safe_time(ts: Optional[datetime]) -> datetime:
    """Return ``ts``, or the zero instant when it is missing."""
    return _ZERO_TIME if ts is None else ts