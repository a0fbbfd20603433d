"""Random values for filling the bank with sample data."""

from __future__ import annotations

import random

_ALPHABET = "abcdefghijklmnopqrstuvwxyz"
_CURRENCIES = ("USD", "EUR")


def random_int(low: int, high: int) -> int:
    """Return an integer in ``[low, high]``, or ``low`` when the range is empty."""
    if low >= high:
        return low
    return random.randint(low, high)


def random_string(n: int) -> str:
    """Return ``n`` random lower-case letters."""
    return "".join(random.choices(_ALPHABET, k=n))


def random_owner() -> str:
    """Return a random owner name."""
    return random_string(6)


def random_money() -> float:
    """Return a random whole amount of money."""
    return float(random_int(100, 1000000))


def random_currency() -> str:
    """Return a random supported currency code."""
    return random.choice(_CURRENCIES)