"""SQL access to accounts, entries and transfers over a sqlite3 connection."""

from __future__ import annotations

import sqlite3
from datetime import datetime
from typing import Any, Optional, Sequence

from bankapi.models import Account, Currency, Entry, Transfer

_NO_ROWS = "no rows in result set"

_SCHEMA = """
CREATE TABLE IF NOT EXISTS accounts (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    owner TEXT NOT NULL,
    currency TEXT NOT NULL CHECK (currency IN ('USD', 'EUR')),
    balance REAL NOT NULL,
    created_at TEXT NOT NULL DEFAULT (strftime('%Y-%m-%d %H:%M:%f', 'now'))
);
CREATE TABLE IF NOT EXISTS entries (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    account_id INTEGER NOT NULL REFERENCES accounts (id),
    amount REAL NOT NULL,
    created_at TEXT NOT NULL DEFAULT (strftime('%Y-%m-%d %H:%M:%f', 'now'))
);
CREATE TABLE IF NOT EXISTS transfers (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    from_account_id INTEGER NOT NULL REFERENCES accounts (id),
    to_account_id INTEGER NOT NULL REFERENCES accounts (id),
    amount REAL NOT NULL,
    created_at TEXT NOT NULL DEFAULT (strftime('%Y-%m-%d %H:%M:%f', 'now'))
);
CREATE INDEX IF NOT EXISTS entries_account_id_idx ON entries (account_id);
CREATE INDEX IF NOT EXISTS transfers_from_idx ON transfers (from_account_id);
CREATE INDEX IF NOT EXISTS transfers_to_idx ON transfers (to_account_id);
"""

_ACCOUNT_COLUMNS = "id, owner, currency, balance, created_at"
_ENTRY_COLUMNS = "id, account_id, amount, created_at"
_TRANSFER_COLUMNS = "id, from_account_id, to_account_id, amount, created_at"


class NotFoundError(LookupError):
    """Raised when a query that must return a row finds none."""

    def __init__(self, message: str = _NO_ROWS) -> None:
        super().__init__(message)


def create_schema(conn: sqlite3.Connection) -> None:
    """Create the bank tables if they do not exist yet."""
    conn.executescript(_SCHEMA)


def _currency(value: Any) -> Currency:
    if isinstance(value, bytes):
        value = value.decode()
    if not isinstance(value, str):
        raise TypeError(f"unsupported scan type for Currency: {type(value).__name__}")
    return Currency(value)


def _timestamp(value: Any) -> Optional[datetime]:
    if value is None:
        return None
    if isinstance(value, datetime):
        return value
    return datetime.fromisoformat(value)


def _account(row: Sequence[Any]) -> Account:
    id_, owner, currency, balance, created_at = row
    return Account(id_, owner, _currency(currency), float(balance), _timestamp(created_at))


def _entry(row: Sequence[Any]) -> Entry:
    id_, account_id, amount, created_at = row
    return Entry(id_, account_id, float(amount), _timestamp(created_at))


def _transfer(row: Sequence[Any]) -> Transfer:
    id_, from_id, to_id, amount, created_at = row
    return Transfer(id_, from_id, to_id, float(amount), _timestamp(created_at))


def _check_page(limit: int, offset: int) -> None:
    if limit < 0:
        raise ValueError("LIMIT must not be negative")
    if offset < 0:
        raise ValueError("OFFSET must not be negative")


class Queries:
    """Typed queries over a database connection or transaction."""

    def __init__(self, conn: sqlite3.Connection) -> None:
        self.conn = conn

    def _one(self, sql: str, params: Sequence[Any]) -> Sequence[Any]:
        row = self.conn.execute(sql, params).fetchone()
        if row is None:
            raise NotFoundError()
        return row

    # Accounts

    def add_account_balance(self, account_id: int, amount: float) -> Account:
        """Add ``amount`` to the balance of an account and return it."""
        cur = self.conn.execute(
            "UPDATE accounts SET balance = balance + ? WHERE id = ?",
            (amount, account_id),
        )
        if cur.rowcount == 0:
            raise NotFoundError()
        return self.get_account(account_id)

    def create_account(self, owner: str, balance: float, currency: Currency | str) -> Account:
        """Insert a new account and return it."""
        cur = self.conn.execute(
            "INSERT INTO accounts (owner, balance, currency) VALUES (?, ?, ?)",
            (owner, balance, _currency(currency).value),
        )
        return self.get_account(cur.lastrowid)

    def delete_account(self, account_id: int) -> None:
        """Delete an account; deleting a missing account is not an error."""
        self.conn.execute("DELETE FROM accounts WHERE id = ?", (account_id,))

    def get_account(self, account_id: int) -> Account:
        """Return the account with the given id."""
        return _account(
            self._one(
                f"SELECT {_ACCOUNT_COLUMNS} FROM accounts WHERE id = ? LIMIT 1",
                (account_id,),
            )
        )

    def get_account_for_update(self, account_id: int) -> Account:
        """Return an account that is about to be changed in this transaction."""
        return self.get_account(account_id)

    def list_accounts(self, limit: int, offset: int) -> list[Account]:
        """Return a page of accounts ordered by id."""
        _check_page(limit, offset)
        rows = self.conn.execute(
            f"SELECT {_ACCOUNT_COLUMNS} FROM accounts ORDER BY id LIMIT ? OFFSET ?",
            (limit, offset),
        )
        return [_account(row) for row in rows]

    def update_account(self, account_id: int, balance: float) -> Account:
        """Set the balance of an account and return it."""
        cur = self.conn.execute(
            "UPDATE accounts SET balance = ? WHERE id = ?", (balance, account_id)
        )
        if cur.rowcount == 0:
            raise NotFoundError()
        return self.get_account(account_id)

    # Entries

    def create_entry(self, account_id: int, amount: float) -> Entry:
        """Record a ledger entry and return it."""
        cur = self.conn.execute(
            "INSERT INTO entries (account_id, amount) VALUES (?, ?)",
            (account_id, amount),
        )
        return self.get_entry(cur.lastrowid)

    def get_entry(self, entry_id: int) -> Entry:
        """Return the entry with the given id."""
        return _entry(
            self._one(
                f"SELECT {_ENTRY_COLUMNS} FROM entries WHERE id = ? LIMIT 1",
                (entry_id,),
            )
        )

    def list_entries(self, account_id: int, limit: int, offset: int) -> list[Entry]:
        """Return a page of one account's entries ordered by id."""
        _check_page(limit, offset)
        rows = self.conn.execute(
            f"SELECT {_ENTRY_COLUMNS} FROM entries WHERE account_id = ? "
            "ORDER BY id LIMIT ? OFFSET ?",
            (account_id, limit, offset),
        )
        return [_entry(row) for row in rows]

    # Transfers

    def create_transfer(self, from_account_id: int, to_account_id: int, amount: float) -> Transfer:
        """Record a transfer and return it."""
        cur = self.conn.execute(
            "INSERT INTO transfers (from_account_id, to_account_id, amount) VALUES (?, ?, ?)",
            (from_account_id, to_account_id, amount),
        )
        return self.get_transfer(cur.lastrowid)

    def get_transfer(self, transfer_id: int) -> Transfer:
        """Return the transfer with the given id."""
        return _transfer(
            self._one(
                f"SELECT {_TRANSFER_COLUMNS} FROM transfers WHERE id = ? LIMIT 1",
                (transfer_id,),
            )
        )

    def list_transfers(
        self, from_account_id: int, to_account_id: int, limit: int, offset: int
    ) -> list[Transfer]:
        """Return a page of transfers leaving the first or reaching the second account."""
        _check_page(limit, offset)
        rows = self.conn.execute(
            f"SELECT {_TRANSFER_COLUMNS} FROM transfers "
            "WHERE from_account_id = ? OR to_account_id = ? "
            "ORDER BY id LIMIT ? OFFSET ?",
            (from_account_id, to_account_id, limit, offset),
        )
        return [_transfer(row) for row in rows]