"""Database store that runs the bank's queries and money transfers."""

from __future__ import annotations

import os
import sqlite3
import threading
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Any, Iterator, Optional, Sequence

from bankapi.models import Account, Entry, Transfer
from bankapi.queries import Queries, create_schema


class _Result:
    """Rows and counters of one executed statement."""

    def __init__(self, rows: list[Any], rowcount: int, lastrowid: Optional[int]) -> None:
        self._rows = rows
        self.rowcount = rowcount
        self.lastrowid = lastrowid

    def fetchone(self) -> Optional[Any]:
        return self._rows[0] if self._rows else None

    def fetchall(self) -> list[Any]:
        return list(self._rows)

    def __iter__(self) -> Iterator[Any]:
        return iter(self._rows)


class _SerializedConnection:
    """Shares one sqlite3 connection between threads, one statement at a time."""

    def __init__(self, raw: sqlite3.Connection, lock: threading.RLock) -> None:
        self._raw = raw
        self._lock = lock

    def execute(self, sql: str, params: Sequence[Any] = ()) -> _Result:
        with self._lock:
            cur = self._raw.execute(sql, params)
            try:
                rows = cur.fetchall()
                rowcount, lastrowid = cur.rowcount, cur.lastrowid
            finally:
                cur.close()
            return _Result(rows, rowcount, lastrowid)


@dataclass(frozen=True)
class TransferTxResult:
    """Everything a money transfer wrote to the database."""

    transfer: Transfer
    from_account: Account
    to_account: Account
    from_entry: Entry
    to_entry: Entry

    def to_dict(self) -> dict[str, Any]:
        """Return the result as a JSON-ready mapping."""
        return {
            "transfer": self.transfer.to_dict(),
            "from_account": self.from_account.to_dict(),
            "to_account": self.to_account.to_dict(),
            "from_entry": self.from_entry.to_dict(),
            "to_entry": self.to_entry.to_dict(),
        }


def _add_money(
    q: Queries, account_id1: int, amount1: float, account_id2: int, amount2: float
) -> tuple[Account, Account]:
    account1 = q.add_account_balance(account_id1, amount1)
    account2 = q.add_account_balance(account_id2, amount2)
    return account1, account2


class Store(Queries):
    """Runs single queries and whole transactions against one database."""

    def __init__(self, database: str | os.PathLike[str]) -> None:
        raw = sqlite3.connect(database, check_same_thread=False, isolation_level=None)
        try:
            raw.execute("PRAGMA foreign_keys = ON")
            create_schema(raw)
        except sqlite3.Error:
            raw.close()
            raise
        self._raw = raw
        self._lock = threading.RLock()
        super().__init__(_SerializedConnection(raw, self._lock))

    @contextmanager
    def transaction(self) -> Iterator[Queries]:
        """Run the body in a transaction: commit on success, roll back on error."""
        with self._lock:
            self._raw.execute("BEGIN IMMEDIATE")
            try:
                yield Queries(self.conn)
            except BaseException as err:
                try:
                    self._raw.execute("ROLLBACK")
                except sqlite3.Error as rb_err:
                    raise RuntimeError(
                        f"failed to rollback transaction. tx err: {err}, rb err: {rb_err}"
                    ) from err
                raise
            self._raw.execute("COMMIT")

    def transfer_tx(self, from_account_id: int, to_account_id: int, amount: float) -> TransferTxResult:
        """Move money between accounts in one transaction.

        Records the transfer, one entry per account and updates both balances.
        Balances are updated in ascending account id order.
        """
        with self.transaction() as q:
            transfer = q.create_transfer(from_account_id, to_account_id, amount)
            from_entry = q.create_entry(from_account_id, -amount)
            to_entry = q.create_entry(to_account_id, amount)
            if from_account_id < to_account_id:
                from_account, to_account = _add_money(
                    q, from_account_id, -amount, to_account_id, amount
                )
            else:
                to_account, from_account = _add_money(
                    q, to_account_id, amount, from_account_id, -amount
                )
        return TransferTxResult(
            transfer=transfer,
            from_account=from_account,
            to_account=to_account,
            from_entry=from_entry,
            to_entry=to_entry,
        )

    def close(self) -> None:
        """Close the database connection."""
        with self._lock:
            self._raw.close()