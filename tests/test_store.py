import sqlite3
from concurrent.futures import ThreadPoolExecutor

import pytest

from bankapi.models import Currency
from bankapi.queries import NotFoundError
from bankapi.randomdata import random_currency, random_money, random_owner
from bankapi.store import Store, TransferTxResult


@pytest.fixture
def store(tmp_path):
    s = Store(tmp_path / "bank.db")
    yield s
    s.close()


def create_random_account(store, currency=None):
    return store.create_account(
        random_owner(), random_money(), currency or random_currency()
    )


def test_transfer_tx(store):
    account1 = create_random_account(store, "USD")
    account2 = create_random_account(store, "USD")
    n = 5
    amount = 100.0

    with ThreadPoolExecutor(max_workers=n) as pool:
        futures = [
            pool.submit(store.transfer_tx, account1.id, account2.id, amount)
            for _ in range(n)
        ]
        results = [f.result() for f in futures]

    diffs = set()
    for result in results:
        transfer = result.transfer
        assert transfer.from_account_id == account1.id
        assert transfer.to_account_id == account2.id
        assert transfer.amount == amount
        assert transfer.id > 0
        assert transfer.created_at is not None
        assert store.get_transfer(transfer.id) == transfer

        from_entry = result.from_entry
        assert from_entry.account_id == account1.id
        assert from_entry.amount == -amount
        assert from_entry.id > 0
        assert from_entry.created_at is not None
        assert store.get_entry(from_entry.id) == from_entry

        to_entry = result.to_entry
        assert to_entry.account_id == account2.id
        assert to_entry.amount == amount
        assert to_entry.id > 0
        assert store.get_entry(to_entry.id) == to_entry

        assert result.from_account.id == account1.id
        assert result.to_account.id == account2.id

        diff1 = account1.balance - result.from_account.balance
        diff2 = result.to_account.balance - account2.balance
        assert diff1 == diff2
        assert diff1 >= amount
        assert diff1 % amount == 0
        k = int(diff1 // amount)
        assert 1 <= k <= n
        diffs.add(k)
    assert diffs == set(range(1, n + 1))

    after1 = store.get_account(account1.id)
    after2 = store.get_account(account2.id)
    assert after1.balance == account1.balance - n * amount
    assert after2.balance == account2.balance + n * amount


def test_transfer_tx_deadlock(store):
    account1 = create_random_account(store)
    account2 = create_random_account(store)
    n = 10
    amount = 100.0

    def run(i):
        if i % 2 == 0:
            return store.transfer_tx(account2.id, account1.id, amount)
        return store.transfer_tx(account1.id, account2.id, amount)

    with ThreadPoolExecutor(max_workers=n) as pool:
        results = list(pool.map(run, range(n)))

    assert len(results) == n
    assert store.get_account(account1.id).balance == account1.balance
    assert store.get_account(account2.id).balance == account2.balance


def test_transfer_result_accounts_in_reverse_order(store):
    low = create_random_account(store)
    high = create_random_account(store)
    result = store.transfer_tx(high.id, low.id, 50.0)
    assert result.from_account.id == high.id
    assert result.to_account.id == low.id
    assert result.from_account.balance == high.balance - 50.0
    assert result.to_account.balance == low.balance + 50.0


def test_transfer_to_missing_account_rolls_back(store):
    account = create_random_account(store)
    with pytest.raises(sqlite3.IntegrityError):
        store.transfer_tx(account.id, account.id + 1000, 10.0)
    assert store.get_account(account.id).balance == account.balance
    assert store.list_transfers(account.id, account.id, 10, 0) == []
    assert store.list_entries(account.id, 10, 0) == []


def test_transaction_rolls_back_on_error(store):
    account = create_random_account(store)
    with pytest.raises(KeyError):
        with store.transaction() as q:
            q.create_entry(account.id, 5.0)
            q.add_account_balance(account.id, 5.0)
            raise KeyError("boom")
    assert store.list_entries(account.id, 10, 0) == []
    assert store.get_account(account.id).balance == account.balance


def test_transaction_commits(store):
    account = create_random_account(store)
    with store.transaction() as q:
        entry = q.create_entry(account.id, 7.0)
    assert store.get_entry(entry.id) == entry


def test_store_runs_plain_queries(store):
    account = store.create_account("alice", 10.0, Currency.EUR)
    assert store.get_account(account.id) == account
    store.delete_account(account.id)
    with pytest.raises(NotFoundError):
        store.get_account(account.id)


def test_result_to_dict(store):
    a = create_random_account(store, "EUR")
    b = create_random_account(store, "EUR")
    result = store.transfer_tx(a.id, b.id, 25.0)
    assert isinstance(result, TransferTxResult)
    data = result.to_dict()
    assert set(data) == {"transfer", "from_account", "to_account", "from_entry", "to_entry"}
    assert data["transfer"] == result.transfer.to_dict()
    assert data["from_entry"]["amount"] == -25.0
    assert data["to_account"]["id"] == b.id


def test_close_stops_queries(tmp_path):
    s = Store(tmp_path / "closed.db")
    s.close()
    with pytest.raises(sqlite3.ProgrammingError):
        s.get_account(1)


def test_data_persists_across_stores(tmp_path):
    path = tmp_path / "persist.db"
    first = Store(path)
    account = first.create_account("bob", 3.0, "USD")
    first.close()
    second = Store(path)
    try:
        assert second.get_account(account.id) == account
    finally:
        second.close()