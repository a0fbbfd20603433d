# bankapi

A small banking service with a JSON HTTP interface. It keeps accounts in a
SQLite database, records every movement of money as ledger entries, and moves
money between accounts inside a single database transaction so that balances
always agree with the ledger.

## Installation

```
pip install .
```

To run the test suite as well:

```
pip install ".[test]"
pytest
```

## Configuration

Settings are read from a file named `app.env` (or `app`) in the configuration
directory, which is the current directory unless `--config-dir` says
otherwise. Environment variables of the same name take precedence over the
file. When no such file is found, no settings are loaded at all.

| Key              | Meaning                                                        |
|------------------|----------------------------------------------------------------|
| `DB_SOURCE`      | path of the SQLite database file (created if it is missing)    |
| `SERVER_ADDRESS` | `host:port` to listen on; the host may be left out, e.g. `:8080` |

Example `app.env`:

```
DB_SOURCE=bank.db
SERVER_ADDRESS=127.0.0.1:8080
```

If `SERVER_ADDRESS` is empty the server listens on `0.0.0.0:8080`; an address
without a host also listens on `0.0.0.0`.

## Running

```
bankapi
bankapi --config-dir /path/to/settings
```

The command loads the settings, opens the database (creating the `accounts`,
`entries` and `transfers` tables if needed) and serves HTTP requests until it
is stopped. It exits with status 1 when `DB_SOURCE` is not set, when the
database cannot be opened, or when the server cannot be started.

## HTTP interface

Supported currencies are `USD` and `EUR`. Every error answer has the shape
`{"error": "<message>"}`. Timestamps are given in ISO 8601 form.

### `POST /accounts`

Create an account with a zero balance.

```json
{"owner": "alice", "currency": "USD"}
```

Both fields are required non-empty strings; a missing field or a body that is
not a JSON object gives `400`. A currency other than `USD` or `EUR` is refused
by the database layer and answers `500`. On success the answer is `200` with
the new account:

```json
{"id": 1, "owner": "alice", "currency": "USD", "balance": 0.0, "created_at": "..."}
```

### `GET /accounts/<id>`

Fetch one account. `id` must be an integer of at least 1, otherwise the
answer is `400`. Answers `200` with the account, or `404` when it does not
exist.

### `GET /accounts?page_id=<n>&page_size=<m>`

List accounts ordered by id. `page_id` must be at least 1 and `page_size`
between 5 and 10; both are required. Answers `200` with a JSON array.

### `POST /transfers`

Move money from one account to another.

```json
{"from_account_id": 1, "to_account_id": 2, "amount": 10.0, "currency": "USD"}
```

All fields are required: the ids must be integers of at least 1, `amount`
must be a number greater than 0, and `currency` must be `USD` or `EUR`;
otherwise the answer is `400`. Each account must exist (`404` if not) and
hold the given currency (`400` on a mismatch). On success the answer is `200`
with the transfer record, the two ledger entries and both accounts with their
updated balances:

```json
{"transfer": {...}, "from_account": {...}, "to_account": {...},
 "from_entry": {...}, "to_entry": {...}}
```

## Using it as a library

- `bankapi.models` – the frozen dataclasses `Account`, `Entry` and
  `Transfer` (each with `to_dict()`), the `Currency` enum,
  `is_supported_currency()` and `safe_time()`, which turns a missing
  timestamp into `datetime.min`.
- `bankapi.queries` – `Queries`, the individual operations on a `sqlite3`
  connection (create, get, list, update and delete accounts; create, get and
  list entries and transfers; add to an account's balance), and
  `create_schema()`. A lookup that finds no row raises `NotFoundError`;
  a negative limit or offset raises `ValueError`.
- `bankapi.store` – `Store(database)`, a `Queries` over one SQLite database
  that can be shared between threads. `transaction()` is a context manager
  yielding a `Queries` that commits on success and rolls back on error;
  `transfer_tx(from_account_id, to_account_id, amount)` runs a whole transfer
  and returns a `TransferTxResult`; `close()` closes the database.
- `bankapi.server` – `Server(store)`, the Flask application (`Server.app`)
  around a `Store`, with `start(address)`, and `valid_currency()`.
- `bankapi.config` – `Config` and `load_config(path)`.
- `bankapi.randomdata` – `random_int()`, `random_string()`,
  `random_owner()`, `random_money()` and `random_currency()` for sample
  data and tests.

```python
from bankapi.store import Store

store = Store("bank.db")
alice = store.create_account("alice", 500.0, "USD")
bob = store.create_account("bob", 0.0, "USD")
result = store.transfer_tx(alice.id, bob.id, 100.0)
print(result.from_account.balance, result.to_account.balance)  # 400.0 100.0
store.close()
```

## What it does not do

- Storage is SQLite only; `DB_SOURCE` is a file path, not a connection
  string for a database server.
- There is no authentication or authorisation on the HTTP interface.
- The HTTP interface has no endpoints for deleting or updating accounts or
  for listing entries and transfers; those operations exist only in
  `bankapi.queries`.
- The server is Flask's built-in development server.