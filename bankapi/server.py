"""HTTP API for accounts and transfers."""

from __future__ import annotations

import sqlite3
from typing import Any, Mapping, Optional

from flask import Flask, jsonify, request

from bankapi.models import Currency, is_supported_currency
from bankapi.queries import NotFoundError
from bankapi.store import Store

_DEFAULT_ADDRESS = ":8080"
_STORE_ERRORS = (sqlite3.Error, ValueError, TypeError, RuntimeError)


class _BindError(ValueError):
    """A request did not carry valid parameters."""


def valid_currency(value: object) -> bool:
    """Tell whether a request field holds a supported currency code."""
    return isinstance(value, str) and is_supported_currency(value)


def _error(err: BaseException | str, status: int):
    return jsonify({"error": str(err)}), status


def _json_body() -> Mapping[str, Any]:
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        raise _BindError("request body must be a JSON object")
    return data


def _required_str(data: Mapping[str, Any], key: str) -> str:
    value = data.get(key)
    if not isinstance(value, str) or not value:
        raise _BindError(f"field '{key}' is required")
    return value


def _check_min(key: str, value: int, minimum: int) -> int:
    if value < minimum:
        raise _BindError(f"field '{key}' must be at least {minimum}")
    return value


def _required_int(data: Mapping[str, Any], key: str, minimum: int) -> int:
    value = data.get(key)
    if isinstance(value, bool) or not isinstance(value, int) or value == 0:
        raise _BindError(f"field '{key}' is required and must be an integer")
    return _check_min(key, value, minimum)


def _parse_int(key: str, raw: Optional[str], minimum: int) -> int:
    if raw is None or raw == "":
        raise _BindError(f"field '{key}' is required")
    try:
        value = int(raw)
    except ValueError:
        raise _BindError(f"field '{key}' must be an integer") from None
    if value == 0:
        raise _BindError(f"field '{key}' is required")
    return _check_min(key, value, minimum)


class Server:
    """Serves the bank's HTTP requests from a store."""

    def __init__(self, store: Store) -> None:
        self.store = store
        self.app = Flask(__name__)
        self.app.add_url_rule("/accounts", "create_account", self._create_account, methods=["POST"])
        self.app.add_url_rule("/accounts/<raw_id>", "get_account", self._get_account, methods=["GET"])
        self.app.add_url_rule("/accounts", "list_accounts", self._list_accounts, methods=["GET"])
        self.app.add_url_rule("/transfers", "create_transfer", self._create_transfer, methods=["POST"])

    def start(self, address: str) -> None:
        """Listen on ``address`` (``host:port``, host optional) and serve requests."""
        host, _, port = (address or _DEFAULT_ADDRESS).rpartition(":")
        self.app.run(host=host or "0.0.0.0", port=int(port))

    def _create_account(self):
        try:
            data = _json_body()
            owner = _required_str(data, "owner")
            currency = _required_str(data, "currency")
        except _BindError as err:
            return _error(err, 400)
        try:
            account = self.store.create_account(owner, 0.0, currency)
        except _STORE_ERRORS as err:
            return _error(err, 500)
        return jsonify(account.to_dict()), 200

    def _get_account(self, raw_id: str):
        try:
            account_id = _parse_int("id", raw_id, 1)
        except _BindError as err:
            return _error(err, 400)
        try:
            account = self.store.get_account(account_id)
        except NotFoundError as err:
            return _error(err, 404)
        except _STORE_ERRORS as err:
            return _error(err, 500)
        return jsonify(account.to_dict()), 200

    def _list_accounts(self):
        try:
            page_id = _parse_int("page_id", request.args.get("page_id"), 1)
            page_size = _parse_int("page_size", request.args.get("page_size"), 5)
            if page_size > 10:
                raise _BindError("field 'page_size' must be at most 10")
        except _BindError as err:
            return _error(err, 400)
        try:
            accounts = self.store.list_accounts(page_size, (page_id - 1) * page_size)
        except _STORE_ERRORS as err:
            return _error(err, 500)
        return jsonify([account.to_dict() for account in accounts]), 200

    def _create_transfer(self):
        try:
            data = _json_body()
            from_id = _required_int(data, "from_account_id", 1)
            to_id = _required_int(data, "to_account_id", 1)
            amount = data.get("amount")
            if isinstance(amount, bool) or not isinstance(amount, (int, float)) or amount <= 0:
                raise _BindError("field 'amount' is required and must be greater than 0")
            currency = _required_str(data, "currency")
            if not valid_currency(currency):
                raise _BindError(f"field 'currency' holds an unsupported currency: {currency}")
        except _BindError as err:
            return _error(err, 400)

        for account_id in (from_id, to_id):
            failure = self._check_account(account_id, Currency(currency))
            if failure is not None:
                return failure

        try:
            result = self.store.transfer_tx(from_id, to_id, float(amount))
        except _STORE_ERRORS as err:
            return _error(err, 500)
        return jsonify(result.to_dict()), 200

    def _check_account(self, account_id: int, currency: Currency):
        try:
            account = self.store.get_account(account_id)
        except NotFoundError as err:
            return _error(err, 404)
        except _STORE_ERRORS as err:
            return _error(err, 500)
        if account.currency != currency:
            return _error(
                f"account [{account.id}] currency mismatch: {account.currency} vs {currency}",
                400,
            )
        return None