"""Command that starts the bank's HTTP server."""

from __future__ import annotations

import argparse
import logging
import sqlite3
import sys
from typing import Optional, Sequence

from bankapi.config import load_config
from bankapi.server import Server
from bankapi.store import Store

log = logging.getLogger("bankapi")


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Load the settings, open the database and serve until stopped."""
    parser = argparse.ArgumentParser(prog="bankapi", description="Run the bank HTTP API.")
    parser.add_argument(
        "--config-dir",
        default=".",
        help="directory holding app.env (default: current directory)",
    )
    args = parser.parse_args(argv)
    logging.basicConfig(level=logging.INFO)

    config = load_config(args.config_dir)
    if not config.db_source:
        log.error("cannot connect to db: DB_SOURCE is not set")
        return 1
    try:
        store = Store(config.db_source)
    except sqlite3.Error as err:
        log.error("cannot connect to db: %s", err)
        return 1

    try:
        Server(store).start(config.server_address)
    except (OSError, ValueError) as err:
        log.error("cannot start server: %s", err)
        return 1
    finally:
        store.close()
    return 0


if __name__ == "__main__":
    sys.exit(main())