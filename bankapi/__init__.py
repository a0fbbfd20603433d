"""Banking service: accounts, ledger entries and atomic transfers over HTTP, stored in SQLite."""

__version__ = "0.1.0"

__all__ = ["config", "main", "models", "queries", "randomdata", "server", "store"]