"""Application settings read from ``app.env`` and the environment."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import dotenv_values

_CONFIG_NAMES = ("app.env", "app")


@dataclass(frozen=True)
class Config:
    """Where the database lives and where the server listens."""

    db_source: str = ""
    server_address: str = ""


def _find_config(path: Path) -> Path | None:
    for name in _CONFIG_NAMES:
        candidate = path / name
        if candidate.is_file():
            return candidate
    return None


def load_config(path: str | os.PathLike[str]) -> Config:
    """Read settings from the ``app.env`` file in ``path``.

    Environment variables of the same name override values from the file.
    When no config file can be found an empty ``Config`` is returned.
    """
    config_file = _find_config(Path(path))
    if config_file is None:
        return Config()
    values = {
        key.upper(): value or ""
        for key, value in dotenv_values(config_file).items()
    }

    def setting(key: str) -> str:
        return os.environ.get(key, values.get(key, ""))

    return Config(
        db_source=setting("DB_SOURCE"),
        server_address=setting("SERVER_ADDRESS"),
    )