import pytest

from bankapi.config import Config, load_config


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    monkeypatch.delenv("DB_SOURCE", raising=False)
    monkeypatch.delenv("SERVER_ADDRESS", raising=False)


def write_env(directory, text, name="app.env"):
    (directory / name).write_text(text)


def test_reads_values_from_file(tmp_path):
    write_env(tmp_path, "DB_SOURCE=bank.db\nSERVER_ADDRESS=0.0.0.0:8080\n")
    config = load_config(tmp_path)
    assert config == Config(db_source="bank.db", server_address="0.0.0.0:8080")


def test_environment_overrides_file(tmp_path, monkeypatch):
    write_env(tmp_path, "DB_SOURCE=bank.db\nSERVER_ADDRESS=0.0.0.0:8080\n")
    monkeypatch.setenv("SERVER_ADDRESS", "127.0.0.1:9090")
    config = load_config(str(tmp_path))
    assert config.server_address == "127.0.0.1:9090"
    assert config.db_source == "bank.db"


def test_missing_file_gives_empty_config(tmp_path, monkeypatch):
    monkeypatch.setenv("DB_SOURCE", "ignored.db")
    assert load_config(tmp_path) == Config()


def test_keys_are_case_insensitive(tmp_path):
    write_env(tmp_path, "db_source=lower.db\n")
    config = load_config(tmp_path)
    assert config.db_source == "lower.db"
    assert config.server_address == ""


def test_config_file_without_extension(tmp_path):
    write_env(tmp_path, "SERVER_ADDRESS=localhost:8000\n", name="app")
    assert load_config(tmp_path).server_address == "localhost:8000"