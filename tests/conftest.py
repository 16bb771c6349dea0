import pytest

ENV_VARS = (
    "DB_HOST", "DB_PORT", "DB_NAME", "DB_USER", "DB_PASSWORD", "DB_SSL",
    "DB_SSL_ROOT_CERT", "DB_CONNECT_TIMEOUT", "DB_STATEMENT_TIMEOUT",
    "APP_ENV", "NODE_ENV", "DEBUG",
)


@pytest.fixture
def clean_env(monkeypatch):
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    return monkeypatch
