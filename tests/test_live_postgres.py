import os

import pytest
from pydantic import SecretStr

from pgprobe.config import Settings
from pgprobe.models.probe import Outcome
from pgprobe.probe import run

settings = Settings()
live = pytest.mark.skipif(not settings.db_host, reason="DB_HOST not configured")


@live
def test_probe_against_configured_server():
    config = settings.connection_config(connect_timeout=10)
    result = run(config)
    assert result.outcome == Outcome.SUCCESS, result.error_message
    assert result.server_version
    assert result.database == config.database


@live
def test_wrong_password_is_authentication_error():
    config = settings.connection_config(connect_timeout=10).model_copy(
        update={"password": SecretStr("definitely-not-the-password")}
    )
    result = run(config)
    assert result.outcome == Outcome.CONNECTION_ERROR
    assert result.error_kind in ("authentication", "access-control")


@pytest.mark.skipif(not os.getenv("PGPROBE_NETWORK_TESTS"), reason="PGPROBE_NETWORK_TESTS not set")
def test_unresolvable_host():
    config = settings.connection_config(connect_timeout=5).model_copy(
        update={"host": "db.does-not-exist.invalid", "database": "x", "username": "x", "password": SecretStr("x")}
    )
    result = run(config)
    assert result.outcome == Outcome.CONNECTION_ERROR
    assert result.error_kind in ("dns-resolution", "timeout")
