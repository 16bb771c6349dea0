from sqlalchemy.pool import NullPool

from pgprobe.db.engine import build_url, connect_args, make_engine
from pgprobe.models.probe import ConnectionConfig, TlsMode


def _config(**kw):
    base = dict(host="db.example.com", port=5433, database="testdb", username="u", password="p@ss")
    base.update(kw)
    return ConnectionConfig(**base)


def test_url_uses_psycopg_driver():
    url = build_url(_config())
    assert url.drivername == "postgresql+psycopg"
    assert (url.host, url.port, url.database, url.username) == ("db.example.com", 5433, "testdb", "u")
    assert url.password == "p@ss"
    assert "p@ss" not in repr(url)


def test_connect_args_follow_tls_and_timeouts():
    args = connect_args(_config(tls_mode=TlsMode.REQUIRED_INSECURE, connect_timeout=2.5))
    assert args["sslmode"] == "require"
    assert args["connect_timeout"] == 3
    assert "options" not in args
    assert "sslrootcert" not in args


def test_verified_tls_passes_root_cert():
    args = connect_args(_config(tls_mode=TlsMode.REQUIRED_VERIFIED, ssl_root_cert="/etc/ssl/rds.pem",
                                statement_timeout=5))
    assert args["sslmode"] == "verify-full"
    assert args["sslrootcert"] == "/etc/ssl/rds.pem"


def test_tls_off_disables_ssl():
    assert connect_args(_config())["sslmode"] == "disable"


def test_make_engine_does_not_connect():
    engine = make_engine(_config(echo_sql=True))
    try:
        assert isinstance(engine.pool, NullPool)
        assert engine.echo is True
    finally:
        engine.dispose()
