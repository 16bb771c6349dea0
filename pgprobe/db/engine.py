import math
from typing import Any, Dict

from sqlalchemy import create_engine
from sqlalchemy.engine import URL, Engine
from sqlalchemy.pool import NullPool

from ..models.probe import ConnectionConfig, TlsMode

DRIVER = "postgresql+psycopg"
APPLICATION_NAME = "pgprobe"

# TLS 모드 -> libpq sslmode
SSLMODES = {
    TlsMode.OFF: "disable",
    TlsMode.REQUIRED_INSECURE: "require",
    TlsMode.REQUIRED_VERIFIED: "verify-full",
}


def build_url(config: ConnectionConfig) -> URL:
    return URL.create(
        DRIVER,
        username=config.username,
        password=config.password.get_secret_value(),
        host=config.host,
        port=config.port,
        database=config.database,
    )


def connect_args(config: ConnectionConfig) -> Dict[str, Any]:
    # libpq connect_timeout is whole seconds
    args: Dict[str, Any] = {
        "sslmode": SSLMODES[config.tls_mode],
        "connect_timeout": max(1, int(math.ceil(config.connect_timeout))),
        "application_name": APPLICATION_NAME,
    }
    if config.tls_mode == TlsMode.REQUIRED_VERIFIED and config.ssl_root_cert:
        args["sslrootcert"] = config.ssl_root_cert
    return args


def make_engine(config: ConnectionConfig) -> Engine:
    # NullPool: close() on the connection closes the socket
    return create_engine(
        build_url(config),
        future=True,
        poolclass=NullPool,
        echo=config.echo_sql,
        connect_args=connect_args(config),
    )
