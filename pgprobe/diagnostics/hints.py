import socket
from enum import Enum
from typing import Optional

from sqlalchemy.exc import DBAPIError


class ErrorKind(str, Enum):
    DNS_RESOLUTION = "dns-resolution"
    CONNECTION_REFUSED = "connection-refused"
    TIMEOUT = "timeout"
    AUTHENTICATION = "authentication"
    ACCESS_CONTROL = "access-control"


HINTS = {
    ErrorKind.DNS_RESOLUTION: (
        "The database host could not be resolved. Check DB_HOST for typos "
        "and that this machine can resolve the endpoint (VPC/private DNS)."
    ),
    ErrorKind.CONNECTION_REFUSED: (
        "The server refused the connection. Check that the database is running "
        "and listening on DB_HOST:DB_PORT."
    ),
    ErrorKind.TIMEOUT: (
        "The connection attempt timed out. Check security groups / firewall rules "
        "for the port, and that the instance is reachable from this network."
    ),
    ErrorKind.AUTHENTICATION: (
        "Authentication failed. Check DB_USER and DB_PASSWORD."
    ),
    ErrorKind.ACCESS_CONTROL: (
        "The server rejected this client in pg_hba.conf. Check the allowed client "
        "addresses and whether the server requires TLS (DB_SSL=true)."
    ),
}

# 메시지 시그니처 (소문자 비교). 순서대로 첫 매치가 이긴다.
_SIGNATURES = (
    (ErrorKind.ACCESS_CONTROL, ("no pg_hba.conf entry",)),
    (ErrorKind.AUTHENTICATION, (
        "password authentication failed",
        "authentication failed",
        "password is required",
        "no password supplied",
    )),
    (ErrorKind.DNS_RESOLUTION, (
        "could not translate host name",
        "failed to resolve host",
        "name or service not known",
        "nodename nor servname",
        "temporary failure in name resolution",
        "no address associated with hostname",
    )),
    (ErrorKind.CONNECTION_REFUSED, ("connection refused",)),
    (ErrorKind.TIMEOUT, (
        "timeout expired",
        "timed out",
        "statement timeout",
    )),
)

_SQLSTATES = {
    "28P01": ErrorKind.AUTHENTICATION,  # invalid_password
    "57014": ErrorKind.TIMEOUT,  # query_canceled (statement_timeout)
}


def root_cause(exc: BaseException) -> BaseException:
    """Unwrap the SQLAlchemy wrapper to the driver exception."""
    if isinstance(exc, DBAPIError) and exc.orig is not None:
        return exc.orig
    return exc


def error_code(exc: BaseException) -> str:
    orig = root_cause(exc)
    sqlstate = getattr(orig, "sqlstate", None)
    if sqlstate:
        return sqlstate
    if isinstance(orig, OSError) and orig.errno is not None:
        return f"{type(orig).__name__}[{orig.errno}]"
    return type(orig).__name__


def error_message(exc: BaseException) -> str:
    return str(root_cause(exc)).strip() or type(exc).__name__


def classify(exc: BaseException) -> Optional[ErrorKind]:
    orig = root_cause(exc)

    if isinstance(orig, socket.gaierror):
        return ErrorKind.DNS_RESOLUTION
    if isinstance(orig, ConnectionRefusedError):
        return ErrorKind.CONNECTION_REFUSED
    if isinstance(orig, TimeoutError):
        return ErrorKind.TIMEOUT

    message = str(orig).lower()
    for kind, needles in _SIGNATURES:
        if any(n in message for n in needles):
            return kind

    return _SQLSTATES.get(getattr(orig, "sqlstate", None) or "")


def hint_for(kind: Optional[ErrorKind]) -> Optional[str]:
    if kind is None:
        return None
    return HINTS[kind]
