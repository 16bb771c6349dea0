import logging
import time
import traceback
from typing import Callable

from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError

from .db.engine import make_engine
from .db.introspect import fetch_server_info, set_statement_timeout
from .diagnostics.hints import classify, error_code, error_message, hint_for
from .models.probe import ConnectionConfig, Outcome, ProbeResult

logger = logging.getLogger(__name__)

EngineFactory = Callable[[ConnectionConfig], Engine]

# 드라이버/네트워크 실패로 보고 결과에 담는 예외. 나머지는 호출자에게 전파
PROBE_ERRORS = (SQLAlchemyError, OSError)


def _elapsed_ms(started: float) -> float:
    return round((time.perf_counter() - started) * 1000, 1)


def _failure(outcome: Outcome, exc: BaseException, started: float) -> ProbeResult:
    kind = classify(exc)
    return ProbeResult(
        outcome=outcome,
        error_kind=kind.value if kind else None,
        error_code=error_code(exc),
        error_message=error_message(exc),
        hint=hint_for(kind),
        error_detail="".join(traceback.format_exception(type(exc), exc, exc.__traceback__)),
        duration_ms=_elapsed_ms(started),
    )


def run(config: ConnectionConfig, engine_factory: EngineFactory = make_engine) -> ProbeResult:
    """
    One connectivity probe: validate -> connect -> introspect -> release.

    A single attempt is made (no retry). The connection is closed and the
    engine disposed on every path, including exceptions that are not ours
    to handle (those propagate after cleanup).
    """
    started = time.perf_counter()

    missing = config.missing_fields()
    if missing:
        logger.warning("missing required settings: %s", ", ".join(missing))
        return ProbeResult(
            outcome=Outcome.CONFIGURATION_ERROR,
            missing_fields=missing,
            error_message="missing required settings: " + ", ".join(missing),
            duration_ms=_elapsed_ms(started),
        )

    engine = engine_factory(config)
    try:
        logger.info(
            "connecting to %s:%s/%s as %s (tls=%s, timeout=%ss)",
            config.host, config.port, config.database, config.username,
            config.tls_mode.value, config.connect_timeout,
        )
        try:
            conn = engine.connect()
        except PROBE_ERRORS as e:
            logger.warning("connect failed: %s", e)
            return _failure(Outcome.CONNECTION_ERROR, e, started)

        try:
            set_statement_timeout(conn, config.statement_timeout or config.connect_timeout)
            info = fetch_server_info(conn)
        except PROBE_ERRORS as e:
            logger.warning("introspection query failed: %s", e)
            return _failure(Outcome.QUERY_ERROR, e, started)
        finally:
            conn.close()
    finally:
        engine.dispose()

    logger.info("probe ok in %sms", _elapsed_ms(started))
    return ProbeResult(
        outcome=Outcome.SUCCESS,
        server_version=info.get("db_version"),
        database=info.get("db_name"),
        user=info.get("db_user"),
        server_addr=info.get("server_addr"),
        client_addr=info.get("client_addr"),
        duration_ms=_elapsed_ms(started),
    )
