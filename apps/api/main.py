import logging
from contextlib import asynccontextmanager
from typing import Union

from fastapi import Depends, FastAPI, Request
from fastapi.responses import JSONResponse
from pydantic import ValidationError

from pgprobe.config import Settings
from pgprobe.diagnostics.hints import error_code, error_message
from pgprobe.models.probe import ConnectionConfig, Outcome, ProbeResult
from pgprobe.probe import run

logger = logging.getLogger(__name__)


def load_connection_config() -> Union[ConnectionConfig, ProbeResult]:
    """Settings are read once; a bad environment becomes a configuration-error result."""
    try:
        return Settings().connection_config()
    except ValidationError as e:
        names = ", ".join(".".join(str(x) for x in err.get("loc", ())) for err in e.errors())
        logger.error("invalid settings: %s", names)
        return ProbeResult(
            outcome=Outcome.CONFIGURATION_ERROR,
            error_code=type(e).__name__,
            error_message=f"invalid settings: {names}",
        )


@asynccontextmanager
async def lifespan(app: FastAPI):
    # 프로세스 시작 시 한 번만 읽는다
    app.state.connection_config = load_connection_config()
    yield


app = FastAPI(title="pgprobe", lifespan=lifespan)


def get_connection_config(request: Request) -> Union[ConnectionConfig, ProbeResult]:
    state = request.app.state
    if getattr(state, "connection_config", None) is None:
        state.connection_config = load_connection_config()
    return state.connection_config


def _respond(result: ProbeResult) -> JSONResponse:
    body = result.model_dump(mode="json", exclude={"error_detail"})
    return JSONResponse(status_code=200 if result.ok else 503, content=body)


@app.get("/healthz")
def healthz():
    return {"ok": True}


@app.get("/healthz/db")
def healthz_db(config: Union[ConnectionConfig, ProbeResult] = Depends(get_connection_config)):
    if isinstance(config, ProbeResult):
        return _respond(config)

    try:
        result = run(config)
    except Exception as e:
        logger.exception("probe crashed")
        result = ProbeResult(
            outcome=Outcome.CONNECTION_ERROR,
            error_code=error_code(e),
            error_message=error_message(e),
        )
    return _respond(result)
