from enum import Enum
from typing import Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, SecretStr

# 필수 입력 (검사 순서 고정)
REQUIRED_FIELDS = ("host", "database", "username", "password")

EXIT_OK = 0
EXIT_FAILURE = 1
EXIT_CONFIG = 2


class TlsMode(str, Enum):
    OFF = "off"
    REQUIRED_INSECURE = "required-insecure"
    REQUIRED_VERIFIED = "required-verified"


class Outcome(str, Enum):
    SUCCESS = "success"
    CONFIGURATION_ERROR = "configuration-error"
    CONNECTION_ERROR = "connection-error"
    QUERY_ERROR = "query-error"


class ConnectionConfig(BaseModel):
    """Everything needed for one connection attempt."""

    model_config = ConfigDict(frozen=True)

    host: str = ""
    port: int = 5432
    database: str = ""
    username: str = ""
    password: SecretStr = SecretStr("")
    tls_mode: TlsMode = TlsMode.OFF
    connect_timeout: float = Field(default=60.0, gt=0)
    statement_timeout: Optional[float] = Field(default=None, gt=0)
    ssl_root_cert: Optional[str] = None
    echo_sql: bool = False

    def missing_fields(self) -> Tuple[str, ...]:
        values = {
            "host": self.host,
            "database": self.database,
            "username": self.username,
            "password": self.password.get_secret_value(),
        }
        return tuple(name for name in REQUIRED_FIELDS if not (values[name] or "").strip())


class ProbeResult(BaseModel):
    """
    Outcome of a single probe.
    - success: server_version/database/user are filled from the server
    - *-error: error_code/error_message (and hint when the error is recognised)
    """

    model_config = ConfigDict(frozen=True)

    outcome: Outcome
    server_version: Optional[str] = None
    database: Optional[str] = None
    user: Optional[str] = None
    server_addr: Optional[str] = None
    client_addr: Optional[str] = None
    missing_fields: Tuple[str, ...] = ()
    error_kind: Optional[str] = None
    error_code: Optional[str] = None
    error_message: Optional[str] = None
    hint: Optional[str] = None
    error_detail: Optional[str] = None
    duration_ms: float = 0.0

    @property
    def ok(self) -> bool:
        return self.outcome == Outcome.SUCCESS

    @property
    def exit_code(self) -> int:
        if self.outcome == Outcome.SUCCESS:
            return EXIT_OK
        if self.outcome == Outcome.CONFIGURATION_ERROR:
            return EXIT_CONFIG
        return EXIT_FAILURE
