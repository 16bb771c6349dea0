from typing import Optional

from pydantic import AliasChoices, Field, SecretStr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .models.probe import ConnectionConfig, TlsMode

PROFILES = ("local", "ecs")
PRODUCTION_ENVS = {"production", "prod"}
RDS_HOST_SUFFIX = ".rds.amazonaws.com"

_TLS_VALUES = {
    "true": TlsMode.REQUIRED_INSECURE,
    "1": TlsMode.REQUIRED_INSECURE,
    "yes": TlsMode.REQUIRED_INSECURE,
    "on": TlsMode.REQUIRED_INSECURE,
    "require": TlsMode.REQUIRED_INSECURE,
    "required": TlsMode.REQUIRED_INSECURE,
    "required-insecure": TlsMode.REQUIRED_INSECURE,
    "verify": TlsMode.REQUIRED_VERIFIED,
    "verify-full": TlsMode.REQUIRED_VERIFIED,
    "required-verified": TlsMode.REQUIRED_VERIFIED,
    "false": TlsMode.OFF,
    "0": TlsMode.OFF,
    "no": TlsMode.OFF,
    "off": TlsMode.OFF,
    "disable": TlsMode.OFF,
}
_FALSY = {"", "0", "false", "no", "off"}


def parse_tls_mode(raw: str) -> TlsMode:
    key = raw.strip().lower()
    if key not in _TLS_VALUES:
        raise ValueError(f"unknown TLS mode {raw!r} (use true/false/verify)")
    return _TLS_VALUES[key]


def default_tls_mode(profile: str, app_env: str, host: str) -> TlsMode:
    """
    TLS policy when DB_SSL is not given.
    - ecs: always encrypted (RDS from a task)
    - local: encrypted for production or an RDS endpoint, plain otherwise
    """
    if profile == "ecs":
        return TlsMode.REQUIRED_INSECURE
    if (app_env or "").strip().lower() in PRODUCTION_ENVS:
        return TlsMode.REQUIRED_INSECURE
    if (host or "").strip().lower().endswith(RDS_HOST_SUFFIX):
        return TlsMode.REQUIRED_INSECURE
    return TlsMode.OFF


class Settings(BaseSettings):
    # DB_* names are the env var names; blank values fall back to the defaults
    model_config = SettingsConfigDict(
        env_file=".env",
        env_ignore_empty=True,
        extra="ignore",
        populate_by_name=True,
    )

    db_host: str = Field(default="", alias="DB_HOST")
    db_port: int = Field(default=5432, alias="DB_PORT", gt=0, lt=65536)
    db_name: str = Field(default="", alias="DB_NAME")
    db_user: str = Field(default="", alias="DB_USER")
    db_password: SecretStr = Field(default=SecretStr(""), alias="DB_PASSWORD")

    # TLS: 미지정이면 profile/환경/호스트로 결정
    db_ssl: Optional[TlsMode] = Field(default=None, alias="DB_SSL")
    db_ssl_root_cert: Optional[str] = Field(default=None, alias="DB_SSL_ROOT_CERT")

    db_connect_timeout: float = Field(default=60.0, alias="DB_CONNECT_TIMEOUT", gt=0)
    db_statement_timeout: Optional[float] = Field(default=None, alias="DB_STATEMENT_TIMEOUT", gt=0)

    app_env: str = Field(
        default="development",
        validation_alias=AliasChoices("APP_ENV", "NODE_ENV"),
    )
    debug: bool = Field(default=False, alias="DEBUG")

    @field_validator("db_ssl", mode="before")
    @classmethod
    def _parse_db_ssl(cls, v):
        if v is None or isinstance(v, TlsMode):
            return v
        return parse_tls_mode(str(v))

    @field_validator("debug", mode="before")
    @classmethod
    def _parse_debug(cls, v):
        # DEBUG=* 같은 값도 켜진 것으로 본다
        if isinstance(v, str):
            return v.strip().lower() not in _FALSY
        return v

    def tls_mode(self, profile: str = "local") -> TlsMode:
        if self.db_ssl is not None:
            return self.db_ssl
        return default_tls_mode(profile, self.app_env, self.db_host)

    def connection_config(
        self,
        profile: str = "local",
        connect_timeout: Optional[float] = None,
    ) -> ConnectionConfig:
        if profile not in PROFILES:
            raise ValueError(f"unknown profile {profile!r}")
        return ConnectionConfig(
            host=self.db_host.strip(),
            port=self.db_port,
            database=self.db_name.strip(),
            username=self.db_user.strip(),
            password=self.db_password,
            tls_mode=self.tls_mode(profile),
            connect_timeout=connect_timeout or self.db_connect_timeout,
            statement_timeout=self.db_statement_timeout,
            ssl_root_cert=self.db_ssl_root_cert,
            echo_sql=profile == "ecs",
        )
