from typing import List

from .models.probe import ConnectionConfig, Outcome, ProbeResult

NOT_SET = "NOT SET"


def _shown(value) -> str:
    return str(value) if value not in (None, "") else NOT_SET


def config_summary(config: ConnectionConfig, profile: str, app_env: str) -> List[str]:
    # 비밀번호는 설정 여부만 출력
    password_set = bool(config.password.get_secret_value())
    return [
        "[CONFIG]",
        f"  DB_HOST:     {_shown(config.host)}",
        f"  DB_PORT:     {config.port}",
        f"  DB_NAME:     {_shown(config.database)}",
        f"  DB_USER:     {_shown(config.username)}",
        f"  DB_PASSWORD: {'SET' if password_set else NOT_SET}",
        f"  TLS:         {config.tls_mode.value}",
        f"  TIMEOUT:     {config.connect_timeout:g}s",
        f"  PROFILE:     {profile} (env={app_env})",
    ]


def result_lines(result: ProbeResult, debug: bool = False) -> List[str]:
    if result.outcome == Outcome.SUCCESS:
        lines = [
            f"DB OK: connected in {result.duration_ms:g}ms",
            f"  Version:  {result.server_version}",
            f"  Database: {result.database}",
            f"  User:     {result.user}",
        ]
        if result.server_addr or result.client_addr:
            lines.append(f"  Server:   {_shown(result.server_addr)}")
            lines.append(f"  Client:   {_shown(result.client_addr)}")
        return lines

    if result.outcome == Outcome.CONFIGURATION_ERROR:
        lines = [f"DB CONFIG ERROR: {result.error_message}"]
        if result.missing_fields:
            lines.append("  Set them in the environment or in a .env file.")
        return lines

    label = "connect" if result.outcome == Outcome.CONNECTION_ERROR else "query"
    lines = [
        f"DB ERROR ({label}): {result.outcome.value}",
        f"  Code:    {_shown(result.error_code)}",
        f"  Message: {_shown(result.error_message)}",
    ]
    if result.hint:
        lines.append(f"  Hint:    {result.hint}")
    if debug and result.error_detail:
        lines.append("[DEBUG] full error:")
        lines.append(result.error_detail.rstrip())
    return lines
