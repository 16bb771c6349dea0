from typing import Dict

from sqlalchemy import text
from sqlalchemy.engine import Connection

# SET cannot take bind parameters; set_config() can
STATEMENT_TIMEOUT_SQL = text("SELECT set_config('statement_timeout', :ms, false)")

SERVER_INFO_SQL = text(
    """
    SELECT version()                AS db_version,
           current_database()       AS db_name,
           current_user             AS db_user,
           host(inet_server_addr()) AS server_addr,
           host(inet_client_addr()) AS client_addr
    """
)


def set_statement_timeout(conn: Connection, seconds: float) -> None:
    # on the open session, not as a startup `options` parameter (poolers such as PgBouncer reject it)
    conn.execute(STATEMENT_TIMEOUT_SQL, {"ms": str(max(1, int(seconds * 1000)))})


def fetch_server_info(conn: Connection) -> Dict:
    """Read-only: one row, nothing is written. Addresses are NULL over a unix socket."""
    row = conn.execute(SERVER_INFO_SQL).mappings().one()
    return dict(row)
