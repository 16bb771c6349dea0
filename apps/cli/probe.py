# apps/cli/probe.py
"""
PostgreSQL connectivity check.

Reads DB_HOST / DB_PORT / DB_NAME / DB_USER / DB_PASSWORD (and DB_SSL, APP_ENV,
DEBUG) from the environment or a .env file, opens one connection, runs one
introspection query and prints what happened.

Examples:
  python pg_conn_check.py
  python pg_conn_check.py --profile ecs --timeout 10
  DB_SSL=true python pg_conn_check.py --json

Exit codes: 0 ok, 1 connection/query failure, 2 configuration error.
"""
import argparse
import logging
import sys
from typing import List, Optional

from pydantic import ValidationError

from pgprobe.config import PROFILES, Settings
from pgprobe.models.probe import EXIT_CONFIG, EXIT_FAILURE
from pgprobe.probe import run
from pgprobe.report import config_summary, result_lines

log = logging.getLogger("pg_conn_check")


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="pg-conn-check",
        description=__doc__,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    p.add_argument("--env-file", default=".env", help="dotenv file to read (default: .env, ignored if absent)")
    p.add_argument("--profile", choices=PROFILES, default="local",
                   help="local: TLS only for production/RDS hosts; ecs: TLS always, SQL echo")
    p.add_argument("--timeout", type=float, default=None, help="connect timeout in seconds (overrides DB_CONNECT_TIMEOUT)")
    p.add_argument("--debug", action="store_true", help="print the full error (same as DEBUG=1)")
    p.add_argument("--json", action="store_true", help="print the result as JSON")
    p.add_argument("-v", "--verbose", action="store_true", help="log progress to stderr")
    return p


def _configure_logging(verbose: bool, debug: bool) -> None:
    level = logging.DEBUG if debug else logging.INFO if verbose else logging.WARNING
    logging.basicConfig(level=level, format="%(asctime)s | %(levelname)s | %(message)s")


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    if args.timeout is not None and args.timeout <= 0:
        print("DB CONFIG ERROR: --timeout must be positive")
        return EXIT_CONFIG

    try:
        settings = Settings(_env_file=args.env_file)
    except ValidationError as e:
        _configure_logging(args.verbose, args.debug)
        print("DB CONFIG ERROR: invalid settings")
        for err in e.errors():
            name = ".".join(str(x) for x in err.get("loc", ())) or "?"
            print(f"  {name}: {err.get('msg')}")
        return EXIT_CONFIG
    except Exception as e:
        # unreadable / undecodable .env and the like
        _configure_logging(args.verbose, args.debug)
        log.error("could not load settings: %s", e, exc_info=args.debug)
        print("DB CONFIG ERROR: could not load settings:", type(e).__name__, e)
        return EXIT_CONFIG

    debug = args.debug or settings.debug
    _configure_logging(args.verbose, debug)

    config = settings.connection_config(profile=args.profile, connect_timeout=args.timeout)
    if not args.json:
        print("\n".join(config_summary(config, args.profile, settings.app_env)))
        print()

    # 최상위 경계: 예상 못한 예외도 비정상 종료코드로
    try:
        result = run(config)
    except Exception as e:
        log.error("probe crashed: %s", e, exc_info=debug)
        print("DB ERROR:", type(e).__name__, e)
        return EXIT_FAILURE

    if args.json:
        exclude = None if debug else {"error_detail"}
        print(result.model_dump_json(indent=2, exclude=exclude))
    else:
        print("\n".join(result_lines(result, debug=debug)))
    return result.exit_code


if __name__ == "__main__":
    sys.exit(main())
