from __future__ import annotations

import argparse
import json
import os
import sys
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import replace
from pathlib import Path
from typing import Any

import psycopg2
from dotenv import load_dotenv

from empstats.config.loader import DEFAULT_CONFIG_PATH, ConfigError, load_config
from empstats.db.employee_store import EmployeeStore, LookupFailedError, StoreError
from empstats.excel.reader import ImportFileError
from empstats.excel.writer import write_import_template
from empstats.logging.init import log_summary, setup_logging
from empstats.models.config_models import AppConfig
from empstats.services.bulk_import import import_employees
from empstats.services.duplicates import find_duplicate_uids
from empstats.services.export import ExportError, export_employees
from empstats.services.stats import StatsBusyError, StatsSession
from empstats.services.summary import (
    render_export_summary_line,
    render_import_summary_line,
    render_stats_report,
    render_stats_summary_line,
)
from empstats.text.reader import EmptyInputError, MalformedRowError, require_text

"""CLI for the employee directory tool (`python -m empstats.cli`, `empstats`).

Subcommands:
- stats       process pasted leaderboard text (file or stdin)
- search      list employees holding a UID, optionally filtered
- sites       list distinct sites
- duplicates  list UIDs shared by more than one employee
- import      bulk insert employees from an .xlsx upload
- export      write every employee holding a UID to an .xlsx file
- template    write the bulk-upload template
- clear-uid   remove the UID and password of one employee
"""

EXIT_SUCCESS_ALL = 0
EXIT_FATAL = 1
EXIT_PARTIAL_FAILURE = 2


def _resolve_dsn(cfg: AppConfig) -> str:
    """Connection string, in priority order:

    1. DATABASE_URL / PGDSN (after .env has been loaded with override)
    2. individual PGHOST / PGPORT / PGUSER / PGPASSWORD / PGDATABASE
    3. the `database` section of the config file
    """
    db_cfg = cfg.database
    dsn = os.getenv("DATABASE_URL") or os.getenv("PGDSN") or db_cfg.dsn
    if dsn:
        return dsn
    host = os.getenv("PGHOST", db_cfg.host or "localhost")
    port = os.getenv("PGPORT", str(db_cfg.port) if db_cfg.port else "5432")
    user = os.getenv("PGUSER", db_cfg.user or "postgres")
    password = os.getenv("PGPASSWORD", db_cfg.password or "")
    database = os.getenv("PGDATABASE", db_cfg.database or "postgres")
    dsn = f"host={host} port={port} user={user} dbname={database}"
    if password:
        dsn += f" password={password}"
    return dsn


@contextmanager
def _db_connection(cfg: AppConfig) -> Iterator[Any]:  # pragma: no cover (thin wrapper)
    """Yield a psycopg2 cursor; commit on clean exit, roll back otherwise."""
    try:
        conn = psycopg2.connect(_resolve_dsn(cfg))
    except psycopg2.Error as e:
        raise LookupFailedError(f"cannot connect to database: {str(e).strip()}") from e
    try:
        conn.autocommit = False
        with conn.cursor() as cur:
            yield cur
        conn.commit()
    except BaseException:
        conn.rollback()
        raise
    finally:
        conn.close()


def _load_env_file(path: Path, override: bool = True) -> None:
    """Load .env using python-dotenv; its values win over the process environment."""
    if path.exists():
        load_dotenv(dotenv_path=path, override=override)


def _parse_args(argv: list[str]) -> argparse.Namespace:
    p = argparse.ArgumentParser(prog="empstats", description="Employee directory administration")
    p.add_argument("--config", type=Path, default=DEFAULT_CONFIG_PATH, help="YAML config path")
    p.add_argument("--debug", action="store_true", help="Enable debug logging")
    sub = p.add_subparsers(dest="command", required=True)

    s = sub.add_parser("stats", help="Process pasted leaderboard text")
    s.add_argument("input", nargs="?", default="-", help="Text file ('-' = stdin)")
    s.add_argument("--json", action="store_true", help="Print the result as JSON")
    s.add_argument("--strict", action="store_true", help="Reject rows whose cell count differs from the header")

    s = sub.add_parser("search", help="Search employees holding a UID")
    s.add_argument("--uid", help="Case-insensitive UID substring")
    s.add_argument("--empid", help="Employee id (exact when numeric)")
    s.add_argument("--site", help="Exact site")

    sub.add_parser("sites", help="List distinct sites")
    sub.add_parser("duplicates", help="List UIDs used by more than one employee")

    s = sub.add_parser("import", help="Bulk import employees from .xlsx")
    s.add_argument("workbook", type=Path)

    s = sub.add_parser("export", help="Export employees holding a UID to .xlsx")
    s.add_argument("--output-dir", type=Path, default=None)

    s = sub.add_parser("template", help="Write the bulk-upload template")
    s.add_argument("--output", type=Path, default=Path("employee_template.xlsx"))

    s = sub.add_parser("clear-uid", help="Remove UID and password of one employee")
    s.add_argument("empid")
    return p.parse_args(argv)


def _read_input(source: str) -> str:
    if source == "-":
        return sys.stdin.read()
    return Path(source).read_text(encoding="utf-8")


def _print_records(records: list[Any]) -> None:
    for r in records:
        print(
            f"{r.empid}\t{r.empname}\t{r.classification}\t{r.division}\t"
            f"{r.department}\t{r.site}\t{r.directorate}\t{r.uid}"
        )


def _run_stats(args: argparse.Namespace, cfg: AppConfig, store: EmployeeStore, text: str) -> int:
    settings = cfg.stats
    if args.strict:
        settings = replace(settings, lenient=False)
    session = StatsSession(store, settings)
    result = session.run(text)
    if args.json:
        print(json.dumps(result.to_dict(), ensure_ascii=False, indent=2, default=str))
    else:
        print(render_stats_report(result))
    log_summary(render_stats_summary_line(result))
    return EXIT_SUCCESS_ALL


def _dispatch(
    args: argparse.Namespace, cfg: AppConfig, store: EmployeeStore, text: str | None = None
) -> int:
    logger = setup_logging()
    if args.command == "stats":
        return _run_stats(args, cfg, store, text or "")
    if args.command == "search":
        records = store.search(uid_query=args.uid, empid_query=args.empid, site=args.site)
        _print_records(records)
        log_summary(f"search matched={len(records)}")
        return EXIT_SUCCESS_ALL
    if args.command == "sites":
        for site in store.list_sites():
            print(site)
        return EXIT_SUCCESS_ALL
    if args.command == "duplicates":
        groups = find_duplicate_uids(store.search())
        if not groups:
            logger.info("No duplicates found.")
        for group in groups:
            print(f"UID {group[0].uid}:")
            _print_records(group)
        log_summary(f"duplicates groups={len(groups)}")
        return EXIT_SUCCESS_ALL
    if args.command == "import":
        result = import_employees(args.workbook, store, cfg.importing.required_columns)
        log_summary(render_import_summary_line(result))
        if result.error_log_path is not None:
            logger.info(f"row errors written to {result.error_log_path}")
        return EXIT_PARTIAL_FAILURE if result.errors > 0 else EXIT_SUCCESS_ALL
    if args.command == "export":
        out_dir = args.output_dir or Path(cfg.export.output_directory)
        result = export_employees(store, out_dir, page_size=cfg.export.page_size)
        log_summary(render_export_summary_line(result))
        return EXIT_SUCCESS_ALL
    if args.command == "clear-uid":
        touched = store.clear_credentials(args.empid)
        if touched == 0:
            logger.warning(f"no employee with empid={args.empid}")
        log_summary(f"clear-uid empid={args.empid} updated={touched}")
        return EXIT_SUCCESS_ALL
    logger.error(f"unknown command: {args.command}")
    return EXIT_FATAL


def main(argv: list[str] | None = None) -> int:
    # None reads sys.argv; an explicit [] must not pick up the test runner's args
    if argv is None:
        argv = sys.argv[1:]
    args = _parse_args(argv)
    logger = setup_logging(debug=args.debug)
    logger.debug("debug mode enabled")

    if args.command == "template":
        path = write_import_template(args.output)
        logger.info(f"template written to {path}")
        return EXIT_SUCCESS_ALL

    _load_env_file(Path(".env"), override=True)
    try:
        cfg = load_config(args.config)
    except ConfigError as e:
        logger.error(f"config: {e}")
        return EXIT_FATAL

    # stats input is checked before any connection is opened
    text = None
    if args.command == "stats":
        try:
            text = require_text(_read_input(args.input))
        except EmptyInputError as e:
            logger.error(f"input: {e}")
            return EXIT_FATAL
        except OSError as e:
            logger.error(f"io: {e}")
            return EXIT_FATAL

    try:
        with _db_connection(cfg) as cur:
            return _dispatch(args, cfg, EmployeeStore(cur, cfg.table), text)
    except EmptyInputError as e:
        logger.error(f"input: {e}")
    except MalformedRowError as e:
        logger.error(f"input: {e}")
    except StatsBusyError as e:
        logger.error(f"stats: {e}")
    except LookupFailedError as e:
        logger.error(f"lookup: {e}")
    except (StoreError, ImportFileError, ExportError) as e:
        logger.error(f"{args.command}: {e}")
    except OSError as e:
        logger.error(f"io: {e}")
    return EXIT_FATAL
