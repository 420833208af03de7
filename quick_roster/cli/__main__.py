from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path
from typing import Any

import psycopg2
from dotenv import load_dotenv

from quick_roster.config.loader import DEFAULT_CONFIG_PATH, AppConfig, ConfigError, load_config
from quick_roster.db.batch_insert import BatchInsertError, insert_records
from quick_roster.db.connection import db_cursor
from quick_roster.legacy.client import LegacyRosterClient
from quick_roster.legacy.demo import sample_response
from quick_roster.logging.error_log import ErrorLogBuffer
from quick_roster.logging.init import log_summary, set_debug, setup_logging
from quick_roster.mapping.matcher import ColumnMapping, MappingError
from quick_roster.models.import_result import ImportResult
from quick_roster.models.raw_table import DataType
from quick_roster.models.records import Operative
from quick_roster.models.roster import RosterResponse
from quick_roster.services.importer import RosterInputError, build_roster_request, import_file
from quick_roster.normalizers.timeparse import format_days_available, format_time_12h
from quick_roster.services.summary import render_roster_summary, render_summary_line
from quick_roster.tabular.reader import DecodeError, detect_data_type, read_table

"""CLI entrypoint.

Commands:
- inspect: headers, guessed mapping and sample rows of one upload
- import: normalize one upload (optionally hand it to the record store)
- roster: normalize operative + job uploads and request a roster

Every run ends with one SUMMARY line. Exit codes: 0 all rows accepted,
2 some rows rejected, 1 fatal (config / decode / mapping / service error).
"""

EXIT_SUCCESS_ALL = 0
EXIT_PARTIAL_FAILURE = 2
EXIT_FATAL = 1

PREVIEW_ROWS = 10


def _load_env_file(path: Path, override: bool = True) -> None:
    """Load .env so that its values take precedence over the process environment."""
    if path.exists():
        load_dotenv(dotenv_path=path, override=override)


def _parse_mapping_overrides(pairs: list[str] | None) -> dict[str, str | None]:
    """``["Surname=last_name", "Notes="]`` -> ``{"Surname": "last_name", "Notes": None}``."""
    overrides: dict[str, str | None] = {}
    for pair in pairs or []:
        if "=" not in pair:
            raise MappingError(f"--map expects HEADER=FIELD, got {pair!r}")
        header, key = pair.rsplit("=", 1)
        overrides[header.strip()] = key.strip() or None
    return overrides


def _parse_args(argv: list[str]) -> argparse.Namespace:
    p = argparse.ArgumentParser(prog="quick-roster", description="Roster spreadsheet importer")
    p.add_argument("--debug", action="store_true", help="Enable debug logging")
    p.add_argument("--config", default=None, help=f"Config file (default: {DEFAULT_CONFIG_PATH})")
    sub = p.add_subparsers(dest="command", required=True)

    types = [t.value for t in DataType]

    inspect = sub.add_parser("inspect", help="Show headers, guessed mapping and sample rows")
    inspect.add_argument("file")
    inspect.add_argument("--type", choices=types, default=None)

    imp = sub.add_parser("import", help="Normalize an operative / job / client upload")
    imp.add_argument("file")
    imp.add_argument("--type", choices=types, default=None)
    imp.add_argument("--map", action="append", metavar="HEADER=FIELD", help="Override one column mapping")
    imp.add_argument("--no-guess", action="store_true", help="Start from an empty mapping (use with --map)")
    imp.add_argument("--store", action="store_true", help="Insert accepted records into the database")
    imp.add_argument("--output", default=None, help="Write accepted records as JSON")

    roster = sub.add_parser("roster", help="Request a roster from the scheduling service")
    roster.add_argument("--operatives", action="append", required=True, metavar="FILE")
    roster.add_argument("--jobs", action="append", required=True, metavar="FILE")
    roster.add_argument("--demo", action="store_true", help="Show the sample roster instead of calling the service")
    roster.add_argument("--output", default=None, help="Write the roster response as JSON")
    return p.parse_args(argv)


def _data_type(path: Path, explicit: str | None) -> DataType:
    return DataType.parse(explicit) if explicit else detect_data_type(path.name)


def _write_json(path: Path, payload: Any) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(payload, indent=2, ensure_ascii=False, default=str), encoding="utf-8")


def _flush_errors(error_log: ErrorLogBuffer) -> None:
    if len(error_log):
        rejected = error_log.rejected_by_file()
        path = error_log.flush()
        per_file = " ".join(f"{name}={count}" for name, count in rejected.items())
        setup_logging().info(f"row errors written to {path}" + (f" ({per_file})" if per_file else ""))


def _exit_code(results: list[ImportResult]) -> int:
    if any(not r.ok for r in results):
        return EXIT_PARTIAL_FAILURE
    return EXIT_SUCCESS_ALL


def _cmd_inspect(args: argparse.Namespace, cfg: AppConfig) -> int:
    path = Path(args.file)
    table = read_table(path)
    data_type = _data_type(path, args.type)
    mapping = ColumnMapping.guess(table, data_type)
    print(f"FILE: {table.source_name} type={data_type.value} rows={len(table)}")
    print(f"  headers={table.headers}")
    print(f"  mapping={mapping.as_dict()}")
    print(f"  not_imported={mapping.unmapped_headers()}")
    missing = [f.label for f in mapping.missing_required()]
    if missing:
        print(f"  missing_required={missing}")
    for row in table.sample():
        print("    sample_row=", {k: (v.isoformat() if hasattr(v, "isoformat") else v) for k, v in row.items()})
    return EXIT_SUCCESS_ALL


def _shift_line(op: Operative) -> str | None:
    if not (op.default_start_time or op.default_end_time or op.default_days_available):
        return None
    start = format_time_12h(op.default_start_time) if op.default_start_time else "?"
    end = format_time_12h(op.default_end_time) if op.default_end_time else "?"
    if op.default_days_available is None:
        days = "days not set"
    else:
        days = format_days_available(op.default_days_available) or "no days"
    return f"  {op.full_name}: {start} - {end}, {days}"


def _cmd_import(args: argparse.Namespace, cfg: AppConfig, error_log: ErrorLogBuffer) -> int:
    logger = setup_logging()
    path = Path(args.file)
    data_type = _data_type(path, args.type)
    result = import_file(
        path,
        data_type,
        overrides=_parse_mapping_overrides(args.map),
        default_location=cfg.default_location,
        error_log=error_log,
        guess=not args.no_guess,
    )

    for record in result.records[:PREVIEW_ROWS]:
        print(json.dumps(record.to_record(), ensure_ascii=False, default=str))
        shift = _shift_line(record) if isinstance(record, Operative) else None
        if shift:
            print(shift)
    if len(result.records) > PREVIEW_ROWS:
        print(f"... {len(result.records) - PREVIEW_ROWS} more")

    if args.output:
        _write_json(Path(args.output), [r.to_record() for r in result.records])

    if args.store and result.records:
        try:
            with db_cursor(cfg.database) as cur:
                insert_records(cur, data_type, result.records, organisation_id=cfg.organisation_id)
        except (BatchInsertError, psycopg2.Error) as e:
            logger.error(f"store: {e}")
            _flush_errors(error_log)
            return EXIT_FATAL

    _flush_errors(error_log)
    log_summary(render_summary_line([result]))
    return _exit_code([result])


def _print_roster(response: RosterResponse) -> None:
    for job in response.jobs:
        who = job.operative_name or "-"
        start = job.start_time or "unassigned"
        print(f"{job.id:>4}  {job.entry_time} -> {job.exit_time}  {job.client or '-'}  {who}  {start}")


def _cmd_roster(args: argparse.Namespace, cfg: AppConfig, error_log: ErrorLogBuffer) -> int:
    logger = setup_logging()
    results: list[ImportResult] = []
    for name in args.operatives:
        results.append(
            import_file(Path(name), DataType.OPERATIVE, default_location=cfg.default_location, error_log=error_log)
        )
    for name in args.jobs:
        results.append(import_file(Path(name), DataType.JOB, error_log=error_log))

    operatives = [r for res in results if res.data_type is DataType.OPERATIVE for r in res.records]
    jobs = [r for res in results if res.data_type is DataType.JOB for r in res.records]
    try:
        request = build_roster_request(operatives, jobs)
    except RosterInputError as e:
        logger.error(f"roster: {e}")
        _flush_errors(error_log)
        return EXIT_FATAL

    if args.demo:
        logger.warning("demo mode: showing the sample roster, the scheduling service was not called")
        response = sample_response()
    else:
        client = LegacyRosterClient(cfg.api_endpoint, cfg.roster_path, timeout=cfg.request_timeout)
        outcome = client.generate_roster(request)
        if not outcome.ok:
            logger.error(f"roster: {outcome.error}")
            _flush_errors(error_log)
            return EXIT_FATAL
        response = outcome.unwrap()

    _print_roster(response)
    if response.message:
        logger.info(response.message)
    if args.output:
        _write_json(Path(args.output), response.to_dict())

    _flush_errors(error_log)
    log_summary(f"{render_summary_line(results)} {render_roster_summary(response)}")
    return _exit_code(results)


def main(argv: list[str] | None = None) -> int:
    logger = setup_logging()

    # None only: an explicit [] must not pick up pytest's own arguments
    if argv is None:
        argv = sys.argv[1:]
    args = _parse_args(argv)
    _load_env_file(Path(".env"), override=True)

    if args.debug:
        set_debug(logger)
        logger.debug("debug mode enabled")

    try:
        if args.config:
            cfg = load_config(Path(args.config), required=True)
        else:
            cfg = load_config(DEFAULT_CONFIG_PATH, required=False)
    except ConfigError as e:
        logger.error(f"config: {e}")
        return EXIT_FATAL

    error_log = ErrorLogBuffer()
    try:
        if args.command == "inspect":
            return _cmd_inspect(args, cfg)
        if args.command == "import":
            return _cmd_import(args, cfg, error_log)
        return _cmd_roster(args, cfg, error_log)
    except DecodeError as e:
        logger.error(f"decode: {e}")
        _flush_errors(error_log)
        return EXIT_FATAL
    except MappingError as e:
        logger.error(f"mapping: {e}")
        _flush_errors(error_log)
        return EXIT_FATAL


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
