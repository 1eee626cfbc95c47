from __future__ import annotations

import argparse
import json
import os
import sys
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from bulletin_finder import __version__ as TOOL_VERSION
from bulletin_finder.config import DEFAULT_CONFIG_NAME, ConfigError, FinderConfig, load_config, starter_config_text
from bulletin_finder.context import header_rows
from bulletin_finder.contracts import build_run_summary, wrap_payload
from bulletin_finder.loader import DecodeFailure, load_bulletin
from bulletin_finder.models import EnrichedRow, Workbook, cell_text
from bulletin_finder.report import EXPORT_FORMATS, MAIN_CELL_COUNT, MISSING, REPORT_COLUMNS, build_export_payload, other_data, project
from bulletin_finder.session import Session

EXIT_SUCCESS = 0
EXIT_COMMAND_ERROR = 1
EXIT_PARSE_FAILED = 2
EXIT_NO_MATCHES = 3

OUTPUT_STAMP_ENV = "BULLETIN_FINDER_OUTPUT_STAMP"


class CliError(Exception):
    def __init__(self, message: str, code: int = EXIT_COMMAND_ERROR) -> None:
        super().__init__(message)
        self.code = code


class BulletinFinderArgumentParser(argparse.ArgumentParser):
    def error(self, message: str) -> None:
        raise CliError(message, EXIT_COMMAND_ERROR)


def eprint(message: str) -> None:
    print(message, file=sys.stderr)


def emit_human(message: str, *, quiet: bool = False) -> None:
    if not quiet:
        eprint(message)


def json_dumps(payload: Any) -> str:
    return json.dumps(payload, indent=2, ensure_ascii=False, sort_keys=True)


def timestamp_token() -> str:
    override = os.environ.get(OUTPUT_STAMP_ENV)
    if override:
        return override
    return datetime.now(timezone.utc).strftime("%Y%m%dT%H%M%SZ")


def default_output_dir(input_path: Path) -> Path:
    return Path.cwd() / "bulletin-finder-output" / f"{input_path.stem}-{timestamp_token()}"


def determine_output_dir(args: argparse.Namespace, input_path: Path) -> Path:
    if getattr(args, "out_dir", None):
        return Path(args.out_dir)
    return default_output_dir(input_path)


def write_text(path: Path, payload: str) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(payload, encoding="utf-8")


def classify_exception(exc: Exception) -> int:
    if isinstance(exc, CliError):
        return exc.code
    if isinstance(exc, (DecodeFailure, ImportError)):
        return EXIT_PARSE_FAILED
    return EXIT_COMMAND_ERROR


def load_cli_config(args: argparse.Namespace) -> FinderConfig:
    try:
        return load_config(getattr(args, "config", None))
    except ConfigError as exc:
        raise CliError(str(exc), EXIT_COMMAND_ERROR) from exc


def restrict_to_sheet(workbook: Workbook, sheet_name: str | None) -> Workbook:
    if not sheet_name:
        return workbook
    try:
        return Workbook(sheets=(workbook.sheet(sheet_name),))
    except KeyError as exc:
        raise CliError(exc.args[0], EXIT_COMMAND_ERROR) from exc


def open_session(args: argparse.Namespace) -> tuple[Session, Path]:
    input_path = Path(args.input)
    if not input_path.exists():
        raise CliError(f"File not found: {input_path}", EXIT_COMMAND_ERROR)
    config = load_cli_config(args)
    loaded = load_bulletin(input_path)
    session = Session(config)
    session.use_workbook(restrict_to_sheet(loaded["workbook"], getattr(args, "sheet_name", None)), input_path.name)
    session.warnings = list(loaded["warnings"])
    if getattr(args, "verbose", False):
        for warning in session.warnings:
            eprint(f"Warning: {warning}")
    return session, input_path


def render_result_text(row: EnrichedRow) -> str:
    labels = REPORT_COLUMNS[2 : 2 + MAIN_CELL_COUNT]
    values = [cell_text(row.cell(index)) or MISSING for index in range(MAIN_CELL_COUNT)]
    lines = [
        f"[{row.sheet_name}] row {row.row_number}",
        f"  Court: {row.organization or MISSING}",
        f"  State: {row.state or MISSING}",
        "  " + " | ".join(f"{label}: {value}" for label, value in zip(labels, values)),
    ]
    extras = other_data(row)
    if extras:
        lines.append(f"  Other data: {extras}")
    return "\n".join(lines)


def render_search_text(input_path: Path, term: str, results: list[EnrichedRow]) -> str:
    lines = [
        "bulletin-finder search",
        f"File: {input_path.name}",
        f"Term: {term}",
        f"Results: {len(results)}",
    ]
    for row in results:
        lines.append("")
        lines.append(render_result_text(row))
    return "\n".join(lines) + "\n"


def build_parser() -> argparse.ArgumentParser:
    parser = BulletinFinderArgumentParser(
        prog="bulletin-finder",
        description="Search legal bulletins and keep each row's court and state context.",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    search = subparsers.add_parser("search", help="Search every sheet for a term.")
    search.add_argument("input", help="Bulletin file path")
    search.add_argument("term", help="Case-insensitive text to look for")
    search.add_argument("--sheet", dest="sheet_name", help="Only search this sheet")
    search.add_argument("--config", help="JSON config path")
    search.add_argument("--json", action="store_true", help="Write machine JSON to stdout")
    search.add_argument("-q", "--quiet", action="store_true", help="Minimal human logs")
    search.add_argument("-v", "--verbose", action="store_true", help="More human logs")

    headers = subparsers.add_parser("headers", help="List detected court and state header rows.")
    headers.add_argument("input", help="Bulletin file path")
    headers.add_argument("--sheet", dest="sheet_name", help="Only inspect this sheet")
    headers.add_argument("--config", help="JSON config path")
    headers.add_argument("--json", action="store_true", help="Write machine JSON to stdout")
    headers.add_argument("-v", "--verbose", action="store_true", help="More human logs")

    export = subparsers.add_parser("export", help="Select every match of one or more terms and write a report.")
    export.add_argument("input", help="Bulletin file path")
    export.add_argument("--term", dest="terms", action="append", required=True, help="Search term; repeatable")
    export.add_argument("--sheet", dest="sheet_name", help="Only search this sheet")
    export.add_argument("-o", "--out", dest="out_dir", help="Output directory")
    export.add_argument("--output", help="Explicit report output path")
    export.add_argument("--format", choices=list(EXPORT_FORMATS), default=None, help="Report format (default from config: xlsx)")
    export.add_argument("--config", help="JSON config path")
    export.add_argument("--json", action="store_true", help="Write machine JSON to stdout")
    export.add_argument("-q", "--quiet", action="store_true", help="Minimal human logs")
    export.add_argument("-v", "--verbose", action="store_true", help="More human logs")

    config = subparsers.add_parser("config", help="Generate configuration.")
    config_subparsers = config.add_subparsers(dest="config_command", required=True)
    config_init = config_subparsers.add_parser("init", help="Write a starter config file.")
    config_init.add_argument("--path", default=DEFAULT_CONFIG_NAME, help="Config output path")

    subparsers.add_parser("version", help="Print version")
    return parser


def run_search(args: argparse.Namespace) -> int:
    session, input_path = open_session(args)
    results = session.search(args.term)
    if not session.has_searched:
        raise CliError("Search term must not be blank.", EXIT_COMMAND_ERROR)
    if args.json:
        summary = build_run_summary(
            command="search",
            input_path=input_path,
            metrics={"results": len(results), "rows_scanned": session.workbook.total_rows},
            warnings=session.warnings,
        )
        body = {"term": session.term, "results": [row.to_dict() for row in results]}
        print(json_dumps(wrap_payload("bulletin_finder.search", body, summary)))
    else:
        sys.stdout.write(render_search_text(input_path, session.term, results))
    if not results:
        emit_human(f'No results for "{session.term}".', quiet=args.quiet)
        return EXIT_NO_MATCHES
    return EXIT_SUCCESS


def run_headers(args: argparse.Namespace) -> int:
    session, input_path = open_session(args)
    found = []
    for sheet in session.workbook:
        found.extend(header_rows(sheet, session.vocabulary))
    if args.json:
        counts: dict[str, int] = {}
        for item in found:
            counts[item["kind"]] = counts.get(item["kind"], 0) + 1
        summary = build_run_summary(
            command="headers",
            input_path=input_path,
            metrics={"header_rows": len(found), "by_kind": counts},
            warnings=session.warnings,
        )
        print(json_dumps(wrap_payload("bulletin_finder.headers", {"headers": found}, summary)))
        return EXIT_SUCCESS
    lines = ["bulletin-finder headers", f"File: {input_path.name}", f"Header rows: {len(found)}"]
    for item in found:
        label = item["label"] or "(context unchanged)"
        lines.append(f"[{item['sheet_name']}] row {item['row_index']} {item['kind']}: {label}")
        if args.verbose and item["raw_text"].strip() != item["label"]:
            lines.append(f"    raw: {item['raw_text']!r}")
    print("\n".join(lines))
    return EXIT_SUCCESS


def run_export(args: argparse.Namespace) -> int:
    session, input_path = open_session(args)
    for term in args.terms:
        results = session.search(term)
        emit_human(f'"{term.strip()}": {len(results)} result(s)', quiet=args.quiet)
        session.select_all_visible()

    fmt = args.format or session.config.export_format
    if not len(session.selection):
        emit_human("No rows selected; nothing exported.", quiet=args.quiet)
        return EXIT_SUCCESS

    output_path = Path(args.output) if args.output else determine_output_dir(args, input_path) / f"report.{fmt}"
    if output_path.exists():
        raise CliError(f"Refusing to overwrite existing output: {output_path}", EXIT_COMMAND_ERROR)
    written = session.export(output_path, fmt)
    emit_human(f"Report written: {written}", quiet=args.quiet)
    emit_human(f"Selected rows: {len(session.selection)}", quiet=args.quiet)
    if args.json:
        rows = session.selection.rows()
        table = project(
            rows,
            organization_placeholder=session.config.organization_placeholder,
            missing_placeholder=session.config.missing_placeholder,
        )
        print(json_dumps(build_export_payload(rows, table, input_path=input_path, output_path=written)))
    return EXIT_SUCCESS


def run_config_init(args: argparse.Namespace) -> int:
    config_path = Path(args.path)
    if config_path.exists():
        eprint(f"Refusing to overwrite existing config: {config_path}")
        return EXIT_COMMAND_ERROR
    write_text(config_path, starter_config_text())
    emit_human(f"Config written: {config_path}")
    return EXIT_SUCCESS


def run_version() -> int:
    print(TOOL_VERSION)
    return EXIT_SUCCESS


def main(argv: list[str] | None = None) -> int:
    try:
        parser = build_parser()
        args = parser.parse_args(argv)
        if args.command == "search":
            return run_search(args)
        if args.command == "headers":
            return run_headers(args)
        if args.command == "export":
            return run_export(args)
        if args.command == "config":
            if args.config_command == "init":
                return run_config_init(args)
        if args.command == "version":
            return run_version()
        raise CliError(f"Unknown command: {args.command}", EXIT_COMMAND_ERROR)
    except CliError as exc:
        eprint(str(exc))
        return exc.code
    except (DecodeFailure, ImportError, FileNotFoundError, ValueError) as exc:
        eprint(str(exc))
        return classify_exception(exc)


if __name__ == "__main__":
    raise SystemExit(main())
