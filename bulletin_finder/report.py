"""
Turn selected rows into the fixed report table, and write it out.

The column order below is consumed by downstream PDF rendering; keep it stable.
"""

from __future__ import annotations

import json
from datetime import date
from pathlib import Path
from typing import Any, Iterable

import openpyxl
import pandas as pd
from openpyxl.styles import Alignment, Font, PatternFill
from openpyxl.utils import get_column_letter

from bulletin_finder.contracts import build_run_summary, wrap_payload
from bulletin_finder.models import EnrichedRow, cell_text, is_blank

REPORT_TITLE = "Selected Case Report"
REPORT_COLUMNS = (
    "Organizational unit",
    "State/Date",
    "Case ID",
    "Party 1",
    "Party 2",
    "Status/Action",
    "Sheet",
)
MAIN_CELL_COUNT = 4
MISSING = "-"
OTHER_DATA_SEPARATOR = " | "
EXPORT_FORMATS = ("xlsx", "csv", "json")
HEADER_COLOR = "2563EB"


def _cell_or_placeholder(row: EnrichedRow, index: int, placeholder: str) -> str:
    value = row.cell(index)
    if is_blank(value):
        return placeholder
    return cell_text(value)


def project_row(
    row: EnrichedRow,
    *,
    organization_placeholder: str = MISSING,
    missing_placeholder: str = MISSING,
) -> tuple[str, ...]:
    return (
        row.organization or organization_placeholder,
        row.state or missing_placeholder,
        *(_cell_or_placeholder(row, index, missing_placeholder) for index in range(MAIN_CELL_COUNT)),
        row.sheet_name,
    )


def project(
    rows: Iterable[EnrichedRow],
    *,
    organization_placeholder: str = MISSING,
    missing_placeholder: str = MISSING,
) -> list[tuple[str, ...]]:
    return [
        project_row(
            row,
            organization_placeholder=organization_placeholder,
            missing_placeholder=missing_placeholder,
        )
        for row in rows
    ]


def other_data(row: EnrichedRow) -> str:
    """Columns past the main four, empties dropped, for on-screen display."""
    extras = [cell_text(value) for value in row.cells[MAIN_CELL_COUNT:] if not is_blank(value)]
    return OTHER_DATA_SEPARATOR.join(text for text in extras if text)


def _infer_col_widths(rows: list[list], min_width: int = 10, max_width: int = 60, sample: int = 300) -> list[int]:
    if not rows:
        return []
    widths = [max(min_width, min(max_width, len(str(v)) + 2)) for v in rows[0]]
    for row in rows[1 : sample + 1]:
        for i, val in enumerate(row):
            widths[i] = max(widths[i], min(max_width, len(str(val)) + 2))
    return widths


def _style_header(ws, col_widths: list[int]) -> None:
    fill = PatternFill("solid", fgColor=HEADER_COLOR)
    font = Font(bold=True, color="FFFFFF")
    for cell in ws[1]:
        cell.font = font
        cell.fill = fill
        cell.alignment = Alignment(horizontal="center", vertical="center", wrap_text=False)
    ws.freeze_panes = "A2"
    for i, width in enumerate(col_widths, start=1):
        ws.column_dimensions[get_column_letter(i)].width = width


def write_xlsx(table: list[tuple[str, ...]], output_path: Path, *, generated_on: date | None = None) -> None:
    wb = openpyxl.Workbook()
    ws = wb.active
    ws.title = "Report"
    ws.append(list(REPORT_COLUMNS))
    for row in table:
        ws.append(list(row))
    _style_header(ws, _infer_col_widths([list(REPORT_COLUMNS), *[list(row) for row in table]]))
    for column in ("D", "E", "F"):
        for cell in ws[column][1:]:
            cell.alignment = Alignment(wrap_text=True, vertical="top")

    info = wb.create_sheet("Summary")
    info.append([REPORT_TITLE])
    info.append(["Date", (generated_on or date.today()).isoformat()])
    info.append(["Total selected", len(table)])
    info["A1"].font = Font(bold=True, size=14)
    info.column_dimensions["A"].width = 24

    output_path.parent.mkdir(parents=True, exist_ok=True)
    wb.save(output_path)


def write_csv(table: list[tuple[str, ...]], output_path: Path) -> None:
    output_path.parent.mkdir(parents=True, exist_ok=True)
    pd.DataFrame(table, columns=list(REPORT_COLUMNS)).to_csv(output_path, index=False, encoding="utf-8")


def build_export_payload(
    rows: list[EnrichedRow],
    table: list[tuple[str, ...]],
    *,
    input_path: Path | str | None = None,
    output_path: Path | None = None,
) -> dict[str, Any]:
    body = {
        "title": REPORT_TITLE,
        "columns": list(REPORT_COLUMNS),
        "rows": [list(row) for row in table],
        "selected_ids": [row.key for row in rows],
    }
    summary = build_run_summary(
        command="export",
        input_path=input_path,
        output_path=output_path,
        metrics={"selected_rows": len(rows)},
    )
    return wrap_payload("bulletin_finder.export", body, summary)


def write_json(payload: dict[str, Any], output_path: Path) -> None:
    output_path.parent.mkdir(parents=True, exist_ok=True)
    output_path.write_text(json.dumps(payload, indent=2, ensure_ascii=False, sort_keys=True), encoding="utf-8")


def export_rows(
    rows: Iterable[EnrichedRow],
    output_path: Path,
    *,
    fmt: str = "xlsx",
    organization_placeholder: str = MISSING,
    missing_placeholder: str = MISSING,
    input_path: Path | str | None = None,
) -> Path | None:
    """Write the report for ``rows``; an empty selection writes nothing and returns None."""
    rows = list(rows)
    if not rows:
        return None
    if fmt not in EXPORT_FORMATS:
        raise ValueError(f"Unsupported export format '{fmt}'. Supported: {', '.join(EXPORT_FORMATS)}")
    table = project(
        rows,
        organization_placeholder=organization_placeholder,
        missing_placeholder=missing_placeholder,
    )
    output_path = Path(output_path)
    if fmt == "xlsx":
        write_xlsx(table, output_path)
    elif fmt == "csv":
        write_csv(table, output_path)
    else:
        write_json(build_export_payload(rows, table, input_path=input_path, output_path=output_path), output_path)
    return output_path
