"""
loader.py — decode an uploaded bulletin into sheets of raw rows

Supports: .xlsx .xlsm .xls .ods .csv .tsv .txt

Public API:
    result   = load_bulletin("path/to/boletin.xlsx")
    workbook = result["workbook"]

    # browser uploads arrive as bytes
    result = load_bulletin(uploaded.getvalue(), filename=uploaded.name)

Result dict keys:
    workbook          — Workbook (sheets in file order, rows as read, no header row)
    detected_format   — "xlsx", "csv", ...
    detected_encoding — encoding name for text files; None for binary
    delimiter         — delimiter char for text files; None otherwise
    sheet_names       — sheet names in file order
    original_rows     — row count across all sheets
    warnings          — list of warning strings
"""

from __future__ import annotations

import csv
import io
import math
from collections import Counter
from datetime import datetime
from pathlib import Path
from typing import Optional, Union

import pandas as pd

from bulletin_finder.models import Sheet, Workbook

TEXT_FORMATS  = {".csv", ".tsv", ".txt"}
EXCEL_FORMATS = {".xlsx", ".xls", ".xlsm"}
ODS_FORMATS   = {".ods"}
ALL_FORMATS   = TEXT_FORMATS | EXCEL_FORMATS | ODS_FORMATS

DECODE_MESSAGE = "Could not read the workbook. Make sure it is a valid Excel file."

Source = Union[str, Path, bytes]


class DecodeFailure(ValueError):
    """The input is not a readable workbook. ``str(exc)`` is safe to show to users."""

    def __init__(self, reason: str) -> None:
        super().__init__(f"{DECODE_MESSAGE} ({reason})")
        self.reason = reason


# ══════════════════════════════════════════════════════════════════════════════
# CELL NORMALISATION
# ══════════════════════════════════════════════════════════════════════════════

def clean_cell(value):
    """pandas cell → str | int | float | datetime | None."""
    if value is None:
        return None
    if isinstance(value, pd.Timestamp):
        return value.to_pydatetime()
    if isinstance(value, float):
        if math.isnan(value):
            return None
        if value.is_integer():
            return int(value)
        return float(value)
    if isinstance(value, (str, int, datetime)):
        return value
    try:
        if pd.isna(value):
            return None
    except (TypeError, ValueError):
        pass
    return str(value)


def frame_rows(df: pd.DataFrame) -> tuple[tuple, ...]:
    return tuple(tuple(clean_cell(value) for value in row) for row in df.itertuples(index=False, name=None))


# ══════════════════════════════════════════════════════════════════════════════
# TEXT DECODING
# ══════════════════════════════════════════════════════════════════════════════

def _detect_encoding(raw: bytes) -> str:
    try:
        import chardet
    except ImportError:
        return "utf-8"
    detected = chardet.detect(raw).get("encoding")
    return detected or "utf-8"


def _read_text_safely(raw: bytes, preferred_encoding: str) -> str:
    """
    Decode raw bytes line-by-line.

    Strategy per line:
      1. Try UTF-8
      2. Try preferred_encoding (chardet result)
      3. Try latin-1
      4. CP1252 with replace (never crashes)
    """
    decoded_lines: list[str] = []
    for raw_line in raw.split(b"\n"):
        decoded: str | None = None
        for enc in ("utf-8", preferred_encoding, "latin-1"):
            if not enc:
                continue
            try:
                decoded = raw_line.decode(enc)
                break
            except (LookupError, UnicodeDecodeError):
                continue
        if decoded is None:
            decoded = raw_line.decode("cp1252", errors="replace")
        decoded_lines.append(decoded.replace("\x00", "").rstrip("\r"))
    return "\n".join(decoded_lines)


def _detect_delimiter(text: str) -> str:
    """csv.Sniffer first; otherwise the candidate with the most consistent width."""
    sample_lines = [line for line in text.splitlines() if line.strip()][:50]
    sample = "\n".join(sample_lines[:25])
    if sample:
        try:
            return csv.Sniffer().sniff(sample, delimiters=",;\t|").delimiter
        except csv.Error:
            pass

    best_delim = ","
    best_score = float("-inf")
    for delim in (",", ";", "\t", "|"):
        widths = [len(row) for row in csv.reader(io.StringIO("\n".join(sample_lines)), delimiter=delim)]
        if not widths:
            continue
        mode_width, mode_count = Counter(widths).most_common(1)[0]
        score = mode_width * 2.0 + (mode_count / len(widths)) * mode_width
        if mode_width == 1:
            score -= 10.0
        if score > best_score:
            best_score = score
            best_delim = delim
    return best_delim


# ══════════════════════════════════════════════════════════════════════════════
# FORMAT LOADERS
# ══════════════════════════════════════════════════════════════════════════════

def _load_text(raw: bytes, suffix: str, sheet_name: str) -> dict:
    encoding = _detect_encoding(raw)
    text = _read_text_safely(raw, encoding)
    delimiter = "\t" if suffix == ".tsv" else _detect_delimiter(text)
    # Bulletins are ragged (one-cell headers between wide data rows), so rows
    # are read as-is rather than through a fixed-width DataFrame.
    try:
        parsed = list(csv.reader(io.StringIO(text), delimiter=delimiter))
    except csv.Error as exc:
        raise DecodeFailure(f"could not parse {suffix} file: {exc}") from exc

    rows = tuple(tuple(cell if cell != "" else None for cell in row) for row in parsed)
    while rows and all(value is None for value in rows[-1]):
        rows = rows[:-1]
    workbook = Workbook(sheets=(Sheet(name=sheet_name, rows=rows),))
    return {
        "workbook":          workbook,
        "detected_format":   suffix.lstrip("."),
        "detected_encoding": encoding,
        "delimiter":         delimiter,
        "sheet_names":       workbook.sheet_names,
        "original_rows":     workbook.total_rows,
        "warnings":          [],
    }


def _load_spreadsheet(raw: bytes, suffix: str, engine: Optional[str] = None) -> dict:
    if suffix == ".xls":
        try:
            import xlrd  # noqa: F401
        except ImportError:
            raise ImportError(".xls files require xlrd — run: pip install xlrd")
    if suffix in ODS_FORMATS:
        try:
            import odf  # noqa: F401
        except ImportError:
            raise ImportError(".ods files require odfpy — run: pip install odfpy")

    warnings: list[str] = []
    try:
        with pd.ExcelFile(io.BytesIO(raw), engine=engine) as xf:
            names = [str(name) for name in xf.sheet_names]
            frames = {
                str(name): xf.parse(name, header=None, dtype=object)
                for name in xf.sheet_names
            }
    except Exception as exc:
        raise DecodeFailure(str(exc) or exc.__class__.__name__) from exc

    sheets = []
    for name in names:
        rows = frame_rows(frames[name])
        if not rows:
            warnings.append(f"Sheet '{name}' is empty")
        sheets.append(Sheet(name=name, rows=rows))
    if not sheets:
        raise DecodeFailure("workbook has no sheets")

    workbook = Workbook(sheets=tuple(sheets))
    return {
        "workbook":          workbook,
        "detected_format":   suffix.lstrip("."),
        "detected_encoding": None,
        "delimiter":         None,
        "sheet_names":       workbook.sheet_names,
        "original_rows":     workbook.total_rows,
        "warnings":          warnings,
    }


# ══════════════════════════════════════════════════════════════════════════════
# PUBLIC API
# ══════════════════════════════════════════════════════════════════════════════

def load_bulletin(source: Source, filename: Optional[str] = None) -> dict:
    """
    Decode a bulletin file into a Workbook.

    Args:
        source:   Path to the file, or the file's raw bytes.
        filename: Original file name; required with bytes so the format is known.

    Raises:
        FileNotFoundError  if a path does not exist.
        DecodeFailure      if the format is unsupported or the content unreadable.
        ImportError        if an optional reader (xlrd, odfpy) is missing.
    """
    if isinstance(source, (bytes, bytearray)):
        if not filename:
            raise DecodeFailure("a file name is required to read uploaded bytes")
        raw = bytes(source)
        name = Path(filename)
    else:
        name = Path(source)
        if not name.exists():
            raise FileNotFoundError(f"File not found: {name}")
        raw = name.read_bytes()

    suffix = name.suffix.lower()
    if suffix not in ALL_FORMATS:
        supported = ", ".join(sorted(ALL_FORMATS))
        raise DecodeFailure(f"unsupported format '{suffix or '[missing extension]'}'. Supported: {supported}")
    if not raw:
        raise DecodeFailure("file is empty")

    if suffix in TEXT_FORMATS:
        return _load_text(raw, suffix, sheet_name=name.stem)
    if suffix in ODS_FORMATS:
        return _load_spreadsheet(raw, suffix, engine="odf")
    return _load_spreadsheet(raw, suffix)


def read_workbook(source: Source, filename: Optional[str] = None) -> Workbook:
    return load_bulletin(source, filename)["workbook"]
