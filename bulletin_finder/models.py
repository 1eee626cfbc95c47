from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime, time
from typing import Any, Iterable, Iterator

Cell = Any
Row = tuple


def is_blank(value) -> bool:
    return value is None or (isinstance(value, str) and value.strip() == "")


def cell_text(value) -> str:
    """Render a cell the way it reads in the spreadsheet."""
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float):
        if value != value:
            return ""
        if value.is_integer():
            return str(int(value))
        return repr(value)
    if isinstance(value, datetime):
        if value.time() == time(0, 0):
            return value.strftime("%Y-%m-%d")
        return value.strftime("%Y-%m-%d %H:%M:%S")
    if isinstance(value, date):
        return value.strftime("%Y-%m-%d")
    if isinstance(value, time):
        return value.strftime("%H:%M:%S")
    return str(value)


@dataclass(frozen=True)
class Sheet:
    name: str
    rows: tuple[Row, ...] = ()

    def __len__(self) -> int:
        return len(self.rows)


@dataclass(frozen=True)
class Workbook:
    sheets: tuple[Sheet, ...] = ()

    @classmethod
    def from_pairs(cls, pairs: Iterable[tuple[str, Iterable[Iterable[Cell]]]]) -> "Workbook":
        sheets = []
        seen: set[str] = set()
        for name, rows in pairs:
            name = str(name)
            if name in seen:
                raise ValueError(f"Duplicate sheet name: {name!r}")
            seen.add(name)
            sheets.append(Sheet(name=name, rows=tuple(tuple(row) for row in rows)))
        return cls(sheets=tuple(sheets))

    @property
    def sheet_names(self) -> list[str]:
        return [sheet.name for sheet in self.sheets]

    def sheet(self, name: str) -> Sheet:
        for sheet in self.sheets:
            if sheet.name == name:
                return sheet
        raise KeyError(f"Sheet '{name}' not found. Available: {self.sheet_names}")

    def __iter__(self) -> Iterator[Sheet]:
        return iter(self.sheets)

    @property
    def total_rows(self) -> int:
        return sum(len(sheet) for sheet in self.sheets)


@dataclass(frozen=True)
class RowContext:
    """Most recent court and state labels seen above a row."""

    organization: str = ""
    state: str = ""


@dataclass(frozen=True)
class EnrichedRow:
    sheet_name: str
    position: int  # 0-based position within the sheet
    cells: Row = field(default_factory=tuple)
    organization: str = ""
    state: str = ""

    @property
    def row_number(self) -> int:
        return self.position + 1

    @property
    def key(self) -> str:
        return f"{self.sheet_name}-{self.position}"

    def cell(self, index: int) -> Cell:
        if 0 <= index < len(self.cells):
            return self.cells[index]
        return None

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.key,
            "sheet_name": self.sheet_name,
            "row_index": self.row_number,
            "organization": self.organization,
            "state": self.state,
            "data": [cell_text(value) if value is not None else None for value in self.cells],
        }
