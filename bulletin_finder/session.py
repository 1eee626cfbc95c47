"""
One user's working state: the loaded bulletin, the latest search, the picks.

Loading a file throws away everything derived from the previous one, the
selection included. Searching only replaces the result list.
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional

from bulletin_finder.config import FinderConfig
from bulletin_finder.loader import DecodeFailure, Source, load_bulletin
from bulletin_finder.models import EnrichedRow, Workbook
from bulletin_finder.report import export_rows, project
from bulletin_finder.search import normalize_term, search
from bulletin_finder.selection import SelectionLedger


class Session:
    def __init__(self, config: FinderConfig | None = None) -> None:
        self.config = config or FinderConfig()
        self.vocabulary = self.config.vocabulary
        self.selection = SelectionLedger()
        self._reset()

    def _reset(self) -> None:
        self.workbook: Workbook | None = None
        self.filename: str | None = None
        self.results: list[EnrichedRow] = []
        self.term = ""
        self.has_searched = False
        self.error: str | None = None
        self.warnings: list[str] = []
        self.selection.clear()

    @property
    def is_ready(self) -> bool:
        return self.workbook is not None

    def load(self, source: Source, filename: Optional[str] = None) -> bool:
        """Replace the current bulletin; returns False (with ``error`` set) when it cannot be read."""
        self._reset()
        self.filename = filename or (Path(source).name if not isinstance(source, (bytes, bytearray)) else None)
        try:
            loaded = load_bulletin(source, filename)
        except (DecodeFailure, FileNotFoundError, ImportError) as exc:
            self.error = str(exc)
            return False
        self.workbook = loaded["workbook"]
        self.warnings = list(loaded["warnings"])
        return True

    def use_workbook(self, workbook: Workbook, filename: str | None = None) -> None:
        self._reset()
        self.workbook = workbook
        self.filename = filename

    def search(self, term: str) -> list[EnrichedRow]:
        term = normalize_term(term)
        if self.workbook is None or not term:
            return self.results
        self.results = search(self.workbook, term, self.vocabulary)
        self.term = term
        self.has_searched = True
        return self.results

    def is_selected(self, row: EnrichedRow) -> bool:
        return row in self.selection

    def toggle(self, row: EnrichedRow) -> bool:
        return self.selection.toggle(row)

    def select_all_visible(self) -> None:
        self.selection.select_all_visible(self.results)

    @property
    def all_visible_selected(self) -> bool:
        return self.selection.all_selected(self.results)

    def clear_selection(self) -> None:
        self.selection.clear()

    def export_rows(self) -> list[tuple[str, ...]]:
        return project(
            self.selection,
            organization_placeholder=self.config.organization_placeholder,
            missing_placeholder=self.config.missing_placeholder,
        )

    def export(self, output_path: Path, fmt: str | None = None) -> Path | None:
        return export_rows(
            self.selection,
            Path(output_path),
            fmt=fmt or self.config.export_format,
            organization_placeholder=self.config.organization_placeholder,
            missing_placeholder=self.config.missing_placeholder,
            input_path=self.filename,
        )
