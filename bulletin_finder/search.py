from __future__ import annotations

from typing import Iterable, Sequence

from bulletin_finder.context import scan_sheet
from bulletin_finder.models import EnrichedRow, Workbook, cell_text
from bulletin_finder.vocabulary import DEFAULT_VOCABULARY, Vocabulary


def row_search_text(cells: Sequence) -> str:
    return " ".join(cell_text(value) for value in cells).lower()


def normalize_term(term: str | None) -> str:
    return (term or "").strip()


def matches(cells: Sequence, term: str) -> bool:
    """Case-insensitive substring match over every column of a row."""
    needle = normalize_term(term).lower()
    if not needle:
        return False
    return needle in row_search_text(cells)


def filter_rows(rows: Iterable[EnrichedRow], term: str) -> list[EnrichedRow]:
    needle = normalize_term(term)
    if not needle:
        return []
    return [row for row in rows if matches(row.cells, needle)]


def search(workbook: Workbook, term: str, vocabulary: Vocabulary = DEFAULT_VOCABULARY) -> list[EnrichedRow]:
    """Every row of every sheet whose text contains ``term``.

    Header rows are searched too; they carry the context of the headers above
    them, not their own label. A blank term searches nothing.
    """
    needle = normalize_term(term)
    if not needle:
        return []
    results: list[EnrichedRow] = []
    for sheet in workbook:
        for scanned in scan_sheet(sheet, vocabulary):
            if matches(scanned.cells, needle):
                results.append(scanned.enrich())
    return results
