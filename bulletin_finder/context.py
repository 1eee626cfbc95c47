"""
Carry court and state headers down onto the data rows beneath them.

A sheet is folded top to bottom with two registers (organization, state).
Court headers replace the organization label, state headers replace the state
label, and everything else leaves both alone. Nothing is shared between calls,
so sheets can be scanned independently and in any order.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator

from bulletin_finder.classifier import NOT_HEADER, ORGANIZATION, STATE, HeaderMatch, classify_row
from bulletin_finder.models import EnrichedRow, RowContext, Sheet, Workbook
from bulletin_finder.reconstruct import reconstruct_label
from bulletin_finder.vocabulary import DEFAULT_VOCABULARY, Vocabulary


@dataclass(frozen=True)
class ScannedRow:
    """One row of a sheet with the context in force when it was reached.

    ``context`` is taken before the row's own header (if any) is applied, so a
    header row carries the labels of the headers above it.
    """

    sheet_name: str
    position: int
    cells: tuple
    header: HeaderMatch
    context: RowContext

    @property
    def is_data(self) -> bool:
        return self.header.kind == NOT_HEADER

    def enrich(self) -> EnrichedRow:
        return EnrichedRow(
            sheet_name=self.sheet_name,
            position=self.position,
            cells=self.cells,
            organization=self.context.organization,
            state=self.context.state,
        )


def advance(
    context: RowContext,
    header: HeaderMatch,
    vocabulary: Vocabulary = DEFAULT_VOCABULARY,
) -> RowContext:
    if header.kind == ORGANIZATION:
        # An unreadable court label still clears the previous court.
        return RowContext(organization=reconstruct_label(header.text, vocabulary), state=context.state)
    if header.kind == STATE:
        return RowContext(organization=context.organization, state=header.text.strip().upper())
    return context


def scan_sheet(sheet: Sheet, vocabulary: Vocabulary = DEFAULT_VOCABULARY) -> Iterator[ScannedRow]:
    context = RowContext()
    for position, cells in enumerate(sheet.rows):
        header = classify_row(cells, vocabulary)
        yield ScannedRow(
            sheet_name=sheet.name,
            position=position,
            cells=tuple(cells),
            header=header,
            context=context,
        )
        context = advance(context, header, vocabulary)


def enrich_sheet(sheet: Sheet, vocabulary: Vocabulary = DEFAULT_VOCABULARY) -> list[EnrichedRow]:
    return [scanned.enrich() for scanned in scan_sheet(sheet, vocabulary) if scanned.is_data]


def enrich_workbook(workbook: Workbook, vocabulary: Vocabulary = DEFAULT_VOCABULARY) -> list[EnrichedRow]:
    rows: list[EnrichedRow] = []
    for sheet in workbook:
        rows.extend(enrich_sheet(sheet, vocabulary))
    return rows


def header_rows(sheet: Sheet, vocabulary: Vocabulary = DEFAULT_VOCABULARY) -> list[dict]:
    """Every header-shaped row with its kind and the label it contributes."""
    found = []
    for scanned in scan_sheet(sheet, vocabulary):
        if not scanned.header.is_header:
            continue
        after = advance(scanned.context, scanned.header, vocabulary)
        if scanned.header.kind == ORGANIZATION:
            label = after.organization
        elif scanned.header.kind == STATE:
            label = after.state
        else:
            label = ""
        found.append(
            {
                "sheet_name": sheet.name,
                "row_index": scanned.position + 1,
                "kind": scanned.header.kind,
                "raw_text": scanned.header.text,
                "label": label,
            }
        )
    return found
