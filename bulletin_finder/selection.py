"""
Rows the user has picked for the report.

Search results are rebuilt from scratch on every search, so the ledger keys
entries by the row's sheet/position identity and keeps its own copy of each
row. Re-running a search never adds, drops or replaces a selected entry.
"""

from __future__ import annotations

from dataclasses import replace
from typing import Iterable, Iterator

from bulletin_finder.models import EnrichedRow


class SelectionLedger:
    def __init__(self) -> None:
        self._entries: dict[str, EnrichedRow] = {}

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[EnrichedRow]:
        return iter(list(self._entries.values()))

    def __contains__(self, item: object) -> bool:
        key = item.key if isinstance(item, EnrichedRow) else item
        return key in self._entries

    @property
    def keys(self) -> list[str]:
        return list(self._entries)

    def rows(self) -> list[EnrichedRow]:
        return list(self._entries.values())

    def add(self, row: EnrichedRow) -> None:
        if row.key not in self._entries:
            self._entries[row.key] = replace(row)

    def remove(self, row: EnrichedRow | str) -> None:
        key = row.key if isinstance(row, EnrichedRow) else row
        self._entries.pop(key, None)

    def toggle(self, row: EnrichedRow) -> bool:
        """Flip one row; returns True when the row ends up selected."""
        if row.key in self._entries:
            del self._entries[row.key]
            return False
        self._entries[row.key] = replace(row)
        return True

    def all_selected(self, rows: Iterable[EnrichedRow]) -> bool:
        rows = list(rows)
        return bool(rows) and all(row.key in self._entries for row in rows)

    def select_all_visible(self, visible: Iterable[EnrichedRow]) -> None:
        visible = list(visible)
        if not visible:
            return
        if self.all_selected(visible):
            for row in visible:
                self._entries.pop(row.key, None)
            return
        for row in visible:
            self.add(row)

    def clear(self) -> None:
        self._entries.clear()
