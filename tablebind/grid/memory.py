from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence
from typing import Any

from ..converters.base import as_raw_cell
from ..models.column_spec import ColumnSpec
from ..models.table_config import TableConfig
from .base import GridReader, GridRow, GridWriter

"""In-memory grid backend: sheets as lists of rows."""

__all__ = [
    "MemoryGridReader",
    "MemoryGridWriter",
    "default_sheet_name",
]


def default_sheet_name(table: TableConfig) -> str:
    return table.sheet_name or f"Sheet{table.sheet_index + 1}"


class MemoryGridReader(GridReader):
    """Reads ``{sheet name: [[cell, ...], ...]}``.

    Cells are coerced into raw cell values (ints become floats, dates become
    datetimes), as a spreadsheet backend would report them.
    """

    def __init__(self, sheets: Mapping[str, Sequence[Sequence[Any]]]) -> None:
        self._sheets = {name: [list(row) for row in rows] for name, rows in sheets.items()}

    @classmethod
    def single(cls, rows: Sequence[Sequence[Any]], name: str = "Sheet1") -> MemoryGridReader:
        return cls({name: rows})

    def list_sheets(self) -> list[str]:
        return list(self._sheets)

    def _physical_rows(self, sheet: str) -> Iterable[Sequence[Any]]:
        for row in self._sheets[sheet]:
            yield [as_raw_cell(cell) for cell in row]


class MemoryGridWriter(GridWriter):
    """Collects written rows into ``sheets`` (leading gaps filled with None)."""

    def __init__(self) -> None:
        self.sheets: dict[str, list[list[Any]]] = {}
        self.formats: dict[str, dict[tuple[int, int], str]] = {}
        self._current: list[list[Any]] = []
        self._formats: dict[tuple[int, int], str] = {}

    def _begin_table(self, columns: Sequence[ColumnSpec], table: TableConfig) -> None:
        name = default_sheet_name(table)
        self._current = self.sheets.setdefault(name, [])
        self._formats = self.formats.setdefault(name, {})

    def _write_row(self, row: GridRow) -> None:
        while len(self._current) <= row.row_index:
            self._current.append([])
        target = self._current[row.row_index]
        for col, cell in sorted(row.cells.items()):
            while len(target) <= col:
                target.append(None)
            target[col] = cell.value
            if cell.format and cell.value is not None:
                self._formats[(row.row_index, col)] = cell.format

    def rows(self, sheet: str = "Sheet1") -> list[list[Any]]:
        return self.sheets.get(sheet, [])
