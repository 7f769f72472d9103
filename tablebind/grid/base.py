from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Iterable, Iterator, Sequence
from dataclasses import dataclass, field
from typing import Any

from ..models.column_spec import ColumnSpec
from ..models.errors import ConfigurationError, DataShapeError
from ..models.table_config import TableConfig
from ..services.cancellation import CancelToken, check_cancelled
from ..services.progress import (
    WRITE_PROGRESS_INTERVAL,
    ProgressCallback,
    report_progress,
)

"""Grid backend contracts.

A GridReader yields one ``{physical column index: raw cell}`` map per physical
row. The base class owns the positioning rules shared by every backend:

- the first row yielded is the header row (or, without a header, the first data
  row) and its width fixes the column count for the rest of the table;
- cells left of the header start column are reported as None;
- rows between the header and the data start row are skipped.

A GridWriter consumes GridRow objects whose cells are already converted to
primitive shapes.
"""

__all__ = [
    "RawRow",
    "GridReader",
    "GridWriter",
    "GridRow",
    "WriteCell",
]

RawRow = dict[int, Any]


@dataclass(frozen=True)
class WriteCell:
    value: Any  # None writes an explicit blank cell
    format: str | None = None


@dataclass(frozen=True)
class GridRow:
    row_index: int  # 0-based physical row
    cells: dict[int, WriteCell] = field(default_factory=dict)  # physical column -> cell
    is_header: bool = False


def _trimmed_width(cells: Sequence[Any]) -> int:
    width = len(cells)
    while width and cells[width - 1] is None:
        width -= 1
    return width


class GridReader(ABC):
    """Base class for format backends on the read side."""

    @abstractmethod
    def list_sheets(self) -> list[str]:
        """Sheet names in workbook order."""

    @abstractmethod
    def _physical_rows(self, sheet: str) -> Iterable[Sequence[Any]]:
        """Rows of ``sheet`` from physical row 0, cells as raw values."""

    def select_sheet(self, table: TableConfig) -> str:
        """Resolve the table's sheet: by name when given, else by index.

        Raises:
            ConfigurationError: unknown sheet name or index out of range.
        """
        sheets = self.list_sheets()
        if table.sheet_name:
            if table.sheet_name not in sheets:
                raise ConfigurationError(
                    f"sheet {table.sheet_name!r} not found; available: {sheets}", kind="argument"
                )
            return table.sheet_name
        if table.sheet_index >= len(sheets):
            raise ConfigurationError(
                f"sheet index {table.sheet_index} out of range ({len(sheets)} sheets)", kind="range"
            )
        return sheets[table.sheet_index]

    def read_rows(
        self,
        table: TableConfig,
        progress: ProgressCallback | None = None,
        cancel: CancelToken | None = None,
    ) -> Iterator[RawRow]:
        """Yield positioned rows for ``table``.

        Raises:
            DataShapeError: the header (or first data) row has no fields.
            OperationCancelled: ``cancel`` was triggered.
        """
        sheet = self.select_sheet(table)
        first_row = table.header_start.row if table.has_header else table.effective_data_start.row
        data_row = table.effective_data_start.row
        start_col = table.header_start.column

        width: int | None = None
        yielded = 0
        for row_index, cells in enumerate(self._physical_rows(sheet)):
            check_cancelled(cancel)
            if row_index < first_row:
                continue
            if width is None:
                width = _trimmed_width(cells)
                if width == 0:
                    raise DataShapeError(row_index + 1)
            elif row_index < data_row:
                continue

            row = {
                i: cells[i] if start_col <= i < len(cells) else None
                for i in range(width)
            }
            yield row
            yielded += 1
            report_progress(progress, yielded)


class GridWriter(ABC):
    """Base class for format backends on the write side."""

    def write_rows(
        self,
        columns: Sequence[ColumnSpec],
        rows: Iterable[GridRow],
        table: TableConfig,
        progress: ProgressCallback | None = None,
        cancel: CancelToken | None = None,
    ) -> int:
        """Write ``rows`` (header included) and return the number of data rows.

        Raises:
            OperationCancelled: ``cancel`` was triggered; rows already written stay.
        """
        self._begin_table(columns, table)
        written = 0
        for row in rows:
            check_cancelled(cancel)
            self._write_row(row)
            if row.is_header:
                continue
            written += 1
            if written % WRITE_PROGRESS_INTERVAL == 0:
                report_progress(progress, written)
        if written % WRITE_PROGRESS_INTERVAL != 0 or written == 0:
            report_progress(progress, written)
        self._end_table(table)
        return written

    def _begin_table(self, columns: Sequence[ColumnSpec], table: TableConfig) -> None:
        pass

    @abstractmethod
    def _write_row(self, row: GridRow) -> None:
        """Store one row."""

    def _end_table(self, table: TableConfig) -> None:
        pass
