from __future__ import annotations

import itertools
import logging
from collections.abc import Callable, Iterable, Iterator, Mapping, Sequence
from typing import Any

from ..converters.registry import ConverterRegistry
from ..grid.base import GridRow, GridWriter, WriteCell
from ..logging.init import log_summary
from ..models.column_spec import ColumnSpec
from ..models.table_config import TableConfig, table_config_for
from .accessors import BindingCache, default_cache
from .cancellation import CancelToken
from .column_merge import merge_columns, prepare_dict_columns
from .progress import ProgressCallback

"""Write side of the binding pipeline.

The caller's column list is used as-is (no resolution): the header row goes to
``header_start`` and data rows start at the table's data start, both offset by the
header start column. Empty values become explicit blank cells so columns stay
aligned. Values are converted by the column's declared type; the runtime type is
used only for columns without one.
"""

__all__ = [
    "write_records",
    "write_dicts",
    "build_rows",
]

logger = logging.getLogger(__name__)


def _is_blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and value == "")


def build_rows(
    columns: Sequence[ColumnSpec],
    records: Iterable[Any],
    table: TableConfig,
    get_value: Callable[[Any, ColumnSpec], Any],
    registry: ConverterRegistry,
) -> Iterator[GridRow]:
    """Yield the header row (when enabled) and one GridRow per record."""
    start_col = table.header_start.column
    if table.has_header:
        yield GridRow(
            table.header_start.row,
            {start_col + i: WriteCell(spec.header_text) for i, spec in enumerate(columns)},
            is_header=True,
        )

    row_index = table.effective_data_start.row
    limit = table.max_write_rows
    for count, record in enumerate(records):
        if 0 <= limit <= count:
            break
        cells: dict[int, WriteCell] = {}
        for i, spec in enumerate(columns):
            value = get_value(record, spec)
            if _is_blank(value):
                cells[start_col + i] = WriteCell(None)
                continue
            cell = registry.to_cell(value, spec.target, spec, table.culture)
            cells[start_col + i] = WriteCell(cell, spec.format if cell is not None else None)
        yield GridRow(row_index + count, cells)


def _finish(writer: GridWriter, columns: Sequence[ColumnSpec], rows: Iterator[GridRow],
            table: TableConfig, progress: ProgressCallback | None,
            cancel: CancelToken | None) -> int:
    written = writer.write_rows(columns, rows, table, progress, cancel)
    log_summary(
        "table=%s rows_written=%d columns=%d",
        table.sheet_name or table.sheet_index, written, len(columns),
    )
    return written


def write_records(
    writer: GridWriter,
    records: Iterable[Any],
    table: TableConfig | None = None,
    record_type: type | None = None,
    *,
    registry: ConverterRegistry | None = None,
    cache: BindingCache | None = None,
    progress: ProgressCallback | None = None,
    cancel: CancelToken | None = None,
) -> int:
    """Write typed records.

    Args:
        writer: Grid backend.
        records: Records of ``record_type``.
        table: Table config; defaults to the record type's ``@table`` options.
        record_type: Record class; inferred from the first record when omitted.
        registry: Converter registry (one per call when omitted).
        cache: Accessor/enum cache.
        progress: Called every 100 data rows and once at the end.
        cancel: Checked at the start of every row.

    Returns:
        Number of data rows written.
    """
    cache = cache if cache is not None else default_cache()
    iterator = iter(records)
    if record_type is None:
        first = next(iterator, None)
        if first is None:
            logger.warning("No records to write and no record type given; nothing written")
            return 0
        record_type = type(first)
        iterator = itertools.chain([first], iterator)

    table = table_config_for(record_type, table)
    registry = registry if registry is not None else ConverterRegistry(cache)
    accessor = cache.type_accessor(record_type)
    columns = [c for c in merge_columns(record_type, table.columns, cache) if not c.ignore_on_write]

    def get_value(record: Any, spec: ColumnSpec) -> Any:
        field = accessor.field(spec.property_name)
        return field.get(record) if field is not None else None

    rows = build_rows(columns, iterator, table, get_value, registry)
    return _finish(writer, columns, rows, table, progress, cancel)


def write_dicts(
    writer: GridWriter,
    rows: Iterable[Mapping[str, Any]],
    table: TableConfig | None = None,
    *,
    registry: ConverterRegistry | None = None,
    cache: BindingCache | None = None,
    progress: ProgressCallback | None = None,
    cancel: CancelToken | None = None,
) -> int:
    """Write mappings keyed by logical name.

    The column list comes from ``table.columns``; without configured columns the
    keys of the first row are used, in order. Values are converted by runtime type
    unless the column declares a target.
    """
    cache = cache if cache is not None else default_cache()
    table = table or TableConfig()
    registry = registry if registry is not None else ConverterRegistry(cache)
    iterator = iter(rows)

    columns: list[ColumnSpec]
    if table.columns:
        columns = [c for c in prepare_dict_columns(table.columns) if not c.ignore_on_write]
    else:
        first = next(iterator, None)
        if first is None:
            logger.warning("No rows to write and no columns configured; nothing written")
            return 0
        columns = [ColumnSpec(names=(key,), property_name=key) for key in first]
        iterator = itertools.chain([first], iterator)

    def get_value(row: Mapping[str, Any], spec: ColumnSpec) -> Any:
        return row.get(spec.property_name)

    grid_rows = build_rows(columns, iterator, table, get_value, registry)
    return _finish(writer, columns, grid_rows, table, progress, cancel)
