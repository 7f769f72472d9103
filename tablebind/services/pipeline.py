from __future__ import annotations

import enum
import logging
from collections.abc import Iterable, Iterator, Sequence
from typing import Any, TypeVar

from ..converters.registry import ConverterRegistry
from ..grid.base import GridReader, RawRow
from ..logging.init import log_summary
from ..models.column_spec import ColumnSpec
from ..models.errors import MappingError
from ..models.row_data import DynamicRow
from ..models.table_config import TableConfig, table_config_for
from ..models.target_type import TargetType
from .accessors import BindingCache, FieldAccessor, TypeAccessor, default_cache
from .cancellation import CancelToken, check_cancelled
from .column_merge import merge_columns, prepare_dict_columns
from .progress import ProgressCallback
from .resolver import ResolvedBinding, resolve_columns

"""Read side of the binding pipeline.

A BindingSession moves through UNRESOLVED -> RESOLVED -> STREAMING -> DONE. The
first row it sees resolves the column map (the header row, or the first data row
when the table has no header); the map is frozen for the rest of the session.

The three read functions share one session implementation and differ only in the
output shape: typed records, ordered dicts or DynamicRow objects. All of them are
lazy generators; configuration and mapping errors surface on the first ``next()``.
"""

__all__ = [
    "SessionState",
    "BindingSession",
    "read_records",
    "read_dicts",
    "read_dynamic",
    "zero_value",
]

logger = logging.getLogger(__name__)

T = TypeVar("T")

_ANY = TargetType.of(None)
_SKIP = object()


class SessionState(enum.Enum):
    UNRESOLVED = "unresolved"
    RESOLVED = "resolved"
    STREAMING = "streaming"
    DONE = "done"


def zero_value(registry: ConverterRegistry, target: TargetType) -> Any:
    """Default for a field that received no value: None or the family zero."""
    if target.nullable:
        return None
    converter = registry.lookup(target)
    return converter.zero(target.actual) if converter is not None else None


def _is_empty(cell: Any) -> bool:
    return cell is None or (isinstance(cell, str) and not cell.strip())


class BindingSession:
    """One table read: resolves columns once, then binds every data row.

    Args:
        table: Table config.
        specs: Merged column specs (record fields or dictionary columns).
        registry: Converters used for every cell.
        dictionary_mode: Unmatched header columns become ad-hoc dictionary keys.
    """

    def __init__(
        self,
        table: TableConfig,
        specs: Sequence[ColumnSpec],
        registry: ConverterRegistry,
        *,
        dictionary_mode: bool = False,
    ) -> None:
        self.table = table
        self.specs = tuple(specs)
        self.registry = registry
        self.dictionary_mode = dictionary_mode
        self.state = SessionState.UNRESOLVED
        self.binding: ResolvedBinding | None = None
        self.rows_read = 0

    def resolve(self, header_row: RawRow) -> ResolvedBinding:
        """Resolve the column map from ``header_row``; later calls return the frozen map.

        Raises:
            MappingError: required columns are missing or nothing resolved.
        """
        if self.binding is not None:
            return self.binding
        binding = resolve_columns(
            header_row, self.specs, self.table, dictionary_mode=self.dictionary_mode
        )
        if binding.is_empty:
            if self.table.has_header:
                message = (
                    "no table column could be mapped to the target; declare column names "
                    "with column(...) or pass column overrides"
                )
            else:
                message = (
                    "the table has no header row (has_header=False); declare explicit "
                    "column indexes or letters so columns can be mapped"
                )
            logger.error(message)
            raise MappingError(message)
        self.binding = binding
        self.state = SessionState.RESOLVED
        return binding

    def convert_cell(self, cell: Any, spec: ColumnSpec) -> Any:
        """Convert one raw cell for ``spec``; returns ``_SKIP`` to leave the field unset."""
        target = spec.target or _ANY
        # Converted against a nullable view so a failed conversion reads as None
        lenient = target if target.nullable else TargetType(target.annotation, target.actual, True)
        value = self.registry.convert(cell, lenient, spec, self.table.culture)
        has_default = spec.default is not None and target.accepts(spec.default)
        if has_default and (value is None or _is_empty(cell)):
            value = spec.default
        elif value is None and not target.nullable:
            value = zero_value(self.registry, target)
            if value is None:
                return _SKIP
        if spec.trim_value and isinstance(value, str):
            value = value.strip()
        return value

    def bind_row(self, raw: RawRow) -> dict[str, Any]:
        """Map one data row to ``{property name: value}`` in physical column order."""
        if self.binding is None:
            raise RuntimeError("bind_row() called before resolve()")
        self.state = SessionState.STREAMING
        values: dict[str, Any] = {}
        for index in sorted(self.binding.columns):
            cell = raw.get(index)
            for spec in self.binding.columns[index]:
                value = self.convert_cell(cell, spec)
                if value is not _SKIP:
                    values[spec.property_name] = value
        return values

    def iter_values(
        self,
        rows: Iterable[RawRow],
        cancel: CancelToken | None = None,
    ) -> Iterator[dict[str, Any]]:
        """Drive the session over backend rows, yielding one value map per data row."""
        max_rows = self.table.max_rows
        try:
            for raw in rows:
                check_cancelled(cancel)
                if self.binding is None:
                    self.resolve(raw)
                    if self.table.has_header:
                        continue
                if 0 <= max_rows <= self.rows_read:
                    break
                values = self.bind_row(raw)
                self.rows_read += 1
                yield values
        finally:
            self.state = SessionState.DONE
            log_summary(
                "table=%s rows_read=%d columns=%d",
                self.table.sheet_name or self.table.sheet_index,
                self.rows_read,
                len(self.binding) if self.binding is not None else 0,
            )


def _registry(registry: ConverterRegistry | None, cache: BindingCache) -> ConverterRegistry:
    return registry if registry is not None else ConverterRegistry(cache)


def read_records(
    reader: GridReader,
    record_type: type[T],
    table: TableConfig | None = None,
    *,
    registry: ConverterRegistry | None = None,
    cache: BindingCache | None = None,
    progress: ProgressCallback | None = None,
    cancel: CancelToken | None = None,
) -> Iterator[T]:
    """Read typed records.

    Args:
        reader: Grid backend.
        record_type: Dataclass or plain annotated class with a no-arg constructor.
        table: Table config; defaults to the record type's ``@table`` options.
        registry: Converter registry (one per call when omitted).
        cache: Accessor/enum cache; the process-wide cache when omitted.
        progress: Called with the physical row count after every row.
        cancel: Checked at the start of every row.

    Yields:
        One ``record_type`` instance per data row.
    """
    cache = cache if cache is not None else default_cache()
    table = table_config_for(record_type, table)
    registry = _registry(registry, cache)
    accessor: TypeAccessor = cache.type_accessor(record_type)
    specs = merge_columns(record_type, table.columns, cache)
    session = BindingSession(table, specs, registry)

    def missing(field: FieldAccessor) -> Any:
        return zero_value(registry, field.target)

    for values in session.iter_values(reader.read_rows(table, progress, cancel), cancel):
        yield accessor.create(values, missing)


def read_dicts(
    reader: GridReader,
    table: TableConfig | None = None,
    *,
    registry: ConverterRegistry | None = None,
    cache: BindingCache | None = None,
    progress: ProgressCallback | None = None,
    cancel: CancelToken | None = None,
) -> Iterator[dict[str, Any]]:
    """Read rows as ordered dicts keyed by logical column name.

    Configured columns are matched as usual (their ``target`` types, when given,
    convert the cells); every other header column is included under its header
    text, or its column letter when the table has no header.
    """
    cache = cache if cache is not None else default_cache()
    table = table or TableConfig()
    registry = _registry(registry, cache)
    specs = prepare_dict_columns(table.columns)
    session = BindingSession(table, specs, registry, dictionary_mode=True)
    yield from session.iter_values(reader.read_rows(table, progress, cancel), cancel)


def read_dynamic(
    reader: GridReader,
    table: TableConfig | None = None,
    *,
    registry: ConverterRegistry | None = None,
    cache: BindingCache | None = None,
    progress: ProgressCallback | None = None,
    cancel: CancelToken | None = None,
) -> Iterator[DynamicRow]:
    """Like :func:`read_dicts`, wrapping each row in a DynamicRow."""
    for values in read_dicts(
        reader, table, registry=registry, cache=cache, progress=progress, cancel=cancel
    ):
        yield DynamicRow(values)
