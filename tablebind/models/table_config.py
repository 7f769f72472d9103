from __future__ import annotations

import dataclasses
from collections.abc import Callable, Iterable
from dataclasses import dataclass, field
from typing import Any, TypeVar

from .column_spec import ColumnSpec, WhitespaceMode
from .culture import Culture
from .errors import ConfigurationError
from .grid_address import GridAddress

"""TableConfig: table-level descriptor consumed by the binding pipeline.

Carries the sheet selection, header/data positions, row limits, culture, header
whitespace handling and the caller-supplied column overrides.
"""

__all__ = [
    "TableConfig",
    "TABLE_ATTRIBUTE",
    "table",
    "table_config_for",
]

XLS_SHEET_LIMIT = 1 << 8
SHEET_NAME_LIMIT = 31
TABLE_ATTRIBUTE = "__tablebind_table__"

T = TypeVar("T")


def _address(value: GridAddress | str | None, default: GridAddress) -> GridAddress:
    if value is None:
        return default
    if isinstance(value, GridAddress):
        return value
    if value == "":
        return GridAddress.UNKNOWN
    return GridAddress.from_notation(value)


@dataclass(frozen=True)
class TableConfig:
    """Table descriptor (immutable; build variants with :meth:`replace`).

    ``header_start`` / ``data_start`` accept GridAddress instances or A1 strings.
    ``data_start`` left unknown means "the row after the header, same column"
    (or the header row itself when ``has_header`` is False).
    """
    sheet_name: str = ""
    sheet_index: int = 0
    has_header: bool = True
    header_start: GridAddress = GridAddress.A1
    data_start: GridAddress = GridAddress.UNKNOWN
    max_rows: int = -1  # -1 = unlimited
    max_write_rows: int = -1
    culture: Culture = Culture.INVARIANT
    whitespace_mode: WhitespaceMode = WhitespaceMode.TRIM
    columns: tuple[ColumnSpec, ...] = field(default_factory=tuple)

    def __post_init__(self) -> None:
        object.__setattr__(self, "header_start", _address(self.header_start, GridAddress.A1))
        object.__setattr__(self, "data_start", _address(self.data_start, GridAddress.UNKNOWN))
        if not isinstance(self.culture, Culture):
            object.__setattr__(self, "culture", Culture.get(self.culture))
        if not isinstance(self.whitespace_mode, WhitespaceMode):
            object.__setattr__(self, "whitespace_mode", WhitespaceMode(self.whitespace_mode))
        object.__setattr__(self, "columns", tuple(self.columns))

        if self.sheet_name is None:
            raise ConfigurationError("sheet name must not be None", kind="argument")
        if len(self.sheet_name) > SHEET_NAME_LIMIT:
            raise ConfigurationError(
                f"sheet name must not exceed {SHEET_NAME_LIMIT} characters: {self.sheet_name!r}",
                kind="range",
            )
        if not 0 <= self.sheet_index <= XLS_SHEET_LIMIT - 1:
            raise ConfigurationError(
                f"sheet index must be within 0-{XLS_SHEET_LIMIT - 1}: {self.sheet_index}",
                kind="range",
            )
        if self.header_start.is_unknown:
            raise ConfigurationError("header start must be a concrete cell", kind="argument")
        if not self.data_start.is_unknown:
            if self.data_start.column != self.header_start.column:
                raise ConfigurationError(
                    "data start must be in the same column as header start "
                    f"(header={self.header_start}, data={self.data_start})"
                )
            if self.has_header and self.data_start.row <= self.header_start.row:
                raise ConfigurationError(
                    "data start row must be below the header row "
                    f"(header={self.header_start}, data={self.data_start})"
                )

    @property
    def effective_data_start(self) -> GridAddress:
        if not self.data_start.is_unknown:
            return self.data_start
        if self.has_header:
            return self.header_start.offset(1, 0)
        return self.header_start

    def replace(self, **changes: Any) -> TableConfig:
        return dataclasses.replace(self, **changes)

    def with_columns(self, columns: Iterable[ColumnSpec]) -> TableConfig:
        return dataclasses.replace(self, columns=tuple(columns))


def table(**options: Any) -> Callable[[type[T]], type[T]]:
    """Class decorator attaching table-level defaults to a record type.

    Example::

        @table(sheet_name="Employees", header_start="B2")
        @dataclass
        class Employee: ...
    """
    config = TableConfig(**options)

    def decorate(cls: type[T]) -> type[T]:
        setattr(cls, TABLE_ATTRIBUTE, config)
        return cls

    return decorate


def table_config_for(record_type: type | None, override: TableConfig | None = None) -> TableConfig:
    """Pick the effective table config: explicit override > decorator > defaults."""
    if override is not None:
        return override
    if record_type is not None:
        declared = getattr(record_type, TABLE_ATTRIBUTE, None)
        if isinstance(declared, TableConfig):
            return declared
    return TableConfig()
