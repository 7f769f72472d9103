from __future__ import annotations

import enum
import math
from abc import ABC, abstractmethod
from datetime import date, datetime, time, timedelta
from decimal import Decimal
from typing import Any

import numpy as np

from ..models.column_spec import ColumnSpec
from ..models.culture import Culture
from ..models.target_type import TargetType

"""ValueConverter base class and raw-cell helpers.

Raw cells form a closed set: None, bool, float, str, naive datetime, timedelta.
Every converter is total: unconvertible input degrades to the target default
(None for nullable targets, the family zero value otherwise) and never raises.
"""

__all__ = [
    "ValueConverter",
    "as_raw_cell",
    "is_non_finite",
    "format_hint",
]


def is_non_finite(value: Any) -> bool:
    return isinstance(value, float) and not math.isfinite(value)


def format_hint(column: ColumnSpec | None) -> str | None:
    if column is None or not column.format:
        return None
    return column.format


def as_raw_cell(value: Any) -> Any:
    """Coerce an arbitrary Python value into the raw cell closed set.

    Used by the write path (re-reading a record value through a converter) and by
    backends that hand over pandas/numpy scalars.
    """
    if value is None or isinstance(value, (bool, str, float, timedelta)):
        return value
    if isinstance(value, datetime):
        return value.replace(tzinfo=None) if value.tzinfo is not None else value
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day)
    if isinstance(value, time):
        return timedelta(
            hours=value.hour, minutes=value.minute,
            seconds=value.second, microseconds=value.microsecond,
        )
    if isinstance(value, np.bool_):
        return bool(value)
    if isinstance(value, (int, np.integer)):
        return float(value)
    if isinstance(value, (Decimal, np.floating)):
        return float(value)
    if isinstance(value, enum.Enum):
        return value.name
    return str(value)


class ValueConverter(ABC):
    """Converts raw cells to one family of target types and back to cell shapes."""

    family: str = ""

    @abstractmethod
    def supports(self, actual: Any) -> bool:
        """Whether this converter handles the unwrapped target type ``actual``."""

    @abstractmethod
    def zero(self, actual: Any) -> Any:
        """Default value for a non-nullable ``actual`` target."""

    @abstractmethod
    def convert(
        self,
        value: Any,
        target: TargetType,
        column: ColumnSpec | None = None,
        culture: Culture = Culture.INVARIANT,
    ) -> Any:
        """Convert a raw cell into ``target``; degrade to :meth:`default_for`."""

    def default_for(self, target: TargetType) -> Any:
        return None if target.nullable else self.zero(target.actual)

    def to_cell(
        self,
        value: Any,
        target: TargetType,
        column: ColumnSpec | None = None,
        culture: Culture = Culture.INVARIANT,
    ) -> Any:
        """Turn a record value into a writable cell shape (or None for blank)."""
        if value is None:
            return None
        if not target.accepts(value):
            nullable = TargetType(target.annotation, target.actual, True)
            value = self.convert(as_raw_cell(value), nullable, column, culture)
            if value is None:
                return None
        return self._cell(value, column)

    def _cell(self, value: Any, column: ColumnSpec | None) -> Any:
        return value
