from __future__ import annotations

import enum
from datetime import datetime, timedelta
from typing import Any

from ..models.column_spec import ColumnSpec
from ..models.culture import Culture
from ..models.target_type import TargetType
from .base import ValueConverter, format_hint
from .parsing import format_datetime

__all__ = [
    "StringConverter",
    "PassthroughConverter",
]


def _format_number(value: float, fmt: str | None) -> str:
    if fmt:
        try:
            return format(value, fmt)
        except ValueError:
            pass
    if value.is_integer() and abs(value) < 1e16:
        return str(int(value))
    return repr(value)


class StringConverter(ValueConverter):
    family = "string"

    def supports(self, actual: Any) -> bool:
        return actual is str

    def zero(self, actual: Any) -> str:
        return ""

    def convert(
        self,
        value: Any,
        target: TargetType,
        column: ColumnSpec | None = None,
        culture: Culture = Culture.INVARIANT,
    ) -> str | None:
        if value is None:
            return self.default_for(target)
        if isinstance(value, str):
            return value
        if isinstance(value, bool):
            return "True" if value else "False"
        if isinstance(value, float):
            return _format_number(value, format_hint(column))
        if isinstance(value, datetime):
            fmt = format_hint(column)
            formatted = format_datetime(value, fmt) if fmt else None
            return formatted if formatted is not None else value.isoformat(sep=" ")
        if isinstance(value, timedelta):
            return str(value)
        if isinstance(value, enum.Enum):
            return value.name
        return str(value)


class PassthroughConverter(ValueConverter):
    """Untyped targets (``Any``/``object``): raw values are returned unchanged."""

    family = "object"

    def supports(self, actual: Any) -> bool:
        return actual is object

    def zero(self, actual: Any) -> None:
        return None

    def convert(
        self,
        value: Any,
        target: TargetType,
        column: ColumnSpec | None = None,
        culture: Culture = Culture.INVARIANT,
    ) -> Any:
        return value
