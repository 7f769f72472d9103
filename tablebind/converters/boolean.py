from __future__ import annotations

from datetime import datetime, timedelta
from typing import Any

from ..models.column_spec import ColumnSpec
from ..models.culture import Culture
from ..models.target_type import TargetType
from .base import ValueConverter, is_non_finite
from .parsing import parse_number

__all__ = [
    "BooleanConverter",
    "BOOLEAN_LITERALS",
]

# Case-insensitive literal table, including common CJK spellings
BOOLEAN_LITERALS: dict[str, bool] = {
    "true": True, "false": False,
    "t": True, "f": False,
    "yes": True, "no": False,
    "y": True, "n": False,
    "on": True, "off": False,
    "真": True, "假": False,
    "是": True, "否": False,
    "有": True, "无": False,
}


class BooleanConverter(ValueConverter):
    family = "boolean"

    def supports(self, actual: Any) -> bool:
        return actual is bool

    def zero(self, actual: Any) -> bool:
        return False

    def convert(
        self,
        value: Any,
        target: TargetType,
        column: ColumnSpec | None = None,
        culture: Culture = Culture.INVARIANT,
    ) -> bool | None:
        default = self.default_for(target)
        if value is None or is_non_finite(value):
            return default
        if isinstance(value, bool):
            return value
        if isinstance(value, (int, float)):
            return value != 0
        if isinstance(value, datetime):
            return value > datetime.min
        if isinstance(value, timedelta):
            return value > timedelta(0)
        if not isinstance(value, str):
            return default

        text = value.strip()
        if not text:
            return default
        lowered = text.casefold()
        if lowered in ("true", "false"):
            return lowered == "true"
        number = parse_number(text, culture)
        if number is None and not culture.is_invariant:
            number = parse_number(text, Culture.INVARIANT)
        if number is not None:
            return number != 0
        return BOOLEAN_LITERALS.get(lowered, default)
