from __future__ import annotations

import math
from datetime import datetime, timedelta
from decimal import Decimal, InvalidOperation
from typing import Any

import numpy as np

from ..models.column_spec import ColumnSpec
from ..models.culture import Culture
from ..models.target_type import TargetType
from .base import ValueConverter, is_non_finite
from .parsing import clean_number

"""Numeric family: int, float, Decimal and the numpy fixed-width scalar types.

Narrowing saturates at the target's min/max instead of wrapping; integer targets
truncate toward zero. Python ``int`` saturates at the 64-bit signed range.
"""

__all__ = [
    "NumericConverter",
    "DECIMAL_MAX",
    "DECIMAL_MIN",
]

DECIMAL_MAX = Decimal("79228162514264337593543950335")
DECIMAL_MIN = -DECIMAL_MAX
_DECIMAL_BOUND = 7.9e28

_INT64 = np.iinfo(np.int64)


def _integer_limits(actual: Any) -> tuple[int, int] | None:
    if actual is int:
        return int(_INT64.min), int(_INT64.max)
    if isinstance(actual, type) and issubclass(actual, np.integer):
        info = np.iinfo(actual)
        return int(info.min), int(info.max)
    return None


class NumericConverter(ValueConverter):
    family = "numeric"

    def supports(self, actual: Any) -> bool:
        if actual is bool or not isinstance(actual, type):
            return False
        if actual in (int, float, Decimal):
            return True
        return issubclass(actual, (np.integer, np.floating))

    def zero(self, actual: Any) -> Any:
        return actual(0)

    def convert(
        self,
        value: Any,
        target: TargetType,
        column: ColumnSpec | None = None,
        culture: Culture = Culture.INVARIANT,
    ) -> Any:
        default = self.default_for(target)
        if value is None or isinstance(value, (bool, datetime, timedelta)):
            return default
        if isinstance(value, str):
            return self._from_text(value, target, culture, default)
        if isinstance(value, (int, np.integer)) and not isinstance(value, bool):
            return self._from_int(int(value), target.actual)
        if isinstance(value, Decimal):
            return self._from_decimal(value, target.actual, default)
        if isinstance(value, (float, np.floating)):
            if is_non_finite(float(value)):
                return default
            return self._from_float(float(value), target.actual)
        return default

    def _from_text(self, text: str, target: TargetType, culture: Culture, default: Any) -> Any:
        cleaned = clean_number(text, culture)
        if cleaned is None and not culture.is_invariant:
            cleaned = clean_number(text, Culture.INVARIANT)
        if cleaned is None:
            return default
        if target.actual is Decimal:
            try:
                return self._from_decimal(Decimal(cleaned), Decimal, default)
            except InvalidOperation:
                return default
        number = float(cleaned)
        if not math.isfinite(number):
            return default
        return self._from_float(number, target.actual)

    def _from_int(self, value: int, actual: Any) -> Any:
        limits = _integer_limits(actual)
        if limits is not None:
            low, high = limits
            return actual(min(max(value, low), high))
        if actual is Decimal:
            return min(max(Decimal(value), DECIMAL_MIN), DECIMAL_MAX)
        return self._from_float(float(value), actual)

    def _from_decimal(self, value: Decimal, actual: Any, default: Any) -> Any:
        if not value.is_finite():
            return default
        if actual is Decimal:
            return min(max(value, DECIMAL_MIN), DECIMAL_MAX)
        return self._from_float(float(value), actual)

    def _from_float(self, value: float, actual: Any) -> Any:
        limits = _integer_limits(actual)
        if limits is not None:
            low, high = limits
            if value >= high:
                return actual(high)
            if value <= low:
                return actual(low)
            return actual(math.trunc(value))
        if actual is Decimal:
            if value >= _DECIMAL_BOUND:
                return DECIMAL_MAX
            if value <= -_DECIMAL_BOUND:
                return DECIMAL_MIN
            return Decimal(repr(value))
        if actual is float:
            return value
        info = np.finfo(actual)
        return actual(min(max(value, float(info.min)), float(info.max)))

    def _cell(self, value: Any, column: ColumnSpec | None) -> Any:
        # Cells hold binary floats; Decimal is narrowed on write
        if isinstance(value, Decimal):
            return float(value)
        if isinstance(value, np.integer):
            return int(value)
        if isinstance(value, np.floating):
            return float(value)
        return value
