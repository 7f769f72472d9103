from __future__ import annotations

import re
from datetime import date, datetime, time, timedelta
from typing import Any

from ..models.column_spec import ColumnSpec
from ..models.culture import Culture
from ..models.target_type import TargetType
from .base import ValueConverter, format_hint, is_non_finite
from .parsing import parse_datetime

"""Date/time family (``datetime.datetime`` and ``datetime.date`` targets).

Numbers are read as legacy spreadsheet serial dates while inside the serial range
and as Unix seconds beyond it. The serial system inherits the 1900 leap-year bug:
serial 60 (the fictitious 1900-02-29) is rejected and serials below 61 are shifted
by one day.
"""

__all__ = [
    "DateTimeConverter",
    "EPOCH_1900",
    "DEFAULT_DATE",
    "from_serial_date",
    "from_unix_seconds",
    "number_to_datetime",
]

EPOCH_1900 = datetime(1899, 12, 30)
DEFAULT_DATE = datetime(1900, 1, 1)
UNIX_EPOCH = datetime(1970, 1, 1)

SERIAL_MIN = -657435.0
SERIAL_MAX = 2958466.0  # exclusive
UNIX_SECONDS_MIN = -2208988800

_NUMERIC_TEXT = re.compile(r"^[+-]?\d+(?:\.\d+)?$")


def from_serial_date(serial: float) -> datetime | None:
    """Convert a spreadsheet serial date; None when the serial is invalid."""
    if 60 <= serial < 61 or serial < SERIAL_MIN or serial >= SERIAL_MAX:
        return None
    result = EPOCH_1900 + timedelta(days=serial)
    if serial < 61:
        result += timedelta(days=1)
    return result


def from_unix_seconds(seconds: float) -> datetime | None:
    if seconds < UNIX_SECONDS_MIN:
        return None
    try:
        return UNIX_EPOCH + timedelta(seconds=int(seconds))
    except OverflowError:
        return None


def number_to_datetime(value: float) -> datetime | None:
    if SERIAL_MIN <= value < SERIAL_MAX:
        return from_serial_date(value)
    return from_unix_seconds(value)


class DateTimeConverter(ValueConverter):
    family = "datetime"

    def supports(self, actual: Any) -> bool:
        return actual is datetime or actual is date

    def zero(self, actual: Any) -> Any:
        return DEFAULT_DATE if actual is datetime else DEFAULT_DATE.date()

    def convert(
        self,
        value: Any,
        target: TargetType,
        column: ColumnSpec | None = None,
        culture: Culture = Culture.INVARIANT,
    ) -> Any:
        result = self._to_datetime(value, column, culture)
        if result is None:
            return self.default_for(target)
        if target.actual is date:
            return result.date()
        return result

    def _to_datetime(self, value: Any, column: ColumnSpec | None, culture: Culture) -> datetime | None:
        if value is None or isinstance(value, bool) or is_non_finite(value):
            return None
        if isinstance(value, datetime):
            return value.replace(tzinfo=None)
        if isinstance(value, date):
            return datetime.combine(value, time())
        if isinstance(value, timedelta):
            try:
                return datetime.min + value
            except OverflowError:
                return None
        if isinstance(value, (int, float)):
            return number_to_datetime(float(value))
        if not isinstance(value, str):
            return None

        text = value.strip()
        if not text:
            return None
        try:
            return datetime.fromisoformat(text).replace(tzinfo=None)
        except ValueError:
            pass
        if _NUMERIC_TEXT.match(text):
            return number_to_datetime(float(text))
        return parse_datetime(text, culture, format_hint(column))

    def _cell(self, value: Any, column: ColumnSpec | None) -> Any:
        if isinstance(value, datetime):
            return value.replace(tzinfo=None)
        return datetime.combine(value, time())
