from __future__ import annotations

import re
from datetime import datetime, time, timedelta
from typing import Any

from ..models.column_spec import ColumnSpec
from ..models.culture import Culture
from ..models.target_type import TargetType
from .base import ValueConverter, format_hint, is_non_finite
from .parsing import parse_datetime

__all__ = [
    "IntervalConverter",
    "parse_interval",
    "parse_iso_duration",
]

# [-][d.]hh:mm[:ss[.fffffff]]
_CLOCK = re.compile(
    r"^(?P<sign>-)?(?:(?P<days>\d+)\.)?(?P<hours>\d{1,2}):(?P<minutes>\d{1,2})"
    r"(?::(?P<seconds>\d{1,2})(?:[.,](?P<fraction>\d{1,7}))?)?$"
)
_WHOLE_DAYS = re.compile(r"^-?\d+$")
_ISO_DURATION = re.compile(
    r"^(?P<sign>-)?P(?:(?P<years>\d+)Y)?(?:(?P<months>\d+)M)?(?:(?P<weeks>\d+)W)?(?:(?P<days>\d+)D)?"
    r"(?:T(?:(?P<hours>\d+)H)?(?:(?P<minutes>\d+)M)?(?:(?P<seconds>\d+(?:\.\d+)?)S)?)?$"
)

_ONE_DAY = timedelta(days=1)


def parse_iso_duration(text: str) -> timedelta | None:
    """Parse an ISO 8601 duration such as ``P1DT2H30M``.

    Years count as 365 days and months as 30 days.
    """
    match = _ISO_DURATION.match(text)
    if match is None or text.endswith("T"):
        return None
    parts = {k: v for k, v in match.groupdict().items() if k != "sign"}
    if not any(parts.values()):
        return None
    days = (
        int(parts["years"] or 0) * 365
        + int(parts["months"] or 0) * 30
        + int(parts["weeks"] or 0) * 7
        + int(parts["days"] or 0)
    )
    result = timedelta(
        days=days,
        hours=int(parts["hours"] or 0),
        minutes=int(parts["minutes"] or 0),
        seconds=float(parts["seconds"] or 0),
    )
    return -result if match.group("sign") else result


def _parse_clock(text: str) -> timedelta | None:
    if _WHOLE_DAYS.match(text):
        return timedelta(days=int(text))
    match = _CLOCK.match(text)
    if match is None:
        return None
    hours, minutes = int(match["hours"]), int(match["minutes"])
    seconds = int(match["seconds"] or 0)
    if hours > 23 or minutes > 59 or seconds > 59:
        return None
    fraction = (match["fraction"] or "").ljust(7, "0")
    result = timedelta(
        days=int(match["days"] or 0),
        hours=hours,
        minutes=minutes,
        seconds=seconds,
        microseconds=int(fraction) // 10,
    )
    return -result if match["sign"] else result


def _time_of_day(value: datetime) -> timedelta:
    return value - value.replace(hour=0, minute=0, second=0, microsecond=0)


def parse_interval(text: str, culture: Culture, fmt: str | None = None) -> timedelta | None:
    """Parse interval text: clock notation, format hint, date/time text, ISO 8601."""
    try:
        parsed = _parse_clock(text)
    except OverflowError:
        parsed = None
    if parsed is not None:
        return parsed
    if not text.upper().startswith(("P", "-P")):
        moment = parse_datetime(text, culture, fmt)
        if moment is not None:
            return _time_of_day(moment)
    try:
        return parse_iso_duration(text.upper())
    except OverflowError:
        return None


class IntervalConverter(ValueConverter):
    """``datetime.timedelta`` and ``datetime.time`` targets.

    Numbers are seconds; datetimes contribute their time of day. A ``time`` target
    only accepts intervals inside one day.
    """

    family = "interval"

    def supports(self, actual: Any) -> bool:
        return actual is timedelta or actual is time

    def zero(self, actual: Any) -> Any:
        return timedelta(0) if actual is timedelta else time(0)

    def convert(
        self,
        value: Any,
        target: TargetType,
        column: ColumnSpec | None = None,
        culture: Culture = Culture.INVARIANT,
    ) -> Any:
        result = self._to_timedelta(value, column, culture)
        if result is None:
            return self.default_for(target)
        if target.actual is time:
            if not timedelta(0) <= result < _ONE_DAY:
                return self.default_for(target)
            return (datetime.min + result).time()
        return result

    def _to_timedelta(self, value: Any, column: ColumnSpec | None, culture: Culture) -> timedelta | None:
        if value is None or isinstance(value, bool) or is_non_finite(value):
            return None
        if isinstance(value, timedelta):
            return value
        if isinstance(value, datetime):
            return _time_of_day(value)
        if isinstance(value, time):
            return _time_of_day(datetime.combine(datetime.min, value))
        if isinstance(value, (int, float)):
            try:
                return timedelta(seconds=float(value))
            except OverflowError:
                return None
        if isinstance(value, str):
            text = value.strip()
            return parse_interval(text, culture, format_hint(column)) if text else None
        return None

    def _cell(self, value: Any, column: ColumnSpec | None) -> Any:
        if isinstance(value, time):
            return _time_of_day(datetime.combine(datetime.min, value))
        return value
