from __future__ import annotations

import math
import re
import warnings
from datetime import datetime

import pandas as pd

from ..models.culture import Culture

"""Culture-aware text parsing shared by the converters.

All helpers return None on failure instead of raising; converters rely on that to
stay total.
"""

__all__ = [
    "clean_number",
    "parse_number",
    "parse_datetime",
    "translate_format",
    "format_datetime",
]

_NUMBER = re.compile(r"^[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?$")
_SPACE_GROUPS = (" ", "\u00a0", "\u202f")

# LDML date/time tokens (yyyy-MM-dd) -> strptime/strftime directives
_LDML_TOKENS = re.compile(
    r"'[^']*'|\"[^\"]*\"|yyyy|yy|MMMM|MMM|MM|M|dddd|ddd|dd|d|HH|H|hh|h|mm|m|ss|s|f{1,7}|tt|zzz|K|.",
    re.S,
)
_LDML_MAP = {
    "yyyy": "%Y", "yy": "%y",
    "MMMM": "%B", "MMM": "%b", "MM": "%m", "M": "%m",
    "dddd": "%A", "ddd": "%a", "dd": "%d", "d": "%d",
    "HH": "%H", "H": "%H", "hh": "%I", "h": "%I",
    "mm": "%M", "m": "%M", "ss": "%S", "s": "%S",
    "tt": "%p", "zzz": "%z", "K": "%z",
}


def clean_number(text: str, culture: Culture) -> str | None:
    """Normalise a culture-formatted number into Python numeric literal text.

    Accepts leading/trailing signs, parenthesised negatives, group separators,
    the culture's currency symbols and exponents.
    """
    s = text.strip()
    if not s:
        return None
    negative = False
    if s.startswith("(") and s.endswith(")"):
        negative = True
        s = s[1:-1].strip()
    for symbol in culture.currency_symbols:
        s = s.replace(symbol, "")
    s = s.strip()
    if s.endswith(("-", "+")) and len(s) > 1 and s[0] not in "+-":
        sign, s = s[-1], s[:-1].strip()
        negative = negative or sign == "-"
    if culture.group_sep in _SPACE_GROUPS:
        for sep in _SPACE_GROUPS:
            s = s.replace(sep, "")
    else:
        s = s.replace(culture.group_sep, "")
    if culture.decimal_sep != ".":
        s = s.replace(culture.decimal_sep, ".")
    if not _NUMBER.match(s):
        return None
    if negative:
        s = s[1:] if s.startswith("-") else "-" + s.lstrip("+")
    return s


def parse_number(text: str, culture: Culture) -> float | None:
    cleaned = clean_number(text, culture)
    if cleaned is None:
        return None
    value = float(cleaned)
    return value if math.isfinite(value) else None


def translate_format(fmt: str) -> str:
    """Translate an LDML style pattern (``yyyy-MM-dd``) into strptime directives.

    Patterns that already contain ``%`` directives are returned unchanged.
    """
    if "%" in fmt:
        return fmt
    out: list[str] = []
    for token in _LDML_TOKENS.findall(fmt):
        if token[0] in "'\"" and len(token) >= 2 and token[-1] == token[0]:
            out.append(token[1:-1].replace("%", "%%"))
        elif token in _LDML_MAP:
            out.append(_LDML_MAP[token])
        elif token and set(token) == {"f"}:
            out.append("%f")
        elif token == "\\":
            continue
        else:
            out.append(token.replace("%", "%%"))
    return "".join(out)


def format_datetime(value: datetime, fmt: str) -> str | None:
    try:
        return value.strftime(translate_format(fmt))
    except ValueError:
        return None


def _parse_exact(text: str, fmt: str) -> datetime | None:
    try:
        return datetime.strptime(text, translate_format(fmt))
    except ValueError:
        return None


def _parse_culture(text: str, culture: Culture) -> datetime | None:
    with warnings.catch_warnings():
        # pandas warns when it cannot honour dayfirst; the result is still usable
        warnings.simplefilter("ignore")
        try:
            ts = pd.to_datetime(text, dayfirst=culture.day_first)
        except (ValueError, OverflowError, TypeError):
            ts = None
    if ts is None or pd.isna(ts):
        try:
            return datetime.fromisoformat(text)
        except ValueError:
            return None
    if ts.tzinfo is not None:
        ts = ts.tz_localize(None)
    return ts.to_pydatetime()


def parse_datetime(text: str, culture: Culture, fmt: str | None = None) -> datetime | None:
    """Parse date/time text: format hint, then culture, then the invariant culture."""
    s = text.strip()
    if not s:
        return None
    if fmt:
        parsed = _parse_exact(s, fmt)
        if parsed is not None:
            return parsed.replace(tzinfo=None)
    parsed = _parse_culture(s, culture)
    if parsed is None and not culture.is_invariant:
        parsed = _parse_culture(s, Culture.INVARIANT)
    if parsed is not None and parsed.tzinfo is not None:
        parsed = parsed.replace(tzinfo=None)
    return parsed
