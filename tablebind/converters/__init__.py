"""Value converters: raw cells to typed values and back."""

from .base import ValueConverter, as_raw_cell
from .boolean import BooleanConverter
from .dates import DateTimeConverter, from_serial_date, from_unix_seconds
from .enums import EnumConverter, enum_aliases
from .identifiers import GuidConverter, IpAddressConverter, UriConverter, VersionConverter
from .intervals import IntervalConverter
from .numeric import NumericConverter
from .registry import ConverterRegistry
from .text import PassthroughConverter, StringConverter

__all__ = [
    "ValueConverter",
    "as_raw_cell",
    "BooleanConverter",
    "NumericConverter",
    "DateTimeConverter",
    "IntervalConverter",
    "EnumConverter",
    "GuidConverter",
    "UriConverter",
    "IpAddressConverter",
    "VersionConverter",
    "StringConverter",
    "PassthroughConverter",
    "ConverterRegistry",
    "enum_aliases",
    "from_serial_date",
    "from_unix_seconds",
]
