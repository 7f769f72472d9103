from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from ..models.column_spec import ColumnSpec
from ..models.culture import Culture
from ..models.target_type import TargetType
from .base import ValueConverter, as_raw_cell
from .boolean import BooleanConverter
from .dates import DateTimeConverter
from .enums import EnumConverter
from .identifiers import GuidConverter, IpAddressConverter, UriConverter, VersionConverter
from .intervals import IntervalConverter
from .numeric import NumericConverter
from .text import PassthroughConverter, StringConverter

if TYPE_CHECKING:
    from ..services.accessors import BindingCache

"""ConverterRegistry: maps target types onto converter families.

Custom converters registered for an exact type take precedence over the built-in
families. Types no family covers fall back to calling the type on the raw value.
"""

__all__ = [
    "ConverterRegistry",
]

logger = logging.getLogger(__name__)

_CELL_TYPES = (bool, int, float, str)


class ConverterRegistry:
    def __init__(self, cache: BindingCache | None = None) -> None:
        if cache is None:
            from ..services.accessors import default_cache

            cache = default_cache()
        self._custom: dict[Any, ValueConverter] = {}
        self._passthrough = PassthroughConverter()
        self._builtin: list[ValueConverter] = [
            BooleanConverter(),
            NumericConverter(),
            StringConverter(),
            DateTimeConverter(),
            IntervalConverter(),
            GuidConverter(),
            IpAddressConverter(),
            UriConverter(),
            VersionConverter(),
            EnumConverter(cache),
        ]

    def register(self, target: Any, converter: ValueConverter) -> None:
        """Use ``converter`` for the exact type ``target`` (nullable or not)."""
        self._custom[TargetType.of(target).actual] = converter

    def lookup(self, target: TargetType | Any) -> ValueConverter | None:
        actual = TargetType.of(target).actual
        custom = self._custom.get(actual)
        if custom is not None:
            return custom
        if actual is object:
            return self._passthrough
        for converter in self._builtin:
            if converter.supports(actual):
                return converter
        return None

    def convert(
        self,
        value: Any,
        target: TargetType,
        column: ColumnSpec | None = None,
        culture: Culture = Culture.INVARIANT,
    ) -> Any:
        """Convert a raw cell; never raises for bad cell content."""
        converter = self.lookup(target)
        if converter is not None:
            return converter.convert(value, target, column, culture)
        if value is None:
            return None
        if target.accepts(value):
            return value
        try:
            return target.actual(value)
        except (TypeError, ValueError, ArithmeticError):
            logger.debug("No converter for %s; dropping %r", target.name, value)
            return None

    def to_cell(
        self,
        value: Any,
        target: TargetType | None,
        column: ColumnSpec | None = None,
        culture: Culture = Culture.INVARIANT,
    ) -> Any:
        """Convert a record value into a cell, by declared type or else runtime type."""
        if value is None:
            return None
        if target is None or target.actual is object:
            target = TargetType.of(type(value))
        converter = self.lookup(target)
        if converter is not None and converter is not self._passthrough:
            return converter.to_cell(value, target, column, culture)
        if isinstance(value, _CELL_TYPES):
            return value
        return as_raw_cell(value)
