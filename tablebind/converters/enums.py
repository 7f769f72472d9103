from __future__ import annotations

import enum
from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import TYPE_CHECKING, Any, TypeVar

from ..models.column_spec import ColumnSpec
from ..models.culture import Culture
from ..models.target_type import TargetType
from .base import ValueConverter, is_non_finite

if TYPE_CHECKING:
    from ..services.accessors import BindingCache

"""Enum family.

Text lookups run in a fixed order: member name (case-insensitive), declared
aliases, member description, then the member's string value. The lookup tables are
built once per enum type and cached in the BindingCache.
"""

__all__ = [
    "EnumConverter",
    "EnumTable",
    "ALIASES_ATTRIBUTE",
    "enum_aliases",
]

ALIASES_ATTRIBUTE = "__column_aliases__"

E = TypeVar("E", bound=type[enum.Enum])


def enum_aliases(**aliases: str | Iterable[str]) -> Callable[[E], E]:
    """Attach alternative spellings to enum members.

    Example::

        @enum_aliases(MALE=("男", "M"), FEMALE=("女", "F"))
        class Gender(enum.Enum):
            MALE = 1
            FEMALE = 2
    """

    def decorate(cls: E) -> E:
        normalized = {
            name: (values,) if isinstance(values, str) else tuple(values)
            for name, values in aliases.items()
        }
        unknown = set(normalized) - set(cls.__members__)
        if unknown:
            raise ValueError(f"{cls.__name__} has no members {sorted(unknown)}")
        setattr(cls, ALIASES_ATTRIBUTE, normalized)
        return cls

    return decorate


@dataclass(frozen=True)
class EnumTable:
    """Case-insensitive text lookups for one enum type."""
    names: Mapping[str, enum.Enum]
    aliases: Mapping[str, enum.Enum]
    descriptions: Mapping[str, enum.Enum]
    values: Mapping[str, enum.Enum]

    @classmethod
    def build(cls, enum_type: type[enum.Enum]) -> EnumTable:
        names: dict[str, enum.Enum] = {}
        aliases: dict[str, enum.Enum] = {}
        descriptions: dict[str, enum.Enum] = {}
        values: dict[str, enum.Enum] = {}
        declared: Mapping[str, tuple[str, ...]] = getattr(enum_type, ALIASES_ATTRIBUTE, {})
        for name, member in enum_type.__members__.items():
            names.setdefault(name.casefold(), member)
            for alias in declared.get(name, ()):
                aliases.setdefault(alias.casefold(), member)
            description = getattr(member, "description", None)
            if isinstance(description, str) and description:
                descriptions.setdefault(description.casefold(), member)
            if isinstance(member.value, str) and member.value:
                values.setdefault(member.value.casefold(), member)
        return cls(names, aliases, descriptions, values)

    def lookup(self, text: str) -> enum.Enum | None:
        key = text.casefold()
        for table in (self.names, self.aliases, self.descriptions, self.values):
            member = table.get(key)
            if member is not None:
                return member
        return None


def _by_value(enum_type: type[enum.Enum], value: Any) -> enum.Enum | None:
    try:
        return enum_type(value)
    except ValueError:
        return None


class EnumConverter(ValueConverter):
    family = "enum"

    def __init__(self, cache: BindingCache) -> None:
        self._cache = cache

    def supports(self, actual: Any) -> bool:
        return isinstance(actual, type) and issubclass(actual, enum.Enum)

    def zero(self, actual: Any) -> Any:
        by_zero = _by_value(actual, 0)
        return by_zero if by_zero is not None else next(iter(actual))

    def table_for(self, enum_type: type[enum.Enum]) -> EnumTable:
        return self._cache.get_or_create("enum", enum_type, lambda: EnumTable.build(enum_type))

    def convert(
        self,
        value: Any,
        target: TargetType,
        column: ColumnSpec | None = None,
        culture: Culture = Culture.INVARIANT,
    ) -> Any:
        enum_type = target.actual
        default = self.default_for(target)
        if value is None or isinstance(value, (bool, datetime, timedelta)) or is_non_finite(value):
            return default
        if isinstance(value, enum_type):
            return value
        if isinstance(value, (int, float)):
            if float(value) != int(value):
                return default
            member = _by_value(enum_type, int(value))
            return member if member is not None else default
        if not isinstance(value, str):
            return default

        text = value.strip()
        if not text:
            return default
        member = self.table_for(enum_type).lookup(text)
        if member is None and text.lstrip("+-").isdigit():
            member = _by_value(enum_type, int(text))
        return member if member is not None else default

    def _cell(self, value: Any, column: ColumnSpec | None) -> Any:
        return value.name
