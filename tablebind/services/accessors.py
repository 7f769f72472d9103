from __future__ import annotations

import dataclasses
import threading
import typing
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from typing import Any, TypeVar

from ..models.column_spec import COLUMN_METADATA_KEY, ColumnSpec
from ..models.errors import ConfigurationError
from ..models.target_type import TargetType

"""Record reflection: field accessors, type accessors and the binding cache.

A TypeAccessor describes how to read fields from a record and how to build a new
record from a ``{field name: value}`` mapping. Accessors are derived once per record
type and kept in a BindingCache, which also holds the per-enum lookup tables.
"""

__all__ = [
    "FieldAccessor",
    "TypeAccessor",
    "BindingCache",
    "default_cache",
]

K = TypeVar("K")
V = TypeVar("V")

_MISSING = dataclasses.MISSING


@dataclass(frozen=True)
class FieldAccessor:
    """Read/write handle for one record field."""
    name: str
    target: TargetType
    spec: ColumnSpec | None = None  # from column(...) metadata
    display_name: str | None = None
    description: str | None = None
    init: bool = True  # accepted by the constructor
    has_default: bool = False

    def get(self, record: Any) -> Any:
        return getattr(record, self.name, None)

    def set(self, record: Any, value: Any) -> None:
        setattr(record, self.name, value)


@dataclass(frozen=True)
class TypeAccessor:
    """Fields of a record type plus a factory that builds instances."""
    record_type: type
    fields: tuple[FieldAccessor, ...]
    is_dataclass: bool

    @classmethod
    def of(cls, record_type: type) -> TypeAccessor:
        """Reflect ``record_type`` (a dataclass or a plain annotated class).

        Raises:
            ConfigurationError: the type's annotations cannot be resolved.
        """
        try:
            hints = typing.get_type_hints(record_type)
        except (NameError, TypeError) as e:
            raise ConfigurationError(
                f"cannot resolve annotations of {record_type.__name__}: {e}"
            ) from e

        if dataclasses.is_dataclass(record_type):
            fields = tuple(
                _dataclass_field(f, hints.get(f.name, Any))
                for f in dataclasses.fields(record_type)
            )
            return cls(record_type, fields, True)

        fields = tuple(
            FieldAccessor(
                name=name,
                target=TargetType.of(annotation),
                has_default=hasattr(record_type, name),
            )
            for name, annotation in hints.items()
            if not name.startswith("_") and typing.get_origin(annotation) is not typing.ClassVar
        )
        return cls(record_type, fields, False)

    def field(self, name: str) -> FieldAccessor | None:
        for accessor in self.fields:
            if accessor.name == name:
                return accessor
        return None

    def create(self, values: Mapping[str, Any], missing: Callable[[FieldAccessor], Any]) -> Any:
        """Build a record from ``values``.

        Fields without a bound value keep their declared default; constructor
        arguments without one are filled with ``missing(field)``.
        """
        if not self.is_dataclass:
            record = self.record_type()
            for accessor in self.fields:
                if accessor.name in values:
                    accessor.set(record, values[accessor.name])
                elif not accessor.has_default:
                    accessor.set(record, missing(accessor))
            return record

        kwargs: dict[str, Any] = {}
        late: dict[str, Any] = {}
        for accessor in self.fields:
            if accessor.name in values:
                if accessor.init:
                    kwargs[accessor.name] = values[accessor.name]
                else:
                    late[accessor.name] = values[accessor.name]
            elif accessor.init and not accessor.has_default:
                kwargs[accessor.name] = missing(accessor)
        record = self.record_type(**kwargs)
        for name, value in late.items():
            object.__setattr__(record, name, value)
        return record


def _dataclass_field(f: dataclasses.Field[Any], annotation: Any) -> FieldAccessor:
    return FieldAccessor(
        name=f.name,
        target=TargetType.of(annotation),
        spec=f.metadata.get(COLUMN_METADATA_KEY),
        display_name=f.metadata.get("display_name"),
        description=f.metadata.get("description"),
        init=f.init,
        has_default=f.default is not _MISSING or f.default_factory is not _MISSING,
    )


class BindingCache:
    """Thread-safe populate-once cache keyed by ``(kind, key)``.

    Readers never observe a partially built entry: factories run under the lock
    and the result is published only once complete.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._entries: dict[tuple[str, Any], Any] = {}

    def get_or_create(self, kind: str, key: Any, factory: Callable[[], V]) -> V:
        entry_key = (kind, key)
        entry = self._entries.get(entry_key, _MISSING)
        if entry is not _MISSING:
            return entry
        with self._lock:
            if entry_key not in self._entries:
                self._entries[entry_key] = factory()
            return self._entries[entry_key]

    def type_accessor(self, record_type: type) -> TypeAccessor:
        return self.get_or_create("type", record_type, lambda: TypeAccessor.of(record_type))

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)


_DEFAULT_CACHE = BindingCache()


def default_cache() -> BindingCache:
    """Process-wide cache used when callers do not inject their own."""
    return _DEFAULT_CACHE
