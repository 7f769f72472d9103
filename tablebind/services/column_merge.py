from __future__ import annotations

import dataclasses
import logging
from collections.abc import Iterable

from ..models.column_spec import ColumnSpec
from ..models.errors import ConfigurationError
from .accessors import BindingCache, FieldAccessor, default_cache

"""Column list construction.

Record types contribute one spec per field (from ``column(...)`` metadata, or a
plain spec named after the field). Caller overrides replace those specs by property
name, compared case-insensitively, with the last override winning.
"""

__all__ = [
    "merge_columns",
    "prepare_dict_columns",
]

logger = logging.getLogger(__name__)


def _fallback_name(accessor: FieldAccessor) -> str:
    return accessor.display_name or accessor.description or accessor.name


def merge_columns(
    record_type: type,
    overrides: Iterable[ColumnSpec] = (),
    cache: BindingCache | None = None,
) -> tuple[ColumnSpec, ...]:
    """Merge declared field specs with explicit overrides.

    Args:
        record_type: Dataclass or plain annotated class.
        overrides: Specs keyed by ``property_name``; replace the declared spec.
        cache: Cache for the record type's accessor.

    Returns:
        One spec per record field, in field order, each bound to its property
        name and declared target type.
    """
    accessor = (cache if cache is not None else default_cache()).type_accessor(record_type)

    by_property: dict[str, ColumnSpec] = {}
    for spec in overrides:
        if not spec.property_name:
            raise ConfigurationError(
                f"column override {spec.names!r} has no property name", kind="argument"
            )
        by_property[spec.property_name.casefold()] = spec

    merged: list[ColumnSpec] = []
    for field in accessor.fields:
        spec = by_property.pop(field.name.casefold(), None) or field.spec or ColumnSpec()
        if not spec.names:
            spec = spec.with_names(_fallback_name(field))
        merged.append(spec.with_property(field.name, field.target))

    for spec in by_property.values():
        logger.warning(
            "Column override %r does not match any field of %s; ignored",
            spec.property_name, record_type.__name__,
        )
    return tuple(merged)


def prepare_dict_columns(overrides: Iterable[ColumnSpec]) -> tuple[ColumnSpec, ...]:
    """Normalise caller specs for dictionary/dynamic reads and writes.

    A spec without a property name is keyed by its primary name; a spec without
    names is matched by its property name. Later specs replace earlier ones with
    the same key (case-insensitive).
    """
    by_property: dict[str, ColumnSpec] = {}
    for spec in overrides:
        key = spec.property_name or spec.primary_name
        if not key:
            raise ConfigurationError("dictionary column needs a name or property name", kind="argument")
        if not spec.names:
            spec = spec.with_names(key)
        if spec.property_name != key:
            spec = dataclasses.replace(spec, property_name=key)
        by_property[key.casefold()] = spec
    return tuple(by_property.values())
