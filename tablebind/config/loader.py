from __future__ import annotations

import json
import uuid
from datetime import date, datetime, time, timedelta
from decimal import Decimal
from functools import lru_cache
from pathlib import Path
from typing import Any

import jsonschema
import yaml
from jsonschema.exceptions import ValidationError
from packaging.version import Version

from ..models.column_spec import ColumnSpec, MatchStrategy
from ..models.errors import ConfigurationError
from ..models.table_config import TableConfig

"""Table descriptor loader.

Responsibilities:
- Load a YAML table descriptor
- Validate it against ``table_config_schema.json`` (jsonschema)
- Build an immutable TableConfig; every failure surfaces as ConfigurationError

Example descriptor::

    sheet_name: Employees
    header_start: B2
    culture: de-DE
    columns:
      - property: emp_id
        names: [EmpId, Employee ID]
        required: true
        type: int
      - property: name
        match: [ignore_case, prefix]
        trim_value: true
"""

__all__ = [
    "SCHEMA_PATH",
    "TYPE_NAMES",
    "load_table_config",
    "table_config_from_dict",
]

SCHEMA_PATH = Path(__file__).with_name("table_config_schema.json")

# Column ``type`` names accepted in descriptors
TYPE_NAMES: dict[str, type] = {
    "str": str,
    "int": int,
    "float": float,
    "decimal": Decimal,
    "bool": bool,
    "datetime": datetime,
    "date": date,
    "time": time,
    "timedelta": timedelta,
    "uuid": uuid.UUID,
    "version": Version,
}


@lru_cache(maxsize=1)
def _load_schema() -> dict[str, Any]:
    if not SCHEMA_PATH.exists():
        raise ConfigurationError(f"table config schema not found: {SCHEMA_PATH}")
    try:
        return json.loads(SCHEMA_PATH.read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        raise ConfigurationError(f"invalid schema file: {e}") from e


def _validate(data: Any) -> None:
    """Validate descriptor data against the JSON schema.

    Raises:
        ConfigurationError: wrong types, unknown keys or out-of-range values.
    """
    try:
        jsonschema.validate(data, _load_schema())
    except ValidationError as e:
        location = "/".join(str(p) for p in e.absolute_path) or "<root>"
        raise ConfigurationError(f"table config validation failed at {location}: {e.message}") from e


def _column_from_dict(raw: dict[str, Any]) -> ColumnSpec:
    names = raw.get("names", ())
    type_name = raw.get("type")
    spec = ColumnSpec(
        names=(names,) if isinstance(names, str) else tuple(names),
        index=raw.get("index", -1),
        match=MatchStrategy.parse(raw["match"]) if "match" in raw else MatchStrategy.DEFAULT,
        required=raw.get("required", False),
        ignore_on_read=raw.get("ignore_on_read", False),
        ignore_on_write=raw.get("ignore_on_write", False),
        default=raw.get("default"),
        format=raw.get("format"),
        trim_value=raw.get("trim_value", False),
    )
    target = TYPE_NAMES[type_name] | None if type_name else None
    return spec.with_property(raw["property"], target)


def table_config_from_dict(data: dict[str, Any]) -> TableConfig:
    """Validate ``data`` and build a TableConfig.

    Raises:
        ConfigurationError: schema violations or invalid values (unknown culture,
            data start above the header...).
    """
    _validate(data)
    options = {k: v for k, v in data.items() if k != "columns"}
    columns = tuple(_column_from_dict(c) for c in data.get("columns", ()))
    return TableConfig(columns=columns, **options)


def load_table_config(path: Path | str) -> TableConfig:
    """Load a YAML table descriptor.

    Raises:
        ConfigurationError: missing file, invalid YAML or invalid descriptor.
    """
    path = Path(path)
    if not path.exists():
        raise ConfigurationError(f"config file not found: {path}", kind="argument")
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as e:
        raise ConfigurationError(f"invalid yaml: {e}", kind="format") from e
    if not isinstance(data, dict):
        raise ConfigurationError(f"table config must be a mapping: {path}", kind="format")
    return table_config_from_dict(data)
