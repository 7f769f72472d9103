from __future__ import annotations

import json

import jsonschema
import pytest
import yaml
from jsonschema.exceptions import ValidationError

from tablebind.config.loader import SCHEMA_PATH, TYPE_NAMES

"""Table descriptor schema contract: the shipped JSON schema accepts documented
descriptors and rejects malformed ones before any TableConfig is built."""


def _schema() -> dict:
    return json.loads(SCHEMA_PATH.read_text(encoding="utf-8"))


def test_schema_is_valid_draft_2020_12():
    jsonschema.Draft202012Validator.check_schema(_schema())


def test_documented_example_validates(sample_table_yaml: str):
    jsonschema.validate(yaml.safe_load(sample_table_yaml), _schema())


def test_full_descriptor_validates():
    descriptor = {
        "sheet_name": "Employees",
        "sheet_index": 0,
        "has_header": True,
        "header_start": "B2",
        "data_start": "B4",
        "max_rows": -1,
        "max_write_rows": 500,
        "culture": "de-DE",
        "whitespace_mode": "remove_all",
        "columns": [
            {
                "property": "emp_id",
                "names": ["EmpId"],
                "index": "C",
                "match": "exact",
                "type": "int",
                "required": True,
                "ignore_on_read": False,
                "ignore_on_write": False,
                "default": 0,
                "format": "0",
                "trim_value": False,
            }
        ],
    }
    jsonschema.validate(descriptor, _schema())


def test_schema_type_names_match_loader():
    enum = _schema()["$defs"]["column"]["properties"]["type"]["enum"]
    assert set(enum) == set(TYPE_NAMES)


@pytest.mark.parametrize(
    "descriptor",
    [
        {"sheet_name": "x" * 32},
        {"max_rows": -2},
        {"header_start": "A0"},
        {"columns": [{"names": ["EmpId"]}]},
        {"columns": [{"property": ""}]},
        {"columns": [{"property": "x", "index": "ABCD"}]},
        {"columns": [{"property": "x", "match": ["ignore_case", "fuzzy"]}]},
        {"columns": [{"property": "x", "unknown": 1}]},
        {"extra_field": True},
    ],
)
def test_schema_rejects(descriptor: dict):
    with pytest.raises(ValidationError):
        jsonschema.validate(descriptor, _schema())
