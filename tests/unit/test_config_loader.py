from __future__ import annotations

from pathlib import Path

import pytest

from tablebind.config.loader import load_table_config, table_config_from_dict
from tablebind.models import ConfigurationError, Culture, GridAddress, MatchStrategy


def test_load_table_config_success(write_table_config: Path):
    cfg = load_table_config(write_table_config)
    assert cfg.sheet_name == "Employees"
    assert cfg.header_start == GridAddress.A1
    assert cfg.culture is Culture.get("en-US")
    assert cfg.max_rows == 100

    emp_id, name, dept = cfg.columns
    assert emp_id.property_name == "emp_id"
    assert emp_id.names == ("EmpId", "Employee ID")
    assert emp_id.required is True
    assert (emp_id.target.actual, emp_id.target.nullable) == (int, True)

    assert name.names == ("Name",)
    assert name.match == MatchStrategy.IGNORE_CASE_PREFIX
    assert name.trim_value is True
    assert name.target is None

    assert dept.index == 3
    assert dept.default == "General"


def test_load_table_config_missing_file(tmp_path: Path):
    with pytest.raises(ConfigurationError) as e:
        load_table_config(tmp_path / "not_exists.yml")
    assert e.value.kind == "argument"
    assert "config file not found" in str(e.value)


def test_load_table_config_invalid_yaml(write_table_config: Path):
    write_table_config.write_text("sheet_name: [unclosed\n", encoding="utf-8")
    with pytest.raises(ConfigurationError) as e:
        load_table_config(write_table_config)
    assert e.value.kind == "format"


def test_load_table_config_not_a_mapping(write_table_config: Path):
    write_table_config.write_text("- just\n- a list\n", encoding="utf-8")
    with pytest.raises(ConfigurationError) as e:
        load_table_config(write_table_config)
    assert "must be a mapping" in str(e.value)


def test_load_table_config_empty_file_uses_defaults(write_table_config: Path):
    write_table_config.write_text("", encoding="utf-8")
    cfg = load_table_config(write_table_config)
    assert cfg.sheet_name == ""
    assert cfg.columns == ()


def test_load_table_config_extra_field(write_table_config: Path):
    # additionalProperties: false rejects unknown keys
    text = write_table_config.read_text(encoding="utf-8") + "\nextra_field: not_allowed\n"
    write_table_config.write_text(text, encoding="utf-8")
    with pytest.raises(ConfigurationError) as e:
        load_table_config(write_table_config)
    assert "table config validation failed" in str(e.value)


def test_load_table_config_column_without_property(write_table_config: Path):
    text = write_table_config.read_text(encoding="utf-8").replace("  - property: dept\n", "  - names: Dept\n")
    write_table_config.write_text(text, encoding="utf-8")
    with pytest.raises(ConfigurationError) as e:
        load_table_config(write_table_config)
    assert "columns/2" in str(e.value)


def test_semantic_errors_surface_as_configuration_error(write_table_config: Path):
    text = write_table_config.read_text(encoding="utf-8").replace("culture: en-US", "culture: xx-YY")
    write_table_config.write_text(text, encoding="utf-8")
    with pytest.raises(ConfigurationError) as e:
        load_table_config(write_table_config)
    assert "unknown culture" in str(e.value)


def test_table_config_from_dict_positions():
    cfg = table_config_from_dict({"header_start": "B2", "data_start": "B5", "has_header": True})
    assert cfg.header_start == GridAddress(1, 1)
    assert cfg.effective_data_start == GridAddress(4, 1)


@pytest.mark.parametrize(
    "data",
    [
        {"sheet_index": 256},
        {"header_start": "1A"},
        {"whitespace_mode": "squash"},
        {"columns": [{"property": "x", "type": "complex"}]},
        {"columns": [{"property": "x", "match": "fuzzy"}]},
        {"columns": [{"property": "x", "index": 16384}]},
    ],
)
def test_table_config_from_dict_rejects(data: dict):
    with pytest.raises(ConfigurationError):
        table_config_from_dict(data)
