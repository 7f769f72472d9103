from __future__ import annotations

import pytest

from tablebind.models.row_data import DynamicRow


def test_dynamic_row_attribute_and_item_access():
    """Attribute and item access read the same values."""
    row = DynamicRow({"Name": "Ada", "Age": 36.0})

    assert row.Name == "Ada"
    assert row["Age"] == 36.0
    assert list(row) == ["Name", "Age"]
    assert len(row) == 2


def test_dynamic_row_missing_attribute():
    row = DynamicRow({"Name": "Ada"})

    with pytest.raises(AttributeError):
        _ = row.Missing
    with pytest.raises(KeyError):
        _ = row["Missing"]
    assert row.get("Missing") is None


def test_dynamic_row_assignment():
    row = DynamicRow()
    row.Dept = "R&D"
    row["Floor"] = 3

    assert row.to_dict() == {"Dept": "R&D", "Floor": 3}


def test_dynamic_row_equality():
    assert DynamicRow({"a": 1}) == DynamicRow({"a": 1})
    assert DynamicRow({"a": 1}) == {"a": 1}
    assert DynamicRow({"a": 1}) != {"a": 2}


def test_dynamic_row_is_unhashable():
    with pytest.raises(TypeError):
        hash(DynamicRow({"a": 1}))


def test_dynamic_row_repr():
    assert repr(DynamicRow({"Name": "Ada"})) == "DynamicRow(Name='Ada')"


def test_dynamic_row_copies_input():
    source = {"a": 1}
    row = DynamicRow(source)
    row["a"] = 2
    assert source == {"a": 1}
