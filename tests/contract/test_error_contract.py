from __future__ import annotations

import pytest

from tablebind.models import (
    ConfigurationError,
    DataShapeError,
    GridAddress,
    MappingError,
    OperationCancelled,
    TableBindError,
)

"""Error taxonomy contract: class hierarchy, kinds and message content callers rely on."""


def test_hierarchy():
    assert issubclass(ConfigurationError, TableBindError)
    assert issubclass(ConfigurationError, ValueError)
    assert issubclass(MappingError, TableBindError)
    assert issubclass(DataShapeError, TableBindError)
    # Cancellation is a control signal, not a binding failure
    assert not issubclass(OperationCancelled, TableBindError)


def test_mapping_error_names_every_missing_column():
    error = MappingError.missing_required(["emp_id", "dept"])
    assert error.missing == ("emp_id", "dept")
    assert str(error).startswith("required columns [emp_id, dept] were not found")


def test_data_shape_error_reports_one_based_row():
    error = DataShapeError(3)
    assert error.row_number == 3
    assert str(error) == "cannot parse table header: row 3 is empty"


@pytest.mark.parametrize(
    ("notation", "kind"),
    [("", "argument"), ("1A", "format"), ("XFE1", "range")],
)
def test_configuration_error_kinds(notation: str, kind: str):
    with pytest.raises(ConfigurationError) as e:
        GridAddress.from_notation(notation)
    assert e.value.kind == kind


def test_configuration_error_default_kind():
    assert ConfigurationError("bad").kind == "invalid"
