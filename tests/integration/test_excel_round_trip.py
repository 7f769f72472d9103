from __future__ import annotations

import enum
from collections.abc import Callable
from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal
from pathlib import Path

import openpyxl
import pytest

from tablebind import (
    DataFrameGridReader,
    DataFrameGridWriter,
    MappingError,
    TableConfig,
    column,
    load_table_config,
    read_dicts,
    read_records,
    table,
    write_records,
)
from tablebind.services.accessors import BindingCache

"""End-to-end runs over real xlsx/csv files (pandas + openpyxl)."""

MakeExcel = Callable[[str, dict[str, list[list[object]]]], Path]


class Shift(enum.Enum):
    DAY = 1
    NIGHT = 2


@table(sheet_name="Employees", header_start="B2")
@dataclass
class Employee:
    emp_id: int = column("EmpId", "Employee ID", required=True, field_default=0)
    name: str | None = column("Name", trim_value=True, field_default=None)
    hired: date | None = column("Hired", format="yyyy-mm-dd", field_default=None)
    salary: Decimal = column("Salary", field_default=Decimal(0))
    shift: Shift = column("Shift", field_default=Shift.DAY)


@pytest.fixture()
def workbook(make_excel: MakeExcel) -> Path:
    return make_excel(
        "staff.xlsx",
        {
            "Cover": [["Quarterly staff export"]],
            "Employees": [
                ["Staff list", None, None, None, None, None],
                ["note", "Employee ID", "Name", "Hired", "Salary", "Shift"],
                [None, 7, "  Ada ", datetime(2023, 3, 15), 1250.5, "night"],
                [None, 8, "Grace", "2023-05-01", "990", 2],
                [None, "9", None, None, None, None],
            ],
        },
    )


def test_read_records_from_xlsx(workbook: Path):
    reader = DataFrameGridReader.from_excel(workbook)
    ada, grace, blank = read_records(reader, Employee, cache=BindingCache())

    assert ada == Employee(7, "Ada", date(2023, 3, 15), Decimal("1250.5"), Shift.NIGHT)
    assert grace == Employee(8, "Grace", date(2023, 5, 1), Decimal("990"), Shift.NIGHT)
    assert blank == Employee(9)


def test_target_sheets_restrict_loading(workbook: Path):
    reader = DataFrameGridReader.from_excel(workbook, target_sheets=["Employees"])
    assert reader.list_sheets() == ["Employees"]


def test_wrong_sheet_layout_raises_mapping_error(workbook: Path):
    reader = DataFrameGridReader.from_excel(workbook)
    with pytest.raises(MappingError):
        list(read_records(reader, Employee, TableConfig(sheet_name="Cover"), cache=BindingCache()))


def test_write_then_read_xlsx(tmp_path: Path):
    records = [
        Employee(1, "Ada", date(2024, 1, 31), Decimal("10.25"), Shift.NIGHT),
        Employee(2, None, None, Decimal("0"), Shift.DAY),
    ]
    writer = DataFrameGridWriter()
    assert write_records(writer, records, cache=BindingCache()) == 2
    path = writer.save_excel(tmp_path / "out.xlsx")

    sheet = openpyxl.load_workbook(path)["Employees"]
    assert [c.value for c in sheet[2]][1:] == ["EmpId", "Name", "Hired", "Salary", "Shift"]
    assert sheet["D3"].number_format == "yyyy-mm-dd"

    back = list(read_records(DataFrameGridReader.from_excel(path), Employee, cache=BindingCache()))
    assert back == records


def test_read_with_yaml_descriptor(make_excel: MakeExcel, write_table_config: Path):
    path = make_excel(
        "descriptor.xlsx",
        {
            "Employees": [
                ["EmpId", "Name of employee", "Floor", "Dept"],
                [7, " Ada ", 3, "R&D"],
                [8, "Grace", 4, None],
            ]
        },
    )
    config = load_table_config(write_table_config)
    rows = list(read_dicts(DataFrameGridReader.from_excel(path), config, cache=BindingCache()))

    assert rows[0] == {"emp_id": 7, "name": "Ada", "Floor": 3.0, "dept": "R&D"}
    assert rows[1]["dept"] == "General"


def test_csv_round_trip(tmp_path: Path):
    csv = tmp_path / "staff.csv"
    csv.write_text(
        "title,,,,\nEmployee ID,Name,Hired,Salary,Shift\n5,Lin,2022-02-02,12.5,DAY\n",
        encoding="utf-8",
    )
    reader = DataFrameGridReader.from_csv(csv, sheet_name="Employees")
    (record,) = read_records(reader, Employee, TableConfig(sheet_name="Employees", header_start="A2"),
                             cache=BindingCache())
    assert record == Employee(5, "Lin", date(2022, 2, 2), Decimal("12.5"), Shift.DAY)

    writer = DataFrameGridWriter()
    write_records(writer, [record], TableConfig(sheet_name="Employees"), cache=BindingCache())
    out = writer.save_csv(tmp_path / "out.csv")
    assert out.read_text(encoding="utf-8").splitlines() == [
        "EmpId,Name,Hired,Salary,Shift",
        "5,Lin,2022-02-02 00:00:00,12.5,DAY",
    ]
