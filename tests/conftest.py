# Shared pytest fixtures
from __future__ import annotations

from collections.abc import Callable
from pathlib import Path

import pandas as pd
import pytest

from tablebind.logging.init import reset_logging
from tablebind.services.accessors import BindingCache


@pytest.fixture()
def cache() -> BindingCache:
    """Fresh binding cache so tests never share reflected types."""
    return BindingCache()


@pytest.fixture()
def employee_rows() -> list[list[object]]:
    return [
        ["EmpId", "Name", "Hired", "Active", "Salary"],
        ["7", "Ada", 45000.0, "yes", "1,250.50"],
        [8.0, "  Grace  ", "2023-05-01", "no", 990.0],
        [None, None, None, None, None],
    ]


@pytest.fixture()
def make_excel(tmp_path: Path) -> Callable[[str, dict[str, list[list[object]]]], Path]:
    """Build a real xlsx workbook (openpyxl engine) from raw rows."""

    def _make(name: str, sheets: dict[str, list[list[object]]]) -> Path:
        p = tmp_path / name
        with pd.ExcelWriter(p, engine="openpyxl") as writer:
            for sheet, rows in sheets.items():
                df = pd.DataFrame(rows)
                df.to_excel(writer, sheet_name=sheet, header=False, index=False)
        return p

    return _make


@pytest.fixture()
def sample_table_yaml() -> str:
    return """sheet_name: Employees
header_start: A1
culture: en-US
whitespace_mode: trim
max_rows: 100
columns:
  - property: emp_id
    names: [EmpId, Employee ID]
    required: true
    type: int
  - property: name
    names: Name
    match: [ignore_case, prefix]
    trim_value: true
  - property: dept
    index: D
    default: General
"""


@pytest.fixture()
def write_table_config(tmp_path: Path, sample_table_yaml: str) -> Path:
    cfg = tmp_path / "employees.yml"
    cfg.write_text(sample_table_yaml, encoding="utf-8")
    return cfg


@pytest.fixture(autouse=True)
def _reset_logging():
    yield
    reset_logging()
