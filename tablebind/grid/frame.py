from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence
from datetime import datetime
from pathlib import Path
from typing import Any

import pandas as pd

from ..converters.base import as_raw_cell
from .base import GridReader
from .memory import MemoryGridWriter

"""pandas-backed grid backend (xlsx/xls via openpyxl, csv via pandas).

Sheets are read without a header (``header=None``) so the binding engine sees the
physical grid and applies its own header/data positioning. pandas scalars are
normalised into raw cell values: NaN/NaT -> None, numbers -> float,
Timestamp -> naive datetime, time -> timedelta.
"""

__all__ = [
    "DataFrameGridReader",
    "DataFrameGridWriter",
    "read_excel_frames",
    "read_csv_frame",
    "normalize_cell",
]


def _na_options(keep_na_strings: list[str] | None) -> dict[str, Any]:
    """pandas NA options that exclude ``keep_na_strings`` from the default NA set."""
    import pandas._libs.parsers as parsers

    if not keep_na_strings:
        return {"keep_default_na": True, "na_values": None}
    custom_na = parsers.STR_NA_VALUES.copy() - set(keep_na_strings)
    return {"keep_default_na": False, "na_values": list(custom_na)}


def read_excel_frames(
    path: Path | str,
    target_sheets: Iterable[str] | None = None,
    keep_na_strings: list[str] | None = None,
) -> dict[str, pd.DataFrame]:
    """Read a workbook into raw DataFrames keyed by sheet name (workbook order).

    Args:
        path: Workbook path (.xlsx/.xls)
        target_sheets: Restrict to these sheet names (None reads all sheets)
        keep_na_strings: Strings such as ``"NA"`` that must stay text instead of NaN
    """
    wanted = None if target_sheets is None else {str(s) for s in target_sheets}
    frames: dict[str, pd.DataFrame] = {}
    with pd.ExcelFile(path) as xls:
        for name in xls.sheet_names:
            if wanted is not None and str(name) not in wanted:
                continue
            frames[str(name)] = xls.parse(name, header=None, **_na_options(keep_na_strings))
    return frames


def read_csv_frame(
    path: Path | str,
    keep_na_strings: list[str] | None = None,
    **read_csv_kwargs: Any,
) -> pd.DataFrame:
    """Read a CSV file as text cells without header inference."""
    options: dict[str, Any] = {"header": None, "dtype": str, "skip_blank_lines": False}
    options.update(_na_options(keep_na_strings))
    options.update(read_csv_kwargs)
    return pd.read_csv(path, **options)


def normalize_cell(value: Any) -> Any:
    if value is None:
        return None
    if pd.api.types.is_scalar(value) and pd.isna(value):
        return None
    if isinstance(value, pd.Timestamp):
        value = value.tz_localize(None) if value.tzinfo is not None else value
        return value.to_pydatetime()
    if isinstance(value, pd.Timedelta):
        return value.to_pytimedelta()
    return as_raw_cell(value)


class DataFrameGridReader(GridReader):
    """GridReader over a mapping of sheet name -> DataFrame (read with ``header=None``)."""

    def __init__(self, frames: Mapping[str, pd.DataFrame]) -> None:
        self._frames = dict(frames)

    @classmethod
    def from_frames(cls, frames: Mapping[str, pd.DataFrame]) -> DataFrameGridReader:
        return cls(frames)

    @classmethod
    def from_excel(
        cls,
        path: Path | str,
        target_sheets: Iterable[str] | None = None,
        keep_na_strings: list[str] | None = None,
    ) -> DataFrameGridReader:
        return cls(read_excel_frames(path, target_sheets, keep_na_strings))

    @classmethod
    def from_csv(
        cls,
        path: Path | str,
        sheet_name: str | None = None,
        keep_na_strings: list[str] | None = None,
        **read_csv_kwargs: Any,
    ) -> DataFrameGridReader:
        name = sheet_name or Path(path).stem
        return cls({name: read_csv_frame(path, keep_na_strings, **read_csv_kwargs)})

    def list_sheets(self) -> list[str]:
        return list(self._frames)

    def _physical_rows(self, sheet: str) -> Iterable[Sequence[Any]]:
        for row in self._frames[sheet].itertuples(index=False, name=None):
            yield [normalize_cell(v) for v in row]


def _to_frame(rows: list[list[Any]]) -> pd.DataFrame:
    width = max((len(r) for r in rows), default=0)
    padded = [r + [None] * (width - len(r)) for r in rows]
    return pd.DataFrame(padded, dtype=object)


class DataFrameGridWriter(MemoryGridWriter):
    """Collects written rows and exports them through pandas."""

    def to_frame(self, sheet: str | None = None) -> pd.DataFrame:
        name = sheet or next(iter(self.sheets), "Sheet1")
        return _to_frame(self.sheets.get(name, []))

    def to_frames(self) -> dict[str, pd.DataFrame]:
        return {name: _to_frame(rows) for name, rows in self.sheets.items()}

    def save_excel(self, path: Path | str) -> Path:
        """Write every collected sheet into one workbook (openpyxl engine).

        Cell format hints are applied as openpyxl number formats.
        """
        target = Path(path)
        with pd.ExcelWriter(target, engine="openpyxl") as writer:
            for name, frame in self.to_frames().items():
                frame.to_excel(writer, sheet_name=name, header=False, index=False)
                worksheet = writer.sheets[name]
                for (row, col), fmt in self.formats.get(name, {}).items():
                    worksheet.cell(row=row + 1, column=col + 1).number_format = fmt
        return target

    def save_csv(self, path: Path | str, sheet: str | None = None) -> Path:
        target = Path(path)
        frame = self.to_frame(sheet)
        frame = frame.map(lambda v: v.isoformat(sep=" ") if isinstance(v, datetime) else v)
        frame.to_csv(target, header=False, index=False)
        return target
