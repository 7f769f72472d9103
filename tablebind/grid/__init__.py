"""Grid backends: reader/writer contracts plus in-memory and pandas implementations."""

from .base import GridReader, GridRow, GridWriter, RawRow, WriteCell
from .frame import DataFrameGridReader, DataFrameGridWriter
from .memory import MemoryGridReader, MemoryGridWriter

__all__ = [
    "GridReader",
    "GridWriter",
    "GridRow",
    "WriteCell",
    "RawRow",
    "MemoryGridReader",
    "MemoryGridWriter",
    "DataFrameGridReader",
    "DataFrameGridWriter",
]
