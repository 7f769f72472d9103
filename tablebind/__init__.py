"""tablebind: bind spreadsheet-style grids to typed records and back.

Typical use::

    from dataclasses import dataclass
    from tablebind import MemoryGridReader, column, read_records

    @dataclass
    class Employee:
        emp_id: int = column("EmpId", required=True, field_default=0)
        name: str | None = column("Name", field_default=None)

    reader = MemoryGridReader.single([["EmpId", "Name"], ["7", "Ada"]])
    employees = list(read_records(reader, Employee))
"""

from .config.loader import load_table_config, table_config_from_dict
from .converters import ConverterRegistry, ValueConverter, enum_aliases
from .grid import (
    DataFrameGridReader,
    DataFrameGridWriter,
    GridReader,
    GridRow,
    GridWriter,
    MemoryGridReader,
    MemoryGridWriter,
    WriteCell,
)
from .logging.init import setup_logging
from .models import (
    ColumnSpec,
    ConfigurationError,
    Culture,
    DataShapeError,
    DynamicRow,
    GridAddress,
    MappingError,
    MatchStrategy,
    OperationCancelled,
    TableBindError,
    TableConfig,
    TargetType,
    WhitespaceMode,
    column,
    table,
)
from .services.accessors import BindingCache, default_cache
from .services.cancellation import CancelToken
from .services.pipeline import BindingSession, read_dicts, read_dynamic, read_records
from .services.progress import RowProgressTracker
from .services.resolver import ResolvedBinding, match_columns, resolve_columns
from .services.writer import write_dicts, write_records

__version__ = "0.1.0"

__all__ = [
    # Reading / writing
    "read_records",
    "read_dicts",
    "read_dynamic",
    "write_records",
    "write_dicts",
    "BindingSession",
    # Declarations
    "column",
    "table",
    "enum_aliases",
    "ColumnSpec",
    "MatchStrategy",
    "WhitespaceMode",
    "TableConfig",
    "GridAddress",
    "Culture",
    "TargetType",
    "DynamicRow",
    "load_table_config",
    "table_config_from_dict",
    # Resolution
    "ResolvedBinding",
    "match_columns",
    "resolve_columns",
    # Conversion
    "ConverterRegistry",
    "ValueConverter",
    "BindingCache",
    "default_cache",
    # Backends
    "GridReader",
    "GridWriter",
    "GridRow",
    "WriteCell",
    "MemoryGridReader",
    "MemoryGridWriter",
    "DataFrameGridReader",
    "DataFrameGridWriter",
    # Session control
    "CancelToken",
    "RowProgressTracker",
    "setup_logging",
    # Errors
    "TableBindError",
    "ConfigurationError",
    "MappingError",
    "DataShapeError",
    "OperationCancelled",
]
