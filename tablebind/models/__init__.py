"""Domain models for the table binding engine.

Value types (GridAddress, Culture, TargetType), column/table descriptors and the
error taxonomy shared by converters, the resolver and the pipeline.
"""

from .column_spec import (
    COLUMN_METADATA_KEY,
    ColumnSpec,
    MatchStrategy,
    WhitespaceMode,
    column,
    process_whitespace,
)
from .culture import Culture
from .errors import (
    ConfigurationError,
    DataShapeError,
    MappingError,
    OperationCancelled,
    TableBindError,
)
from .grid_address import GridAddress, index_to_letter, letter_to_index
from .row_data import DynamicRow
from .table_config import TableConfig, table, table_config_for
from .target_type import TargetType

__all__ = [
    # Addresses
    "GridAddress",
    "letter_to_index",
    "index_to_letter",
    # Columns and tables
    "ColumnSpec",
    "MatchStrategy",
    "WhitespaceMode",
    "COLUMN_METADATA_KEY",
    "column",
    "process_whitespace",
    "TableConfig",
    "table",
    "table_config_for",
    # Values
    "Culture",
    "TargetType",
    "DynamicRow",
    # Errors
    "TableBindError",
    "ConfigurationError",
    "MappingError",
    "DataShapeError",
    "OperationCancelled",
]
