from __future__ import annotations

from collections.abc import Iterable

"""Error taxonomy for the binding engine.

- ConfigurationError: invalid table/column configuration, raised at construction.
- MappingError: required columns unresolved or nothing resolved at all.
- DataShapeError: the backend reported a header/first row without fields.
- OperationCancelled: cancellation signal, outside TableBindError.

Per-cell conversion failures are not represented here: converters always degrade
to a default/None value.
"""

__all__ = [
    "TableBindError",
    "ConfigurationError",
    "MappingError",
    "DataShapeError",
    "OperationCancelled",
]


class TableBindError(Exception):
    """Base class for fatal binding errors."""


class ConfigurationError(TableBindError, ValueError):
    """Invalid table or column configuration.

    ``kind`` distinguishes the original failure class:
    ``"argument"`` (empty input), ``"format"`` (malformed text) or ``"range"``
    (value outside its allowed bounds). Anything else is ``"invalid"``.
    """

    def __init__(self, message: str, *, kind: str = "invalid") -> None:
        super().__init__(message)
        self.kind = kind


class MappingError(TableBindError):
    """Raised once per session when required columns cannot be resolved."""

    def __init__(self, message: str, missing: Iterable[str] = ()) -> None:
        super().__init__(message)
        self.missing: tuple[str, ...] = tuple(missing)

    @classmethod
    def missing_required(cls, names: Iterable[str]) -> MappingError:
        missing = tuple(names)
        joined = ", ".join(missing)
        return cls(
            f"required columns [{joined}] were not found in the table header; "
            "check the column names/match strategy or the table layout",
            missing,
        )


class DataShapeError(TableBindError):
    """A header or first data row reported zero fields."""

    def __init__(self, row_number: int) -> None:
        super().__init__(f"cannot parse table header: row {row_number} is empty")
        self.row_number = row_number  # 1-based


class OperationCancelled(Exception):
    """Raised when a CancelToken is triggered between rows."""
