from __future__ import annotations

import re
from dataclasses import dataclass
from typing import ClassVar

from .errors import ConfigurationError

"""GridAddress value type (row/column coordinate with A1 notation).

Rows and columns are 0-based. The pair (-1, -1) is the "unknown" sentinel used for
unset positions such as an implicit data start.
"""

__all__ = [
    "GridAddress",
    "XLSX_COLUMN_LIMIT",
    "letter_to_index",
    "index_to_letter",
]

XLSX_COLUMN_LIMIT = 1 << 14  # 16384 columns (A..XFD)

_A1_PATTERN = re.compile(r"^(?P<column>[A-Za-z]{1,3})(?P<row>[1-9][0-9]*)$")
_LETTERS_PATTERN = re.compile(r"^[A-Za-z]{1,3}$")


def letter_to_index(letters: str) -> int:
    """Convert column letters (``A``, ``Z``, ``AA``...) to a 0-based index.

    Base-26 without a zero digit: A=1 .. Z=26, AA=27, minus one at the end.

    Raises:
        ConfigurationError: empty input or characters outside A-Z.
    """
    if letters is None or not letters.strip():
        raise ConfigurationError("column letters must not be empty", kind="argument")
    text = letters.strip().upper()
    if not _LETTERS_PATTERN.match(text):
        raise ConfigurationError(f"invalid column letters: {letters!r}", kind="format")
    index = 0
    for ch in text:
        index = index * 26 + (ord(ch) - ord("A") + 1)
    return index - 1


def index_to_letter(index: int) -> str:
    """Convert a 0-based column index to its letters (0 -> A, 25 -> Z, 26 -> AA)."""
    if index < 0:
        raise ConfigurationError(f"column index must not be negative: {index}", kind="range")
    n = index + 1
    letters: list[str] = []
    while n > 0:
        rem = (n - 1) % 26
        letters.append(chr(ord("A") + rem))
        # -1 before the divide keeps Z/AZ/ZZ (multiples of 26) from borrowing a digit
        n = (n - 1) // 26
    return "".join(reversed(letters))


@dataclass(frozen=True)
class GridAddress:
    """Immutable (row, column) cell coordinate.

    Construct through :meth:`from_row_col` or :meth:`from_notation`; both validate.
    Direct construction validates as well (``__post_init__``).
    """
    row: int
    column: int

    A1: ClassVar[GridAddress]
    A2: ClassVar[GridAddress]
    UNKNOWN: ClassVar[GridAddress]

    def __post_init__(self) -> None:
        if self.row == -1 and self.column == -1:
            return
        if self.row < 0 or self.column < 0:
            raise ConfigurationError(
                f"row and column indexes must not be negative (row={self.row}, column={self.column})",
                kind="range",
            )
        if self.column > XLSX_COLUMN_LIMIT - 1:
            raise ConfigurationError(
                f"column index out of range (0-{XLSX_COLUMN_LIMIT - 1}): {self.column}",
                kind="range",
            )

    @classmethod
    def from_row_col(cls, row: int, column: int) -> GridAddress:
        return cls(row, column)

    @classmethod
    def from_notation(cls, text: str) -> GridAddress:
        """Parse A1 notation (``"B3"`` -> row 2, column 1).

        Raises:
            ConfigurationError: kind ``argument`` for empty input, ``format`` when the
                text is not A1 notation, ``range`` when the column exceeds the limit.
        """
        if text is None or not text.strip():
            raise ConfigurationError("A1 notation must not be empty", kind="argument")
        match = _A1_PATTERN.match(text)
        if match is None:
            raise ConfigurationError(f"invalid A1 notation: {text!r}", kind="format")
        row = int(match.group("row")) - 1
        column = letter_to_index(match.group("column"))
        return cls(row, column)

    @property
    def is_unknown(self) -> bool:
        return self.row == -1 and self.column == -1

    @property
    def column_letter(self) -> str:
        return "" if self.is_unknown else index_to_letter(self.column)

    def to_notation(self) -> str:
        if self.is_unknown:
            return ""
        return f"{index_to_letter(self.column)}{self.row + 1}"

    def offset(self, d_row: int, d_col: int) -> GridAddress:
        return GridAddress(self.row + d_row, self.column + d_col)

    def __str__(self) -> str:
        return self.to_notation()


GridAddress.A1 = GridAddress(0, 0)
GridAddress.A2 = GridAddress(1, 0)
GridAddress.UNKNOWN = GridAddress(-1, -1)
