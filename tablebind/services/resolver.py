from __future__ import annotations

import logging
import re
from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass, field
from typing import Any

from ..models.column_spec import ColumnSpec, MatchStrategy, WhitespaceMode, process_whitespace
from ..models.errors import MappingError
from ..models.grid_address import index_to_letter
from ..models.table_config import TableConfig

"""Column resolution: header row + column specs -> physical index map.

Matching runs once per table session. Each physical column collects every spec
that matches it (fan-out); each spec binds to the first column it matches.
"""

__all__ = [
    "ResolvedBinding",
    "header_name",
    "match_columns",
    "resolve_columns",
]

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ResolvedBinding:
    """Frozen physical-index map produced by :func:`resolve_columns`."""
    columns: Mapping[int, tuple[ColumnSpec, ...]] = field(default_factory=dict)

    def specs_at(self, index: int) -> tuple[ColumnSpec, ...]:
        return self.columns.get(index, ())

    @property
    def specs(self) -> list[ColumnSpec]:
        return [spec for index in sorted(self.columns) for spec in self.columns[index]]

    @property
    def is_empty(self) -> bool:
        return not self.columns

    def to_dict(self) -> dict[int, list[str]]:
        """Index -> property names, handy for logging and comparisons."""
        return {i: [s.property_name for s in specs] for i, specs in sorted(self.columns.items())}

    def __len__(self) -> int:
        return len(self.columns)


def header_name(index: int, cell: Any, table: TableConfig) -> str:
    """Name used for matching a physical column.

    The whitespace-processed header text when the table has a header and the
    cell is non-empty, otherwise the column letter.
    """
    text = "" if cell is None else str(cell)
    if table.has_header and text:
        return process_whitespace(text, table.whitespace_mode)
    return index_to_letter(index)


def _regex_matches(pattern: str, text: str, flags: int) -> bool:
    try:
        return re.search(pattern, text, flags) is not None
    except re.error:
        return False


def _spec_matches(index: int, header: str, spec: ColumnSpec, mode: WhitespaceMode) -> bool:
    if spec.index >= 0:
        return spec.index == index

    strategy = spec.match
    ignore_case = MatchStrategy.IGNORE_CASE in strategy

    def fold(text: str) -> str:
        return text.casefold() if ignore_case else text

    target = fold(header)
    prop = fold(spec.property_name)
    candidates = [process_whitespace(n, mode) for n in spec.names] + list(spec.names)
    names = [fold(n) for n in dict.fromkeys(candidates) if n]

    if MatchStrategy.CONTAINS in strategy:
        return prop in target or any(n in target for n in names)
    if MatchStrategy.PREFIX in strategy:
        return target.startswith(prop) or any(target.startswith(n) for n in names)
    if MatchStrategy.SUFFIX in strategy:
        return target.endswith(prop) or any(target.endswith(n) for n in names)
    if MatchStrategy.REGEX in strategy:
        flags = re.IGNORECASE if ignore_case else 0
        return target == prop or any(_regex_matches(p, header, flags) for p in spec.names)
    return target == prop or target in names


def match_columns(
    index: int,
    header: str,
    specs: Iterable[ColumnSpec],
    mode: WhitespaceMode = WhitespaceMode.TRIM,
) -> list[ColumnSpec]:
    """Return every spec matching physical column ``index`` with header ``header``.

    Specs that are ignored on read or have no property name never match. A spec
    with an explicit index matches only that column; otherwise exactly one
    strategy applies, in the order Contains, Prefix, Suffix, Regex, exact.
    Empty strings are dropped from the candidate names, so a Contains spec never
    matches everything.
    """
    return [
        spec
        for spec in specs
        if not spec.ignore_on_read and spec.property_name.strip()
        and _spec_matches(index, header, spec, mode)
    ]


def resolve_columns(
    header_row: Mapping[int, Any],
    specs: Sequence[ColumnSpec],
    table: TableConfig,
    *,
    dictionary_mode: bool = False,
) -> ResolvedBinding:
    """Bind specs to physical columns using the header row.

    Args:
        header_row: ``{physical index: raw cell}`` of the header (or, without a
            header, the first data row; only its width matters then).
        specs: Merged column specs.
        table: Table config (has_header, whitespace_mode).
        dictionary_mode: Add ad-hoc specs for unmatched columns, keyed by the header
            name, unless a spec with that name is already bound.

    Raises:
        MappingError: required specs that matched no column, all listed at once.
    """
    bound: list[ColumnSpec] = []
    bound_props: set[str] = set()

    for index in sorted(header_row):
        header = header_name(index, header_row[index], table)
        matched = match_columns(index, header, specs, table.whitespace_mode) if specs else []
        for spec in matched:
            if spec.property_name in bound_props:
                continue
            bound.append(spec.with_index(index))
            bound_props.add(spec.property_name)
        if dictionary_mode and not matched:
            folded = header.casefold()
            if all(s.property_name.casefold() != folded for s in bound):
                bound.append(ColumnSpec(names=(header,), index=index, property_name=header))
                bound_props.add(header)

    missing = [
        s.property_name
        for s in specs
        if s.required and not s.ignore_on_read and s.property_name not in bound_props
    ]
    if missing:
        error = MappingError.missing_required(missing)
        logger.error("%s", error)
        raise error

    columns: dict[int, list[ColumnSpec]] = {}
    for spec in bound:
        columns.setdefault(spec.index, []).append(spec)
    binding = ResolvedBinding({i: tuple(s) for i, s in columns.items()})
    logger.debug("Resolved columns: %s", binding.to_dict())
    return binding
