from __future__ import annotations

from collections.abc import Iterator, Mapping
from typing import Any

"""DynamicRow: untyped row object returned by dynamic reads.

Wraps the same ordered ``{logical name: value}`` map that dictionary reads yield and
adds attribute access, so ``row.Name`` and ``row["Name"]`` are equivalent.
"""

__all__ = [
    "DynamicRow",
]


class DynamicRow(Mapping[str, Any]):
    """Ordered, read-mostly mapping with attribute access."""

    __slots__ = ("_values",)

    def __init__(self, values: Mapping[str, Any] | None = None) -> None:
        object.__setattr__(self, "_values", dict(values or {}))

    def __getitem__(self, key: str) -> Any:
        return self._values[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._values)

    def __len__(self) -> int:
        return len(self._values)

    def __getattr__(self, name: str) -> Any:
        try:
            return self._values[name]
        except KeyError:
            raise AttributeError(name) from None

    def __setattr__(self, name: str, value: Any) -> None:
        self._values[name] = value

    def __setitem__(self, key: str, value: Any) -> None:
        self._values[key] = value

    def __eq__(self, other: object) -> bool:
        if isinstance(other, DynamicRow):
            return self._values == other._values
        if isinstance(other, Mapping):
            return self._values == dict(other)
        return NotImplemented

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        inner = ", ".join(f"{k}={v!r}" for k, v in self._values.items())
        return f"DynamicRow({inner})"

    def to_dict(self) -> dict[str, Any]:
        return dict(self._values)
