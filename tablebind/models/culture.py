from __future__ import annotations

from dataclasses import dataclass
from typing import ClassVar

from .errors import ConfigurationError

"""Culture descriptors used by culture-aware number/date parsing.

Only the handful of properties the converters need are modelled: decimal and
group separators, day-first date ordering, and the currency symbols to strip.
"""

__all__ = [
    "Culture",
]


@dataclass(frozen=True)
class Culture:
    name: str  # "" is the invariant culture
    decimal_sep: str = "."
    group_sep: str = ","
    day_first: bool = False
    currency_symbols: tuple[str, ...] = ("¤", "$")

    INVARIANT: ClassVar[Culture]
    _KNOWN: ClassVar[dict[str, Culture]]

    @property
    def is_invariant(self) -> bool:
        return self.name == ""

    @classmethod
    def get(cls, name: str | None) -> Culture:
        """Look up a culture by name (case-insensitive, ``_`` accepted for ``-``).

        Raises:
            ConfigurationError: unknown culture name.
        """
        if name is None or name == "" or name.lower() == "invariant":
            return cls.INVARIANT
        key = name.replace("_", "-").lower()
        culture = cls._KNOWN.get(key)
        if culture is None:
            known = ", ".join(sorted(c.name for c in cls._KNOWN.values()))
            raise ConfigurationError(
                f"unknown culture {name!r}; use one of: {known}", kind="argument"
            )
        return culture

    def __str__(self) -> str:
        return self.name or "invariant"


Culture.INVARIANT = Culture("")
Culture._KNOWN = {
    c.name.lower(): c
    for c in (
        Culture("en-US", ".", ",", False, ("$", "US$")),
        Culture("en-GB", ".", ",", True, ("£",)),
        Culture("zh-CN", ".", ",", False, ("¥", "￥")),
        Culture("ja-JP", ".", ",", False, ("¥", "￥")),
        Culture("de-DE", ",", ".", True, ("€",)),
        Culture("fr-FR", ",", " ", True, ("€",)),
        Culture("ru-RU", ",", " ", True, ("₽",)),
    )
}
