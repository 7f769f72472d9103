from __future__ import annotations

import ipaddress
import re
import uuid
from abc import abstractmethod
from typing import Any
from urllib.parse import ParseResult, urlparse

from packaging.version import InvalidVersion, Version

from ..models.column_spec import ColumnSpec
from ..models.culture import Culture
from ..models.target_type import TargetType
from .base import ValueConverter, format_hint

"""Identifier-like families: GUID, URI, IP address and version.

All four only accept text (or an instance of the target); anything else degrades
to the default. They are written back as their canonical string form.
"""

__all__ = [
    "GuidConverter",
    "UriConverter",
    "IpAddressConverter",
    "VersionConverter",
    "format_guid",
]

_GUID_FORMATS = {
    "N": re.compile(r"^[0-9a-fA-F]{32}$"),
    "D": re.compile(r"^[0-9a-fA-F]{8}(?:-[0-9a-fA-F]{4}){3}-[0-9a-fA-F]{12}$"),
    "B": re.compile(r"^\{[0-9a-fA-F]{8}(?:-[0-9a-fA-F]{4}){3}-[0-9a-fA-F]{12}\}$"),
    "P": re.compile(r"^\([0-9a-fA-F]{8}(?:-[0-9a-fA-F]{4}){3}-[0-9a-fA-F]{12}\)$"),
}
_URI_SCHEME = re.compile(r"^[A-Za-z][A-Za-z0-9+.-]*:")
_IPV4_DEFAULT = ipaddress.IPv4Address("255.255.255.255")
_IPV6_DEFAULT = ipaddress.IPv6Address("::")


def format_guid(value: uuid.UUID, fmt: str | None) -> str:
    """Render a UUID using the N/D/B/P format letters (D when unset)."""
    text = str(value)
    spec = (fmt or "D").upper()
    if spec == "N":
        return value.hex
    if spec == "B":
        return "{" + text + "}"
    if spec == "P":
        return "(" + text + ")"
    return text


def _text(value: Any) -> str | None:
    if not isinstance(value, str):
        return None
    text = value.strip()
    return text or None


class _TextConverter(ValueConverter):
    """Shared shape: text in, parsed object out, ``str()`` on write."""

    def convert(
        self,
        value: Any,
        target: TargetType,
        column: ColumnSpec | None = None,
        culture: Culture = Culture.INVARIANT,
    ) -> Any:
        if target.accepts(value) and value is not None:
            return value
        text = _text(value)
        parsed = self._parse(text, target.actual, column) if text is not None else None
        return parsed if parsed is not None else self.default_for(target)

    @abstractmethod
    def _parse(self, text: str, actual: Any, column: ColumnSpec | None) -> Any:
        """Parse non-empty ``text`` into ``actual``; None when it does not parse."""

    def _cell(self, value: Any, column: ColumnSpec | None) -> Any:
        return str(value)


class GuidConverter(_TextConverter):
    family = "guid"

    def supports(self, actual: Any) -> bool:
        return actual is uuid.UUID

    def zero(self, actual: Any) -> uuid.UUID:
        return uuid.UUID(int=0)

    def _parse(self, text: str, actual: Any, column: ColumnSpec | None) -> uuid.UUID | None:
        fmt = format_hint(column)
        if fmt:
            pattern = _GUID_FORMATS.get(fmt.upper())
            if pattern is not None and not pattern.match(text):
                return None
        try:
            return uuid.UUID(text)
        except ValueError:
            return None

    def _cell(self, value: Any, column: ColumnSpec | None) -> Any:
        return format_guid(value, format_hint(column))


class UriConverter(_TextConverter):
    """Absolute URIs only; relative references degrade to the default."""

    family = "uri"

    def supports(self, actual: Any) -> bool:
        return actual is ParseResult

    def zero(self, actual: Any) -> ParseResult:
        return urlparse("about:blank")

    def _parse(self, text: str, actual: Any, column: ColumnSpec | None) -> ParseResult | None:
        if not _URI_SCHEME.match(text) or any(ch.isspace() for ch in text):
            return None
        try:
            return urlparse(text)
        except ValueError:
            return None

    def _cell(self, value: Any, column: ColumnSpec | None) -> Any:
        return value.geturl()


class IpAddressConverter(_TextConverter):
    family = "ip_address"

    def supports(self, actual: Any) -> bool:
        return actual in (ipaddress.IPv4Address, ipaddress.IPv6Address)

    def zero(self, actual: Any) -> Any:
        return _IPV4_DEFAULT if actual is ipaddress.IPv4Address else _IPV6_DEFAULT

    def _parse(self, text: str, actual: Any, column: ColumnSpec | None) -> Any:
        try:
            return actual(text)
        except ValueError:
            return None


class VersionConverter(_TextConverter):
    family = "version"

    def supports(self, actual: Any) -> bool:
        return actual is Version

    def zero(self, actual: Any) -> Version:
        return Version("0.0.0.0")

    def _parse(self, text: str, actual: Any, column: ColumnSpec | None) -> Version | None:
        try:
            return Version(text)
        except InvalidVersion:
            return None
