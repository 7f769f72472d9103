from __future__ import annotations

import types
import typing
from dataclasses import dataclass
from typing import Any

"""TargetType: nullable/non-nullable view over a Python type annotation.

``int`` is a non-nullable target, ``int | None`` / ``Optional[int]`` a nullable one.
``Any`` and ``object`` are treated as nullable passthrough targets.
"""

__all__ = [
    "TargetType",
]

_NONE_TYPE = type(None)


@dataclass(frozen=True)
class TargetType:
    annotation: Any  # Annotation as declared on the record
    actual: Any  # Unwrapped type (Optional removed)
    nullable: bool

    @classmethod
    def of(cls, annotation: Any) -> TargetType:
        if isinstance(annotation, TargetType):
            return annotation
        if annotation is None or annotation is _NONE_TYPE:
            return cls(annotation, object, True)
        if annotation is Any or annotation is object:
            return cls(annotation, object, True)

        origin = typing.get_origin(annotation)
        if origin is typing.Union or origin is types.UnionType:
            args = [a for a in typing.get_args(annotation) if a is not _NONE_TYPE]
            nullable = len(args) != len(typing.get_args(annotation))
            if len(args) == 1:
                return cls(annotation, args[0], nullable)
            # Unions of several concrete types bind without conversion
            return cls(annotation, object, True)
        return cls(annotation, annotation, False)

    @property
    def name(self) -> str:
        return getattr(self.actual, "__name__", repr(self.actual))

    def accepts(self, value: Any) -> bool:
        """Whether ``value`` is an instance of the unwrapped target type."""
        if self.actual is object:
            return True
        if not isinstance(self.actual, type):
            return False
        if isinstance(value, bool) and self.actual is not bool:
            # bool is an int subclass; a bool default never fits an int target
            return False
        return isinstance(value, self.actual)
