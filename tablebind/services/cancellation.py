from __future__ import annotations

import threading

from ..models.errors import OperationCancelled

"""Cooperative cancellation for read/write sessions.

The pipeline checks the token once at the start of every row. Triggering it from
another thread stops the stream after the row currently being processed.
"""

__all__ = [
    "CancelToken",
    "check_cancelled",
]


class CancelToken:
    def __init__(self) -> None:
        self._event = threading.Event()

    def cancel(self) -> None:
        self._event.set()

    @property
    def is_cancelled(self) -> bool:
        return self._event.is_set()

    def raise_if_cancelled(self) -> None:
        if self._event.is_set():
            raise OperationCancelled("operation was cancelled")


def check_cancelled(token: CancelToken | None) -> None:
    if token is not None:
        token.raise_if_cancelled()
