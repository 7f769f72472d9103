from __future__ import annotations

import logging
import sys
from collections.abc import Callable
from typing import Any

from tqdm import tqdm
from tqdm.std import tqdm as TqdmType

"""Row progress reporting.

Progress callbacks receive the number of rows processed so far. Reads report after
every row, writes every ``WRITE_PROGRESS_INTERVAL`` rows plus once at the end.
A failing callback is logged and never interrupts the pipeline.

RowProgressTracker renders a tqdm bar when stdout is a TTY and stays silent
otherwise, so CI logs are not flooded with control sequences.
"""

__all__ = [
    "ProgressCallback",
    "WRITE_PROGRESS_INTERVAL",
    "report_progress",
    "is_tty_enabled",
    "RowProgressTracker",
]

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[int], Any]

WRITE_PROGRESS_INTERVAL = 100


def report_progress(progress: ProgressCallback | None, count: int) -> None:
    """Invoke ``progress(count)``; errors raised by the callback are logged."""
    if progress is None:
        return
    try:
        progress(count)
    except Exception:
        logger.warning("Progress callback failed at row %d", count, exc_info=True)


def is_tty_enabled() -> bool:
    """Check if TTY output is enabled.

    Returns:
        True if stdout is a TTY and progress should be displayed, False otherwise
    """
    return sys.stdout.isatty()


class RowProgressTracker:
    """Callable progress sink backed by a tqdm bar.

    Pass an instance as the ``progress`` argument of a read or write call::

        with RowProgressTracker(description="Reading employees") as tracker:
            rows = list(read_records(reader, Employee, progress=tracker))
    """

    def __init__(self, total_rows: int | None = None, *, description: str = "Rows") -> None:
        """Initialize progress tracker.

        Args:
            total_rows: Expected number of rows, None when unknown
            description: Description for the progress bar
        """
        self.total_rows = total_rows
        self.description = description
        self.current = 0

        self.enabled = is_tty_enabled()
        self.pbar: TqdmType[Any] | None
        if self.enabled:
            self.pbar = tqdm(
                total=total_rows,
                desc=description,
                unit="row",
                disable=False,
                leave=True,
                position=0,
                ncols=80,
                ascii=True,
            )
        else:
            self.pbar = None

    def __call__(self, count: int) -> None:
        """Advance the bar to ``count`` rows (counts are cumulative)."""
        delta = count - self.current
        self.current = count
        if delta > 0 and self.enabled and self.pbar is not None:
            self.pbar.update(delta)

    def set_postfix(self, **kwargs: Any) -> None:
        if self.enabled and self.pbar is not None:
            self.pbar.set_postfix(**kwargs)

    def close(self) -> None:
        """Close the progress bar."""
        if self.enabled and self.pbar is not None:
            self.pbar.close()
            self.pbar = None

    def __enter__(self) -> RowProgressTracker:
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        self.close()
