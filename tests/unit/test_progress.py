from __future__ import annotations

import logging
from unittest.mock import Mock, patch

from tablebind.services.progress import (
    WRITE_PROGRESS_INTERVAL,
    RowProgressTracker,
    is_tty_enabled,
    report_progress,
)


def test_is_tty_enabled_returns_stdout_isatty():
    """Test that is_tty_enabled returns sys.stdout.isatty()."""
    with patch('sys.stdout.isatty', return_value=True):
        assert is_tty_enabled() is True

    with patch('sys.stdout.isatty', return_value=False):
        assert is_tty_enabled() is False


def test_write_interval():
    assert WRITE_PROGRESS_INTERVAL == 100


class TestReportProgress:
    def test_none_callback_is_ignored(self):
        report_progress(None, 3)

    def test_callback_receives_count(self):
        callback = Mock()
        report_progress(callback, 7)
        callback.assert_called_once_with(7)

    def test_failing_callback_is_logged_not_raised(self, caplog):
        def boom(count: int) -> None:
            raise RuntimeError("display gone")

        with caplog.at_level(logging.WARNING, logger="tablebind.services.progress"):
            report_progress(boom, 12)
        assert "Progress callback failed at row 12" in caplog.text


class TestRowProgressTracker:
    """Test cases for RowProgressTracker class."""

    def test_init_with_tty_enabled(self):
        """Test RowProgressTracker initialization when TTY is enabled."""
        with patch('tablebind.services.progress.is_tty_enabled', return_value=True), \
             patch('tablebind.services.progress.tqdm') as mock_tqdm:

            tracker = RowProgressTracker(500, description="Reading employees")

            assert tracker.total_rows == 500
            assert tracker.description == "Reading employees"
            assert tracker.current == 0
            assert tracker.enabled is True

            mock_tqdm.assert_called_once_with(
                total=500,
                desc="Reading employees",
                unit="row",
                disable=False,
                leave=True,
                position=0,
                ncols=80,
                ascii=True,
            )

    def test_init_with_tty_disabled(self):
        with patch('tablebind.services.progress.is_tty_enabled', return_value=False):
            tracker = RowProgressTracker()

            assert tracker.total_rows is None
            assert tracker.description == "Rows"
            assert tracker.enabled is False
            assert tracker.pbar is None

    def test_call_updates_by_delta(self):
        """Counts are cumulative; the bar advances by the difference."""
        mock_pbar = Mock()

        with patch('tablebind.services.progress.is_tty_enabled', return_value=True), \
             patch('tablebind.services.progress.tqdm', return_value=mock_pbar):

            tracker = RowProgressTracker()
            tracker(100)
            tracker(200)
            tracker(200)
            tracker(250)

            assert [c.args for c in mock_pbar.update.call_args_list] == [(100,), (100,), (50,)]
            assert tracker.current == 250

    def test_call_with_tty_disabled(self):
        with patch('tablebind.services.progress.is_tty_enabled', return_value=False):
            tracker = RowProgressTracker()
            tracker(10)
            assert tracker.current == 10

    def test_set_postfix_with_tty_enabled(self):
        mock_pbar = Mock()

        with patch('tablebind.services.progress.is_tty_enabled', return_value=True), \
             patch('tablebind.services.progress.tqdm', return_value=mock_pbar):

            tracker = RowProgressTracker()
            tracker.set_postfix(sheet="Employees")

            mock_pbar.set_postfix.assert_called_once_with(sheet="Employees")

    def test_close_with_tty_enabled(self):
        mock_pbar = Mock()

        with patch('tablebind.services.progress.is_tty_enabled', return_value=True), \
             patch('tablebind.services.progress.tqdm', return_value=mock_pbar):

            tracker = RowProgressTracker()
            tracker.close()

            mock_pbar.close.assert_called_once()
            assert tracker.pbar is None

    def test_context_manager(self):
        mock_pbar = Mock()

        with patch('tablebind.services.progress.is_tty_enabled', return_value=True), \
             patch('tablebind.services.progress.tqdm', return_value=mock_pbar):

            with RowProgressTracker() as tracker:
                assert isinstance(tracker, RowProgressTracker)

            mock_pbar.close.assert_called_once()
