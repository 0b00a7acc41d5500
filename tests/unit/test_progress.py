from __future__ import annotations

from unittest.mock import Mock, patch

from record_ingest.services.progress import LineProgress, is_tty_enabled


def test_is_tty_enabled_returns_stdout_isatty():
    with patch("sys.stdout.isatty", return_value=True):
        assert is_tty_enabled() is True
    with patch("sys.stdout.isatty", return_value=False):
        assert is_tty_enabled() is False


def test_init_with_tty_enabled():
    with patch("record_ingest.services.progress.is_tty_enabled", return_value=True), \
         patch("record_ingest.services.progress.tqdm") as mock_tqdm:
        progress = LineProgress(description="Reading x.csv")
        assert progress.enabled is True
        mock_tqdm.assert_called_once_with(
            total=None,
            desc="Reading x.csv",
            unit="line",
            disable=False,
            leave=False,
            position=0,
            ncols=80,
            ascii=True,
        )


def test_disabled_without_tty():
    with patch("record_ingest.services.progress.is_tty_enabled", return_value=False):
        progress = LineProgress()
        assert progress.pbar is None
        progress.advance(1, 0)
        progress.close()
        assert progress.count == 1


def test_advance_updates_bar_and_close_on_exit():
    mock_pbar = Mock()
    with patch("record_ingest.services.progress.is_tty_enabled", return_value=True), \
         patch("record_ingest.services.progress.tqdm", return_value=mock_pbar):
        with LineProgress() as progress:
            progress.advance(3, 1)
        mock_pbar.update.assert_called_once_with(1)
        mock_pbar.set_postfix.assert_called_once_with(accepted=3, rejected=1, refresh=False)
        mock_pbar.close.assert_called_once()
        assert progress.pbar is None
