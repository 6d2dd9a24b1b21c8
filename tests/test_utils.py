"""Tests for display formatting, browser launching and logging setup."""

from __future__ import annotations

import datetime
import io
import logging
import webbrowser

from pathlib import Path

import pytest

from utils.browser import open_url
from utils.debug_console import (
    CONSOLE_LOGGER_NAME,
    TranscriptConsole,
    build_console,
    setup_logging,
)
from utils.format import format_expiry, time_until


class TestFormatExpiry:
    """Tests for format_expiry."""

    def test_formats_local_time(self) -> None:
        epoch_ms = 1_700_000_000_000
        expected = datetime.datetime.fromtimestamp(1_700_000_000).strftime("%Y-%m-%d %H:%M:%S")
        assert format_expiry(epoch_ms) == expected

    @pytest.mark.parametrize("value", [0, -1, None, "soon", True, float("nan"), float("inf")])
    def test_unusable_values(self, value) -> None:
        assert format_expiry(value) == "-"


class TestTimeUntil:
    """Tests for time_until."""

    @pytest.mark.parametrize(
        ("delta_ms", "expected"),
        [
            (-1, "expired"),
            (0, "expired"),
            (5 * 60_000, "5m"),
            (65 * 60_000, "1h 5m"),
            (26 * 3_600_000, "1d 2h"),
        ],
    )
    def test_durations(self, delta_ms: int, expected: str) -> None:
        now = 1_700_000_000_000
        assert time_until(now + delta_ms, now_ms=now) == expected


class TestOpenUrl:
    """Tests for open_url."""

    def test_success(self, monkeypatch) -> None:
        opened: list[str] = []
        monkeypatch.setattr(webbrowser, "open", lambda url: opened.append(url) or True)
        open_url("https://example.com")
        assert opened == ["https://example.com"]

    def test_no_browser(self, monkeypatch) -> None:
        monkeypatch.setattr(webbrowser, "open", lambda url: False)
        with pytest.raises(OSError):
            open_url("https://example.com")

    def test_browser_error(self, monkeypatch) -> None:
        def broken(url: str) -> bool:
            raise webbrowser.Error("boom")

        monkeypatch.setattr(webbrowser, "open", broken)
        with pytest.raises(OSError, match="boom"):
            open_url("https://example.com")


class TestLogging:
    """Tests for setup_logging and the capturing console."""

    @pytest.fixture(autouse=True)
    def _restore_root_logger(self):
        root = logging.getLogger()
        handlers, level = root.handlers[:], root.level
        yield
        for handler in root.handlers[:]:
            if handler not in handlers:
                root.removeHandler(handler)
                handler.close()
        root.setLevel(level)
        capture = logging.getLogger(CONSOLE_LOGGER_NAME)
        for handler in capture.handlers[:]:
            capture.removeHandler(handler)
            handler.close()

    def test_without_log_file(self) -> None:
        assert setup_logging(verbose=False) is None
        stderr_handlers = [h for h in logging.getLogger().handlers if isinstance(h, logging.StreamHandler)]
        assert stderr_handlers[0].level == logging.WARNING

    def test_verbose(self) -> None:
        setup_logging(verbose=True)
        assert logging.getLogger().handlers[0].level == logging.DEBUG
        assert logging.getLogger("httpx").level == logging.DEBUG

    def test_unknown_level_falls_back_to_warning(self) -> None:
        setup_logging(level="chatty")
        assert logging.getLogger().handlers[0].level == logging.WARNING

    def test_console_output_captured_to_log_file(self, tmp_path: Path) -> None:
        """Printed console text ends up in the debug log without markup."""
        log_file = tmp_path / "debug.log"
        debug_logger = setup_logging(verbose=False, log_file=str(log_file))
        assert debug_logger is not None

        output = io.StringIO()
        console = build_console(transcript_logger=debug_logger, file=output, width=80)
        assert isinstance(console, TranscriptConsole)

        console.print("[green]Signed in successfully.[/green]")
        console.print("line one\nline two")
        for handler in debug_logger.handlers:
            handler.flush()

        content = log_file.read_text(encoding="utf-8")
        assert "[CONSOLE] Signed in successfully." in content
        assert "[CONSOLE] line one" in content
        assert "[CONSOLE] line two" in content
        assert "[green]" not in content
        assert "Signed in successfully." in output.getvalue()

    def test_record_buffer_drained_after_each_print(self) -> None:
        """Each print is logged once, with the configured prefix."""
        transcript = logging.getLogger(CONSOLE_LOGGER_NAME)
        transcript.setLevel(logging.DEBUG)
        records: list[str] = []

        class _Collect(logging.Handler):
            def emit(self, record: logging.LogRecord) -> None:
                records.append(record.getMessage())

        transcript.addHandler(_Collect())
        console = TranscriptConsole(transcript, prefix="[OUT] ", file=io.StringIO())

        console.print("first")
        console.print("second")

        assert records == ["[OUT] first", "[OUT] second"]
        assert console.export_text() == ""

    def test_plain_console_without_logger(self) -> None:
        console = build_console(file=io.StringIO())
        assert not isinstance(console, TranscriptConsole)
