"""Shared utilities package for the Podcast Tracker CLI"""

from .browser import open_url
from .debug_console import (
    TranscriptConsole,
    build_console,
    setup_debug_logger,
    setup_logging,
)
from .format import format_expiry, time_until

__all__ = [
    "open_url",
    "TranscriptConsole",
    "build_console",
    "setup_debug_logger",
    "setup_logging",
    "format_expiry",
    "time_until",
]
