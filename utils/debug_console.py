"""Logging setup and a Rich console that mirrors its output into the log.

The CLI talks to the user through Rich; library code logs through the
standard logging module. In verbose mode both end up in the same debug log
file so a failed sign-in can be reconstructed afterwards.
"""

import logging
import sys
from typing import Optional

from rich.console import Console as RichConsole


LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
CONSOLE_LOGGER_NAME = "podcast_tracker.console"


class TranscriptConsole(RichConsole):
    """Rich Console that records what it prints and logs it line by line.

    Rich's own recording buffer does the rendering, so the log gets exactly
    the text the user saw, minus styles.
    """

    def __init__(self, transcript_logger: logging.Logger, prefix: str = "[CONSOLE] ", **kwargs):
        kwargs["record"] = True
        super().__init__(**kwargs)
        self.transcript_logger = transcript_logger
        self.prefix = prefix

    def print(self, *objects, **kwargs):
        super().print(*objects, **kwargs)

        # Always drain the record buffer, even when nothing is logged
        text = self.export_text(clear=True).rstrip()
        if not text or not self.transcript_logger.isEnabledFor(logging.DEBUG):
            return
        for line in text.splitlines():
            self.transcript_logger.debug(f"{self.prefix}{line.rstrip()}")


def build_console(transcript_logger: Optional[logging.Logger] = None, **kwargs) -> RichConsole:
    """Plain console, or a TranscriptConsole when a logger is given"""
    if transcript_logger is None:
        return RichConsole(**kwargs)
    return TranscriptConsole(transcript_logger, **kwargs)


def setup_logging(verbose: bool = False,
                  log_file: Optional[str] = None,
                  level: str = "warning") -> Optional[logging.Logger]:
    """
    Configure the root logger for a CLI run.

    Args:
        verbose: Log DEBUG to stderr instead of ``level``
        log_file: Optional path of an append-mode debug log
        level: Default stderr level name when not verbose

    Returns:
        The console-capture logger when a log file is configured, else None
    """
    root_logger = logging.getLogger()
    root_logger.setLevel(logging.DEBUG)

    # Clear existing handlers to avoid duplicates
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    formatter = logging.Formatter(LOG_FORMAT)

    stderr_handler = logging.StreamHandler(sys.stderr)
    stderr_level = logging.DEBUG if verbose else logging.getLevelName(level.upper())
    if not isinstance(stderr_level, int):
        stderr_level = logging.WARNING
    stderr_handler.setLevel(stderr_level)
    stderr_handler.setFormatter(formatter)
    root_logger.addHandler(stderr_handler)

    # aiohttp/httpx are chatty at DEBUG; keep them at INFO unless asked
    for noisy in ("aiohttp", "httpx", "httpcore", "asyncio"):
        logging.getLogger(noisy).setLevel(logging.DEBUG if verbose else logging.INFO)

    if not log_file:
        return None

    file_handler = logging.FileHandler(log_file, mode='a', encoding='utf-8')
    file_handler.setLevel(logging.DEBUG)
    file_handler.setFormatter(formatter)
    root_logger.addHandler(file_handler)

    return setup_debug_logger(log_file)


def setup_debug_logger(log_file: str) -> logging.Logger:
    """
    Set up a dedicated logger for captured console output.

    Args:
        log_file: Path to debug log file

    Returns:
        Configured logger instance
    """
    logger = logging.getLogger(CONSOLE_LOGGER_NAME)
    logger.setLevel(logging.DEBUG)

    for handler in logger.handlers[:]:
        logger.removeHandler(handler)

    file_handler = logging.FileHandler(log_file, mode='a', encoding='utf-8')
    file_handler.setLevel(logging.DEBUG)
    file_handler.setFormatter(logging.Formatter('%(asctime)s - %(message)s'))
    logger.addHandler(file_handler)

    # Prevent propagation to avoid duplicate logs
    logger.propagate = False

    return logger
