"""Debug console setup for CLI"""

import logging
from typing import Optional

from rich.console import Console

from utils.debug_console import build_console, setup_logging


logger = logging.getLogger(__name__)


def setup_debug_console(verbose: bool, log_file: Optional[str], log_level: str = "warning") -> Console:
    """
    Configure logging and return the console for this run

    Args:
        verbose: Whether verbose (DEBUG) logging is enabled
        log_file: Optional append-mode debug log path
        log_level: stderr log level when not verbose

    Returns:
        Console instance, mirrored into the debug log when one is set
    """
    debug_logger = setup_logging(verbose=verbose, log_file=log_file, level=log_level)

    console = build_console(transcript_logger=debug_logger)

    if debug_logger:
        debug_logger.debug("[CLI] ===== CLI SESSION STARTED =====")
        debug_logger.debug(f"[CLI] Verbose: {verbose}")
        logger.info(f"Debug logging enabled - appending to {log_file}")

    return console
