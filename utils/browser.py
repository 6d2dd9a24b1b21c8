"""Open URLs in the user's default browser"""

import logging
import webbrowser


logger = logging.getLogger(__name__)


def open_url(url: str) -> None:
    """
    Open a URL in the default browser.

    Raises:
        OSError: If no browser could be launched
    """
    try:
        opened = webbrowser.open(url)
    except webbrowser.Error as e:
        raise OSError(f"Could not open browser: {e}") from e

    if not opened:
        raise OSError("Could not open browser: no runnable browser found")
    logger.debug("Browser opened successfully")
