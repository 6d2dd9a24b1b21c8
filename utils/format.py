"""Display formatting helpers for the CLI"""

import datetime
import math
import time
from typing import Optional


def format_expiry(epoch_ms: Optional[float]) -> str:
    """Local date/time of an epoch-millisecond timestamp, "-" if unusable"""
    if (
        not isinstance(epoch_ms, (int, float))
        or isinstance(epoch_ms, bool)
        or not math.isfinite(epoch_ms)
        or epoch_ms <= 0
    ):
        return "-"
    try:
        moment = datetime.datetime.fromtimestamp(epoch_ms / 1000)
    except (OverflowError, OSError, ValueError):
        return "-"
    return moment.strftime("%Y-%m-%d %H:%M:%S")


def time_until(epoch_ms: float, now_ms: Optional[float] = None) -> str:
    """Human readable time remaining, e.g. "1h 5m", or "expired" """
    if now_ms is None:
        now_ms = time.time() * 1000

    remaining = int((epoch_ms - now_ms) // 1000)
    if remaining <= 0:
        return "expired"

    hours = remaining // 3600
    minutes = (remaining % 3600) // 60
    days = hours // 24

    if days > 0:
        return f"{days}d {hours % 24}h"
    elif hours > 0:
        return f"{hours}h {minutes}m"
    return f"{minutes}m"
