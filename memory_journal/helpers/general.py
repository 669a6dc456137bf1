"""
==========================
Helpers - General Operations
==========================

This module provides general helper functions for the application, including directory management,
time utilities and the small numeric helpers shared by the intro scene and the audio controller.

Features:
- `now_ms`: Get the current time in milliseconds since the epoch.
- `monotonic_ms`: Monotonic clock in milliseconds (frame clock source).
- `ensure_dirs`: Ensure all necessary directories exist by creating them if they do not.
- `journal_page_url`: URL of the installed journal page, None when no front end is present.
- `clamp`, `ease_in_out`: numeric helpers.
- `utc_iso_now`: ISO-8601 UTC timestamp with millisecond precision.


Usage:
>>> from memory_journal.helpers.general import now_ms, ensure_dirs, clamp
>>> current_time = now_ms()  # Get current time in milliseconds
>>> ensure_dirs()  # Ensure all necessary directories exist
>>> clamp(1.4, 0, 1)
1

*Author: Sudharshan TK*\n
*Created: 2025-08-24*
"""

import datetime
import math
import os
import time

import memory_journal.helpers.config as cfg


def now_ms() -> int:
    """
    Get the current time in milliseconds since the epoch.

    Returns:
        int: Current time in milliseconds.
    """
    return int(time.time() * 1000)


def monotonic_ms() -> float:
    """
    Monotonic clock in milliseconds, used to timestamp animation frames.
    """
    return time.monotonic() * 1000.0


def utc_iso_now() -> str:
    """
    Current UTC time as an ISO-8601 string with a trailing `Z`,
    e.g. `2025-09-01T10:00:00.000Z`.
    """
    now = datetime.datetime.now(datetime.timezone.utc)
    return now.strftime("%Y-%m-%dT%H:%M:%S.") + f"{now.microsecond // 1000:03d}Z"


def ensure_dirs() -> None:
    """
    Ensure all necessary directories exist by creating them if they do not.

    Returns:
        None
    """
    for d in cfg.MAIN_PATHS:
        os.makedirs(d, exist_ok=True)


def journal_page_url():
    """
    URL of the journal page when a front end is installed in `PUBLIC_DIR`.

    Returns:
        str | None: the page URL, or None when `index.html` is missing.
    """
    if not os.path.isfile(os.path.join(cfg.PUBLIC_DIR, "index.html")):
        return None
    return cfg.API_BASE_URL + "/"


def clamp(value, low, high):
    return min(max(value, low), high)


def ease_in_out(t: float) -> float:
    # quadratic ease in/out over [0, 1]
    return 2 * t * t if t < 0.5 else -1 + (4 - 2 * t) * t


def to_finite_float(value, default: float) -> float:
    """
    Convert `value` to a finite float, returning `default` for None,
    non-numeric input, NaN and infinities.
    """
    try:
        number = float(value)
    except (TypeError, ValueError):
        return default
    return number if math.isfinite(number) else default
