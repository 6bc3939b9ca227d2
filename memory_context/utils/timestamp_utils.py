"""
Timestamp utilities for consistent time handling across the system.
"""

import time
from datetime import datetime, timezone
from typing import Optional


def to_millis(timestamp: Optional[float] = None) -> int:
    """Convert timestamp to epoch milliseconds.

    Args:
        timestamp: Unix timestamp in seconds (optional, uses current time if None)

    Returns:
        Milliseconds since the epoch
    """
    if timestamp is None:
        timestamp = time.time()
    return int(timestamp * 1000)


def utc_isoformat(timestamp: Optional[float] = None) -> str:
    """Convert timestamp to an ISO-8601 UTC string.

    Args:
        timestamp: Unix timestamp in seconds (optional, uses current time if None)

    Returns:
        ISO-8601 string with a UTC offset
    """
    if timestamp is None:
        timestamp = time.time()
    return datetime.fromtimestamp(timestamp, tz=timezone.utc).isoformat()
