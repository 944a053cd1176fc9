"""
Millisecond timestamps used throughout the registry
"""

import time
from datetime import datetime, timezone


def now_ms() -> int:
    """Current time as integer milliseconds since the Unix epoch"""
    return time.time_ns() // 1_000_000


def to_iso(timestamp_ms: int) -> str:
    """
    Format an epoch-milliseconds timestamp as an ISO-8601 UTC string

    Args:
        timestamp_ms: Milliseconds since the Unix epoch

    Returns:
        String such as ``2024-01-01T00:00:00.000Z``
    """
    seconds, millis = divmod(timestamp_ms, 1000)
    moment = datetime.fromtimestamp(seconds, tz=timezone.utc).replace(microsecond=millis * 1000)
    return moment.strftime("%Y-%m-%dT%H:%M:%S.") + f"{millis:03d}Z"
