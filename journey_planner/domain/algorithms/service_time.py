from __future__ import annotations

import math
from datetime import datetime, timedelta


def seconds_since_midnight(dt: datetime) -> int:
    # Treat provided datetime as local service time.
    return dt.hour * 3600 + dt.minute * 60 + dt.second


def service_datetime_from_seconds(base: datetime, seconds: int) -> datetime:
    """Convert 'seconds since service day midnight' into an absolute datetime.

    Values over 24h roll into the next day. The provided base datetime is
    treated as the service day and keeps its tzinfo.
    """

    day0 = base.replace(hour=0, minute=0, second=0, microsecond=0)
    return day0 + timedelta(seconds=int(seconds))


def parse_service_time(value: int | float | str) -> int:
    """Seconds since midnight from a number or an "HH:MM[:SS]" string.

    Hours may exceed 23 for trips running past midnight.
    """

    if isinstance(value, bool) or (
        isinstance(value, float) and not math.isfinite(value)
    ):
        raise ValueError(f"Invalid service time: {value!r}")
    if isinstance(value, (int, float)):
        seconds = int(value)
    else:
        parts = str(value).strip().split(":")
        if len(parts) not in (2, 3) or not all(p.isdigit() for p in parts):
            raise ValueError(f"Invalid service time: {value!r}")
        hours, minutes, secs = (int(p) for p in (parts + ["0"])[:3])
        if minutes > 59 or secs > 59:
            raise ValueError(f"Invalid service time: {value!r}")
        seconds = hours * 3600 + minutes * 60 + secs
    if seconds < 0:
        raise ValueError(f"Invalid service time: {value!r}")
    return seconds
