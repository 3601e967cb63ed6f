"""Timezone utilities for displaying stored UTC timestamps in restaurant local time"""
from datetime import datetime
import pytz


def convert_to_local(dt: datetime | None, tz_name: str = "UTC") -> datetime | None:
    """
    Convert UTC naive datetime to the display timezone.

    Args:
        dt: Naive datetime assumed to be in UTC, or None
        tz_name: pytz zone name, e.g. 'Europe/Paris'

    Returns:
        Naive datetime in the display timezone, or None if input is None
    """
    if dt is None:
        return None
    if dt.tzinfo is None:
        # Assume it's UTC and convert to the display zone
        utc_dt = pytz.utc.localize(dt)
        local_dt = utc_dt.astimezone(pytz.timezone(tz_name))
        # Return as naive local datetime
        return local_dt.replace(tzinfo=None)
    return dt
