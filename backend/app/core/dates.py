from datetime import datetime, date, time, timezone
from typing import Optional, Union


def to_utc_instant(value: Optional[Union[datetime, date]]) -> Optional[datetime]:
    """
    Normalize an incoming date/datetime to a timezone-aware UTC instant.

    Naive datetimes are taken to be UTC already, bare dates become midnight UTC,
    and None stays None (an absent date is never replaced by "now").
    """
    if value is None:
        return None
    if not isinstance(value, datetime):
        value = datetime.combine(value, time.min)
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)
