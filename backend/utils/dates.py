from datetime import datetime
from typing import Optional


def as_local(value: Optional[datetime]) -> datetime:
    """Dates are stored naive in server local time; aware input is converted first."""
    if value is None:
        return datetime.now()
    if value.tzinfo is not None:
        return value.astimezone().replace(tzinfo=None)
    return value
