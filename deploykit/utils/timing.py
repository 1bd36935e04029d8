"""Time helpers."""

from datetime import datetime
from zoneinfo import ZoneInfo

EASTERN = ZoneInfo("America/New_York")


def eastern_timestamp(now: datetime | None = None) -> str:
    """Format a moment the way operators read it, e.g. ``2024-05-01 3:07:09 PM``."""
    moment = (now or datetime.now(EASTERN)).astimezone(EASTERN)
    hour = moment.hour % 12 or 12
    return f"{moment:%Y-%m-%d} {hour}:{moment:%M:%S %p}"
