"""UTC clock helpers. Timestamps are stored as naive UTC."""
from datetime import date, datetime, time, timedelta, timezone
from typing import Tuple


def utcnow() -> datetime:
     return datetime.now(timezone.utc).replace(tzinfo=None)


def day_bounds(day: date) -> Tuple[datetime, datetime]:
     """Half-open [start, end) range covering one UTC calendar day."""
     start = datetime.combine(day, time.min)
     return start, start + timedelta(days=1)
