import calendar
from datetime import UTC, datetime


def utcnow() -> datetime:
    """Naive UTC timestamp; all persisted datetimes use this representation."""
    return datetime.now(UTC).replace(tzinfo=None)


def to_epoch_seconds(moment: datetime) -> int:
    return calendar.timegm(moment.utctimetuple())


def from_epoch_seconds(seconds: int) -> datetime:
    return datetime.fromtimestamp(seconds, UTC).replace(tzinfo=None)
