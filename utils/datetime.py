"""Time utilities with timezone-aware defaults."""

from datetime import datetime, timezone


def utc_now() -> datetime:
    """Return current UTC time with tzinfo."""
    return datetime.now(timezone.utc)


def start_of_month(moment: datetime) -> datetime:
    """First instant of the UTC calendar month containing ``moment``."""
    moment = moment.astimezone(timezone.utc)
    return moment.replace(day=1, hour=0, minute=0, second=0, microsecond=0)


def start_of_next_month(moment: datetime) -> datetime:
    first = start_of_month(moment)
    if first.month == 12:
        return first.replace(year=first.year + 1, month=1)
    return first.replace(month=first.month + 1)


def month_key(moment: datetime) -> str:
    """``YYYY-MM`` label of the UTC month containing ``moment``."""
    return start_of_month(moment).strftime("%Y-%m")


def next_minute_epoch(moment: datetime) -> int:
    """Unix timestamp of the next whole-minute boundary after ``moment``."""
    return (int(moment.timestamp()) // 60 + 1) * 60
