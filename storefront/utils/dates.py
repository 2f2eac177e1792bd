"""
Calendar date helpers.

Schedule dates ("YYYY-MM-DD") carry no time of day. They are always read as
local midnight; nothing in the project parses them as UTC.
"""
from datetime import datetime, date, time
from typing import Optional, Union

DATE_FORMAT = '%Y-%m-%d'

DateLike = Union[str, date, datetime]


class InvalidDateError(ValueError):
    """Raised when a schedule date cannot be parsed"""
    pass


def parse_local_date(value: DateLike) -> date:
    """Normalize a date, datetime or YYYY-MM-DD string to a calendar date"""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        text = value.strip()
        try:
            parsed = datetime.strptime(text[:10], DATE_FORMAT).date()
            if len(text) > 10:
                # Only a full ISO timestamp may follow the date
                if text[10] not in ('T', ' '):
                    raise ValueError(text)
                stamp = text[:10] + 'T' + text[11:]
                if stamp.endswith('Z'):
                    stamp = stamp[:-1] + '+00:00'
                datetime.fromisoformat(stamp)
        except ValueError:
            raise InvalidDateError(f"Invalid date '{value}'. Use YYYY-MM-DD")
        return parsed
    raise InvalidDateError(f"Unsupported date value: {value!r}")


def local_midnight(value: DateLike) -> datetime:
    return datetime.combine(parse_local_date(value), time.min)


def hours_until(value: DateLike, now: Optional[datetime] = None) -> float:
    """Hours from ``now`` (local, naive) until local midnight of ``value``"""
    if now is None:
        now = datetime.now()
    if now.tzinfo is not None:
        # Compare on the local wall clock
        now = now.astimezone().replace(tzinfo=None)
    return (local_midnight(value) - now).total_seconds() / 3600


def to_local_iso(value: Union[date, datetime]) -> str:
    if isinstance(value, datetime):
        value = value.date()
    return value.strftime(DATE_FORMAT)
