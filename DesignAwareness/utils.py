from datetime import datetime, timezone
from typing import Callable

Clock = Callable[[], datetime]


def utc_now() -> datetime:
    return truncate_to_millis(datetime.now(timezone.utc))


def truncate_to_millis(dt: datetime) -> datetime:
    return dt.replace(microsecond=dt.microsecond - dt.microsecond % 1000)


def parse_timestamp(value) -> datetime:
    """
    Accepts an ISO-8601 string or a datetime and returns an aware UTC datetime
    with millisecond precision. Naive values are taken to be UTC already.
    Raises ValueError for anything else, so it can sit inside a pydantic validator.
    """
    if isinstance(value, datetime):
        dt = value
    elif isinstance(value, str):
        try:
            dt = datetime.fromisoformat(value.replace('Z', '+00:00'))
        except ValueError as exc:
            raise ValueError(f"'{value}' is not an ISO-8601 timestamp") from exc
    else:
        raise ValueError(f"expected an ISO-8601 timestamp string, got {type(value).__name__}")

    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return truncate_to_millis(dt.astimezone(timezone.utc))


def format_timestamp(dt: datetime) -> str:
    """ISO-8601 in UTC with milliseconds and a trailing Z, e.g. 2021-06-21T00:00:00.000Z."""
    dt = parse_timestamp(dt)
    return dt.strftime("%Y-%m-%dT%H:%M:%S") + f".{dt.microsecond // 1000:03d}Z"
