"""
Reporting-period arithmetic for async projects.

Periods are timezone-agnostic and always expressed in UTC. A period value is
interpreted by truncation: ``2021-06-23T01:33:40.908Z`` means June 23, 2021.
For weekly reporting the date is then walked back until its weekday matches
the project's alignment, never forward.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta
from enum import IntEnum
from typing import Literal, Tuple, Union

from DesignAwareness.utils import parse_timestamp

ReportingPeriod = Literal["day", "week"]


class Weekday(IntEnum):
    """Same numbering as JavaScript's getUTCDay()."""
    SUNDAY = 0
    MONDAY = 1
    TUESDAY = 2
    WEDNESDAY = 3
    THURSDAY = 4
    FRIDAY = 5
    SATURDAY = 6


def utc_weekday(dt: datetime) -> Weekday:
    # datetime.weekday() counts from Monday = 0
    return Weekday((dt.weekday() + 1) % 7)


def start_of_day(period: datetime) -> datetime:
    return parse_timestamp(period).replace(hour=0, minute=0, second=0, microsecond=0)


@dataclass(frozen=True)
class Daily:
    length = timedelta(days=1)

    def normalize(self, period: datetime) -> datetime:
        return start_of_day(period)


@dataclass(frozen=True)
class Weekly:
    alignment: Weekday = Weekday.SUNDAY
    length = timedelta(days=7)

    def normalize(self, period: datetime) -> datetime:
        day = start_of_day(period)
        days_back = (utc_weekday(day) - self.alignment) % 7
        return day - timedelta(days=days_back)


PeriodConfig = Union[Daily, Weekly]


def period_config(reporting_period: str, period_alignment: int = Weekday.SUNDAY) -> PeriodConfig:
    """Build the period variant from the two flattened wire fields."""
    if reporting_period == "day":
        return Daily()
    if reporting_period == "week":
        try:
            alignment = Weekday(period_alignment)
        except ValueError as exc:
            raise ValueError(f"periodAlignment must be a weekday 0-6, got {period_alignment!r}") from exc
        return Weekly(alignment)
    raise ValueError(f"reportingPeriod must be 'day' or 'week', got {reporting_period!r}")


def normalize(period: datetime, reporting_period: str,
              period_alignment: int = Weekday.SUNDAY) -> datetime:
    return period_config(reporting_period, period_alignment).normalize(period)


def is_normalized(period: datetime, config: PeriodConfig) -> bool:
    period = parse_timestamp(period)
    return config.normalize(period) == period


def period_range(period: datetime, config: PeriodConfig) -> Tuple[datetime, datetime]:
    """Half-open [start, end) interval covered by the period containing ``period``."""
    start = config.normalize(period)
    return start, start + config.length
