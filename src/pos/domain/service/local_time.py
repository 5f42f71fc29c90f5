"""Domain service: local calendar and reporting windows.

Sales are recorded with their true UTC instant.  The deployment's fixed UTC
offset is applied only here, when an instant is turned into a day string,
a time-of-day string or a chart bucket.  Nothing else in the code base
shifts instants.

Two window modes exist:

* local (default): an instant belongs to a window when its *locally
  shifted* day string lies between the window's start and end day strings
  (lexicographic comparison, independent of time of day);
* absolute: the window is ``[start T00:00:00.000Z, end T23:59:59.999Z]``
  and the unshifted instant is compared directly.
"""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass
from datetime import date, datetime, time, timedelta, timezone
from enum import Enum

from pos.domain.exceptions import ValidationError

DAY_FORMAT = "%Y-%m-%d"
TIME_FORMAT = "%H:%M:%S"
END_OF_DAY = time(23, 59, 59, 999000)


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class GroupBy(Enum):
    DAY = "day"
    WEEK = "week"
    MONTH = "month"

    @property
    def key_format(self) -> str:
        # %U: week of year, Sunday as first day, 00-53
        return {"day": "%Y-%m-%d", "week": "%Y-%U", "month": "%Y-%m"}[self.value]

    @staticmethod
    def parse(raw: str | None) -> GroupBy:
        if raw is None:
            return GroupBy.DAY
        try:
            return GroupBy(raw.strip().lower())
        except ValueError:
            raise ValidationError(
                f"Invalid groupBy '{raw}'. Expected one of: day, week, month"
            ) from None


@dataclass(frozen=True)
class LocalCalendar:
    """The operator's calendar: UTC shifted by a fixed offset."""

    utc_offset: timedelta = timedelta(0)

    def __post_init__(self) -> None:
        if abs(self.utc_offset) >= timedelta(hours=24):
            raise ValidationError(f"UTC offset out of range: {self.utc_offset}")

    @property
    def tz(self) -> timezone:
        return timezone(self.utc_offset)

    def to_local(self, instant: datetime) -> datetime:
        _require_aware(instant)
        return instant.astimezone(self.tz)

    def local_day(self, instant: datetime) -> str:
        return self.to_local(instant).strftime(DAY_FORMAT)

    def local_time(self, instant: datetime) -> str:
        return self.to_local(instant).strftime(TIME_FORMAT)

    @staticmethod
    def utc_day(instant: datetime) -> str:
        _require_aware(instant)
        return instant.astimezone(timezone.utc).strftime(DAY_FORMAT)

    def view(self, instant: datetime, use_local: bool) -> datetime:
        """The instant as seen by the selected mode."""
        if use_local:
            return self.to_local(instant)
        _require_aware(instant)
        return instant.astimezone(timezone.utc)

    def day_of(self, instant: datetime, use_local: bool = True) -> str:
        return self.view(instant, use_local).strftime(DAY_FORMAT)

    def bucket_key(self, instant: datetime, group_by: GroupBy, use_local: bool = True) -> str:
        return self.view(instant, use_local).strftime(group_by.key_format)

    def today(self, now: datetime, use_local: bool = True) -> date:
        return self.view(now, use_local).date()


@dataclass(frozen=True)
class DateWindow:
    """An inclusive range of calendar days plus the mode used to match it."""

    start: date
    end: date
    use_local: bool = True

    def __post_init__(self) -> None:
        if self.start > self.end:
            raise ValidationError(
                f"startDate {self.start_day} is after endDate {self.end_day}"
            )

    # --- Factories ------------------------------------------------------------

    @staticmethod
    def parse(start: str | None, end: str | None, use_local: bool = True) -> DateWindow:
        """Build a window from two required day strings."""
        if not start or not end:
            raise ValidationError("startDate and endDate are required")
        return DateWindow(parse_day(start), parse_day(end), use_local)

    @staticmethod
    def optional(
        start: str | None, end: str | None, use_local: bool = True
    ) -> DateWindow | None:
        """Like ``parse`` but returns None when neither bound is given."""
        if not start and not end:
            return None
        return DateWindow.parse(start, end, use_local)

    @staticmethod
    def trailing(days: int, today: date, use_local: bool = True) -> DateWindow:
        """The *days* days before *today*, plus today itself."""
        return DateWindow(today - timedelta(days=days), today, use_local)

    # --- Queries --------------------------------------------------------------

    @property
    def start_day(self) -> str:
        return self.start.strftime(DAY_FORMAT)

    @property
    def end_day(self) -> str:
        return self.end.strftime(DAY_FORMAT)

    def absolute_bounds(self) -> tuple[datetime, datetime]:
        return (
            datetime.combine(self.start, time.min, tzinfo=timezone.utc),
            datetime.combine(self.end, END_OF_DAY, tzinfo=timezone.utc),
        )

    def contains(self, instant: datetime, calendar: LocalCalendar) -> bool:
        if self.use_local:
            return self.start_day <= calendar.local_day(instant) <= self.end_day
        lower, upper = self.absolute_bounds()
        return lower <= instant <= upper

    def days(self) -> Iterator[date]:
        current = self.start
        while current <= self.end:
            yield current
            current += timedelta(days=1)

    def bucket_keys(self, group_by: GroupBy) -> list[str]:
        """Every bucket key touched by the window, ascending."""
        keys: list[str] = []
        for day in self.days():
            key = day.strftime(group_by.key_format)
            if not keys or keys[-1] != key:
                keys.append(key)
        return keys


def parse_day(raw: str) -> date:
    try:
        return datetime.strptime(raw.strip(), DAY_FORMAT).date()
    except ValueError:
        raise ValidationError(f"Invalid date '{raw}'. Expected YYYY-MM-DD") from None


def _require_aware(instant: datetime) -> None:
    if instant.tzinfo is None or instant.utcoffset() is None:
        raise ValidationError("Instant must be timezone-aware")
