"""Week clock: the season week as a pure function of time and premiere date.

Rosters lock weekly at a fixed weekday and time of day in the league's time
zone (Wednesday 20:00 Eastern by default). Week 0 is the draft week and lasts
until the first lock at or after the premiere date; each lock passed after
that adds one week. Nothing is stored, so every caller computes the same week
for the same instant.
"""

from datetime import date, datetime, time, timedelta, timezone
from typing import Optional
from zoneinfo import ZoneInfo

from .constants import LOCK_TIME, LOCK_TIMEZONE, LOCK_WEEKDAY

DEFAULT_LOCK_TIME = time(*(int(part) for part in LOCK_TIME.split(':')))


def _zone(tz: Optional[str]) -> ZoneInfo:
    return ZoneInfo(tz or LOCK_TIMEZONE)


def _as_aware(moment: Optional[datetime], zone: ZoneInfo) -> datetime:
    """Current time if None; naive datetimes are taken as league-local time."""
    if moment is None:
        return datetime.now(timezone.utc)
    if moment.tzinfo is None:
        return moment.replace(tzinfo=zone)
    return moment


def first_lock_time(
    premiere_date: date,
    lock_weekday: int = LOCK_WEEKDAY,
    lock_time: time = DEFAULT_LOCK_TIME,
    tz: Optional[str] = None,
) -> datetime:
    """
    First roster lock of the season.

    Args:
        premiere_date: Date the season premieres
        lock_weekday: Lock day (Monday=0, default Wednesday)
        lock_time: Lock time of day
        tz: IANA time zone name of the lock schedule

    Returns:
        Timezone-aware datetime of the first lock on or after the premiere date
    """
    days_ahead = (lock_weekday - premiere_date.weekday()) % 7
    lock_date = premiere_date + timedelta(days=days_ahead)
    return datetime.combine(lock_date, lock_time, tzinfo=_zone(tz))


def lock_time_for_week(
    premiere_date: date,
    week: int,
    lock_weekday: int = LOCK_WEEKDAY,
    lock_time: time = DEFAULT_LOCK_TIME,
    tz: Optional[str] = None,
) -> datetime:
    """
    Lock that ends the given week (week 0 ends at the first lock).

    Locks are spaced a calendar week apart in local time, so the wall-clock
    lock time is stable across daylight saving changes.
    """
    first = first_lock_time(premiere_date, lock_weekday, lock_time, tz)
    lock_date = first.date() + timedelta(weeks=week)
    return datetime.combine(lock_date, lock_time, tzinfo=first.tzinfo)


def current_week(
    premiere_date: date,
    now: Optional[datetime] = None,
    lock_weekday: int = LOCK_WEEKDAY,
    lock_time: time = DEFAULT_LOCK_TIME,
    tz: Optional[str] = None,
) -> int:
    """
    Season week at a given instant.

    Args:
        premiere_date: Date the season premieres
        now: Instant to evaluate (default: the current time)
        lock_weekday: Lock day (Monday=0)
        lock_time: Lock time of day
        tz: IANA time zone name of the lock schedule

    Returns:
        0 until the first lock has passed, then the number of locks passed
    """
    zone = _zone(tz)
    moment = _as_aware(now, zone).timestamp()

    first = first_lock_time(premiere_date, lock_weekday, lock_time, tz)
    if moment <= first.timestamp():
        return 0

    def boundary(k: int) -> float:
        return lock_time_for_week(premiere_date, k, lock_weekday, lock_time, tz).timestamp()

    # Estimate from elapsed time, then step to the exact boundary
    k = max(0, int((moment - first.timestamp()) // timedelta(weeks=1).total_seconds()))
    while boundary(k + 1) < moment:
        k += 1
    while k > 0 and boundary(k) >= moment:
        k -= 1
    return k + 1


def next_lock_time(
    premiere_date: date,
    now: Optional[datetime] = None,
    lock_weekday: int = LOCK_WEEKDAY,
    lock_time: time = DEFAULT_LOCK_TIME,
    tz: Optional[str] = None,
) -> datetime:
    """Next roster lock at or after now."""
    week = current_week(premiere_date, now, lock_weekday, lock_time, tz)
    return lock_time_for_week(premiere_date, week, lock_weekday, lock_time, tz)


def time_until_lock(
    premiere_date: date,
    now: Optional[datetime] = None,
    lock_weekday: int = LOCK_WEEKDAY,
    lock_time: time = DEFAULT_LOCK_TIME,
    tz: Optional[str] = None,
) -> timedelta:
    """How long until rosters lock for the current week."""
    moment = _as_aware(now, _zone(tz)).astimezone(timezone.utc)
    lock = next_lock_time(premiere_date, moment, lock_weekday, lock_time, tz)
    return lock.astimezone(timezone.utc) - moment
