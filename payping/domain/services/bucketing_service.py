"""Classification of reminders into dashboard buckets.

Everything here is a pure function of ``now`` and the reminders passed in.
Day and week boundaries are taken in ``now``'s timezone:

* an aware ``remind_at`` is converted into that timezone;
* a naive ``remind_at`` is read as wall-clock time in that timezone;
* a naive ``now`` means system local time.

Overdue works at day granularity (only reminders from a prior day), while
"this week" works at instant granularity (only reminders still ahead of
``now``). A reminder due earlier today therefore stays in DUE_TODAY.
"""
from __future__ import annotations

from collections.abc import Iterable, Mapping
from datetime import datetime, timedelta
from enum import Enum

from payping.domain.entities.reminder import ReminderEntity, ReminderStatus

SUNDAY = 6


class Bucket(str, Enum):
    DUE_TODAY = "due_today"
    DUE_THIS_WEEK = "due_this_week"
    OVERDUE = "overdue"
    DONE = "done"
    UPCOMING = "upcoming"  # pending, after this week; only shown unfiltered


class ReminderView(str, Enum):
    ALL = "all"
    TODAY = "today"
    WEEK = "week"
    OVERDUE = "overdue"
    DONE = "done"


_VIEW_BUCKET: dict[ReminderView, Bucket] = {
    ReminderView.TODAY: Bucket.DUE_TODAY,
    ReminderView.WEEK: Bucket.DUE_THIS_WEEK,
    ReminderView.OVERDUE: Bucket.OVERDUE,
    ReminderView.DONE: Bucket.DONE,
}


def start_of_day(now: datetime) -> datetime:
    return now.replace(hour=0, minute=0, second=0, microsecond=0)


def end_of_day(now: datetime) -> datetime:
    return start_of_day(now) + timedelta(days=1) - timedelta(microseconds=1)


def start_of_week(now: datetime, week_starts_on: int = SUNDAY) -> datetime:
    offset = (now.weekday() - week_starts_on) % 7
    return start_of_day(now) - timedelta(days=offset)


def end_of_week(now: datetime, week_starts_on: int = SUNDAY) -> datetime:
    return start_of_week(now, week_starts_on) + timedelta(days=7) - timedelta(microseconds=1)


def _in_zone_of(moment: datetime, now: datetime) -> datetime:
    if now.tzinfo is None:
        if moment.tzinfo is None:
            return moment
        return moment.astimezone().replace(tzinfo=None)
    if moment.tzinfo is None:
        return moment.replace(tzinfo=now.tzinfo)
    return moment.astimezone(now.tzinfo)


def classify(reminder: ReminderEntity, now: datetime, week_starts_on: int = SUNDAY) -> Bucket:
    if reminder.status == ReminderStatus.DONE:
        return Bucket.DONE

    remind_at = _in_zone_of(reminder.remind_at, now)
    day_start = start_of_day(now)
    if remind_at < day_start:
        return Bucket.OVERDUE
    if remind_at <= end_of_day(now):
        return Bucket.DUE_TODAY
    # Past end of today, so strictly after now as well
    if remind_at <= end_of_week(now, week_starts_on):
        return Bucket.DUE_THIS_WEEK
    return Bucket.UPCOMING


def bucket_reminders(
    reminders: Iterable[ReminderEntity],
    now: datetime,
    week_starts_on: int = SUNDAY,
) -> dict[Bucket, list[ReminderEntity]]:
    """Partition reminders into every bucket, keeping input order inside each."""
    buckets: dict[Bucket, list[ReminderEntity]] = {bucket: [] for bucket in Bucket}
    for reminder in reminders:
        buckets[classify(reminder, now, week_starts_on)].append(reminder)
    return buckets


def _matches(reminder: ReminderEntity, query: str, client_names: Mapping[str, str]) -> bool:
    name = client_names.get(reminder.client_id, "")
    return query in name.lower() or query in reminder.message.lower()


def filter_reminders(
    reminders: Iterable[ReminderEntity],
    now: datetime,
    view: ReminderView = ReminderView.ALL,
    search: str | None = None,
    client_names: Mapping[str, str] | None = None,
    week_starts_on: int = SUNDAY,
) -> list[ReminderEntity]:
    """Reminders for one list tab, optionally narrowed by a search on client name or message."""
    items = list(reminders)
    query = (search or "").strip().lower()
    if query:
        names = client_names or {}
        items = [r for r in items if _matches(r, query, names)]
    if view == ReminderView.ALL:
        return items
    wanted = _VIEW_BUCKET[view]
    return [r for r in items if classify(r, now, week_starts_on) == wanted]
