from datetime import datetime, timedelta, timezone
from zoneinfo import ZoneInfo

from payping.domain.entities.reminder import (
    ReminderChannel,
    ReminderEntity,
    ReminderKind,
    ReminderStatus,
)
from payping.domain.services.bucketing_service import (
    Bucket,
    ReminderView,
    bucket_reminders,
    classify,
    end_of_week,
    filter_reminders,
    start_of_week,
)

# Monday
NOW = datetime(2024, 1, 15, 10, 0, 0)


def make_reminder(rid, remind_at, status=ReminderStatus.PENDING, client_id="c1", message="Hi"):
    return ReminderEntity(
        id=rid,
        user_id="u1",
        client_id=client_id,
        remind_at=remind_at,
        kind=ReminderKind.FOLLOWUP,
        channel=ReminderChannel.WHATSAPP,
        message=message,
        status=status,
        created_at=datetime(2024, 1, 1),
        done_at=datetime(2024, 1, 2) if status == ReminderStatus.DONE else None,
    )


def test_earlier_today_is_due_today_not_overdue():
    r = make_reminder("r1", datetime(2024, 1, 15, 8, 0, 0))
    assert classify(r, NOW) == Bucket.DUE_TODAY


def test_yesterday_is_overdue():
    r = make_reminder("r1", datetime(2024, 1, 14, 23, 0, 0))
    assert classify(r, NOW) == Bucket.OVERDUE


def test_day_boundaries():
    assert classify(make_reminder("a", datetime(2024, 1, 15, 0, 0, 0)), NOW) == Bucket.DUE_TODAY
    assert classify(make_reminder("b", datetime(2024, 1, 15, 23, 59, 59)), NOW) == Bucket.DUE_TODAY
    assert classify(make_reminder("c", datetime(2024, 1, 16, 0, 0, 0)), NOW) == Bucket.DUE_THIS_WEEK


def test_week_ends_saturday_by_default():
    assert start_of_week(NOW) == datetime(2024, 1, 14)
    assert classify(make_reminder("a", datetime(2024, 1, 20, 23, 0)), NOW) == Bucket.DUE_THIS_WEEK
    assert classify(make_reminder("b", datetime(2024, 1, 21, 9, 0)), NOW) == Bucket.UPCOMING


def test_monday_week_start():
    assert start_of_week(NOW, week_starts_on=0) == datetime(2024, 1, 15)
    assert end_of_week(NOW, week_starts_on=0).date() == datetime(2024, 1, 21).date()
    r = make_reminder("a", datetime(2024, 1, 21, 9, 0))
    assert classify(r, NOW, week_starts_on=0) == Bucket.DUE_THIS_WEEK


def test_done_wins_over_time():
    r = make_reminder("a", datetime(2024, 1, 1), status=ReminderStatus.DONE)
    assert classify(r, NOW) == Bucket.DONE


def test_aware_times_follow_now_timezone():
    nairobi = ZoneInfo("Africa/Nairobi")  # UTC+3
    now = datetime(2024, 1, 15, 1, 0, tzinfo=nairobi)
    # 20:30 UTC on the 14th is 23:30 on the 14th in Nairobi, where it is already the 15th
    r = make_reminder("a", datetime(2024, 1, 14, 20, 30, tzinfo=timezone.utc))
    assert classify(r, now) == Bucket.OVERDUE
    assert classify(r, now.astimezone(timezone.utc)) == Bucket.DUE_TODAY


def test_bucket_reminders_has_every_bucket_and_keeps_order():
    items = [
        make_reminder("late", NOW - timedelta(days=2)),
        make_reminder("today1", NOW - timedelta(hours=1)),
        make_reminder("today2", NOW + timedelta(hours=1)),
        make_reminder("done", NOW, status=ReminderStatus.DONE),
    ]
    buckets = bucket_reminders(items, NOW)
    assert set(buckets) == set(Bucket)
    assert [r.id for r in buckets[Bucket.DUE_TODAY]] == ["today1", "today2"]
    assert [r.id for r in buckets[Bucket.OVERDUE]] == ["late"]
    assert [r.id for r in buckets[Bucket.DONE]] == ["done"]
    assert buckets[Bucket.UPCOMING] == []


def test_bucketing_is_idempotent():
    items = [make_reminder(str(i), NOW + timedelta(hours=13 * i - 40)) for i in range(10)]
    first = bucket_reminders(items, NOW)
    second = bucket_reminders(items, NOW)
    assert first == second


def test_filter_by_view_and_search():
    items = [
        make_reminder("a", NOW, client_id="c1", message="Invoice #12"),
        make_reminder("b", NOW + timedelta(days=2), client_id="c2", message="Proposal"),
        make_reminder("c", NOW - timedelta(days=3), client_id="c2", message="Invoice #9"),
    ]
    names = {"c1": "Sarah Johnson", "c2": "Mike Wilson"}

    assert [r.id for r in filter_reminders(items, NOW, ReminderView.TODAY)] == ["a"]
    assert [r.id for r in filter_reminders(items, NOW, ReminderView.WEEK)] == ["b"]
    assert [r.id for r in filter_reminders(items, NOW, ReminderView.OVERDUE)] == ["c"]
    assert [r.id for r in filter_reminders(items, NOW, search="invoice")] == ["a", "c"]
    assert [r.id for r in filter_reminders(items, NOW, search="MIKE", client_names=names)] == ["b", "c"]
    assert filter_reminders(items, NOW, ReminderView.TODAY, search="mike", client_names=names) == []
