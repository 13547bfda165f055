"""旧タスクのバケット分けのテスト。"""
from datetime import datetime, timedelta

from catup.care.schedule import Bucket, bucket_for, next_due_at
from catup.household.models import Task

# 2026-10-14（水）朝 8 時
WEDNESDAY = datetime(2026, 10, 14, 8, 0)


def test_done_task() -> None:
    assert bucket_for(Task(id="t", title="x", done=True), WEDNESDAY) == Bucket.DONE


def test_daily_buckets() -> None:
    assert bucket_for(Task(id="t", title="x", due="morning"), WEDNESDAY) == Bucket.NOW
    assert bucket_for(Task(id="t", title="x", due="morning"), WEDNESDAY.replace(hour=10)) == Bucket.OVERDUE
    assert bucket_for(Task(id="t", title="x", due="evening"), WEDNESDAY) == Bucket.TODAY
    assert bucket_for(Task(id="t", title="x", due="evening"), WEDNESDAY.replace(hour=18)) == Bucket.NOW


def test_weekly_due_is_next_sunday_evening() -> None:
    task = Task(id="t", title="x", cadence="weekly")
    assert next_due_at(task, WEDNESDAY) == datetime(2026, 10, 18, 18, 0)
    assert bucket_for(task, WEDNESDAY) == Bucket.WEEK
    sunday_morning = datetime(2026, 10, 18, 8, 0)
    assert next_due_at(task, sunday_morning) == datetime(2026, 10, 18, 18, 0)
    assert bucket_for(task, sunday_morning) == Bucket.TODAY


def test_monthly_due_is_end_of_month() -> None:
    task = Task(id="t", title="x", cadence="monthly")
    assert next_due_at(task, WEDNESDAY) == datetime(2026, 10, 31, 20, 0)
    assert bucket_for(task, WEDNESDAY) == Bucket.MONTH


def test_explicit_due_at_wins() -> None:
    later = Task(id="t", title="x", due_at=WEDNESDAY + timedelta(days=40))
    assert bucket_for(later, WEDNESDAY) == Bucket.LATER
    soon = Task(id="t", title="x", cadence="monthly", due_at=WEDNESDAY + timedelta(hours=2))
    assert bucket_for(soon, WEDNESDAY) == Bucket.NOW
