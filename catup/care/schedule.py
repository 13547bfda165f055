"""旧タスクの期限計算と時間帯バケット分け。"""
import calendar
from datetime import datetime, timedelta
from enum import Enum

from catup.household.models import Cadence, DueTime, Task


class Bucket(str, Enum):
    OVERDUE = "overdue"
    NOW = "now"
    TODAY = "today"
    WEEK = "week"
    MONTH = "month"
    LATER = "later"
    DONE = "done"


NOW_WINDOW = timedelta(hours=3)
WEEK_WINDOW = timedelta(days=7)
MONTH_WINDOW = timedelta(days=31)


def _end_of_day(now: datetime) -> datetime:
    return now.replace(hour=23, minute=59, second=59, microsecond=999000)


def _align(due: datetime, now: datetime) -> datetime:
    # 片方だけタイムゾーンを持つときは now に合わせる
    if due.tzinfo is None and now.tzinfo is not None:
        return due.replace(tzinfo=now.tzinfo)
    if due.tzinfo is not None and now.tzinfo is None:
        return due.replace(tzinfo=None)
    if due.tzinfo is not None:
        return due.astimezone(now.tzinfo)
    return due


def next_due_at(task: Task, now: datetime) -> datetime:
    """タスクの次の期限。due_at があればそれを優先する。"""
    if task.due_at is not None:
        return _align(task.due_at, now)
    if task.cadence == Cadence.DAILY:
        if task.due == DueTime.MORNING:
            return now.replace(hour=9, minute=0, second=0, microsecond=0)
        if task.due == DueTime.EVENING:
            return now.replace(hour=20, minute=0, second=0, microsecond=0)
        return _end_of_day(now)
    if task.cadence == Cadence.WEEKLY:
        # 次の日曜（今日が日曜なら今日）の 18 時
        days_ahead = (6 - now.weekday()) % 7
        sunday = now + timedelta(days=days_ahead)
        return sunday.replace(hour=18, minute=0, second=0, microsecond=0)
    if task.cadence == Cadence.MONTHLY:
        last_day = calendar.monthrange(now.year, now.month)[1]
        return now.replace(day=last_day, hour=20, minute=0, second=0, microsecond=0)
    return _end_of_day(now)


def bucket_for(task: Task, now: datetime) -> Bucket:
    """期限までの残り時間でタスクを分類する。"""
    if task.done:
        return Bucket.DONE
    due = next_due_at(task, now)
    diff = due - now
    if diff < timedelta(0):
        return Bucket.OVERDUE
    if diff <= NOW_WINDOW:
        return Bucket.NOW
    if due.date() == now.date():
        return Bucket.TODAY
    if diff <= WEEK_WINDOW:
        return Bucket.WEEK
    if diff <= MONTH_WINDOW:
        return Bucket.MONTH
    return Bucket.LATER
