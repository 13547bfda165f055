"""お世話リマインダーとプッシュ送信。"""
from catup.notify.fcm import FcmClient
from catup.notify.models import ReminderMessage, ReminderRunResult
from catup.notify.reminder import (
    ReminderJob,
    build_reminder_message,
    incomplete_task_titles,
    select_target_members,
    target_slot_for_hour,
)

__all__ = [
    "FcmClient",
    "ReminderMessage",
    "ReminderRunResult",
    "ReminderJob",
    "build_reminder_message",
    "incomplete_task_titles",
    "select_target_members",
    "target_slot_for_hour",
]
