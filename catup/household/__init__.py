"""世帯の記録：モデルと最終閲覧時刻。スナップショット保存は catup.household.store。"""
from catup.household.last_seen import LastSeenStore
from catup.household.models import (
    AppSettings,
    CareLog,
    CareTaskDef,
    Cat,
    HouseholdMember,
    HouseholdSnapshot,
    InventoryItem,
    InvThresholds,
    Memo,
    NoticeDef,
    NoticeLog,
    Task,
)

__all__ = [
    "AppSettings",
    "CareLog",
    "CareTaskDef",
    "Cat",
    "HouseholdMember",
    "HouseholdSnapshot",
    "InventoryItem",
    "InvThresholds",
    "Memo",
    "NoticeDef",
    "NoticeLog",
    "Task",
    "LastSeenStore",
]
