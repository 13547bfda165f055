"""キャッチアップ：今やることの一覧と要約。"""
from catup.catchup.aggregator import aggregate, summarize
from catup.catchup.models import (
    CatchUpInput,
    CatchUpItem,
    CatchUpResult,
    InventoryAlertItem,
    ItemStatus,
    MemoItem,
    NoticeItem,
    TaskItem,
    UnrecordedItem,
)

__all__ = [
    "aggregate",
    "summarize",
    "CatchUpInput",
    "CatchUpItem",
    "CatchUpResult",
    "InventoryAlertItem",
    "ItemStatus",
    "MemoItem",
    "NoticeItem",
    "TaskItem",
    "UnrecordedItem",
]
