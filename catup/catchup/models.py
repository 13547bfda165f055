"""キャッチアップの入力と出力。出力項目は type で区別するタグ付きユニオン。"""
from datetime import datetime
from enum import Enum
from typing import Annotated, Any, Dict, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

from catup.household.models import (
    AppSettings,
    CareLog,
    CareTaskDef,
    Cat,
    InventoryItem,
    Memo,
    NoticeDef,
    NoticeLog,
    Task,
)


class ItemStatus(str, Enum):
    """カードの色分け。"""
    DANGER = "danger"
    WARN = "warn"
    SUCCESS = "success"
    INFO = "info"
    DEFAULT = "default"


class _CatchUpItemBase(BaseModel):
    id: str = Field(..., description="出力内で一意な ID")
    severity: int = Field(..., ge=0, le=100, description="優先度。大きいほど先に出す")
    title: str
    body: str
    at: datetime
    status: ItemStatus
    action_label: str = Field(..., description="ボタンの文言")
    cat_id: Optional[str] = None
    payload: Dict[str, Any] = Field(default_factory=dict, description="操作に必要な元データ")
    meta: Optional[str] = None
    icon: Optional[str] = None
    category: Optional[str] = None
    required: Optional[bool] = None
    action_id: Optional[str] = None

    model_config = ConfigDict(use_enum_values=True, frozen=True)


class NoticeItem(_CatchUpItemBase):
    """いつもと違う様子の記録。"""
    type: Literal["notice"] = "notice"


class UnrecordedItem(_CatchUpItemBase):
    """今日まだ記録していない様子チェック。"""
    type: Literal["unrecorded"] = "unrecorded"


class TaskItem(_CatchUpItemBase):
    """未完了のお世話。"""
    type: Literal["task"] = "task"


class InventoryAlertItem(_CatchUpItemBase):
    """残りが少ない在庫。"""
    type: Literal["inventory"] = "inventory"


class MemoItem(_CatchUpItemBase):
    """未読のメモ。"""
    type: Literal["memo"] = "memo"


CatchUpItem = Annotated[
    Union[NoticeItem, UnrecordedItem, TaskItem, InventoryAlertItem, MemoItem],
    Field(discriminator="type"),
]


class CatchUpInput(BaseModel):
    """一世帯ぶんの入力スナップショット。"""
    tasks: List[Task] = Field(default_factory=list, description="旧タスク（care_task_defs がないとき用）")
    notice_logs: Dict[str, Dict[str, NoticeLog]] = Field(default_factory=dict, description="猫 ID → 定義 ID → 最新の記録")
    inventory: List[InventoryItem] = Field(default_factory=list)
    memos: List[Memo] = Field(default_factory=list)
    last_seen_at: datetime = Field(..., description="最後にキャッチアップを見た時刻")
    settings: AppSettings = Field(default_factory=AppSettings)
    cats: List[Cat] = Field(default_factory=list)
    care_task_defs: Optional[List[CareTaskDef]] = None
    care_logs: Optional[List[CareLog]] = None
    notice_defs: Optional[List[NoticeDef]] = None
    today: Optional[str] = Field(None, description="YYYY-MM-DD。省略時は now の日付")


class CatchUpResult(BaseModel):
    items: List[CatchUpItem] = Field(default_factory=list, description="表示する上位の項目")
    all_items: List[CatchUpItem] = Field(default_factory=list, description="切り詰め前の全項目")
    summary: str
    remaining_count: int = Field(0, ge=0)
