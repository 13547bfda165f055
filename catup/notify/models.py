"""通知ジョブのデータモデル。"""
from typing import Optional

from pydantic import BaseModel, Field


class ReminderMessage(BaseModel):
    """プッシュ通知 1 件ぶんの文面。"""
    title: str = Field(..., description="通知タイトル")
    body: str = Field(..., description="通知本文")
    icon: Optional[str] = Field(None, description="アイコン URL。未指定なら既定のアイコン")


class ReminderRunResult(BaseModel):
    """リマインダージョブ 1 回ぶんの結果。"""
    processed_households: int = 0
    notified_households: int = 0
    sent: int = 0
    failed: int = 0
