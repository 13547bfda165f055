"""世帯で共有する記録のデータモデル（猫・お世話・気づき・在庫・メモ・設定）。"""
from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator, model_validator

from catup.config import (
    DEFAULT_NOTIFICATION_HOUR,
    INV_THRESHOLD_CRITICAL,
    INV_THRESHOLD_SOON,
    INV_THRESHOLD_URGENT,
    INVENTORY_DEFAULT_RANGE,
)


class MealSlot(str, Enum):
    """一日の食事スロット。"""
    MORNING = "morning"
    NOON = "noon"
    EVENING = "evening"
    NIGHT = "night"


class Frequency(str, Enum):
    """お世話の頻度。"""
    ONCE_DAILY = "once-daily"
    TWICE_DAILY = "twice-daily"
    THREE_TIMES_DAILY = "three-times-daily"
    FOUR_TIMES_DAILY = "four-times-daily"
    WEEKLY = "weekly"      # スロットなし（必要に応じて扱い）
    MONTHLY = "monthly"    # 同上
    AS_NEEDED = "as-needed"


class NoticeKind(str, Enum):
    NOTICE = "notice"   # 毎日の様子チェック
    MOMENT = "moment"   # その場の記録


class StockLevel(str, Enum):
    FULL = "full"
    HALF = "half"
    LOW = "low"
    EMPTY = "empty"


class Cadence(str, Enum):
    """旧タスクの周期。"""
    DAILY = "daily"
    WEEKLY = "weekly"
    MONTHLY = "monthly"
    ONCE = "once"


class DueTime(str, Enum):
    """旧タスクの期限帯。"""
    MORNING = "morning"
    EVENING = "evening"
    ANY = "any"
    WEEKEND = "weekend"
    MONTH = "month"


MEAL_SLOT_VALUES = tuple(s.value for s in MealSlot)
FREQUENCY_VALUES = tuple(f.value for f in Frequency)


class Cat(BaseModel):
    """猫（表示名の参照にだけ使う）。"""
    id: str = Field(..., description="猫 ID")
    name: str = Field(..., description="名前")
    deleted_at: Optional[datetime] = Field(None, description="論理削除時刻")

    model_config = ConfigDict(use_enum_values=True, populate_by_name=True)


class CareTaskDef(BaseModel):
    """繰り返しのお世話定義（ごはん、トイレ掃除など）。"""
    id: str = Field(..., description="定義 ID")
    title: str = Field(..., description="表示名")
    icon: str = Field("", description="アイコン名")
    frequency: Frequency = Field(Frequency.ONCE_DAILY, description="頻度")
    meal_slots: Optional[List[MealSlot]] = Field(None, alias="mealSlots", description="対象スロット。未設定なら頻度から決める")
    per_cat: bool = Field(False, alias="perCat", description="猫ごとに記録するか")
    enabled: bool = Field(True, description="有効か")
    deleted_at: Optional[datetime] = Field(None, alias="deletedAt", description="論理削除時刻")

    model_config = ConfigDict(use_enum_values=True, populate_by_name=True)

    @field_validator("frequency", mode="before")
    @classmethod
    def _tolerate_frequency(cls, value: Any) -> Any:
        # 未知の頻度は 1 日 1 回（朝だけ）として読む
        if value is None or value not in FREQUENCY_VALUES:
            return Frequency.ONCE_DAILY
        return value

    @field_validator("meal_slots", mode="before")
    @classmethod
    def _tolerate_meal_slots(cls, value: Any) -> Any:
        # 壊れた値は未設定扱い。明示的な空リストはそのまま残す
        if value is None or not isinstance(value, (list, tuple)):
            return None
        known = [s for s in value if isinstance(s, str) and s in MEAL_SLOT_VALUES]
        if value and not known:
            return None
        return known


class CareLog(BaseModel):
    """お世話の完了記録。"""
    id: Optional[str] = Field(None, description="記録 ID")
    type: str = Field(..., description="CareTaskDef の ID（旧形式は \"{id}:{slot}\"）")
    cat_id: Optional[str] = Field(None, validation_alias=AliasChoices("cat_id", "catId"), description="猫 ID")
    slot: Optional[MealSlot] = Field(None, description="スロット")
    done_at: Optional[datetime] = Field(
        None,
        validation_alias=AliasChoices("done_at", "doneAt", "created_at"),
        description="完了時刻",
    )
    deleted_at: Optional[datetime] = Field(None, alias="deletedAt", description="論理削除時刻")

    model_config = ConfigDict(use_enum_values=True, populate_by_name=True)

    @model_validator(mode="after")
    def _split_composite_type(self) -> "CareLog":
        if self.slot is None and ":" in self.type:
            task_id, _, slot = self.type.rpartition(":")
            if slot in MEAL_SLOT_VALUES:
                self.type = task_id
                self.slot = slot
        return self


class NoticeDef(BaseModel):
    """様子チェックの定義（食欲、うんちなど）。"""
    id: str = Field(..., description="定義 ID")
    title: str = Field(..., description="表示名")
    kind: NoticeKind = Field(NoticeKind.NOTICE, description="種類")
    choices: List[str] = Field(default_factory=list, description="選択肢。先頭が普段の値")
    enabled: bool = Field(True, description="有効か")
    required: bool = Field(False, description="毎日必須か")
    category: Optional[str] = Field(None, description="カテゴリ（eating / toilet / behavior / health）")
    input_type: Optional[str] = Field(None, alias="inputType", description="入力方式")
    deleted_at: Optional[datetime] = Field(None, alias="deletedAt", description="論理削除時刻")

    model_config = ConfigDict(use_enum_values=True, populate_by_name=True)


class NoticeLog(BaseModel):
    """ある猫のある様子チェックへの最新の回答。"""
    id: str = Field(..., description="記録 ID")
    cat_id: str = Field(..., alias="catId", description="猫 ID")
    notice_id: str = Field(..., alias="noticeId", description="NoticeDef の ID")
    value: str = Field(..., description="回答")
    at: datetime = Field(..., description="記録時刻")
    later: bool = Field(False, description="「あとで」にした")
    done: bool = Field(False, description="確認済み")
    deleted_at: Optional[datetime] = Field(None, alias="deletedAt", description="論理削除時刻")

    model_config = ConfigDict(use_enum_values=True, populate_by_name=True)


class InventoryItem(BaseModel):
    """消耗品の在庫。"""
    id: str = Field(..., description="在庫 ID")
    label: str = Field(..., description="表示名")
    range: Tuple[int, int] = Field(INVENTORY_DEFAULT_RANGE, description="残り日数の目安 [最小, 最大]")
    stock_level: StockLevel = Field(StockLevel.FULL, alias="stockLevel", description="在庫レベル")
    alert_enabled: bool = Field(True, alias="alertEnabled", description="通知するか")
    purchase_memo: Optional[str] = Field(None, alias="purchaseMemo", description="購入メモ")
    deleted_at: Optional[datetime] = Field(None, description="論理削除時刻")

    model_config = ConfigDict(use_enum_values=True, populate_by_name=True)

    @model_validator(mode="before")
    @classmethod
    def _range_from_columns(cls, data: Any) -> Any:
        # DB の range_min / range_max 列からも組み立てる
        if isinstance(data, dict) and data.get("range") is None:
            lo, hi = data.get("range_min"), data.get("range_max")
            if lo is not None or hi is not None:
                data = dict(data)
                data["range"] = (lo if lo is not None else hi, hi if hi is not None else lo)
        return data


class Memo(BaseModel):
    """世帯の自由記述メモ。"""
    id: Optional[str] = Field(None, description="メモ ID")
    text: str = Field(..., description="本文")
    at: datetime = Field(..., description="作成時刻")
    deleted_at: Optional[datetime] = Field(None, alias="deletedAt", description="論理削除時刻")

    model_config = ConfigDict(use_enum_values=True, populate_by_name=True)


class InvThresholds(BaseModel):
    """在庫アラートのしきい値（日数）。"""
    soon: int = INV_THRESHOLD_SOON
    urgent: int = INV_THRESHOLD_URGENT
    critical: int = INV_THRESHOLD_CRITICAL


class AppSettings(BaseModel):
    """世帯共通の設定。"""
    inv_thresholds: InvThresholds = Field(default_factory=InvThresholds, alias="invThresholds")
    day_start_hour: int = Field(0, ge=0, le=23, alias="dayStartHour", description="一日の始まりの時刻")

    model_config = ConfigDict(use_enum_values=True, populate_by_name=True)


class Task(BaseModel):
    """旧形式のお世話タスク（CareTaskDef 導入前）。"""
    id: str
    cat_id: Optional[str] = Field(None, alias="catId")
    title: str
    cadence: Cadence = Cadence.DAILY
    due: DueTime = DueTime.ANY
    due_at: Optional[datetime] = Field(None, alias="dueAt")
    done: bool = False
    optional: bool = False

    model_config = ConfigDict(use_enum_values=True, populate_by_name=True)


class HouseholdSnapshot(BaseModel):
    """ある世帯の記録一式。State Provider が渡すもの。"""
    household_id: str = Field(..., description="世帯 ID")
    cats: List[Cat] = Field(default_factory=list)
    tasks: List[Task] = Field(default_factory=list)
    care_task_defs: Optional[List[CareTaskDef]] = Field(None, alias="careTaskDefs")
    care_logs: Optional[List[CareLog]] = Field(None, alias="careLogs")
    notice_defs: Optional[List[NoticeDef]] = Field(None, alias="noticeDefs")
    notice_logs: Dict[str, Dict[str, NoticeLog]] = Field(default_factory=dict, alias="noticeLogs")
    inventory: List[InventoryItem] = Field(default_factory=list)
    memos: List[Memo] = Field(default_factory=list)
    settings: AppSettings = Field(default_factory=AppSettings)

    model_config = ConfigDict(use_enum_values=True, populate_by_name=True)


class NotificationPreferences(BaseModel):
    """ユーザーごとの通知設定。"""
    care_reminder: bool = Field(True, description="お世話リマインダーを受け取るか")
    notification_hour: int = Field(DEFAULT_NOTIFICATION_HOUR, ge=0, le=23, description="通知する時刻（時）")


class HouseholdMember(BaseModel):
    """世帯メンバー（通知の宛先）。"""
    id: str = Field(..., description="ユーザー ID")
    household_id: Optional[str] = Field(None, description="所属世帯。未参加なら None")
    notification_preferences: NotificationPreferences = Field(default_factory=NotificationPreferences)
    push_tokens: List[str] = Field(default_factory=list, description="FCM デバイストークン")

    model_config = ConfigDict(use_enum_values=True, populate_by_name=True)
