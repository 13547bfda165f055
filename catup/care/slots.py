"""食事スロットと「一日の始まり」の計算。"""
from datetime import datetime, timedelta, timezone
from typing import List

from catup.config import (
    SLOT_EVENING_START,
    SLOT_MORNING_START,
    SLOT_NIGHT_START,
    SLOT_NOON_START,
)
from catup.household.models import Frequency, MealSlot

SLOT_ORDER = (MealSlot.MORNING, MealSlot.NOON, MealSlot.EVENING, MealSlot.NIGHT)

# 各スロットの時間帯 [開始, 終了)。夜は日をまたぐ
SLOT_BOUNDARIES = {
    MealSlot.MORNING: (SLOT_MORNING_START, SLOT_NOON_START),
    MealSlot.NOON: (SLOT_NOON_START, SLOT_EVENING_START),
    MealSlot.EVENING: (SLOT_EVENING_START, SLOT_NIGHT_START),
    MealSlot.NIGHT: (SLOT_NIGHT_START, SLOT_MORNING_START),
}

_SLOT_LABELS = {
    MealSlot.MORNING: "朝",
    MealSlot.NOON: "昼",
    MealSlot.EVENING: "夕",
    MealSlot.NIGHT: "夜",
}

_DEFAULT_SLOTS = {
    Frequency.ONCE_DAILY: [MealSlot.MORNING],
    Frequency.TWICE_DAILY: [MealSlot.MORNING, MealSlot.EVENING],
    Frequency.THREE_TIMES_DAILY: [MealSlot.MORNING, MealSlot.NOON, MealSlot.EVENING],
    Frequency.FOUR_TIMES_DAILY: [MealSlot.MORNING, MealSlot.NOON, MealSlot.EVENING, MealSlot.NIGHT],
    Frequency.WEEKLY: [],
    Frequency.MONTHLY: [],
    Frequency.AS_NEEDED: [],
}


def current_meal_slot(hour: int) -> MealSlot:
    """時刻（時）から今のスロットを返す。"""
    for slot in SLOT_ORDER:
        if is_in_meal_slot_window(slot, hour):
            return slot
    return MealSlot.NIGHT


def default_meal_slots(frequency: str) -> List[MealSlot]:
    """頻度から既定のスロットを決める。未知の頻度は朝だけ。"""
    try:
        return list(_DEFAULT_SLOTS[Frequency(frequency)])
    except ValueError:
        return [MealSlot.MORNING]


def previous_meal_slot(slot: str) -> MealSlot:
    """一つ前のスロット。朝の前は夜。"""
    index = SLOT_ORDER.index(MealSlot(slot))
    return SLOT_ORDER[index - 1]


def meal_slot_label(slot: str) -> str:
    try:
        return _SLOT_LABELS[MealSlot(slot)]
    except ValueError:
        return ""


def is_in_meal_slot_window(slot: str, hour: int) -> bool:
    """hour がそのスロットの時間帯に入るか。夜は日をまたいで翌朝まで。"""
    start, end = SLOT_BOUNDARIES[MealSlot(slot)]
    if start > end:
        return hour >= start or hour < end
    return start <= hour < end


def adjusted_date_string(moment: datetime, day_start_hour: int = 0) -> str:
    """day_start_hour 時を一日の始まりとしたときの日付（YYYY-MM-DD）。"""
    shifted = moment - timedelta(hours=day_start_hour)
    return shifted.date().isoformat()


def ensure_aware(moment: datetime) -> datetime:
    """タイムゾーンなしの時刻は UTC とみなす。"""
    if moment.tzinfo is None:
        return moment.replace(tzinfo=timezone.utc)
    return moment
