"""食事スロット、一日の区切り、旧タスクの期限計算。"""
from catup.care.schedule import Bucket, bucket_for, next_due_at
from catup.care.slots import (
    adjusted_date_string,
    current_meal_slot,
    default_meal_slots,
    meal_slot_label,
    previous_meal_slot,
)

__all__ = [
    "Bucket",
    "bucket_for",
    "next_due_at",
    "adjusted_date_string",
    "current_meal_slot",
    "default_meal_slots",
    "meal_slot_label",
    "previous_meal_slot",
]
