"""キャッチアップ集計：世帯の記録から「今やること」を優先度順に並べ、要約を作る。

入力は一世帯ぶんのスナップショットと現在時刻だけ。入出力も共有状態も持たないので、
画面の再描画ごとに呼んでもよい。候補は次の 5 系統から集め、最後にまとめて並べ替える。

1. いつもと違う様子（100）
2. 今日まだ記録していない様子チェック（70、必須なら 75）
3. お世話（今のスロット 85 / 前のスロットの取りこぼし 75 / 必要に応じて 70）
4. 在庫（65〜80）
5. 未読メモ（20）
"""
from datetime import datetime
from typing import Dict, List, Optional

from catup.care.schedule import Bucket, bucket_for
from catup.care.slots import (
    current_meal_slot,
    default_meal_slots,
    ensure_aware,
    meal_slot_label,
    previous_meal_slot,
)
from catup.catchup.models import (
    CatchUpInput,
    CatchUpResult,
    InventoryAlertItem,
    ItemStatus,
    MemoItem,
    NoticeItem,
    TaskItem,
    UnrecordedItem,
)
from catup.config import (
    ABNORMAL_SEVERITY_MIN,
    CATCH_UP_MAX_ITEMS,
    NORMAL_NOTICE_VALUES,
    URGENT_SEVERITY_MIN,
)
from catup.household.models import (
    CareLog,
    CareTaskDef,
    Cat,
    Frequency,
    MealSlot,
    NoticeKind,
    StockLevel,
)

SEVERITY_ABNORMAL_NOTICE = 100
SEVERITY_UNRECORDED = 70
SEVERITY_UNRECORDED_REQUIRED = 75
SEVERITY_TASK_DUE = 85
SEVERITY_TASK_STALE = 75
SEVERITY_TASK_AS_NEEDED = 70
SEVERITY_LEGACY_OVERDUE = 85
SEVERITY_LEGACY_DUE = 80
SEVERITY_STOCK_EMPTY = 80
SEVERITY_STOCK_LOW = 70
SEVERITY_DAYS_CRITICAL = 75
SEVERITY_DAYS_URGENT = 65
SEVERITY_MEMO = 20

ALL_CLEAR_SUMMARY = "すべて順調です"
SUMMARY_SEPARATOR = "・"


def aggregate(data: CatchUpInput, now: datetime) -> CatchUpResult:
    """キャッチアップ一覧と要約を作る。data は変更しない。"""
    today = data.today or now.date().isoformat()
    last_seen = ensure_aware(data.last_seen_at)
    names = {cat.id: cat.name for cat in data.cats}

    candidates = []
    candidates.extend(_abnormal_notices(data, names, last_seen))
    candidates.extend(_unrecorded_notices(data, today, now))
    if data.care_task_defs is not None and data.care_logs is not None:
        candidates.extend(_care_tasks(data.care_task_defs, data.care_logs, data.cats, now))
    else:
        candidates.extend(_legacy_tasks(data, names, now))
    candidates.extend(_inventory_alerts(data, now))
    candidates.extend(_unread_memos(data, last_seen))

    # sorted は安定なので同じ優先度は生成順のまま
    ranked = sorted(_unique_by_id(candidates), key=lambda item: -item.severity)
    return CatchUpResult(
        items=ranked[:CATCH_UP_MAX_ITEMS],
        all_items=ranked,
        summary=summarize(ranked),
        remaining_count=max(0, len(ranked) - CATCH_UP_MAX_ITEMS),
    )


def summarize(items) -> str:
    """「気になる変化 N件・未処理 N件」。どちらもなければ「すべて順調です」。"""
    abnormal = sum(1 for item in items if item.severity >= ABNORMAL_SEVERITY_MIN)
    urgent = sum(1 for item in items if URGENT_SEVERITY_MIN <= item.severity < ABNORMAL_SEVERITY_MIN)
    if abnormal == 0 and urgent == 0:
        return ALL_CLEAR_SUMMARY
    parts = []
    if abnormal:
        parts.append(f"気になる変化 {abnormal}件")
    if urgent:
        parts.append(f"未処理 {urgent}件")
    return SUMMARY_SEPARATOR.join(parts)


def is_abnormal_value(value: str) -> bool:
    return value not in NORMAL_NOTICE_VALUES


def _unique_by_id(items):
    seen = set()
    out = []
    for item in items:
        if item.id in seen:
            continue
        seen.add(item.id)
        out.append(item)
    return out


def _abnormal_notices(data: CatchUpInput, names: Dict[str, str], last_seen: datetime) -> List[NoticeItem]:
    enabled_ids = None
    if data.notice_defs is not None:
        enabled_ids = {d.id for d in data.notice_defs if d.enabled}
    out = []
    for cat_logs in data.notice_logs.values():
        for log in cat_logs.values():
            if enabled_ids is not None and log.notice_id not in enabled_ids:
                continue
            if log.later or ensure_aware(log.at) <= last_seen:
                continue
            if not is_abnormal_value(log.value):
                continue
            name = names.get(log.cat_id, "")
            out.append(NoticeItem(
                id=log.id,
                severity=SEVERITY_ABNORMAL_NOTICE,
                title="いつもと違う様子",
                body=f"{name}: {log.value}",
                at=log.at,
                status=ItemStatus.DANGER,
                action_label="OK",
                cat_id=log.cat_id,
                payload=log.model_dump(mode="json"),
                meta=f"{name} ・ 体調",
            ))
    return out


def _unrecorded_notices(data: CatchUpInput, today: str, now: datetime) -> List[UnrecordedItem]:
    if data.notice_defs is None:
        return []
    defs = [d for d in data.notice_defs if d.enabled and d.kind == NoticeKind.NOTICE]
    out = []
    for cat in data.cats:
        cat_logs = data.notice_logs.get(cat.id, {})
        for notice in defs:
            log = cat_logs.get(notice.id)
            if log is not None and log.at.date().isoformat() == today:
                continue
            out.append(UnrecordedItem(
                id=f"unrecorded_{cat.id}_{notice.id}",
                severity=SEVERITY_UNRECORDED_REQUIRED if notice.required else SEVERITY_UNRECORDED,
                title=notice.title,
                body=f"{cat.name}: 今日はまだ記録していません",
                at=now,
                status=ItemStatus.WARN if notice.required else ItemStatus.INFO,
                action_label="記録",
                cat_id=cat.id,
                payload={"cat_id": cat.id, "notice_id": notice.id},
                meta=f"{cat.name} ・ 様子",
                category=notice.category,
                required=notice.required,
                action_id=notice.id,
            ))
    return out


def _task_slots(task_def: CareTaskDef) -> List[str]:
    slots = task_def.meal_slots if task_def.meal_slots is not None else default_meal_slots(task_def.frequency)
    return [MealSlot(s).value for s in slots]


def _is_done_for_slot(log: CareLog, task_id: str, slot: str, cat_id: Optional[str] = None) -> bool:
    # スロットなしの記録はどのスロットでも完了扱い
    if log.type != task_id:
        return False
    if cat_id is not None and log.cat_id != cat_id:
        return False
    return log.slot is None or log.slot == slot


def _care_tasks(defs: List[CareTaskDef], logs: List[CareLog], cats: List[Cat], now: datetime) -> List[TaskItem]:
    current = current_meal_slot(now.hour).value
    out = []
    for task_def in defs:
        if not task_def.enabled:
            continue
        slots = _task_slots(task_def)
        payload = task_def.model_dump(mode="json")

        if task_def.frequency == Frequency.AS_NEEDED or not slots:
            if not any(log.type == task_def.id for log in logs):
                out.append(TaskItem(
                    id=task_def.id,
                    severity=SEVERITY_TASK_AS_NEEDED,
                    title=task_def.title,
                    body="必要に応じて",
                    at=now,
                    status=ItemStatus.INFO,
                    action_label="済んだ",
                    payload=payload,
                    meta="お世話",
                    icon=task_def.icon,
                    action_id=task_def.id,
                ))
            continue

        if current not in slots:
            # 一つ前のスロットだけを見る
            previous = previous_meal_slot(current).value
            if previous in slots and not any(log.type == task_def.id and log.slot == previous for log in logs):
                label = meal_slot_label(previous)
                out.append(TaskItem(
                    id=f"{task_def.id}_{previous}",
                    severity=SEVERITY_TASK_STALE,
                    title=f"{task_def.title}（{label}）",
                    body="前回の分が未完了です",
                    at=now,
                    status=ItemStatus.WARN,
                    action_label="済んだ",
                    payload={**payload, "slot": previous},
                    meta="お世話",
                    icon=task_def.icon,
                    action_id=f"{task_def.id}:{previous}",
                ))
            continue

        label = meal_slot_label(current)
        if task_def.per_cat and cats:
            for cat in cats:
                if any(_is_done_for_slot(log, task_def.id, current, cat.id) for log in logs):
                    continue
                out.append(TaskItem(
                    id=f"{task_def.id}_{cat.id}_{current}",
                    severity=SEVERITY_TASK_DUE,
                    title=f"{task_def.title}（{label}）",
                    body=f"{cat.name}の{label}の分",
                    at=now,
                    status=ItemStatus.WARN,
                    action_label="済んだ",
                    cat_id=cat.id,
                    payload={**payload, "cat_id": cat.id, "slot": current},
                    meta=f"{cat.name} ・ お世話",
                    icon=task_def.icon,
                    action_id=f"{task_def.id}:{current}",
                ))
        elif not any(_is_done_for_slot(log, task_def.id, current) for log in logs):
            out.append(TaskItem(
                id=f"{task_def.id}_{current}",
                severity=SEVERITY_TASK_DUE,
                title=f"{task_def.title}（{label}）",
                body=f"{label}の分です",
                at=now,
                status=ItemStatus.WARN,
                action_label="済んだ",
                payload={**payload, "slot": current},
                meta="お世話",
                icon=task_def.icon,
                action_id=f"{task_def.id}:{current}",
            ))
    return out


def _legacy_tasks(data: CatchUpInput, names: Dict[str, str], now: datetime) -> List[TaskItem]:
    out = []
    for task in data.tasks:
        if task.done:
            continue
        bucket = bucket_for(task, now)
        due_soon = bucket in (Bucket.OVERDUE, Bucket.NOW)
        if not due_soon and not (bucket == Bucket.TODAY and not task.optional):
            continue
        overdue = bucket == Bucket.OVERDUE
        if task.cat_id:
            meta = f"{names.get(task.cat_id) or '猫'} ・ お世話"
        else:
            meta = "お世話"
        out.append(TaskItem(
            id=task.id,
            severity=SEVERITY_LEGACY_OVERDUE if overdue else SEVERITY_LEGACY_DUE,
            title=task.title,
            body="期限が過ぎています" if overdue else "今日やるべきケアです",
            at=task.due_at or now,
            status=ItemStatus.DANGER if overdue else ItemStatus.WARN,
            action_label="済んだ",
            cat_id=task.cat_id,
            payload=task.model_dump(mode="json"),
            meta=meta,
        ))
    return out


def _inventory_alerts(data: CatchUpInput, now: datetime) -> List[InventoryAlertItem]:
    thresholds = data.settings.inv_thresholds
    out = []
    for item in data.inventory:
        if item.alert_enabled is False:
            continue
        min_days = item.range[0]
        # 在庫レベルが先。該当すれば日数は見ない
        if item.stock_level == StockLevel.EMPTY:
            severity, status = SEVERITY_STOCK_EMPTY, ItemStatus.DANGER
        elif item.stock_level == StockLevel.LOW:
            severity, status = SEVERITY_STOCK_LOW, ItemStatus.WARN
        elif min_days <= thresholds.critical:
            severity, status = SEVERITY_DAYS_CRITICAL, ItemStatus.DANGER
        elif min_days <= thresholds.urgent:
            severity, status = SEVERITY_DAYS_URGENT, ItemStatus.WARN
        else:
            continue
        body = f"残り約 {min_days} 日分"
        if item.purchase_memo:
            body += f" ・ メモ: {item.purchase_memo}"
        out.append(InventoryAlertItem(
            id=item.id,
            severity=severity,
            title=f"{item.label}が少なくなっています",
            body=body,
            at=now,
            status=status,
            action_label="買った",
            payload=item.model_dump(mode="json"),
        ))
    return out


def _unread_memos(data: CatchUpInput, last_seen: datetime) -> List[MemoItem]:
    out = []
    for index, memo in enumerate(data.memos):
        if ensure_aware(memo.at) <= last_seen:
            continue
        out.append(MemoItem(
            id=memo.id or f"memo_{index}",
            severity=SEVERITY_MEMO,
            title="新しいメモ",
            body=memo.text,
            at=memo.at,
            status=ItemStatus.INFO,
            action_label="既読",
            payload=memo.model_dump(mode="json"),
        ))
    return out
