"""定時のお世話リマインダー：未完了のお世話を生の記録から数え直して通知する。

アプリ側のキャッチアップとは独立に動く。朝 8 時は朝のスロット、夜 20 時は夕方の
スロットを見て、今日まだ記録がないお世話があれば世帯のメンバー全員に送る。
"""
import sys
from typing import Dict, List, Optional

from catup.config import REMINDER_EVENING_HOUR, REMINDER_MORNING_HOUR
from catup.household.models import CareLog, CareTaskDef, HouseholdMember, MealSlot
from catup.household.store import HouseholdStore, todays_care_logs
from catup.notify.models import ReminderMessage, ReminderRunResult

MORNING_TITLE = "朝のお世話リマインダー ☀️"
EVENING_TITLE = "夜のお世話リマインダー 🌙"
MAX_TITLES_IN_BODY = 2


def target_slot_for_hour(hour: int) -> Optional[str]:
    """通知時刻に対応するスロット。8 時は朝、20 時は夕方、それ以外はなし。"""
    if hour == REMINDER_MORNING_HOUR:
        return MealSlot.MORNING.value
    if hour == REMINDER_EVENING_HOUR:
        return MealSlot.EVENING.value
    return None


def select_target_members(members: List[HouseholdMember], hour: int) -> List[HouseholdMember]:
    """この時刻に通知を受け取るメンバー（世帯参加済み・リマインダー有効）。"""
    out = []
    for member in members:
        if not member.household_id:
            continue
        prefs = member.notification_preferences
        if prefs.care_reminder is False:
            continue
        if prefs.notification_hour != hour:
            continue
        out.append(member)
    return out


def group_by_household(members: List[HouseholdMember]) -> Dict[str, List[HouseholdMember]]:
    groups: Dict[str, List[HouseholdMember]] = {}
    for member in members:
        groups.setdefault(member.household_id, []).append(member)
    return groups


def incomplete_task_titles(
    defs: List[CareTaskDef],
    logs: List[CareLog],
    hour: int,
    today: str,
) -> List[str]:
    """対象スロットで今日まだ完了記録がないお世話の名前。"""
    target = target_slot_for_hour(hour)
    if target is None:
        return []
    todays_logs = todays_care_logs(logs, today)
    titles = []
    for task_def in defs:
        if not task_def.enabled or task_def.deleted_at is not None:
            continue
        # 明示したスロットだけを見る
        if target not in (task_def.meal_slots or []):
            continue
        done = any(
            log.type == task_def.id and (log.slot is None or log.slot == target)
            for log in todays_logs
        )
        if not done:
            titles.append(task_def.title)
    return titles


def build_reminder_message(hour: int, titles: List[str]) -> ReminderMessage:
    title = MORNING_TITLE if hour == REMINDER_MORNING_HOUR else EVENING_TITLE
    body = "まだ完了していないタスクがあります: " + ", ".join(titles[:MAX_TITLES_IN_BODY])
    if len(titles) > MAX_TITLES_IN_BODY:
        body += " 他"
    return ReminderMessage(title=title, body=body)


class ReminderJob:
    """世帯ごとに未完了のお世話を確認し、メンバーの端末へ送る。"""

    def __init__(self, store: HouseholdStore, members: List[HouseholdMember], client):
        self.store = store
        self.members = members
        self.client = client

    def run(self, hour: int, today: str) -> ReminderRunResult:
        print(f"[にゃるほど-通知] {hour} 時のリマインダーを実行します（{today}）", file=sys.stderr, flush=True)
        result = ReminderRunResult()
        groups = group_by_household(select_target_members(self.members, hour))
        if not groups:
            print(f"[にゃるほど-通知] {hour} 時に通知するメンバーはいません", file=sys.stderr, flush=True)
            return result

        for household_id, members in groups.items():
            result.processed_households += 1
            snapshot = self.store.load(household_id)
            if snapshot is None or not snapshot.care_task_defs:
                continue
            titles = incomplete_task_titles(snapshot.care_task_defs, snapshot.care_logs or [], hour, today)
            if not titles:
                continue
            message = build_reminder_message(hour, titles)
            tokens = list(dict.fromkeys(t for m in members for t in m.push_tokens))
            if not tokens:
                continue
            result.notified_households += 1
            for token in tokens:
                ok, _err = self.client.send(token, message)
                if ok:
                    result.sent += 1
                else:
                    result.failed += 1

        print(
            f"[にゃるほど-通知] 世帯 {result.processed_households} 件を確認、"
            f"送信 {result.sent} 件、失敗 {result.failed} 件",
            file=sys.stderr,
            flush=True,
        )
        return result
