"""世帯スナップショットのローカル保存（JSON）。"""
import json
import sys
from datetime import datetime
from pathlib import Path
from typing import Dict, List, Optional

from catup.care.slots import adjusted_date_string
from catup.catchup.models import CatchUpInput
from catup.config import HOUSEHOLDS_DIR, ensure_dirs
from catup.household.models import CareLog, HouseholdMember, HouseholdSnapshot, NoticeLog


def drop_deleted(snapshot: HouseholdSnapshot) -> HouseholdSnapshot:
    """論理削除済みの行を除いたコピーを返す。"""
    update = {
        "cats": [c for c in snapshot.cats if c.deleted_at is None],
        "inventory": [i for i in snapshot.inventory if i.deleted_at is None],
        "memos": [m for m in snapshot.memos if m.deleted_at is None],
        "notice_logs": _live_notice_logs(snapshot.notice_logs),
    }
    if snapshot.care_task_defs is not None:
        update["care_task_defs"] = [d for d in snapshot.care_task_defs if d.deleted_at is None]
    if snapshot.care_logs is not None:
        update["care_logs"] = [log for log in snapshot.care_logs if log.deleted_at is None]
    if snapshot.notice_defs is not None:
        update["notice_defs"] = [d for d in snapshot.notice_defs if d.deleted_at is None]
    return snapshot.model_copy(update=update)


def _live_notice_logs(logs: Dict[str, Dict[str, NoticeLog]]) -> Dict[str, Dict[str, NoticeLog]]:
    return {
        cat_id: {notice_id: log for notice_id, log in by_notice.items() if log.deleted_at is None}
        for cat_id, by_notice in logs.items()
    }


def todays_care_logs(logs: List[CareLog], today: str, day_start_hour: int = 0) -> List[CareLog]:
    """today に完了したお世話記録だけ。完了時刻のない記録は含めない。"""
    return [
        log for log in logs
        if log.done_at is not None and adjusted_date_string(log.done_at, day_start_hour) == today
    ]


def to_catchup_input(
    snapshot: HouseholdSnapshot,
    last_seen_at: datetime,
    today: Optional[str] = None,
) -> CatchUpInput:
    """スナップショットを集計の入力に詰め替える。

    お世話記録は today（一日の始まりの時刻を反映した日付）の分だけを渡す。
    today を省くと記録はそのまま渡る。
    """
    care_logs = snapshot.care_logs
    if care_logs is not None and today is not None:
        care_logs = todays_care_logs(care_logs, today, snapshot.settings.day_start_hour)
    return CatchUpInput(
        tasks=snapshot.tasks,
        notice_logs=snapshot.notice_logs,
        inventory=snapshot.inventory,
        memos=snapshot.memos,
        last_seen_at=last_seen_at,
        settings=snapshot.settings,
        cats=snapshot.cats,
        care_task_defs=snapshot.care_task_defs,
        care_logs=care_logs,
        notice_defs=snapshot.notice_defs,
        today=today,
    )


class HouseholdStore:
    """世帯ごとに 1 ファイル。index.json に世帯 ID を並べる。"""
    _index_file = "index.json"
    _members_file = "members.json"

    def __init__(self, base_dir: Optional[Path] = None):
        self.base_dir = base_dir or HOUSEHOLDS_DIR
        ensure_dirs()
        self.base_dir.mkdir(parents=True, exist_ok=True)

    def _index_path(self) -> Path:
        return self.base_dir / self._index_file

    def _household_path(self, household_id: str) -> Path:
        return self.base_dir / f"{household_id}.json"

    def _members_path(self) -> Path:
        return self.base_dir / self._members_file

    def _save_index(self, ids: List[str]) -> None:
        with open(self._index_path(), "w", encoding="utf-8") as f:
            json.dump({"ids": ids}, f, indent=2, ensure_ascii=False)

    def list_ids(self) -> List[str]:
        """保存済みの世帯 ID。"""
        if not self._index_path().exists():
            return []
        with open(self._index_path(), "r", encoding="utf-8") as f:
            data = json.load(f)
        return data.get("ids", [])

    def load(self, household_id: str) -> Optional[HouseholdSnapshot]:
        """世帯を読み込む。論理削除済みの行は落とす。"""
        path = self._household_path(household_id)
        if not path.exists():
            return None
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
        return drop_deleted(HouseholdSnapshot.model_validate(data))

    def save(self, snapshot: HouseholdSnapshot) -> None:
        """世帯を保存して索引を更新する。"""
        path = self._household_path(snapshot.household_id)
        with open(path, "w", encoding="utf-8") as f:
            f.write(snapshot.model_dump_json(indent=2))
        ids = self.list_ids()
        if snapshot.household_id not in ids:
            ids.append(snapshot.household_id)
            self._save_index(ids)

    def delete(self, household_id: str) -> bool:
        path = self._household_path(household_id)
        if not path.exists():
            return False
        path.unlink()
        ids = self.list_ids()
        if household_id in ids:
            ids.remove(household_id)
            self._save_index(ids)
        return True

    def load_members(self) -> List[HouseholdMember]:
        """通知設定とプッシュトークンを持つメンバー一覧。"""
        path = self._members_path()
        if not path.exists():
            return []
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
        members = [HouseholdMember.model_validate(m) for m in data.get("members", [])]
        print(f"[にゃるほど-世帯] メンバー {len(members)} 人を読み込みました", file=sys.stderr, flush=True)
        return members

    def save_members(self, members: List[HouseholdMember]) -> None:
        with open(self._members_path(), "w", encoding="utf-8") as f:
            json.dump(
                {"members": [m.model_dump(mode="json") for m in members]},
                f,
                indent=2,
                ensure_ascii=False,
            )
