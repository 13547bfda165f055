"""世帯スナップショットと最終閲覧時刻の保存テスト。"""
import json
import tempfile
from datetime import datetime, timezone
from pathlib import Path

from catup.catchup.aggregator import aggregate
from catup.household.last_seen import EPOCH, LastSeenStore
from catup.household.models import (
    AppSettings,
    CareLog,
    CareTaskDef,
    Cat,
    HouseholdMember,
    HouseholdSnapshot,
    InventoryItem,
    NoticeLog,
)
from catup.household.store import HouseholdStore, to_catchup_input

DELETED = datetime(2026, 10, 1, tzinfo=timezone.utc)


def _snapshot() -> HouseholdSnapshot:
    return HouseholdSnapshot(
        household_id="h1",
        cats=[Cat(id="c1", name="タマ"), Cat(id="c9", name="旧猫", deleted_at=DELETED)],
        care_task_defs=[
            CareTaskDef(id="feed", title="ごはん", frequency="twice-daily", per_cat=True),
            CareTaskDef(id="old", title="旧タスク", deleted_at=DELETED),
        ],
        care_logs=[CareLog(type="feed", cat_id="c1", slot="morning", done_at="2026-10-18T07:30:00+09:00")],
        notice_logs={
            "c1": {
                "appetite": NoticeLog(id="n1", cat_id="c1", notice_id="appetite", value="いつも通り", at="2026-10-18T07:00:00+09:00"),
            },
        },
        inventory=[
            InventoryItem(id="food", label="カリカリ", range=(3, 7), purchase_memo="いつもの店"),
            InventoryItem(id="gone", label="廃番", deleted_at=DELETED),
        ],
    )


def test_household_store_save_load() -> None:
    with tempfile.TemporaryDirectory() as tmp:
        store = HouseholdStore(base_dir=Path(tmp))
        store.save(_snapshot())
        assert store.list_ids() == ["h1"]
        loaded = store.load("h1")
        assert loaded is not None
        assert [c.id for c in loaded.cats] == ["c1"]
        assert [d.id for d in loaded.care_task_defs] == ["feed"]
        assert [i.id for i in loaded.inventory] == ["food"]
        assert loaded.inventory[0].range == (3, 7)
        assert loaded.care_logs[0].slot == "morning"
        assert loaded.notice_logs["c1"]["appetite"].value == "いつも通り"


def test_household_store_missing_and_delete() -> None:
    with tempfile.TemporaryDirectory() as tmp:
        store = HouseholdStore(base_dir=Path(tmp))
        assert store.load("nope") is None
        assert store.delete("nope") is False
        store.save(_snapshot())
        assert store.delete("h1") is True
        assert store.list_ids() == []
        assert store.load("h1") is None


def test_snapshot_accepts_app_field_names() -> None:
    snapshot = HouseholdSnapshot.model_validate({
        "household_id": "h2",
        "careTaskDefs": [{"id": "feed", "title": "ごはん", "mealSlots": ["morning"], "perCat": True}],
        "careLogs": [{"type": "feed:morning", "catId": "c1", "created_at": "2026-10-18T08:00:00Z"}],
        "noticeLogs": {"c1": {"appetite": {"id": "n1", "catId": "c1", "noticeId": "appetite", "value": "なし", "at": "2026-10-18T08:00:00Z"}}},
        "inventory": [{"id": "sand", "label": "猫砂", "range_min": 2, "range_max": 5, "stockLevel": "low", "alertEnabled": True}],
        "settings": {"invThresholds": {"soon": 10, "urgent": 5, "critical": 3}, "dayStartHour": 4},
    })
    assert snapshot.care_task_defs[0].per_cat is True
    assert snapshot.care_logs[0].type == "feed"
    assert snapshot.care_logs[0].slot == "morning"
    assert snapshot.care_logs[0].cat_id == "c1"
    assert snapshot.inventory[0].range == (2, 5)
    assert snapshot.inventory[0].stock_level == "low"
    assert snapshot.settings.inv_thresholds.critical == 3
    assert snapshot.settings.day_start_hour == 4


def test_to_catchup_input_carries_collections() -> None:
    seen = datetime(2026, 10, 17, tzinfo=timezone.utc)
    data = to_catchup_input(_snapshot(), seen, today="2026-10-18")
    assert data.last_seen_at == seen
    assert data.today == "2026-10-18"
    assert data.care_task_defs is not None
    assert data.notice_defs is None
    assert "c1" in data.notice_logs



def test_to_catchup_input_keeps_only_todays_care_logs() -> None:
    snapshot = HouseholdSnapshot(
        household_id="h1",
        care_task_defs=[CareTaskDef(id="feed", title="ごはん", frequency="twice-daily")],
        care_logs=[
            CareLog(id="yesterday", type="feed", slot="morning", done_at="2026-10-17T07:00:00Z"),
            CareLog(id="today", type="feed", slot="evening", done_at="2026-10-18T07:00:00Z"),
            CareLog(id="undated", type="feed"),
        ],
    )
    data = to_catchup_input(snapshot, EPOCH, today="2026-10-18")
    assert [log.id for log in data.care_logs] == ["today"]
    result = aggregate(data, datetime(2026, 10, 18, 8, 0, tzinfo=timezone.utc))
    assert [i.id for i in result.all_items if i.type == "task"] == ["feed_morning"]


def test_todays_care_logs_follow_day_start_hour() -> None:
    snapshot = HouseholdSnapshot(
        household_id="h1",
        care_task_defs=[CareTaskDef(id="feed", title="ごはん")],
        care_logs=[
            CareLog(id="late_night", type="feed", done_at="2026-10-18T02:00:00Z"),
            CareLog(id="before_dawn", type="feed", done_at="2026-10-19T03:00:00Z"),
        ],
        settings=AppSettings(day_start_hour=4),
    )
    data = to_catchup_input(snapshot, EPOCH, today="2026-10-18")
    assert [log.id for log in data.care_logs] == ["before_dawn"]


def test_load_drops_soft_deleted_logs_defs_and_memos() -> None:
    removed = "2026-10-18T07:05:00Z"
    raw = {
        "household_id": "h1",
        "careTaskDefs": [{"id": "feed", "title": "ごはん", "frequency": "twice-daily"}],
        "careLogs": [{"id": "l1", "type": "feed:morning", "done_at": "2026-10-18T07:00:00Z", "deleted_at": removed}],
        "noticeDefs": [
            {"id": "appetite", "title": "食欲", "deletedAt": removed},
            {"id": "toilet", "title": "トイレ"},
        ],
        "noticeLogs": {"c1": {"appetite": {"id": "n1", "catId": "c1", "noticeId": "appetite", "value": "食べない", "at": "2026-10-18T07:00:00Z", "deletedAt": removed}}},
        "memos": [
            {"id": "m1", "text": "消したメモ", "at": "2026-10-18T06:00:00Z", "deleted_at": removed},
            {"id": "m2", "text": "残るメモ", "at": "2026-10-18T06:30:00Z"},
        ],
    }
    with tempfile.TemporaryDirectory() as tmp:
        store = HouseholdStore(base_dir=Path(tmp))
        (Path(tmp) / "h1.json").write_text(json.dumps(raw, ensure_ascii=False), encoding="utf-8")
        loaded = store.load("h1")
    assert loaded is not None
    assert loaded.care_logs == []
    assert [d.id for d in loaded.notice_defs] == ["toilet"]
    assert loaded.notice_logs == {"c1": {}}
    assert [m.id for m in loaded.memos] == ["m2"]

    result = aggregate(to_catchup_input(loaded, EPOCH, today="2026-10-18"), datetime(2026, 10, 18, 8, 0, tzinfo=timezone.utc))
    assert [i.id for i in result.all_items if i.type == "task"] == ["feed_morning"]
    assert [i.type for i in result.all_items if i.type == "notice"] == []
    assert [i.id for i in result.all_items if i.type == "memo"] == ["m2"]


def test_unknown_frequency_reads_as_once_daily() -> None:
    snapshot = HouseholdSnapshot.model_validate({
        "household_id": "h3",
        "careTaskDefs": [{"id": "feed", "title": "ごはん", "frequency": "daily"}],
        "careLogs": [],
    })
    assert snapshot.care_task_defs[0].frequency == "once-daily"
    result = aggregate(to_catchup_input(snapshot, EPOCH, today="2026-10-18"), datetime(2026, 10, 18, 8, 0, tzinfo=timezone.utc))
    assert [i.id for i in result.all_items] == ["feed_morning"]


def test_members_round_trip() -> None:
    with tempfile.TemporaryDirectory() as tmp:
        store = HouseholdStore(base_dir=Path(tmp))
        assert store.load_members() == []
        members = [HouseholdMember(id="u1", household_id="h1", push_tokens=["tok"])]
        store.save_members(members)
        loaded = store.load_members()
        assert loaded[0].id == "u1"
        assert loaded[0].notification_preferences.notification_hour == 20
        assert loaded[0].notification_preferences.care_reminder is True


def test_last_seen_store() -> None:
    with tempfile.TemporaryDirectory() as tmp:
        store = LastSeenStore(base_dir=Path(tmp))
        assert store.get("u1") == EPOCH
        at = datetime(2026, 10, 18, 8, 0, tzinfo=timezone.utc)
        store.mark_seen("u1", at)
        assert store.get("u1") == at
        assert store.get("u1", key="photos") == EPOCH
        assert store.get("u2") == EPOCH
