"""CLI のテスト。"""
import json
import tempfile
from pathlib import Path

from catup.household.last_seen import LastSeenStore
from catup.household.models import CareLog, CareTaskDef, Cat, HouseholdSnapshot, InventoryItem
from catup.household.store import HouseholdStore
from catup.main import main


def _prepare(tmp: str) -> None:
    store = HouseholdStore(base_dir=Path(tmp) / "households")
    store.save(HouseholdSnapshot(
        household_id="h1",
        cats=[Cat(id="c1", name="タマ")],
        care_task_defs=[CareTaskDef(id="feed", title="ごはん", frequency="twice-daily")],
        care_logs=[],
        inventory=[InventoryItem(id="sand", label="猫砂", stock_level="empty")],
    ))


def test_catchup_command_prints_summary(capsys) -> None:
    with tempfile.TemporaryDirectory() as tmp:
        _prepare(tmp)
        code = main(["--data-dir", tmp, "catchup", "h1", "--now", "2026-10-18T08:00:00+00:00", "--user", "u1", "--mark-seen"])
        assert code == 0
        out = capsys.readouterr().out
        assert out.splitlines()[0] == "未処理 2件"
        assert "ごはん（朝）" in out
        assert "猫砂が少なくなっています" in out
        seen = LastSeenStore(base_dir=Path(tmp) / "read_state").get("u1")
        assert seen.isoformat() == "2026-10-18T08:00:00+00:00"


def test_catchup_command_unknown_household() -> None:
    with tempfile.TemporaryDirectory() as tmp:
        assert main(["--data-dir", tmp, "catchup", "nope"]) == 1


def test_remind_command_without_members(capsys) -> None:
    with tempfile.TemporaryDirectory() as tmp:
        _prepare(tmp)
        members_path = Path(tmp) / "members.json"
        members_path.write_text(json.dumps({"members": []}), encoding="utf-8")
        code = main(["--data-dir", tmp, "remind", "--hour", "8", "--members", str(members_path), "--today", "2026-10-18"])
        assert code == 0
        result = json.loads(capsys.readouterr().out)
        assert result["processed_households"] == 0


def test_catchup_command_ignores_yesterdays_care_log(capsys) -> None:
    with tempfile.TemporaryDirectory() as tmp:
        store = HouseholdStore(base_dir=Path(tmp) / "households")
        store.save(HouseholdSnapshot(
            household_id="h1",
            care_task_defs=[CareTaskDef(id="feed", title="ごはん", frequency="twice-daily")],
            care_logs=[CareLog(type="feed", slot="morning", done_at="2026-10-17T07:00:00Z")],
        ))
        code = main(["--data-dir", tmp, "catchup", "h1", "--now", "2026-10-18T08:00:00+00:00"])
        assert code == 0
        out = capsys.readouterr().out
        assert out.splitlines()[0] == "未処理 1件"
        assert "ごはん（朝）" in out
