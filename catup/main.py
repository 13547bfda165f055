"""にゃるほど CLI：世帯のキャッチアップ表示と、定時リマインダーの実行。"""
import argparse
import json
import sys
from datetime import datetime
from pathlib import Path
from typing import List, Optional

from pydantic import ValidationError

from catup import __version__
from catup.care.slots import adjusted_date_string
from catup.catchup.aggregator import aggregate
from catup.household.last_seen import EPOCH, LastSeenStore
from catup.household.models import HouseholdMember
from catup.household.store import HouseholdStore, to_catchup_input
from catup.notify.fcm import FcmClient
from catup.notify.reminder import ReminderJob


def _parse_now(value: Optional[str]) -> datetime:
    if not value:
        return datetime.now().astimezone()
    return datetime.fromisoformat(value.replace("Z", "+00:00"))


def _stores(data_dir: Optional[str]) -> tuple[HouseholdStore, LastSeenStore]:
    if not data_dir:
        return HouseholdStore(), LastSeenStore()
    base = Path(data_dir)
    return HouseholdStore(base / "households"), LastSeenStore(base / "read_state")


def run_catchup(args: argparse.Namespace) -> int:
    households, last_seen_store = _stores(args.data_dir)
    try:
        snapshot = households.load(args.household_id)
    except ValidationError as e:
        print(f"[にゃるほど-世帯] 世帯データが不正です: {e}", file=sys.stderr, flush=True)
        return 1
    if snapshot is None:
        print(f"[にゃるほど-世帯] 世帯が見つかりません: {args.household_id}", file=sys.stderr, flush=True)
        return 1

    now = _parse_now(args.now)
    last_seen = last_seen_store.get(args.user) if args.user else EPOCH
    # 一日の始まりをずらしている世帯は「今日」もずらす
    today = adjusted_date_string(now, snapshot.settings.day_start_hour)
    result = aggregate(to_catchup_input(snapshot, last_seen, today), now)

    print(result.summary)
    for item in result.items:
        print(f"[{item.severity:>3}] {item.title} ― {item.body}（{item.action_label}）")
    if result.remaining_count:
        print(f"ほか {result.remaining_count} 件")

    if args.mark_seen and args.user:
        last_seen_store.mark_seen(args.user, now)
    return 0


def run_remind(args: argparse.Namespace) -> int:
    households, _ = _stores(args.data_dir)
    try:
        if args.members:
            with open(args.members, "r", encoding="utf-8") as f:
                members = [HouseholdMember.model_validate(m) for m in json.load(f).get("members", [])]
        else:
            members = households.load_members()
    except ValidationError as e:
        print(f"[にゃるほど-通知] メンバー情報が不正です: {e}", file=sys.stderr, flush=True)
        return 1

    today = args.today or datetime.now().date().isoformat()
    job = ReminderJob(households, members, FcmClient())
    result = job.run(args.hour, today)
    print(result.model_dump_json())
    return 0 if result.failed == 0 else 2


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="catup", description="にゃるほど：多頭飼いのお世話キャッチアップ")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("--data-dir", default=None, help="データディレクトリ（既定は ./data）")
    sub = parser.add_subparsers(dest="command", required=True)

    catchup = sub.add_parser("catchup", help="世帯のキャッチアップを表示する")
    catchup.add_argument("household_id")
    catchup.add_argument("--user", default=None, help="最終閲覧時刻を使うユーザー ID")
    catchup.add_argument("--now", default=None, help="現在時刻（ISO 8601）。テスト用")
    catchup.add_argument("--mark-seen", action="store_true", help="表示後に既読にする")
    catchup.set_defaults(func=run_catchup)

    remind = sub.add_parser("remind", help="定時のお世話リマインダーを送る")
    remind.add_argument("--hour", type=int, required=True, help="実行時刻（時）")
    remind.add_argument("--members", default=None, help="メンバー JSON のパス")
    remind.add_argument("--today", default=None, help="対象日 YYYY-MM-DD")
    remind.set_defaults(func=run_remind)
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
