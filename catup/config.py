"""にゃるほど全体の設定とパス。"""
from pathlib import Path

# プロジェクトルート（catup パッケージの一つ上）
ROOT_DIR = Path(__file__).resolve().parent.parent
# データディレクトリ：世帯スナップショット、既読時刻など
DATA_DIR = ROOT_DIR / "data"
HOUSEHOLDS_DIR = DATA_DIR / "households"
READ_STATE_DIR = DATA_DIR / "read_state"  # ユーザーごとの最終閲覧時刻

# キャッチアップ
CATCH_UP_MAX_ITEMS = 6
ABNORMAL_SEVERITY_MIN = 90  # 以上は「気になる変化」
URGENT_SEVERITY_MIN = 60    # 以上 90 未満は「未処理」
NORMAL_NOTICE_VALUES = ("いつも通り", "なし", "記録した")

# 在庫しきい値の既定（日数）
INV_THRESHOLD_SOON = 7
INV_THRESHOLD_URGENT = 3
INV_THRESHOLD_CRITICAL = 1
INVENTORY_DEFAULT_RANGE = (30, 30)

# 食事スロットの開始時刻（時）
SLOT_MORNING_START = 5
SLOT_NOON_START = 11
SLOT_EVENING_START = 15
SLOT_NIGHT_START = 20

# リマインダー
REMINDER_MORNING_HOUR = 8
REMINDER_EVENING_HOUR = 20
DEFAULT_NOTIFICATION_HOUR = 20

# プッシュ通知（FCM レガシー HTTP）
FCM_ENDPOINT = "https://fcm.googleapis.com/fcm/send"
FCM_ICON_URL = "https://nebular-flare.vercel.app/icon.svg"
FCM_TIMEOUT_SECONDS = 10


def ensure_dirs() -> None:
    """データディレクトリを作成する。"""
    for d in (DATA_DIR, HOUSEHOLDS_DIR, READ_STATE_DIR):
        d.mkdir(parents=True, exist_ok=True)
