"""ユーザーごとの最終閲覧時刻（キャッチアップ、写真、体調記録など）。"""
import json
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional

from catup.config import READ_STATE_DIR, ensure_dirs

CATCH_UP_KEY = "catch_up"
EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


class LastSeenStore:
    """user_id → キー → ISO 時刻 を 1 つの JSON に保存する。"""
    _filename = "last_seen.json"

    def __init__(self, base_dir: Optional[Path] = None):
        self.base_dir = base_dir or READ_STATE_DIR
        ensure_dirs()
        self.base_dir.mkdir(parents=True, exist_ok=True)

    def _path(self) -> Path:
        return self.base_dir / self._filename

    def _load(self) -> dict:
        if not self._path().exists():
            return {}
        with open(self._path(), "r", encoding="utf-8") as f:
            return json.load(f)

    def _save(self, data: dict) -> None:
        with open(self._path(), "w", encoding="utf-8") as f:
            json.dump(data, f, indent=2, ensure_ascii=False)

    def get(self, user_id: str, key: str = CATCH_UP_KEY) -> datetime:
        """最後に見た時刻。未記録なら 1970-01-01（すべて未読）。"""
        value = self._load().get(user_id, {}).get(key)
        if not value:
            return EPOCH
        return datetime.fromisoformat(value.replace("Z", "+00:00"))

    def mark_seen(self, user_id: str, at: datetime, key: str = CATCH_UP_KEY) -> None:
        """見た時刻を記録する。"""
        data = self._load()
        data.setdefault(user_id, {})[key] = at.isoformat()
        self._save(data)
