"""FCM（レガシー HTTP API）へのプッシュ送信。

POST https://fcm.googleapis.com/fcm/send
Authorization: key=<サーバーキー>
Body: {"to": <デバイストークン>, "notification": {"title", "body", "icon"}}
"""
import json
import os
import sys
from typing import Optional

import requests

from catup.config import FCM_ENDPOINT, FCM_ICON_URL, FCM_TIMEOUT_SECONDS
from catup.notify.models import ReminderMessage


class FcmClient:
    """サーバーキーで 1 トークンずつ送る。失敗は例外にせず (False, 理由) で返す。"""

    def __init__(
        self,
        server_key: Optional[str] = None,
        endpoint: str = FCM_ENDPOINT,
        timeout: float = FCM_TIMEOUT_SECONDS,
    ):
        self.server_key = server_key or os.environ.get("FIREBASE_SERVER_KEY", "").strip()
        self.endpoint = endpoint
        self.timeout = timeout

    def build_payload(self, token: str, message: ReminderMessage) -> dict:
        return {
            "to": token,
            "notification": {
                "title": message.title,
                "body": message.body,
                "icon": message.icon or FCM_ICON_URL,
            },
        }

    def send(self, token: str, message: ReminderMessage) -> tuple[bool, Optional[str]]:
        """1 台に送る。成功なら (True, None)、失敗なら (False, 理由)。"""
        if not self.server_key:
            return False, "FIREBASE_SERVER_KEY が未設定です"
        headers = {
            "Content-Type": "application/json",
            "Authorization": f"key={self.server_key}",
        }
        body = json.dumps(self.build_payload(token, message), ensure_ascii=False)
        try:
            r = requests.post(self.endpoint, headers=headers, data=body.encode("utf-8"), timeout=self.timeout)
        except requests.RequestException as e:
            err = f"送信失敗: {e}"
            print(f"[にゃるほど-通知] {err}", file=sys.stderr, flush=True)
            return False, err
        if r.status_code != 200:
            err = f"HTTP {r.status_code}: {r.text[:200]}"
            print(f"[にゃるほど-通知] {err}", file=sys.stderr, flush=True)
            return False, err
        try:
            data = r.json()
        except ValueError:
            return True, None
        # 200 でもトークン単位の失敗は failure に入る
        if isinstance(data, dict) and data.get("failure"):
            results = data.get("results") or [{}]
            reason = results[0].get("error", "unknown") if isinstance(results[0], dict) else "unknown"
            err = f"FCM エラー: {reason}"
            print(f"[にゃるほど-通知] {err}", file=sys.stderr, flush=True)
            return False, err
        return True, None
