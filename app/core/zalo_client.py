# app/core/zalo_client.py
"""
Zalo Official Account client.

Pushes a plain-text message to one OA follower (the shop admin):

    POST {ZALO_API_BASE}/oa/message/push
    headers: access_token: <OA token>
    body:    {"recipient": {"user_id": ...}, "message": {"text": ...}}
"""

import requests

from app.core.config import Settings, get_settings


class ZaloClient:
    def __init__(self, settings: Settings | None = None, session: requests.Session | None = None):
        self.settings = settings or get_settings()
        self.http = session or requests.Session()

    @property
    def is_configured(self) -> bool:
        return bool(
            self.settings.ZALO_OA_ACCESS_TOKEN and self.settings.ADMIN_ZALO_USER_ID
        )

    def push_text(self, text: str, user_id: str | None = None) -> dict:
        """
        Send `text` to `user_id` (defaults to ADMIN_ZALO_USER_ID).

        Raises:
            RuntimeError: if the OA token / recipient is not configured,
                or Zalo answers with a non-zero `error` code.
            requests.RequestException: on transport or HTTP errors.
        """
        recipient = user_id or self.settings.ADMIN_ZALO_USER_ID
        if not (self.settings.ZALO_OA_ACCESS_TOKEN and recipient):
            raise RuntimeError(
                "Zalo OA is not configured. "
                "Please set ZALO_OA_ACCESS_TOKEN and ADMIN_ZALO_USER_ID in .env."
            )

        resp = self.http.post(
            f"{self.settings.ZALO_API_BASE.rstrip('/')}/oa/message/push",
            headers={
                "access_token": self.settings.ZALO_OA_ACCESS_TOKEN,
                "Content-Type": "application/json",
            },
            json={
                "recipient": {"user_id": recipient},
                "message": {"text": text},
            },
            timeout=self.settings.ZALO_TIMEOUT_SECONDS,
        )
        resp.raise_for_status()

        data = resp.json()
        # Zalo reports API-level failures with HTTP 200 and error != 0
        if data.get("error", 0) != 0:
            raise RuntimeError(f"Zalo OA error {data.get('error')}: {data.get('message')}")
        return data
