"""Outbound messaging: FCM push and Twilio WhatsApp over plain HTTP.

Each call is a single best-effort attempt. Nothing is queued or retried;
failures are reported to the caller.
"""
import logging
from dataclasses import dataclass
from typing import Optional

import httpx

from minyan.config import Settings, settings
from minyan.errors import NotificationConfigError, NotificationError

logger = logging.getLogger(__name__)


@dataclass
class PushResult:
    success_count: int
    failure_count: int


class NotificationService:
    """Thin client for the push and WhatsApp gateways."""

    FCM_URL = "https://fcm.googleapis.com/v1/projects/{project_id}/messages:send"
    TWILIO_URL = "https://api.twilio.com/2010-04-01/Accounts/{account_sid}/Messages.json"

    def __init__(self, config: Settings = settings, client: Optional[httpx.Client] = None):
        self._settings = config
        self._client = client or httpx.Client(timeout=config.NOTIFICATION_TIMEOUT_SECONDS)

    def send_push(
        self,
        tokens: list[str],
        title: str,
        body: str,
        data: Optional[dict[str, str]] = None,
    ) -> PushResult:
        """Send one message per device token and count the outcomes.

        A rejected or unreachable token counts as a failure; it does not abort the rest.
        """
        if not self._settings.FCM_PROJECT_ID or not self._settings.FCM_ACCESS_TOKEN:
            raise NotificationConfigError("Push configuration missing")

        url = self.FCM_URL.format(project_id=self._settings.FCM_PROJECT_ID)
        headers = {"Authorization": f"Bearer {self._settings.FCM_ACCESS_TOKEN}"}
        success = failure = 0
        for token in tokens:
            message = {
                "message": {
                    "token": token,
                    "notification": {"title": title, "body": body},
                    "data": data or {},
                }
            }
            try:
                response = self._client.post(url, json=message, headers=headers)
            except httpx.HTTPError as exc:
                logger.warning("Push to token %s... failed: %s", token[:8], exc)
                failure += 1
                continue
            if response.is_success:
                success += 1
            else:
                logger.warning("Push to token %s... rejected with HTTP %d", token[:8], response.status_code)
                failure += 1

        logger.info("Push '%s' sent: %d succeeded, %d failed", title, success, failure)
        return PushResult(success_count=success, failure_count=failure)

    def send_whatsapp(self, phone_number: str, message: str) -> str:
        """Send a WhatsApp message and return the gateway's message SID."""
        cfg = self._settings
        if not cfg.TWILIO_ACCOUNT_SID or not cfg.TWILIO_AUTH_TOKEN or not cfg.TWILIO_WHATSAPP_FROM:
            raise NotificationConfigError("Twilio configuration missing")

        to = phone_number if phone_number.startswith("whatsapp:") else f"whatsapp:{phone_number}"
        url = self.TWILIO_URL.format(account_sid=cfg.TWILIO_ACCOUNT_SID)
        try:
            response = self._client.post(
                url,
                data={"From": cfg.TWILIO_WHATSAPP_FROM, "To": to, "Body": message},
                auth=(cfg.TWILIO_ACCOUNT_SID, cfg.TWILIO_AUTH_TOKEN),
            )
            response.raise_for_status()
        except httpx.HTTPError as exc:
            logger.error("WhatsApp message to %s failed: %s", to, exc)
            raise NotificationError("Failed to send WhatsApp message") from exc

        sid = response.json().get("sid")
        logger.info("WhatsApp message %s sent to %s", sid, to)
        return sid


_service: Optional[NotificationService] = None


def get_notification_service() -> NotificationService:
    """FastAPI dependency; one shared HTTP client per process."""
    global _service
    if _service is None:
        _service = NotificationService()
    return _service
