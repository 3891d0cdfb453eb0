import logging
from typing import Optional
import requests

from foodgo.configuration.settings import Configuration

CANCELLED_MESSAGE = "Your last order has been cancelled"


class NotificationRelay:
    """Fire-and-forget relay of terminal order events to the n8n webhook."""

    def __init__(self, webhook_url: Optional[str] = None, timeout: Optional[float] = None, http=None):
        configuration = Configuration()
        self.webhook_url = webhook_url if webhook_url is not None else configuration.order_webhook_url
        self.timeout = timeout if timeout is not None else configuration.webhook_timeout_seconds
        self.http = http or requests

    def notify_delivered(self, user_name: str, order_summary: str) -> bool:
        return self._send(user_name, order_summary)

    def notify_cancelled(self, user_name: str) -> bool:
        return self._send(user_name, CANCELLED_MESSAGE)

    def _send(self, user_name: str, order_name: str) -> bool:
        if not self.webhook_url:
            logging.info("NOTIFY >>> No webhook configured, skipping notification")
            return False

        payload = {"user_name": user_name or "", "order_name": order_name or ""}
        try:
            response = self.http.post(self.webhook_url, json=payload, timeout=self.timeout)
            if response.status_code >= 400:
                logging.warning(f"NOTIFY >>> Webhook answered with status -> {response.status_code}")
                return False
            logging.info(f"NOTIFY >>> Webhook sent -> {payload}")
            return True
        except requests.RequestException as e:
            logging.error(f"NOTIFY >>> Error sending order to webhook -> {e}")
            return False
