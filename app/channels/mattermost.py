from typing import Any

import requests
from aws_lambda_powertools import Logger

from errors import NotificationError

from .base import BaseChannel, Notification


logger = Logger(child=True)


class MattermostWebhookChannel(BaseChannel):
    def __init__(self, webhook_url: str, title_link: str = "", timeout: float = 10.0):
        self._webhook_url = webhook_url
        self._title_link = title_link
        self._timeout = timeout

    @property
    def name(self) -> str:
        return "mattermost"

    def send(self, notification: Notification) -> None:
        payload = self._build_payload(notification)

        try:
            response = requests.post(
                self._webhook_url,
                json=payload,
                headers={"X-Custom-Header": "aws-sns", "Content-Type": "application/json"},
                timeout=self._timeout,
            )
            response.raise_for_status()
        except requests.RequestException as e:
            logger.error("Failed to send Mattermost message", extra={"title": notification.title, "error": str(e)})
            raise NotificationError(f"Failed to send {notification.title!r} notification: {e}") from e

        logger.info("Mattermost message sent successfully", extra={"title": notification.title})

    def _build_payload(self, notification: Notification) -> dict[str, Any]:
        fields: list[dict[str, Any]] = [{"title": notification.heading, "short": False}]
        fields.extend(
            {"title": p.role, "value": f"@{p.username}", "short": True} for p in notification.participants
        )
        if notification.footer:
            fields.append({"value": notification.footer, "short": False})

        attachment: dict[str, Any] = {
            "fallback": notification.format_for_text(),
            "title": notification.title,
            "color": notification.color,
            "fields": fields,
        }
        if self._title_link:
            attachment["title_link"] = self._title_link

        return {
            "username": notification.bot_username,
            "icon_url": notification.icon_url,
            "attachments": [attachment],
        }
