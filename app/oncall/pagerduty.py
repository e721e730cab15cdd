from datetime import datetime
from typing import Any
from urllib.parse import quote

import requests
from aws_lambda_powertools import Logger

from errors import UpstreamLookupError

from .base import OnCallProvider, Rotation, format_instant, to_chat_username


logger = Logger(child=True)


class PagerDutyProvider(OnCallProvider):
    PAGERDUTY_API_BASE = "https://api.pagerduty.com"

    def __init__(self, api_key: str, api_url: str = PAGERDUTY_API_BASE, timeout: float = 10.0):
        self._api_url = api_url.rstrip("/")
        self._timeout = timeout
        self._session = requests.Session()
        self._session.headers.update(
            {
                "Authorization": f"Token token={api_key}",
                "Accept": "application/vnd.pagerduty+json;version=2",
            }
        )

    @property
    def name(self) -> str:
        return "pagerduty"

    def resolve(self, rotation: Rotation, at: datetime) -> str:
        instant = format_instant(at)
        payload = self._get(
            "/oncalls",
            params={"since": instant, "until": instant, "schedule_ids[]": rotation.identifier},
        )

        try:
            oncalls = payload.get("oncalls") or []
            user_id = oncalls[0]["user"]["id"] if oncalls else None
        except (KeyError, TypeError, AttributeError) as e:
            raise UpstreamLookupError(f"Unexpected PagerDuty on-call payload: {e!r}") from e

        if not oncalls:
            raise UpstreamLookupError(
                f"No {rotation.role.value} on-call found in schedule {rotation.identifier} at {instant}"
            )

        try:
            user = self._get(f"/users/{quote(str(user_id), safe='')}")["user"]
            name = user["name"]
        except (KeyError, TypeError) as e:
            raise UpstreamLookupError(f"Unexpected PagerDuty user payload for {user_id}: {e!r}") from e
        if not isinstance(name, str) or not name:
            raise UpstreamLookupError(f"PagerDuty user {user_id} has no name")

        logger.info(
            "Resolved on-call user",
            extra={"role": rotation.role.value, "at": instant, "user_name": name, "email": user.get("email")},
        )
        return to_chat_username(name)

    def _get(self, path: str, params: dict[str, Any] | None = None) -> dict[str, Any]:
        try:
            response = self._session.get(f"{self._api_url}{path}", params=params, timeout=self._timeout)
            response.raise_for_status()
            return response.json()
        except (requests.RequestException, ValueError) as e:
            logger.error("PagerDuty request failed", extra={"path": path, "error": str(e)})
            raise UpstreamLookupError(f"PagerDuty request {path} failed: {e}") from e
