from datetime import datetime
from typing import Any
from urllib.parse import quote

import requests
from aws_lambda_powertools import Logger

from errors import UpstreamLookupError

from .base import OnCallProvider, Rotation, format_instant


logger = Logger(child=True)


class OpsgenieProvider(OnCallProvider):
    """
    Looks up on-call recipients by schedule name.

    Opsgenie recipients are Opsgenie usernames (usually e-mail addresses), so
    each one is mapped to a chat username through a user detail field, with
    the user's full name as the fallback.
    """

    OPSGENIE_API_BASE = "https://api.opsgenie.com"

    def __init__(
        self,
        api_key: str,
        username_detail: str = "mattermost_username",
        api_url: str = OPSGENIE_API_BASE,
        timeout: float = 10.0,
    ):
        self._api_url = api_url.rstrip("/")
        self._username_detail = username_detail
        self._timeout = timeout
        self._session = requests.Session()
        self._session.headers.update({"Authorization": f"GenieKey {api_key}"})

    @property
    def name(self) -> str:
        return "opsgenie"

    def resolve(self, rotation: Rotation, at: datetime) -> str:
        instant = format_instant(at)
        try:
            data = self._get(
                f"/v2/schedules/{quote(rotation.identifier, safe='')}/on-calls",
                params={"scheduleIdentifierType": "name", "flat": "true", "date": instant},
            )
        except (requests.RequestException, ValueError, AttributeError) as e:
            logger.error("Opsgenie on-call lookup failed", extra={"schedule": rotation.identifier, "error": str(e)})
            raise UpstreamLookupError(f"Opsgenie on-call lookup for {rotation.identifier} failed: {e}") from e

        recipients = data.get("onCallRecipients") or []
        if isinstance(recipients, list) and recipients and not isinstance(recipients[0], str):
            raise UpstreamLookupError(f"Unexpected Opsgenie on-call recipient {recipients[0]!r}")
        if not isinstance(recipients, list) or not recipients:
            raise UpstreamLookupError(
                f"No {rotation.role.value} on-call found in schedule {rotation.identifier} at {instant}"
            )

        username = self._username_for(recipients[0])
        logger.info("Resolved on-call user", extra={"role": rotation.role.value, "at": instant, "username": username})
        return username

    def _username_for(self, recipient: str) -> str:
        try:
            user = self._get(f"/v2/users/{quote(recipient, safe='')}")
        except (requests.RequestException, ValueError, AttributeError) as e:
            logger.warning(
                "Opsgenie user lookup failed, using recipient as username",
                extra={"recipient": recipient, "error": str(e)},
            )
            return recipient

        details = user.get("details")
        values = details.get(self._username_detail) if isinstance(details, dict) else None
        if isinstance(values, list) and values and isinstance(values[0], str):
            return values[0]
        full_name = user.get("fullName")
        return full_name if isinstance(full_name, str) and full_name else recipient

    def _get(self, path: str, params: dict[str, Any] | None = None) -> dict[str, Any]:
        response = self._session.get(f"{self._api_url}{path}", params=params, timeout=self._timeout)
        response.raise_for_status()
        data = response.json().get("data") or {}
        if not isinstance(data, dict):
            raise ValueError(f"Unexpected Opsgenie payload data {data!r}")
        return data
