from typing import Any
from urllib.parse import quote

import requests
from aws_lambda_powertools import Logger


logger = Logger(child=True)


class MattermostClient:
    """Thin wrapper over the Mattermost REST API v4. Errors surface as requests exceptions."""

    def __init__(self, base_url: str, bot_token: str, timeout: float = 10.0):
        self._api_url = f"{base_url.rstrip('/')}/api/v4"
        self._timeout = timeout
        self._session = requests.Session()
        self._session.headers.update(
            {
                "Authorization": f"Bearer {bot_token}",
                "Content-Type": "application/json",
            }
        )

    def get_user_id(self, username: str) -> str:
        user = self._request("GET", f"/users/username/{quote(username, safe='')}")
        return user["id"]

    def get_group_members(self, group_id: str, page: int = 0, per_page: int = 100) -> list[dict[str, Any]]:
        return self._request("GET", "/users", params={"in_group": group_id, "page": page, "per_page": per_page}) or []

    def add_group_members(self, group_id: str, user_ids: list[str]) -> None:
        self._request("POST", f"/groups/{quote(group_id, safe='')}/members", json={"user_ids": user_ids})

    def remove_group_members(self, group_id: str, user_ids: list[str]) -> None:
        self._request("DELETE", f"/groups/{quote(group_id, safe='')}/members", json={"user_ids": user_ids})

    def _request(self, method: str, path: str, **kwargs: Any) -> Any:
        response = self._session.request(method, f"{self._api_url}{path}", timeout=self._timeout, **kwargs)
        response.raise_for_status()
        return response.json() if response.content else None
