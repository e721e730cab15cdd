import requests
from aws_lambda_powertools import Logger

from errors import ReconciliationError
from mattermost import MattermostClient


logger = Logger(child=True)


def same_members(current: list[str], target: list[str]) -> bool:
    """Unordered comparison that counts duplicates instead of collapsing them."""
    if len(current) != len(target):
        return False
    remaining = list(target)
    for member in current:
        if member not in remaining:
            return False
        remaining.remove(member)
    return True


class GroupReconciler:
    def __init__(self, client: MattermostClient, page_size: int = 100):
        self._client = client
        self._page_size = page_size

    def reconcile(self, group_id: str, usernames: list[str]) -> bool:
        """Make `usernames` the exact membership of `group_id`. Returns True when the group was changed."""
        # A person holding two slots is one member.
        target_ids = list(dict.fromkeys(self._user_id(group_id, username) for username in usernames))

        try:
            members = self._client.get_group_members(group_id, per_page=self._page_size)
        except requests.RequestException as e:
            raise ReconciliationError(f"Unable to list members of group {group_id}: {e}") from e

        try:
            current_ids = [member["id"] for member in members]
        except (KeyError, TypeError) as e:
            raise ReconciliationError(f"Unexpected member listing for group {group_id}: {e!r}") from e
        logger.info(
            "Current group members",
            extra={"group_id": group_id, "members": [m.get("username") for m in members]},
        )

        if same_members(current_ids, target_ids):
            logger.info("Group is already synced", extra={"group_id": group_id})
            return False

        if current_ids:
            logger.info("Cleaning existing group members", extra={"group_id": group_id, "count": len(current_ids)})
            try:
                self._client.remove_group_members(group_id, current_ids)
            except requests.RequestException as e:
                raise ReconciliationError(f"Unable to remove members of group {group_id}: {e}") from e

        logger.info("Setting group members", extra={"group_id": group_id, "usernames": usernames})
        try:
            self._client.add_group_members(group_id, target_ids)
        except requests.RequestException as e:
            if current_ids:
                logger.error("Group left without its previous members", extra={"group_id": group_id})
            raise ReconciliationError(f"Unable to set members of group {group_id}: {e}") from e

        return True

    def _user_id(self, group_id: str, username: str) -> str:
        try:
            return self._client.get_user_id(username)
        except (requests.RequestException, KeyError, TypeError) as e:
            raise ReconciliationError(
                f"Unable to get Mattermost user {username!r} for group {group_id}: {e}"
            ) from e
