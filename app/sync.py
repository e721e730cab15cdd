import time
from collections.abc import Callable
from datetime import datetime, timedelta, timezone

from aws_lambda_powertools import Logger
from pydantic import BaseModel, Field

from channels.base import BaseChannel, Notification
from errors import RunDeadlineExceeded, SyncError
from oncall.base import OnCallProvider, Rotation
from reconciler import GroupReconciler
from support import SupportSelector


logger = Logger(child=True)


class Deadline:
    def __init__(self, seconds: float, clock: Callable[[], float] = time.monotonic):
        self._clock = clock
        self._expires_at = clock() + seconds

    def check(self, step: str) -> None:
        if self._clock() > self._expires_at:
            raise RunDeadlineExceeded(f"Run deadline exceeded before {step}")


class SyncResult(BaseModel):
    primary_now: str
    secondary_now: str
    primary_later: str
    secondary_later: str
    support: list[str] = Field(default_factory=list)
    oncall_changed: bool = False
    support_changed: bool = False


class RosterSync:
    def __init__(
        self,
        provider: OnCallProvider,
        selector: SupportSelector,
        reconciler: GroupReconciler,
        oncall_channel: BaseChannel,
        support_channel: BaseChannel,
        primary: Rotation,
        secondary: Rotation,
        oncall_group_id: str,
        support_group_id: str,
        hour_shift: int,
        run_deadline: float = 120.0,
        clock: Callable[[], float] = time.monotonic,
    ):
        self._provider = provider
        self._selector = selector
        self._reconciler = reconciler
        self._oncall_channel = oncall_channel
        self._support_channel = support_channel
        self._primary = primary
        self._secondary = secondary
        self._oncall_group_id = oncall_group_id
        self._support_group_id = support_group_id
        self._hour_shift = hour_shift
        self._run_deadline = run_deadline
        self._clock = clock

    def run(self, now: datetime | None = None) -> SyncResult:
        deadline = Deadline(self._run_deadline, self._clock)
        now = now or datetime.now(timezone.utc)
        later = now + timedelta(hours=self._hour_shift)

        lookups = [
            ("primary_now", self._primary, now),
            ("secondary_now", self._secondary, now),
            ("primary_later", self._primary, later),
            ("secondary_later", self._secondary, later),
        ]
        resolved: dict[str, str] = {}
        for key, rotation, at in lookups:
            deadline.check(f"resolving {key}")
            resolved[key] = self._provider.resolve(rotation, at)

        logger.info("Resolved on-call users", extra={"provider": self._provider.name, **resolved})

        result = SyncResult(**resolved)
        result.support = self._selector.select([result.secondary_now, result.secondary_later])

        errors: list[SyncError] = []

        deadline.check("reconciling the on-call group")
        try:
            result.oncall_changed = self._reconciler.reconcile(
                self._oncall_group_id, [result.primary_now, result.secondary_now]
            )
            if result.oncall_changed:
                self._oncall_channel.send(Notification.oncall(result.primary_now, result.secondary_now))
        except SyncError as e:
            logger.error("On-call group sync failed", extra={"group_id": self._oncall_group_id, "error": str(e)})
            errors.append(e)

        deadline.check("reconciling the support group")
        try:
            result.support_changed = self._reconciler.reconcile(self._support_group_id, result.support)
            if result.support_changed:
                self._support_channel.send(Notification.support(result.support))
        except SyncError as e:
            logger.error("Support group sync failed", extra={"group_id": self._support_group_id, "error": str(e)})
            errors.append(e)

        if errors:
            raise SyncError("; ".join(str(e) for e in errors)) from errors[0]

        logger.info("Roster sync complete", extra=result.model_dump())
        return result
