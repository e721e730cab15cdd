from .base import OnCallProvider, Role, Rotation, to_chat_username
from .opsgenie import OpsgenieProvider
from .pagerduty import PagerDutyProvider


__all__ = [
    "OnCallProvider",
    "Role",
    "Rotation",
    "to_chat_username",
    "PagerDutyProvider",
    "OpsgenieProvider",
]
