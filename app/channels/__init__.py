from .base import BaseChannel, Notification, Participant
from .mattermost import MattermostWebhookChannel


__all__ = [
    "BaseChannel",
    "Notification",
    "Participant",
    "MattermostWebhookChannel",
]
