from abc import ABC, abstractmethod
from datetime import datetime, timezone
from enum import Enum

from pydantic import BaseModel


class Role(str, Enum):
    PRIMARY = "primary"
    SECONDARY = "secondary"


class Rotation(BaseModel):
    identifier: str
    role: Role

    model_config = {"frozen": True}


def to_chat_username(display_name: str) -> str:
    """'Jane Doe' -> 'jane.doe'"""
    return display_name.lower().replace(" ", ".")


def format_instant(at: datetime) -> str:
    if at.tzinfo is None:
        at = at.replace(tzinfo=timezone.utc)
    return at.astimezone(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ")


class OnCallProvider(ABC):
    @property
    @abstractmethod
    def name(self) -> str:
        pass

    @abstractmethod
    def resolve(self, rotation: Rotation, at: datetime) -> str:
        """Return the chat username of whoever is on call for `rotation` at `at`."""
        pass
