"""Cloud task notification models."""

from enum import Enum
from typing import Any

from pydantic import BaseModel, field_validator


class NotificationStatus(str, Enum):
    """Status of a long-running cloud task."""

    PENDING = "pending"
    IN_PROGRESS = "in-progress"
    COMPLETED = "completed"
    FAILED = "failed"

    @classmethod
    def from_api(cls, value: Any) -> "NotificationStatus":
        """Map an API status to a member; anything unrecognized is still running."""
        try:
            return cls(value)
        except ValueError:
            return cls.IN_PROGRESS

    @property
    def is_terminal(self) -> bool:
        return self in (NotificationStatus.COMPLETED, NotificationStatus.FAILED)


class Notification(BaseModel):
    """A long-running task handle as returned by the notifications endpoint."""

    uuid: str
    status: NotificationStatus
    description: str = ""

    @field_validator("status", mode="before")
    @classmethod
    def normalize_status(cls, v: Any) -> NotificationStatus:
        return NotificationStatus.from_api(v)
