"""Database backup models."""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field, field_validator


class BackupRecord(BaseModel):
    """A database backup listed by the cloud API."""

    id: int | str
    type: str = Field(..., description="ondemand or daily")
    completed_at: float = Field(default=0, description="Completion time as a Unix timestamp, 0 while running")
    download_url: str | None = None

    @field_validator("completed_at", mode="before")
    @classmethod
    def _parse_completed_at(cls, value: Any) -> float:
        """Accept ISO-8601 strings, epoch numbers or empty values."""
        if value in (None, ""):
            return 0
        if isinstance(value, str):
            try:
                return float(value)
            except ValueError:
                return datetime.fromisoformat(value.replace("Z", "+00:00")).timestamp()
        return value

    @property
    def is_completed(self) -> bool:
        return self.completed_at > 0

    @classmethod
    def from_api(cls, item: dict[str, Any]) -> "BackupRecord":
        """Build a record from a ``_embedded.items`` entry."""
        links = item.get("_links") or {}
        download = links.get("download") or {}
        return cls(
            id=item["id"],
            type=item.get("type", ""),
            completed_at=item.get("completed_at") or item.get("completedAt"),
            download_url=download.get("href"),
        )
