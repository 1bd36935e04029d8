"""Deployment data models."""

from datetime import datetime, timezone
from enum import Enum
from typing import Any
from uuid import UUID, uuid4

from pydantic import BaseModel, Field

from deploykit.models.environment import TargetEnvironment


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class DeploymentOptions(BaseModel):
    """Options shared by ``deploy`` and ``release``."""

    skip_maintenance: bool = False
    refresh_db: bool = False
    cache_rebuild: bool = False


class DeploymentRequest(BaseModel):
    """Everything a single deployment run needs to know up front."""

    target: TargetEnvironment
    git_ref: str = Field(..., min_length=1)
    options: DeploymentOptions = Field(default_factory=DeploymentOptions)

    @property
    def is_production(self) -> bool:
        return self.target.is_production


class DeploymentStatus(str, Enum):
    """Overall run status."""

    PENDING = "pending"
    RUNNING = "running"
    COMPLETED = "completed"
    FAILED = "failed"
    ABORTED = "aborted"


class PhaseStatus(str, Enum):
    """Individual phase status."""

    PENDING = "pending"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    FAILED = "failed"
    SKIPPED = "skipped"


class PhaseInfo(BaseModel):
    """Information about a deployment phase."""

    status: PhaseStatus = PhaseStatus.PENDING
    started_at: datetime | None = None
    completed_at: datetime | None = None
    duration_ms: int | None = None
    metadata: dict[str, Any] = Field(default_factory=dict)
    error: str | None = None


class DeploymentRun(BaseModel):
    """State of one deployment run."""

    id: UUID = Field(default_factory=uuid4)
    request: DeploymentRequest
    status: DeploymentStatus = DeploymentStatus.PENDING

    started_at: datetime = Field(default_factory=_utcnow)
    completed_at: datetime | None = None

    # Phases in the order they were entered
    current_phase: str | None = None
    phases: dict[str, PhaseInfo] = Field(default_factory=dict)

    error: str | None = None
    error_phase: str | None = None

    def update_phase(
        self,
        phase: str,
        status: PhaseStatus,
        metadata: dict[str, Any] | None = None,
        error: str | None = None,
    ) -> None:
        """Update a phase's status."""
        now = _utcnow()

        if phase not in self.phases:
            self.phases[phase] = PhaseInfo()

        phase_info = self.phases[phase]
        phase_info.status = status

        if status == PhaseStatus.IN_PROGRESS:
            phase_info.started_at = now
            self.current_phase = phase
        elif status in (PhaseStatus.COMPLETED, PhaseStatus.FAILED):
            phase_info.completed_at = now
            if phase_info.started_at:
                phase_info.duration_ms = int(
                    (now - phase_info.started_at).total_seconds() * 1000
                )
            if status == PhaseStatus.FAILED:
                phase_info.error = error
                self.error = error
                self.error_phase = phase

        if metadata:
            phase_info.metadata.update(metadata)

    def phase_order(self, include_skipped: bool = False) -> list[str]:
        """Phase names in execution order."""
        return [
            name
            for name, info in self.phases.items()
            if include_skipped or info.status != PhaseStatus.SKIPPED
        ]


class PurgeTargets(BaseModel):
    """Cache invalidations enqueued by a selective purge."""

    tags: list[str] = Field(default_factory=list)
    paths: list[str] = Field(default_factory=list)


class PipelineResult(BaseModel):
    """A CI pipeline created through the trigger API."""

    number: int
    url: str = ""
