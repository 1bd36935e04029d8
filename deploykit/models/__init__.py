"""Data models for deploykit."""

from deploykit.models.backup import BackupRecord
from deploykit.models.deployment import (
    DeploymentOptions,
    DeploymentRequest,
    DeploymentRun,
    DeploymentStatus,
    PhaseInfo,
    PhaseStatus,
    PipelineResult,
    PurgeTargets,
)
from deploykit.models.environment import (
    PRODUCTION,
    TARGET_LIST,
    TUGBOAT_TARGET,
    SiteAliases,
    TargetEnvironment,
    validate_target,
)
from deploykit.models.notification import Notification, NotificationStatus

__all__ = [
    "BackupRecord",
    "DeploymentOptions",
    "DeploymentRequest",
    "DeploymentRun",
    "DeploymentStatus",
    "PhaseInfo",
    "PhaseStatus",
    "PipelineResult",
    "PurgeTargets",
    "PRODUCTION",
    "TARGET_LIST",
    "TUGBOAT_TARGET",
    "SiteAliases",
    "TargetEnvironment",
    "validate_target",
    "Notification",
    "NotificationStatus",
]
