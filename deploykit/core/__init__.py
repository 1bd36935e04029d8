"""Core functionality for deploykit."""

from deploykit.core.events import Event, EventBus
from deploykit.core.exceptions import (
    ConfigurationError,
    DeployKitError,
    DeploymentInProgress,
    InvalidTarget,
    NotificationTimeout,
    NoUsableBackup,
    ProcessExecutionError,
    RemoteApiError,
    TaskFailed,
    UntrustedBackupHost,
    UserAborted,
)
from deploykit.core.leases import Lease, LeaseManager

__all__ = [
    "Event",
    "EventBus",
    "ConfigurationError",
    "DeployKitError",
    "DeploymentInProgress",
    "InvalidTarget",
    "NotificationTimeout",
    "NoUsableBackup",
    "ProcessExecutionError",
    "RemoteApiError",
    "TaskFailed",
    "UntrustedBackupHost",
    "UserAborted",
    "Lease",
    "LeaseManager",
]
