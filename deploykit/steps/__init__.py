"""Deployment steps run by the orchestrator."""

from deploykit.steps.base import BaseStep
from deploykit.steps.database_refresh import DatabaseRefreshStep
from deploykit.steps.maintenance import MaintenanceMode
from deploykit.steps.runtime_version import RuntimeVersionStep
from deploykit.steps.selective_purge import SelectivePurgeStep

__all__ = [
    "BaseStep",
    "DatabaseRefreshStep",
    "MaintenanceMode",
    "RuntimeVersionStep",
    "SelectivePurgeStep",
]
