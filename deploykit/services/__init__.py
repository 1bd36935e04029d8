"""Clients for the services a deployment talks to."""

from deploykit.services.acquia import AcquiaClient, task_id_from_href
from deploykit.services.backups import BackupLocator, select_latest
from deploykit.services.circleci import CircleCIClient
from deploykit.services.newrelic import NewRelicNotifier
from deploykit.services.notifications import NotificationWaiter
from deploykit.services.remote import LocalShell, RemoteShell
from deploykit.services.tugboat import TugboatClient

__all__ = [
    "AcquiaClient",
    "task_id_from_href",
    "BackupLocator",
    "select_latest",
    "CircleCIClient",
    "NewRelicNotifier",
    "NotificationWaiter",
    "LocalShell",
    "RemoteShell",
    "TugboatClient",
]
