"""Locating and creating database backups."""

from deploykit.config import settings
from deploykit.core.exceptions import NoUsableBackup, RemoteApiError, UntrustedBackupHost
from deploykit.models.backup import BackupRecord
from deploykit.models.environment import TargetEnvironment
from deploykit.services.acquia import AcquiaClient
from deploykit.utils.logging import get_logger

BACKUP_ACKNOWLEDGEMENT = "Creating the backup."


def select_latest(records: list[BackupRecord], backup_type: str | None = None) -> BackupRecord | None:
    """Most recent completed backup, optionally restricted to one type.

    The API lists newest first, but the ordering is not part of its contract,
    so records are compared by completion time instead.
    """
    candidates = [
        record
        for record in records
        if record.is_completed and (backup_type is None or record.type == backup_type)
    ]
    if not candidates:
        return None
    return max(candidates, key=lambda record: record.completed_at)


class BackupLocator:
    """Find the newest usable backup of an environment and resolve its URL."""

    def __init__(self, client: AcquiaClient, database: str | None = None):
        self.client = client
        self.database = database or settings.database_name
        self.logger = get_logger("backups")

    def latest_backup(self, env: TargetEnvironment, backup_type: str | None = None) -> str:
        """Return a signed download URL for the newest matching backup.

        Raises:
            NoUsableBackup: No completed backup of the requested type exists.
            UntrustedBackupHost: The download link is not on the cloud API.
        """
        records = self.client.list_backups(env.uuid, self.database)
        backup = select_latest(records, backup_type)
        if backup is None or not backup.download_url:
            raise NoUsableBackup(env.name, backup_type)

        self.logger.info(
            "backups.latest_found",
            environment=env.name,
            backup_id=backup.id,
            type=backup.type,
            completed_at=backup.completed_at,
        )

        url = backup.download_url
        base_uri = self.client.base_uri
        if not url.startswith(base_uri + "/"):
            raise UntrustedBackupHost(url)

        location = self.client.redirect_location(url[len(base_uri):])
        if not location:
            raise RemoteApiError("Acquia", "backup download link did not redirect to a file")

        return location.replace(settings.backup_platform_host, settings.backup_public_host)

    def create_backup(self, env: TargetEnvironment) -> None:
        """Start an on-demand backup of the environment's database."""
        body = self.client.create_backup(env.uuid, self.database)
        if body.get("message") != BACKUP_ACKNOWLEDGEMENT:
            raise RemoteApiError("Acquia", "failed to create a backup")
        self.logger.info("backups.created", environment=env.name)
