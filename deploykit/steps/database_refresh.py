"""Copying the production database onto a lower environment."""

import posixpath
import shlex
import time
from typing import Any, Callable

from deploykit.config import settings
from deploykit.core.exceptions import InvalidTarget
from deploykit.models.deployment import DeploymentRequest
from deploykit.models.environment import TargetEnvironment
from deploykit.services.backups import BackupLocator
from deploykit.services.remote import RemoteShell
from deploykit.steps.base import BaseStep


class DatabaseRefreshStep(BaseStep):
    """Replace a non-production database with the latest production backup.

    Steps: resolve the backup URL, download it on the target (resuming a
    partial file), drop all tables, import the dump, remove the dump. The
    dump is removed whenever the download was attempted, even if a later
    step failed.
    """

    def __init__(
        self,
        locator: BackupLocator,
        shell: RemoteShell,
        source: TargetEnvironment,
        tmp_dir: str | None = None,
        clock: Callable[[], float] = time.time,
    ):
        super().__init__()
        self.locator = locator
        self.shell = shell
        self.source = source
        self.tmp_dir = tmp_dir or settings.backup_tmp_dir
        self.clock = clock

    @property
    def name(self) -> str:
        return "db_refresh"

    @property
    def description(self) -> str:
        return "Copy the production database to the target"

    def dump_path(self) -> str:
        return posixpath.join(self.tmp_dir, f"{int(self.clock())}-db-backup.sql.gz")

    def refresh(self, target: TargetEnvironment) -> str:
        """Refresh ``target`` from the source backup. Returns the dump path used."""
        if target.is_production:
            raise InvalidTarget(target.name, reason="The production database is never refreshed.")

        url = self.locator.latest_backup(self.source)
        self.logger.info("db_refresh.backup_url_retrieved", source=self.source.name)

        dump = self.dump_path()
        try:
            self.shell.run(
                target,
                ["wget", "-q", "--continue", url.strip(), f"--output-document={dump}"],
                stream=True,
            )
            self.logger.info("db_refresh.downloaded", target=target.name, path=dump)

            self.shell.drush(target, "sql:drop", options={"yes": True})
            self.logger.info("db_refresh.tables_dropped", target=target.name)

            self.shell.run(target, ["../scripts/ma-import-backup", dump])
            self.logger.info("db_refresh.imported", target=target.name)
        except Exception:
            self._cleanup_after_failure(target, dump)
            raise

        self._cleanup(target, dump)
        return dump

    def _cleanup(self, target: TargetEnvironment, dump: str) -> None:
        quoted = shlex.quote(dump)
        self.shell.run_script(target, f"test ! -f {quoted} || rm {quoted}")
        self.logger.info("db_refresh.tmp_deleted", target=target.name, path=dump)

    def _cleanup_after_failure(self, target: TargetEnvironment, dump: str) -> None:
        try:
            self._cleanup(target, dump)
        except Exception as cleanup_error:
            self.logger.error(
                "db_refresh.cleanup_failed",
                target=target.name,
                path=dump,
                error=str(cleanup_error),
            )

    def execute(self, request: DeploymentRequest) -> dict[str, Any]:
        dump = self.refresh(request.target)
        return {"source": self.source.name, "dump": dump}
