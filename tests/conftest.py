"""Pytest configuration and fixtures."""

from typing import Any, Sequence

import pytest

from deploykit.core.events import Event, EventBus
from deploykit.core.exceptions import ProcessExecutionError
from deploykit.core.leases import LeaseManager
from deploykit.models.backup import BackupRecord
from deploykit.models.environment import SiteAliases, TargetEnvironment
from deploykit.models.notification import Notification
from deploykit.services.notifications import NotificationWaiter

ACQUIA_BASE = "https://cloud.acquia.com/api"


class FakeShell:
    """Stand-in for RemoteShell that records every command.

    ``calls`` holds ``("drush", target, command, args)``,
    ``("run", target, argv)`` and ``("script", target, script)`` tuples.
    Output for Drush commands comes from ``outputs``; commands listed in
    ``failing`` raise ProcessExecutionError.
    """

    def __init__(self, outputs: dict[str, str] | None = None, failing: set[str] | None = None):
        self.outputs = outputs or {}
        self.failing = failing or set()
        self.calls: list[tuple[Any, ...]] = []

    def _maybe_fail(self, key: str) -> None:
        if key in self.failing:
            raise ProcessExecutionError(key, 1, "boom")

    def drush(
        self,
        env: TargetEnvironment,
        command: str,
        args: Sequence[str] = (),
        options: dict[str, Any] | None = None,
        stream: bool = False,
    ) -> str:
        self.calls.append(("drush", env.name, command, tuple(args)))
        self._maybe_fail(command)
        return self.outputs.get(command, "")

    def run(self, env: TargetEnvironment, argv: Sequence[str], stream: bool = False) -> str:
        self.calls.append(("run", env.name, tuple(argv)))
        self._maybe_fail(argv[0])
        return ""

    def run_script(self, env: TargetEnvironment, script: str, stream: bool = False) -> str:
        self.calls.append(("script", env.name, script))
        self._maybe_fail(script.split()[0])
        return ""

    def commands(self) -> list[str]:
        """Drush command names and argv[0]s in call order."""
        names = []
        for call in self.calls:
            if call[0] == "drush":
                names.append(call[2])
            elif call[0] == "run":
                names.append(call[2][0])
            else:
                names.append(call[2].split()[0])
        return names


class FakeAcquia:
    """Stand-in for AcquiaClient with scripted responses."""

    base_uri = ACQUIA_BASE

    def __init__(
        self,
        statuses: list[str] | None = None,
        php_version: str = "8.2",
        backups: list[BackupRecord] | None = None,
        location: str | None = "https://massgov.prod.acquia-sites.com/backup.sql.gz?sig=1",
    ):
        self.statuses = list(statuses or ["completed"])
        self.php_version = php_version
        self.backups = backups if backups is not None else []
        self.location = location
        self.calls: list[tuple[Any, ...]] = []
        self.closed = False

    def get_notification(self, uuid: str) -> Notification:
        self.calls.append(("get_notification", uuid))
        status = self.statuses.pop(0) if len(self.statuses) > 1 else self.statuses[0]
        return Notification(uuid=uuid, status=status, description="Task")

    def get_php_version(self, environment_uuid: str) -> str:
        self.calls.append(("get_php_version", environment_uuid))
        return self.php_version

    def update_environment(self, environment_uuid: str, changes: dict[str, Any]) -> str:
        self.calls.append(("update_environment", environment_uuid, changes))
        self.php_version = changes.get("version", self.php_version)
        return "task-update"

    def switch_code(self, environment_uuid: str, git_ref: str) -> str:
        self.calls.append(("switch_code", environment_uuid, git_ref))
        return "task-switch"

    def list_backups(self, environment_uuid: str, database: str) -> list[BackupRecord]:
        self.calls.append(("list_backups", environment_uuid, database))
        return self.backups

    def redirect_location(self, path: str) -> str | None:
        self.calls.append(("redirect_location", path))
        return self.location

    def create_backup(self, environment_uuid: str, database: str) -> dict[str, Any]:
        self.calls.append(("create_backup", environment_uuid, database))
        return {"message": "Creating the backup."}

    def names(self) -> list[str]:
        return [call[0] for call in self.calls]

    def close(self) -> None:
        self.closed = True


class FakeNotifier:
    def __init__(self, result: bool = True):
        self.result = result
        self.revisions: list[str] = []

    def record_deployment(self, git_ref: str) -> bool:
        self.revisions.append(git_ref)
        return self.result


@pytest.fixture
def prod_env() -> TargetEnvironment:
    return TargetEnvironment(name="prod", uuid="uuid-prod", root="/var/www/html/prod/docroot", host="prod@ssh")


@pytest.fixture
def test_env() -> TargetEnvironment:
    return TargetEnvironment(name="test", uuid="uuid-test", root="/var/www/html/test/docroot", host="test@ssh")


@pytest.fixture
def aliases(prod_env: TargetEnvironment, test_env: TargetEnvironment) -> SiteAliases:
    return SiteAliases(environments={"prod": prod_env, "test": test_env})


@pytest.fixture
def fake_shell() -> FakeShell:
    return FakeShell(outputs={"state:get": "0", "sql:query": "11\n22\n"})


@pytest.fixture
def fake_acquia() -> FakeAcquia:
    return FakeAcquia(
        backups=[
            BackupRecord(
                id=1,
                type="daily",
                completed_at=1_700_000_000,
                download_url=f"{ACQUIA_BASE}/environments/uuid-prod/databases/massgov/backups/1/actions/download",
            )
        ]
    )


@pytest.fixture
def fake_notifier() -> FakeNotifier:
    return FakeNotifier()


@pytest.fixture
def make_waiter():
    """Build a waiter that never actually sleeps."""

    def _make(client: Any, max_attempts: int = 10) -> NotificationWaiter:
        return NotificationWaiter(client, interval=0, max_attempts=max_attempts, sleep=lambda _: None)

    return _make


@pytest.fixture
def leases(tmp_path) -> LeaseManager:
    return LeaseManager(lock_dir=tmp_path / "locks", ttl_minutes=60)


@pytest.fixture
def recorded_events() -> tuple[EventBus, list[Event]]:
    bus = EventBus()
    events: list[Event] = []
    bus.subscribe(events.append)
    return bus, events


@pytest.fixture
def shell_factory():
    return FakeShell


@pytest.fixture
def acquia_factory():
    return FakeAcquia
