"""Unit tests for the backup locator."""

import pytest

from deploykit.core.exceptions import NoUsableBackup, RemoteApiError, UntrustedBackupHost
from deploykit.models.backup import BackupRecord
from deploykit.services.backups import BackupLocator, select_latest

BASE = "https://cloud.acquia.com/api"


def _record(id: int, type: str, completed_at: float) -> BackupRecord:
    return BackupRecord(
        id=id,
        type=type,
        completed_at=completed_at,
        download_url=f"{BASE}/environments/uuid-prod/databases/massgov/backups/{id}/actions/download",
    )


class TestSelectLatest:
    """Tests for select_latest."""

    @pytest.fixture
    def records(self) -> list[BackupRecord]:
        return [
            _record(1, "daily", 100),
            _record(2, "ondemand", 300),
            _record(3, "daily", 200),
            _record(4, "daily", 0),
        ]

    def test_greatest_completion_time(self, records):
        assert select_latest(records).id == 2

    def test_filtered_by_type(self, records):
        assert select_latest(records, "daily").id == 3

    def test_ignores_order_of_listing(self, records):
        assert select_latest(list(reversed(records)), "daily").id == 3

    def test_in_progress_never_selected(self):
        assert select_latest([_record(1, "daily", 0)]) is None

    def test_no_match(self, records):
        assert select_latest(records, "weekly") is None

    def test_empty(self):
        assert select_latest([]) is None


class TestBackupLocator:
    """Tests for BackupLocator."""

    def test_latest_backup_url(self, fake_acquia, prod_env):
        url = BackupLocator(fake_acquia, database="massgov").latest_backup(prod_env)

        # Platform host swapped for the public one
        assert url == "https://edit.mass.gov/backup.sql.gz?sig=1"
        assert ("list_backups", "uuid-prod", "massgov") in fake_acquia.calls
        assert (
            "redirect_location",
            "/environments/uuid-prod/databases/massgov/backups/1/actions/download",
        ) in fake_acquia.calls

    def test_no_usable_backup(self, acquia_factory, prod_env):
        client = acquia_factory(backups=[_record(1, "daily", 0)])

        with pytest.raises(NoUsableBackup):
            BackupLocator(client).latest_backup(prod_env)
        assert "redirect_location" not in client.names()

    def test_no_backup_of_type(self, fake_acquia, prod_env):
        with pytest.raises(NoUsableBackup) as exc_info:
            BackupLocator(fake_acquia).latest_backup(prod_env, "ondemand")
        assert exc_info.value.details["type"] == "ondemand"

    def test_untrusted_host(self, acquia_factory, prod_env):
        record = BackupRecord(id=9, type="daily", completed_at=10, download_url="https://evil.example.com/dump")
        client = acquia_factory(backups=[record])

        with pytest.raises(UntrustedBackupHost):
            BackupLocator(client).latest_backup(prod_env)
        assert "redirect_location" not in client.names()

    def test_lookalike_host_rejected(self, acquia_factory, prod_env):
        record = BackupRecord(
            id=9, type="daily", completed_at=10, download_url=f"{BASE}.evil.example.com/dump"
        )
        with pytest.raises(UntrustedBackupHost):
            BackupLocator(acquia_factory(backups=[record])).latest_backup(prod_env)

    def test_missing_redirect(self, acquia_factory, prod_env):
        client = acquia_factory(backups=[_record(1, "daily", 10)], location=None)

        with pytest.raises(RemoteApiError):
            BackupLocator(client).latest_backup(prod_env)

    def test_create_backup(self, fake_acquia, prod_env):
        BackupLocator(fake_acquia).create_backup(prod_env)
        assert fake_acquia.names() == ["create_backup"]

    def test_create_backup_not_acknowledged(self, fake_acquia, prod_env, monkeypatch):
        monkeypatch.setattr(fake_acquia, "create_backup", lambda *args: {"message": "Nope"})

        with pytest.raises(RemoteApiError):
            BackupLocator(fake_acquia).create_backup(prod_env)
