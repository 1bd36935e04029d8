"""Unit tests for per-target deployment leases."""

import json
import os
import time
from datetime import datetime, timedelta, timezone

import pytest

from deploykit.core.exceptions import DeploymentInProgress
from deploykit.core.leases import LeaseManager


class TestLeaseManager:
    """Tests for LeaseManager."""

    def test_acquire_and_release(self, leases: LeaseManager):
        lease = leases.acquire("test", "run-1")

        assert lease.path.exists()
        assert leases.current("test").holder == "run-1"

        leases.release(lease)
        assert leases.current("test") is None

    def test_second_run_rejected(self, leases: LeaseManager):
        leases.acquire("test", "run-1")

        with pytest.raises(DeploymentInProgress) as exc_info:
            leases.acquire("test", "run-2")
        assert exc_info.value.details["holder"] == "run-1"

    def test_other_target_allowed(self, leases: LeaseManager):
        leases.acquire("test", "run-1")
        assert leases.acquire("dev", "run-2").target == "dev"

    def test_hold_releases_on_error(self, leases: LeaseManager):
        with pytest.raises(RuntimeError):
            with leases.hold("test", "run-1"):
                raise RuntimeError("boom")

        assert leases.current("test") is None

    def test_expired_lease_taken_over(self, leases: LeaseManager):
        leases.lock_dir.mkdir(parents=True, exist_ok=True)
        stale = datetime.now(timezone.utc) - timedelta(hours=3)
        (leases.lock_dir / "test.lock").write_text(
            json.dumps({"holder": "old", "acquired_at": stale.isoformat()})
        )

        assert leases.acquire("test", "run-2").holder == "run-2"

    def test_unreadable_lease_aged_by_mtime(self, leases: LeaseManager):
        leases.lock_dir.mkdir(parents=True, exist_ok=True)
        path = leases.lock_dir / "test.lock"
        path.write_text("garbage")

        with pytest.raises(DeploymentInProgress):
            leases.acquire("test", "run-2")

        old = time.time() - 3 * 3600
        os.utime(path, (old, old))
        assert leases.acquire("test", "run-3").holder == "run-3"

    def test_zero_ttl_is_respected(self, tmp_path):
        manager = LeaseManager(lock_dir=tmp_path, ttl_minutes=0)
        acquired = datetime.now(timezone.utc) - timedelta(seconds=1)
        (tmp_path / "test.lock").write_text(json.dumps({"holder": "run-1", "acquired_at": acquired.isoformat()}))

        assert manager.current("test") is None
