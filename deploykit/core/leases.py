"""Per-target deployment leases.

A lease is a lock file under the lock directory, created exclusively so two
runs against the same target cannot overlap. Leases older than the TTL are
treated as abandoned and may be taken over.
"""

import json
import os
from contextlib import contextmanager
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Iterator

from deploykit.config import settings
from deploykit.core.exceptions import DeploymentInProgress
from deploykit.utils.logging import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class Lease:
    target: str
    holder: str
    acquired_at: datetime
    path: Path


class LeaseManager:
    """Hands out one lease per target environment."""

    def __init__(self, lock_dir: str | Path | None = None, ttl_minutes: int | None = None):
        self.lock_dir = Path(lock_dir or settings.lock_dir)
        self._ttl = timedelta(minutes=settings.lock_ttl_minutes if ttl_minutes is None else ttl_minutes)

    def _path(self, target: str) -> Path:
        return self.lock_dir / f"{target}.lock"

    def current(self, target: str) -> Lease | None:
        """Return the live lease on ``target``, dropping it if it expired."""
        path = self._path(target)
        try:
            raw = json.loads(path.read_text())
            lease = Lease(
                target=target,
                holder=raw["holder"],
                acquired_at=datetime.fromisoformat(raw["acquired_at"]),
                path=path,
            )
        except FileNotFoundError:
            return None
        except (ValueError, KeyError):
            # Half-written or foreign file: age it by mtime instead
            lease = Lease(
                target=target,
                holder="unknown",
                acquired_at=datetime.fromtimestamp(path.stat().st_mtime, timezone.utc),
                path=path,
            )

        if datetime.now(timezone.utc) - lease.acquired_at > self._ttl:
            logger.warning("lease.expired", target=target, holder=lease.holder)
            path.unlink(missing_ok=True)
            return None
        return lease

    def acquire(self, target: str, holder: str) -> Lease:
        """Take the lease on ``target`` or raise :class:`DeploymentInProgress`."""
        self.lock_dir.mkdir(parents=True, exist_ok=True)
        existing = self.current(target)
        if existing is not None:
            raise DeploymentInProgress(target, existing.holder)

        path = self._path(target)
        now = datetime.now(timezone.utc)
        try:
            fd = os.open(path, os.O_CREAT | os.O_EXCL | os.O_WRONLY, 0o644)
        except FileExistsError as e:
            raise DeploymentInProgress(target) from e
        with os.fdopen(fd, "w") as handle:
            json.dump({"holder": holder, "acquired_at": now.isoformat()}, handle)

        logger.info("lease.acquired", target=target, holder=holder)
        return Lease(target=target, holder=holder, acquired_at=now, path=path)

    def release(self, lease: Lease) -> None:
        lease.path.unlink(missing_ok=True)
        logger.info("lease.released", target=lease.target, holder=lease.holder)

    @contextmanager
    def hold(self, target: str, holder: str) -> Iterator[Lease]:
        """Hold the lease on ``target`` for the duration of the block."""
        lease = self.acquire(target, holder)
        try:
            yield lease
        finally:
            self.release(lease)
