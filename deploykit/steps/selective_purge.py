"""Targeted cache invalidation after a deploy."""

from typing import Any

from deploykit.config import settings
from deploykit.models.deployment import DeploymentRequest, PurgeTargets
from deploykit.models.environment import TargetEnvironment
from deploykit.services.remote import RemoteShell
from deploykit.steps.base import BaseStep

# QAG pages are the visual-regression fixtures; they must never serve stale markup.
QAG_NODES_QUERY = "SELECT nid FROM node_field_data WHERE title LIKE '%_QAG%'"


def purge_path_snippet(path: str) -> str:
    """PHP evaluated by ``drush ev`` to enqueue a single path purge."""
    escaped = path.replace("\\", "\\\\").replace("'", "\\'")
    return f"\\Drupal::service('manual_purger')->purgePath('{escaped}');"


class SelectivePurgeStep(BaseStep):
    """Enqueue purges for QAG content and a few well-known paths.

    Paths are purged by URL rather than by tag because their tags are shared
    with most of the site. Only enqueueing happens here; the purge queue
    worker runs at the end of the deploy.
    """

    def __init__(self, shell: RemoteShell, paths: list[str] | None = None):
        super().__init__()
        self.shell = shell
        self.paths = list(settings.purge_paths if paths is None else paths)

    @property
    def name(self) -> str:
        return "purge"

    @property
    def description(self) -> str:
        return "Enqueue selective cache purges"

    def node_ids(self, target: TargetEnvironment) -> list[str]:
        output = self.shell.drush(target, "sql:query", [QAG_NODES_QUERY], {"verbose": True})
        return [line.strip() for line in output.splitlines() if line.strip()]

    def purge(self, target: TargetEnvironment) -> PurgeTargets:
        targets = PurgeTargets(
            tags=[f"node:{nid}" for nid in self.node_ids(target)],
            paths=self.paths,
        )

        if targets.tags:
            self.shell.drush(target, "cache:tags", [",".join(targets.tags)], {"verbose": True})

        for path in targets.paths:
            self.shell.drush(target, "ev", [purge_path_snippet(path)], {"verbose": True})

        self.logger.info(
            "purge.enqueued",
            target=target.name,
            tags=len(targets.tags),
            paths=len(targets.paths),
        )
        return targets

    def execute(self, request: DeploymentRequest) -> dict[str, Any]:
        targets = self.purge(request.target)
        return {"tags": len(targets.tags), "paths": len(targets.paths)}
