"""Keeping the PHP version of an environment in line with the code."""

from typing import Any

from deploykit.config import settings
from deploykit.models.deployment import DeploymentRequest
from deploykit.models.environment import TargetEnvironment
from deploykit.services.acquia import AcquiaClient
from deploykit.services.notifications import NotificationWaiter
from deploykit.steps.base import BaseStep


class RuntimeVersionStep(BaseStep):
    """Set the environment's PHP version before new code lands.

    The hosting platform treats the PHP version as an environment setting,
    not as part of the build, so it has to be switched ahead of the code.
    """

    def __init__(
        self,
        client: AcquiaClient,
        waiter: NotificationWaiter,
        version: str | None = None,
    ):
        super().__init__()
        self.client = client
        self.waiter = waiter
        self.version = version or settings.php_version

    @property
    def name(self) -> str:
        return "version_set"

    @property
    def description(self) -> str:
        return "Ensure the environment runs the expected PHP version"

    def ensure(self, env: TargetEnvironment, desired_version: str) -> bool:
        """Update the PHP version if needed. Returns whether it changed."""
        current = self.client.get_php_version(env.uuid)
        self.logger.info("runtime_version.current", target=env.name, version=current)

        if current == desired_version:
            return False

        self.logger.info("runtime_version.switching", target=env.name, version=desired_version)
        task_id = self.client.update_environment(env.uuid, {"version": desired_version})
        self.waiter.wait(task_id)
        return True

    def execute(self, request: DeploymentRequest) -> dict[str, Any]:
        changed = self.ensure(request.target, self.version)
        return {"version": self.version, "changed": changed}
