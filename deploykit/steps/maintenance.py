"""Maintenance mode on a target site."""

from deploykit.models.environment import TargetEnvironment
from deploykit.services.remote import RemoteShell
from deploykit.utils.logging import get_logger

STATE_KEY = "system.maintenance_mode"


class MaintenanceMode:
    """Read and toggle the site-wide maintenance flag through Drush state."""

    def __init__(self, shell: RemoteShell):
        self.shell = shell
        self.logger = get_logger("maintenance")

    def get(self, env: TargetEnvironment) -> int:
        output = self.shell.drush(env, "state:get", [STATE_KEY]).strip()
        try:
            return int(output or 0)
        except ValueError:
            # Unset state prints nothing or a non-numeric placeholder
            return 0

    def set(self, env: TargetEnvironment, value: int) -> None:
        self.shell.drush(env, "state:set", [STATE_KEY, str(value)], {"input-format": "integer"})
        self.logger.info(
            "maintenance.enabled" if value else "maintenance.disabled",
            target=env.name,
        )

    def enable(self, env: TargetEnvironment) -> int:
        """Turn maintenance mode on and return the value it had before."""
        previous = self.get(env)
        self.set(env, 1)
        return previous

    def restore(self, env: TargetEnvironment, previous: int) -> None:
        self.set(env, previous)
