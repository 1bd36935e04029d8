"""Target environment models."""

import json
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from deploykit.core.exceptions import ConfigurationError, InvalidTarget

PRODUCTION = "prod"

TARGET_LIST: tuple[str, ...] = (
    "dev",
    "cd",
    "test",
    "feature1",
    "feature2",
    "feature3",
    "feature4",
    "feature5",
    PRODUCTION,
)

# CI-only pseudo target: run Backstop against a Tugboat preview.
TUGBOAT_TARGET = "tugboat"


def validate_target(target: str, allowed: tuple[str, ...] = TARGET_LIST) -> str:
    """Return ``target`` unchanged or raise :class:`InvalidTarget`."""
    if target not in allowed:
        raise InvalidTarget(target, list(allowed))
    return target


class TargetEnvironment(BaseModel):
    """A resolved deployment destination."""

    model_config = ConfigDict(frozen=True)

    name: str
    uuid: str = Field(..., min_length=1)
    root: str = Field(..., description="Drupal docroot on the remote host")
    host: str | None = Field(default=None, description="SSH destination, e.g. user@server")

    @property
    def is_production(self) -> bool:
        return self.name == PRODUCTION


class SiteAliases(BaseModel):
    """Site aliases keyed by target name, loaded from a JSON file."""

    environments: dict[str, TargetEnvironment] = Field(default_factory=dict)

    @classmethod
    def load(cls, path: str | Path) -> "SiteAliases":
        """Load aliases from ``path``.

        The file maps target names to ``{"uuid", "root", "host"}`` objects.
        """
        alias_path = Path(path)
        if not alias_path.exists():
            raise ConfigurationError(
                f"Site alias file not found: {alias_path}",
                {"path": str(alias_path)},
            )
        try:
            raw = json.loads(alias_path.read_text())
        except json.JSONDecodeError as e:
            raise ConfigurationError(f"Invalid site alias file: {e}", {"path": str(alias_path)}) from e

        if not isinstance(raw, dict):
            raise ConfigurationError("Site alias file must map target names to aliases.", {"path": str(alias_path)})

        try:
            environments = {
                name: TargetEnvironment.model_validate({**values, "name": name}) for name, values in raw.items()
            }
        except (ValidationError, TypeError) as e:
            raise ConfigurationError(f"Invalid site alias file: {e}", {"path": str(alias_path)}) from e
        return cls(environments=environments)

    def get(self, target: str) -> TargetEnvironment:
        """Resolve a validated target name to its environment."""
        validate_target(target)
        environment = self.environments.get(target)
        if environment is None:
            raise InvalidTarget(target, reason=f'No site alias is defined for "{target}".')
        return environment
