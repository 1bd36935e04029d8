"""Helpers shared by the CLI commands."""

from functools import wraps
from typing import Any, Callable, TypeVar

import typer

from deploykit.config import settings
from deploykit.core.exceptions import DeployKitError
from deploykit.models.environment import SiteAliases
from deploykit.utils.logging import get_logger

logger = get_logger(__name__)

F = TypeVar("F", bound=Callable[..., Any])

TARGET_HELP = (
    "Target environment. Recognized values: dev, cd, test, feature1, feature2, "
    "feature3, feature4, feature5, prod"
)


def load_aliases() -> SiteAliases:
    """Load the site aliases configured for this checkout."""
    return SiteAliases.load(settings.site_aliases_file)


def success(message: str) -> None:
    """Report a successful outcome to the operator on stderr."""
    typer.secho(f"[success] {message}", fg=typer.colors.GREEN, err=True)


def handle_errors(func: F) -> F:
    """Turn deploykit errors into a message and exit status 1."""

    @wraps(func)
    def wrapper(*args: Any, **kwargs: Any) -> Any:
        try:
            return func(*args, **kwargs)
        except DeployKitError as exc:
            logger.debug("command.failed", error=exc.message, details=exc.details)
            typer.secho(f"[error] {exc.message}", fg=typer.colors.RED, err=True)
            raise typer.Exit(1) from exc

    return wrapper  # type: ignore[return-value]
