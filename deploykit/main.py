"""Command line entry point."""

import typer

from deploykit import __version__
from deploykit.commands import backups, ci, release, tugboat
from deploykit.config import settings
from deploykit.utils.logging import configure_logging, get_logger

logger = get_logger(__name__)


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(f"deploykit {__version__}")
        raise typer.Exit()


def create_app() -> typer.Typer:
    """Create and configure the CLI application."""
    app = typer.Typer(
        name="deploykit",
        help="Deployment operations for the Drupal site: backups, CI runs and releases.",
        no_args_is_help=True,
        add_completion=False,
    )

    @app.callback()
    def main(
        verbose: bool = typer.Option(False, "--verbose", "-v", help="Log every API request and debug detail."),
        version: bool | None = typer.Option(
            None,
            "--version",
            "-V",
            help="Show version and exit.",
            callback=_version_callback,
            is_eager=True,
        ),
    ) -> None:
        """deploykit - release and deploy the site."""
        configure_logging("DEBUG" if verbose else settings.log_level)
        logger.debug("application.starting", version=__version__)

    # Register commands
    app.command("backstop-snapshot")(ci.backstop_snapshot)
    app.command("backstop-compare")(ci.backstop_compare)
    app.command("backup")(backups.backup)
    app.command("latest-backup-url")(backups.latest_backup_url)
    app.command("release")(release.release)
    app.command("deploy")(release.deploy)
    app.command("tugboat-rebuild")(tugboat.tugboat_rebuild)

    return app


# Create app instance
app = create_app()


def run() -> None:
    app()


if __name__ == "__main__":
    run()
