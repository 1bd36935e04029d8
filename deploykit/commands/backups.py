"""Database backup commands."""

import typer

from deploykit.commands.common import TARGET_HELP, handle_errors, load_aliases, success
from deploykit.models.environment import validate_target
from deploykit.services.acquia import AcquiaClient
from deploykit.services.backups import BackupLocator


@handle_errors
def backup(target: str = typer.Argument(..., help=TARGET_HELP)) -> None:
    """Initiate an on-demand database backup."""
    validate_target(target)
    env = load_aliases().get(target)
    with AcquiaClient() as client:
        BackupLocator(client).create_backup(env)
    success("Backup initiated.")


@handle_errors
def latest_backup_url(
    target: str = typer.Argument(..., help=TARGET_HELP),
    backup_type: str | None = typer.Argument(None, metavar="TYPE", help="Backup type: ondemand or daily."),
) -> None:
    """Write the download link for the most recent database backup to stdout."""
    validate_target(target)
    env = load_aliases().get(target)
    with AcquiaClient() as client:
        url = BackupLocator(client).latest_backup(env, backup_type)
    typer.echo(url)
