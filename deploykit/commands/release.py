"""Release and deploy commands."""

import typer

from deploykit.commands.common import TARGET_HELP, handle_errors, load_aliases, success
from deploykit.core.exceptions import UserAborted
from deploykit.core.orchestrator import PROD_CONFIRMATION, get_orchestrator
from deploykit.models.deployment import DeploymentOptions, DeploymentRequest
from deploykit.models.environment import PRODUCTION, validate_target
from deploykit.services.circleci import CircleCIClient
from deploykit.utils.timing import eastern_timestamp

GIT_REF_HELP = "Tag or branch to deploy. Must be pushed to Acquia."


def _confirmation(assume_yes: bool):
    if assume_yes:
        return lambda prompt: True
    return lambda prompt: typer.confirm(prompt, default=False)


@handle_errors
def release(
    target: str = typer.Argument(..., help=TARGET_HELP),
    git_ref: str = typer.Argument(..., help=GIT_REF_HELP),
    ci_branch: str | None = typer.Option(None, "--ci-branch", help="Branch CircleCI checks out; defaults to GIT_REF."),
    skip_maint: bool = typer.Option(False, "--skip-maint", help="Do not enable maintenance mode."),
    refresh_db: bool = typer.Option(False, "--refresh-db", help="Copy the production database first."),
    yes: bool = typer.Option(False, "--yes", "-y", help="Answer yes to the production prompt."),
) -> None:
    """Run ``deploy`` at CircleCI, for better reliability and logging."""
    validate_target(target)
    client = CircleCIClient()
    client.validate_token()

    if target == PRODUCTION and not _confirmation(yes)(PROD_CONFIRMATION):
        raise UserAborted()

    result = client.trigger_pipeline(
        ci_branch or git_ref,
        {
            "ma-release": True,
            "target": target,
            "git-ref": git_ref,
            "skip-maint": "--skip-maint" if skip_maint else "",
            "refresh-db": "--refresh-db" if refresh_db else "",
        },
    )
    success(f"Pipeline {result.number} is viewable at {result.url}.")


@handle_errors
def deploy(
    target: str = typer.Argument(..., help=TARGET_HELP),
    git_ref: str = typer.Argument(..., help=GIT_REF_HELP),
    skip_maint: bool = typer.Option(False, "--skip-maint", help="Do not enable maintenance mode."),
    refresh_db: bool = typer.Option(False, "--refresh-db", help="Copy the production database first (non-prod only)."),
    cache_rebuild: bool = typer.Option(False, "--cache-rebuild", help="Run an extra cache rebuild."),
    yes: bool = typer.Option(False, "--yes", "-y", help="Answer yes to the production prompt."),
) -> None:
    """Deploy code, and the production database if requested.

    Copies the prod DB to the target, then runs deploy hooks, selective
    purge and so on.
    """
    validate_target(target)
    aliases = load_aliases()
    request = DeploymentRequest(
        target=aliases.get(target),
        git_ref=git_ref,
        options=DeploymentOptions(
            skip_maintenance=skip_maint,
            refresh_db=refresh_db,
            cache_rebuild=cache_rebuild,
        ),
    )

    with get_orchestrator(aliases, confirm=_confirmation(yes)) as orchestrator:
        orchestrator.run(request)
    success(f"Deployment completed at {eastern_timestamp()}")
