"""Visual regression runs at CircleCI."""

import typer

from deploykit.commands.common import TARGET_HELP, handle_errors, success
from deploykit.core.exceptions import ConfigurationError
from deploykit.models.environment import TARGET_LIST, TUGBOAT_TARGET, validate_target
from deploykit.services.circleci import CircleCIClient
from deploykit.services.remote import LocalShell
from deploykit.services.tugboat import TugboatClient

CI_TARGETS = (*TARGET_LIST, TUGBOAT_TARGET)

LIST_HELP = "The list you want to run. Recognized values: page, all, post-release."
VIEWPORT_HELP = "The viewport you want to run. Recognized values: desktop, tablet, phone, all."
TUGBOAT_HELP = (
    "A Tugboat URL to use as target (requires --target=tugboat). When omitted, "
    "the most recent preview for the branch is used."
)


def resolve_tugboat_url(
    tugboat_url: str | None,
    ci_branch: str,
    tugboat: TugboatClient | None = None,
    local: LocalShell | None = None,
) -> str:
    """Pick the preview URL to test against.

    An explicit URL wins. Otherwise the preview for ``ci_branch`` is looked
    up; for ``develop`` the branch checked out locally is used instead.
    """
    if tugboat_url:
        return tugboat_url

    branch = ci_branch
    if branch == "develop":
        branch = (local or LocalShell()).output(["git", "rev-parse", "--abbrev-ref", "HEAD"])
        if not branch:
            raise ConfigurationError("Unable to determine current branch. Pass --tugboat option.")

    client = tugboat or TugboatClient()
    try:
        url = client.find_preview(branch, "url")
    finally:
        client.close()
    if not url:
        raise ConfigurationError("Unable to find a matching Tugboat preview. Pass --tugboat option.")
    return url


def _trigger(ci_branch: str, parameters: dict) -> None:
    client = CircleCIClient()
    result = client.trigger_pipeline(ci_branch, parameters)
    success(f"Pipeline {result.number} is viewable at {result.url}.")


@handle_errors
def backstop_snapshot(
    target: str = typer.Option("prod", "--target", help=TARGET_HELP),
    ci_branch: str = typer.Option("develop", "--ci-branch", help="Branch CircleCI checks out."),
    list_name: str = typer.Option("all", "--list", help=LIST_HELP),
    viewport: str = typer.Option("all", "--viewport", help=VIEWPORT_HELP),
    tugboat: str | None = typer.Option(None, "--tugboat", help=TUGBOAT_HELP),
    cachebuster: bool = typer.Option(False, "--cachebuster", help="Append a cache busting query string."),
) -> None:
    """Run a Backstop snapshot at CircleCI; the result is the reference for compare."""
    validate_target(target, CI_TARGETS)
    CircleCIClient().validate_token()

    tugboat_url = resolve_tugboat_url(tugboat, ci_branch) if target == TUGBOAT_TARGET else ""
    _trigger(
        ci_branch,
        {
            "trigger_workflow": "backstop_snapshot",
            "target": target,
            "list": list_name,
            "viewport": viewport,
            "tugboat": tugboat_url,
            "cachebuster": cachebuster,
        },
    )


@handle_errors
def backstop_compare(
    target: str = typer.Option("test", "--target", help=TARGET_HELP),
    reference: str = typer.Option("prod", "--reference", help="Environment whose screenshots are the reference."),
    ci_branch: str = typer.Option("develop", "--ci-branch", help="Branch CircleCI checks out."),
    list_name: str = typer.Option("all", "--list", help=LIST_HELP),
    viewport: str = typer.Option("all", "--viewport", help=VIEWPORT_HELP),
    tugboat: str | None = typer.Option(None, "--tugboat", help=TUGBOAT_HELP),
    cachebuster: bool = typer.Option(False, "--cachebuster", help="Append a cache busting query string."),
    force_reference: bool = typer.Option(
        False, "--force-reference", help="Take new reference images instead of reusing saved ones."
    ),
) -> None:
    """Run Backstop at CircleCI against the screenshots from the last snapshot."""
    validate_target(target, CI_TARGETS)
    validate_target(reference, TARGET_LIST)
    CircleCIClient().validate_token()

    tugboat_url = resolve_tugboat_url(tugboat, ci_branch) if target == TUGBOAT_TARGET else ""
    _trigger(
        ci_branch,
        {
            "trigger_workflow": "backstop_compare",
            "reference": reference,
            "target": target,
            "list": list_name,
            "viewport": viewport,
            "tugboat": tugboat_url,
            "cachebuster": cachebuster,
            "force-reference": force_reference,
        },
    )
