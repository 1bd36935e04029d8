"""Tugboat preview commands."""

import typer

from deploykit.commands.common import handle_errors, success
from deploykit.services.tugboat import TugboatClient
from deploykit.utils.logging import get_logger

logger = get_logger(__name__)


@handle_errors
def tugboat_rebuild(branch: str = typer.Argument(..., help="A branch name")) -> None:
    """Rebuild a branch preview at Tugboat."""
    client = TugboatClient()
    try:
        preview_id = client.find_preview(branch)
        if not preview_id:
            logger.warning("tugboat.preview.not_found", branch=branch)
            typer.secho(f"[warning] Tugboat preview for {branch} not found.", fg=typer.colors.YELLOW, err=True)
            return
        client.rebuild(preview_id)
    finally:
        client.close()
    success(f"Tugboat preview rebuild successful id={preview_id}")
