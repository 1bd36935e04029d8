"""Tugboat preview client."""

from typing import Any

import httpx

from deploykit.config import settings
from deploykit.services.http import build_client, json_body, send
from deploykit.utils.logging import get_logger

SERVICE = "Tugboat"


def preview_matches(preview: dict[str, Any], branch: str) -> bool:
    """Whether a preview was built from ``branch``."""
    head_ref = ((preview.get("provider_ref") or {}).get("head") or {}).get("ref")
    return head_ref == branch or preview.get("provider_id") == f"refs/heads/{branch}"


class TugboatClient:
    """Look up and rebuild branch previews."""

    def __init__(
        self,
        token: str | None = None,
        api: str | None = None,
        repo: str | None = None,
        transport: httpx.BaseTransport | None = None,
    ):
        self.token = settings.tugboat_token if token is None else token
        self.repo = repo or settings.tugboat_repo
        self.logger = get_logger("tugboat")
        self._http = build_client(
            base_url=(api or settings.tugboat_api).rstrip("/"),
            headers={"Authorization": f"Bearer {self.token}"},
            transport=transport,
        )

    def close(self) -> None:
        self._http.close()

    def list_previews(self) -> list[dict[str, Any]]:
        response = send(SERVICE, self._http, "GET", f"/repos/{self.repo}/previews")
        return json_body(SERVICE, response)

    def find_preview(self, branch: str, prop: str = "id") -> str | None:
        """Return ``prop`` of the first preview built from ``branch``."""
        for preview in self.list_previews():
            if preview_matches(preview, branch):
                self.logger.info("tugboat.preview.found", branch=branch)
                value = preview.get(prop)
                return str(value) if value else None
        return None

    def rebuild(self, preview_id: str) -> None:
        """Rebuild a preview and its children from scratch."""
        send(
            SERVICE,
            self._http,
            "POST",
            f"/previews/{preview_id}/rebuild",
            json={"children": True, "force": True},
        )
        self.logger.info("tugboat.preview.rebuilt", preview_id=preview_id)
