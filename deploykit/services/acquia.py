"""Acquia Cloud API v2 client.

Only the endpoints the deployment workflow needs are wrapped: notifications,
environment configuration, code switch and database backups.
"""

import posixpath
from typing import Any
from urllib.parse import urlparse

import httpx

from deploykit.config import settings
from deploykit.core.exceptions import ConfigurationError, RemoteApiError
from deploykit.models.backup import BackupRecord
from deploykit.models.notification import Notification
from deploykit.services.http import build_client, json_body, send
from deploykit.utils.logging import get_logger

SERVICE = "Acquia"


def task_id_from_href(href: str) -> str:
    """Return the notification UUID at the end of a notification link."""
    return posixpath.basename(urlparse(href).path.rstrip("/"))


class AcquiaClient:
    """Thin wrapper around the Acquia Cloud API using client credentials."""

    def __init__(
        self,
        key: str | None = None,
        secret: str | None = None,
        base_uri: str | None = None,
        token_url: str | None = None,
        transport: httpx.BaseTransport | None = None,
    ):
        self.key = settings.acquia_key if key is None else key
        self.secret = settings.acquia_secret if secret is None else secret
        self.base_uri = (base_uri or settings.acquia_base_uri).rstrip("/")
        self.token_url = token_url or settings.acquia_token_url
        self.logger = get_logger("acquia")
        self._http = build_client(base_url=self.base_uri, transport=transport)
        self._token: str | None = None

    def close(self) -> None:
        self._http.close()

    def __enter__(self) -> "AcquiaClient":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    def _access_token(self) -> str:
        if self._token:
            return self._token
        if not self.key or not self.secret:
            raise ConfigurationError("Missing AC_API2_KEY or AC_API2_SECRET. See .env.example for more details.")

        response = send(
            SERVICE,
            self._http,
            "POST",
            self.token_url,
            data={
                "grant_type": "client_credentials",
                "client_id": self.key,
                "client_secret": self.secret,
            },
        )
        token = json_body(SERVICE, response).get("access_token")
        if not token:
            raise RemoteApiError(SERVICE, "token endpoint did not return an access token")
        self._token = token
        return token

    def request(self, method: str, path: str, **kwargs: Any) -> httpx.Response:
        """Send an authenticated request; ``path`` is relative to the base URI."""
        headers = kwargs.pop("headers", {})
        headers["Authorization"] = f"Bearer {self._access_token()}"
        headers.setdefault("Accept", "application/json")
        return send(SERVICE, self._http, method, path, headers=headers, **kwargs)

    def _json(self, method: str, path: str, **kwargs: Any) -> dict[str, Any]:
        return json_body(SERVICE, self.request(method, path, **kwargs))

    @staticmethod
    def _notification_id(body: dict[str, Any]) -> str:
        href = (body.get("_links") or {}).get("notification", {}).get("href")
        if not href:
            raise RemoteApiError(SERVICE, "response did not include a notification link")
        return task_id_from_href(href)

    # Notifications

    def get_notification(self, uuid: str) -> Notification:
        body = self._json("GET", f"/notifications/{uuid}")
        return Notification(
            uuid=body.get("uuid", uuid),
            status=body.get("status"),
            description=body.get("description", ""),
        )

    # Environments

    def get_environment(self, environment_uuid: str) -> dict[str, Any]:
        return self._json("GET", f"/environments/{environment_uuid}")

    def get_php_version(self, environment_uuid: str) -> str | None:
        """Return the PHP version configured on an environment."""
        environment = self.get_environment(environment_uuid)
        return ((environment.get("configuration") or {}).get("php") or {}).get("version")

    def update_environment(self, environment_uuid: str, changes: dict[str, Any]) -> str:
        """Modify environment settings; returns the notification id to wait on."""
        body = self._json("PUT", f"/environments/{environment_uuid}", json=changes)
        return self._notification_id(body)

    # Code

    def switch_code(self, environment_uuid: str, git_ref: str) -> str:
        """Switch the deployed branch or tag; returns the notification id."""
        body = self._json(
            "POST",
            f"/environments/{environment_uuid}/code/actions/switch",
            json={"branch": git_ref},
        )
        self.logger.info("acquia.code_switch.requested", message=body.get("message"))
        return self._notification_id(body)

    # Database backups

    def list_backups(self, environment_uuid: str, database: str) -> list[BackupRecord]:
        body = self._json("GET", f"/environments/{environment_uuid}/databases/{database}/backups")
        items = (body.get("_embedded") or {}).get("items", [])
        return [BackupRecord.from_api(item) for item in items]

    def create_backup(self, environment_uuid: str, database: str) -> dict[str, Any]:
        return self._json("POST", f"/environments/{environment_uuid}/databases/{database}/backups")

    def redirect_location(self, path: str) -> str | None:
        """Request ``path`` without following redirects and return ``Location``."""
        response = self.request("GET", path, follow_redirects=False)
        return response.headers.get("Location")
