"""Deployment markers at New Relic."""

import httpx

from deploykit.config import settings
from deploykit.services.http import build_client
from deploykit.utils.logging import get_logger


class NewRelicNotifier:
    """Record deployments against the site's APM application.

    Failures are logged and swallowed; a missing marker never fails a deploy.
    """

    def __init__(
        self,
        application: str | None = None,
        api_key: str | None = None,
        user: str | None = None,
        transport: httpx.BaseTransport | None = None,
    ):
        self.application = settings.newrelic_application if application is None else application
        self.api_key = settings.newrelic_key if api_key is None else api_key
        self.user = settings.newrelic_user if user is None else user
        self.logger = get_logger("newrelic")
        self._transport = transport

    def record_deployment(self, git_ref: str) -> bool:
        if not self.application or not self.api_key:
            self.logger.warning("newrelic.not_configured")
            return False

        payload = {
            "deployment": {
                "revision": git_ref,
                "changelog": "",
                "description": "",
                "user": self.user,
            }
        }
        url = f"{settings.newrelic_api}/applications/{self.application}/deployments.json"
        try:
            with build_client(headers={"Api-Key": self.api_key}, transport=self._transport) as http:
                response = http.post(url, json=payload)
        except httpx.HTTPError as e:
            self.logger.warning("newrelic.deployment_failed", error=str(e))
            return False

        if response.status_code >= 400:
            self.logger.warning("newrelic.deployment_failed", status_code=response.status_code)
            return False

        self.logger.info("newrelic.deployment_recorded", revision=git_ref)
        return True
