"""CircleCI pipeline trigger client."""

from typing import Any

import httpx

from deploykit.config import settings
from deploykit.core.exceptions import ConfigurationError, RemoteApiError
from deploykit.models.deployment import PipelineResult
from deploykit.services.http import build_client, json_body, send
from deploykit.utils.logging import get_logger

SERVICE = "CircleCI"


class CircleCIClient:
    """Start pipelines of the site repository at CircleCI."""

    def __init__(
        self,
        token: str | None = None,
        pipeline_uri: str | None = None,
        transport: httpx.BaseTransport | None = None,
    ):
        self.token = settings.circleci_token if token is None else token
        self.pipeline_uri = pipeline_uri or settings.circleci_pipeline_uri
        self.logger = get_logger("circleci")
        self._transport = transport

    def validate_token(self) -> None:
        """Fail early when no personal API token is configured."""
        if not self.token:
            raise ConfigurationError(
                "Missing CIRCLECI_PERSONAL_API_TOKEN. See .env.example for more details."
            )

    def trigger_pipeline(self, branch: str, parameters: dict[str, Any]) -> PipelineResult:
        """Create a pipeline on ``branch`` with the given pipeline parameters."""
        self.validate_token()
        payload = {
            "branch": branch,
            "parameters": {"webhook": False, **parameters},
        }
        with build_client(auth=(self.token, ""), transport=self._transport) as http:
            response = send(SERVICE, http, "POST", self.pipeline_uri, json=payload)

        body = json_body(SERVICE, response)
        if "number" not in body:
            raise RemoteApiError(SERVICE, "response did not include a pipeline number", response.status_code)

        result = PipelineResult(number=body["number"], url=settings.circleci_project_url)
        self.logger.info("circleci.pipeline.created", number=result.number, branch=branch)
        return result
