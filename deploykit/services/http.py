"""Shared HTTP plumbing for the API clients."""

import time
from typing import Any

import httpx

from deploykit.config import settings
from deploykit.core.exceptions import RemoteApiError
from deploykit.utils.logging import get_logger

logger = get_logger(__name__)


def _log_request(request: httpx.Request) -> None:
    request.extensions["deploykit_started"] = time.perf_counter()
    logger.debug(
        "request.started",
        method=request.method,
        host=request.url.host,
        path=request.url.path,
    )


def _log_response(response: httpx.Response) -> None:
    request = response.request
    started = request.extensions.get("deploykit_started")
    duration_ms = (time.perf_counter() - started) * 1000 if started else None
    logger.info(
        "request.completed",
        method=request.method,
        host=request.url.host,
        path=request.url.path,
        status_code=response.status_code,
        duration_ms=round(duration_ms, 2) if duration_ms is not None else None,
    )


def build_client(
    base_url: str = "",
    headers: dict[str, str] | None = None,
    auth: Any = None,
    transport: httpx.BaseTransport | None = None,
) -> httpx.Client:
    """Create a synchronous client that logs every request and response."""
    return httpx.Client(
        base_url=base_url,
        headers=headers,
        auth=auth,
        transport=transport,
        timeout=settings.http_timeout,
        event_hooks={"request": [_log_request], "response": [_log_response]},
    )


def send(service: str, client: httpx.Client, method: str, url: str, **kwargs: Any) -> httpx.Response:
    """Send a request, reporting transport failures and 4xx/5xx as API errors."""
    try:
        response = client.request(method, url, **kwargs)
    except httpx.HTTPError as e:
        raise RemoteApiError(service, f"request failed: {e}") from e
    return ensure_success(service, response)


def ensure_success(service: str, response: httpx.Response) -> httpx.Response:
    """Raise :class:`RemoteApiError` for 4xx/5xx responses."""
    if response.status_code >= 400:
        raise RemoteApiError(
            service,
            f"response was a {response.status_code}. Use --verbose for more request information.",
            status_code=response.status_code,
        )
    return response


def json_body(service: str, response: httpx.Response) -> Any:
    """Decode a JSON body, reporting malformed payloads as API errors."""
    try:
        return response.json()
    except ValueError as e:
        raise RemoteApiError(service, f"invalid JSON in response: {e}", response.status_code) from e
