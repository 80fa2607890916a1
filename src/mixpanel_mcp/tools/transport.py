"""Single-shot HTTP transport for Mixpanel requests."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

import httpx

from mixpanel_mcp.core.errors import (
    TransportFailureError,
    UpstreamDecodeError,
    UpstreamHTTPError,
)

if TYPE_CHECKING:
    from mixpanel_mcp.tools.request import RequestSpec

logger = logging.getLogger(__name__)


async def send(
    spec: RequestSpec,
    *,
    transport: httpx.AsyncBaseTransport | None = None,
) -> Any:
    """Perform one HTTP round trip and return the decoded body.

    A fresh client is opened per call and closed afterwards, so nothing
    is shared between invocations.  No retries are attempted.

    Args:
        spec: The request to send.
        transport: Optional httpx transport (tests inject a MockTransport).

    Returns:
        The parsed JSON payload, or the raw text when the request does
        not expect JSON (CSV exports).

    Raises:
        UpstreamHTTPError: Mixpanel answered with a non-2xx status.
        TransportFailureError: No response was received.
        UpstreamDecodeError: The body was not valid JSON.
    """
    try:
        async with httpx.AsyncClient(transport=transport) as client:
            response = await client.request(
                spec.method,
                spec.url,
                params=spec.query,
                data=spec.body or None,
                headers=spec.headers,
            )
    except httpx.HTTPError as e:
        logger.warning("Request to %s failed: %s", spec.url, e)
        msg = f"Request to {spec.url} failed: {e}"
        raise TransportFailureError(msg) from e

    if not response.is_success:
        logger.warning("Mixpanel returned HTTP %d for %s", response.status_code, spec.url)
        raise UpstreamHTTPError(response.status_code, response.text)

    if not spec.expects_json:
        return response.text

    try:
        return response.json()
    except ValueError as e:
        msg = f"Response from {spec.url} is not valid JSON: {e}"
        raise UpstreamDecodeError(msg) from e
