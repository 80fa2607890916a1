"""Request construction for Mixpanel Query API calls."""

from __future__ import annotations

import base64
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

import httpx

if TYPE_CHECKING:
    from mixpanel_mcp.config.schema import MixpanelConfig
    from mixpanel_mcp.tools.base import ToolDefinition

DEFAULT_HOST = "https://mixpanel.com"
EU_HOST = "https://eu.mixpanel.com"
QUERY_API_PREFIX = "/api/query"

# Parameters that stay in the query string of form-encoded POST requests.
_POST_QUERY_PARAMS = frozenset({"project_id", "workspace_id"})


@dataclass(frozen=True, slots=True)
class RequestSpec:
    """A fully built outbound request."""

    method: str
    url: str
    query: dict[str, str] = field(default_factory=dict)
    body: dict[str, str] = field(default_factory=dict)
    headers: dict[str, str] = field(default_factory=dict)
    expects_json: bool = True

    @property
    def full_url(self) -> str:
        """URL with the percent-encoded query string appended."""
        return str(httpx.URL(self.url, params=self.query))


def base_url(region: str | None) -> str:
    """Query API root for *region* (``"eu"`` or anything else)."""
    host = EU_HOST if (region or "").lower() == "eu" else DEFAULT_HOST
    return host + QUERY_API_PREFIX


def basic_auth_header(username: str, password: str) -> str:
    token = base64.b64encode(f"{username}:{password}".encode()).decode("ascii")
    return f"Basic {token}"


def serialize_value(value: Any) -> str:
    """Render a validated parameter value the way Mixpanel expects it."""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def build_request(
    definition: ToolDefinition,
    params: dict[str, Any],
    config: MixpanelConfig,
) -> RequestSpec:
    """Build the request for *definition* from validated *params*.

    GET endpoints carry every parameter in the query string.  POST
    endpoints carry only ``project_id``/``workspace_id`` there and send
    the rest as a form-encoded body.
    """
    query: dict[str, str] = {}
    body: dict[str, str] = {}
    is_post = definition.method == "POST"

    for name, value in params.items():
        if value is None or value == "":
            continue
        spec = definition.parameter(name)
        key = spec.upstream_name if spec is not None else name
        target = body if is_post and name not in _POST_QUERY_PARAMS else query
        target[key] = serialize_value(value)

    headers = {
        "accept": "application/json",
        "authorization": basic_auth_header(config.username or "", config.password or ""),
    }
    if is_post:
        headers["content-type"] = "application/x-www-form-urlencoded"

    return RequestSpec(
        method=definition.method,
        url=base_url(config.region) + definition.path,
        query=query,
        body=body,
        headers=headers,
        expects_json=params.get("format") != "csv",
    )
