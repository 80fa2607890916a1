"""Exception hierarchy for mixpanel-mcp.

Every module imports from here. The hierarchy is:

    MixpanelMCPError
    ├── ToolError
    │   ├── UnknownToolError(name)
    │   ├── ParameterError(name)
    │   │   ├── MissingParameterError
    │   │   ├── InvalidParameterError(reason)
    │   │   └── InvalidFormatError(reason)
    │   ├── MissingDateRangeError
    │   └── ToolExecutionError
    ├── UpstreamError
    │   ├── UpstreamHTTPError(status_code, body)
    │   ├── TransportFailureError
    │   ├── UpstreamDecodeError
    │   └── UnexpectedPayloadError
    └── ConfigError
"""

from __future__ import annotations


class MixpanelMCPError(Exception):
    """Base exception for all mixpanel-mcp errors."""


# ─── Tool Errors ──────────────────────────────────────────────


class ToolError(MixpanelMCPError):
    """Base for errors raised while resolving or validating a tool call."""


class UnknownToolError(ToolError):
    """No tool is registered under the requested name."""

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"Unknown tool: {name}")


class ParameterError(ToolError):
    """Base for errors tied to a single named parameter."""

    def __init__(self, name: str, message: str) -> None:
        self.name = name
        super().__init__(message)


class MissingParameterError(ParameterError):
    """A required parameter was not supplied."""

    def __init__(self, name: str) -> None:
        super().__init__(name, f"Missing required parameter '{name}'")


class InvalidParameterError(ParameterError):
    """A parameter has the wrong type or a value outside its enum."""

    def __init__(self, name: str, reason: str) -> None:
        self.reason = reason
        super().__init__(name, f"Invalid parameter '{name}': {reason}")


class InvalidFormatError(ParameterError):
    """A JSON-encoded string parameter is malformed."""

    def __init__(self, name: str, reason: str) -> None:
        self.reason = reason
        super().__init__(name, f"Invalid {name} format: {reason}")


class MissingDateRangeError(ToolError):
    """Neither ``interval`` nor both ``from_date`` and ``to_date`` were given."""

    def __init__(self) -> None:
        super().__init__(
            "You must specify either interval or both from_date and to_date"
        )


class ToolExecutionError(ToolError):
    """A tool call produced an error result (raised at the MCP boundary)."""


# ─── Upstream Errors ──────────────────────────────────────────


class UpstreamError(MixpanelMCPError):
    """Base for failures talking to the Mixpanel API."""


class UpstreamHTTPError(UpstreamError):
    """Mixpanel answered with a non-2xx status."""

    def __init__(self, status_code: int, body: str) -> None:
        self.status_code = status_code
        self.body = body
        super().__init__(f"HTTP {status_code}: {body}")


class TransportFailureError(UpstreamError):
    """The request never produced a response (DNS, connect, timeout...)."""


class UpstreamDecodeError(UpstreamError):
    """The response body was not valid JSON."""


class UnexpectedPayloadError(UpstreamError):
    """The JSON payload does not have the shape a renderer expects."""


# ─── Configuration Errors ─────────────────────────────────────


class ConfigError(MixpanelMCPError):
    """Invalid or incomplete configuration."""
