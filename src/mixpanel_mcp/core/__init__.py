"""Core types and errors."""

from mixpanel_mcp.core.errors import (
    ConfigError,
    InvalidFormatError,
    InvalidParameterError,
    MissingDateRangeError,
    MissingParameterError,
    MixpanelMCPError,
    ParameterError,
    ToolError,
    ToolExecutionError,
    TransportFailureError,
    UnexpectedPayloadError,
    UnknownToolError,
    UpstreamDecodeError,
    UpstreamError,
    UpstreamHTTPError,
)

__all__ = [
    "ConfigError",
    "InvalidFormatError",
    "InvalidParameterError",
    "MissingDateRangeError",
    "MissingParameterError",
    "MixpanelMCPError",
    "ParameterError",
    "ToolError",
    "ToolExecutionError",
    "TransportFailureError",
    "UnexpectedPayloadError",
    "UnknownToolError",
    "UpstreamDecodeError",
    "UpstreamError",
    "UpstreamHTTPError",
]
