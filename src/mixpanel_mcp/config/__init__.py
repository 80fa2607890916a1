"""Configuration loading and validation."""

from mixpanel_mcp.config.loader import load_config, require_credentials
from mixpanel_mcp.config.schema import LoggingConfig, MixpanelConfig, ServerConfig

__all__ = [
    "LoggingConfig",
    "MixpanelConfig",
    "ServerConfig",
    "load_config",
    "require_credentials",
]
