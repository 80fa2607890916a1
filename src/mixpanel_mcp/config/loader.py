"""Configuration loading: TOML files, credential resolution, merge logic.

Discovery order (later overrides earlier):
    1. Built-in defaults (Pydantic model defaults)
    2. User config: ``~/.config/mixpanel-mcp/config.toml``
    3. Project-local config: ``./mixpanel-mcp.toml``
    4. ``$MIXPANEL_MCP_CONFIG`` environment variable (explicit path)
    5. Explicit ``path`` argument
    6. Programmatic overrides (passed to ``load_config``)

Credentials are then resolved field by field.  An environment variable
wins over a positional process argument, which wins over the file value:

    ==========  ============================  ========
    field       environment variable          position
    ==========  ============================  ========
    username    ``SERVICE_ACCOUNT_USER_NAME``  0
    password    ``SERVICE_ACCOUNT_PASSWORD``   1
    project_id  ``DEFAULT_PROJECT_ID``         2
    region      ``MIXPANEL_REGION``            3
    ==========  ============================  ========
"""

from __future__ import annotations

import os
import tomllib
from pathlib import Path
from typing import TYPE_CHECKING, Any

from mixpanel_mcp.core.errors import ConfigError

from .schema import ServerConfig

if TYPE_CHECKING:
    from collections.abc import Sequence

CREDENTIAL_SOURCES: tuple[tuple[str, str], ...] = (
    ("username", "SERVICE_ACCOUNT_USER_NAME"),
    ("password", "SERVICE_ACCOUNT_PASSWORD"),
    ("project_id", "DEFAULT_PROJECT_ID"),
    ("region", "MIXPANEL_REGION"),
)

_REQUIRED = ("username", "password", "project_id")

CONFIG_ENV_VAR = "MIXPANEL_MCP_CONFIG"
_APP_DIR = "mixpanel-mcp"


def _config_candidates() -> list[Path]:
    """User file (XDG aware) then the project-local file."""
    xdg = os.environ.get("XDG_CONFIG_HOME")
    config_home = Path(xdg) if xdg else Path.home() / ".config"
    return [config_home / _APP_DIR / "config.toml", Path.cwd() / f"{_APP_DIR}.toml"]


def _discover_config_files() -> list[Path]:
    """Existing config files, lowest priority first.

    Raises:
        ConfigError: If ``$MIXPANEL_MCP_CONFIG`` names a missing file.
    """
    found = [p for p in _config_candidates() if p.is_file()]
    explicit = os.environ.get(CONFIG_ENV_VAR)
    if explicit:
        if not Path(explicit).is_file():
            msg = f"{CONFIG_ENV_VAR} points to non-existent file: {explicit}"
            raise ConfigError(msg)
        found.append(Path(explicit))
    return found


def _read_toml(path: Path) -> dict[str, Any]:
    try:
        return tomllib.loads(path.read_text(encoding="utf-8"))
    except tomllib.TOMLDecodeError as e:
        msg = f"Invalid TOML in {path}: {e}"
        raise ConfigError(msg) from e
    except (OSError, UnicodeDecodeError) as e:
        msg = f"Cannot read config file {path}: {e}"
        raise ConfigError(msg) from e


def _deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Merge TOML tables recursively; scalars in *override* replace *base*."""
    result = dict(base)
    for key, value in override.items():
        current = result.get(key)
        if isinstance(current, dict) and isinstance(value, dict):
            value = _deep_merge(current, value)
        result[key] = value
    return result


def _resolve_credentials(config: ServerConfig, argv: Sequence[str]) -> None:
    """Fill credentials from env vars, then positional args (in-place)."""
    updates: dict[str, str] = {}
    for position, (field, env_var) in enumerate(CREDENTIAL_SOURCES):
        value = os.environ.get(env_var)
        if not value and position < len(argv):
            value = argv[position]
        if value:
            updates[field] = value
    if updates:
        merged = config.mixpanel.model_dump() | updates
        config.mixpanel = type(config.mixpanel).model_validate(merged)


def require_credentials(config: ServerConfig) -> None:
    """Ensure username, password and default project id are all set.

    Raises:
        ConfigError: Naming every missing value.
    """
    missing = [
        env_var
        for field, env_var in CREDENTIAL_SOURCES
        if field in _REQUIRED and not getattr(config.mixpanel, field)
    ]
    if missing:
        msg = (
            "Please provide a Mixpanel service account username, password, "
            "and project ID. Missing: "
            + ", ".join(missing)
            + ". Set the environment variables, pass them as command-line "
            "arguments, or add them to the [mixpanel] table of a config file."
        )
        raise ConfigError(msg)


def load_config(
    path: str | Path | None = None,
    overrides: dict[str, Any] | None = None,
    argv: Sequence[str] = (),
) -> ServerConfig:
    """Load and validate configuration.

    Args:
        path: Explicit config file path (highest file priority).
        overrides: Dict of overrides merged after all files.
        argv: Positional credentials: username, password, project id, region.

    Returns:
        Validated ServerConfig instance.  Credentials may still be
        missing; call :func:`require_credentials` before serving.

    Raises:
        ConfigError: On invalid TOML, missing files, or validation failure.
    """
    merged: dict[str, Any] = {}

    files = _discover_config_files()

    if path is not None:
        p = Path(path)
        if not p.is_file():
            msg = f"Config file not found: {path}"
            raise ConfigError(msg)
        files.append(p)

    for config_file in files:
        data = _read_toml(config_file)
        merged = _deep_merge(merged, data)

    if overrides:
        merged = _deep_merge(merged, overrides)

    try:
        config = ServerConfig.model_validate(merged)
        _resolve_credentials(config, argv)
    except Exception as e:
        msg = f"Configuration validation failed: {e}"
        raise ConfigError(msg) from e

    return config
