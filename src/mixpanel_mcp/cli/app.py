"""Main CLI application.

Click commands for mixpanel-mcp: serve, tools, call.
"""

from __future__ import annotations

import asyncio
import json
import logging
import sys
from typing import TYPE_CHECKING, Any

import click

from mixpanel_mcp import __version__
from mixpanel_mcp.config.loader import load_config, require_credentials
from mixpanel_mcp.core.errors import ConfigError

if TYPE_CHECKING:
    from mixpanel_mcp.config.schema import LoggingConfig, ServerConfig


# ── Helpers ──────────────────────────────────────────────────────


def _error(msg: str) -> None:
    """Print an error message to stderr and exit."""
    click.echo(f"Error: {msg}", err=True)
    sys.exit(1)


def _load_config(config_path: str | None, argv: tuple[str, ...] = ()) -> ServerConfig:
    """Load config and check credentials, exiting on failure."""
    try:
        config = load_config(path=config_path, argv=argv)
        require_credentials(config)
    except ConfigError as e:
        _error(str(e))
        raise  # unreachable, keeps mypy happy
    return config


def configure_logging(config: LoggingConfig) -> None:
    """Send log records to stderr, and to a file when configured.

    Stdout is reserved for the MCP stdio transport.
    """
    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stderr)]
    if config.file:
        handlers.append(logging.FileHandler(config.file))
    logging.basicConfig(
        level=config.level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        handlers=handlers,
        force=True,
    )


# ── CLI group ────────────────────────────────────────────────────


@click.group(invoke_without_command=True)
@click.version_option(version=__version__, prog_name="mixpanel-mcp")
@click.option(
    "--config",
    "config_path",
    type=click.Path(exists=True),
    default=None,
    help="Path to config file.",
)
@click.pass_context
def cli(ctx: click.Context, config_path: str | None) -> None:
    """mixpanel-mcp - Mixpanel analytics tools for MCP clients.

    Exposes the Mixpanel Query API (events, funnels, retention,
    segmentation, profiles, JQL) as Model Context Protocol tools.
    """
    ctx.ensure_object(dict)
    ctx.obj["config_path"] = config_path
    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())


# ── serve ────────────────────────────────────────────────────────


@cli.command()
@click.argument("credentials", nargs=-1, metavar="[USERNAME PASSWORD PROJECT_ID REGION]")
@click.pass_context
def serve(ctx: click.Context, credentials: tuple[str, ...]) -> None:
    """Start the MCP server on stdio.

    Credentials come from SERVICE_ACCOUNT_USER_NAME, SERVICE_ACCOUNT_PASSWORD,
    DEFAULT_PROJECT_ID and MIXPANEL_REGION, or from positional arguments.
    """
    if len(credentials) > 4:
        _error("Expected at most 4 arguments: USERNAME PASSWORD PROJECT_ID REGION")
    config = _load_config(ctx.obj["config_path"], credentials)
    configure_logging(config.logging)

    from mixpanel_mcp.mcp.server import run_server

    logging.getLogger(__name__).info(
        "Starting Mixpanel MCP server (project %s, region %s)",
        config.mixpanel.project_id,
        config.mixpanel.region,
    )
    asyncio.run(run_server(config))


# ── tools ────────────────────────────────────────────────────────


@cli.command()
def tools() -> None:
    """List the available Mixpanel tools."""
    from mixpanel_mcp.cli.display import ToolDisplay
    from mixpanel_mcp.tools.registry import build_registry

    ToolDisplay().show_tools(build_registry().list_definitions())


# ── call ─────────────────────────────────────────────────────────


@cli.command()
@click.argument("name")
@click.option(
    "--args",
    "raw_args",
    default="{}",
    help='Tool arguments as a JSON object, e.g. \'{"limit": 5}\'.',
)
@click.option("--raw", is_flag=True, default=False, help="Print the Markdown source.")
@click.pass_context
def call(ctx: click.Context, name: str, raw_args: str, raw: bool) -> None:
    """Invoke one tool and print its result."""
    try:
        arguments: Any = json.loads(raw_args)
    except json.JSONDecodeError as e:
        _error(f"--args is not valid JSON: {e}")
    if not isinstance(arguments, dict):
        _error("--args must be a JSON object")

    config = _load_config(ctx.obj["config_path"])
    configure_logging(config.logging)

    from mixpanel_mcp.cli.display import ToolDisplay
    from mixpanel_mcp.tools.registry import build_registry

    result = asyncio.run(build_registry().invoke(name, arguments, config.mixpanel))
    if raw:
        click.echo(result.content, err=result.is_error)
    else:
        ToolDisplay().show_result(result)
    if result.is_error:
        sys.exit(1)
