"""MCP server exposing the Mixpanel tool catalogue."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from mcp.server import Server
from mcp.server.stdio import stdio_server
from mcp.types import TextContent, Tool

from mixpanel_mcp import __version__
from mixpanel_mcp.core.errors import ToolExecutionError
from mixpanel_mcp.tools.registry import ToolRegistry, build_registry

if TYPE_CHECKING:
    import httpx

    from mixpanel_mcp.config.schema import ServerConfig


def _get_tools(registry: ToolRegistry) -> list[Tool]:
    """Describe every registered tool for ``tools/list``."""
    return [
        Tool(
            name=definition.name,
            description=definition.description,
            inputSchema=definition.input_schema(),
        )
        for definition in registry.list_definitions()
    ]


async def call_tool(
    name: str,
    arguments: dict[str, Any] | None,
    config: ServerConfig,
    registry: ToolRegistry,
    *,
    transport: httpx.AsyncBaseTransport | None = None,
) -> list[TextContent]:
    """Handle one ``tools/call`` request.

    Error results are raised as :class:`ToolExecutionError`; the MCP
    server reports them to the client with ``isError`` set.
    """
    result = await registry.invoke(name, arguments, config.mixpanel, transport=transport)
    if result.is_error:
        raise ToolExecutionError(result.content)
    return [TextContent(type="text", text=result.content)]


def create_server(
    config: ServerConfig,
    registry: ToolRegistry | None = None,
) -> Server:
    """Build an MCP server bound to *config*."""
    registry = registry or build_registry()
    server = Server("mixpanel", version=__version__)

    @server.list_tools()  # type: ignore[no-untyped-call, untyped-decorator]
    async def list_tools() -> list[Tool]:
        """List available MCP tools."""
        return _get_tools(registry)

    @server.call_tool()  # type: ignore[untyped-decorator]
    async def handle_call(name: str, arguments: dict) -> list[TextContent]:  # type: ignore[type-arg]
        """Handle tool calls."""
        return await call_tool(name, arguments, config, registry)

    return server


async def run_server(config: ServerConfig) -> None:
    """Start the MCP server on stdio."""
    server = create_server(config)
    async with stdio_server() as (read_stream, write_stream):
        await server.run(
            read_stream,
            write_stream,
            server.create_initialization_options(),
        )
