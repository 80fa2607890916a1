"""Tool registry — lookup and invocation of Mixpanel tools.

:meth:`ToolRegistry.invoke` is the single boundary every call goes
through: validate, build the request, send it, render the response.
Every failure along the way is turned into an error :class:`ToolResult`
instead of propagating to the caller.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from mixpanel_mcp.core.errors import MixpanelMCPError, UnknownToolError
from mixpanel_mcp.tools.base import ToolResult
from mixpanel_mcp.tools.formatting import render_report
from mixpanel_mcp.tools.request import build_request
from mixpanel_mcp.tools.transport import send
from mixpanel_mcp.tools.validation import validate_arguments

if TYPE_CHECKING:
    import httpx

    from mixpanel_mcp.config.schema import MixpanelConfig
    from mixpanel_mcp.tools.base import ToolDefinition

logger = logging.getLogger(__name__)


class ToolRegistry:
    """Registry of tool definitions, keyed by name.

    Populated once at startup and only read afterwards.
    """

    def __init__(self) -> None:
        self._tools: dict[str, ToolDefinition] = {}

    def register(self, definition: ToolDefinition) -> None:
        """Register a tool.  A later registration under the same name wins."""
        self._tools[definition.name] = definition

    def get(self, name: str) -> ToolDefinition:
        """Get a tool by name.

        Raises:
            UnknownToolError: If the tool is not registered.
        """
        if name not in self._tools:
            raise UnknownToolError(name)
        return self._tools[name]

    def list_definitions(self) -> list[ToolDefinition]:
        """Return all definitions in registration order."""
        return list(self._tools.values())

    def list_names(self) -> list[str]:
        """Return names of all registered tools."""
        return list(self._tools.keys())

    async def invoke(
        self,
        name: str,
        arguments: dict[str, Any] | None,
        config: MixpanelConfig,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> ToolResult:
        """Run one tool call end to end.

        Never raises for tool, validation, or upstream failures; those
        come back as a :class:`ToolResult` with ``is_error=True``.
        """
        try:
            definition = self.get(name)
        except UnknownToolError as e:
            logger.warning("%s", e)
            return ToolResult(content=str(e), is_error=True)

        try:
            params = validate_arguments(definition, arguments or {}, config.project_id)
            spec = build_request(definition, params, config)
            logger.info("Calling %s: %s %s", name, spec.method, definition.path)
            payload = await send(spec, transport=transport)
            return ToolResult(content=render_report(definition, params, payload))
        except MixpanelMCPError as e:
            logger.warning("Tool %s failed: %s", name, e)
            return ToolResult(content=f"Error {definition.action}: {e}", is_error=True)
        except Exception as e:
            logger.exception("Unexpected error in tool %s", name)
            return ToolResult(content=f"Error {definition.action}: {e}", is_error=True)

    def __len__(self) -> int:
        return len(self._tools)

    def __contains__(self, name: str) -> bool:
        return name in self._tools


def build_registry() -> ToolRegistry:
    """Return a registry holding the full Mixpanel tool catalogue."""
    from mixpanel_mcp.tools.catalog import TOOLS

    registry = ToolRegistry()
    for definition in TOOLS:
        registry.register(definition)
    return registry
