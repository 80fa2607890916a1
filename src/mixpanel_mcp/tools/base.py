"""Tool declaration and result types.

Every Mixpanel endpoint is described by one frozen :class:`ToolDefinition`
record.  The record carries everything the shared request/response
pipeline needs: the parameter schema, the HTTP method and path, and the
renderer used to turn the JSON payload into Markdown.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from collections.abc import Callable

    Renderer = Callable[[Any], list[str]]


class ParamKind(StrEnum):
    """Declared kind of a tool parameter."""

    STRING = "string"
    NUMBER = "number"
    BOOLEAN = "boolean"
    ENUM = "enum"
    JSON_ARRAY = "json_array"
    JSON_OBJECT = "json_object"


# JSON Schema type advertised to MCP clients for each kind.  The JSON
# kinds travel as strings; their inner shape is checked by the validator.
_SCHEMA_TYPES: dict[ParamKind, str] = {
    ParamKind.STRING: "string",
    ParamKind.NUMBER: "number",
    ParamKind.BOOLEAN: "boolean",
    ParamKind.ENUM: "string",
    ParamKind.JSON_ARRAY: "string",
    ParamKind.JSON_OBJECT: "string",
}


@dataclass(frozen=True, slots=True)
class ParameterSpec:
    """Declaration of one named tool parameter."""

    name: str
    kind: ParamKind
    description: str
    required: bool = False
    default: Any = None
    choices: tuple[str, ...] = ()
    wire_name: str | None = None

    @property
    def upstream_name(self) -> str:
        """Name the parameter is sent under."""
        return self.wire_name or self.name

    def json_schema(self) -> dict[str, Any]:
        schema: dict[str, Any] = {
            "type": _SCHEMA_TYPES[self.kind],
            "description": self.description,
        }
        if self.choices:
            schema["enum"] = list(self.choices)
        if self.default is not None:
            schema["default"] = self.default
        return schema


@dataclass(frozen=True, slots=True)
class ToolDefinition:
    """One Mixpanel endpoint exposed as a tool."""

    name: str
    title: str
    description: str
    action: str
    method: str
    path: str
    parameters: tuple[ParameterSpec, ...]
    renderer: Renderer
    requires_date_range: bool = False

    def parameter(self, name: str) -> ParameterSpec | None:
        for spec in self.parameters:
            if spec.name == name:
                return spec
        return None

    def input_schema(self) -> dict[str, Any]:
        """JSON Schema describing this tool's arguments."""
        return {
            "type": "object",
            "properties": {p.name: p.json_schema() for p in self.parameters},
            "required": [p.name for p in self.parameters if p.required],
        }


@dataclass(frozen=True, slots=True)
class ToolResult:
    """Outcome of one tool invocation."""

    content: str
    is_error: bool = False
