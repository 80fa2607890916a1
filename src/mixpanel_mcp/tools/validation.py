"""Argument validation against a tool's declared parameters.

All tools go through :func:`validate_arguments`; JSON-encoded string
parameters are parsed here once rather than inside individual tools.
"""

from __future__ import annotations

import json
import logging
from typing import TYPE_CHECKING, Any

from mixpanel_mcp.core.errors import (
    InvalidFormatError,
    InvalidParameterError,
    MissingDateRangeError,
    MissingParameterError,
)
from mixpanel_mcp.tools.base import ParamKind

if TYPE_CHECKING:
    from mixpanel_mcp.tools.base import ParameterSpec, ToolDefinition

logger = logging.getLogger(__name__)

_JSON_CONTAINERS: dict[ParamKind, tuple[type, str]] = {
    ParamKind.JSON_ARRAY: (list, "array"),
    ParamKind.JSON_OBJECT: (dict, "object"),
}


def parse_json_argument(name: str, raw: str, kind: ParamKind) -> list[Any] | dict[str, Any]:
    """Parse a JSON-encoded string argument and check its container type.

    Raises:
        InvalidFormatError: If *raw* is not JSON or not the expected container.
    """
    container, label = _JSON_CONTAINERS[kind]
    try:
        parsed = json.loads(raw)
    except json.JSONDecodeError as e:
        raise InvalidFormatError(name, str(e)) from e
    if not isinstance(parsed, container):
        raise InvalidFormatError(name, f"{name} must be a JSON {label}")
    return parsed


def _check_value(spec: ParameterSpec, value: Any) -> None:
    kind = spec.kind
    if kind is ParamKind.NUMBER:
        if isinstance(value, bool) or not isinstance(value, int | float):
            raise InvalidParameterError(spec.name, "expected a number")
        return
    if kind is ParamKind.BOOLEAN:
        if not isinstance(value, bool):
            raise InvalidParameterError(spec.name, "expected a boolean")
        return
    if not isinstance(value, str):
        raise InvalidParameterError(spec.name, "expected a string")
    if kind is ParamKind.ENUM and value not in spec.choices:
        allowed = ", ".join(spec.choices)
        raise InvalidParameterError(
            spec.name, f"'{value}' is not one of: {allowed}"
        )
    if kind in _JSON_CONTAINERS:
        parse_json_argument(spec.name, value, kind)


def _apply_date_range(params: dict[str, Any]) -> None:
    """Require ``interval`` or both dates; ``interval`` wins when both given."""
    if params.get("interval") is not None:
        params.pop("from_date", None)
        params.pop("to_date", None)
        return
    if not params.get("from_date") or not params.get("to_date"):
        raise MissingDateRangeError


def validate_arguments(
    definition: ToolDefinition,
    arguments: dict[str, Any],
    default_project_id: str | None = None,
) -> dict[str, Any]:
    """Check *arguments* against *definition* and fill in defaults.

    Args:
        definition: The tool being invoked.
        arguments: Raw arguments from the caller.
        default_project_id: Substituted when ``project_id`` is absent.

    Returns:
        Validated parameters keyed by declared name, in declaration
        order.  Absent optional parameters without a default are left out.

    Raises:
        MissingParameterError: A required parameter is absent or empty.
        InvalidParameterError: A value has the wrong type or enum value.
        InvalidFormatError: A JSON-encoded string is malformed.
        MissingDateRangeError: The tool's date range rule is not satisfied.
    """
    unknown = set(arguments) - {p.name for p in definition.parameters}
    if unknown:
        logger.debug("Ignoring unknown arguments for %s: %s", definition.name, sorted(unknown))

    params: dict[str, Any] = {}
    for spec in definition.parameters:
        value = arguments.get(spec.name)
        if spec.required and value == "":
            raise MissingParameterError(spec.name)
        if value is None:
            if spec.required:
                raise MissingParameterError(spec.name)
            value = spec.default
            if spec.name == "project_id" and value is None:
                value = default_project_id
            if value is not None:
                params[spec.name] = value
            continue
        _check_value(spec, value)
        params[spec.name] = value

    if definition.requires_date_range:
        _apply_date_range(params)

    return params
