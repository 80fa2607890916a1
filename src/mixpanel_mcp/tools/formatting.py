"""Markdown rendering of Mixpanel responses.

Each endpoint names one renderer.  A renderer takes the decoded JSON
payload and returns Markdown lines; it walks the payload's own keys and
raises :class:`UnexpectedPayloadError` when the shape does not match.
:func:`render_report` adds the heading and parameter echo, and falls
back to the raw JSON text whenever a renderer gives up.
"""

from __future__ import annotations

import json
import logging
from typing import TYPE_CHECKING, Any

from mixpanel_mcp.core.errors import UnexpectedPayloadError

if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence

    from mixpanel_mcp.tools.base import ToolDefinition

logger = logging.getLogger(__name__)

_PERCENT_KEYS = frozenset({"percent_change", "pct_change"})
_EMPTY = "_No results._"


# ── Cells and tables ─────────────────────────────────────────────


def format_percentage(value: float) -> str:
    """Format a ratio as a fixed-point percentage: ``0.1234 -> '12.34%'``."""
    return f"{value * 100:.2f}%"


def _is_percent_key(key: str) -> bool:
    return key in _PERCENT_KEYS or key.endswith("_ratio")


def _cell(value: Any, key: str = "") -> str:
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, int | float):
        if key and _is_percent_key(key):
            return format_percentage(value)
        return str(value)
    if isinstance(value, dict | list):
        text = json.dumps(value, separators=(",", ":"), ensure_ascii=False)
    else:
        text = str(value)
    return text.replace("|", "\\|").replace("\n", " ")


def markdown_table(headers: Sequence[str], rows: Iterable[Sequence[str]]) -> list[str]:
    """Build a GitHub-flavoured Markdown table."""
    lines = [
        "| " + " | ".join(_cell(h) for h in headers) + " |",
        "| " + " | ".join("---" for _ in headers) + " |",
    ]
    lines.extend("| " + " | ".join(row) + " |" for row in rows)
    return lines


def _record_table(records: Sequence[dict[str, Any]]) -> list[str]:
    """Table whose columns are the union of record keys, first seen first."""
    columns: list[str] = []
    for record in records:
        for key in record:
            if key not in columns:
                columns.append(key)
    rows = [[_cell(r.get(c), c) for c in columns] for r in records]
    return markdown_table(columns, rows)


def _expect(condition: bool, message: str) -> None:
    if not condition:
        raise UnexpectedPayloadError(message)


def _is_scalar(value: Any) -> bool:
    return not isinstance(value, dict | list)


def _unwrap(payload: Any, key: str | None) -> Any:
    if key is None:
        return payload
    _expect(isinstance(payload, dict) and key in payload, f"missing '{key}'")
    return payload[key]


# ── Renderers ────────────────────────────────────────────────────


def render_records(payload: Any, *, key: str | None = None, column: str = "value") -> list[str]:
    """Render a list of flat objects (or of scalars) as one table."""
    items = _unwrap(payload, key)
    _expect(isinstance(items, list), "expected a list")
    if not items:
        return [_EMPTY]
    if all(isinstance(item, dict) for item in items):
        return _record_table(items)
    _expect(all(_is_scalar(item) for item in items), "mixed list items")
    return markdown_table([column], ([_cell(item)] for item in items))


def render_series(payload: Any) -> list[str]:
    """Render ``{data: {series: [...], values: {name: {date: n}}}}``."""
    data = _unwrap(payload, "data")
    _expect(isinstance(data, dict), "'data' is not an object")
    series = data.get("series")
    values = data.get("values")
    _expect(isinstance(series, list), "missing 'series'")
    _expect(all(_is_scalar(date) for date in series), "'series' entries are not scalars")
    _expect(isinstance(values, dict), "missing 'values'")
    if not values:
        return [_EMPTY]
    names = list(values)
    for name in names:
        _expect(isinstance(values[name], dict), f"values for '{name}' are not an object")
    rows = [[_cell(date)] + [_cell(values[n].get(date)) for n in names] for date in series]
    return markdown_table(["date", *names], rows)


def render_funnel(payload: Any) -> list[str]:
    """Render ``{meta: {dates: [...]}, data: {date: {steps, analysis}}}``."""
    meta = _unwrap(payload, "meta")
    data = _unwrap(payload, "data")
    _expect(isinstance(meta, dict) and isinstance(data, dict), "malformed funnel")
    dates = meta.get("dates") or list(data)
    _expect(isinstance(dates, list), "'meta.dates' is not a list")
    _expect(all(_is_scalar(date) for date in dates), "'meta.dates' entries are not scalars")

    lines: list[str] = []
    for date in dates:
        day = data.get(date)
        if day is None:
            continue
        _expect(isinstance(day, dict), f"funnel entry for {date} is not an object")
        steps = day.get("steps")
        _expect(isinstance(steps, list), f"missing steps for {date}")
        lines.append(f"## {date}")
        lines.append("")
        if steps:
            _expect(all(isinstance(s, dict) for s in steps), "funnel steps are not objects")
            lines.extend(_record_table([{"step": i} | s for i, s in enumerate(steps, 1)]))
        else:
            lines.append(_EMPTY)
        analysis = day.get("analysis")
        if isinstance(analysis, dict) and analysis:
            lines.append("")
            lines.append("**Analysis**")
            lines.append("")
            lines.extend(
                markdown_table(["metric", "value"], ([k, _cell(v, k)] for k, v in analysis.items()))
            )
        lines.append("")
    return lines[:-1] if lines else [_EMPTY]


def render_retention(payload: Any) -> list[str]:
    """Render ``{cohort_date: {first: n, counts: [...]}}`` as a cohort table."""
    _expect(isinstance(payload, dict), "expected an object")
    if not payload:
        return [_EMPTY]
    width = 0
    for cohort, entry in payload.items():
        _expect(
            isinstance(entry, dict) and isinstance(entry.get("counts"), list),
            f"cohort {cohort} has no counts",
        )
        width = max(width, len(entry["counts"]))
    headers = ["cohort", "first", *(str(i) for i in range(width))]
    rows = []
    for cohort, entry in payload.items():
        counts = entry["counts"]
        padded = [_cell(c) for c in counts] + [""] * (width - len(counts))
        rows.append([_cell(cohort), _cell(entry.get("first")), *padded])
    return markdown_table(headers, rows)


def render_mapping(payload: Any, *, key: str | None = None, label: str = "date") -> list[str]:
    """Render ``{label: scalar}`` or ``{label: [n, ...]}`` as one table."""
    mapping = _unwrap(payload, key)
    _expect(isinstance(mapping, dict), "expected an object")
    if not mapping:
        return [_EMPTY]
    entries = list(mapping.items())
    if all(isinstance(v, list) for _, v in entries):
        width = max(len(v) for _, v in entries)
        headers = [label, *(str(i) for i in range(1, width + 1))]
        rows = [[_cell(k)] + [_cell(x) for x in v] + [""] * (width - len(v)) for k, v in entries]
        return markdown_table(headers, rows)
    _expect(all(_is_scalar(v) for _, v in entries), "expected scalar values")
    return markdown_table([label, "value"], ([_cell(k), _cell(v, k)] for k, v in entries))


def render_keyed_records(payload: Any, *, label: str = "name") -> list[str]:
    """Render ``{name: {field: value}}`` with one row per name."""
    _expect(isinstance(payload, dict), "expected an object")
    if not payload:
        return [_EMPTY]
    records = []
    for name, fields in payload.items():
        _expect(isinstance(fields, dict), f"entry '{name}' is not an object")
        records.append({label: name} | fields)
    return _record_table(records)


def _scalar_summary(payload: dict[str, Any], skip: str) -> list[str]:
    scalars = [(k, v) for k, v in payload.items() if k != skip and _is_scalar(v)]
    if not scalars:
        return []
    return [f"- **{k}**: {_cell(v, k)}" for k, v in scalars] + [""]


def render_profiles(payload: Any) -> list[str]:
    """Render an engage response: paging summary, then one row per profile."""
    results = _unwrap(payload, "results")
    _expect(isinstance(results, list), "'results' is not a list")
    lines = _scalar_summary(payload, "results")
    if not results:
        return [*lines, _EMPTY]
    records = []
    for profile in results:
        _expect(isinstance(profile, dict), "profile is not an object")
        properties = profile.get("$properties", {})
        _expect(isinstance(properties, dict), "'$properties' is not an object")
        head = {k: v for k, v in profile.items() if k != "$properties"}
        records.append(head | properties)
    return [*lines, *_record_table(records)]


def render_activity(payload: Any) -> list[str]:
    """Render a stream query response: one row per event."""
    results = _unwrap(payload, "results")
    _expect(isinstance(results, dict), "'results' is not an object")
    events = results.get("events")
    _expect(isinstance(events, list), "missing 'events'")
    if not events:
        return [_EMPTY]
    records = []
    for event in events:
        _expect(isinstance(event, dict), "event is not an object")
        properties = event.get("properties", {})
        _expect(isinstance(properties, dict), "'properties' is not an object")
        records.append({"event": event.get("event")} | properties)
    return _record_table(records)


def render_insights(payload: Any) -> list[str]:
    """Render a saved Insights report: one table per series."""
    series = _unwrap(payload, "series")
    _expect(isinstance(series, dict), "'series' is not an object")
    lines: list[str] = []
    if payload.get("computed_at"):
        lines.append(f"- **computed_at**: {_cell(payload['computed_at'])}")
    date_range = payload.get("date_range")
    if isinstance(date_range, dict):
        lines.append(
            f"- **date_range**: {_cell(date_range.get('from_date'))}"
            f" to {_cell(date_range.get('to_date'))}"
        )
    if lines:
        lines.append("")
    if not series:
        return [*lines, _EMPTY]
    for name, values in series.items():
        lines.append(f"## {name}")
        lines.append("")
        lines.extend(render_mapping(values))
        lines.append("")
    return lines[:-1]


def render_json(payload: Any) -> list[str]:
    """Render an arbitrary payload: records when it is a list, else raw JSON."""
    if isinstance(payload, list):
        return render_records(payload)
    raise UnexpectedPayloadError("no tabular shape")


# ── Report ───────────────────────────────────────────────────────


def _parameter_block(params: dict[str, Any]) -> list[str]:
    return [f"- **{name}**: {_cell(value)}" for name, value in params.items() if value is not None]


def render_report(definition: ToolDefinition, params: dict[str, Any], payload: Any) -> str:
    """Render *payload* for *definition* as a Markdown document.

    Falls back to the raw JSON text when the payload does not have the
    shape the endpoint's renderer understands.
    """
    if isinstance(payload, str):
        body = ["```", payload.rstrip("\n"), "```"]
    else:
        try:
            body = definition.renderer(payload)
        except UnexpectedPayloadError as e:
            logger.debug("Falling back to raw JSON for %s: %s", definition.name, e)
            return json.dumps(payload, ensure_ascii=False)

    lines = [f"# {definition.title}", ""]
    echo = _parameter_block(params)
    if echo:
        lines.extend([*echo, ""])
    lines.extend(body)
    return "\n".join(lines)
