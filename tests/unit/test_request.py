"""Tests for request construction."""

from __future__ import annotations

import base64

import httpx
import pytest

from mixpanel_mcp.config.schema import MixpanelConfig
from mixpanel_mcp.tools.catalog import (
    CUSTOM_JQL,
    GET_TODAY_TOP_EVENTS,
    LIST_SAVED_FUNNELS,
    QUERY_PROFILES,
    QUERY_RETENTION_REPORT,
    QUERY_SEGMENTATION_REPORT,
    QUERY_SEGMENTATION_SUM,
    TOOLS,
)
from mixpanel_mcp.tools.request import (
    base_url,
    basic_auth_header,
    build_request,
    serialize_value,
)
from mixpanel_mcp.tools.validation import validate_arguments


def _params(full_url: str) -> list[tuple[str, str]]:
    return httpx.URL(full_url).params.multi_items()


# ── Base URL ─────────────────────────────────────────────────────


class TestBaseUrl:
    def test_eu(self):
        assert base_url("eu") == "https://eu.mixpanel.com/api/query"

    def test_eu_case_insensitive(self):
        assert base_url("EU") == "https://eu.mixpanel.com/api/query"

    @pytest.mark.parametrize("region", [None, "", "us", "in"])
    def test_default_host(self, region):
        assert base_url(region) == "https://mixpanel.com/api/query"

    @pytest.mark.parametrize("definition", TOOLS, ids=lambda d: d.name)
    def test_every_tool_uses_eu_host(self, definition):
        config = MixpanelConfig(username="u", password="p", project_id="1", region="eu")
        spec = build_request(definition, {"project_id": "1"}, config)
        assert httpx.URL(spec.full_url).host == "eu.mixpanel.com"
        assert spec.url == "https://eu.mixpanel.com/api/query" + definition.path

    @pytest.mark.parametrize("definition", TOOLS, ids=lambda d: d.name)
    def test_every_tool_uses_default_host(self, definition, mixpanel_config):
        spec = build_request(definition, {"project_id": "1"}, mixpanel_config)
        assert httpx.URL(spec.full_url).host == "mixpanel.com"


# ── Serialisation ────────────────────────────────────────────────


class TestSerializeValue:
    def test_bool(self):
        assert serialize_value(True) == "true"
        assert serialize_value(False) == "false"

    def test_integral_float(self):
        assert serialize_value(10.0) == "10"

    def test_fractional_float(self):
        assert serialize_value(2.5) == "2.5"

    def test_int_and_str(self):
        assert serialize_value(7) == "7"
        assert serialize_value("day") == "day"


# ── GET requests ─────────────────────────────────────────────────


class TestGetRequests:
    def test_segmentation_sum_query_has_exactly_the_parameters(self, mixpanel_config):
        args = {
            "on": 'properties["p"]',
            "to_date": "2024-01-02",
            "event": "X",
            "from_date": "2024-01-01",
            "project_id": "99",
        }
        params = validate_arguments(QUERY_SEGMENTATION_SUM, args, "12345")
        spec = build_request(QUERY_SEGMENTATION_SUM, params, mixpanel_config)

        items = _params(spec.full_url)
        assert sorted(items) == sorted(
            [
                ("project_id", "99"),
                ("event", "X"),
                ("from_date", "2024-01-01"),
                ("to_date", "2024-01-02"),
                ("on", 'properties["p"]'),
            ]
        )
        assert spec.full_url.startswith("https://mixpanel.com/api/query/segmentation/sum?")
        assert '"' not in spec.full_url
        assert "[" not in spec.full_url

    def test_argument_order_does_not_change_query(self, mixpanel_config):
        a = {"event": "X", "from_date": "2024-01-01", "to_date": "2024-01-02", "on": "n"}
        b = dict(reversed(list(a.items())))
        spec_a = build_request(
            QUERY_SEGMENTATION_SUM, validate_arguments(QUERY_SEGMENTATION_SUM, a, "1"), mixpanel_config
        )
        spec_b = build_request(
            QUERY_SEGMENTATION_SUM, validate_arguments(QUERY_SEGMENTATION_SUM, b, "1"), mixpanel_config
        )
        assert spec_a.full_url == spec_b.full_url

    def test_defaults_included(self, mixpanel_config):
        params = validate_arguments(GET_TODAY_TOP_EVENTS, {}, mixpanel_config.project_id)
        spec = build_request(GET_TODAY_TOP_EVENTS, params, mixpanel_config)
        assert dict(_params(spec.full_url)) == {
            "project_id": "12345",
            "type": "general",
            "limit": "10",
        }
        assert spec.method == "GET"
        assert spec.body == {}

    def test_empty_values_omitted(self, mixpanel_config):
        spec = build_request(
            LIST_SAVED_FUNNELS, {"project_id": "1", "workspace_id": ""}, mixpanel_config
        )
        assert spec.query == {"project_id": "1"}

    def test_wire_name_used(self, mixpanel_config):
        args = {
            "from_date": "2024-01-01",
            "to_date": "2024-01-31",
            "return_where": 'properties["plan"] == "pro"',
        }
        params = validate_arguments(QUERY_RETENTION_REPORT, args, "1")
        spec = build_request(QUERY_RETENTION_REPORT, params, mixpanel_config)
        assert spec.query["where"] == 'properties["plan"] == "pro"'
        assert "return_where" not in spec.query

    def test_csv_format_does_not_expect_json(self, mixpanel_config):
        args = {"event": "X", "from_date": "2024-01-01", "to_date": "2024-01-02", "format": "csv"}
        params = validate_arguments(QUERY_SEGMENTATION_REPORT, args, "1")
        spec = build_request(QUERY_SEGMENTATION_REPORT, params, mixpanel_config)
        assert spec.expects_json is False


# ── POST requests ────────────────────────────────────────────────


class TestPostRequests:
    def test_profiles_split_query_and_body(self, mixpanel_config):
        args = {
            "workspace_id": "3",
            "where": 'properties["$email"] == "a@b.c"',
            "page": 0,
            "session_id": "s-1",
            "include_all_users": False,
        }
        params = validate_arguments(QUERY_PROFILES, args, "12345")
        spec = build_request(QUERY_PROFILES, params, mixpanel_config)
        assert spec.method == "POST"
        assert spec.query == {"project_id": "12345", "workspace_id": "3"}
        assert spec.body == {
            "where": 'properties["$email"] == "a@b.c"',
            "session_id": "s-1",
            "page": "0",
            "include_all_users": "false",
        }
        assert spec.headers["content-type"] == "application/x-www-form-urlencoded"

    def test_jql_script_in_body(self, mixpanel_config):
        params = validate_arguments(CUSTOM_JQL, {"script": "function main() {}"}, "1")
        spec = build_request(CUSTOM_JQL, params, mixpanel_config)
        assert spec.query == {"project_id": "1"}
        assert spec.body == {"script": "function main() {}"}


# ── Headers ──────────────────────────────────────────────────────


class TestHeaders:
    def test_basic_auth_header(self):
        expected = base64.b64encode(b"svc:secret").decode()
        assert basic_auth_header("svc", "secret") == f"Basic {expected}"

    @pytest.mark.parametrize("definition", [LIST_SAVED_FUNNELS, QUERY_PROFILES])
    def test_headers_on_get_and_post(self, definition, mixpanel_config):
        spec = build_request(definition, {"project_id": "1"}, mixpanel_config)
        assert spec.headers["accept"] == "application/json"
        assert spec.headers["authorization"] == basic_auth_header("svc", "secret")

    def test_get_has_no_content_type(self, mixpanel_config):
        spec = build_request(LIST_SAVED_FUNNELS, {"project_id": "1"}, mixpanel_config)
        assert "content-type" not in spec.headers
