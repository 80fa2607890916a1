"""Static catalogue of Mixpanel Query API tools.

One :class:`ToolDefinition` per endpoint.  Nothing here performs I/O;
the shared pipeline in :mod:`mixpanel_mcp.tools.registry` executes them.
"""

from __future__ import annotations

from functools import partial

from mixpanel_mcp.tools.base import ParameterSpec, ParamKind, ToolDefinition
from mixpanel_mcp.tools.formatting import (
    render_activity,
    render_funnel,
    render_insights,
    render_json,
    render_keyed_records,
    render_mapping,
    render_profiles,
    render_records,
    render_retention,
    render_series,
)

_S = ParamKind.STRING
_N = ParamKind.NUMBER

_WHERE_GRAMMAR = """Uses the grammar:
<expression> ::= 'properties["' <property> '"]'
               | <expression> <binary op> <expression>
               | <unary op> <expression>
               | <math op> '(' <expression> ')'
               | <string literal>
<binary op> ::= '+' | '-' | '*' | '/' | '%' | '==' | '!=' |
                '>' | '>=' | '<' | '<=' | 'in' | 'and' | 'or'
<unary op> ::= '-' | 'not'"""


# ── Shared parameters ────────────────────────────────────────────

PROJECT_ID = ParameterSpec(
    "project_id", _S, "The Mixpanel project ID. Optional since it has a default."
)
WORKSPACE_ID = ParameterSpec("workspace_id", _S, "The ID of the workspace if applicable")
FROM_DATE = ParameterSpec(
    "from_date",
    _S,
    "The date in yyyy-mm-dd format to begin querying from (inclusive)",
    required=True,
)
TO_DATE = ParameterSpec(
    "to_date", _S, "The date in yyyy-mm-dd format to query to (inclusive)", required=True
)
OPTIONAL_FROM_DATE = ParameterSpec("from_date", _S, FROM_DATE.description)
OPTIONAL_TO_DATE = ParameterSpec("to_date", _S, TO_DATE.description)
SINGLE_EVENT = ParameterSpec(
    "event",
    _S,
    "The event that you wish to get data for. Note: this is a single event name, not an array",
    required=True,
)
DATE_INTERVAL = ParameterSpec(
    "interval",
    _N,
    "The number of units to return data for. Specify either interval or from_date and to_date",
)


def _where(subject: str, *, name: str = "where", wire_name: str | None = None) -> ParameterSpec:
    return ParameterSpec(
        name, _S, f"An expression to filter {subject} by. {_WHERE_GRAMMAR}", wire_name=wire_name
    )


def _enum(
    name: str,
    description: str,
    *choices: str,
    required: bool = False,
    default: str | None = None,
) -> ParameterSpec:
    return ParameterSpec(
        name, ParamKind.ENUM, description, required=required, default=default, choices=choices
    )


def _event_type(description: str, *, default: str | None = "general") -> ParameterSpec:
    return _enum("type", description, "general", "unique", "average", default=default)


# ── Events ───────────────────────────────────────────────────────

GET_TODAY_TOP_EVENTS = ToolDefinition(
    name="get_today_top_events",
    title="Today's top events",
    description=(
        "Get today's top events from Mixpanel. Useful for quickly identifying the most "
        "active events happening today, spotting trends, and monitoring real-time user "
        "activity."
    ),
    action="fetching Mixpanel events",
    method="GET",
    path="/events/top",
    parameters=(
        PROJECT_ID,
        _enum(
            "type",
            "The type of events to fetch, either general, average, or unique",
            "general",
            "average",
            "unique",
            default="general",
        ),
        ParameterSpec("limit", _N, "Maximum number of events to return", default=10),
    ),
    renderer=partial(render_records, key="events"),
)

PROFILE_EVENT_ACTIVITY = ToolDefinition(
    name="profile_event_activity",
    title="Profile event activity",
    description=(
        "Get data for a profile's event activity. Useful for understanding individual "
        "user journeys, troubleshooting user-specific issues, and analyzing behavior "
        "patterns of specific users."
    ),
    action="fetching profile event activity",
    method="GET",
    path="/stream/query",
    parameters=(
        PROJECT_ID,
        WORKSPACE_ID,
        ParameterSpec(
            "distinct_ids",
            ParamKind.JSON_ARRAY,
            "A JSON array as a string representing the distinct_ids to return activity "
            'feeds for. Example: ["12a34aa567eb8d-9ab1c26f345b67-89123c45-6aeaa7"]',
            required=True,
        ),
        FROM_DATE,
        TO_DATE,
    ),
    renderer=render_activity,
)

GET_TOP_EVENTS = ToolDefinition(
    name="get_top_events",
    title="Top events (last 31 days)",
    description=(
        "Get a list of the most common events over the last 31 days. Useful for "
        "identifying key user actions, prioritizing feature development, and "
        "understanding overall platform usage patterns."
    ),
    action="fetching Mixpanel events",
    method="GET",
    path="/events/names",
    parameters=(
        PROJECT_ID,
        _enum(
            "type",
            "The type of events to fetch, either general, average, or unique",
            "general",
            "average",
            "unique",
            default="general",
        ),
        ParameterSpec("limit", _N, "Maximum number of events to return", default=10),
    ),
    renderer=partial(render_records, column="event"),
)

AGGREGATE_EVENT_COUNTS = ToolDefinition(
    name="aggregate_event_counts",
    title="Aggregate event counts",
    description=(
        "Get unique, general, or average data for a set of events over N days, weeks, "
        "or months. Useful for trend analysis, comparing event performance over time, "
        "and creating time-series visualizations."
    ),
    action="fetching Mixpanel event counts",
    method="GET",
    path="/events",
    parameters=(
        PROJECT_ID,
        ParameterSpec(
            "event",
            ParamKind.JSON_ARRAY,
            "The event or events that you wish to get data for, a string encoded as a "
            'JSON array. Example: ["play song", "log in", "add playlist"]',
            required=True,
        ),
        _event_type("The type of data to fetch, either general, unique, or average"),
        _enum(
            "unit",
            "The level of granularity of the data you get back",
            "minute",
            "hour",
            "day",
            "week",
            "month",
            required=True,
        ),
        DATE_INTERVAL,
        OPTIONAL_FROM_DATE,
        OPTIONAL_TO_DATE,
    ),
    renderer=render_series,
    requires_date_range=True,
)

AGGREGATED_EVENT_PROPERTY_VALUES = ToolDefinition(
    name="aggregated_event_property_values",
    title="Aggregated event property values",
    description=(
        "Get unique, general, or average data for a single event and property over "
        "days, weeks, or months. Useful for analyzing how specific properties affect "
        "event performance, segmenting users, and identifying valuable user attributes."
    ),
    action="fetching Mixpanel event property values",
    method="GET",
    path="/events/properties",
    parameters=(
        PROJECT_ID,
        ParameterSpec(
            "event",
            _S,
            "The event that you wish to get data for (a single event name, not an array)",
            required=True,
        ),
        ParameterSpec(
            "name", _S, "The name of the property you would like to get data for", required=True
        ),
        ParameterSpec(
            "values",
            ParamKind.JSON_ARRAY,
            'The specific property values to get data for, encoded as a JSON array. Example: ["female", "unknown"]',
        ),
        _event_type("The analysis type - general, unique, or average events"),
        _enum(
            "unit",
            "The level of granularity of the data (minute, hour, day, week, or month)",
            "minute",
            "hour",
            "day",
            "week",
            "month",
            required=True,
        ),
        DATE_INTERVAL,
        OPTIONAL_FROM_DATE,
        OPTIONAL_TO_DATE,
        ParameterSpec("limit", _N, "The maximum number of values to return (default: 255)"),
    ),
    renderer=render_series,
    requires_date_range=True,
)

TOP_EVENT_PROPERTIES = ToolDefinition(
    name="top_event_properties",
    title="Top event properties",
    description=(
        "Get the top property names for an event. Useful for discovering which "
        "properties are most commonly associated with an event, prioritizing which "
        "dimensions to analyze, and understanding event structure."
    ),
    action="fetching top event properties",
    method="GET",
    path="/events/properties/top",
    parameters=(
        PROJECT_ID,
        WORKSPACE_ID,
        SINGLE_EVENT,
        ParameterSpec("limit", _N, "The maximum number of properties to return. Defaults to 10"),
    ),
    renderer=partial(render_keyed_records, label="property"),
)

TOP_EVENT_PROPERTY_VALUES = ToolDefinition(
    name="top_event_property_values",
    title="Top event property values",
    description=(
        "Get the top values for a property. Useful for understanding the distribution "
        "of values for a specific property, identifying the most common categories or "
        "segments, and planning further targeted analyses."
    ),
    action="fetching top event property values",
    method="GET",
    path="/events/properties/values",
    parameters=(
        PROJECT_ID,
        WORKSPACE_ID,
        SINGLE_EVENT,
        ParameterSpec(
            "name", _S, "The name of the property you would like to get data for", required=True
        ),
        ParameterSpec("limit", _N, "The maximum number of values to return. Defaults to 255"),
    ),
    renderer=render_records,
)

# ── Reports ──────────────────────────────────────────────────────

QUERY_INSIGHTS_REPORT = ToolDefinition(
    name="query_insights_report",
    title="Insights report",
    description=(
        "Get data from your Insights reports. Useful for accessing saved analyses, "
        "sharing standardized metrics across teams, and retrieving complex "
        "pre-configured visualizations."
    ),
    action="fetching Mixpanel insights",
    method="GET",
    path="/insights",
    parameters=(
        PROJECT_ID,
        WORKSPACE_ID,
        ParameterSpec("bookmark_id", _S, "The ID of your Insights report", required=True),
    ),
    renderer=render_insights,
)

QUERY_FUNNEL_REPORT = ToolDefinition(
    name="query_funnel_report",
    title="Funnel report",
    description=(
        "Get data for a funnel based on a funnel_id. Useful for analyzing user "
        "conversion paths, identifying drop-off points in user journeys, and optimizing "
        "multi-step processes. Funnel IDs should be retrieved using the "
        "list_saved_funnels tool."
    ),
    action="fetching Mixpanel funnel data",
    method="GET",
    path="/funnels",
    parameters=(
        PROJECT_ID,
        WORKSPACE_ID,
        ParameterSpec(
            "funnel_id", _S, "The Mixpanel funnel ID that you wish to get data for", required=True
        ),
        FROM_DATE,
        TO_DATE,
        ParameterSpec("length", _N, "The number of units each user has to complete the funnel"),
        _enum(
            "length_unit",
            "The unit applied to the length parameter",
            "day",
            "hour",
            "minute",
            "second",
        ),
        ParameterSpec("interval", _N, "The number of days you want each bucket to contain"),
        _enum("unit", "Alternate way of specifying interval", "day", "week", "month"),
    ),
    renderer=render_funnel,
)

LIST_SAVED_FUNNELS = ToolDefinition(
    name="list_saved_funnels",
    title="Saved funnels",
    description=(
        "Get the names and IDs of your saved funnels. Useful for discovering available "
        "funnels for analysis and retrieving funnel IDs needed for the "
        "query_funnel_report tool."
    ),
    action="fetching Mixpanel funnels list",
    method="GET",
    path="/funnels/list",
    parameters=(PROJECT_ID, WORKSPACE_ID),
    renderer=render_records,
)

LIST_SAVED_COHORTS = ToolDefinition(
    name="list_saved_cohorts",
    title="Saved cohorts",
    description=(
        "Get all cohorts in a given project. Useful for discovering user segments, "
        "planning targeted analyses, and retrieving cohort IDs for filtering in other "
        "reports."
    ),
    action="fetching Mixpanel cohorts list",
    method="GET",
    path="/cohorts/list",
    parameters=(PROJECT_ID, WORKSPACE_ID),
    renderer=render_records,
)

QUERY_RETENTION_REPORT = ToolDefinition(
    name="query_retention_report",
    title="Retention report",
    description=(
        "Get data from your Retention reports. Useful for analyzing user engagement over "
        "time, measuring product stickiness, and understanding how well your product "
        "retains users after specific actions. Only use params interval or unit, not both."
    ),
    action="fetching Mixpanel retention data",
    method="GET",
    path="/retention",
    parameters=(
        PROJECT_ID,
        WORKSPACE_ID,
        FROM_DATE,
        TO_DATE,
        _enum(
            "retention_type",
            "Type of retention: 'birth' (first time) or 'compounded' (recurring). "
            "Defaults to 'birth'",
            "birth",
            "compounded",
        ),
        ParameterSpec(
            "born_event",
            _S,
            "The first event a user must do to be counted in a birth retention cohort, "
            "required if retention_type is 'birth'. Can use $mp_web_page_view as the "
            "born_event for general cases.",
        ),
        ParameterSpec(
            "event",
            _S,
            "The event to generate returning counts for. If not specified, looks across all events",
        ),
        _where("born_events", name="born_where"),
        _where("return events", name="return_where", wire_name="where"),
        ParameterSpec(
            "interval",
            _N,
            "The number of units per individual bucketed interval. Default is 1. "
            "DO NOT USE IF ALREADY PROVIDING UNIT.",
        ),
        ParameterSpec(
            "interval_count",
            _N,
            "The number of individual buckets/intervals to return. Default is 1. "
            "DO NOT USE IF ALREADY PROVIDING UNIT.",
        ),
        _enum(
            "unit",
            "The interval unit: 'day' (eg D7 or D30), 'week' (eg W12), or 'month' (eg M6). "
            "Default is 'day'. DO NOT USE IF ALREADY PROVIDING INTERVAL.",
            "day",
            "week",
            "month",
        ),
        ParameterSpec("on", _S, "The property expression to segment the second event on"),
        ParameterSpec(
            "limit",
            _N,
            "Return the top limit segmentation values. Only applies when 'on' is specified",
        ),
    ),
    renderer=render_retention,
)

QUERY_FREQUENCY_REPORT = ToolDefinition(
    name="query_frequency_report",
    title="Frequency report",
    description=(
        "Get data for frequency of actions over time. Useful for analyzing how often "
        "users perform specific actions, identifying patterns of behavior, and tracking "
        "user engagement over time."
    ),
    action="querying frequency report",
    method="GET",
    path="/retention/addiction",
    parameters=(
        PROJECT_ID,
        WORKSPACE_ID,
        FROM_DATE,
        TO_DATE,
        _enum(
            "unit",
            "The overall time period to return frequency of actions for",
            "day",
            "week",
            "month",
            required=True,
        ),
        _enum(
            "addiction_unit",
            "The granularity to return frequency of actions at",
            "hour",
            "day",
            required=True,
        ),
        ParameterSpec("event", _S, "The event to generate returning counts for"),
        _where("the returning events"),
        ParameterSpec("on", _S, "The property expression to segment the second event on"),
        ParameterSpec(
            "limit",
            _N,
            "Return the top limit segmentation values. This parameter does nothing if "
            "'on' is not specified",
        ),
    ),
    renderer=partial(render_mapping, key="data"),
)

# ── Segmentation ─────────────────────────────────────────────────

QUERY_SEGMENTATION_REPORT = ToolDefinition(
    name="query_segmentation_report",
    title="Segmentation report",
    description=(
        "Get data for an event, segmented and filtered by properties. Useful for "
        "breaking down event data by user attributes, comparing performance across "
        "segments, and identifying which user groups perform specific actions."
    ),
    action="querying segmentation report",
    method="GET",
    path="/segmentation",
    parameters=(
        PROJECT_ID,
        WORKSPACE_ID,
        SINGLE_EVENT,
        FROM_DATE,
        TO_DATE,
        ParameterSpec("on", _S, "The property expression to segment the event on"),
        _enum(
            "unit",
            "The buckets into which the property values that you segment on are placed. "
            "Default is 'day'",
            "minute",
            "hour",
            "day",
            "month",
        ),
        ParameterSpec(
            "interval",
            _N,
            "Optional parameter in lieu of 'unit' when 'type' is not 'general'. "
            "Determines the number of days your results are bucketed into",
        ),
        _where("events"),
        ParameterSpec(
            "limit",
            _N,
            "Return the top property values. Defaults to 60. Maximum value 10,000. This "
            "parameter does nothing if 'on' is not specified",
        ),
        _event_type(
            "The type of analysis to perform, either general, unique, or average, "
            "defaults to general",
            default=None,
        ),
        _enum("format", "Can be set to 'csv'", "csv"),
    ),
    renderer=render_series,
)

QUERY_SEGMENTATION_BUCKET = ToolDefinition(
    name="query_segmentation_bucket",
    title="Segmentation buckets",
    description=(
        "Get data for an event, segmented and filtered by properties, with values "
        "placed into numeric buckets. Useful for analyzing distributions of numeric "
        "values, creating histograms, and understanding the range of quantitative metrics."
    ),
    action="querying segmentation bucket",
    method="GET",
    path="/segmentation/numeric",
    parameters=(
        PROJECT_ID,
        WORKSPACE_ID,
        SINGLE_EVENT,
        FROM_DATE,
        TO_DATE,
        ParameterSpec(
            "on",
            _S,
            "The property expression to segment the event on. This expression must be a "
            "numeric property",
            required=True,
        ),
        _enum(
            "unit",
            "The buckets into which the property values that you segment on are placed. "
            "Default is 'day'",
            "hour",
            "day",
        ),
        _where("events"),
        _event_type(
            "The type of analysis to perform, either general, unique, or average, "
            "defaults to general",
            default=None,
        ),
    ),
    renderer=render_series,
)

QUERY_SEGMENTATION_SUM = ToolDefinition(
    name="query_segmentation_sum",
    title="Segmentation sum",
    description=(
        "Sum a numeric expression for events over time. Useful for calculating revenue "
        "metrics, aggregating quantitative values, and tracking cumulative totals across "
        "different time periods."
    ),
    action="fetching Mixpanel segmentation sum data",
    method="GET",
    path="/segmentation/sum",
    parameters=(
        PROJECT_ID,
        WORKSPACE_ID,
        ParameterSpec(
            "event",
            _S,
            "The event that you wish to get data for (single event name, not an array)",
            required=True,
        ),
        FROM_DATE,
        TO_DATE,
        ParameterSpec(
            "on",
            _S,
            "The expression to sum per unit time (should result in a numeric value)",
            required=True,
        ),
        _enum("unit", "Time bucket size: 'hour' or 'day'. Default is 'day'", "hour", "day"),
        _where("events"),
    ),
    renderer=partial(render_mapping, key="results"),
)

QUERY_SEGMENTATION_AVERAGE = ToolDefinition(
    name="query_segmentation_average",
    title="Segmentation average",
    description=(
        "Averages an expression for events per unit time. Useful for calculating average "
        "values like purchase amounts, session durations, or any numeric metric, and "
        "tracking how these averages change over time."
    ),
    action="querying segmentation average",
    method="GET",
    path="/segmentation/average",
    parameters=(
        PROJECT_ID,
        WORKSPACE_ID,
        SINGLE_EVENT,
        FROM_DATE,
        TO_DATE,
        ParameterSpec(
            "on",
            _S,
            "The expression to average per unit time. The result of the expression should "
            "be a numeric value",
            required=True,
        ),
        _enum(
            "unit",
            "The buckets [hour, day] into which the property values are placed. Default is 'day'",
            "hour",
            "day",
        ),
        _where("events"),
    ),
    renderer=partial(render_mapping, key="results"),
)

# ── Profiles and JQL (form-encoded POST) ─────────────────────────

QUERY_PROFILES = ToolDefinition(
    name="query_profiles",
    title="User profiles",
    description=(
        "Query Mixpanel user profiles with filtering options. Useful for retrieving "
        "detailed user profiles, filtering by specific properties, and analyzing user "
        "behavior across different dimensions."
    ),
    action="querying profiles",
    method="POST",
    path="/engage",
    parameters=(
        PROJECT_ID,
        WORKSPACE_ID,
        ParameterSpec(
            "distinct_id", _S, "A unique identifier used to distinguish an individual profile"
        ),
        ParameterSpec(
            "distinct_ids",
            ParamKind.JSON_ARRAY,
            'A JSON array of distinct_ids to retrieve profiles for. Example: ["id1", "id2"]',
        ),
        ParameterSpec(
            "data_group_id", _S, "The ID of the group key, used when querying group profiles"
        ),
        _where("users (or groups)"),
        ParameterSpec(
            "output_properties",
            ParamKind.JSON_ARRAY,
            "A JSON array of names of properties you want returned. "
            'Example: ["$last_name", "$email", "Total Spent"]',
        ),
        ParameterSpec(
            "session_id",
            _S,
            "A string id provided in the results of a previous query. Using a session_id "
            "speeds up api response, and allows paging through results",
        ),
        ParameterSpec(
            "page",
            _N,
            "Which page of the results to retrieve. Pages start at zero. If the 'page' "
            "parameter is provided, the session_id parameter must also be provided",
        ),
        ParameterSpec(
            "behaviors",
            _N,
            "If you are exporting user profiles using an event selector, you use a "
            "'behaviors' parameter in your request",
        ),
        ParameterSpec(
            "as_of_timestamp", _N, "This parameter is only useful when also using 'behaviors'"
        ),
        ParameterSpec(
            "filter_by_cohort",
            ParamKind.JSON_OBJECT,
            "Takes a JSON object with a single key called 'id' whose value is the cohort "
            'ID. Example: {"id":12345}',
        ),
        ParameterSpec(
            "include_all_users",
            ParamKind.BOOLEAN,
            "Only applicable with 'filter_by_cohort' parameter. Default is true",
        ),
    ),
    renderer=render_profiles,
)

CUSTOM_JQL = ToolDefinition(
    name="custom_jql",
    title="JQL query",
    description=(
        "Run a custom JQL (JSON Query Language) script against your Mixpanel data. "
        "Useful for complex custom analyses, advanced data transformations, and queries "
        "that can't be handled by standard report types."
    ),
    action="executing JQL query",
    method="POST",
    path="/jql",
    parameters=(
        PROJECT_ID,
        WORKSPACE_ID,
        ParameterSpec(
            "script",
            _S,
            "The JQL script to run (JavaScript code that uses Mixpanel's JQL functions)",
            required=True,
        ),
        ParameterSpec(
            "params",
            ParamKind.JSON_OBJECT,
            "A JSON string containing parameters to pass to the script (will be available "
            "as the 'params' variable)",
        ),
    ),
    renderer=render_json,
)


TOOLS: tuple[ToolDefinition, ...] = (
    GET_TODAY_TOP_EVENTS,
    PROFILE_EVENT_ACTIVITY,
    GET_TOP_EVENTS,
    AGGREGATE_EVENT_COUNTS,
    AGGREGATED_EVENT_PROPERTY_VALUES,
    QUERY_INSIGHTS_REPORT,
    QUERY_FUNNEL_REPORT,
    LIST_SAVED_FUNNELS,
    LIST_SAVED_COHORTS,
    QUERY_RETENTION_REPORT,
    CUSTOM_JQL,
    QUERY_SEGMENTATION_SUM,
    QUERY_PROFILES,
    QUERY_FREQUENCY_REPORT,
    QUERY_SEGMENTATION_REPORT,
    QUERY_SEGMENTATION_BUCKET,
    QUERY_SEGMENTATION_AVERAGE,
    TOP_EVENT_PROPERTIES,
    TOP_EVENT_PROPERTY_VALUES,
)
