"""Mixpanel Query API tools.

Declarations live in :mod:`~mixpanel_mcp.tools.catalog`; every call runs
through the shared validate/build/send/render pipeline in
:class:`~mixpanel_mcp.tools.registry.ToolRegistry`.
"""
