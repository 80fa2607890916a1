"""MCP protocol surface."""
