"""MCP server for Discord forums, threads and channels addressed by name or ID."""

__version__ = "0.2.0"
