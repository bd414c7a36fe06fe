"""Generic MCP server template: an upstream API client plus a tool dispatcher."""

__version__ = "0.1.0"
