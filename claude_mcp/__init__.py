"""Claude MCP server: the claude CLI exposed as MCP chat tools."""

__version__ = "1.0.0"
