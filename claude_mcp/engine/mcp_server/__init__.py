"""MCP transport layer: tool dispatch, FastMCP registration, stdio entry point."""
