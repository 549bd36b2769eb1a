"""Application layer - MCP server assembly and the HTTP app."""
