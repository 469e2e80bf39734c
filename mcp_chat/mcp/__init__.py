"""Conversion des serveurs MCP en toolsets pydantic-ai."""
