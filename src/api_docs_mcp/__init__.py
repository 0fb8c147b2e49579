"""Serve an OpenAPI document over JSON-RPC and MCP, with schema-driven mocks."""

__version__ = "0.1.0"
