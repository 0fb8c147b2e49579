"""CLI entry point for the API docs MCP server."""

from __future__ import annotations

import asyncio

import uvicorn

from .config import get_settings
from .logging import configure_logging
from .server import build_server


async def _run() -> None:
    settings = get_settings()
    configure_logging(settings.mcp_log_level)

    mcp, app = build_server(settings)
    transport = settings.mcp_transport.lower()

    if transport in {"http", "streamable-http", "streamablehttp"}:
        if not app:
            raise RuntimeError(f"HTTP app unavailable for transport={transport}")
        config = uvicorn.Config(app, host=settings.mcp_host, port=settings.mcp_port)
        server = uvicorn.Server(config)
        await server.serve()
        return
    await mcp.run_stdio_async()


def main() -> None:
    asyncio.run(_run())


if __name__ == "__main__":
    main()
