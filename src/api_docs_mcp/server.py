"""MCP and JSON-RPC server setup."""

from __future__ import annotations

import logging
from typing import Any, Awaitable, Callable, Dict, Optional

from fastmcp import FastMCP
from starlette.concurrency import run_in_threadpool
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.middleware.cors import CORSMiddleware
from starlette.requests import Request
from starlette.responses import JSONResponse

from .auth import TokenAuthenticator
from .config import Settings
from .facade import QueryFacade
from .rpc import PARSE_ERROR, JsonRpcDispatcher, error_response
from .spec_store import SpecStore

logger = logging.getLogger(__name__)


def build_server(settings: Settings) -> tuple[FastMCP, object | None]:
    store = SpecStore(settings.mcp_openapi_path, settings.mcp_openapi_timeout_seconds)
    facade = QueryFacade(store)

    mcp = FastMCP(settings.mcp_server_name, instructions=_instructions())
    for name, handler in tool_functions(facade).items():
        mcp.tool(name=name)(handler)
        logger.info("Registered tool: %s", name)

    app = _get_http_app(mcp, settings)
    if app:
        configure_app(app, settings, facade)
    return mcp, app


def configure_app(app, settings: Settings, facade: QueryFacade) -> None:  # type: ignore[no-untyped-def]
    _attach_cors(app)
    _attach_auth(app, settings)
    _attach_healthcheck(app)
    if settings.mcp_enabled:
        mount_jsonrpc(app, JsonRpcDispatcher(facade, settings), settings.rpc_route())
    else:
        logger.warning("JSON-RPC endpoint disabled by configuration")


def tool_functions(
    facade: QueryFacade,
) -> Dict[str, Callable[..., Awaitable[Dict[str, Any]]]]:
    # The facade may block on the first document read, so it runs off the event loop.
    async def get_api_schema(section: Optional[str] = None) -> Dict[str, Any]:
        """Get the full OpenAPI schema or one top-level section of it."""
        return await run_in_threadpool(facade.schema_section, section)

    async def get_endpoint_details(path: str, method: str) -> Dict[str, Any]:
        """Get detailed information about a specific API endpoint."""
        detail = await run_in_threadpool(facade.endpoint_detail, path, method)
        return detail.to_payload()

    async def list_endpoints(tag: Optional[str] = None) -> Dict[str, Any]:
        """List all available API endpoints, optionally filtered by tag."""
        endpoints, total = await run_in_threadpool(facade.endpoints, tag)
        return {"endpoints": [endpoint.to_payload() for endpoint in endpoints], "total": total}

    async def mock_call(path: str, method: str, status_code: int = 200) -> Dict[str, Any]:
        """Generate a mock response for an endpoint based on its response schema."""
        result = await run_in_threadpool(facade.mock_response, path, method, status_code)
        return result.to_payload()

    return {
        handler.__name__: handler
        for handler in (get_api_schema, get_endpoint_details, list_endpoints, mock_call)
    }


def mount_jsonrpc(app, dispatcher: JsonRpcDispatcher, route: str) -> None:  # type: ignore[no-untyped-def]
    async def handle(request: Request) -> JSONResponse:
        try:
            payload = await request.json()
        except ValueError:
            body, status = error_response(PARSE_ERROR, "Parse error")
            return JSONResponse(body, status_code=status)

        body, status = await run_in_threadpool(dispatcher.dispatch, payload)
        return JSONResponse(body, status_code=status)

    app.add_route(route, handle, methods=["POST"])
    logger.info("JSON-RPC endpoint mounted at %s", route)


def _attach_auth(app, settings: Settings) -> None:  # type: ignore[no-untyped-def]
    authenticator = TokenAuthenticator(settings.mcp_auth_driver, settings.auth_tokens())
    rpc_route = settings.rpc_route()

    async def auth_middleware(request, call_next):  # type: ignore[no-untyped-def]
        if request.method == "OPTIONS":
            return await call_next(request)
        if request.url.path.endswith("/health"):
            return await call_next(request)
        if not settings.mcp_enabled and request.url.path.rstrip("/") == rpc_route:
            return JSONResponse({"message": "Not Found"}, status_code=404)

        decision = authenticator.check(request.headers.get("authorization"))
        if decision.allowed:
            return await call_next(request)

        body, status = error_response(
            decision.error_code, decision.message, http_status=decision.status_code
        )
        return JSONResponse(body, status_code=status)

    app.add_middleware(BaseHTTPMiddleware, dispatch=auth_middleware)


def _attach_healthcheck(app) -> None:  # type: ignore[no-untyped-def]
    async def healthcheck(_request):  # type: ignore[no-untyped-def]
        return JSONResponse({"status": "ok"})

    app.add_route("/health", healthcheck, methods=["GET"])


def _instructions() -> str:
    return (
        "API documentation server. "
        "Query the OpenAPI schema, inspect endpoints and generate mock responses."
    )


def _get_http_app(mcp: FastMCP, settings: Settings):  # type: ignore[no-untyped-def]
    transport = settings.mcp_transport.lower()
    if transport in {"http", "streamable-http", "streamablehttp"}:
        return mcp.http_app(transport="http", stateless_http=True, json_response=True)
    return None


def _attach_cors(app) -> None:  # type: ignore[no-untyped-def]
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
