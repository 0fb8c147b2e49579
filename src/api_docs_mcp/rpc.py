"""JSON-RPC 2.0 dispatcher for the documentation queries."""

from __future__ import annotations

import logging
from enum import Enum
from typing import Any, Callable, Dict, List, Optional, Tuple

from pydantic import BaseModel, TypeAdapter, ValidationError

from .config import Settings
from .errors import ApiDocsError, InvalidArgument, MethodNotFound
from .facade import QueryFacade
from .logging import redact_payload
from .models import (
    GetApiSchemaParams,
    GetEndpointDetailsParams,
    ListEndpointsParams,
    MockCallParams,
)


logger = logging.getLogger(__name__)

PROTOCOL_VERSION = "2024-11-05"

PARSE_ERROR = -32700
INVALID_REQUEST = -32600
INTERNAL_ERROR = -32603

_JSON = TypeAdapter(Any)

HTTP_STATUS_BY_CODE: Dict[int, int] = {
    PARSE_ERROR: 400,
    INVALID_REQUEST: 400,
    MethodNotFound.code: 404,
    InvalidArgument.code: 400,
    INTERNAL_ERROR: 500,
}


class RpcMethod(str, Enum):
    INITIALIZE = "initialize"
    LIST_TOOLS = "list_tools"
    GET_API_SCHEMA = "get_api_schema"
    GET_ENDPOINT_DETAILS = "get_endpoint_details"
    LIST_ENDPOINTS = "list_endpoints"
    MOCK_CALL = "mock_call"


TOOL_DEFINITIONS: List[Dict[str, Any]] = [
    {
        "name": RpcMethod.GET_API_SCHEMA.value,
        "description": "Get the full OpenAPI schema or specific parts of it",
        "inputSchema": {
            "type": "object",
            "properties": {
                "section": {
                    "type": "string",
                    "description": "Optional section to retrieve (paths, components, info, etc.)",
                    "enum": ["paths", "components", "info", "servers", "tags"],
                },
            },
        },
    },
    {
        "name": RpcMethod.GET_ENDPOINT_DETAILS.value,
        "description": "Get detailed information about a specific API endpoint",
        "inputSchema": {
            "type": "object",
            "properties": {
                "path": {"type": "string", "description": "The API path (e.g., /api/users/{id})"},
                "method": {
                    "type": "string",
                    "description": "HTTP method",
                    "enum": ["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS", "HEAD"],
                },
            },
            "required": ["path", "method"],
        },
    },
    {
        "name": RpcMethod.LIST_ENDPOINTS.value,
        "description": "List all available API endpoints with basic information",
        "inputSchema": {
            "type": "object",
            "properties": {
                "tag": {"type": "string", "description": "Optional tag to filter endpoints"},
            },
        },
    },
    {
        "name": RpcMethod.MOCK_CALL.value,
        "description": "Generate a mock response for an endpoint based on its schema",
        "inputSchema": {
            "type": "object",
            "properties": {
                "path": {"type": "string", "description": "The API path"},
                "method": {"type": "string", "description": "HTTP method"},
                "status_code": {
                    "type": "integer",
                    "description": "HTTP status code for the mock response (default: 200)",
                    "default": 200,
                },
            },
            "required": ["path", "method"],
        },
    },
]


class JsonRpcDispatcher:
    def __init__(self, facade: QueryFacade, settings: Settings) -> None:
        self.facade = facade
        self.settings = settings
        self._handlers: Dict[RpcMethod, Callable[[Dict[str, Any]], Any]] = {
            RpcMethod.INITIALIZE: self._initialize,
            RpcMethod.LIST_TOOLS: self._list_tools,
            RpcMethod.GET_API_SCHEMA: self._get_api_schema,
            RpcMethod.GET_ENDPOINT_DETAILS: self._get_endpoint_details,
            RpcMethod.LIST_ENDPOINTS: self._list_endpoints,
            RpcMethod.MOCK_CALL: self._mock_call,
        }
        missing = set(RpcMethod) - set(self._handlers)
        if missing:
            raise RuntimeError(f"No handler for RPC methods: {sorted(m.value for m in missing)}")

    def dispatch(self, payload: Any) -> Tuple[Dict[str, Any], int]:
        """Handle one decoded request body and return ``(response, http_status)``."""
        if not self._is_valid_envelope(payload):
            request_id = payload.get("id") if isinstance(payload, dict) else None
            return error_response(INVALID_REQUEST, "Invalid Request", request_id)

        request_id = payload.get("id")
        params = payload.get("params")
        if params is None:
            params = {}
        if not isinstance(params, dict):
            return error_response(InvalidArgument.code, "Invalid params", request_id)

        try:
            method = self._resolve_method(payload["method"])
            logger.info("JSON-RPC call method=%s params=%s", method.value, redact_payload(params))
            result = self._handlers[method](params)
        except ApiDocsError as exc:
            logger.warning("JSON-RPC %s failed: %s", payload["method"], exc)
            return error_response(exc.code, str(exc), request_id, exc.http_status)
        except Exception as exc:
            logger.exception("JSON-RPC %s crashed", payload["method"])
            return error_response(INTERNAL_ERROR, f"Internal error: {exc}", request_id)

        # YAML timestamps and similar scalars become JSON strings.
        result = _JSON.dump_python(result, mode="json")
        return {"jsonrpc": "2.0", "result": result, "id": request_id}, 200

    def _is_valid_envelope(self, payload: Any) -> bool:
        return (
            isinstance(payload, dict)
            and payload.get("jsonrpc") == "2.0"
            and isinstance(payload.get("method"), str)
        )

    def _resolve_method(self, name: str) -> RpcMethod:
        try:
            return RpcMethod(name)
        except ValueError:
            raise MethodNotFound(f"Method not found: {name}") from None

    def _initialize(self, params: Dict[str, Any]) -> Dict[str, Any]:
        return {
            "protocolVersion": PROTOCOL_VERSION,
            "capabilities": {"tools": {"listChanged": False}},
            "serverInfo": {
                "name": self.settings.mcp_server_name,
                "version": self.settings.mcp_server_version,
                "description": self.settings.mcp_server_description,
            },
        }

    def _list_tools(self, params: Dict[str, Any]) -> Dict[str, Any]:
        return {"tools": TOOL_DEFINITIONS}

    def _get_api_schema(self, params: Dict[str, Any]) -> Dict[str, Any]:
        request = _parse_params(GetApiSchemaParams, params)
        return self.facade.schema_section(request.section)

    def _get_endpoint_details(self, params: Dict[str, Any]) -> Dict[str, Any]:
        request = _parse_params(GetEndpointDetailsParams, params)
        return self.facade.endpoint_detail(request.path, request.method).to_payload()

    def _list_endpoints(self, params: Dict[str, Any]) -> Dict[str, Any]:
        request = _parse_params(ListEndpointsParams, params)
        endpoints, total = self.facade.endpoints(request.tag)
        return {"endpoints": [endpoint.to_payload() for endpoint in endpoints], "total": total}

    def _mock_call(self, params: Dict[str, Any]) -> Dict[str, Any]:
        request = _parse_params(MockCallParams, params)
        status_code = request.status_code if request.status_code is not None else 200
        return self.facade.mock_response(request.path, request.method, status_code).to_payload()


def error_response(
    code: int, message: str, request_id: Any = None, http_status: Optional[int] = None
) -> Tuple[Dict[str, Any], int]:
    body = {"jsonrpc": "2.0", "error": {"code": code, "message": message}, "id": request_id}
    return body, http_status or HTTP_STATUS_BY_CODE.get(code, 500)


def _parse_params(model: type[BaseModel], params: Dict[str, Any]) -> Any:
    try:
        return model(**params)
    except ValidationError as exc:
        fields = ", ".join(".".join(str(part) for part in error["loc"]) for error in exc.errors())
        raise InvalidArgument(f"Invalid params: {fields}") from exc
