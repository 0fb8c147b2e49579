"""Endpoint-level projections over the loaded OpenAPI document."""

from __future__ import annotations

import copy
from typing import Any, Dict, List, Optional, Tuple

from .errors import NotFound
from .models import (
    EndpointDetail,
    EndpointSummary,
    ParameterView,
    RequestBodyView,
    ResponseView,
)
from .spec_store import SpecStore


HTTP_METHODS = ("get", "post", "put", "patch", "delete", "options", "head")


class EndpointIndex:
    def __init__(self, store: SpecStore) -> None:
        self.store = store

    def detail(self, path: str, method: str) -> EndpointDetail:
        paths = self._paths()
        normalized = method.lower()
        path_item = paths.get(path)
        if normalized not in HTTP_METHODS or not isinstance(path_item, dict):
            raise NotFound(f"Endpoint not found: {method.upper()} {path}")
        operation = path_item.get(normalized)
        if not isinstance(operation, dict):
            raise NotFound(f"Endpoint not found: {method.upper()} {path}")

        return EndpointDetail(
            path=path,
            method=method.upper(),
            summary=_text(operation.get("summary")),
            description=_text(operation.get("description")),
            operation_id=_text(operation.get("operationId")),
            tags=_tags(operation),
            parameters=self._parameters(
                _as_list(path_item.get("parameters")), _as_list(operation.get("parameters"))
            ),
            request_body=self._request_body(operation.get("requestBody")),
            responses=self._responses(operation.get("responses")),
            security=copy.deepcopy(_as_list(operation.get("security"))),
        )

    def list(self, tag: Optional[str] = None) -> List[EndpointSummary]:
        endpoints: List[EndpointSummary] = []
        for path, path_item in self._paths().items():
            if not isinstance(path_item, dict):
                continue
            for method, operation in path_item.items():
                if method not in HTTP_METHODS or not isinstance(operation, dict):
                    continue
                endpoints.append(
                    EndpointSummary(
                        path=str(path),
                        method=method.upper(),
                        summary=_text(operation.get("summary")),
                        operation_id=_text(operation.get("operationId")),
                        tags=_tags(operation),
                    )
                )

        if tag:
            endpoints = [endpoint for endpoint in endpoints if tag in endpoint.tags]
        return endpoints

    def _paths(self) -> Dict[Any, Any]:
        paths = self.store.load().get("paths")
        return paths if isinstance(paths, dict) else {}

    def _parameters(
        self, shared: List[Any], own: List[Any]
    ) -> List[ParameterView]:
        # Operation-level parameters override path-level ones with the same (name, in).
        merged: Dict[Tuple[str, str, str], Dict[str, Any]] = {}
        for parameter in [*shared, *own]:
            if not isinstance(parameter, dict):
                continue
            key = (
                str(parameter.get("name")),
                str(parameter.get("in")),
                str(parameter.get("$ref")),
            )
            merged[key] = parameter
        return [
            ParameterView(
                name=_text(parameter.get("name")),
                location=_text(parameter.get("in")),
                description=_text(parameter.get("description")),
                required=parameter.get("required") is True,
                schema_=copy.deepcopy(parameter.get("schema")),
                example=copy.deepcopy(parameter.get("example")),
            )
            for parameter in merged.values()
        ]

    def _request_body(self, request_body: Any) -> Optional[RequestBodyView]:
        if not isinstance(request_body, dict) or not request_body:
            return None
        return RequestBodyView(
            description=_text(request_body.get("description")),
            required=request_body.get("required") is True,
            content=copy.deepcopy(_as_dict(request_body.get("content"))),
        )

    def _responses(self, responses: Any) -> Dict[str, ResponseView]:
        processed: Dict[str, ResponseView] = {}
        for code, response in _as_dict(responses).items():
            response = _as_dict(response)
            processed[str(code)] = ResponseView(
                description=_text(response.get("description")),
                content=copy.deepcopy(_as_dict(response.get("content"))),
                headers=copy.deepcopy(_as_dict(response.get("headers"))),
            )
        return processed


def _tags(operation: Dict[str, Any]) -> List[str]:
    return [str(tag) for tag in _as_list(operation.get("tags"))]


def _as_list(value: Any) -> List[Any]:
    return value if isinstance(value, list) else []


def _as_dict(value: Any) -> Dict[Any, Any]:
    return value if isinstance(value, dict) else {}


def _text(value: Any) -> Optional[str]:
    # YAML may type these as numbers, booleans or dates.
    return None if value is None else str(value)
