"""Read-only query operations exposed to the RPC layer."""

from __future__ import annotations

import copy
import logging
from typing import Any, Dict, List, Optional, Tuple

from .endpoint_index import EndpointIndex
from .errors import InvalidArgument, NotRepresentable
from .mock import MockSynthesizer
from .models import EndpointDetail, EndpointSummary, MockResult, ResponseView
from .schema import SchemaFragment
from .spec_store import SpecStore


logger = logging.getLogger(__name__)

JSON_MEDIA_TYPE = "application/json"


class QueryFacade:
    def __init__(
        self,
        store: SpecStore,
        index: Optional[EndpointIndex] = None,
        synthesizer: Optional[MockSynthesizer] = None,
    ) -> None:
        self.store = store
        self.index = index or EndpointIndex(store)
        self.synthesizer = synthesizer or MockSynthesizer()

    def schema_section(self, name: Optional[str] = None) -> Dict[str, Any]:
        """Return ``{name: value}`` for a top-level key, else the whole document.

        Unknown section names fall back to the full document instead of failing.
        """
        document = self.store.load()
        if name and name in document:
            return {name: copy.deepcopy(document[name])}
        return copy.deepcopy(document)

    def endpoint_detail(self, path: Optional[str], method: Optional[str]) -> EndpointDetail:
        self.store.load()
        path, method = _require_endpoint(path, method)
        return self.index.detail(path, method)

    def endpoints(self, tag: Optional[str] = None) -> Tuple[List[EndpointSummary], int]:
        self.store.load()
        endpoints = self.index.list(tag)
        return endpoints, len(endpoints)

    def mock_response(
        self, path: Optional[str], method: Optional[str], status_code: int = 200
    ) -> MockResult:
        """Synthesize a JSON body for the response declared under ``status_code``.

        When that code is undocumented the first declared 2xx response is used,
        but the result still reports the requested code.
        """
        self.store.load()
        path, method = _require_endpoint(path, method)
        detail = self.index.detail(path, method)

        response = _select_response(detail.responses, status_code)
        if response is None:
            raise NotRepresentable(
                f"No {status_code} or 2xx response documented for {detail.method} {path}"
            )

        media = response.content.get(JSON_MEDIA_TYPE)
        schema = media.get("schema") if isinstance(media, dict) else None
        if not isinstance(schema, dict):
            raise NotRepresentable(
                f"Response has no {JSON_MEDIA_TYPE} schema for {detail.method} {path}"
            )

        body = self.synthesizer.synthesize(SchemaFragment.parse(schema))
        if body is None:
            raise NotRepresentable(f"Cannot generate mock response for {detail.method} {path}")

        logger.debug("Generated mock for %s %s (%s)", detail.method, path, status_code)
        return MockResult(
            path=path,
            method=detail.method,
            status_code=status_code,
            mock_response=body,
        )


def _require_endpoint(path: Optional[str], method: Optional[str]) -> Tuple[str, str]:
    if not path or not method:
        raise InvalidArgument("Both path and method parameters are required")
    return path, method


def _select_response(
    responses: Dict[str, ResponseView], status_code: int
) -> Optional[ResponseView]:
    key = str(status_code)
    if key in responses:
        return responses[key]
    for code, response in responses.items():
        if code.startswith("2"):
            return response
    return None
