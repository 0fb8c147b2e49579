"""Shared fixtures for the API docs server tests."""

from __future__ import annotations

from pathlib import Path

import pytest
from starlette.applications import Starlette
from starlette.testclient import TestClient

from api_docs_mcp.config import Settings
from api_docs_mcp.facade import QueryFacade
from api_docs_mcp.server import configure_app
from api_docs_mcp.spec_store import SpecStore


FIXTURES = Path(__file__).parent / "fixtures"
OPENAPI_FIXTURE = FIXTURES / "openapi.yaml"

VALID_TOKEN = "test-frontend-token"


# ---------------------------------------------------------------------------
# Core components
# ---------------------------------------------------------------------------

@pytest.fixture
def store() -> SpecStore:
    return SpecStore(str(OPENAPI_FIXTURE))


@pytest.fixture
def facade(store) -> QueryFacade:
    return QueryFacade(store)


# ---------------------------------------------------------------------------
# HTTP surface
# ---------------------------------------------------------------------------

def make_settings(**overrides) -> Settings:
    """Settings pinned to the fixture document, independent of the environment."""
    values = {
        "mcp_openapi_path": str(OPENAPI_FIXTURE),
        "mcp_auth_driver": "token",
        "mcp_auth_tokens": f"{VALID_TOKEN},test-qa-token",
        "mcp_server_name": "Test MCP Server",
        "mcp_server_version": "1.0.0-test",
        "mcp_server_description": "Test MCP Documentation Server",
    }
    values.update(overrides)
    return Settings(**values)


def make_client(settings: Settings) -> TestClient:
    app = Starlette()
    configure_app(app, settings, QueryFacade(SpecStore(settings.mcp_openapi_path)))
    return TestClient(app)


@pytest.fixture
def client() -> TestClient:
    return make_client(make_settings(mcp_auth_driver="none"))


def rpc(method: str, params=None, request_id=1) -> dict:
    payload = {"jsonrpc": "2.0", "method": method, "id": request_id}
    if params is not None:
        payload["params"] = params
    return payload
