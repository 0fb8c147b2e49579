"""Configuration for the API docs MCP server."""

from __future__ import annotations

from functools import lru_cache
from typing import List, Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="", case_sensitive=False)

    mcp_enabled: bool = Field(default=True)

    mcp_openapi_path: str = Field(default="openapi.yaml")
    mcp_openapi_timeout_seconds: float = Field(default=30)

    mcp_rpc_route: str = Field(default="/rpc")
    mcp_transport: str = Field(default="http")
    mcp_host: str = Field(default="0.0.0.0")
    mcp_port: int = Field(default=8000)

    mcp_auth_driver: str = Field(default="token")
    mcp_auth_tokens: Optional[str] = Field(default=None)

    mcp_server_name: str = Field(default="API Docs MCP")
    mcp_server_version: str = Field(default="1.0.0")
    mcp_server_description: str = Field(default="API documentation via MCP")

    mcp_log_level: str = Field(default="INFO")

    def auth_tokens(self) -> List[str]:
        if not self.mcp_auth_tokens:
            return []
        return [item.strip() for item in self.mcp_auth_tokens.split(",") if item.strip()]

    def rpc_route(self) -> str:
        return "/" + self.mcp_rpc_route.strip("/")


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()
