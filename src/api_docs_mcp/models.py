"""Result views and RPC parameter models."""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field


class _View(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    def to_payload(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True)


class ParameterView(_View):
    name: Optional[str] = None
    location: Optional[str] = Field(default=None, alias="in")
    description: Optional[str] = None
    required: bool = False
    schema_: Optional[Any] = Field(default=None, alias="schema")
    example: Optional[Any] = None


class RequestBodyView(_View):
    description: Optional[str] = None
    required: bool = False
    content: Dict[str, Any] = Field(default_factory=dict)


class ResponseView(_View):
    description: Optional[str] = None
    content: Dict[str, Any] = Field(default_factory=dict)
    headers: Dict[str, Any] = Field(default_factory=dict)


class EndpointDetail(_View):
    path: str
    method: str
    summary: Optional[str] = None
    description: Optional[str] = None
    operation_id: Optional[str] = Field(default=None, alias="operationId")
    tags: List[str] = Field(default_factory=list)
    parameters: List[ParameterView] = Field(default_factory=list)
    request_body: Optional[RequestBodyView] = Field(default=None, alias="requestBody")
    responses: Dict[str, ResponseView] = Field(default_factory=dict)
    security: List[Any] = Field(default_factory=list)


class EndpointSummary(_View):
    path: str
    method: str
    summary: Optional[str] = None
    operation_id: Optional[str] = Field(default=None, alias="operationId")
    tags: List[str] = Field(default_factory=list)


class MockResult(_View):
    path: str
    method: str
    status_code: int
    mock_response: Any


class GetApiSchemaParams(BaseModel):
    section: Optional[str] = None


class GetEndpointDetailsParams(BaseModel):
    path: Optional[str] = None
    method: Optional[str] = None


class ListEndpointsParams(BaseModel):
    tag: Optional[str] = None


class MockCallParams(BaseModel):
    path: Optional[str] = None
    method: Optional[str] = None
    status_code: Optional[int] = None
