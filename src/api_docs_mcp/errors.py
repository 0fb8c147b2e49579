"""Failure taxonomy shared by the store, the query layer and the dispatcher."""

from __future__ import annotations


class ApiDocsError(Exception):
    """Base class for typed failures surfaced to JSON-RPC callers."""

    code: int = -32603
    http_status: int = 500


class InvalidArgument(ApiDocsError):
    code = -32602
    http_status = 400


class MethodNotFound(ApiDocsError):
    code = -32601
    http_status = 404


class NotFound(ApiDocsError):
    code = -32004
    http_status = 404


class ParseError(ApiDocsError):
    pass


class NotRepresentable(ApiDocsError):
    pass
