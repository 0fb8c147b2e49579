"""Logging helpers with redaction."""

from __future__ import annotations

import logging
import re
from typing import Any, Dict


_SENSITIVE_KEYS = re.compile(r"(token|secret|api[_-]?key|password|authorization)", re.IGNORECASE)
REDACTED = "***REDACTED***"


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=level.upper(),
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
    )


def redact_payload(payload: Dict[str, Any]) -> Dict[str, Any]:
    """Copy of a request payload with credential-like keys masked at any depth."""
    return {
        key: REDACTED if _SENSITIVE_KEYS.search(str(key)) else _redact(value)
        for key, value in payload.items()
    }


def _redact(value: Any) -> Any:
    if isinstance(value, dict):
        return redact_payload(value)
    if isinstance(value, (list, tuple)):
        return [_redact(item) for item in value]
    return value
