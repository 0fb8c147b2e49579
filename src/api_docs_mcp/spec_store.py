"""OpenAPI document loader with a guarded load-once cache."""

from __future__ import annotations

import logging
import threading
from enum import Enum
from pathlib import Path
from typing import Any, Dict, Optional

import httpx
import yaml

from .errors import NotFound, ParseError


logger = logging.getLogger(__name__)


class LoadState(str, Enum):
    UNLOADED = "unloaded"
    LOADING = "loading"
    LOADED = "loaded"
    FAILED = "failed"


class SpecStore:
    """Sole owner of the parsed specification document.

    The first successful ``load()`` caches the document for the lifetime of
    the store. Failed attempts leave the cache empty, so the next call reads
    the backing resource again.
    """

    def __init__(self, location: str, timeout_seconds: float = 30) -> None:
        self.location = location
        self.timeout_seconds = timeout_seconds
        self._lock = threading.Lock()
        self._document: Optional[Dict[str, Any]] = None
        self._state = LoadState.UNLOADED

    @property
    def state(self) -> LoadState:
        return self._state

    def load(self) -> Dict[str, Any]:
        document = self._document
        if document is not None:
            return document

        with self._lock:
            if self._document is not None:
                return self._document

            self._state = LoadState.LOADING
            try:
                document = self._parse(self._read())
            except Exception as exc:
                self._state = LoadState.FAILED
                logger.warning("Failed to load OpenAPI document %s: %s", self.location, exc)
                raise

            self._document = document
            self._state = LoadState.LOADED
            logger.info(
                "Loaded OpenAPI document %s (%s paths)",
                self.location,
                len(document.get("paths") or {}),
            )
            return document

    def reload(self) -> Dict[str, Any]:
        with self._lock:
            self._document = None
            self._state = LoadState.UNLOADED
        return self.load()

    def _read(self) -> str:
        if self.location.startswith(("http://", "https://")):
            return self._fetch(self.location)

        path = Path(self.location).expanduser()
        if not path.is_file():
            raise NotFound(f"OpenAPI file not found: {self.location}")
        try:
            return path.read_text(encoding="utf-8")
        except UnicodeDecodeError as exc:
            raise ParseError(f"Failed to parse OpenAPI file: {exc}") from exc

    def _fetch(self, url: str) -> str:
        try:
            response = httpx.get(url, timeout=self.timeout_seconds, follow_redirects=True)
        except httpx.HTTPError as exc:
            raise NotFound(f"OpenAPI document unreachable: {url} ({exc})") from exc
        if response.status_code != 200:
            raise NotFound(f"OpenAPI document not found: {url} ({response.status_code})")
        return response.text

    def _parse(self, content: str) -> Dict[str, Any]:
        try:
            document = yaml.safe_load(content)
        except yaml.YAMLError as exc:
            raise ParseError(f"Failed to parse OpenAPI file: {exc}") from exc
        if not isinstance(document, dict):
            raise ParseError("Failed to parse OpenAPI file: document root is not a mapping")
        return document
