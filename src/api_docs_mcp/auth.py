"""Static bearer-token check for the HTTP endpoints."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List, Optional


logger = logging.getLogger(__name__)

AUTH_ERROR_CODE = -32001
CONFIG_ERROR_CODE = -32600


@dataclass
class AuthDecision:
    allowed: bool
    status_code: int = 200
    error_code: Optional[int] = None
    message: str = ""


class TokenAuthenticator:
    """Checks ``Authorization: Bearer <token>`` against configured tokens.

    Drivers: ``token`` requires a known bearer token, ``none`` admits every
    request. Any other driver, or ``token`` with no tokens configured, is a
    server misconfiguration.
    """

    def __init__(self, driver: str, tokens: List[str]) -> None:
        self.driver = driver.lower()
        self.tokens = [token for token in tokens if token]

    def check(self, authorization: Optional[str]) -> AuthDecision:
        if self.driver == "none":
            return AuthDecision(allowed=True)
        if self.driver != "token":
            return AuthDecision(
                allowed=False,
                status_code=500,
                error_code=CONFIG_ERROR_CODE,
                message="Invalid authentication driver configured",
            )

        if not authorization or not authorization.startswith("Bearer "):
            return self._unauthorized("Missing or invalid Authorization header")

        if not self.tokens:
            return AuthDecision(
                allowed=False,
                status_code=500,
                error_code=CONFIG_ERROR_CODE,
                message="No authentication tokens configured",
            )

        token = authorization[len("Bearer "):]
        if token not in self.tokens:
            logger.warning("Rejected request with unknown bearer token")
            return self._unauthorized("Invalid authentication token")
        return AuthDecision(allowed=True)

    def _unauthorized(self, message: str) -> AuthDecision:
        return AuthDecision(
            allowed=False, status_code=401, error_code=AUTH_ERROR_CODE, message=message
        )
