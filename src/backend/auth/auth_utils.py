"""Customer identity resolution.

The frontend sends the customer identity as plain headers. Handlers receive
it as an explicit `AuthContext` through the `require_auth` dependency rather
than reading request state themselves.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Mapping

from fastapi import Request

from src.backend.common.exceptions import UnauthorizedError

logger = logging.getLogger(__name__)

AUTH_ID_HEADER = "x-auth-id"
CUSTOMER_NAME_HEADER = "x-customer-name"


@dataclass(frozen=True, slots=True)
class AuthContext:
    customer_id: str | None
    customer_name: str | None = None

    @property
    def is_authenticated(self) -> bool:
        return bool(self.customer_id)


def get_auth_from_headers(request_headers: Mapping[str, str]) -> AuthContext:
    # Starlette headers are case-insensitive; plain dicts from tests may not be.
    lowered = {k.lower(): v for k, v in request_headers.items()}
    customer_id = (lowered.get(AUTH_ID_HEADER) or "").strip() or None
    customer_name = (lowered.get(CUSTOMER_NAME_HEADER) or "").strip() or None
    return AuthContext(customer_id=customer_id, customer_name=customer_name)


def require_auth(request: Request) -> AuthContext:
    """FastAPI dependency: resolve the caller or fail with 401."""
    auth = get_auth_from_headers(request.headers)
    if not auth.is_authenticated:
        logger.info("Rejecting %s %s: no customer identity", request.method, request.url.path)
        raise UnauthorizedError()
    return auth
