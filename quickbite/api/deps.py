"""
Request-scoped dependencies: the authenticated identity, the service objects,
and the per-request deadline every service call runs under.
"""
import asyncio
import logging
from dataclasses import dataclass
from typing import Awaitable, Optional, TypeVar
from uuid import UUID

import jwt
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from tortoise.exceptions import DBConnectionError, IntegrityError, OperationalError

from quickbite.core.config import DELIVERY_FEE, REQUEST_TIMEOUT_SECONDS, STRICT_STATUS_TRANSITIONS
from quickbite.core.errors import Conflict, Unavailable
from quickbite.core.security import decode_access_token
from quickbite.models.user import UserRole
from quickbite.services.auth_service import AuthService
from quickbite.services.catalog_service import CatalogService
from quickbite.services.order_builder import OrderBuilder
from quickbite.services.order_lifecycle import OrderLifecycle
from quickbite.services.order_query import OrderQueryService

log = logging.getLogger(__name__)

T = TypeVar("T")

bearer_scheme = HTTPBearer(auto_error=False)


@dataclass(frozen=True)
class Identity:
    """Who is calling, as established by the bearer token."""
    user_id: UUID
    role: UserRole
    email: str = ""


def _unauthenticated(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


async def get_current_identity(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
) -> Identity:
    if credentials is None:
        raise _unauthenticated("missing authorization header")
    try:
        claims = decode_access_token(credentials.credentials)
    except jwt.InvalidTokenError:
        raise _unauthenticated("invalid or expired token")
    try:
        return Identity(
            user_id=UUID(claims["user_id"]),
            role=UserRole(claims["role"]),
            email=claims.get("email", ""),
        )
    except (KeyError, ValueError, TypeError):
        raise _unauthenticated("invalid token claims")


def require_role(role: UserRole):
    async def dependency(identity: Identity = Depends(get_current_identity)) -> Identity:
        if identity.role != role:
            raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="access denied: insufficient permissions")
        return identity
    return dependency


require_restaurant_owner = require_role(UserRole.RESTAURANT_OWNER)


# ----------- Services -----------

def get_auth_service() -> AuthService:
    return AuthService()


def get_catalog_service() -> CatalogService:
    return CatalogService()


def get_order_query_service() -> OrderQueryService:
    return OrderQueryService()


def get_order_builder() -> OrderBuilder:
    return OrderBuilder(delivery_fee=DELIVERY_FEE)


def get_order_lifecycle() -> OrderLifecycle:
    return OrderLifecycle(strict_transitions=STRICT_STATUS_TRANSITIONS)


# ----------- Deadline -----------

async def run_with_deadline(call: Awaitable[T], timeout: Optional[float] = None) -> T:
    """
    Awaits a service call under the request deadline.
    Deadline expiry and store outages become Unavailable (503, retryable by the client).
    """
    try:
        return await asyncio.wait_for(call, timeout or REQUEST_TIMEOUT_SECONDS)
    except asyncio.TimeoutError:
        log.error("Request deadline of %ss exceeded", timeout or REQUEST_TIMEOUT_SECONDS)
        raise Unavailable("request deadline exceeded, try again")
    except IntegrityError as e:
        log.warning("Integrity error from store: %s", e)
        raise Conflict("request conflicts with existing data") from e
    except (DBConnectionError, OperationalError) as e:
        log.error("Store unavailable: %s", e)
        raise Unavailable() from e
