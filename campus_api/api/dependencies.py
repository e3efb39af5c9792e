"""Request Gates — authentication, role authorization and rate limiting as FastAPI dependencies.

Invariants:
    - get_current_user re-verifies the bearer token on every request (stateless)
    - require_roles composes AFTER get_current_user and never mutates state
    - Rate limiters are process-local and keyed by client address
"""

import logging
from uuid import UUID

from fastapi import Depends, Header, Request, Response
from sqlalchemy.ext.asyncio import AsyncSession

from campus_api.config import get_settings
from campus_api.core.domain_types import Role, TokenType
from campus_api.core.errors import (
    AuthenticationError, PermissionDeniedError, RateLimitExceededError,
    ResourceNotFoundError,
)
from campus_api.core.rate_limit import FixedWindowRateLimiter
from campus_api.infrastructure.database import get_db
from campus_api.infrastructure.security import decode_token
from campus_api.models.user import User

logger = logging.getLogger(__name__)


async def get_current_user(
    authorization: str | None = Header(default=None),
    db: AsyncSession = Depends(get_db),
) -> User:
    """Authentication gate: `Authorization: Bearer <token>` -> User row."""
    if not authorization or not authorization.startswith("Bearer "):
        raise AuthenticationError("Unauthorized: No token provided")
    token = authorization.split(" ", 1)[1].strip()
    if not token:
        raise AuthenticationError("Unauthorized: No token provided")

    subject = decode_token(token, TokenType.ACCESS)
    try:
        user_id = UUID(subject)
    except ValueError:
        raise AuthenticationError("Invalid or expired token")

    user = await db.get(User, user_id)
    if user is None:
        logger.warning("Token for unknown user", extra={"user_id": subject})
        raise ResourceNotFoundError("User not found")
    return user


def require_roles(*allowed_roles: Role):
    """Role gate: allow only identities whose role is in `allowed_roles`."""
    allowed = {role.value for role in allowed_roles}

    async def _dep(user: User = Depends(get_current_user)) -> User:
        if user.role not in allowed:
            logger.warning(
                "Role not allowed",
                extra={"user_id": user.id, "role": user.role},
            )
            raise PermissionDeniedError()
        return user
    return _dep


def client_key(request: Request) -> str:
    return request.client.host if request.client else "unknown"


def rate_limited(limiter: FixedWindowRateLimiter, message: str):
    """Throttle a route with `limiter`; exposes RateLimit-* headers."""

    async def _dep(request: Request, response: Response) -> None:
        key = client_key(request)
        decision = limiter.hit(key)
        response.headers["RateLimit-Limit"] = str(decision.limit)
        response.headers["RateLimit-Remaining"] = str(decision.remaining)
        response.headers["RateLimit-Reset"] = str(decision.reset_after)
        if not decision.allowed:
            logger.warning(
                "Rate limit exceeded",
                extra={"client": key, "path": request.url.path},
            )
            raise RateLimitExceededError(message, decision.reset_after)
    return _dep


_settings = get_settings()

password_change_limiter = FixedWindowRateLimiter(
    _settings.password_change_rate_limit, _settings.password_change_window_seconds,
)
general_limiter = FixedWindowRateLimiter(
    _settings.general_rate_limit, _settings.general_rate_window_seconds,
)

password_change_rate_limit = rate_limited(
    password_change_limiter,
    "Too many password change attempts, please try again later.",
)
general_rate_limit = rate_limited(
    general_limiter,
    "Too many requests from this IP, please try again later.",
)
