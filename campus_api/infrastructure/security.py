"""Credentials — bcrypt password hashing (passlib) and JWT issue/verify (python-jose).

Invariants:
    - Plain passwords never leave this module in any form but a bcrypt hash
    - Access and refresh tokens are signed with different secrets
    - Every token carries sub (user id), type and exp claims
    - decode_token raises AuthenticationError, never a jose exception
"""

import hashlib
from datetime import datetime, timedelta, timezone
from functools import lru_cache

from jose import JWTError, jwt
from passlib.context import CryptContext

from campus_api.config import get_settings
from campus_api.core.domain_types import TokenType
from campus_api.core.errors import AuthenticationError


@lru_cache
def _pwd_context() -> CryptContext:
    return CryptContext(
        schemes=["bcrypt"], deprecated="auto",
        bcrypt__rounds=get_settings().bcrypt_rounds,
    )


def hash_password(password: str) -> str:
    return _pwd_context().hash(password)


def verify_password(password: str, hashed: str | None) -> bool:
    if not hashed:
        return False
    return _pwd_context().verify(password, hashed)


def _secret_for(token_type: TokenType) -> str:
    settings = get_settings()
    if token_type is TokenType.REFRESH:
        return settings.refresh_token_secret
    return settings.access_token_secret


def create_token(user_id: str, token_type: TokenType, expires_delta: timedelta) -> str:
    to_encode = {
        "sub": str(user_id),
        "type": token_type.value,
        "iat": datetime.now(timezone.utc),
        "exp": datetime.now(timezone.utc) + expires_delta,
    }
    return jwt.encode(
        to_encode, _secret_for(token_type), algorithm=get_settings().jwt_algorithm,
    )


def create_access_token(user_id: str) -> str:
    minutes = get_settings().access_token_expire_minutes
    return create_token(user_id, TokenType.ACCESS, timedelta(minutes=minutes))


def create_refresh_token(user_id: str) -> str:
    days = get_settings().refresh_token_expire_days
    return create_token(user_id, TokenType.REFRESH, timedelta(days=days))


def decode_token(token: str, token_type: TokenType = TokenType.ACCESS) -> str:
    """Verify signature, expiry and type; return the subject (user id)."""
    try:
        payload = jwt.decode(
            token, _secret_for(token_type),
            algorithms=[get_settings().jwt_algorithm],
        )
    except JWTError:
        raise AuthenticationError("Invalid or expired token")
    if payload.get("type") != token_type.value or not payload.get("sub"):
        raise AuthenticationError("Invalid or expired token")
    return payload["sub"]


def fingerprint_token(token: str) -> str:
    """Stable digest stored in place of a refresh token."""
    return hashlib.sha256(token.encode("utf-8")).hexdigest()
