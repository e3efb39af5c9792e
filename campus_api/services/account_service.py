"""Account Maintenance — registration, login, token refresh, password and profile.

Invariants:
    - Registration always creates role `user`
    - Password checks re-read the stored hash from the database
    - A new password must differ from the current one
    - Profile updates merge only the fields the client sent
    - Refresh tokens are stored as a SHA-256 fingerprint, never in clear
"""

import logging
from uuid import UUID

from sqlalchemy import or_, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from campus_api.core.domain_types import Role, TokenType
from campus_api.core.errors import (
    AuthenticationError, ConflictError, RequestValidationFailed,
    ResourceNotFoundError,
)
from campus_api.infrastructure.security import (
    create_access_token, create_refresh_token, decode_token,
    fingerprint_token, hash_password, verify_password,
)
from campus_api.models.user import User
from campus_api.schemas.auth import RegisterRequest
from campus_api.schemas.profile import ChangePasswordRequest, UpdateProfileRequest

logger = logging.getLogger(__name__)

DUPLICATE_ACCOUNT = "An account with this username or email already exists"
BAD_CREDENTIALS = "Invalid email or password"


async def get_user_or_404(db: AsyncSession, user_id: UUID) -> User:
    user = await db.get(User, user_id)
    if user is None:
        raise ResourceNotFoundError("User not found")
    return user


async def register_user(db: AsyncSession, body: RegisterRequest) -> User:
    existing = await db.execute(
        select(User.id).where(
            or_(User.username == body.username, User.email == body.email),
        ),
    )
    if existing.first() is not None:
        raise ConflictError(DUPLICATE_ACCOUNT)

    user = User(
        username=body.username,
        email=body.email,
        fullname=body.fullname,
        password_hash=hash_password(body.password),
        college_name=body.college_name,
        roll_no=body.roll_no,
        address=body.address,
        mobile_no=body.mobile_no,
        profile_picture=body.profile_picture,
        is_iitp_student=body.is_iitp_student,
        pors=body.pors,
        role=Role.USER.value,
    )
    db.add(user)
    try:
        await db.commit()
    except IntegrityError:
        await db.rollback()
        raise ConflictError(DUPLICATE_ACCOUNT)
    await db.refresh(user)
    logger.info("User registered", extra={"user_id": user.id})
    return user


async def _issue_tokens(db: AsyncSession, user: User) -> dict:
    access_token = create_access_token(str(user.id))
    refresh_token = create_refresh_token(str(user.id))
    user.refresh_token_hash = fingerprint_token(refresh_token)
    await db.commit()
    return {"accessToken": access_token, "refreshToken": refresh_token}


async def login(db: AsyncSession, email: str, password: str) -> tuple[User, dict]:
    result = await db.execute(select(User).where(User.email == email))
    user = result.scalar_one_or_none()
    if user is None or not verify_password(password, user.password_hash):
        logger.warning("Failed login attempt")
        raise AuthenticationError(BAD_CREDENTIALS)
    tokens = await _issue_tokens(db, user)
    logger.info("User logged in", extra={"user_id": user.id, "role": user.role})
    return user, tokens


async def refresh_access(db: AsyncSession, refresh_token: str) -> dict:
    subject = decode_token(refresh_token, TokenType.REFRESH)
    try:
        user_id = UUID(subject)
    except ValueError:
        raise AuthenticationError("Invalid or expired token")
    user = await db.get(User, user_id)
    if user is None or user.refresh_token_hash != fingerprint_token(refresh_token):
        raise AuthenticationError("Invalid or expired token")
    return await _issue_tokens(db, user)


async def change_password(
    db: AsyncSession, user_id: UUID, body: ChangePasswordRequest,
) -> None:
    user = await get_user_or_404(db, user_id)
    await db.refresh(user, ["password_hash"])

    if not verify_password(body.current_password, user.password_hash):
        raise RequestValidationFailed("Current password is incorrect")
    if verify_password(body.new_password, user.password_hash):
        raise RequestValidationFailed(
            "New password must be different from current password",
        )

    user.password_hash = hash_password(body.new_password)
    user.refresh_token_hash = None
    await db.commit()
    logger.info("Password changed", extra={"user_id": user_id})


async def update_profile(
    db: AsyncSession, user_id: UUID, body: UpdateProfileRequest,
) -> User:
    user = await get_user_or_404(db, user_id)
    changes = body.changes()
    for column, value in changes.items():
        setattr(user, column, value)
    if changes:
        await db.commit()
        await db.refresh(user)
        logger.info(
            f"Profile updated ({', '.join(sorted(changes))})",
            extra={"user_id": user_id},
        )
    return user
