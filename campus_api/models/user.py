"""User ORM — identity, campus profile, role and score.

Invariants:
    - username and email are unique
    - role is the current-role projection of role_changes (append-only log)
    - password_hash and refresh_token_hash are never serialized to clients
    - updated_at refreshes on every UPDATE
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import Boolean, DateTime, Integer, JSON, String
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column

from campus_api.core.domain_types import Role
from campus_api.db.base import Base


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class User(Base):
    """Registered account."""
    __tablename__ = "users"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4,
    )
    username: Mapped[str] = mapped_column(
        String(50), nullable=False, unique=True, index=True,
    )
    email: Mapped[str] = mapped_column(
        String(255), nullable=False, unique=True, index=True,
    )
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)
    fullname: Mapped[str] = mapped_column(String(120), nullable=False)

    college_name: Mapped[str | None] = mapped_column(String(100), nullable=True)
    roll_no: Mapped[str | None] = mapped_column(String(20), nullable=True)
    address: Mapped[str | None] = mapped_column(String(255), nullable=True)
    mobile_no: Mapped[str | None] = mapped_column(String(20), nullable=True)
    profile_picture: Mapped[str | None] = mapped_column(String(500), nullable=True)
    is_iitp_student: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=False,
    )
    pors: Mapped[list] = mapped_column(JSON, nullable=False, default=list)

    role: Mapped[str] = mapped_column(
        String(20), nullable=False, default=Role.USER.value, index=True,
    )
    score: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    refresh_token_hash: Mapped[str | None] = mapped_column(
        String(64), nullable=True,
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=_utcnow, index=True,
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=_utcnow, onupdate=_utcnow,
    )
