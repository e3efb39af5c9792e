"""CA Application ORM — a user's request to become a Campus Ambassador.

Invariants:
    - At most one application per user (unique constraint on user_id)
    - status starts at pending; pending -> accepted | rejected only
    - reviewed_at is stamped whenever status is set to a terminal value
"""

import uuid
from typing import Optional
from datetime import datetime, timezone

from sqlalchemy import DateTime, ForeignKey, String, Text
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column, relationship, validates

from campus_api.core.domain_types import ApplicationStatus
from campus_api.db.base import Base


class CAApplication(Base):
    """Campus Ambassador application."""
    __tablename__ = "ca_applications"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4,
    )
    user_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False, unique=True,
    )
    application_statement: Mapped[str] = mapped_column(Text, nullable=False)
    application_date: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
        index=True,
    )
    status: Mapped[str] = mapped_column(
        String(20), nullable=False, default=ApplicationStatus.PENDING.value,
        index=True,
    )
    reviewed_by: Mapped[uuid.UUID | None] = mapped_column(
        UUID(as_uuid=True), ForeignKey("users.id", ondelete="SET NULL"),
        nullable=True,
    )
    reviewed_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True,
    )

    applicant: Mapped["User"] = relationship(
        "User", foreign_keys=[user_id], lazy="selectin",
    )
    reviewer: Mapped[Optional["User"]] = relationship(
        "User", foreign_keys=[reviewed_by], lazy="selectin",
    )

    @validates("status")
    def _stamp_review(self, key: str, value: str) -> str:
        if value in (ApplicationStatus.ACCEPTED.value, ApplicationStatus.REJECTED.value):
            self.reviewed_at = datetime.now(timezone.utc)
        return value
