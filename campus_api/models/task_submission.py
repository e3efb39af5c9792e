"""Task Submission ORM — a CA's proof of completing a task.

Invariants:
    - Always belongs to a Task and to the submitting CA (users.id)
    - proof_urls is a non-empty list (enforced at the API boundary)
    - reviewed_at is stamped when points_awarded becomes non-null
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import DateTime, ForeignKey, Integer, JSON, Text
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column, relationship, validates

from campus_api.db.base import Base


class TaskSubmission(Base):
    """Submission awaiting (or past) review."""
    __tablename__ = "task_submissions"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4,
    )
    task_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), ForeignKey("tasks.id", ondelete="CASCADE"),
        nullable=False, index=True,
    )
    ca_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False, index=True,
    )
    submitted_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )
    proof_urls: Mapped[list] = mapped_column(JSON, nullable=False, default=list)
    comments_ca: Mapped[str | None] = mapped_column(Text, nullable=True)
    reviewed_by: Mapped[uuid.UUID | None] = mapped_column(
        UUID(as_uuid=True), ForeignKey("users.id", ondelete="SET NULL"),
        nullable=True,
    )
    reviewed_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True,
    )
    review_comments: Mapped[str | None] = mapped_column(Text, nullable=True)
    points_awarded: Mapped[int | None] = mapped_column(Integer, nullable=True)

    task: Mapped["Task"] = relationship("Task", lazy="selectin")
    submitter: Mapped["User"] = relationship(
        "User", foreign_keys=[ca_id], lazy="selectin",
    )

    @validates("points_awarded")
    def _stamp_review(self, key: str, value: int | None) -> int | None:
        if value is not None:
            self.reviewed_at = datetime.now(timezone.utc)
        return value
