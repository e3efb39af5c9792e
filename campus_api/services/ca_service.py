"""CA Application Workflow — apply, view own, accept, reject.

Invariants:
    - One application per user: existence check first, unique constraint as backstop
    - Reviews lock the application row (SELECT ... FOR UPDATE) before checking status
    - Acceptance writes status, reviewer, role and role-change log in ONE commit
    - Rejection never touches the applicant's role
"""

import logging
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from campus_api.core.application_review import (
    check_transition, normalize_statement, role_after_review,
)
from campus_api.core.domain_types import ApplicationStatus
from campus_api.core.errors import ConflictError, ResourceNotFoundError
from campus_api.models.ca_application import CAApplication
from campus_api.models.role_change import RoleChange
from campus_api.models.user import User

logger = logging.getLogger(__name__)

DUPLICATE_APPLICATION = "You have already applied for CA"


async def find_application_for_user(
    db: AsyncSession, user_id: UUID,
) -> CAApplication | None:
    result = await db.execute(
        select(CAApplication).where(CAApplication.user_id == user_id),
    )
    return result.scalar_one_or_none()


async def apply_for_ca(
    db: AsyncSession, user: User, statement: str | None,
) -> CAApplication:
    """Create a pending application for `user`."""
    cleaned = normalize_statement(statement)
    user_id = user.id
    if await find_application_for_user(db, user_id):
        raise ConflictError(DUPLICATE_APPLICATION)

    application = CAApplication(user_id=user_id, application_statement=cleaned)
    db.add(application)
    try:
        await db.commit()
    except IntegrityError:
        await db.rollback()
        logger.warning(
            "Concurrent duplicate CA application blocked",
            extra={"user_id": user_id},
        )
        raise ConflictError(DUPLICATE_APPLICATION)
    await db.refresh(application)
    logger.info(
        "CA application submitted",
        extra={"user_id": user_id, "application_id": application.id},
    )
    return application


async def get_own_application(db: AsyncSession, user: User) -> CAApplication:
    application = await find_application_for_user(db, user.id)
    if not application:
        raise ResourceNotFoundError("No CA application found for this user.")
    return application


async def _lock_application(db: AsyncSession, application_id: UUID) -> CAApplication:
    result = await db.execute(
        select(CAApplication)
        .where(CAApplication.id == application_id)
        .with_for_update(),
    )
    application = result.scalar_one_or_none()
    if not application:
        raise ResourceNotFoundError("CA application not found")
    return application


async def review_application(
    db: AsyncSession, application_id: UUID, reviewer: User,
    decision: ApplicationStatus,
) -> CAApplication:
    """Move a pending application to `decision` and apply its side effects."""
    application = await _lock_application(db, application_id)
    try:
        check_transition(application.status, decision)
    except ConflictError:
        await db.rollback()
        raise

    application.status = decision.value
    application.reviewed_by = reviewer.id

    applicant = await db.get(User, application.user_id)
    if applicant is None:
        await db.rollback()
        raise ResourceNotFoundError("Applicant not found")
    new_role = role_after_review(decision, applicant.role)
    if new_role is not None:
        db.add(RoleChange(
            user_id=applicant.id,
            previous_role=applicant.role,
            new_role=new_role.value,
            changed_by=reviewer.id,
            reason="ca_application_accepted",
        ))
        applicant.role = new_role.value

    await db.commit()
    logger.info(
        f"CA application {decision.value}",
        extra={
            "application_id": application.id,
            "user_id": applicant.id,
            "role": applicant.role,
        },
    )
    return application


async def accept_application(
    db: AsyncSession, application_id: UUID, reviewer: User,
) -> CAApplication:
    return await review_application(
        db, application_id, reviewer, ApplicationStatus.ACCEPTED,
    )


async def reject_application(
    db: AsyncSession, application_id: UUID, reviewer: User,
) -> CAApplication:
    return await review_application(
        db, application_id, reviewer, ApplicationStatus.REJECTED,
    )
