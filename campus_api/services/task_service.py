"""Tasks and Submissions — assignment, proof submission and point awards.

Invariants:
    - Tasks are created once and never updated
    - A submission is reviewed at most once; its points are capped by task.max_points
    - Review and score increment commit together
"""

import logging
from datetime import datetime, timezone
from uuid import UUID

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from campus_api.core.errors import ConflictError, RequestValidationFailed, ResourceNotFoundError
from campus_api.models.task import Task
from campus_api.models.task_submission import TaskSubmission
from campus_api.models.user import User
from campus_api.schemas.task import SubmissionCreate, SubmissionReview, TaskCreate

logger = logging.getLogger(__name__)


def _as_utc(value: datetime | None) -> datetime | None:
    if value is None or value.tzinfo is not None:
        return value
    return value.replace(tzinfo=timezone.utc)


async def create_task(db: AsyncSession, assigner: User, body: TaskCreate) -> Task:
    task = Task(
        title=body.title,
        description=body.description,
        max_points=body.max_points,
        due_date=_as_utc(body.due_date),
        assigner=assigner,
    )
    db.add(task)
    await db.commit()
    logger.info("Task created", extra={"task_id": task.id, "user_id": assigner.id})
    return task


async def list_tasks(db: AsyncSession, limit: int, offset: int) -> list[Task]:
    result = await db.execute(
        select(Task).order_by(Task.assigned_at.desc()).limit(limit).offset(offset),
    )
    return list(result.scalars().all())


async def submit_proof(
    db: AsyncSession, task_id: UUID, ca: User, body: SubmissionCreate,
) -> TaskSubmission:
    task = await db.get(Task, task_id)
    if task is None:
        raise ResourceNotFoundError("Task not found")
    submission = TaskSubmission(
        task_id=task.id,
        ca_id=ca.id,
        proof_urls=body.urls(),
        comments_ca=body.comments.strip() if body.comments else None,
    )
    db.add(submission)
    await db.commit()
    logger.info(
        "Task submission received",
        extra={"submission_id": submission.id, "task_id": task.id, "user_id": ca.id},
    )
    return submission


async def review_submission(
    db: AsyncSession, submission_id: UUID, reviewer: User, body: SubmissionReview,
) -> TaskSubmission:
    result = await db.execute(
        select(TaskSubmission)
        .where(TaskSubmission.id == submission_id)
        .with_for_update(),
    )
    submission = result.scalar_one_or_none()
    if submission is None:
        raise ResourceNotFoundError("Task submission not found")
    if submission.points_awarded is not None:
        await db.rollback()
        raise ConflictError("Submission already reviewed")
    if body.points_awarded > submission.task.max_points:
        await db.rollback()
        raise RequestValidationFailed(
            f"Points awarded cannot exceed {submission.task.max_points}",
        )

    submission.reviewed_by = reviewer.id
    submission.review_comments = (
        body.review_comments.strip() if body.review_comments else None
    )
    submission.points_awarded = body.points_awarded
    await db.execute(
        update(User)
        .where(User.id == submission.ca_id)
        .values(score=User.score + body.points_awarded),
    )
    await db.commit()
    logger.info(
        f"Submission reviewed ({body.points_awarded} points)",
        extra={"submission_id": submission.id, "user_id": submission.ca_id},
    )
    return submission
