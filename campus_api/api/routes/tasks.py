"""Task Routes — create/list tasks, submit proof, review submissions."""

from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from campus_api.api.dependencies import get_current_user, require_roles
from campus_api.core.domain_types import REVIEWER_ROLES, TASK_ASSIGNER_ROLES, Role
from campus_api.infrastructure.database import get_db
from campus_api.models.user import User
from campus_api.schemas.task import SubmissionCreate, SubmissionReview, TaskCreate
from campus_api.services import task_service
from campus_api.services.representations import submission_dict, task_dict

router = APIRouter(prefix="/api/v1", tags=["tasks"])


@router.post("/tasks", status_code=status.HTTP_201_CREATED)
async def create_task(
    body: TaskCreate,
    assigner: User = Depends(require_roles(*TASK_ASSIGNER_ROLES)),
    db: AsyncSession = Depends(get_db),
):
    task = await task_service.create_task(db, assigner, body)
    return {"success": True, "task": task_dict(task)}


@router.get("/tasks", dependencies=[Depends(get_current_user)])
async def list_tasks(
    limit: int = Query(20, ge=1, le=100),
    offset: int = Query(0, ge=0),
    db: AsyncSession = Depends(get_db),
):
    tasks = await task_service.list_tasks(db, limit, offset)
    return {
        "success": True,
        "tasks": [task_dict(t) for t in tasks],
        "pagination": {"limit": limit, "offset": offset},
    }


@router.post("/tasks/{task_id}/submissions", status_code=status.HTTP_201_CREATED)
async def submit_proof(
    task_id: UUID,
    body: SubmissionCreate,
    ca: User = Depends(require_roles(Role.CA)),
    db: AsyncSession = Depends(get_db),
):
    submission = await task_service.submit_proof(db, task_id, ca, body)
    return {"success": True, "submission": submission_dict(submission)}


@router.put("/submissions/{submission_id}/review")
async def review_submission(
    submission_id: UUID,
    body: SubmissionReview,
    reviewer: User = Depends(require_roles(*REVIEWER_ROLES)),
    db: AsyncSession = Depends(get_db),
):
    submission = await task_service.review_submission(db, submission_id, reviewer, body)
    return {"success": True, "submission": submission_dict(submission)}
