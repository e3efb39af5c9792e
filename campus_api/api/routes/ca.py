"""CA Application Routes — apply, view own, accept, reject.

Invariants:
    - Apply is limited to role `user`; reviews to admin/moderator
    - Business rules live in services/ca_service.py
"""

from uuid import UUID

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from campus_api.api.dependencies import get_current_user, require_roles
from campus_api.core.domain_types import REVIEWER_ROLES, Role
from campus_api.infrastructure.database import get_db
from campus_api.models.user import User
from campus_api.schemas.ca import CAApplyRequest
from campus_api.services import ca_service
from campus_api.services.representations import application_dict

router = APIRouter(prefix="/api/v1/ca", tags=["ca"])


@router.post("/apply", status_code=status.HTTP_201_CREATED)
async def apply_for_ca(
    body: CAApplyRequest,
    user: User = Depends(require_roles(Role.USER)),
    db: AsyncSession = Depends(get_db),
):
    application = await ca_service.apply_for_ca(db, user, body.application_statement)
    return {
        "msg": "CA application submitted successfully",
        "application": application_dict(application),
    }


@router.get("/application")
async def get_my_application(
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    application = await ca_service.get_own_application(db, user)
    return {"application": application_dict(application)}


@router.put("/{application_id}/accept")
async def accept_application(
    application_id: UUID,
    reviewer: User = Depends(require_roles(*REVIEWER_ROLES)),
    db: AsyncSession = Depends(get_db),
):
    await ca_service.accept_application(db, application_id, reviewer)
    return {"msg": "Application accepted successfully"}


@router.put("/{application_id}/reject")
async def reject_application(
    application_id: UUID,
    reviewer: User = Depends(require_roles(*REVIEWER_ROLES)),
    db: AsyncSession = Depends(get_db),
):
    await ca_service.reject_application(db, application_id, reviewer)
    return {"msg": "Application rejected successfully"}
