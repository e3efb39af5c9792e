"""Dashboard & Profile Routes — role dashboard, own profile, password, profile edits.

Invariants:
    - Every route requires an authenticated identity
    - change-password is throttled per client before the body is processed
    - Responses never include password or refresh-token material
"""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from campus_api.api.dependencies import get_current_user, password_change_rate_limit
from campus_api.infrastructure.database import get_db
from campus_api.models.user import User
from campus_api.schemas.profile import ChangePasswordRequest, UpdateProfileRequest
from campus_api.services import account_service
from campus_api.services.dashboard import build_dashboard
from campus_api.services.representations import public_user

router = APIRouter(prefix="/api/v1", tags=["dashboard"])


@router.get("/dashboard")
async def get_dashboard(
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    return {"success": True, "data": await build_dashboard(db, user)}


@router.get("/profile")
async def get_profile(user: User = Depends(get_current_user)):
    return {"success": True, "user": public_user(user)}


@router.put("/change-password", dependencies=[Depends(password_change_rate_limit)])
async def change_password(
    body: ChangePasswordRequest,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    await account_service.change_password(db, user.id, body)
    return {"success": True, "message": "Password changed successfully"}


@router.put("/update-profile")
async def update_profile(
    body: UpdateProfileRequest,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    updated = await account_service.update_profile(db, user.id, body)
    return {
        "success": True,
        "message": "Profile updated successfully",
        "user": public_user(updated),
    }
