"""Auth Routes — register, login, refresh.

Invariants:
    - All three routes share the general per-client rate limit
    - Tokens are returned only in the response body
"""

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from campus_api.api.dependencies import general_rate_limit
from campus_api.infrastructure.database import get_db
from campus_api.schemas.auth import LoginRequest, RefreshRequest, RegisterRequest
from campus_api.services import account_service
from campus_api.services.representations import public_user

router = APIRouter(
    prefix="/api/v1/auth", tags=["auth"],
    dependencies=[Depends(general_rate_limit)],
)


@router.post("/register", status_code=status.HTTP_201_CREATED)
async def register(body: RegisterRequest, db: AsyncSession = Depends(get_db)):
    user = await account_service.register_user(db, body)
    return {"success": True, "user": public_user(user)}


@router.post("/login")
async def login(body: LoginRequest, db: AsyncSession = Depends(get_db)):
    user, tokens = await account_service.login(db, body.email, body.password)
    return {
        "success": True,
        **tokens,
        "tokenType": "bearer",
        "user": public_user(user),
    }


@router.post("/refresh")
async def refresh(body: RefreshRequest, db: AsyncSession = Depends(get_db)):
    tokens = await account_service.refresh_access(db, body.refresh_token)
    return {"success": True, **tokens, "tokenType": "bearer"}
