"""
User endpoints
==============

POST  /api/v1/users                       -- register a donor / staff profile
GET   /api/v1/users/{user_id}             -- fetch a profile
PATCH /api/v1/users/{user_id}             -- edit profile fields
PATCH /api/v1/users/{user_id}/location    -- refresh current coordinates
GET   /api/v1/users/{user_id}/notifications -- recent critical alerts
"""

from datetime import datetime, timedelta, timezone

from fastapi import APIRouter, Depends, HTTPException, Request
from sqlalchemy.ext.asyncio import AsyncSession

from donorlink.api.dependencies import get_db
from donorlink.api.middleware import limiter
from donorlink.api.schemas import (
    ErrorResponse,
    LocationUpdateRequest,
    NotificationResponse,
    UserCreateRequest,
    UserResponse,
    UserUpdateRequest,
)
from donorlink.config import settings
from donorlink.infrastructure.models import UserModel
from donorlink.infrastructure.repositories import (
    BloodAlertRepository,
    UserRepository,
)

router = APIRouter(
    prefix="/users",
    tags=["users"],
    responses={404: {"model": ErrorResponse, "description": "Not found."}},
)


async def _get_user_or_404(repo: UserRepository, user_id: int) -> UserModel:
    user = await repo.get_by_id(user_id)
    if not user:
        raise HTTPException(status_code=404, detail="User not found")
    return user


@router.post(
    "",
    status_code=201,
    response_model=UserResponse,
    summary="Register a user",
    responses={
        409: {"model": ErrorResponse, "description": "Email already registered."},
    },
)
@limiter.limit(settings.rate_limit)
async def create_user(
    request: Request,
    body: UserCreateRequest,
    db: AsyncSession = Depends(get_db),
):
    repo = UserRepository(db)
    if await repo.get_by_email(body.email):
        raise HTTPException(
            status_code=409, detail="User already exists with this email"
        )
    return await repo.create(**body.model_dump())


@router.get("/{user_id}", response_model=UserResponse, summary="Get a profile")
@limiter.limit(settings.rate_limit)
async def get_user(
    request: Request,
    user_id: int,
    db: AsyncSession = Depends(get_db),
):
    return await _get_user_or_404(UserRepository(db), user_id)


@router.patch("/{user_id}", response_model=UserResponse, summary="Edit a profile")
@limiter.limit(settings.rate_limit)
async def update_user(
    request: Request,
    user_id: int,
    body: UserUpdateRequest,
    db: AsyncSession = Depends(get_db),
):
    repo = UserRepository(db)
    user = await _get_user_or_404(repo, user_id)
    return await repo.update(user, **body.model_dump(exclude_unset=True))


@router.patch(
    "/{user_id}/location",
    response_model=UserResponse,
    summary="Refresh a user's current coordinates",
)
@limiter.limit(settings.rate_limit)
async def update_location(
    request: Request,
    user_id: int,
    body: LocationUpdateRequest,
    db: AsyncSession = Depends(get_db),
):
    repo = UserRepository(db)
    user = await _get_user_or_404(repo, user_id)
    return await repo.set_location(user, body.lat, body.lng)


@router.get(
    "/{user_id}/notifications",
    response_model=list[NotificationResponse],
    summary="Recent critical alerts for a user",
)
@limiter.limit(settings.rate_limit)
async def get_notifications(
    request: Request,
    user_id: int,
    db: AsyncSession = Depends(get_db),
):
    await _get_user_or_404(UserRepository(db), user_id)

    since = datetime.now(timezone.utc) - timedelta(
        hours=settings.notification_window_hours
    )
    alerts = await BloodAlertRepository(db).list_critical_since(
        since, settings.notification_limit
    )
    return [
        NotificationResponse(
            id=a.id,
            title=f"Critical Need: {', '.join(a.blood_groups)}",
            message=a.description,
            timestamp=a.created_at,
        )
        for a in alerts
    ]
