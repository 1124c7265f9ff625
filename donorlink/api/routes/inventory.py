"""
Inventory endpoints
===================

GET  /api/v1/inventory -- stock per blood group
POST /api/v1/inventory -- add or remove units (clamped at zero)
"""

from fastapi import APIRouter, Depends, HTTPException, Request
from sqlalchemy.ext.asyncio import AsyncSession

from donorlink.api.dependencies import get_db
from donorlink.api.middleware import limiter
from donorlink.api.schemas import (
    ErrorResponse,
    InventoryChangeRequest,
    InventoryItemResponse,
)
from donorlink.config import settings
from donorlink.infrastructure.repositories import InventoryRepository

router = APIRouter(
    prefix="/inventory",
    tags=["inventory"],
    responses={404: {"model": ErrorResponse, "description": "Not found."}},
)


@router.get("", response_model=list[InventoryItemResponse], summary="List stock")
@limiter.limit(settings.rate_limit)
async def list_inventory(request: Request, db: AsyncSession = Depends(get_db)):
    return await InventoryRepository(db).list_all()


@router.post(
    "",
    response_model=InventoryItemResponse,
    summary="Adjust stock for one blood group",
)
@limiter.limit(settings.rate_limit)
async def adjust_inventory(
    request: Request,
    body: InventoryChangeRequest,
    db: AsyncSession = Depends(get_db),
):
    repo = InventoryRepository(db)
    row = await repo.get_by_group(body.blood_group)
    if not row:
        raise HTTPException(status_code=404, detail="Blood group not found")
    return await repo.adjust(row, body.change)
