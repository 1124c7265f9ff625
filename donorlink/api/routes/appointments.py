"""
Appointment endpoints
=====================

GET   /api/v1/appointments                  -- all bookings, soonest first
POST  /api/v1/appointments                  -- book a donation slot (201)
PATCH /api/v1/appointments/{appointment_id} -- staff status change
"""

from fastapi import APIRouter, Depends, HTTPException, Request
from sqlalchemy.ext.asyncio import AsyncSession

from donorlink.api.dependencies import get_db
from donorlink.api.middleware import limiter
from donorlink.api.schemas import (
    AppointmentCreateRequest,
    AppointmentResponse,
    AppointmentStatusRequest,
    ErrorResponse,
)
from donorlink.config import settings
from donorlink.domain.entities import Appointment, InvalidStateTransition
from donorlink.domain.enums import AppointmentStatus
from donorlink.infrastructure.repositories import AppointmentRepository

router = APIRouter(
    prefix="/appointments",
    tags=["appointments"],
    responses={404: {"model": ErrorResponse, "description": "Not found."}},
)


@router.get(
    "", response_model=list[AppointmentResponse], summary="List appointments"
)
@limiter.limit(settings.rate_limit)
async def list_appointments(request: Request, db: AsyncSession = Depends(get_db)):
    return await AppointmentRepository(db).list_all()


@router.post(
    "",
    status_code=201,
    response_model=AppointmentResponse,
    summary="Book an appointment",
)
@limiter.limit(settings.rate_limit)
async def create_appointment(
    request: Request,
    body: AppointmentCreateRequest,
    db: AsyncSession = Depends(get_db),
):
    return await AppointmentRepository(db).create(
        **body.model_dump(), status=AppointmentStatus.PENDING
    )


@router.patch(
    "/{appointment_id}",
    response_model=AppointmentResponse,
    summary="Change an appointment's status",
    description=(
        "Pending -> Confirmed | Cancelled, Confirmed -> Completed | Cancelled. "
        "Completed and Cancelled are final."
    ),
    responses={
        409: {"model": ErrorResponse, "description": "Illegal transition."},
    },
)
@limiter.limit(settings.rate_limit)
async def update_appointment_status(
    request: Request,
    appointment_id: int,
    body: AppointmentStatusRequest,
    db: AsyncSession = Depends(get_db),
):
    appointment = await AppointmentRepository(db).get_by_id(appointment_id)
    if not appointment:
        raise HTTPException(status_code=404, detail="Appointment not found")

    entity = Appointment(
        id=appointment.id, status=AppointmentStatus(appointment.status)
    )
    try:
        entity.transition_to(body.status)
    except InvalidStateTransition as exc:
        raise HTTPException(status_code=409, detail=str(exc)) from exc

    appointment.status = entity.status
    return appointment
