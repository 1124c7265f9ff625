"""
Emergency alert endpoints
=========================

POST   /api/v1/alerts                          -- raise an alert (201)
GET    /api/v1/alerts                          -- all alerts, newest first
GET    /api/v1/alerts/search                   -- text / blood-group search
GET    /api/v1/alerts/{alert_id}               -- one alert
PATCH  /api/v1/alerts/{alert_id}               -- edit an alert
DELETE /api/v1/alerts/{alert_id}               -- remove an alert
POST   /api/v1/alerts/{alert_id}/rsvp          -- donor pledges one unit
GET    /api/v1/alerts/{alert_id}/nearby-donors -- matching donors in radius
"""

from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Request, Response
from sqlalchemy.ext.asyncio import AsyncSession

from donorlink.api.dependencies import get_db
from donorlink.api.middleware import limiter
from donorlink.api.routes.donors import resolve_center, to_response
from donorlink.api.schemas import (
    AlertCreateRequest,
    AlertResponse,
    AlertUpdateRequest,
    ErrorResponse,
    NearbyDonorResponse,
    RsvpRequest,
)
from donorlink.config import settings
from donorlink.domain.distance import haversine_km
from donorlink.domain.entities import DuplicateResponse
from donorlink.domain.enums import BloodGroup
from donorlink.domain.proximity import match_alert_donors
from donorlink.infrastructure.models import BloodAlertModel
from donorlink.infrastructure.repositories import (
    BloodAlertRepository,
    UserRepository,
    to_alert,
)

router = APIRouter(
    prefix="/alerts",
    tags=["alerts"],
    responses={404: {"model": ErrorResponse, "description": "Not found."}},
)


async def _get_alert_or_404(
    repo: BloodAlertRepository, alert_id: int
) -> BloodAlertModel:
    alert = await repo.get_by_id(alert_id)
    if not alert:
        raise HTTPException(status_code=404, detail="Alert not found")
    return alert


@router.post(
    "",
    status_code=201,
    response_model=AlertResponse,
    summary="Raise an emergency blood alert",
    description=(
        "``distance_km`` is fixed at creation: the distance from the "
        "creator's stored location to the hospital coordinates, or null "
        "when either is unknown."
    ),
)
@limiter.limit(settings.rate_limit)
async def create_alert(
    request: Request,
    body: AlertCreateRequest,
    db: AsyncSession = Depends(get_db),
):
    distance_km = None
    has_site = body.hospital_lat is not None and body.hospital_lng is not None
    if body.created_by is not None and has_site:
        creator = await UserRepository(db).get_by_id(body.created_by)
        if creator and creator.lat is not None and creator.lng is not None:
            distance_km = round(
                haversine_km(
                    creator.lat, creator.lng, body.hospital_lat, body.hospital_lng
                ),
                1,
            )

    fields = body.model_dump()
    fields["blood_groups"] = [g.value for g in body.blood_groups]
    return await BloodAlertRepository(db).create(
        **fields,
        distance_km=distance_km,
        collected_units=0,
        is_rsvped=False,
        responders=[],
    )


@router.get("", response_model=list[AlertResponse], summary="List alerts")
@limiter.limit(settings.rate_limit)
async def list_alerts(request: Request, db: AsyncSession = Depends(get_db)):
    return await BloodAlertRepository(db).list_all()


@router.get(
    "/search",
    response_model=list[AlertResponse],
    summary="Search alerts by text and blood group",
)
@limiter.limit(settings.rate_limit)
async def search_alerts(
    request: Request,
    query: Optional[str] = Query(None, max_length=100),
    blood_group: Optional[BloodGroup] = None,
    db: AsyncSession = Depends(get_db),
):
    return await BloodAlertRepository(db).search(query, blood_group)


@router.get("/{alert_id}", response_model=AlertResponse, summary="Get an alert")
@limiter.limit(settings.rate_limit)
async def get_alert(
    request: Request,
    alert_id: int,
    db: AsyncSession = Depends(get_db),
):
    return await _get_alert_or_404(BloodAlertRepository(db), alert_id)


@router.patch("/{alert_id}", response_model=AlertResponse, summary="Edit an alert")
@limiter.limit(settings.rate_limit)
async def update_alert(
    request: Request,
    alert_id: int,
    body: AlertUpdateRequest,
    db: AsyncSession = Depends(get_db),
):
    repo = BloodAlertRepository(db)
    alert = await _get_alert_or_404(repo, alert_id)

    changes = body.model_dump(exclude_unset=True)
    if "blood_groups" in changes:
        changes["blood_groups"] = [g.value for g in body.blood_groups]
    return await repo.update(alert, **changes)


@router.delete("/{alert_id}", status_code=204, summary="Delete an alert")
@limiter.limit(settings.rate_limit)
async def delete_alert(
    request: Request,
    alert_id: int,
    db: AsyncSession = Depends(get_db),
):
    repo = BloodAlertRepository(db)
    alert = await _get_alert_or_404(repo, alert_id)
    await repo.delete(alert)
    return Response(status_code=204)


@router.post(
    "/{alert_id}/rsvp",
    response_model=AlertResponse,
    summary="Respond to an alert",
    description=(
        "Adds one collected unit. Collected units may exceed the required "
        "count; a donor can respond to a given alert only once."
    ),
    responses={
        409: {"model": ErrorResponse, "description": "Donor already responded."},
    },
)
@limiter.limit(settings.rate_limit)
async def rsvp_alert(
    request: Request,
    alert_id: int,
    body: RsvpRequest,
    db: AsyncSession = Depends(get_db),
):
    repo = BloodAlertRepository(db)
    alert = await _get_alert_or_404(repo, alert_id)
    if not await UserRepository(db).get_by_id(body.user_id):
        raise HTTPException(status_code=404, detail="User not found")

    try:
        return await repo.record_rsvp(alert, body.user_id)
    except DuplicateResponse as exc:
        raise HTTPException(status_code=409, detail=str(exc)) from exc


@router.get(
    "/{alert_id}/nearby-donors",
    response_model=list[NearbyDonorResponse],
    summary="Donors near a point whose group the alert needs",
)
@limiter.limit(settings.rate_limit)
async def alert_nearby_donors(
    request: Request,
    alert_id: int,
    lat: Optional[float] = Query(None, ge=-90, le=90),
    lng: Optional[float] = Query(None, ge=-180, le=180),
    radius: float = Query(settings.default_search_radius_km, ge=0),
    db: AsyncSession = Depends(get_db),
):
    alert = await _get_alert_or_404(BloodAlertRepository(db), alert_id)
    center = resolve_center(lat, lng)
    candidates = await UserRepository(db).list_donor_candidates()
    matches = match_alert_donors(to_alert(alert), center, radius, candidates)
    return [to_response(d) for d in matches]
