"""
Donor search endpoints
======================

GET /api/v1/donors/nearby -- donors within a radius of a point
"""

from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Request
from sqlalchemy.ext.asyncio import AsyncSession

from donorlink.api.dependencies import get_db
from donorlink.api.middleware import limiter
from donorlink.api.schemas import NearbyDonorResponse
from donorlink.config import settings
from donorlink.domain.entities import Location, NearbyDonor
from donorlink.domain.enums import BloodGroup
from donorlink.domain.proximity import find_nearby_donors
from donorlink.infrastructure.repositories import UserRepository

router = APIRouter(prefix="/donors", tags=["donors"])


def resolve_center(lat: Optional[float], lng: Optional[float]) -> Location:
    """Requester position, or the configured fallback when none was sent."""
    if lat is None and lng is None:
        return Location(settings.fallback_latitude, settings.fallback_longitude)
    if lat is None or lng is None:
        raise HTTPException(
            status_code=422, detail="lat and lng must be supplied together"
        )
    return Location(lat, lng)


def to_response(donor: NearbyDonor) -> NearbyDonorResponse:
    return NearbyDonorResponse(
        id=donor.id,
        name=donor.name,
        blood_group=donor.blood_group,
        distance_km=donor.distance_km,
        lat=donor.location.latitude,
        lng=donor.location.longitude,
        total_donations=donor.total_donations,
        is_verified=donor.is_verified,
    )


@router.get(
    "/nearby",
    response_model=list[NearbyDonorResponse],
    summary="Find donors near a point",
    description=(
        "Linear scan over all donors that shared a location. Results keep "
        "registration order and are not sorted by distance. The blood-group "
        "filter is an exact match; compatibility is not applied."
    ),
)
@limiter.limit(settings.rate_limit)
async def nearby_donors(
    request: Request,
    lat: Optional[float] = Query(None, ge=-90, le=90),
    lng: Optional[float] = Query(None, ge=-180, le=180),
    radius: float = Query(settings.default_search_radius_km, ge=0),
    blood_group: Optional[BloodGroup] = None,
    db: AsyncSession = Depends(get_db),
):
    center = resolve_center(lat, lng)
    candidates = await UserRepository(db).list_donor_candidates(blood_group)
    nearby = find_nearby_donors(center, radius, candidates, blood_group)
    return [to_response(d) for d in nearby]
