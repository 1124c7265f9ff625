"""Pydantic request / response schemas for the REST API."""

from __future__ import annotations

from datetime import date as Date, datetime
from typing import Optional

from pydantic import BaseModel, Field, field_validator

from donorlink.domain.enums import (
    AppointmentStatus,
    BloodGroup,
    UrgencyLevel,
    UserType,
)


# ── Requests ──────────────────────────────────────────────────────────


class UserCreateRequest(BaseModel):
    name: str = Field(..., min_length=1, max_length=120)
    email: str = Field(..., max_length=255, pattern=r"^[^@\s]+@[^@\s]+\.[^@\s]+$")
    phone: Optional[str] = Field(None, max_length=32)
    blood_group: BloodGroup = BloodGroup.UNKNOWN
    county: Optional[str] = Field(None, max_length=80)
    organization: Optional[str] = Field(None, max_length=160)
    user_type: UserType = UserType.DONOR
    lat: Optional[float] = Field(None, ge=-90, le=90)
    lng: Optional[float] = Field(None, ge=-180, le=180)


class UserUpdateRequest(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=120)
    phone: Optional[str] = Field(None, max_length=32)
    blood_group: Optional[BloodGroup] = None
    county: Optional[str] = Field(None, max_length=80)
    lat: Optional[float] = Field(None, ge=-90, le=90)
    lng: Optional[float] = Field(None, ge=-180, le=180)

    @field_validator("name", "blood_group")
    @classmethod
    def _not_null(cls, value):
        if value is None:
            raise ValueError("may be omitted but not null")
        return value


class LocationUpdateRequest(BaseModel):
    lat: float = Field(..., ge=-90, le=90)
    lng: float = Field(..., ge=-180, le=180)


class AlertCreateRequest(BaseModel):
    hospital_name: str = Field(..., min_length=1, max_length=160)
    location: str = Field(..., min_length=1, max_length=255)
    blood_groups: list[BloodGroup] = Field(..., min_length=1)
    urgency: UrgencyLevel
    required_units: int = Field(..., gt=0)
    description: str = ""
    contact_info: str = Field("", max_length=255)
    organization: str = Field("", max_length=160)
    created_by: Optional[int] = None
    hospital_lat: Optional[float] = Field(None, ge=-90, le=90)
    hospital_lng: Optional[float] = Field(None, ge=-180, le=180)

    @field_validator("blood_groups", mode="before")
    @classmethod
    def _wrap_single_group(cls, value):
        # A single group may be sent as a bare string.
        if isinstance(value, str):
            return [value]
        return value


class AlertUpdateRequest(BaseModel):
    hospital_name: Optional[str] = Field(None, min_length=1, max_length=160)
    location: Optional[str] = Field(None, min_length=1, max_length=255)
    blood_groups: Optional[list[BloodGroup]] = Field(None, min_length=1)
    urgency: Optional[UrgencyLevel] = None
    required_units: Optional[int] = Field(None, gt=0)
    description: Optional[str] = None
    contact_info: Optional[str] = Field(None, max_length=255)

    # Every alert column is NOT NULL; a field may be left out but not cleared.
    @field_validator("*")
    @classmethod
    def _not_null(cls, value):
        if value is None:
            raise ValueError("may be omitted but not null")
        return value


class RsvpRequest(BaseModel):
    user_id: int


class AppointmentCreateRequest(BaseModel):
    donor_id: int
    donor_name: str = Field(..., min_length=1, max_length=120)
    hospital_name: str = Field(..., min_length=1, max_length=160)
    date: Date
    time: str = Field(..., pattern=r"^\d{2}:\d{2}$")
    blood_group: BloodGroup


class AppointmentStatusRequest(BaseModel):
    status: AppointmentStatus


class InventoryChangeRequest(BaseModel):
    blood_group: BloodGroup
    change: int


# ── Responses ─────────────────────────────────────────────────────────


class UserResponse(BaseModel):
    id: int
    name: str
    email: str
    phone: Optional[str] = None
    blood_group: BloodGroup
    county: Optional[str] = None
    organization: Optional[str] = None
    user_type: UserType
    is_verified: bool
    total_donations: int
    last_donation_date: Optional[Date] = None
    lat: Optional[float] = None
    lng: Optional[float] = None

    model_config = {"from_attributes": True}


class NearbyDonorResponse(BaseModel):
    id: int
    name: str
    blood_group: BloodGroup
    distance_km: float
    lat: float
    lng: float
    total_donations: int
    is_verified: bool


class AlertResponse(BaseModel):
    id: int
    hospital_name: str
    organization: str
    location: str
    hospital_lat: Optional[float] = None
    hospital_lng: Optional[float] = None
    blood_groups: list[BloodGroup]
    urgency: UrgencyLevel
    required_units: int
    collected_units: int
    description: str
    distance_km: Optional[float] = None
    is_rsvped: bool
    created_by: Optional[int] = None
    contact_info: str
    created_at: Optional[datetime] = None

    model_config = {"from_attributes": True}


class NotificationResponse(BaseModel):
    id: int
    type: str = "alert"
    title: str
    message: str
    timestamp: Optional[datetime] = None
    read: bool = False


class AppointmentResponse(BaseModel):
    id: int
    donor_id: int
    donor_name: str
    hospital_name: str
    date: Date
    time: str
    blood_group: BloodGroup
    status: AppointmentStatus

    model_config = {"from_attributes": True}


class InventoryItemResponse(BaseModel):
    blood_group: BloodGroup
    units: int
    expiring_soon: int
    last_updated: Optional[datetime] = None

    model_config = {"from_attributes": True}


class HealthResponse(BaseModel):
    status: str = "ok"


class ErrorResponse(BaseModel):
    detail: str
