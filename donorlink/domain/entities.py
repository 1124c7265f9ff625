"""
Domain entities with business logic.

Patterns used
-------------
- **State Pattern** on ``Appointment``: enforces valid lifecycle transitions
  (Pending -> Confirmed -> Completed | Cancelled).
- ``BloodAlert.rsvp`` records a donor response and bumps collected units.
- ``InventoryItem.adjust`` clamps stock at zero.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional

from .enums import (
    APPOINTMENT_TRANSITIONS,
    AppointmentStatus,
    BloodGroup,
    UrgencyLevel,
)


class InvalidStateTransition(Exception):
    """Raised when an appointment status change violates the state machine."""


class DuplicateResponse(Exception):
    """Raised when a donor RSVPs to the same alert twice."""


# ── Value Object ──────────────────────────────────────────────────────


@dataclass(frozen=True)
class Location:
    latitude: float
    longitude: float


# ── Entities ──────────────────────────────────────────────────────────


@dataclass
class Donor:
    """A proximity-search candidate; ``location`` is None until shared."""

    id: Optional[int] = None
    name: str = ""
    blood_group: BloodGroup = BloodGroup.UNKNOWN
    location: Optional[Location] = None
    total_donations: int = 0
    is_verified: bool = False


@dataclass(frozen=True)
class NearbyDonor:
    id: Optional[int]
    name: str
    blood_group: BloodGroup
    distance_km: float
    location: Location
    total_donations: int
    is_verified: bool


@dataclass
class BloodAlert:
    id: Optional[int] = None
    hospital_name: str = ""
    blood_groups: list[BloodGroup] = field(default_factory=list)
    urgency: UrgencyLevel = UrgencyLevel.MEDIUM
    required_units: int = 1
    collected_units: int = 0
    is_rsvped: bool = False
    responders: list[int] = field(default_factory=list)

    def needs(self, blood_group: BloodGroup) -> bool:
        return blood_group in self.blood_groups

    def rsvp(self, user_id: int) -> None:
        """Count one more unit pledged by *user_id*.

        Collected units are allowed to exceed ``required_units``; a second
        response from the same donor is rejected.
        """
        if user_id in self.responders:
            raise DuplicateResponse(
                f"User {user_id} already responded to alert {self.id}"
            )
        self.responders.append(user_id)
        self.collected_units += 1
        self.is_rsvped = True


@dataclass
class Appointment:
    id: Optional[int] = None
    donor_id: Optional[int] = None
    hospital_name: str = ""
    blood_group: BloodGroup = BloodGroup.UNKNOWN
    status: AppointmentStatus = AppointmentStatus.PENDING

    def transition_to(self, new_status: AppointmentStatus) -> None:
        """Move to *new_status* if the transition is legal, else raise."""
        allowed = APPOINTMENT_TRANSITIONS.get(self.status, set())
        if new_status not in allowed:
            raise InvalidStateTransition(
                f"Cannot transition from {self.status.value} to {new_status.value}"
            )
        self.status = new_status


@dataclass
class InventoryItem:
    blood_group: BloodGroup
    units: int = 0
    expiring_soon: int = 0
    last_updated: Optional[datetime] = None

    def adjust(self, change: int) -> None:
        self.units = max(0, self.units + change)
