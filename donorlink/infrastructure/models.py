"""
SQLAlchemy ORM models.

Tables
------
* ``users``        -- donors and hospital staff
* ``blood_alerts`` -- emergency requests raised by staff
* ``appointments`` -- donation bookings
* ``inventory``    -- one stock row per blood group

Cross-table references (``donor_id``, ``created_by``) are plain integer
columns without foreign keys.  Donor coordinates are plain floats; the
nearby-donor search scans them linearly, so no spatial index exists.
"""

from datetime import datetime, timezone

from sqlalchemy import (
    JSON,
    Boolean,
    Column,
    Date,
    DateTime,
    Enum,
    Float,
    Index,
    Integer,
    String,
    Text,
    func,
)

from .database import Base
from donorlink.domain.enums import (
    AppointmentStatus,
    BloodGroup,
    UrgencyLevel,
    UserType,
)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _str_enum(enum_cls) -> Enum:
    """Store the enum *value* ("O+", "Critical") as a VARCHAR."""
    return Enum(
        enum_cls,
        values_callable=lambda members: [m.value for m in members],
        native_enum=False,
        validate_strings=True,
    )


class UserModel(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(120), nullable=False)
    email = Column(String(255), unique=True, nullable=False)
    phone = Column(String(32), nullable=True)
    blood_group = Column(
        _str_enum(BloodGroup), default=BloodGroup.UNKNOWN, nullable=False
    )
    county = Column(String(80), nullable=True)
    organization = Column(String(160), nullable=True)
    user_type = Column(_str_enum(UserType), default=UserType.DONOR, nullable=False)
    is_verified = Column(Boolean, default=False, nullable=False)
    total_donations = Column(Integer, default=0, nullable=False)
    last_donation_date = Column(Date, nullable=True)

    # Current position; both NULL until the donor shares a location
    lat = Column(Float, nullable=True)
    lng = Column(Float, nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now())

    __table_args__ = (
        Index("idx_users_blood_group", "blood_group"),
        Index("idx_users_type", "user_type"),
    )


class BloodAlertModel(Base):
    __tablename__ = "blood_alerts"

    id = Column(Integer, primary_key=True, autoincrement=True)
    hospital_name = Column(String(160), nullable=False)
    organization = Column(String(160), default="", nullable=False)
    location = Column(String(255), nullable=False)
    hospital_lat = Column(Float, nullable=True)
    hospital_lng = Column(Float, nullable=True)

    # List of BloodGroup values, never empty
    blood_groups = Column(JSON, nullable=False)
    urgency = Column(_str_enum(UrgencyLevel), nullable=False)
    required_units = Column(Integer, nullable=False)
    collected_units = Column(Integer, default=0, nullable=False)
    description = Column(Text, default="", nullable=False)

    # Computed once at creation, never refreshed
    distance_km = Column(Float, nullable=True)

    is_rsvped = Column(Boolean, default=False, nullable=False)
    responders = Column(JSON, default=list, nullable=False)
    created_by = Column(Integer, nullable=True)
    contact_info = Column(String(255), default="", nullable=False)

    created_at = Column(DateTime(timezone=True), default=_utcnow, nullable=False)

    __table_args__ = (
        Index("idx_alerts_urgency", "urgency"),
        Index("idx_alerts_created", "created_at"),
    )


class AppointmentModel(Base):
    __tablename__ = "appointments"

    id = Column(Integer, primary_key=True, autoincrement=True)
    donor_id = Column(Integer, nullable=False)
    donor_name = Column(String(120), nullable=False)
    hospital_name = Column(String(160), nullable=False)
    date = Column(Date, nullable=False)
    time = Column(String(10), nullable=False)
    blood_group = Column(_str_enum(BloodGroup), nullable=False)
    status = Column(
        _str_enum(AppointmentStatus),
        default=AppointmentStatus.PENDING,
        nullable=False,
    )

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now()
    )

    __table_args__ = (
        Index("idx_appointments_donor", "donor_id"),
        Index("idx_appointments_status", "status"),
    )


class InventoryModel(Base):
    __tablename__ = "inventory"

    id = Column(Integer, primary_key=True, autoincrement=True)
    blood_group = Column(_str_enum(BloodGroup), unique=True, nullable=False)
    units = Column(Integer, default=0, nullable=False)
    expiring_soon = Column(Integer, default=0, nullable=False)
    last_updated = Column(
        DateTime(timezone=True), default=_utcnow, onupdate=_utcnow, nullable=False
    )
