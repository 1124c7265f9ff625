"""
Repository Pattern -- abstracts DB access so domain logic stays DB-agnostic.

Each repository receives an ``AsyncSession`` (unit-of-work) and exposes
domain-relevant queries only.  ``to_donor`` / ``to_alert`` map rows onto
the plain domain entities consumed by ``donorlink.domain.proximity``.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any, Optional

from sqlalchemy import func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from .models import AppointmentModel, BloodAlertModel, InventoryModel, UserModel
from donorlink.domain.entities import BloodAlert, Donor, InventoryItem, Location
from donorlink.domain.enums import (
    STOCKED_GROUPS,
    BloodGroup,
    UrgencyLevel,
    UserType,
)

logger = logging.getLogger(__name__)


# ── Row -> entity mapping ─────────────────────────────────────────────


def to_donor(user: UserModel) -> Donor:
    location = None
    if user.lat is not None and user.lng is not None:
        location = Location(user.lat, user.lng)
    return Donor(
        id=user.id,
        name=user.name,
        blood_group=BloodGroup(user.blood_group),
        location=location,
        total_donations=user.total_donations or 0,
        is_verified=bool(user.is_verified),
    )


def to_alert(alert: BloodAlertModel) -> BloodAlert:
    return BloodAlert(
        id=alert.id,
        hospital_name=alert.hospital_name,
        blood_groups=[BloodGroup(g) for g in alert.blood_groups],
        urgency=UrgencyLevel(alert.urgency),
        required_units=alert.required_units,
        collected_units=alert.collected_units,
        is_rsvped=alert.is_rsvped,
        responders=list(alert.responders or []),
    )


# ── Repositories ──────────────────────────────────────────────────────


class UserRepository:
    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_by_id(self, user_id: int) -> Optional[UserModel]:
        return await self.session.get(UserModel, user_id)

    async def get_by_email(self, email: str) -> Optional[UserModel]:
        result = await self.session.execute(
            select(UserModel).where(UserModel.email == email)
        )
        return result.scalar_one_or_none()

    async def create(self, **fields: Any) -> UserModel:
        user = UserModel(**fields)
        self.session.add(user)
        await self.session.flush()
        logger.info("Registered user %s (%s)", user.id, user.email)
        return user

    async def update(self, user: UserModel, **fields: Any) -> UserModel:
        for name, value in fields.items():
            setattr(user, name, value)
        await self.session.flush()
        return user

    async def set_location(
        self, user: UserModel, lat: float, lng: float
    ) -> UserModel:
        # Concurrent refreshes are not coordinated: last write wins.
        user.lat = lat
        user.lng = lng
        await self.session.flush()
        return user

    async def list_donors(
        self, blood_group: BloodGroup | None = None
    ) -> list[UserModel]:
        """All donor accounts in id order, optionally exact-matching a group."""
        query = (
            select(UserModel)
            .where(UserModel.user_type == UserType.DONOR)
            .order_by(UserModel.id)
        )
        if blood_group is not None:
            query = query.where(UserModel.blood_group == blood_group)
        result = await self.session.execute(query)
        return list(result.scalars().all())

    async def list_donor_candidates(
        self, blood_group: BloodGroup | None = None
    ) -> list[Donor]:
        return [to_donor(u) for u in await self.list_donors(blood_group)]


class BloodAlertRepository:
    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(self, **fields: Any) -> BloodAlertModel:
        alert = BloodAlertModel(**fields)
        self.session.add(alert)
        await self.session.flush()
        logger.info(
            "Alert %s raised by %s for %s (%s)",
            alert.id,
            alert.hospital_name,
            ", ".join(alert.blood_groups),
            UrgencyLevel(alert.urgency).value,
        )
        return alert

    async def get_by_id(self, alert_id: int) -> Optional[BloodAlertModel]:
        return await self.session.get(BloodAlertModel, alert_id)

    async def list_all(self) -> list[BloodAlertModel]:
        result = await self.session.execute(
            select(BloodAlertModel).order_by(
                BloodAlertModel.created_at.desc(), BloodAlertModel.id.desc()
            )
        )
        return list(result.scalars().all())

    async def search(
        self, text: str | None = None, blood_group: BloodGroup | None = None
    ) -> list[BloodAlertModel]:
        """Case-insensitive substring search, newest first.

        Blood-group membership is checked in Python because the groups live
        in a JSON column.
        """
        query = select(BloodAlertModel).order_by(
            BloodAlertModel.created_at.desc(), BloodAlertModel.id.desc()
        )
        if text:
            pattern = f"%{text.lower()}%"
            query = query.where(
                or_(
                    func.lower(BloodAlertModel.hospital_name).like(pattern),
                    func.lower(BloodAlertModel.location).like(pattern),
                    func.lower(BloodAlertModel.description).like(pattern),
                )
            )
        result = await self.session.execute(query)
        alerts = list(result.scalars().all())
        if blood_group is not None:
            alerts = [a for a in alerts if blood_group.value in a.blood_groups]
        return alerts

    async def list_critical_since(
        self, since: datetime, limit: int
    ) -> list[BloodAlertModel]:
        result = await self.session.execute(
            select(BloodAlertModel)
            .where(
                BloodAlertModel.urgency == UrgencyLevel.CRITICAL,
                BloodAlertModel.created_at >= since,
            )
            .order_by(BloodAlertModel.created_at.desc(), BloodAlertModel.id.desc())
            .limit(limit)
        )
        return list(result.scalars().all())

    async def update(self, alert: BloodAlertModel, **fields: Any) -> BloodAlertModel:
        for name, value in fields.items():
            setattr(alert, name, value)
        await self.session.flush()
        return alert

    async def record_rsvp(self, alert: BloodAlertModel, user_id: int) -> BloodAlertModel:
        """Apply ``BloodAlert.rsvp`` and persist the result.

        Raises ``DuplicateResponse`` if *user_id* already responded.
        """
        entity = to_alert(alert)
        entity.rsvp(user_id)
        alert.collected_units = entity.collected_units
        alert.is_rsvped = entity.is_rsvped
        # new list object so the JSON column is flagged dirty
        alert.responders = list(entity.responders)
        await self.session.flush()
        logger.info(
            "User %s responded to alert %s (%d/%d units)",
            user_id,
            alert.id,
            alert.collected_units,
            alert.required_units,
        )
        return alert

    async def delete(self, alert: BloodAlertModel) -> None:
        await self.session.delete(alert)
        await self.session.flush()
        logger.info("Alert %s deleted", alert.id)


class AppointmentRepository:
    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(self, **fields: Any) -> AppointmentModel:
        appointment = AppointmentModel(**fields)
        self.session.add(appointment)
        await self.session.flush()
        logger.info(
            "Appointment %s booked by donor %s at %s",
            appointment.id,
            appointment.donor_id,
            appointment.hospital_name,
        )
        return appointment

    async def get_by_id(self, appointment_id: int) -> Optional[AppointmentModel]:
        return await self.session.get(AppointmentModel, appointment_id)

    async def list_all(self) -> list[AppointmentModel]:
        result = await self.session.execute(
            select(AppointmentModel).order_by(
                AppointmentModel.date, AppointmentModel.time, AppointmentModel.id
            )
        )
        return list(result.scalars().all())


class InventoryRepository:
    def __init__(self, session: AsyncSession):
        self.session = session

    async def list_all(self) -> list[InventoryModel]:
        result = await self.session.execute(select(InventoryModel))
        rows = {BloodGroup(r.blood_group): r for r in result.scalars().all()}
        return [rows[g] for g in STOCKED_GROUPS if g in rows]

    async def get_by_group(self, blood_group: BloodGroup) -> Optional[InventoryModel]:
        result = await self.session.execute(
            select(InventoryModel).where(InventoryModel.blood_group == blood_group)
        )
        return result.scalar_one_or_none()

    async def adjust(self, row: InventoryModel, change: int) -> InventoryModel:
        item = InventoryItem(blood_group=BloodGroup(row.blood_group), units=row.units)
        item.adjust(change)
        row.units = item.units
        row.last_updated = datetime.now(timezone.utc)
        await self.session.flush()
        logger.info(
            "Inventory %s adjusted by %+d -> %d units",
            item.blood_group.value,
            change,
            row.units,
        )
        return row

    async def ensure_seeded(self) -> int:
        """Insert a zero-unit row for every stocked group that lacks one."""
        existing = {BloodGroup(r.blood_group) for r in await self.list_all()}
        missing = [g for g in STOCKED_GROUPS if g not in existing]
        for group in missing:
            self.session.add(InventoryModel(blood_group=group, units=0, expiring_soon=0))
        await self.session.flush()
        if missing:
            logger.info("Seeded inventory for %d blood groups", len(missing))
        return len(missing)
