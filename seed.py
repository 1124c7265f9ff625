"""
Seed script -- populates the database with sample data for reviewers.

Run after migrations:
    python seed.py

Creates:
  - 8 inventory rows (one per blood group, 0 units)
  - 8 sample donors around Nairobi, two without a shared location
  - 1 hospital staff account
  - 2 sample alerts and 3 sample appointments
"""

import asyncio
from datetime import date, timedelta

from sqlalchemy import text

from donorlink.domain.enums import (
    AppointmentStatus,
    BloodGroup,
    UrgencyLevel,
    UserType,
)
from donorlink.infrastructure.database import async_session_factory, engine
from donorlink.infrastructure.models import (
    AppointmentModel,
    BloodAlertModel,
    UserModel,
)
from donorlink.infrastructure.repositories import InventoryRepository

# Kenyatta National Hospital (approx)
KNH_LAT, KNH_LNG = -1.3041, 36.8060


DONORS = [
    {"name": "Demo Donor", "email": "donor@example.com", "blood_group": BloodGroup.O_POS, "county": "Nairobi", "lat": -1.286389, "lng": 36.817223, "total_donations": 0},
    {"name": "Wanjiku Kamau", "email": "wanjiku@example.com", "blood_group": BloodGroup.O_NEG, "county": "Nairobi", "lat": -1.2921, "lng": 36.8219, "total_donations": 4},
    {"name": "Otieno Ouma", "email": "otieno@example.com", "blood_group": BloodGroup.A_POS, "county": "Nairobi", "lat": -1.2633, "lng": 36.8040, "total_donations": 2},
    {"name": "Achieng Atieno", "email": "achieng@example.com", "blood_group": BloodGroup.B_POS, "county": "Kiambu", "lat": -1.1714, "lng": 36.8356, "total_donations": 1},
    {"name": "Kiprop Cheruiyot", "email": "kiprop@example.com", "blood_group": BloodGroup.AB_POS, "county": "Nairobi", "lat": -1.3180, "lng": 36.8340, "total_donations": 6},
    {"name": "Njeri Mwangi", "email": "njeri@example.com", "blood_group": BloodGroup.O_POS, "county": "Machakos", "lat": -1.5177, "lng": 37.2634, "total_donations": 3},
    # No shared location yet -- never returned by nearby search
    {"name": "Mutua Musyoka", "email": "mutua@example.com", "blood_group": BloodGroup.A_NEG, "county": "Nairobi", "lat": None, "lng": None, "total_donations": 0},
    {"name": "Chebet Rotich", "email": "chebet@example.com", "blood_group": BloodGroup.UNKNOWN, "county": "Nakuru", "lat": None, "lng": None, "total_donations": 0},
]


async def seed():
    async with async_session_factory() as session:
        # ── Inventory ─────────────────────────────────────────────────
        created = await InventoryRepository(session).ensure_seeded()
        print(f"  Created {created} inventory rows")

        # Check if already seeded
        result = await session.execute(text("SELECT count(*) FROM users"))
        if result.scalar() > 0:
            await session.commit()
            print("Users already seeded. Skipping.")
            return

        # ── Users ─────────────────────────────────────────────────────
        donor_models = []
        for d in DONORS:
            m = UserModel(user_type=UserType.DONOR, is_verified=d["total_donations"] > 0, **d)
            session.add(m)
            donor_models.append(m)

        staff = UserModel(
            name="Hospital Staff",
            email="staff@example.com",
            phone="0723456789",
            organization="Kenyatta National Hospital",
            user_type=UserType.STAFF,
            is_verified=True,
            lat=KNH_LAT,
            lng=KNH_LNG,
        )
        session.add(staff)
        await session.flush()
        print(f"  Created {len(donor_models)} donors and 1 staff user")

        # ── Alerts ────────────────────────────────────────────────────
        session.add_all(
            [
                BloodAlertModel(
                    hospital_name="Kenyatta National Hospital",
                    organization="Kenyatta National Hospital",
                    location="Hospital Rd, Upper Hill, Nairobi",
                    hospital_lat=KNH_LAT,
                    hospital_lng=KNH_LNG,
                    blood_groups=[BloodGroup.O_NEG.value, BloodGroup.O_POS.value],
                    urgency=UrgencyLevel.CRITICAL,
                    required_units=10,
                    description="Multiple casualties from a road accident.",
                    distance_km=0.0,
                    created_by=staff.id,
                    contact_info="0723456789",
                    responders=[],
                ),
                BloodAlertModel(
                    hospital_name="Mama Lucy Kibaki Hospital",
                    organization="Mama Lucy Kibaki Hospital",
                    location="Kangundo Rd, Nairobi",
                    blood_groups=[BloodGroup.B_POS.value],
                    urgency=UrgencyLevel.MEDIUM,
                    required_units=4,
                    description="Scheduled surgeries next week.",
                    created_by=staff.id,
                    contact_info="0711000000",
                    responders=[],
                ),
            ]
        )
        print("  Created 2 alerts")

        # ── Appointments ──────────────────────────────────────────────
        today = date.today()
        appointments = [
            (donor_models[0], today + timedelta(days=2), "09:30", AppointmentStatus.PENDING),
            (donor_models[1], today + timedelta(days=1), "11:00", AppointmentStatus.CONFIRMED),
            (donor_models[4], today - timedelta(days=7), "14:15", AppointmentStatus.COMPLETED),
        ]
        for donor, day, slot, status in appointments:
            session.add(
                AppointmentModel(
                    donor_id=donor.id,
                    donor_name=donor.name,
                    hospital_name="Kenyatta National Hospital",
                    date=day,
                    time=slot,
                    blood_group=donor.blood_group,
                    status=status,
                )
            )
        await session.flush()
        print(f"  Created {len(appointments)} appointments")

        await session.commit()
        print("\nSeed complete!")


async def main():
    print("Seeding database...")
    await seed()
    await engine.dispose()


if __name__ == "__main__":
    asyncio.run(main())
