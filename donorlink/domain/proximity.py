"""
Nearby-Donor Proximity Filter
=============================

1. **Skip unlocated** -- donors that never shared coordinates are ignored.
2. **Exact group match** -- an optional blood-group constraint keeps only
   donors whose stored group *equals* it.  ABO/Rh compatibility
   (e.g. O- as universal donor) is deliberately not applied.
3. **Radius cut** -- keep donors whose haversine distance is
   ``<= radius_km``.

Results keep the candidate collection's order; they are NOT sorted by
distance.

Complexity
----------
O(N) for N candidates, one haversine call per located donor.  No spatial
index is used.
"""

from __future__ import annotations

from typing import Iterable, Optional

from .distance import haversine_km
from .entities import BloodAlert, Donor, Location, NearbyDonor
from .enums import BloodGroup


def find_nearby_donors(
    center: Location,
    radius_km: float,
    donors: Iterable[Donor],
    blood_group: Optional[BloodGroup] = None,
) -> list[NearbyDonor]:
    """Return donors within *radius_km* of *center*, annotated with distance."""
    nearby: list[NearbyDonor] = []
    for donor in donors:
        if donor.location is None:
            continue
        if blood_group is not None and donor.blood_group != blood_group:
            continue

        distance = haversine_km(
            center.latitude,
            center.longitude,
            donor.location.latitude,
            donor.location.longitude,
        )
        if distance <= radius_km:
            nearby.append(
                NearbyDonor(
                    id=donor.id,
                    name=donor.name,
                    blood_group=donor.blood_group,
                    distance_km=distance,
                    location=donor.location,
                    total_donations=donor.total_donations,
                    is_verified=donor.is_verified,
                )
            )
    return nearby


def match_alert_donors(
    alert: BloodAlert,
    center: Location,
    radius_km: float,
    donors: Iterable[Donor],
) -> list[NearbyDonor]:
    """Nearby donors whose group is one the alert asks for."""
    return [
        d
        for d in find_nearby_donors(center, radius_km, donors)
        if alert.needs(d.blood_group)
    ]
