"""
Distance calculation using the Haversine formula.

Donor locations come from browser geolocation, so straight-line
great-circle distance is what the nearby-donor search reports.  No road
routing is attempted.

Inputs are not range-checked here: out-of-range degrees yield a finite
but meaningless number and ``NaN`` propagates.  Range validation lives in
the API schemas.

Complexity: O(1) per call.
"""

import math

EARTH_RADIUS_KM = 6_371.0


def haversine_km(
    lat1: float, lng1: float, lat2: float, lng2: float
) -> float:
    """Return the great-circle distance in **km** between two points."""
    lat1_r, lat2_r = math.radians(lat1), math.radians(lat2)
    dlat = math.radians(lat2 - lat1)
    dlng = math.radians(lng2 - lng1)

    a = (
        math.sin(dlat / 2) ** 2
        + math.cos(lat1_r) * math.cos(lat2_r) * math.sin(dlng / 2) ** 2
    )
    # out-of-range degrees can push ``a`` outside [0, 1]; NaN passes through
    if not math.isnan(a):
        a = min(1.0, max(0.0, a))
    return 2 * EARTH_RADIUS_KM * math.asin(math.sqrt(a))
