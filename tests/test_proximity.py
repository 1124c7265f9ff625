"""Unit tests for the nearby-donor proximity filter and alert matching."""

import pytest

from donorlink.domain.distance import haversine_km
from donorlink.domain.entities import BloodAlert, Donor, Location
from donorlink.domain.enums import BloodGroup
from donorlink.domain.proximity import find_nearby_donors, match_alert_donors

NAIROBI = Location(-1.286389, 36.817223)
KNH = Location(-1.3041, 36.8060)  # ~2.3 km from NAIROBI
THIKA = Location(-1.0333, 37.0693)  # ~40 km
MOMBASA = Location(-4.0435, 39.6682)  # ~440 km


def _donor(id, group, location, **kw):
    return Donor(id=id, name=f"donor-{id}", blood_group=group, location=location, **kw)


@pytest.fixture
def donors():
    return [
        _donor(1, BloodGroup.O_POS, THIKA),
        _donor(2, BloodGroup.O_NEG, KNH),
        _donor(3, BloodGroup.A_POS, None),
        _donor(4, BloodGroup.O_POS, NAIROBI, total_donations=5, is_verified=True),
        _donor(5, BloodGroup.B_POS, MOMBASA),
    ]


class TestFindNearbyDonors:
    def test_empty_candidates(self):
        assert find_nearby_donors(NAIROBI, 10, []) == []

    def test_co_located_donor_included_with_zero_distance(self):
        result = find_nearby_donors(NAIROBI, 1, [_donor(1, BloodGroup.O_POS, NAIROBI)])
        assert len(result) == 1
        assert result[0].distance_km == pytest.approx(0.0, abs=1e-9)

    def test_two_km_donor_excluded_at_radius_one(self):
        assert find_nearby_donors(NAIROBI, 1, [_donor(1, BloodGroup.O_POS, KNH)]) == []

    def test_two_km_donor_included_at_radius_five(self):
        result = find_nearby_donors(NAIROBI, 5, [_donor(1, BloodGroup.O_POS, KNH)])
        assert [d.id for d in result] == [1]
        assert 2.0 < result[0].distance_km < 2.6

    def test_exact_group_filter_excludes_o_negative(self):
        candidates = [
            _donor(1, BloodGroup.O_NEG, NAIROBI),
            _donor(2, BloodGroup.O_POS, KNH),
        ]
        result = find_nearby_donors(NAIROBI, 5, candidates, BloodGroup.O_POS)
        assert [d.id for d in result] == [2]

    def test_never_returns_unlocated_donor(self, donors):
        result = find_nearby_donors(NAIROBI, 20_000, donors)
        assert 3 not in [d.id for d in result]
        assert all(d.location is not None for d in result)

    def test_exact_subset_within_radius(self, donors):
        radius = 50
        expected = [
            d.id
            for d in donors
            if d.location is not None
            and haversine_km(
                NAIROBI.latitude, NAIROBI.longitude,
                d.location.latitude, d.location.longitude,
            ) <= radius
        ]
        result = find_nearby_donors(NAIROBI, radius, donors)
        assert [d.id for d in result] == expected == [1, 2, 4]

    def test_preserves_input_order_not_distance(self, donors):
        result = find_nearby_donors(NAIROBI, 50, donors)
        distances = [d.distance_km for d in result]
        # Thika (far) is first because it was first in the input
        assert distances != sorted(distances)

    def test_negative_radius_returns_nothing(self, donors):
        assert find_nearby_donors(NAIROBI, -1, donors) == []

    def test_zero_radius_keeps_only_co_located(self, donors):
        result = find_nearby_donors(NAIROBI, 0, donors)
        assert [d.id for d in result] == [4]

    def test_result_carries_donor_details(self, donors):
        result = find_nearby_donors(NAIROBI, 1, donors)
        (hit,) = result
        assert hit.name == "donor-4"
        assert hit.blood_group is BloodGroup.O_POS
        assert hit.location == NAIROBI
        assert hit.total_donations == 5
        assert hit.is_verified is True


class TestMatchAlertDonors:
    def test_keeps_only_requested_groups(self, donors):
        alert = BloodAlert(blood_groups=[BloodGroup.O_NEG, BloodGroup.B_POS])
        result = match_alert_donors(alert, NAIROBI, 50, donors)
        assert [d.id for d in result] == [2]

    def test_far_donor_with_matching_group_excluded(self, donors):
        alert = BloodAlert(blood_groups=[BloodGroup.B_POS])
        assert match_alert_donors(alert, NAIROBI, 50, donors) == []

    def test_no_compatibility_substitution(self):
        """An O- donor does not satisfy an A+ request."""
        alert = BloodAlert(blood_groups=[BloodGroup.A_POS])
        candidates = [_donor(1, BloodGroup.O_NEG, NAIROBI)]
        assert match_alert_donors(alert, NAIROBI, 5, candidates) == []
