"""Unit tests for appointment transitions, alert RSVP and stock clamping."""

import pytest

from donorlink.domain.entities import (
    Appointment,
    BloodAlert,
    DuplicateResponse,
    InvalidStateTransition,
    InventoryItem,
)
from donorlink.domain.enums import STOCKED_GROUPS, AppointmentStatus, BloodGroup


class TestAppointmentStateMachine:
    def test_initial_status_is_pending(self):
        assert Appointment().status == AppointmentStatus.PENDING

    # ── Valid transitions ─────────────────────────────────────────

    def test_pending_to_confirmed(self):
        appt = Appointment(status=AppointmentStatus.PENDING)
        appt.transition_to(AppointmentStatus.CONFIRMED)
        assert appt.status == AppointmentStatus.CONFIRMED

    def test_pending_to_cancelled(self):
        appt = Appointment(status=AppointmentStatus.PENDING)
        appt.transition_to(AppointmentStatus.CANCELLED)
        assert appt.status == AppointmentStatus.CANCELLED

    def test_confirmed_to_completed(self):
        appt = Appointment(status=AppointmentStatus.CONFIRMED)
        appt.transition_to(AppointmentStatus.COMPLETED)
        assert appt.status == AppointmentStatus.COMPLETED

    def test_confirmed_to_cancelled(self):
        appt = Appointment(status=AppointmentStatus.CONFIRMED)
        appt.transition_to(AppointmentStatus.CANCELLED)
        assert appt.status == AppointmentStatus.CANCELLED

    # ── Invalid transitions ───────────────────────────────────────

    def test_pending_to_completed_fails(self):
        appt = Appointment(status=AppointmentStatus.PENDING)
        with pytest.raises(InvalidStateTransition):
            appt.transition_to(AppointmentStatus.COMPLETED)

    @pytest.mark.parametrize(
        "final", [AppointmentStatus.COMPLETED, AppointmentStatus.CANCELLED]
    )
    def test_final_states_are_terminal(self, final):
        appt = Appointment(status=final)
        with pytest.raises(InvalidStateTransition):
            appt.transition_to(AppointmentStatus.PENDING)


class TestBloodAlertRsvp:
    def test_rsvp_counts_one_unit(self):
        alert = BloodAlert(id=7, blood_groups=[BloodGroup.O_POS], required_units=2)
        alert.rsvp(user_id=1)
        assert alert.collected_units == 1
        assert alert.is_rsvped is True
        assert alert.responders == [1]

    def test_same_donor_cannot_rsvp_twice(self):
        alert = BloodAlert(id=7, blood_groups=[BloodGroup.O_POS])
        alert.rsvp(user_id=1)
        with pytest.raises(DuplicateResponse):
            alert.rsvp(user_id=1)
        assert alert.collected_units == 1

    def test_collected_may_exceed_required(self):
        alert = BloodAlert(blood_groups=[BloodGroup.O_POS], required_units=1)
        alert.rsvp(user_id=1)
        alert.rsvp(user_id=2)
        assert alert.collected_units == 2

    def test_needs_is_exact_membership(self):
        alert = BloodAlert(blood_groups=[BloodGroup.AB_POS])
        assert alert.needs(BloodGroup.AB_POS)
        assert not alert.needs(BloodGroup.O_NEG)


class TestInventoryItem:
    def test_adjust_up_and_down(self):
        item = InventoryItem(blood_group=BloodGroup.B_NEG, units=3)
        item.adjust(4)
        item.adjust(-2)
        assert item.units == 5

    def test_adjust_clamps_at_zero(self):
        item = InventoryItem(blood_group=BloodGroup.B_NEG, units=2)
        item.adjust(-10)
        assert item.units == 0

    def test_eight_stocked_groups(self):
        assert len(STOCKED_GROUPS) == 8
        assert BloodGroup.UNKNOWN not in STOCKED_GROUPS
