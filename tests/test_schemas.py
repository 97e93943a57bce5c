"""Tests for appointment schemas."""

from datetime import date, time

import pytest

from clinic_agenda.schemas.appointments import (
    AppointmentDraft,
    AppointmentKind,
    AppointmentStatus,
)


@pytest.mark.parametrize(
    "kind,minutes",
    [
        (AppointmentKind.CONSULTATION, 30),
        (AppointmentKind.FOLLOW_UP, 15),
        (AppointmentKind.PROCEDURE, 60),
        (AppointmentKind.EMERGENCY, 30),
    ],
)
def test_draft_duration_defaults_from_kind(kind, minutes):
    """Test the suggested duration follows the appointment kind."""
    assert AppointmentDraft(kind=kind).duration_minutes == minutes


def test_draft_keeps_explicit_duration():
    """Test an explicit duration is not replaced by the suggestion."""
    draft = AppointmentDraft(kind=AppointmentKind.PROCEDURE, duration_minutes=90)

    assert draft.duration_minutes == 90


def test_draft_blank_values_are_missing():
    """Test blank form values are normalized to missing."""
    draft = AppointmentDraft.model_validate(
        {"patient_name": None, "doctor_ref": "  ", "date": "", "start_time": ""}
    )

    assert draft.patient_name == ""
    assert draft.doctor_ref is None
    assert draft.date is None
    assert draft.start_time is None


def test_draft_to_appointment():
    """Test accepted drafts become scheduled or pre-confirmed appointments."""
    draft = AppointmentDraft(
        patient_name=" Ana María López ",
        doctor_ref="doc-1",
        date=date(2025, 10, 14),
        start_time=time(9, 0),
    )

    scheduled = draft.to_appointment("apt-9")
    confirmed = draft.model_copy(update={"pre_confirmed": True}).to_appointment("apt-10")

    assert scheduled.status == AppointmentStatus.SCHEDULED
    assert scheduled.patient_name == "Ana María López"
    assert confirmed.status == AppointmentStatus.CONFIRMED


def test_appointment_serialization(make_appointment):
    """Test times are serialized as HH:MM with a derived end time."""
    appointment = make_appointment(start="11:30", duration=45)

    data = appointment.model_dump(mode="json")

    assert data["start_time"] == "11:30"
    assert data["end_time"] == "12:15"
    assert data["date"] == "2025-10-14"
    assert data["status"] == "scheduled"


def test_draft_from_appointment_round_trip(make_appointment):
    """Test a draft built from an appointment keeps its slot and identity."""
    appointment = make_appointment(status=AppointmentStatus.CONFIRMED)

    draft = AppointmentDraft.from_appointment(appointment)

    assert draft.appointment_id == appointment.id
    assert draft.pre_confirmed is True
    assert draft.to_appointment(appointment.id) == appointment
