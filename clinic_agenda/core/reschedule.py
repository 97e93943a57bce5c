"""Eligibility of an existing appointment to be moved to another slot."""

from datetime import date, datetime, time, timedelta

from clinic_agenda.core.lifecycle import starts_at
from clinic_agenda.schemas.appointments import Appointment, AppointmentDraft, AppointmentStatus
from clinic_agenda.schemas.scheduling import RescheduleBlock, RescheduleDecision

DEFAULT_LEAD_MINUTES = 24 * 60


def check_reschedule(
    appointment: Appointment,
    now: datetime,
    lead_minutes: int = DEFAULT_LEAD_MINUTES,
) -> RescheduleDecision:
    """
    Decide whether an appointment may be moved, reporting the first blocker.

    Conditions are checked in order: the stored status must be
    ``scheduled``, the start must be strictly after ``now``, and at least
    ``lead_minutes`` must remain before it.

    Args:
        appointment: Appointment in its stored status
        now: Current instant
        lead_minutes: Minimum notice required

    Returns:
        Eligibility decision
    """
    if appointment.status != AppointmentStatus.SCHEDULED:
        return RescheduleDecision(eligible=False, reason=RescheduleBlock.WRONG_STATUS)

    start = starts_at(appointment, now)
    if start <= now:
        return RescheduleDecision(eligible=False, reason=RescheduleBlock.ALREADY_PAST)

    if start - now < timedelta(minutes=lead_minutes):
        return RescheduleDecision(eligible=False, reason=RescheduleBlock.INSIDE_LEAD_TIME)

    return RescheduleDecision(eligible=True)


def can_reschedule(
    appointment: Appointment,
    now: datetime,
    lead_minutes: int = DEFAULT_LEAD_MINUTES,
) -> bool:
    """Check whether an appointment may be moved to a new slot."""
    return check_reschedule(appointment, now, lead_minutes).eligible


def build_reschedule_draft(
    appointment: Appointment,
    new_date: date,
    new_start: time,
) -> AppointmentDraft:
    """Draft of the appointment moved to a new date and time."""
    draft = AppointmentDraft.from_appointment(appointment)
    return draft.model_copy(update={"date": new_date, "start_time": new_start})
