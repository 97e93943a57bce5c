"""Appointment status state machine and read-time projection."""

from collections.abc import Iterable
from datetime import datetime

from clinic_agenda.schemas.appointments import Appointment, AppointmentStatus
from clinic_agenda.schemas.scheduling import (
    DaySummary,
    ReasonCode,
    StatusAction,
    TransitionResult,
)

# (current status, action) -> next status
TRANSITIONS: dict[tuple[AppointmentStatus, StatusAction], AppointmentStatus] = {
    (AppointmentStatus.SCHEDULED, StatusAction.CONFIRM): AppointmentStatus.CONFIRMED,
    (AppointmentStatus.SCHEDULED, StatusAction.CANCEL): AppointmentStatus.CANCELLED,
    (AppointmentStatus.SCHEDULED, StatusAction.MARK_MISSED): AppointmentStatus.MISSED,
    (AppointmentStatus.CONFIRMED, StatusAction.START): AppointmentStatus.IN_PROGRESS,
    (AppointmentStatus.CONFIRMED, StatusAction.COMPLETE): AppointmentStatus.COMPLETED,
    (AppointmentStatus.CONFIRMED, StatusAction.CANCEL): AppointmentStatus.CANCELLED,
    (AppointmentStatus.IN_PROGRESS, StatusAction.COMPLETE): AppointmentStatus.COMPLETED,
}

TERMINAL_STATUSES = frozenset(
    {
        AppointmentStatus.COMPLETED,
        AppointmentStatus.CANCELLED,
        AppointmentStatus.MISSED,
    }
)


def starts_at(appointment: Appointment, now: datetime) -> datetime:
    """Appointment start as an instant comparable with ``now``.

    Wall-clock date and time are read in ``now``'s time zone, if any.
    """
    return appointment.starts_at.replace(tzinfo=now.tzinfo)


def has_started(appointment: Appointment, now: datetime) -> bool:
    """Check whether the appointment start is strictly before ``now``."""
    return starts_at(appointment, now) < now


def allowed_actions(status: AppointmentStatus) -> list[StatusAction]:
    """Actions accepted from a given status."""
    return [action for (current, action) in TRANSITIONS if current == status]


def project_status(appointment: Appointment, now: datetime) -> AppointmentStatus:
    """
    Status as it should be presented at ``now``.

    A still ``scheduled`` appointment whose start has passed reads as
    ``missed``. Confirmed appointments are left as they are.
    """
    if appointment.status == AppointmentStatus.SCHEDULED and has_started(appointment, now):
        return AppointmentStatus.MISSED
    return appointment.status


def project(appointment: Appointment, now: datetime) -> Appointment:
    """Return a copy of the appointment carrying its projected status."""
    status = project_status(appointment, now)
    if status == appointment.status:
        return appointment
    return appointment.model_copy(update={"status": status})


def transition(
    appointment: Appointment,
    action: StatusAction,
    now: datetime | None = None,
) -> TransitionResult:
    """
    Apply an explicit status action.

    ``mark_missed`` additionally requires ``now`` to be past the
    appointment start. The input appointment is never modified.

    Args:
        appointment: Appointment in its stored status
        action: Requested action
        now: Current instant, needed for ``mark_missed``

    Returns:
        Updated copy, or the unchanged appointment with INVALID_TRANSITION
    """
    target = TRANSITIONS.get((appointment.status, action))

    if target is AppointmentStatus.MISSED and (now is None or not has_started(appointment, now)):
        target = None

    if target is None:
        return TransitionResult(
            ok=False,
            appointment=appointment,
            error=ReasonCode.INVALID_TRANSITION,
        )

    return TransitionResult(ok=True, appointment=appointment.model_copy(update={"status": target}))


def summarize_day(day_appointments: Iterable[Appointment], now: datetime) -> DaySummary:
    """Count a day's appointments by projected status and sum booked time."""
    summary = DaySummary()
    for appointment in day_appointments:
        status = project_status(appointment, now)
        summary.total += 1
        summary.by_status[status] = summary.by_status.get(status, 0) + 1
        if status != AppointmentStatus.CANCELLED:
            summary.booked_minutes += appointment.duration_minutes
    return summary
