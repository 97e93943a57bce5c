"""Conflict and structural validation for appointment drafts."""

import re
from collections.abc import Iterable
from datetime import datetime

from pydantic import BaseModel

from clinic_agenda.core.occupancy import SlotOccupancyIndex
from clinic_agenda.core.slots import is_on_grid
from clinic_agenda.schemas.appointments import ACTIVE_STATUSES, Appointment, AppointmentDraft
from clinic_agenda.schemas.scheduling import FieldError, ReasonCode, ValidationResult

PHONE_PATTERN = re.compile(r"^[0-9]{10}$")


class BookingRules(BaseModel):
    """Numeric limits applied by :func:`validate`."""

    model_config = {"frozen": True}

    min_duration_minutes: int = 15
    max_duration_minutes: int = 120
    step_minutes: int = 15
    max_patient_age: int = 150


DEFAULT_RULES = BookingRules()


def normalize_phone(phone: str) -> str:
    """Strip all whitespace from a phone number."""
    return re.sub(r"\s+", "", phone)


def find_conflicts(
    draft: AppointmentDraft,
    existing: Iterable[Appointment],
) -> list[Appointment]:
    """
    Appointments that would be double-booked by the draft.

    Only appointments of the same doctor and date whose stored status
    holds the slot are considered; the appointment being edited is
    skipped. A ``scheduled`` appointment keeps its slot after its start
    has passed, since the missed projection is for display only.
    """
    if draft.date is None or draft.start_time is None or draft.doctor_ref is None:
        return []
    if draft.duration_minutes <= 0:
        return []

    blocking = [
        appointment
        for appointment in existing
        if appointment.doctor_ref == draft.doctor_ref
        and appointment.date == draft.date
        and appointment.id != draft.appointment_id
        and appointment.status in ACTIVE_STATUSES
    ]
    index = SlotOccupancyIndex(blocking)
    return index.overlapping(draft.start_time, draft.duration_minutes)


def validate(
    draft: AppointmentDraft,
    existing: Iterable[Appointment],
    now: datetime,
    rules: BookingRules = DEFAULT_RULES,
    require_patient_name: bool = True,
) -> ValidationResult:
    """
    Validate a proposed appointment against booking rules and the agenda.

    Every rule is checked and every failure reported; at most one reason
    code is kept per field.

    Args:
        draft: Proposed appointment
        existing: Known appointments (other doctors and dates are ignored)
        now: Current instant
        rules: Numeric limits
        require_patient_name: Whether a blank patient name is an error;
            disabled when moving a stored appointment

    Returns:
        Validation result with all field errors
    """
    errors: dict[str, ReasonCode] = {}

    if require_patient_name and not draft.patient_name.strip():
        errors["patient_name"] = ReasonCode.REQUIRED

    if draft.date is None:
        errors["date"] = ReasonCode.REQUIRED
    elif draft.start_time is not None:
        proposed = datetime.combine(draft.date, draft.start_time, tzinfo=now.tzinfo)
        if proposed <= now:
            errors["date"] = ReasonCode.PAST_DATETIME
    elif draft.date < now.date():
        errors["date"] = ReasonCode.PAST_DATETIME

    if draft.start_time is None:
        errors["start_time"] = ReasonCode.REQUIRED
    elif not is_on_grid(draft.start_time, rules.step_minutes):
        errors["start_time"] = ReasonCode.OFF_GRID

    if draft.doctor_ref is None:
        errors["doctor_ref"] = ReasonCode.REQUIRED

    if not rules.min_duration_minutes <= draft.duration_minutes <= rules.max_duration_minutes:
        errors["duration_minutes"] = ReasonCode.DURATION_OUT_OF_RANGE
    elif draft.duration_minutes % rules.step_minutes:
        errors["duration_minutes"] = ReasonCode.OFF_GRID

    if draft.is_new_patient:
        if draft.patient_phone is None:
            errors["patient_phone"] = ReasonCode.REQUIRED
        elif not PHONE_PATTERN.match(normalize_phone(draft.patient_phone)):
            errors["patient_phone"] = ReasonCode.PHONE_INVALID

        if draft.patient_age is None:
            errors["patient_age"] = ReasonCode.REQUIRED
        elif not 0 <= draft.patient_age <= rules.max_patient_age:
            errors["patient_age"] = ReasonCode.AGE_OUT_OF_RANGE

    conflicts = find_conflicts(draft, existing)
    if conflicts:
        errors["start_time"] = ReasonCode.SLOT_CONFLICT

    return ValidationResult(
        ok=not errors,
        errors=[FieldError(field=field, code=code) for field, code in errors.items()],
        conflicts=sorted(appointment.id for appointment in conflicts),
    )
