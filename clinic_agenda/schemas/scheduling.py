"""Scheduling engine results and API request/response schemas."""

import datetime as dt
from enum import Enum

from pydantic import BaseModel, Field, field_serializer

from clinic_agenda.schemas.appointments import (
    Appointment,
    AppointmentDraft,
    AppointmentStatus,
    format_time,
)


class ReasonCode(str, Enum):
    """Validation outcome codes."""

    REQUIRED = "REQUIRED"
    PAST_DATETIME = "PAST_DATETIME"
    DURATION_OUT_OF_RANGE = "DURATION_OUT_OF_RANGE"
    OFF_GRID = "OFF_GRID"
    PHONE_INVALID = "PHONE_INVALID"
    AGE_OUT_OF_RANGE = "AGE_OUT_OF_RANGE"
    SLOT_CONFLICT = "SLOT_CONFLICT"
    INVALID_TRANSITION = "INVALID_TRANSITION"


class StatusAction(str, Enum):
    """Explicit status change requested by a caller."""

    CONFIRM = "confirm"
    START = "start"
    COMPLETE = "complete"
    CANCEL = "cancel"
    MARK_MISSED = "mark_missed"


class RescheduleBlock(str, Enum):
    """Reason an appointment may not be moved."""

    WRONG_STATUS = "WRONG_STATUS"
    ALREADY_PAST = "ALREADY_PAST"
    INSIDE_LEAD_TIME = "INSIDE_LEAD_TIME"


class FieldError(BaseModel):
    """A single rule violation attached to a draft field."""

    field: str
    code: ReasonCode


class ValidationResult(BaseModel):
    """Outcome of validating an appointment draft."""

    ok: bool
    errors: list[FieldError] = Field(default_factory=list)
    conflicts: list[str] = Field(default_factory=list)

    @property
    def reason_codes(self) -> set[ReasonCode]:
        """Distinct reason codes reported."""
        return {error.code for error in self.errors}

    def as_dict(self) -> dict[str, ReasonCode]:
        """Field to reason code mapping."""
        return {error.field: error.code for error in self.errors}


class TransitionResult(BaseModel):
    """Outcome of an explicit status change."""

    ok: bool
    appointment: Appointment
    error: ReasonCode | None = None


class RescheduleDecision(BaseModel):
    """Whether an appointment may be moved, and if not, why."""

    eligible: bool
    reason: RescheduleBlock | None = None


class RescheduleResult(BaseModel):
    """Outcome of moving an appointment to a new slot."""

    ok: bool
    appointment: Appointment
    blocked_by: RescheduleBlock | None = None
    validation: ValidationResult | None = None


class SlotView(BaseModel):
    """One row of the daily agenda grid."""

    time: dt.time
    appointment: Appointment | None = None
    occupied: bool = False
    bookable: bool = True

    @field_serializer("time")
    def serialize_time(self, value: dt.time) -> str:
        """Serialize slot time as HH:MM."""
        return format_time(value)  # type: ignore[return-value]


class DaySummary(BaseModel):
    """Agenda statistics for one day."""

    total: int = 0
    by_status: dict[AppointmentStatus, int] = Field(default_factory=dict)
    booked_minutes: int = 0


class SlotsResponse(BaseModel):
    """Slot grid response."""

    slots: list[str]


class AgendaRequest(BaseModel):
    """Request body for a daily agenda view."""

    date: dt.date
    doctor_ref: str | None = None
    appointments: list[Appointment] = Field(default_factory=list)
    now: dt.datetime | None = None


class AgendaResponse(BaseModel):
    """Annotated slot grid plus day statistics."""

    date: dt.date
    slots: list[SlotView]
    summary: DaySummary


class ValidateRequest(BaseModel):
    """Request body for draft validation."""

    draft: AppointmentDraft
    existing: list[Appointment] = Field(default_factory=list)
    now: dt.datetime | None = None


class AppointmentRequest(BaseModel):
    """Request body carrying a single appointment."""

    appointment: Appointment
    now: dt.datetime | None = None


class TransitionRequest(AppointmentRequest):
    """Request body for an explicit status change."""

    action: StatusAction


class RescheduleRequest(AppointmentRequest):
    """Request body for moving an appointment."""

    date: dt.date
    start_time: dt.time
    existing: list[Appointment] = Field(default_factory=list)
