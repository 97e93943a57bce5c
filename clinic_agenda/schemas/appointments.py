"""Appointment schemas shared by the scheduling engine and the API."""

import datetime as dt
from enum import Enum

from pydantic import (
    BaseModel,
    Field,
    computed_field,
    field_serializer,
    field_validator,
    model_validator,
)


class AppointmentStatus(str, Enum):
    """Appointment status enumeration."""

    SCHEDULED = "scheduled"
    CONFIRMED = "confirmed"
    IN_PROGRESS = "inProgress"
    COMPLETED = "completed"
    CANCELLED = "cancelled"
    MISSED = "missed"


class AppointmentKind(str, Enum):
    """Appointment kind enumeration."""

    CONSULTATION = "consultation"
    FOLLOW_UP = "followUp"
    PROCEDURE = "procedure"
    EMERGENCY = "emergency"


# Statuses whose interval blocks the doctor's agenda
ACTIVE_STATUSES = frozenset(
    {
        AppointmentStatus.SCHEDULED,
        AppointmentStatus.CONFIRMED,
        AppointmentStatus.IN_PROGRESS,
    }
)

# Suggested duration per kind, in minutes
DEFAULT_DURATIONS: dict[AppointmentKind, int] = {
    AppointmentKind.CONSULTATION: 30,
    AppointmentKind.FOLLOW_UP: 15,
    AppointmentKind.PROCEDURE: 60,
    AppointmentKind.EMERGENCY: 30,
}


def default_duration(kind: AppointmentKind) -> int:
    """Return the suggested duration for an appointment kind."""
    return DEFAULT_DURATIONS[kind]


def format_time(value: dt.time | None) -> str | None:
    """Render a time of day as HH:MM."""
    if value is None:
        return None
    return value.strftime("%H:%M")


def minutes_of_day(value: dt.time) -> int:
    """Minutes elapsed since midnight."""
    return value.hour * 60 + value.minute


class Appointment(BaseModel):
    """A booked appointment as supplied by the calling layer."""

    id: str = Field(..., min_length=1)
    patient_ref: str | None = None
    doctor_ref: str = Field(..., min_length=1)
    date: dt.date
    start_time: dt.time
    duration_minutes: int = Field(..., gt=0)
    kind: AppointmentKind = AppointmentKind.CONSULTATION
    status: AppointmentStatus = AppointmentStatus.SCHEDULED
    notes: str | None = Field(None, max_length=1000)

    # Snapshot fields (denormalized for display)
    patient_name: str | None = None
    patient_phone: str | None = None
    patient_age: int | None = None

    model_config = {"frozen": True}

    @property
    def starts_at(self) -> dt.datetime:
        """Wall-clock start of the appointment."""
        return dt.datetime.combine(self.date, self.start_time)

    @property
    def start_minute(self) -> int:
        """Start offset from midnight, in minutes."""
        return minutes_of_day(self.start_time)

    @property
    def end_minute(self) -> int:
        """Exclusive end offset from midnight, in minutes."""
        return self.start_minute + self.duration_minutes

    @computed_field  # type: ignore[prop-decorator]
    @property
    def end_time(self) -> str:
        """Wall-clock end of the appointment as HH:MM."""
        end = self.starts_at + dt.timedelta(minutes=self.duration_minutes)
        return end.strftime("%H:%M")

    @field_serializer("start_time")
    def serialize_start_time(self, value: dt.time) -> str:
        """Serialize start time as HH:MM."""
        return format_time(value)  # type: ignore[return-value]


class AppointmentDraft(BaseModel):
    """A proposed appointment awaiting validation.

    Every field is optional so that missing data is reported by the
    validation engine as ``REQUIRED`` instead of failing request parsing.
    """

    appointment_id: str | None = None
    patient_ref: str | None = None
    patient_name: str = ""
    doctor_ref: str | None = None
    date: dt.date | None = None
    start_time: dt.time | None = None
    # Filled from the kind when omitted
    duration_minutes: int | None = None
    kind: AppointmentKind = AppointmentKind.CONSULTATION
    notes: str | None = Field(None, max_length=1000)
    pre_confirmed: bool = False

    # New patients must leave contact details
    is_new_patient: bool = False
    patient_phone: str | None = None
    patient_age: int | None = None

    @field_validator("doctor_ref", "patient_ref", "patient_phone", mode="before")
    @classmethod
    def blank_to_none(cls, v: object) -> object:
        """Treat blank strings as missing."""
        if isinstance(v, str) and not v.strip():
            return None
        return v

    @field_validator("date", "start_time", mode="before")
    @classmethod
    def empty_to_none(cls, v: object) -> object:
        """Treat empty form values as missing."""
        if v == "":
            return None
        return v

    @field_validator("patient_name", mode="before")
    @classmethod
    def none_to_empty(cls, v: object) -> object:
        """Treat a null name as blank."""
        if v is None:
            return ""
        return v

    @model_validator(mode="after")
    def fill_default_duration(self) -> "AppointmentDraft":
        """Suggest a duration from the appointment kind."""
        if self.duration_minutes is None:
            self.duration_minutes = default_duration(self.kind)
        return self

    @field_serializer("start_time")
    def serialize_start_time(self, value: dt.time | None) -> str | None:
        """Serialize start time as HH:MM."""
        return format_time(value)

    @classmethod
    def from_appointment(cls, appointment: Appointment) -> "AppointmentDraft":
        """Build a draft that re-validates an existing appointment in place."""
        return cls(
            appointment_id=appointment.id,
            patient_ref=appointment.patient_ref,
            patient_name=appointment.patient_name or "",
            doctor_ref=appointment.doctor_ref,
            date=appointment.date,
            start_time=appointment.start_time,
            duration_minutes=appointment.duration_minutes,
            kind=appointment.kind,
            notes=appointment.notes,
            pre_confirmed=appointment.status == AppointmentStatus.CONFIRMED,
            patient_phone=appointment.patient_phone,
            patient_age=appointment.patient_age,
        )

    def to_appointment(self, appointment_id: str) -> Appointment:
        """Materialize an accepted draft as a new appointment record."""
        return Appointment(
            id=appointment_id,
            patient_ref=self.patient_ref,
            doctor_ref=self.doctor_ref,  # type: ignore[arg-type]
            date=self.date,  # type: ignore[arg-type]
            start_time=self.start_time,  # type: ignore[arg-type]
            duration_minutes=self.duration_minutes,  # type: ignore[arg-type]
            kind=self.kind,
            status=(
                AppointmentStatus.CONFIRMED if self.pre_confirmed else AppointmentStatus.SCHEDULED
            ),
            notes=self.notes,
            patient_name=self.patient_name.strip(),
            patient_phone=self.patient_phone,
            patient_age=self.patient_age,
        )
