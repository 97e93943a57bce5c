"""Scheduling service wiring the slot engine to application settings."""

from collections.abc import Iterable, Sequence
from datetime import date, datetime, time

import structlog

from clinic_agenda.config import Settings
from clinic_agenda.core import lifecycle, reschedule, validation
from clinic_agenda.core.occupancy import SlotOccupancyIndex
from clinic_agenda.core.slots import generate_slots
from clinic_agenda.schemas.appointments import Appointment, AppointmentDraft
from clinic_agenda.schemas.scheduling import (
    AgendaResponse,
    RescheduleDecision,
    RescheduleResult,
    StatusAction,
    TransitionResult,
    ValidationResult,
)

logger = structlog.get_logger()


class SchedulingService:
    """Service for slot, validation, status and reschedule decisions."""

    def __init__(self, settings: Settings):
        """Initialize service with application settings."""
        self.settings = settings
        self.rules = validation.BookingRules(
            min_duration_minutes=settings.min_duration_minutes,
            max_duration_minutes=settings.max_duration_minutes,
            step_minutes=settings.slot_step_minutes,
            max_patient_age=settings.max_patient_age,
        )

    def slots(
        self,
        start_hour: int | None = None,
        end_hour: int | None = None,
        step_minutes: int | None = None,
    ) -> list[time]:
        """Slot grid, defaulting to the configured agenda hours."""
        return generate_slots(
            self.settings.agenda_start_hour if start_hour is None else start_hour,
            self.settings.agenda_end_hour if end_hour is None else end_hour,
            self.settings.slot_step_minutes if step_minutes is None else step_minutes,
        )

    def agenda(
        self,
        day: date,
        appointments: Iterable[Appointment],
        now: datetime,
        doctor_ref: str | None = None,
    ) -> AgendaResponse:
        """
        Build the daily agenda for one date.

        Args:
            day: Date to render
            appointments: Known appointments; other dates are ignored
            now: Current instant, used for status projection
            doctor_ref: Optionally restrict the agenda to one doctor

        Returns:
            Annotated slot rows and day statistics
        """
        day_appointments = [
            lifecycle.project(appointment, now)
            for appointment in appointments
            if appointment.date == day
            and (doctor_ref is None or appointment.doctor_ref == doctor_ref)
        ]
        index = SlotOccupancyIndex(day_appointments)

        return AgendaResponse(
            date=day,
            slots=index.annotate(self.slots()),
            summary=lifecycle.summarize_day(day_appointments, now),
        )

    def validate(
        self,
        draft: AppointmentDraft,
        existing: Sequence[Appointment],
        now: datetime,
        require_patient_name: bool = True,
    ) -> ValidationResult:
        """Validate a draft with the configured booking rules."""
        result = validation.validate(
            draft,
            existing,
            now,
            self.rules,
            require_patient_name=require_patient_name,
        )

        if result.ok:
            logger.info(
                "appointment_validated",
                doctor_ref=draft.doctor_ref,
                date=str(draft.date),
                start_time=str(draft.start_time),
            )
        else:
            logger.info(
                "appointment_rejected",
                doctor_ref=draft.doctor_ref,
                errors=result.as_dict(),
                conflicts=result.conflicts,
            )

        return result

    def project(self, appointment: Appointment, now: datetime) -> Appointment:
        """Appointment as it should be displayed at ``now``."""
        return lifecycle.project(appointment, now)

    def transition(
        self,
        appointment: Appointment,
        action: StatusAction,
        now: datetime,
    ) -> TransitionResult:
        """Apply an explicit status action."""
        result = lifecycle.transition(appointment, action, now)

        if result.ok:
            logger.info(
                "status_transition_applied",
                appointment_id=appointment.id,
                action=action.value,
                old_status=appointment.status.value,
                new_status=result.appointment.status.value,
            )
        else:
            logger.warning(
                "status_transition_rejected",
                appointment_id=appointment.id,
                action=action.value,
                status=appointment.status.value,
            )

        return result

    def check_reschedule(self, appointment: Appointment, now: datetime) -> RescheduleDecision:
        """Reschedule eligibility with the configured lead time."""
        return reschedule.check_reschedule(
            appointment, now, self.settings.reschedule_lead_minutes
        )

    def reschedule(
        self,
        appointment: Appointment,
        new_date: date,
        new_start_time: time,
        existing: Sequence[Appointment],
        now: datetime,
    ) -> RescheduleResult:
        """
        Move an appointment to a new slot.

        The move is gated by reschedule eligibility and then validated like
        a new booking, ignoring the appointment's own current slot.

        Args:
            appointment: Appointment to move
            new_date: Target date
            new_start_time: Target start time
            existing: Known appointments of the doctor
            now: Current instant

        Returns:
            Moved appointment, or the reason the move was refused
        """
        decision = self.check_reschedule(appointment, now)
        if not decision.eligible:
            logger.info(
                "reschedule_blocked",
                appointment_id=appointment.id,
                reason=decision.reason.value if decision.reason else None,
            )
            return RescheduleResult(ok=False, appointment=appointment, blocked_by=decision.reason)

        draft = reschedule.build_reschedule_draft(appointment, new_date, new_start_time)
        # Name is a display snapshot on stored appointments
        result = self.validate(draft, existing, now, require_patient_name=False)
        if not result.ok:
            return RescheduleResult(ok=False, appointment=appointment, validation=result)

        moved = appointment.model_copy(update={"date": new_date, "start_time": new_start_time})
        logger.info(
            "appointment_rescheduled",
            appointment_id=appointment.id,
            date=str(new_date),
            start_time=str(new_start_time),
        )
        return RescheduleResult(ok=True, appointment=moved, validation=result)
