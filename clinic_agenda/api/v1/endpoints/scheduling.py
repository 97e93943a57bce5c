"""Scheduling endpoints."""

from fastapi import APIRouter, Query, status

from clinic_agenda.core.exceptions import BadRequestException, ConflictException
from clinic_agenda.dependencies import CurrentTime, Scheduler
from clinic_agenda.schemas.appointments import Appointment, format_time
from clinic_agenda.schemas.scheduling import (
    AgendaRequest,
    AgendaResponse,
    AppointmentRequest,
    RescheduleDecision,
    RescheduleRequest,
    RescheduleResult,
    SlotsResponse,
    TransitionRequest,
    ValidateRequest,
    ValidationResult,
)

router = APIRouter()


@router.get(
    "/slots",
    response_model=SlotsResponse,
    status_code=status.HTTP_200_OK,
    summary="Generate slot grid",
)
async def list_slots(
    scheduler: Scheduler,
    start_hour: int | None = Query(None),
    end_hour: int | None = Query(None),
    step_minutes: int | None = Query(None),
) -> SlotsResponse:
    """
    Generate the bookable time points of a day.

    Args:
        scheduler: Scheduling service
        start_hour: First hour (defaults to the configured agenda start)
        end_hour: Hour the grid stops before (defaults to the agenda end)
        step_minutes: Grid step (defaults to the configured step)

    Returns:
        Slot times as HH:MM

    Raises:
        BadRequestException: If the grid arguments are out of range
    """
    try:
        slots = scheduler.slots(start_hour, end_hour, step_minutes)
    except ValueError as e:
        raise BadRequestException(str(e))
    return SlotsResponse(slots=[format_time(slot) for slot in slots])  # type: ignore[misc]


@router.post(
    "/agenda",
    response_model=AgendaResponse,
    status_code=status.HTTP_200_OK,
    summary="Daily agenda grid",
)
async def daily_agenda(
    data: AgendaRequest,
    scheduler: Scheduler,
    current_time: CurrentTime,
) -> AgendaResponse:
    """
    Annotate the day's slot grid with the appointments occupying it.

    Args:
        data: Date, optional doctor and the appointments to lay out
        scheduler: Scheduling service
        current_time: Server clock, used when ``now`` is not given

    Returns:
        Agenda rows and day statistics
    """
    return scheduler.agenda(
        data.date,
        data.appointments,
        data.now or current_time,
        doctor_ref=data.doctor_ref,
    )


@router.post(
    "/validate",
    response_model=ValidationResult,
    status_code=status.HTTP_200_OK,
    summary="Validate appointment draft",
)
async def validate_draft(
    data: ValidateRequest,
    scheduler: Scheduler,
    current_time: CurrentTime,
) -> ValidationResult:
    """
    Validate a proposed appointment against the existing agenda.

    Both accepted and rejected drafts return 200; rejection details are in
    the body.
    """
    return scheduler.validate(data.draft, data.existing, data.now or current_time)


@router.post(
    "/status",
    response_model=Appointment,
    status_code=status.HTTP_200_OK,
    summary="Project appointment status",
)
async def project_status(
    data: AppointmentRequest,
    scheduler: Scheduler,
    current_time: CurrentTime,
) -> Appointment:
    """Return the appointment with the status it should be displayed with."""
    return scheduler.project(data.appointment, data.now or current_time)


@router.post(
    "/transition",
    response_model=Appointment,
    status_code=status.HTTP_200_OK,
    summary="Apply status action",
)
async def apply_transition(
    data: TransitionRequest,
    scheduler: Scheduler,
    current_time: CurrentTime,
) -> Appointment:
    """
    Apply an explicit status action (confirm, start, complete, cancel, mark_missed).

    Args:
        data: Appointment, action and optional ``now``
        scheduler: Scheduling service
        current_time: Server clock, used when ``now`` is not given

    Returns:
        Updated appointment

    Raises:
        ConflictException: If the action is not allowed from the current status
    """
    result = scheduler.transition(data.appointment, data.action, data.now or current_time)
    if not result.ok:
        raise ConflictException(
            f"Cannot {data.action.value} an appointment that is {data.appointment.status.value}",
            details={"code": result.error.value if result.error else None},
        )
    return result.appointment


@router.post(
    "/reschedule-eligibility",
    response_model=RescheduleDecision,
    status_code=status.HTTP_200_OK,
    summary="Check reschedule eligibility",
)
async def reschedule_eligibility(
    data: AppointmentRequest,
    scheduler: Scheduler,
    current_time: CurrentTime,
) -> RescheduleDecision:
    """Report whether the appointment may be moved, and if not, why."""
    return scheduler.check_reschedule(data.appointment, data.now or current_time)


@router.post(
    "/reschedule",
    response_model=RescheduleResult,
    status_code=status.HTTP_200_OK,
    summary="Reschedule appointment",
)
async def reschedule_appointment(
    data: RescheduleRequest,
    scheduler: Scheduler,
    current_time: CurrentTime,
) -> RescheduleResult:
    """
    Move an appointment to a new date and time.

    Args:
        data: Appointment, target slot and the doctor's agenda
        scheduler: Scheduling service
        current_time: Server clock, used when ``now`` is not given

    Returns:
        Moved appointment or the reason the move was refused
    """
    return scheduler.reschedule(
        data.appointment,
        data.date,
        data.start_time,
        data.existing,
        data.now or current_time,
    )
