"""Slot occupancy for a single day of appointments."""

from collections.abc import Iterable
from datetime import time

from clinic_agenda.schemas.appointments import Appointment, AppointmentStatus, minutes_of_day
from clinic_agenda.schemas.scheduling import SlotView


class SlotOccupancyIndex:
    """
    Precomputed view of which times a day's appointments cover.

    Build one index per render or validation cycle; queries are linear in
    the number of appointments of that day. Cancelled appointments free
    their slot and are left out.
    """

    def __init__(
        self,
        day_appointments: Iterable[Appointment],
        doctor_ref: str | None = None,
    ):
        """
        Initialize the index.

        Args:
            day_appointments: Appointments already filtered to one date
            doctor_ref: Optionally restrict the index to one doctor
        """
        self.appointments = sorted(
            (
                appointment
                for appointment in day_appointments
                if appointment.status != AppointmentStatus.CANCELLED
                and (doctor_ref is None or appointment.doctor_ref == doctor_ref)
            ),
            key=lambda appointment: (appointment.start_minute, appointment.id),
        )

        self._by_start: dict[int, Appointment] = {}
        for appointment in self.appointments:
            self._by_start.setdefault(appointment.start_minute, appointment)

    def appointment_starting_at(self, t: time) -> Appointment | None:
        """Return the appointment whose start time is exactly ``t``."""
        return self._by_start.get(minutes_of_day(t))

    def is_occupied(self, t: time) -> bool:
        """Check whether ``t`` falls inside any appointment's interval."""
        minute = minutes_of_day(t)
        return any(a.start_minute <= minute < a.end_minute for a in self.appointments)

    def overlapping(self, start: time, duration_minutes: int) -> list[Appointment]:
        """Return the appointments intersecting ``[start, start + duration)``."""
        begin = minutes_of_day(start)
        end = begin + duration_minutes
        return [a for a in self.appointments if a.start_minute < end and begin < a.end_minute]

    def annotate(self, slots: Iterable[time]) -> list[SlotView]:
        """Build the agenda rows for a slot grid."""
        rows = []
        for slot in slots:
            occupied = self.is_occupied(slot)
            rows.append(
                SlotView(
                    time=slot,
                    appointment=self.appointment_starting_at(slot),
                    occupied=occupied,
                    bookable=not occupied,
                )
            )
        return rows

    @property
    def booked_minutes(self) -> int:
        """Total minutes booked by the indexed appointments."""
        return sum(a.duration_minutes for a in self.appointments)
