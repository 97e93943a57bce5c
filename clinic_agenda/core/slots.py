"""Bookable time grid for a working day."""

from datetime import time


def generate_slots(start_hour: int, end_hour: int, step_minutes: int = 15) -> list[time]:
    """
    Generate the bookable time points between two whole hours.

    Each hour restarts at ``:00``; when ``step_minutes`` does not divide 60
    the last slot of the hour is whatever falls before the boundary.

    Args:
        start_hour: First hour of the grid (inclusive)
        end_hour: Last hour of the grid (exclusive)
        step_minutes: Minutes between consecutive slots

    Returns:
        Ascending list of slot start times, empty when start_hour >= end_hour

    Raises:
        ValueError: If the step is not positive or an hour is outside 0..24
    """
    if step_minutes <= 0:
        raise ValueError("step_minutes must be positive")
    if not (0 <= start_hour <= 24 and 0 <= end_hour <= 24):
        raise ValueError("hours must be between 0 and 24")

    return [
        time(hour, minute)
        for hour in range(start_hour, end_hour)
        for minute in range(0, 60, step_minutes)
    ]


def generate_slots_between(start: time, end: time, step_minutes: int = 15) -> list[time]:
    """
    Generate slots stepping continuously from ``start`` up to ``end``.

    Used for doctor working hours that do not begin on the hour
    (e.g. ``08:30`` to ``12:00``).
    """
    if step_minutes <= 0:
        raise ValueError("step_minutes must be positive")

    current = start.hour * 60 + start.minute
    limit = end.hour * 60 + end.minute
    slots = []
    while current < limit:
        slots.append(time(current // 60, current % 60))
        current += step_minutes
    return slots


def is_on_grid(value: time, step_minutes: int = 15) -> bool:
    """Check that a time of day falls exactly on the slot grid."""
    if value.second or value.microsecond:
        return False
    return (value.hour * 60 + value.minute) % step_minutes == 0
