from collections.abc import AsyncGenerator, Callable
from datetime import date, datetime, time

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from clinic_agenda.dependencies import get_current_time
from clinic_agenda.main import app
from clinic_agenda.schemas.appointments import (
    Appointment,
    AppointmentDraft,
    AppointmentKind,
    AppointmentStatus,
)

# Fixed clock for deterministic tests: Monday 2025-10-13 10:00 local time
NOW = datetime(2025, 10, 13, 10, 0)
TOMORROW = date(2025, 10, 14)


@pytest.fixture
def now() -> datetime:
    """Fixed current instant."""
    return NOW


@pytest.fixture
def make_appointment() -> Callable[..., Appointment]:
    """Factory for appointments on the doctor's agenda."""

    def _make(
        id: str = "apt-1",
        start: str = "09:00",
        duration: int = 30,
        status: AppointmentStatus = AppointmentStatus.SCHEDULED,
        on: date = TOMORROW,
        doctor_ref: str = "doc-1",
        **extra,
    ) -> Appointment:
        hour, minute = (int(part) for part in start.split(":"))
        return Appointment(
            id=id,
            patient_ref=extra.pop("patient_ref", "pat-1"),
            patient_name=extra.pop("patient_name", "María Elena González"),
            doctor_ref=doctor_ref,
            date=on,
            start_time=time(hour, minute),
            duration_minutes=duration,
            kind=extra.pop("kind", AppointmentKind.CONSULTATION),
            status=status,
            **extra,
        )

    return _make


@pytest.fixture
def make_draft() -> Callable[..., AppointmentDraft]:
    """Factory for valid drafts; override any field by keyword."""

    def _make(**overrides) -> AppointmentDraft:
        data = {
            "patient_ref": "pat-2",
            "patient_name": "Juan Carlos Pérez",
            "doctor_ref": "doc-1",
            "date": TOMORROW,
            "start_time": time(9, 30),
            "duration_minutes": 30,
        }
        data.update(overrides)
        return AppointmentDraft(**data)

    return _make


@pytest_asyncio.fixture
async def client() -> AsyncGenerator[AsyncClient, None]:
    """Create a test HTTP client with the clock pinned to NOW."""
    app.dependency_overrides[get_current_time] = lambda: NOW

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        yield client

    app.dependency_overrides.clear()


@pytest.fixture
def sample_appointment_data() -> dict:
    """Sample appointment payload for API tests."""
    return {
        "id": "apt-1",
        "patient_ref": "pat-1",
        "patient_name": "María Elena González",
        "patient_phone": "3001234567",
        "patient_age": 55,
        "doctor_ref": "doc-1",
        "date": TOMORROW.isoformat(),
        "start_time": "09:00",
        "duration_minutes": 30,
        "kind": "consultation",
        "status": "scheduled",
    }
