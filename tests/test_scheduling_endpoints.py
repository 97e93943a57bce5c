"""Tests for scheduling endpoints."""

import pytest
from httpx import AsyncClient


@pytest.mark.asyncio
async def test_health_check(client: AsyncClient) -> None:
    """Test health check endpoint."""
    response = await client.get("/api/v1/health")
    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "healthy"
    assert "version" in data


@pytest.mark.asyncio
async def test_list_slots(client: AsyncClient) -> None:
    """Test slot grid generation."""
    response = await client.get(
        "/api/v1/scheduling/slots",
        params={"start_hour": 8, "end_hour": 12, "step_minutes": 15},
    )
    assert response.status_code == 200
    slots = response.json()["slots"]
    assert len(slots) == 16
    assert slots[0] == "08:00"
    assert slots[-1] == "11:45"


@pytest.mark.asyncio
async def test_list_slots_empty_range(client: AsyncClient) -> None:
    """Test an inverted range returns no slots."""
    response = await client.get(
        "/api/v1/scheduling/slots",
        params={"start_hour": 10, "end_hour": 8},
    )
    assert response.status_code == 200
    assert response.json()["slots"] == []


@pytest.mark.asyncio
async def test_list_slots_rejects_bad_step(client: AsyncClient) -> None:
    """Test a non-positive step is a bad request."""
    response = await client.get("/api/v1/scheduling/slots", params={"step_minutes": 0})
    assert response.status_code == 400
    assert response.json()["error"] == "BadRequestException"


@pytest.mark.asyncio
async def test_list_slots_rejects_non_integer(client: AsyncClient) -> None:
    """Test request validation on query parameters."""
    response = await client.get("/api/v1/scheduling/slots", params={"start_hour": "eight"})
    assert response.status_code == 422
    assert response.json()["error"] == "ValidationError"


@pytest.mark.asyncio
async def test_validate_ok(client: AsyncClient, sample_appointment_data: dict) -> None:
    """Test a free adjacent slot validates."""
    response = await client.post(
        "/api/v1/scheduling/validate",
        json={
            "draft": {
                "patient_name": "Juan Carlos Pérez",
                "doctor_ref": "doc-1",
                "date": sample_appointment_data["date"],
                "start_time": "09:30",
                "duration_minutes": 30,
            },
            "existing": [sample_appointment_data],
        },
    )
    assert response.status_code == 200
    data = response.json()
    assert data["ok"] is True
    assert data["errors"] == []


@pytest.mark.asyncio
async def test_validate_conflict(client: AsyncClient, sample_appointment_data: dict) -> None:
    """Test an overlapping draft is rejected with SLOT_CONFLICT."""
    response = await client.post(
        "/api/v1/scheduling/validate",
        json={
            "draft": {
                "patient_name": "Juan Carlos Pérez",
                "doctor_ref": "doc-1",
                "date": sample_appointment_data["date"],
                "start_time": "09:15",
                "duration_minutes": 30,
            },
            "existing": [sample_appointment_data],
        },
    )
    assert response.status_code == 200
    data = response.json()
    assert data["ok"] is False
    assert data["errors"] == [{"field": "start_time", "code": "SLOT_CONFLICT"}]
    assert data["conflicts"] == ["apt-1"]


@pytest.mark.asyncio
async def test_validate_blank_form(client: AsyncClient) -> None:
    """Test an empty form reports every required field."""
    response = await client.post(
        "/api/v1/scheduling/validate",
        json={"draft": {"patient_name": "", "date": "", "start_time": "", "doctor_ref": ""}},
    )
    assert response.status_code == 200
    errors = {error["field"]: error["code"] for error in response.json()["errors"]}
    assert errors == {
        "patient_name": "REQUIRED",
        "date": "REQUIRED",
        "start_time": "REQUIRED",
        "doctor_ref": "REQUIRED",
    }


@pytest.mark.asyncio
async def test_validate_uses_request_now(
    client: AsyncClient,
    sample_appointment_data: dict,
) -> None:
    """Test a caller supplied now overrides the server clock."""
    response = await client.post(
        "/api/v1/scheduling/validate",
        json={
            "draft": {
                "patient_name": "Juan Carlos Pérez",
                "doctor_ref": "doc-1",
                "date": sample_appointment_data["date"],
                "start_time": "09:30",
            },
            "now": f"{sample_appointment_data['date']}T12:00:00",
        },
    )
    errors = {error["field"]: error["code"] for error in response.json()["errors"]}
    assert errors == {"date": "PAST_DATETIME"}


@pytest.mark.asyncio
async def test_agenda(client: AsyncClient, sample_appointment_data: dict) -> None:
    """Test the daily agenda grid and statistics."""
    response = await client.post(
        "/api/v1/scheduling/agenda",
        json={
            "date": sample_appointment_data["date"],
            "appointments": [sample_appointment_data],
        },
    )
    assert response.status_code == 200
    data = response.json()
    rows = {row["time"]: row for row in data["slots"]}
    assert rows["09:00"]["appointment"]["id"] == "apt-1"
    assert rows["09:15"]["occupied"] is True
    assert rows["09:15"]["bookable"] is False
    assert rows["09:30"]["bookable"] is True
    assert data["summary"]["total"] == 1
    assert data["summary"]["booked_minutes"] == 30


@pytest.mark.asyncio
async def test_project_status_missed(client: AsyncClient, sample_appointment_data: dict) -> None:
    """Test an elapsed scheduled appointment is displayed as missed."""
    appointment = {**sample_appointment_data, "date": "2025-10-12"}

    response = await client.post("/api/v1/scheduling/status", json={"appointment": appointment})
    assert response.status_code == 200
    assert response.json()["status"] == "missed"

    confirmed = {**appointment, "status": "confirmed"}
    response = await client.post("/api/v1/scheduling/status", json={"appointment": confirmed})
    assert response.json()["status"] == "confirmed"


@pytest.mark.asyncio
async def test_transition_confirm(client: AsyncClient, sample_appointment_data: dict) -> None:
    """Test confirming a scheduled appointment."""
    response = await client.post(
        "/api/v1/scheduling/transition",
        json={"appointment": sample_appointment_data, "action": "confirm"},
    )
    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "confirmed"
    assert data["start_time"] == "09:00"


@pytest.mark.asyncio
async def test_transition_invalid(client: AsyncClient, sample_appointment_data: dict) -> None:
    """Test completing a scheduled appointment is refused."""
    response = await client.post(
        "/api/v1/scheduling/transition",
        json={"appointment": sample_appointment_data, "action": "complete"},
    )
    assert response.status_code == 409
    data = response.json()
    assert data["error"] == "ConflictException"
    assert data["details"] == {"code": "INVALID_TRANSITION"}


@pytest.mark.asyncio
async def test_reschedule_eligibility(client: AsyncClient, sample_appointment_data: dict) -> None:
    """Test tomorrow 09:00 is inside the 24 hour window from today 10:00."""
    response = await client.post(
        "/api/v1/scheduling/reschedule-eligibility",
        json={"appointment": sample_appointment_data},
    )
    assert response.status_code == 200
    assert response.json() == {"eligible": False, "reason": "INSIDE_LEAD_TIME"}


@pytest.mark.asyncio
async def test_reschedule(client: AsyncClient, sample_appointment_data: dict) -> None:
    """Test moving an eligible appointment."""
    response = await client.post(
        "/api/v1/scheduling/reschedule",
        json={
            "appointment": {**sample_appointment_data, "date": "2025-10-16"},
            "date": "2025-10-17",
            "start_time": "10:30",
        },
    )
    assert response.status_code == 200
    data = response.json()
    assert data["ok"] is True
    assert data["appointment"]["date"] == "2025-10-17"
    assert data["appointment"]["start_time"] == "10:30"


@pytest.mark.asyncio
async def test_request_id_header(client: AsyncClient) -> None:
    """Test the logging middleware echoes the request id."""
    response = await client.get("/api/v1/ping", headers={"X-Request-ID": "abc123"})
    assert response.status_code == 200
    assert response.headers["X-Request-ID"] == "abc123"
    assert "X-Process-Time" in response.headers
