"""FastAPI dependencies."""

from datetime import datetime
from typing import Annotated

from fastapi import Depends

from clinic_agenda.config import Settings, get_settings
from clinic_agenda.services.scheduling_service import SchedulingService


def get_current_time() -> datetime:
    """
    Server wall clock, used when a request does not supply ``now``.

    Returns:
        Naive local datetime
    """
    return datetime.now()


def get_scheduling_service(
    settings: Annotated[Settings, Depends(get_settings)],
) -> SchedulingService:
    """
    Build the scheduling service from application settings.

    Args:
        settings: Application settings

    Returns:
        Scheduling service instance
    """
    return SchedulingService(settings)


# Type aliases for dependency injection
CurrentTime = Annotated[datetime, Depends(get_current_time)]
Scheduler = Annotated[SchedulingService, Depends(get_scheduling_service)]
