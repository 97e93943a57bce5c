"""FastAPI application entry point."""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from prometheus_fastapi_instrumentator import Instrumentator
from starlette.exceptions import HTTPException as StarletteHTTPException

from clinic_agenda.api.v1.router import api_router
from clinic_agenda.config import Settings, settings
from clinic_agenda.core.exceptions import AppException
from clinic_agenda.middleware.error_handler import (
    app_exception_handler,
    general_exception_handler,
    http_exception_handler,
    validation_exception_handler,
)
from clinic_agenda.middleware.logging import LoggingMiddleware, configure_logging

logger = structlog.get_logger()


def create_app(app_settings: Settings = settings) -> FastAPI:
    """
    Build the scheduling API.

    Args:
        app_settings: Settings for logging, CORS and the agenda defaults

    Returns:
        Configured application
    """
    configure_logging(app_settings.log_level, app_settings.log_format)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
        logger.info(
            "application_startup",
            environment=app_settings.environment,
            agenda_hours=f"{app_settings.agenda_start_hour}-{app_settings.agenda_end_hour}",
            slot_step_minutes=app_settings.slot_step_minutes,
            durations=f"{app_settings.min_duration_minutes}-{app_settings.max_duration_minutes}",
            reschedule_lead_minutes=app_settings.reschedule_lead_minutes,
        )
        yield
        logger.info("application_shutdown")

    app = FastAPI(
        title=app_settings.app_name,
        version=app_settings.app_version,
        description="Appointment slot, conflict and reschedule rules for clinic agendas",
        debug=app_settings.debug,
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=app_settings.cors_origins,
        allow_credentials=app_settings.cors_allow_credentials,
        allow_methods=["GET", "POST"],
        allow_headers=["*"],
    )
    app.add_middleware(LoggingMiddleware)

    app.add_exception_handler(AppException, app_exception_handler)  # type: ignore[arg-type]
    app.add_exception_handler(
        StarletteHTTPException, http_exception_handler  # type: ignore[arg-type]
    )
    app.add_exception_handler(
        RequestValidationError, validation_exception_handler  # type: ignore[arg-type]
    )
    app.add_exception_handler(Exception, general_exception_handler)  # type: ignore[arg-type]

    app.include_router(api_router, prefix=app_settings.api_v1_prefix)

    # Health probes stay out of the request metrics
    Instrumentator(
        should_group_status_codes=True,
        excluded_handlers=["/metrics", ".*/health", ".*/ping"],
    ).instrument(app).expose(app, endpoint="/metrics", include_in_schema=False)

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "clinic_agenda.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.reload,
        log_level=settings.log_level.lower(),
    )
