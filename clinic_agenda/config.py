"""Application configuration."""

from functools import lru_cache

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        env_parse_none_str="null",
    )

    # Application
    app_name: str = Field(default="Clinic Agenda API", alias="APP_NAME")
    app_version: str = Field(default="0.1.0", alias="APP_VERSION")
    environment: str = Field(default="development", alias="ENVIRONMENT")
    debug: bool = Field(default=False, alias="DEBUG")
    api_v1_prefix: str = Field(default="/api/v1", alias="API_V1_PREFIX")

    # Server
    host: str = Field(default="0.0.0.0", alias="HOST")
    port: int = Field(default=8000, alias="PORT")
    reload: bool = Field(default=False, alias="RELOAD")

    # Agenda grid
    agenda_start_hour: int = Field(default=7, ge=0, le=24, alias="AGENDA_START_HOUR")
    agenda_end_hour: int = Field(default=18, ge=0, le=24, alias="AGENDA_END_HOUR")
    slot_step_minutes: int = Field(default=15, gt=0, le=60, alias="SLOT_STEP_MINUTES")

    # Booking rules
    min_duration_minutes: int = Field(default=15, gt=0, alias="MIN_DURATION_MINUTES")
    max_duration_minutes: int = Field(default=120, gt=0, alias="MAX_DURATION_MINUTES")
    max_patient_age: int = Field(default=150, ge=0, alias="MAX_PATIENT_AGE")
    # 24 hours of notice before an appointment may be moved
    reschedule_lead_minutes: int = Field(default=1440, ge=0, alias="RESCHEDULE_LEAD_MINUTES")

    # CORS
    cors_origins_str: str = Field(
        default="http://localhost:3000",
        alias="CORS_ORIGINS",
    )
    cors_allow_credentials: bool = Field(default=True, alias="CORS_ALLOW_CREDENTIALS")

    @property
    def cors_origins(self) -> list[str]:
        """Comma-separated CORS origins as a list."""
        return [origin.strip() for origin in self.cors_origins_str.split(",") if origin.strip()]

    # Logging
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")
    log_format: str = Field(default="json", alias="LOG_FORMAT")

    @model_validator(mode="after")
    def check_agenda_bounds(self) -> "Settings":
        """Reject an empty working day or an inverted duration range."""
        if self.agenda_start_hour >= self.agenda_end_hour:
            raise ValueError("AGENDA_START_HOUR must be before AGENDA_END_HOUR")
        if self.min_duration_minutes > self.max_duration_minutes:
            raise ValueError("MIN_DURATION_MINUTES must not exceed MAX_DURATION_MINUTES")
        return self


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()  # type: ignore[call-arg]


# Global settings instance
settings = get_settings()
