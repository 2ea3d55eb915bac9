"""
Configuration management using Pydantic Settings.
Loads environment variables from .env file.
"""
from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application
    app_name: str = "Fibre Tracker"
    app_version: str = "0.1.0"
    debug: bool = False

    # CORS Settings (for Frontend)
    cors_origins: str = "http://localhost:5173"

    # Calendar Settings
    # All deadlines are calendar days in this zone; "today" is taken here too
    calendar_timezone: str = "Africa/Johannesburg"
    holiday_country_code: str = "ZA"

    # Default allowed business days per phase (new projects)
    # Mirror phases (fqa, com) have no setting - they are always 0
    default_planning_days: int = Field(10, ge=0, le=365)
    default_funding_days: int = Field(2, ge=0, le=365)
    default_wayleave_days: int = Field(20, ge=0, le=365)  # 0 = wayleave skipped
    default_materials_days: int = Field(15, ge=0, le=365)
    default_announcement_days: int = Field(1, ge=0, le=365)
    default_kickoff_days: int = Field(2, ge=0, le=365)
    default_build_days: int = Field(20, ge=0, le=365)
    default_ecc_days: int = Field(1, ge=0, le=365)
    default_integration_days: int = Field(2, ge=0, le=365)
    default_rfa_days: int = Field(1, ge=0, le=365)

    # Status Settings
    status_warning_threshold_days: int = 3  # "at risk" when due within this many business days

    @property
    def cors_origin_list(self) -> list[str]:
        """Parse comma-separated CORS origins into a list."""
        return [origin.strip() for origin in self.cors_origins.split(",")]

    @property
    def default_allowed_days(self) -> dict[str, int]:
        """Default duration table keyed by phase name (mirror phases excluded)."""
        return {
            "planning": self.default_planning_days,
            "funding": self.default_funding_days,
            "wayleave": self.default_wayleave_days,
            "materials": self.default_materials_days,
            "announcement": self.default_announcement_days,
            "kickoff": self.default_kickoff_days,
            "build": self.default_build_days,
            "ecc": self.default_ecc_days,
            "integration": self.default_integration_days,
            "rfa": self.default_rfa_days,
        }


@lru_cache
def get_settings() -> Settings:
    """
    Cached settings instance.
    Call this function to get application settings.
    """
    return Settings()


# Global settings instance
settings = get_settings()
