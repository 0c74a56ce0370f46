"""Application configuration using pydantic-settings."""

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from recipequant.models import SpecificUnitSystem


class Settings(BaseSettings):
    """Settings loaded from environment variables (prefix RECIPEQUANT_) or a .env file."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="RECIPEQUANT_",
        extra="ignore",
    )

    # Application
    environment: str = "development"
    log_level: str = "INFO"

    # Output
    # None lets each quantity keep the system of its own unit
    default_unit_system: SpecificUnitSystem | None = None
    fraction_accuracy: float = Field(default=0.05, gt=0, lt=1)  # max relative error
    output_precision: int = Field(default=3, ge=1)  # significant digits

    @property
    def is_development(self) -> bool:
        """Check if running in development mode."""
        return self.environment.lower() == "development"


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
