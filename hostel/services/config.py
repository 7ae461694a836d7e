"""Application configuration from environment variables."""

from pydantic import ConfigDict, Field
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings loaded from environment variables and .env."""

    model_config = ConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # Database
    database_url: str = Field(
        default="sqlite:///./hostel.db",
        description="SQLAlchemy connection string",
    )
    database_echo: bool = Field(default=False, description="Log SQL queries")

    # Room guardrails
    max_room_capacity: int = Field(default=50, description="Upper bound for beds per room")
    max_monthly_fee: int = Field(default=500000, description="Upper bound for a room's monthly fee")
    room_number_max_length: int = Field(default=12, description="Maximum room number length")

    # Billing
    currency: str = Field(default="PKR", description="Currency label used in messages")

    # Logging
    log_level: str = Field(default="INFO", description="Logging level")
    log_file: str = Field(default="logs/server.log", description="Server log file")

    # API
    api_title: str = Field(default="Hostel Occupancy API", description="API title")
    api_version: str = Field(default="0.1.0", description="API version")


# Global settings instance
settings = Settings()
