"""Application configuration using pydantic-settings."""

from pathlib import Path

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

    # Service settings
    service_host: str = Field(default="0.0.0.0", description="Host to bind the service")
    service_port: int = Field(default=4100, description="Port to bind the service")
    service_workers: int = Field(default=1, description="Number of worker processes")
    log_level: str = Field(default="info", description="Logging level")
    environment: str = Field(
        default="development",
        description="Server environment: development or production",
    )

    # Database - SQLite file
    database_path: Path = Field(
        default=Path("./linkarray.db"),
        description="Path to the SQLite database file",
    )

    # Session tokens
    jwt_secret: str = Field(
        default="development-secret-key-change-in-production",
        description="Secret key used to sign session tokens",
    )
    jwt_algorithm: str = Field(default="HS256", description="JWT signing algorithm")
    token_lifetime_minutes: int = Field(
        default=60, description="Session token lifetime in minutes"
    )
    token_cookie_name: str = Field(
        default="token", description="Cookie carrying the session token"
    )

    # API key gate
    api_key: str = Field(default="some-api-key", description="Shared client API key")
    api_key_header: str = Field(
        default="linkarray-api-key", description="Header name for API key authentication"
    )

    # Passwords
    bcrypt_rounds: int = Field(default=12, description="bcrypt cost factor")

    # CORS
    allowed_origins: str = Field(
        default="http://localhost:5173",
        description="Allowed CORS origins (comma-separated)",
    )

    # Admin dashboard
    registration_window_days: int = Field(
        default=30, description="Trailing window of the registration chart in days"
    )

    @property
    def is_production(self) -> bool:
        return self.environment.lower() == "production"

    def get_allowed_origins(self) -> list[str]:
        """Get allowed origins as a list."""
        return [origin.strip() for origin in self.allowed_origins.split(",") if origin.strip()]


# Global settings instance
settings = Settings()
