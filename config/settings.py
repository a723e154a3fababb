"""
RFP Manager - Configuration Management

Central configuration using Pydantic settings.
"""

from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )

    service_name: str = Field(default="rfp-manager", description="Service name reported by /health")

    # Storage Configuration
    data_dir: Path = Field(
        default=Path("./data"),
        description="Data directory for logs and local files"
    )

    # API Configuration
    api_host: str = Field(default="0.0.0.0", description="API host")
    api_port: int = Field(default=8000, description="API port")
    api_env: str = Field(default="development", description="API environment")
    cors_origins: str = Field(
        default="http://localhost:5173,http://localhost:3000",
        description="CORS origins (comma-separated)"
    )
    rate_limit_enabled: bool = Field(
        default=True,
        description="Enable per-route rate limiting"
    )

    # Logging
    log_level: str = Field(default="INFO", description="Console log level")
    log_to_file: bool = Field(default=True, description="Also write a dated log file")

    # Database Configuration
    database_url: str = Field(
        default="postgresql+asyncpg://localhost/rfp_manager",
        description="Database connection URL"
    )
    database_echo: bool = Field(
        default=False,
        description="Echo SQL queries for debugging"
    )
    database_auto_create: bool = Field(
        default=False,
        description="Create missing tables on startup (local development)"
    )

    # JWT Configuration
    jwt_secret: str = Field(
        default="change-this-in-production-use-long-random-string",
        description="JWT signing secret"
    )
    jwt_algorithm: str = Field(default="HS256", description="JWT algorithm")
    jwt_expire_minutes: int = Field(default=30, description="Access token expiry")

    @property
    def cors_origins_list(self) -> list[str]:
        """Parse CORS origins into a list."""
        return [origin.strip() for origin in self.cors_origins.split(",")]

    @property
    def logs_dir(self) -> Path:
        """Directory for log files."""
        path = self.data_dir / "logs"
        path.mkdir(parents=True, exist_ok=True)
        return path


# Global settings instance
settings = Settings()
