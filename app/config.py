"""Configuration management for the caching service."""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"  # Ignore extra fields from environment variables
    )

    # Server Configuration
    host: str = Field(default="0.0.0.0", description="Server host")
    port: int = Field(default=8080, description="Server port")
    debug: bool = Field(default=False, description="Debug mode")
    log_level: str = Field(default="INFO", description="Logging level")

    # Cache Configuration
    cache_max_size: int = Field(default=5, description="Maximum number of entities resident in memory")

    # Database Configuration
    database_url: str = Field(default="sqlite:///./cache.db", description="SQLAlchemy database URL of the durable store")
    db_echo: bool = Field(default=False, description="Echo SQL statements")

    # Monitoring
    enable_metrics: bool = Field(default=True, description="Enable Prometheus metrics")


# Global settings instance
settings = Settings()
