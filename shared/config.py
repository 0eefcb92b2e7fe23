"""
Shared configuration management for the Project Board services.
"""

from typing import List

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


_TRUTHY = {"1", "true", "yes", "on"}


class BaseConfig(BaseSettings):
    """Base configuration class with common settings."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_prefix="BOARD_",
        case_sensitive=False,
        extra="allow"
    )

    # Environment
    env: str = Field(default="local")
    log_level: str = Field(default="info")

    # External services
    redis_url: str = Field(default="redis://localhost:6379/0")
    postgres_dsn: str = Field(default="postgresql://localhost:5432/projects")
    postgres_min_pool_size: int = Field(default=2)
    postgres_max_pool_size: int = Field(default=10)

    # Project listing cache
    projects_cache_ttl_seconds: int = Field(default=600)

    # HTTP
    cors_origins: List[str] = Field(default_factory=lambda: ["*"])


class ServiceConfig(BaseConfig):
    """Service-specific configuration."""

    service_name: str
    port: int
    host: str = "0.0.0.0"

    def __init__(self, service_name: str, port: int, **kwargs):
        super().__init__(service_name=service_name, port=port, **kwargs)


def get_config(service_name: str, port: int) -> ServiceConfig:
    """Get configuration for a specific service."""
    return ServiceConfig(service_name=service_name, port=port)


class CacheToggle(BaseSettings):
    """Live cache switch, resolved from the environment and `.env`."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_prefix="BOARD_",
        case_sensitive=False,
        extra="ignore"
    )

    cache_enabled: str = Field(default="yes")


def is_cache_enabled() -> bool:
    """
    Return whether cached result pages may be served.

    Resolved on every call, from the process environment first and then
    `.env`, so the cache can be switched off on a running process.
    """
    return CacheToggle().cache_enabled.strip().lower() in _TRUTHY
