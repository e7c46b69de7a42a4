"""Configuration classes for DocumentGen API.

This module contains all configuration classes organized by domain.
Configuration is loaded from environment variables and .env files.
"""

from typing import Any, Dict, List, Optional
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


def str_to_bool(value: Any) -> bool:
    """Convert various string representations to boolean values.

    Args:
        value: The value to convert. Can be bool, str, int, or any other type.

    Returns:
        bool: The converted boolean value.

    Examples:
        >>> str_to_bool("true")
        True
        >>> str_to_bool("0")
        False
        >>> str_to_bool("yes")
        True
    """
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        return value.lower() in ("true", "1", "yes", "on", "enabled")
    if isinstance(value, int):
        return bool(value)
    return bool(value)


class ServerConfig(BaseSettings):
    """Server configuration settings."""

    # Application metadata
    app_name: str = Field(default="DocumentGen API", alias="APP_NAME")
    app_version: str = Field(default="1.0.0", alias="APP_VERSION")
    debug: bool = False

    # Server configuration
    server_port: int = Field(default=8080, alias="SERVER_PORT")
    server_host: str = Field(default="0.0.0.0", alias="SERVER_HOST")


class RedisConfig(BaseSettings):
    """Redis configuration settings, used by the redis usage store."""

    redis_host: str = Field(default="localhost", alias="REDIS_HOST")
    redis_port: int = Field(default=6379, alias="REDIS_PORT")
    redis_password: Optional[str] = Field(default=None, alias="REDIS_PASSWORD")
    redis_db: int = Field(default=0, alias="REDIS_DB")
    redis_socket_timeout: int = 30
    redis_retry_on_timeout: bool = True
    redis_max_connections: int = 10

    # Usage counters
    usage_key_prefix: str = "usage"
    # Buckets outlive their month so late reads still see them
    usage_key_ttl_seconds: int = 62 * 24 * 3600


class RendererConfig(BaseSettings):
    """Headless browser configuration for PDF conversion."""

    browser_headless: bool = Field(default=True, alias="BROWSER_HEADLESS")
    browser_args: List[str] = Field(
        default_factory=lambda: [
            "--no-sandbox",
            "--disable-setuid-sandbox",
            "--disable-dev-shm-usage",
            "--disable-gpu",
            "--no-first-run",
            "--no-zygote",
            "--disable-extensions",
        ],
        alias="BROWSER_ARGS",
    )
    browser_launch_timeout_seconds: float = Field(
        default=30.0, gt=0, alias="BROWSER_LAUNCH_TIMEOUT_SECONDS"
    )
    content_settle_timeout_seconds: float = Field(
        default=30.0, gt=0, alias="CONTENT_SETTLE_TIMEOUT_SECONDS"
    )

    @field_validator("browser_headless", mode="before")
    @classmethod
    def validate_browser_headless(cls, v) -> bool:
        """Convert string boolean values to actual boolean."""
        return str_to_bool(v)


class LimitsConfig(BaseSettings):
    """Rate limiting and usage metering settings."""

    rate_limit_window_seconds: int = Field(default=60, gt=0, alias="RATE_LIMIT_WINDOW_SECONDS")
    rate_limit_path_prefix: str = Field(default="/api", alias="RATE_LIMIT_PATH_PREFIX")
    rate_limit_prune_interval_seconds: int = Field(
        default=300, ge=0, alias="RATE_LIMIT_PRUNE_INTERVAL_SECONDS"
    )
    usage_store_backend: str = Field(default="memory", alias="USAGE_STORE_BACKEND")

    @field_validator("usage_store_backend")
    @classmethod
    def validate_usage_store_backend(cls, v: str) -> str:
        """Validate usage store backend."""
        valid_backends = ["memory", "redis"]
        if v.lower() not in valid_backends:
            raise ValueError(f"usage_store_backend must be one of: {valid_backends}")
        return v.lower()


class MonitoringConfig(BaseSettings):
    """Monitoring configuration settings."""

    log_level: str = Field(default="INFO", alias="LOG_LEVEL")
    log_json: bool = Field(default=False, alias="LOG_JSON")

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level."""
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        if v.upper() not in valid_levels:
            raise ValueError(f"log_level must be one of: {valid_levels}")
        return v.upper()

    @field_validator("log_json", mode="before")
    @classmethod
    def validate_log_json(cls, v) -> bool:
        """Convert string boolean values to actual boolean."""
        return str_to_bool(v)


class SecurityConfig(BaseSettings):
    """Caller identification settings."""

    api_key_header: str = Field(default="X-API-Key", alias="API_KEY_HEADER")
    api_key_query_param: str = Field(default="apiKey", alias="API_KEY_QUERY_PARAM")
    # Static key -> plan table
    api_keys: Dict[str, str] = Field(
        default_factory=lambda: {
            "demo-key-123": "starter",
            "test-key-456": "growth",
        },
        alias="API_KEYS",
    )
    cors_allowed_origins: List[str] = Field(
        default_factory=lambda: ["*"], alias="CORS_ALLOWED_ORIGINS"
    )


class ApplicationConfig(
    ServerConfig,
    RedisConfig,
    RendererConfig,
    LimitsConfig,
    MonitoringConfig,
    SecurityConfig,
    BaseSettings
):
    """Main application configuration that combines all configuration domains."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        populate_by_name=True,
    )
