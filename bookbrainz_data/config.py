"""
BookBrainz Data - Configuration

Centralized configuration for the revisioned entity store.
Uses environment variables with sensible defaults.
"""
import os
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Optional

from dotenv import load_dotenv

from bookbrainz_data.core.errors import ConfigError
from bookbrainz_data.observability.logging import LoggingConfig
from bookbrainz_data.observability.logging import setup_logging as configure_logging

# Load environment variables from .env file
load_dotenv()


class Environment(Enum):
    """Deployment environments."""
    DEVELOPMENT = "development"
    TESTING = "testing"
    STAGING = "staging"
    PRODUCTION = "production"


@dataclass
class DatabaseConfig:
    """Database configuration."""
    host: str = field(default_factory=lambda: os.getenv("POSTGRES_HOST", "localhost"))
    port: int = field(default_factory=lambda: int(os.getenv("POSTGRES_PORT", "5432")))
    user: str = field(default_factory=lambda: os.getenv("POSTGRES_USER", "bookbrainz"))
    password: str = field(default_factory=lambda: os.getenv("POSTGRES_PASSWORD", "bookbrainz"))
    database: str = field(default_factory=lambda: os.getenv("POSTGRES_DATABASE", "bookbrainz"))

    # Overrides the host/port/user fields when set (e.g. sqlite+aiosqlite:///bb.db)
    url_override: str = field(default_factory=lambda: os.getenv("DATABASE_URL", ""))

    # Connection pool settings (ignored by SQLite)
    pool_size: int = field(default_factory=lambda: int(os.getenv("DB_POOL_SIZE", "10")))
    max_overflow: int = field(default_factory=lambda: int(os.getenv("DB_MAX_OVERFLOW", "20")))
    pool_timeout: int = field(default_factory=lambda: int(os.getenv("DB_POOL_TIMEOUT", "30")))
    echo: bool = field(default_factory=lambda: os.getenv("DB_ECHO", "false").lower() == "true")

    @property
    def url(self) -> str:
        """Get the async SQLAlchemy connection URL."""
        if self.url_override:
            return self.url_override
        return f"postgresql+asyncpg://{self.user}:{self.password}@{self.host}:{self.port}/{self.database}"


@dataclass
class LoggingSettings:
    """Logging configuration."""
    level: str = field(default_factory=lambda: os.getenv("LOG_LEVEL", "INFO"))
    json_format: bool = field(default_factory=lambda: os.getenv("LOG_FORMAT", "json").lower() == "json")
    service_name: str = field(default_factory=lambda: os.getenv("SERVICE_NAME", "bookbrainz-data"))


@dataclass
class Config:
    """Main configuration class combining all sub-configs."""
    env: Environment = field(default_factory=lambda: Environment(os.getenv("ENVIRONMENT", "development")))
    debug: bool = field(default_factory=lambda: os.getenv("DEBUG", "false").lower() == "true")

    database: DatabaseConfig = field(default_factory=DatabaseConfig)
    logging: LoggingSettings = field(default_factory=LoggingSettings)

    @classmethod
    def from_env(cls) -> "Config":
        """
        Load configuration from environment variables.

        Raises:
            ConfigError: If ENVIRONMENT or another setting is invalid.
        """
        env_value = os.getenv("ENVIRONMENT", "development").lower()
        try:
            env = Environment(env_value)
        except ValueError as e:
            raise ConfigError(
                f"Invalid ENVIRONMENT '{env_value}'",
                config_key="ENVIRONMENT",
                actual_value=env_value,
                cause=e,
            ) from e

        config = cls(env=env)
        config.validate()
        return config

    def validate(self) -> None:
        """Validate configuration consistency."""
        if self.database.pool_size < 1:
            raise ConfigError(
                "DB_POOL_SIZE must be at least 1",
                config_key="DB_POOL_SIZE",
                expected_type=int,
                actual_value=self.database.pool_size,
            )
        if self.database.max_overflow < 0:
            raise ConfigError(
                "DB_MAX_OVERFLOW cannot be negative",
                config_key="DB_MAX_OVERFLOW",
                expected_type=int,
                actual_value=self.database.max_overflow,
            )
        if self.logging.level.upper() not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
            raise ConfigError(
                f"Unknown LOG_LEVEL '{self.logging.level}'",
                config_key="LOG_LEVEL",
                actual_value=self.logging.level,
            )

    @property
    def is_production(self) -> bool:
        """Check if running in production."""
        return self.env == Environment.PRODUCTION

    def logging_config(self) -> LoggingConfig:
        """Structlog settings derived from the logging section."""
        return LoggingConfig(
            service_name=self.logging.service_name,
            level=self.logging.level,
            json_format=self.logging.json_format,
            environment=self.env.value,
        )

    def setup_logging(self) -> None:
        """Setup logging based on configuration."""
        configure_logging(self.logging_config(), force=True)

    def to_dict(self) -> Dict[str, Any]:
        """Convert config to dictionary (excluding sensitive values)."""
        return {
            "env": self.env.value,
            "debug": self.debug,
            "database": {
                "host": self.database.host,
                "port": self.database.port,
                "database": self.database.database,
                "pool_size": self.database.pool_size,
                "max_overflow": self.database.max_overflow,
            },
            "logging": {
                "level": self.logging.level,
                "json_format": self.logging.json_format,
            },
        }


# Singleton configuration instance
_config: Optional[Config] = None


def get_config() -> Config:
    """Get or create configuration singleton."""
    global _config
    if _config is None:
        _config = Config.from_env()
    return _config
