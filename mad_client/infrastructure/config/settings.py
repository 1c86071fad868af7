"""Centralized configuration management using environment variables

Provides a single source of truth for the Anomaly Detector client
configuration with validation and type safety. Secrets have no built-in
fallback values; they must come from the environment or a ``.env`` file.
"""

import logging
import os

from dotenv import load_dotenv

from mad_client.application.exceptions import (
    ConfigurationException,
    InvalidConfigException,
    MissingConfigException,
)
from mad_client.infrastructure.resilience.retry import DEFAULT_BACKOFF_MS


logger = logging.getLogger(__name__)

# Load environment variables from .env file
load_dotenv()

DEFAULT_LOCATION = "westus2"


def parse_backoff(
    value: str | None, config_key: str = "MAD_BACKOFF_MS"
) -> tuple[int, ...]:
    """Parse a comma separated list of backoff delays in milliseconds.

    Raises:
        InvalidConfigException: If an entry is not a non-negative integer
    """
    if value is None:
        return DEFAULT_BACKOFF_MS
    if not value.strip():
        return ()
    try:
        delays = tuple(int(part.strip()) for part in value.split(","))
    except ValueError as e:
        raise InvalidConfigException(
            config_key, value, "must be a comma separated list of integers"
        ) from e
    if any(delay < 0 for delay in delays):
        raise InvalidConfigException(config_key, value, "delays must be >= 0")
    return delays


class Settings:
    """Application settings loaded from environment variables"""

    def __init__(self) -> None:
        """Initialize settings from environment variables

        Raises:
            InvalidConfigException: If configuration values are invalid
        """
        # Anomaly Detector service
        self.subscription_key: str = os.getenv("MAD_SUBSCRIPTION_KEY", "")
        self.location: str = os.getenv("MAD_LOCATION", DEFAULT_LOCATION)
        self.endpoint_override: str = os.getenv("MAD_ENDPOINT", "")

        # Retry / timeout settings
        self.backoff_ms: tuple[int, ...] = parse_backoff(os.getenv("MAD_BACKOFF_MS"))
        self.request_timeout: float | None = self._parse_timeout(
            os.getenv("MAD_REQUEST_TIMEOUT")
        )

        # Blob storage credentials (passed through to callers, never defaulted)
        self.storage_connection_string: str = os.getenv(
            "STORAGE_CONNECTION_STRING", ""
        )
        self.storage_key: str = os.getenv("STORAGE_KEY", "")
        self.storage_sas_token: str = os.getenv("STORAGE_SAS_TOKEN", "")

    @staticmethod
    def _parse_timeout(value: str | None) -> float | None:
        if value is None or not value.strip():
            return None
        try:
            timeout = float(value)
            if timeout <= 0:
                raise ValueError("Timeout must be greater than 0")
        except ValueError as e:
            logger.error(f"Invalid MAD_REQUEST_TIMEOUT value: {e}")
            raise InvalidConfigException(
                "MAD_REQUEST_TIMEOUT", value, f"Invalid timeout value: {str(e)}"
            ) from e
        return timeout

    @property
    def endpoint(self) -> str:
        """Base URL of the Anomaly Detector resource"""
        if self.endpoint_override:
            return self.endpoint_override.rstrip("/")
        return f"https://{self.location}.api.cognitive.microsoft.com"

    def validate(self) -> None:
        """Validate required settings

        Raises:
            MissingConfigException: If required configuration is missing
            InvalidConfigException: If configuration is invalid
        """
        if not self.subscription_key:
            raise MissingConfigException(
                "MAD_SUBSCRIPTION_KEY",
                "MAD_SUBSCRIPTION_KEY is required. "
                "Please set it in your .env file or environment variables.",
            )

        if not self.endpoint_override and not self.location:
            raise MissingConfigException(
                "MAD_LOCATION", "Either MAD_LOCATION or MAD_ENDPOINT is required"
            )

        if self.endpoint_override and not self.endpoint_override.startswith(
            ("https://", "http://")
        ):
            raise InvalidConfigException(
                "MAD_ENDPOINT", self.endpoint_override, "must be an http(s) URL"
            )

        if not self.storage_connection_string and not self.storage_sas_token:
            logger.warning(
                "Neither STORAGE_CONNECTION_STRING nor STORAGE_SAS_TOKEN is set. "
                "Blob storage access will not work."
            )

    @property
    def is_production(self) -> bool:
        """Check if running in production mode"""
        return os.getenv("ENVIRONMENT", "development").lower() == "production"

    @property
    def debug(self) -> bool:
        """Check if debug mode is enabled"""
        return os.getenv("DEBUG", "false").lower() == "true"

    @property
    def log_level(self) -> str:
        """Get the logging level"""
        if self.debug:
            return "DEBUG"
        return os.getenv("LOG_LEVEL", "INFO").upper()

    def get_required(self, key: str) -> str:
        """Get a required configuration value

        Args:
            key: Configuration attribute name

        Returns:
            Configuration value

        Raises:
            MissingConfigException: If configuration is not set or empty
        """
        value = getattr(self, key, None)
        if not value:
            raise MissingConfigException(
                key, f"Required configuration '{key}' is not set"
            )
        return value


# Global settings instance, created on first use
settings: Settings | None = None


def get_settings() -> Settings:
    """Get the global settings instance

    Returns:
        Global Settings instance

    Raises:
        ConfigurationException: If settings failed to load
    """
    global settings
    if settings is None:
        try:
            settings = Settings()
        except ConfigurationException:
            raise
        except Exception as e:
            logger.error(f"Failed to load settings: {e}")
            raise ConfigurationException(
                "Settings failed to initialize. Check your environment configuration.",
                {"error": str(e)},
            ) from e
    return settings


def reload_settings() -> Settings:
    """Reload settings from environment

    Returns:
        New Settings instance

    Raises:
        ConfigurationException: If settings fail to load
    """
    global settings
    settings = None
    settings = get_settings()
    logger.info("Settings reloaded successfully")
    return settings
