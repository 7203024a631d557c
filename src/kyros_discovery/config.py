# config.py
"""Kyros Discovery configuration module.

Settings are loaded from a .env file (if present) and the process
environment. The site itself only needs a handful of values: the active
environment, the Formspree form identifiers and the cosmetic timings used by
the discovery widget.

Usage:
    >>> from kyros_discovery.config import config
    >>> config.is_development()
    True
"""

import logging
import os

from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()


class ConfigError(Exception):
    """Raised when configuration validation fails."""

    pass


class KyrosConfig:
    """Application configuration class that loads settings from environment variables.

    Attributes:
        APP_ENV: Active environment (development, staging or production).
        APP_URL: Public base URL of the website.
        FORMSPREE_FORM_ID: Shared form identifier, the only one used in production.
        FORMSPREE_FORM_ID_DEV: Development form identifier, preferred in development.
        ANALYSIS_DELAY_SECONDS: Simulated latency before a discovery result is shown.
        ANIMATION_PULSE_SECONDS: How long a completed step stays highlighted.

    Example:
        >>> config = KyrosConfig()
        >>> print(config.APP_ENV)
        development
    """

    def __init__(self) -> None:
        """Initialize configuration by loading from environment variables."""
        self.logger = logging.getLogger(__name__)

        # Application environment
        self.APP_ENV = self._get_optional("APP_ENV", "development")
        self.APP_URL = self._get_optional("APP_URL", "http://localhost:4321")
        self.DEBUG = self._get_bool("DEBUG")
        self.LOG_LEVEL = self._get_optional("LOG_LEVEL", "INFO")

        # Formspree Configuration
        self.FORMSPREE_FORM_ID = self._get_optional("FORMSPREE_FORM_ID")
        self.FORMSPREE_FORM_ID_DEV = self._get_optional("FORMSPREE_FORM_ID_DEV")
        self.FORMSPREE_TIMEOUT_SECONDS = int(
            self._get_optional("FORMSPREE_TIMEOUT_SECONDS", "15")
        )

        # Discovery widget timings
        self.ANALYSIS_DELAY_SECONDS = float(
            self._get_optional("ANALYSIS_DELAY_SECONDS", "0.5")
        )
        self.ANIMATION_PULSE_SECONDS = float(
            self._get_optional("ANIMATION_PULSE_SECONDS", "0.5")
        )

        # Branding
        self.BRAND_NAME = self._get_optional("BRAND_NAME", "Kyros")
        self.DISCOVERY_CTA_PATH = self._get_optional("DISCOVERY_CTA_PATH", "/discovery")

    def _get_optional(self, name: str, default: str = "") -> str:
        """Get an optional configuration value from environment variables.

        Args:
            name: The name of the environment variable.
            default: Default value if not found (default: "").

        Returns:
            The value of the environment variable or the default value.
        """
        if name in os.environ:
            return os.environ[name]
        return default

    def _get_bool(self, name: str) -> bool:
        """Get a boolean configuration value from environment variables.

        Args:
            name: The name of the environment variable.

        Returns:
            True if the environment variable exists and is set to 'true' or '1'.
        """
        return name in os.environ and os.environ[name].lower() in ["true", "1"]

    def validate_for_forms(self) -> None:
        """Validate configuration required for contact form submission.

        Raises:
            ConfigError: If no form identifier is usable in the active environment.
        """
        if self.is_development() and self.FORMSPREE_FORM_ID_DEV:
            return
        if not self.FORMSPREE_FORM_ID:
            raise ConfigError(
                "Formspree form ID is not configured. "
                "Please set FORMSPREE_FORM_ID in your environment variables."
            )

    def is_production(self) -> bool:
        """Check if running in production environment.

        Returns:
            True if APP_ENV is 'prod' or 'production'.
        """
        return self.APP_ENV.lower() in ["prod", "production"]

    def is_development(self) -> bool:
        """Check if running in development environment.

        Returns:
            True if APP_ENV is 'dev' or 'development'.
        """
        return self.APP_ENV.lower() in ["dev", "development"]

    def get_log_level(self) -> int:
        """Get logging level as integer.

        Returns:
            Logging level constant (e.g., logging.INFO).
        """
        level_map = {
            "DEBUG": logging.DEBUG,
            "INFO": logging.INFO,
            "WARNING": logging.WARNING,
            "ERROR": logging.ERROR,
            "CRITICAL": logging.CRITICAL,
        }
        return level_map.get(self.LOG_LEVEL.upper(), logging.INFO)

    def discovery_cta_url(self) -> str:
        """Absolute URL of the "Talk to Kyros" discovery page."""
        return f"{self.APP_URL.rstrip('/')}/{self.DISCOVERY_CTA_PATH.lstrip('/')}"


# Create global singleton instance
config = KyrosConfig()
