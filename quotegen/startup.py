"""
Startup validation and client wiring for Quotegen.

Called from main.py before the application starts.
"""

import logging
from typing import List, Optional

import httpx

from .metrics import QuoteMetrics
from .openrouter import OpenRouterClient
from .settings import Settings, get_settings
from .tags import VALID_TAGS

logger = logging.getLogger(__name__)


class StartupValidator:
    """Validates application configuration on startup."""

    def __init__(self, settings: Optional[Settings] = None):
        self.settings = settings or get_settings()
        self.errors: List[str] = []
        self.warnings: List[str] = []

    def validate_all(self) -> bool:
        """
        Run all validation checks.

        Returns:
            True if validation passed, False otherwise
        """
        self.validate_api_key()
        self.validate_model()
        self.validate_base_url()
        self.validate_tags()

        self._log_results()

        return len(self.errors) == 0

    def validate_api_key(self):
        """Validate OpenRouter API key is configured."""
        if not self.settings.openrouter_api_key:
            self.errors.append(
                "OPENROUTER_API_KEY is required. "
                "Get your key at https://openrouter.ai/keys"
            )

    def validate_model(self):
        """Validate model configuration."""
        model = self.settings.openrouter_model
        if not model:
            self.errors.append("OPENROUTER_MODEL is required")
        elif "/" not in model:
            self.warnings.append(
                f"Model '{model}' may be invalid. "
                "Expected format: provider/model-name"
            )

    def validate_base_url(self):
        """Validate the base URL is an absolute http(s) URL."""
        url = self.settings.openrouter_base_url
        if url and not url.startswith(("https://", "http://")):
            self.errors.append(f"OPENROUTER_BASE_URL must be an http(s) URL, got '{url}'")
        elif url.startswith("http://"):
            self.warnings.append("OPENROUTER_BASE_URL is not using HTTPS")

    def validate_tags(self):
        """Validate the preset tag catalog."""
        if len(VALID_TAGS) != len(set(VALID_TAGS)):
            self.errors.append("Duplicate tags in preset catalog")

    def _log_results(self):
        """Log validation results."""
        logger.info("=" * 60)
        logger.info("Quotegen Startup")
        logger.info("=" * 60)

        safe_config = self.settings.to_safe_dict()
        logger.info("Configuration:")
        for key, value in safe_config.items():
            logger.info(f"  {key}: {value}")

        if self.warnings:
            logger.warning("-" * 60)
            logger.warning(f"Warnings ({len(self.warnings)}):")
            for warning in self.warnings:
                logger.warning(f"  ⚠ {warning}")

        if self.errors:
            logger.error("-" * 60)
            logger.error(f"Errors ({len(self.errors)}):")
            for error in self.errors:
                logger.error(f"  ✗ {error}")

        logger.info("=" * 60)


def validate_startup(settings: Optional[Settings] = None) -> bool:
    """Run the startup checks and log the outcome. Returns True if they passed."""
    return StartupValidator(settings).validate_all()


def new_openrouter_client(
    settings: Optional[Settings] = None,
    metrics: Optional[QuoteMetrics] = None,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> OpenRouterClient:
    """
    Build a client from environment-backed settings.

    Raises:
        ConfigurationError: if OPENROUTER_API_KEY or OPENROUTER_MODEL is unset
    """
    settings = settings or get_settings()
    return OpenRouterClient(
        settings.to_openrouter_config(),
        metrics=metrics,
        transport=transport,
    )
