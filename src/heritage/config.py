"""Client configuration loaded from environment variables.

All settings have working defaults so the client can be constructed
without any environment. Values are read once and cached; call
reset_settings() after changing the environment (tests do this).
"""

import logging
import os
from functools import lru_cache

from pydantic import BaseModel, ConfigDict, Field

logger = logging.getLogger(__name__)

DEFAULT_API_BASE_URL = "https://mern-product-production.up.railway.app"


class Settings(BaseModel):
    """Runtime settings for the booking client."""

    model_config = ConfigDict(frozen=True)

    api_base_url: str = Field(default=DEFAULT_API_BASE_URL, description="Backend base URL")
    api_timeout: float = Field(default=30.0, gt=0, description="Request timeout in seconds")
    token_file: str | None = Field(
        default=None, description="Path for persisted bearer token (in-memory if unset)"
    )
    payment_delay: float = Field(
        default=2.0, ge=0, description="Simulated payment processing delay in seconds"
    )
    log_level: str = Field(default="INFO", description="Package log level")

    @classmethod
    def from_env(cls) -> "Settings":
        """Build settings from HERITAGE_* environment variables.

        Returns:
            Settings populated from the environment, defaults otherwise.
        """
        return cls(
            api_base_url=os.environ.get("HERITAGE_API_BASE_URL", DEFAULT_API_BASE_URL),
            api_timeout=float(os.environ.get("HERITAGE_API_TIMEOUT", "30")),
            token_file=os.environ.get("HERITAGE_TOKEN_FILE") or None,
            payment_delay=float(os.environ.get("HERITAGE_PAYMENT_DELAY", "2.0")),
            log_level=os.environ.get("HERITAGE_LOG_LEVEL", "INFO").upper(),
        )


@lru_cache
def get_settings() -> Settings:
    """Get cached Settings instance."""
    settings = Settings.from_env()
    logger.debug("Loaded settings for %s", settings.api_base_url)
    return settings


def reset_settings() -> None:
    """Clear cached settings (for testing)."""
    get_settings.cache_clear()
