"""
Configuration settings for the application.
"""

import json
import logging
import os

from dotenv import load_dotenv

load_dotenv()


def _json_env(name: str, default: dict) -> dict:
    raw = os.getenv(name)
    if not raw:
        return default
    try:
        value = json.loads(raw)
    except ValueError:
        logging.getLogger(__name__).warning("Ignoring malformed %s value", name)
        return default
    return value if isinstance(value, dict) else default


class Settings:
    """Application settings loaded from environment variables."""

    # Environment
    ENVIRONMENT: str = os.getenv("ENVIRONMENT", "development")

    # Upstream storefront API
    INVENTORY_API_URL: str = os.getenv("INVENTORY_API_URL", "http://localhost:5000")
    API_TIMEOUT_SECONDS: float = float(os.getenv("API_TIMEOUT_SECONDS", "30"))
    INVENTORY_PAGE_LIMIT: int = int(os.getenv("INVENTORY_PAGE_LIMIT", "50"))

    # Cart behaviour
    # A cart response with neither `success` nor `error` counts as added unless
    # strict mode is switched on.
    CART_STRICT_SUCCESS: bool = (
        os.getenv("CART_STRICT_SUCCESS", "false").lower() == "true"
    )
    CART_DELIVERY_LEAD_DAYS: int = int(os.getenv("CART_DELIVERY_LEAD_DAYS", "3"))

    # Catalog filter tables
    CATEGORY_ALIASES: dict = _json_env("CATEGORY_ALIASES", {"Iron": "Steel"})
    SUBCATEGORY_BUCKETS: dict = _json_env(
        "SUBCATEGORY_BUCKETS",
        {"Others": ["OPC", "PPC"]},
    )

    @property
    def is_production(self) -> bool:
        """
        Check if running in production environment.
        """
        return self.ENVIRONMENT.lower() == "production"

    def __init__(self):
        self.debug = os.getenv("DEBUG", "false").lower() == "true"
        self.log_level = os.getenv("LOG_LEVEL", "INFO")
        logging.basicConfig(level=self.log_level)
        self.logger = logging.getLogger(__name__)

        self.logger.debug(
            f"Config initialized with environment={self.ENVIRONMENT}, "
            f"debug={self.debug}, log_level={self.log_level}"
        )


# Create a global settings instance for import
settings = Settings()
