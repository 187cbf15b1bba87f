"""Configuration management for PaperScout."""

import os
from pathlib import Path
from typing import Any

from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()


class Config:
    """Central configuration for PaperScout."""

    # Project paths
    PROJECT_ROOT = Path(__file__).parent.parent.parent
    LOG_LEVEL = os.getenv("PAPERSCOUT_LOG_LEVEL", "INFO")

    # API Keys
    SEMANTIC_SCHOLAR_API_KEY = os.getenv("SEMANTIC_SCHOLAR_API_KEY", "")

    # Response cache settings
    CACHE_DEFAULT_TTL = float(os.getenv("PAPERSCOUT_CACHE_TTL_SECONDS", str(30 * 60)))
    CACHE_MAX_SIZE = int(os.getenv("PAPERSCOUT_CACHE_MAX_SIZE", "100"))

    # API rate limits (seconds between requests)
    SEMANTIC_SCHOLAR_MIN_INTERVAL = float(os.getenv("SEMANTIC_SCHOLAR_MIN_INTERVAL", "1.0"))
    ARXIV_MIN_INTERVAL = float(os.getenv("ARXIV_MIN_INTERVAL", "3.0"))
    OPENREVIEW_MIN_INTERVAL = float(os.getenv("OPENREVIEW_MIN_INTERVAL", "0.5"))
    HTTP_TIMEOUT = float(os.getenv("PAPERSCOUT_HTTP_TIMEOUT", "30"))

    @classmethod
    def validate_api_keys(cls) -> dict[str, bool]:
        """Report which optional API keys are present."""
        return {
            "semantic_scholar": bool(cls.SEMANTIC_SCHOLAR_API_KEY),
        }

    @classmethod
    def get_summary(cls) -> dict[str, Any]:
        """Get configuration summary for debugging."""
        return {
            "project_root": str(cls.PROJECT_ROOT),
            "log_level": cls.LOG_LEVEL,
            "api_keys_configured": cls.validate_api_keys(),
            "cache": {
                "default_ttl_seconds": cls.CACHE_DEFAULT_TTL,
                "max_size": cls.CACHE_MAX_SIZE,
            },
            "rate_limits": {
                "semantic_scholar_min_interval": cls.SEMANTIC_SCHOLAR_MIN_INTERVAL,
                "arxiv_min_interval": cls.ARXIV_MIN_INTERVAL,
                "openreview_min_interval": cls.OPENREVIEW_MIN_INTERVAL,
            },
        }
