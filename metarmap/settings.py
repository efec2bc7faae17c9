# metarmap/settings.py
"""
Application settings.
"""

import os
from dataclasses import dataclass, field
from typing import List

# Load .env file
from dotenv import load_dotenv
load_dotenv()


def _env_bool(name: str, default: str) -> bool:
    return os.getenv(name, default).strip().lower() in ("1", "true", "yes", "on")


def _env_list(name: str, default: str) -> List[str]:
    return [item.strip() for item in os.getenv(name, default).split(",") if item.strip()]


@dataclass
class Settings:
    """Application configuration."""

    # Upstream weather API
    awc_base_url: str = os.getenv(
        "AWC_BASE_URL",
        "https://aviationweather.gov/api/data/metar"
    )
    user_agent: str = os.getenv("METARMAP_USER_AGENT", "metarmap/0.1.0")
    upstream_timeout_seconds: float = float(os.getenv("UPSTREAM_TIMEOUT", "10"))

    # Cache freshness window sent upstream and used by the response cache
    cache_max_age_seconds: int = int(os.getenv("CACHE_MAX_AGE", "300"))
    cache_max_entries: int = int(os.getenv("CACHE_MAX_ENTRIES", "512"))

    # Batching
    max_ids_per_request: int = int(os.getenv("MAX_IDS_PER_REQUEST", "50"))
    max_parallel_chunks: int = int(os.getenv("MAX_PARALLEL_CHUNKS", "4"))

    # "bbox" combines state boxes, "airports" concatenates state airport lists
    state_resolution: str = os.getenv("STATE_RESOLUTION", "bbox")

    # Logging
    log_level: str = os.getenv("LOG_LEVEL", "INFO")
    log_json: bool = _env_bool("LOG_JSON", "true")

    # API settings
    allowed_origins: List[str] = field(
        default_factory=lambda: _env_list(
            "ALLOWED_ORIGINS", "http://localhost:3000,http://localhost:8000"
        )
    )
    api_host: str = os.getenv("API_HOST", "0.0.0.0")
    api_port: int = int(os.getenv("API_PORT", "8000"))


# Global settings instance
settings = Settings()
