"""
Central configuration loaded from environment variables with sensible defaults.
Nothing here is required: the index runs offline with the bundled dataset.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from functools import lru_cache


@dataclass(frozen=True)
class SearchConfig:
    default_limit: int = int(os.getenv("PLACES_DEFAULT_LIMIT", "10"))
    max_limit: int = int(os.getenv("PLACES_MAX_LIMIT", "100"))
    # Qualifier indexes are only probed when the prefix bucket is smaller than this
    region_probe_threshold: int = int(os.getenv("PLACES_REGION_PROBE_THRESHOLD", "50"))


@dataclass(frozen=True)
class DatasetConfig:
    source: str = os.getenv("PLACES_SOURCE", "geonames")  # geonames | jsonl
    path: str = os.getenv("PLACES_DATASET_PATH", "data/places.jsonl")


@dataclass(frozen=True)
class APIConfig:
    host: str = os.getenv("API_HOST", "0.0.0.0")
    port: int = int(os.getenv("API_PORT", "8000"))


@dataclass(frozen=True)
class Settings:
    search: SearchConfig = field(default_factory=SearchConfig)
    dataset: DatasetConfig = field(default_factory=DatasetConfig)
    api: APIConfig = field(default_factory=APIConfig)
    log_level: str = os.getenv("LOG_LEVEL", "INFO")
    env: str = os.getenv("APP_ENV", "development")


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Singleton settings instance."""
    return Settings()
