"""
Pydantic models used across the index for validation and serialization.
These are pure data objects with no coupling to the index structures.
"""

from __future__ import annotations

import math
from enum import Enum
from typing import Optional

from pydantic import AliasChoices, BaseModel, Field, field_validator


# ── Enums ──────────────────────────────────────────────────────────────

class LoadState(str, Enum):
    IDLE = "idle"
    LOADING = "loading"
    READY = "ready"


# ── Dataset ingestion ─────────────────────────────────────────────────

class RawPlace(BaseModel):
    """A single place record as supplied by a dataset source."""
    name: str = Field(..., min_length=1)
    country_code: str = Field(
        ...,
        min_length=1,
        validation_alias=AliasChoices("country_code", "countryCode", "countrycode"),
    )
    region_code: str = Field(
        "",
        validation_alias=AliasChoices("region_code", "regionCode", "stateCode", "admin1code"),
    )
    latitude: float = Field(0.0, ge=-90.0, le=90.0, validation_alias=AliasChoices("latitude", "lat"))
    longitude: float = Field(0.0, ge=-180.0, le=180.0, validation_alias=AliasChoices("longitude", "lng", "lon"))

    model_config = {"extra": "ignore", "str_strip_whitespace": True}

    @field_validator("region_code", mode="before")
    @classmethod
    def parse_region_code(cls, v):
        """Region codes are optional and sometimes arrive as None or numbers."""
        if v is None:
            return ""
        return str(v)

    @field_validator("latitude", "longitude", mode="before")
    @classmethod
    def parse_coordinate(cls, v):
        """Coordinates can arrive as strings; unparseable values fall back to 0.0."""
        if v is None or v == "":
            return 0.0
        try:
            value = float(v)
        except (TypeError, ValueError):
            return 0.0
        # NaN would slip past the range checks
        return value if not math.isnan(value) else 0.0


# ── Search models ─────────────────────────────────────────────────────

class Coordinates(BaseModel):
    lat: float
    lng: float

    model_config = {"frozen": True}


class Place(BaseModel):
    """A named geographic point as returned to callers."""
    name: str
    country_code: str
    country: str = Field(..., description="Resolved country display name")
    region_code: str = ""
    coordinates: Coordinates

    model_config = {"frozen": True}


class SearchResult(BaseModel):
    place: Place
    score: float = Field(..., gt=0)
    display_name: str = Field(..., description="e.g. 'Houston, TX, United States'")

    model_config = {"frozen": True}


class SearchOptions(BaseModel):
    limit: Optional[int] = Field(None, ge=0, description="Max results; defaults to the configured limit")
    country_codes: Optional[list[str]] = Field(None, description="Allow-list of country codes")


# ── API response models ───────────────────────────────────────────────

class IndexStats(BaseModel):
    state: LoadState
    places: int = 0
    skipped_records: int = 0
    countries_resolved: int = 0
    name_prefixes: int = 0
    region_codes: int = 0
    country_prefixes: int = 0
    build_seconds: Optional[float] = None


class SearchResponse(BaseModel):
    query: str
    results: list[SearchResult] = Field(default_factory=list)
    total: int = 0


class HealthResponse(BaseModel):
    status: str = "ok"
    state: LoadState = LoadState.IDLE
    places: int = 0
