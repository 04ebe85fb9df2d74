"""
Shared fixtures: a small deterministic place dataset and a ready index over it.
Catalog order below is significant for tie-breaking assertions.
"""

from __future__ import annotations

import asyncio

import pytest

from place_search.catalog import CountryNameCache, ingest
from place_search.config import SearchConfig
from place_search.indexes import build_indexes
from place_search.service import PlaceSearchIndex
from place_search.sources import StaticSource

COUNTRY_NAMES = {
    "FR": "France",
    "US": "United States",
    "IT": "Italy",
    "GB": "United Kingdom",
    "CA": "Canada",
    "JP": "Japan",
    "CL": "Chile",
    "NO": "Norway",
    "PR": "Puerto Rico",
}


def _row(name, cc, region, lat, lng):
    return {"name": name, "country_code": cc, "region_code": region, "latitude": lat, "longitude": lng}


PLACE_ROWS = [
    _row("Paris", "FR", "11", 48.85341, 2.3488),                        # 0
    _row("Paris", "US", "TX", 33.66094, -95.55551),                     # 1
    _row("Paris", "US", "TN", 36.30199, -88.32671),                     # 2
    _row("Parishville", "US", "NY", 44.62, -74.81),                     # 3
    _row("Cormeilles-en-Parisis", "FR", "11", 48.97, 2.20),             # 4
    _row("Houston", "US", "TX", 29.76328, -95.36327),                   # 5
    _row("Houston", "US", "MS", 33.89846, -88.99923),                   # 6
    _row("Houston County", "US", "AL", 31.15, -85.30),                  # 7
    _row("Naples", "IT", "04", 40.85216, 14.26811),                     # 8
    _row("Naples", "US", "FL", 26.14234, -81.79596),                    # 9
    _row("London", "GB", "ENG", 51.50853, -0.12574),                    # 10
    _row("London", "CA", "08", 42.98339, -81.23304),                    # 11
    _row("Tokyo", "JP", "40", 35.6895, 139.69171),                      # 12
    _row("Austin", "US", "TX", 30.26715, -97.74306),                    # 13
    _row("San Antonio", "US", "TX", 29.42412, -98.49363),               # 14
    _row("San Diego", "US", "CA", 32.71571, -117.16472),                # 15
    _row("San Francisco", "US", "CA", 37.77493, -122.41942),            # 16
    _row("San Jose", "US", "CA", 37.33939, -121.89496),                 # 17
    _row("Santiago", "CL", "RM", -33.45694, -70.64827),                 # 18
    _row("Santa Fe", "US", "NM", 35.68698, -105.9378),                  # 19
    _row("Sandnes", "NO", "11", 58.85244, 5.73521),                     # 20
    _row("San Juan", "PR", "", 18.46633, -66.10572),                    # 21
    # Unparseable coordinates are coerced, not rejected
    _row("Mystery Point", "ZZ", None, "not-a-number", ""),              # 22
    # Malformed records, skipped at ingestion
    _row("", "US", "TX", 30.0, -97.0),
    _row("Atlantis", "GR", "", 123.0, 0.0),
    _row("Nowhere", "", "", 10.0, 10.0),
    "not a mapping",
]

VALID_PLACES = 23
SKIPPED_PLACES = 4


def resolve_country(code: str):
    return COUNTRY_NAMES.get(code)


@pytest.fixture
def place_rows():
    return list(PLACE_ROWS)


@pytest.fixture
def catalog():
    return ingest(PLACE_ROWS, CountryNameCache(resolve_country))


@pytest.fixture
def indexes(catalog):
    return build_indexes(catalog)


def make_index(rows=None, settings=None) -> PlaceSearchIndex:
    return PlaceSearchIndex(
        StaticSource(PLACE_ROWS if rows is None else rows),
        resolver=resolve_country,
        settings=settings or SearchConfig(),
    )


@pytest.fixture
def index_factory():
    return make_index


@pytest.fixture(scope="module")
def ready_index():
    index = make_index()
    index.ensure_ready_sync()
    return index


@pytest.fixture(scope="module")
def search(ready_index):
    """Synchronous wrapper around PlaceSearchIndex.search for plain tests."""
    def _search(query, **kwargs):
        return asyncio.run(ready_index.search(query, **kwargs))
    return _search
