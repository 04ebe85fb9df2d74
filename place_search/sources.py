"""
Dataset sources and the country name resolver.

A source supplies the full place collection once, as an iterable of raw
mappings that RawPlace can validate. The default source reads the GeoNames
cities bundled with geonamescache, so nothing touches the network.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Iterable, Mapping, Optional, Protocol

import geonamescache
import pycountry

from place_search.config import DatasetConfig
from place_search.errors import DatasetUnavailableError

logger = logging.getLogger(__name__)

Row = Mapping[str, Any]


class PlaceSource(Protocol):
    def load(self) -> Iterable[Row]: ...


class GeonamesSource:
    """GeoNames cities (population >= 15000) shipped with geonamescache."""

    def load(self) -> Iterable[Row]:
        cities = geonamescache.GeonamesCache().get_cities()
        logger.info("Loaded %d cities from geonamescache", len(cities))
        # Rows carry countrycode / admin1code, which RawPlace accepts as aliases
        return list(cities.values())


class JsonlSource:
    """One JSON object per line, e.g. the output of scripts/export_places.py."""

    def __init__(self, path: Path | str):
        self.path = Path(path)

    def load(self) -> Iterable[Row]:
        if not self.path.exists():
            raise DatasetUnavailableError(f"Place dataset not found: {self.path}")

        rows: list[Row] = []
        bad_lines = 0
        with self.path.open("r", encoding="utf-8") as f:
            for line in f:
                if not line.strip():
                    continue
                try:
                    rows.append(json.loads(line))
                except json.JSONDecodeError:
                    bad_lines += 1

        if bad_lines:
            logger.warning("Skipped %d unparseable lines in %s", bad_lines, self.path)
        logger.info("Loaded %d rows from %s", len(rows), self.path)
        return rows


class StaticSource:
    """In-memory rows, for embedding hosts and tests."""

    def __init__(self, rows: Iterable[Row]):
        self.rows = list(rows)

    def load(self) -> Iterable[Row]:
        return self.rows


def get_source(config: DatasetConfig) -> PlaceSource:
    """Factory: return the configured dataset source."""
    if config.source == "jsonl":
        return JsonlSource(config.path)
    if config.source != "geonames":
        logger.warning("Unknown PLACES_SOURCE %r, falling back to geonames", config.source)
    return GeonamesSource()


def pycountry_country_name(country_code: str) -> Optional[str]:
    """
    ISO 3166 alpha-2 (or alpha-3) code -> country name, None when unknown.
    Prefers the everyday name ("South Korea") over the official ISO one
    ("Korea, Republic of") so qualifiers like "seoul, south korea" match.
    """
    code = country_code.strip().upper()
    if len(code) == 2:
        country = pycountry.countries.get(alpha_2=code)
    elif len(code) == 3:
        country = pycountry.countries.get(alpha_3=code)
    else:
        return None
    if country is None:
        return None
    return getattr(country, "common_name", None) or country.name
