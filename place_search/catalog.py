"""
In-memory place catalog.

Design:
  - Ingestion validates each raw record through RawPlace. A bad record is
    skipped and counted; it never aborts the build.
  - Records are stored as frozen PlaceRecord objects in dataset order. The
    position of a record is its catalog order and is used for tie-breaking.
  - Country display names are not stored per record. They are resolved on
    first use and memoized in CountryNameCache, the only structure that
    changes after the catalog is built.
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, field
from typing import Any, Callable, Iterable, Iterator, Mapping, Optional, Sequence

from pydantic import ValidationError

from place_search.models import Coordinates, Place, RawPlace

logger = logging.getLogger(__name__)

CountryResolver = Callable[[str], Optional[str]]


@dataclass(frozen=True)
class PlaceRecord:
    position: int
    name: str
    country_code: str
    region_code: str
    lat: float
    lng: float
    name_lower: str = field(repr=False, compare=False, default="")


class CountryNameCache:
    """
    Memoizes country code -> display name.

    Lookups of known codes are plain dict reads. Misses are resolved outside
    the lock and inserted with setdefault under it, so concurrent first
    lookups of the same code all observe the same name.
    """

    def __init__(self, resolver: CountryResolver):
        self._resolver = resolver
        self._names: dict[str, str] = {}
        self._lock = threading.Lock()

    def get(self, country_code: str) -> str:
        name = self._names.get(country_code)
        if name is not None:
            return name

        # Unknown codes display as the code itself
        resolved = self._resolver(country_code) or country_code
        with self._lock:
            return self._names.setdefault(country_code, resolved)

    def __len__(self) -> int:
        return len(self._names)

    def __contains__(self, country_code: object) -> bool:
        return country_code in self._names


class PlaceCatalog:
    """Read-only sequence of place records plus the country-name cache."""

    def __init__(self, records: Sequence[PlaceRecord], countries: CountryNameCache, skipped: int = 0):
        self._records = tuple(records)
        self.countries = countries
        self.skipped = skipped

    def __len__(self) -> int:
        return len(self._records)

    def __iter__(self) -> Iterator[PlaceRecord]:
        return iter(self._records)

    def __getitem__(self, position: int) -> PlaceRecord:
        return self._records[position]

    def country_name(self, record: PlaceRecord) -> str:
        return self.countries.get(record.country_code)

    def to_place(self, record: PlaceRecord) -> Place:
        """Materialize a caller-owned Place for a catalog record."""
        return Place(
            name=record.name,
            country_code=record.country_code,
            country=self.country_name(record),
            region_code=record.region_code,
            coordinates=Coordinates(lat=record.lat, lng=record.lng),
        )


def ingest(rows: Iterable[Mapping[str, Any]], countries: CountryNameCache) -> PlaceCatalog:
    """
    Validate raw dataset rows into a PlaceCatalog.
    Records with an empty name or country code, or with coordinates out of
    range, are skipped. Unparseable coordinates are coerced to 0.0.
    """
    records: list[PlaceRecord] = []
    skipped = 0

    for i, row in enumerate(rows):
        try:
            raw = RawPlace.model_validate(row)
        except ValidationError as e:
            skipped += 1
            logger.debug("Skipping malformed place record #%d (%d errors): %s",
                         i, e.error_count(), e.errors()[0]["msg"])
            continue

        records.append(PlaceRecord(
            position=len(records),
            name=raw.name,
            country_code=raw.country_code,
            region_code=raw.region_code,
            lat=raw.latitude,
            lng=raw.longitude,
            name_lower=raw.name.lower(),
        ))

    if skipped:
        logger.warning("Skipped %d malformed place records", skipped)
    logger.info("Ingested %d place records", len(records))

    return PlaceCatalog(records, countries, skipped=skipped)
