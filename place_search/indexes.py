from __future__ import annotations

from dataclasses import dataclass
from types import MappingProxyType
from typing import Mapping

from place_search.catalog import PlaceCatalog, PlaceRecord

# Length of the name / country prefixes used as index keys
PREFIX_LENGTH = 2

Bucket = tuple[PlaceRecord, ...]

_EMPTY: Bucket = ()


@dataclass(frozen=True)
class PlaceIndexes:
    by_name_prefix: Mapping[str, Bucket]
    by_region: Mapping[str, Bucket]
    by_country_prefix: Mapping[str, Bucket]

    def name_bucket(self, prefix: str) -> Bucket:
        return self.by_name_prefix.get(prefix, _EMPTY)

    def region_bucket(self, region_code: str) -> Bucket:
        return self.by_region.get(region_code, _EMPTY)

    def country_bucket(self, prefix: str) -> Bucket:
        return self.by_country_prefix.get(prefix, _EMPTY)


def build_indexes(catalog: PlaceCatalog) -> PlaceIndexes:
    """
    Build the three lookup structures in one pass over the catalog:
      - first two lowercase chars of the name
      - lowercased region code
      - first two lowercase chars of the resolved country name
    Buckets keep catalog order.
    """
    by_name: dict[str, list[PlaceRecord]] = {}
    by_region: dict[str, list[PlaceRecord]] = {}
    by_country: dict[str, list[PlaceRecord]] = {}

    for record in catalog:
        if len(record.name_lower) >= PREFIX_LENGTH:
            by_name.setdefault(record.name_lower[:PREFIX_LENGTH], []).append(record)

        if record.region_code:
            by_region.setdefault(record.region_code.lower(), []).append(record)

        country = catalog.country_name(record).lower()
        if len(country) >= PREFIX_LENGTH:
            by_country.setdefault(country[:PREFIX_LENGTH], []).append(record)

    return PlaceIndexes(
        by_name_prefix=_freeze(by_name),
        by_region=_freeze(by_region),
        by_country_prefix=_freeze(by_country),
    )


def _freeze(buckets: dict[str, list[PlaceRecord]]) -> Mapping[str, Bucket]:
    return MappingProxyType({key: tuple(records) for key, records in buckets.items()})
