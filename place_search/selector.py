from __future__ import annotations

import logging

from place_search.catalog import PlaceRecord
from place_search.indexes import PREFIX_LENGTH, Bucket, PlaceIndexes
from place_search.query import ParsedQuery

logger = logging.getLogger(__name__)

DEFAULT_REGION_PROBE_THRESHOLD = 50


def select_candidates(
    parsed: ParsedQuery,
    indexes: PlaceIndexes,
    region_probe_threshold: int = DEFAULT_REGION_PROBE_THRESHOLD,
) -> list[PlaceRecord]:
    """
    Fetch the places worth scoring for a query, in catalog order.

    The name-prefix bucket is the primary source. When the query carries a
    qualifier and that bucket is small, the region and country buckets for the
    qualifier are probed too and any place whose name starts with the place
    part is merged in. Only buckets keyed by the query's own prefixes are read.
    """
    place_part = parsed.place_part
    if len(place_part) < PREFIX_LENGTH:
        return []

    primary = indexes.name_bucket(place_part[:PREFIX_LENGTH])
    if not parsed.region_part or len(primary) >= region_probe_threshold:
        return list(primary)

    probes: list[Bucket] = [indexes.region_bucket(parsed.region_part)]
    country_qualifier = parsed.country_part or parsed.region_part
    if len(country_qualifier) >= PREFIX_LENGTH:
        probes.append(indexes.country_bucket(country_qualifier[:PREFIX_LENGTH]))

    seen = {record.position for record in primary}
    candidates = list(primary)
    merged = 0
    for bucket in probes:
        for record in bucket:
            if record.position in seen or not record.name_lower.startswith(place_part):
                continue
            seen.add(record.position)
            candidates.append(record)
            merged += 1

    if merged:
        logger.debug("Qualifier probe added %d candidates for %r", merged, parsed)
        candidates.sort(key=lambda r: r.position)
    return candidates
