"""
Relevance scoring and ranking.

Scores are additive:
  name:     exact 100 | prefix 50 | substring 25 | otherwise excluded
  region:   region code match +40 | country name match +30 | otherwise excluded
  country:  country name match +20 | otherwise excluded
  length:   +max(0, 20 - len(name)) so "Houston" outranks "Houston County"

Region and country parts are hard filters: a qualifier that matches nothing
excludes the candidate instead of merely withholding the boost.
"""

from __future__ import annotations

import re
from typing import Iterable, Optional

from place_search.catalog import PlaceCatalog, PlaceRecord
from place_search.models import Place, SearchResult
from place_search.query import ParsedQuery

EXACT_MATCH = 100
PREFIX_MATCH = 50
SUBSTRING_MATCH = 25
REGION_MATCH = 40
COUNTRY_AS_REGION_MATCH = 30
COUNTRY_MATCH = 20
SHORT_NAME_BONUS = 20

DEFAULT_LIMIT = 10

# Only letter-only region codes are readable in a display name ("TX" yes, "04" no)
_READABLE_REGION_RE = re.compile(r"[A-Za-z]+")


def _matches_part(value: str, part: str) -> bool:
    """An empty part always matches; an empty value never matches a non-empty part."""
    if not part or not value:
        return not part
    return value.startswith(part)


def score_place(record: PlaceRecord, parsed: ParsedQuery, country_name: str) -> int:
    """Score one catalog record against a parsed query. 0 means excluded."""
    name = record.name_lower
    place_part = parsed.place_part

    if name == place_part:
        score = EXACT_MATCH
    elif name.startswith(place_part):
        score = PREFIX_MATCH
    elif place_part in name:
        score = SUBSTRING_MATCH
    else:
        return 0

    country = country_name.lower()

    if parsed.region_part:
        if _matches_part(record.region_code.lower(), parsed.region_part):
            score += REGION_MATCH
        elif _matches_part(country, parsed.region_part):
            # "paris, france": the second segment is a country, not a region
            score += COUNTRY_AS_REGION_MATCH
        else:
            return 0

    if parsed.country_part:
        if not _matches_part(country, parsed.country_part):
            return 0
        score += COUNTRY_MATCH

    return score + max(0, SHORT_NAME_BONUS - len(record.name))


def format_display_name(place: Place) -> str:
    """'Name, RegionCode, Country' for readable region codes, else 'Name, Country'."""
    if place.region_code and _READABLE_REGION_RE.fullmatch(place.region_code):
        return f"{place.name}, {place.region_code}, {place.country}"
    return f"{place.name}, {place.country}"


def rank(
    candidates: Iterable[PlaceRecord],
    parsed: ParsedQuery,
    catalog: PlaceCatalog,
    limit: int = DEFAULT_LIMIT,
    country_codes: Optional[Iterable[str]] = None,
) -> list[SearchResult]:
    """
    Score, filter, sort and truncate candidates.
    Candidates must arrive in catalog order; equal scores keep that order.
    """
    if limit <= 0:
        return []

    allowed = {code.upper() for code in country_codes} if country_codes else None

    scored: list[tuple[int, PlaceRecord]] = []
    for record in candidates:
        if allowed is not None and record.country_code.upper() not in allowed:
            continue
        score = score_place(record, parsed, catalog.country_name(record))
        if score > 0:
            scored.append((score, record))

    # list.sort is stable, including with reverse=True
    scored.sort(key=lambda item: item[0], reverse=True)

    results: list[SearchResult] = []
    for score, record in scored[:limit]:
        place = catalog.to_place(record)
        results.append(SearchResult(place=place, score=score, display_name=format_display_name(place)))
    return results
