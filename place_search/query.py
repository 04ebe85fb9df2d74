from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class ParsedQuery:
    """A query split into place / region / country parts. Empty means no constraint."""
    place_part: str = ""
    region_part: str = ""
    country_part: str = ""


def parse_query(raw: Optional[str]) -> ParsedQuery:
    """
    Parse "city[, region[, country]]".
    Examples: "houston" -> ("houston", "", ""), "Paris, France" -> ("paris", "france", "").
    Segments are trimmed and lowercased; empty segments are dropped, so
    ", tx" parses as a place part of "tx".
    """
    parts = [p.strip().lower() for p in (raw or "").split(",")]
    parts = [p for p in parts if p]
    parts += ["", "", ""]
    return ParsedQuery(place_part=parts[0], region_part=parts[1], country_part=parts[2])
