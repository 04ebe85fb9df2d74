"""
Public entry point: PlaceSearchIndex.

Typical host usage:

    index = create_place_index()
    asyncio.create_task(index.preload())      # at startup, non-blocking
    results = await index.search("houston, tx")

The index is an ordinary object owned by the host; build as many independent
instances as needed (tests do).
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import Iterable, Optional

from place_search.catalog import CountryNameCache, CountryResolver, PlaceCatalog, ingest
from place_search.config import SearchConfig, Settings, get_settings
from place_search.indexes import PlaceIndexes, build_indexes
from place_search.loader import LoadCoordinator
from place_search.models import IndexStats, LoadState, SearchOptions, SearchResult
from place_search.query import parse_query
from place_search.scorer import rank
from place_search.selector import select_candidates
from place_search.sources import PlaceSource, get_source, pycountry_country_name

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class BuiltIndex:
    catalog: PlaceCatalog
    indexes: PlaceIndexes
    build_seconds: float


class PlaceSearchIndex:
    def __init__(
        self,
        source: PlaceSource,
        resolver: Optional[CountryResolver] = None,
        settings: Optional[SearchConfig] = None,
    ):
        self.source = source
        self.settings = settings or get_settings().search
        self.countries = CountryNameCache(resolver or pycountry_country_name)
        self._loader: LoadCoordinator[BuiltIndex] = LoadCoordinator(self._build, name="place index")

    def _build(self) -> BuiltIndex:
        start = time.monotonic()
        catalog = ingest(self.source.load(), self.countries)
        indexes = build_indexes(catalog)
        elapsed = time.monotonic() - start
        logger.info(
            "Indexed %d places: %d name prefixes, %d region codes, %d country prefixes",
            len(catalog), len(indexes.by_name_prefix), len(indexes.by_region),
            len(indexes.by_country_prefix),
        )
        return BuiltIndex(catalog=catalog, indexes=indexes, build_seconds=elapsed)

    # ── Lifecycle ──────────────────────────────────────────────────────

    async def preload(self) -> None:
        """Build in the background; idempotent and safe to call concurrently."""
        await self._loader.preload()

    def ensure_ready_sync(self, timeout: Optional[float] = None) -> None:
        """Blocking fallback for callers that cannot await."""
        self._loader.ensure_ready_sync(timeout)

    def is_ready(self) -> bool:
        return self._loader.is_ready()

    def is_loading(self) -> bool:
        return self._loader.is_loading()

    @property
    def state(self) -> LoadState:
        return self._loader.state

    @property
    def build_count(self) -> int:
        return self._loader.build_count

    # ── Queries ────────────────────────────────────────────────────────

    async def search(
        self,
        query: str,
        options: Optional[SearchOptions] = None,
        *,
        limit: Optional[int] = None,
        country_codes: Optional[Iterable[str]] = None,
    ) -> list[SearchResult]:
        """
        Ranked places for a free-text query such as "naples, fl".
        Waits for the index if it is still building. Any query string is
        accepted; unmatched or odd input just yields [].
        """
        if options is None:
            options = SearchOptions(
                # Non-positive limits mean "no results", not a validation error
                limit=max(limit, 0) if limit is not None else None,
                country_codes=list(country_codes) if country_codes is not None else None,
            )

        built = await self._loader.wait_ready()

        parsed = parse_query(query)
        candidates = select_candidates(parsed, built.indexes, self.settings.region_probe_threshold)
        results = rank(
            candidates,
            parsed,
            built.catalog,
            limit=self._resolve_limit(options.limit),
            country_codes=options.country_codes,
        )
        logger.debug("search %r: %d candidates, %d results", query, len(candidates), len(results))
        return results

    def _resolve_limit(self, limit: Optional[int]) -> int:
        if limit is None:
            limit = self.settings.default_limit
        return min(limit, self.settings.max_limit)

    def stats(self) -> IndexStats:
        built = self._loader.value
        if built is None:
            return IndexStats(state=self.state)
        return IndexStats(
            state=self.state,
            places=len(built.catalog),
            skipped_records=built.catalog.skipped,
            countries_resolved=len(self.countries),
            name_prefixes=len(built.indexes.by_name_prefix),
            region_codes=len(built.indexes.by_region),
            country_prefixes=len(built.indexes.by_country_prefix),
            build_seconds=round(built.build_seconds, 3),
        )


def create_place_index(settings: Optional[Settings] = None) -> PlaceSearchIndex:
    """Factory: an index over the configured dataset source."""
    settings = settings or get_settings()
    return PlaceSearchIndex(get_source(settings.dataset), settings=settings.search)
