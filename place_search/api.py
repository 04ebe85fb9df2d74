"""
FastAPI service exposing the place index.

Endpoints:
  GET /search   - Ranked places for a free-text query ("houston, tx")
  GET /health   - Index load state and size
  GET /stats    - Catalog and index bucket counts
"""

from __future__ import annotations

import asyncio
import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import APIRouter, Depends, FastAPI, Query, Request
from fastapi.middleware.cors import CORSMiddleware

from place_search.models import HealthResponse, IndexStats, LoadState, SearchOptions, SearchResponse
from place_search.service import PlaceSearchIndex, create_place_index

logger = logging.getLogger(__name__)

router = APIRouter()


def get_index(request: Request) -> PlaceSearchIndex:
    return request.app.state.index


# ── Lifespan ──────────────────────────────────────────────────────────

@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup: start building the index without blocking. Shutdown: drop the wait."""
    logger.info("Starting up place search API...")
    preload_task = asyncio.create_task(app.state.index.preload())
    yield
    preload_task.cancel()
    logger.info("Place search API shut down.")


# ══════════════════════════════════════════════════════════════════════
# ENDPOINTS
# ══════════════════════════════════════════════════════════════════════

@router.get("/search", response_model=SearchResponse)
async def search_places(
    q: str = Query("", max_length=200, description="City, optionally followed by region and country"),
    limit: Optional[int] = Query(None, ge=1, description="Max results"),
    country: Optional[list[str]] = Query(None, description="Country code allow-list, repeatable"),
    index: PlaceSearchIndex = Depends(get_index),
):
    """
    Search places by name with optional qualifiers.

    Examples:
      /search?q=paris               -> Paris, France first, then other Parises
      /search?q=naples, fl          -> Naples, FL only
      /search?q=paris&country=US    -> US results only
    """
    results = await index.search(q, SearchOptions(limit=limit, country_codes=country))
    return SearchResponse(query=q, results=results, total=len(results))


@router.get("/health", response_model=HealthResponse)
async def health_check(index: PlaceSearchIndex = Depends(get_index)):
    """Index readiness. 'loading' for as long as the build has not finished."""
    stats = index.stats()
    status = "ok" if stats.state is LoadState.READY else stats.state.value
    return HealthResponse(status=status, state=stats.state, places=stats.places)


@router.get("/stats", response_model=IndexStats)
async def index_stats(index: PlaceSearchIndex = Depends(get_index)):
    return index.stats()


# ── App ───────────────────────────────────────────────────────────────

def create_app(index: Optional[PlaceSearchIndex] = None) -> FastAPI:
    app = FastAPI(
        title="Place Search API",
        description="Offline ranked place search over a static dataset",
        version="1.0.0",
        lifespan=lifespan,
    )
    app.state.index = index or create_place_index()

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["GET"],
        allow_headers=["*"],
    )
    app.include_router(router)
    return app


app = create_app()
