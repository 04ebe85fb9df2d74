"""CLI entrypoint for place_search."""

from __future__ import annotations

import argparse
import asyncio
import json

from place_search.logging_config import setup_logging
from place_search.models import SearchResult


def main() -> None:
    setup_logging()

    parser = argparse.ArgumentParser(prog="place-search")
    sub = parser.add_subparsers(dest="command", required=True)

    sub.add_parser("serve")
    sub.add_parser("stats")

    search_parser = sub.add_parser("search")
    search_parser.add_argument("query")
    search_parser.add_argument("--limit", type=int, default=None)
    search_parser.add_argument("--country", action="append", default=None,
                               help="Country code allow-list, repeatable")
    search_parser.add_argument("--json", action="store_true", help="Print raw JSON")

    args = parser.parse_args()

    if args.command == "serve":
        _serve()
    elif args.command == "stats":
        _stats()
    elif args.command == "search":
        asyncio.run(_search(args.query, args.limit, args.country, args.json))


def _serve() -> None:
    import uvicorn

    from place_search.config import get_settings

    settings = get_settings()
    uvicorn.run(
        "place_search.api:app",
        host=settings.api.host,
        port=settings.api.port,
        reload=(settings.env == "development"),
        log_level=settings.log_level.lower(),
    )


def _stats() -> None:
    from place_search.service import create_place_index

    index = create_place_index()
    index.ensure_ready_sync()
    print(json.dumps(index.stats().model_dump(mode="json"), indent=2))


async def _search(query: str, limit: int | None, countries: list[str] | None, as_json: bool) -> None:
    from place_search.service import create_place_index

    index = create_place_index()
    await index.preload()
    results = await index.search(query, limit=limit, country_codes=countries)

    if as_json:
        print(json.dumps([r.model_dump(mode="json") for r in results], ensure_ascii=False, indent=2))
        return
    _print_results(query, results)


def _print_results(query: str, results: list[SearchResult]) -> None:
    print("\n" + "-" * 72)
    print(f"Query: {query}")
    print(f"Results: {len(results)}")

    if not results:
        print("(none)")
        return

    for i, r in enumerate(results, 1):
        coords = r.place.coordinates
        print(f"\n{i}. {r.display_name}")
        print(f"   Score:  {r.score:g}")
        print(f"   Coords: {coords.lat:.4f}, {coords.lng:.4f}")


if __name__ == "__main__":
    main()
