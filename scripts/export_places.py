from __future__ import annotations

import argparse
import json
from pathlib import Path

from pydantic import ValidationError

from place_search.models import RawPlace
from place_search.sources import GeonamesSource


def _write_jsonl(path: Path, rows: list[dict]) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("w", encoding="utf-8") as f:
        for row in rows:
            f.write(json.dumps(row, ensure_ascii=False) + "\n")


def export(out_file: Path) -> tuple[int, int]:
    """Write the bundled GeoNames cities as normalized JSONL. Returns (written, skipped)."""
    rows: list[dict] = []
    skipped = 0
    for raw in GeonamesSource().load():
        try:
            rows.append(RawPlace.model_validate(raw).model_dump())
        except ValidationError:
            skipped += 1

    _write_jsonl(out_file, rows)
    return len(rows), skipped


def main() -> None:
    parser = argparse.ArgumentParser(description="Export the bundled city dataset for PLACES_SOURCE=jsonl.")
    parser.add_argument("--out", default="data/places.jsonl")
    args = parser.parse_args()

    written, skipped = export(Path(args.out))
    print(f"Wrote {written} places to {args.out} ({skipped} skipped)")


if __name__ == "__main__":
    main()
