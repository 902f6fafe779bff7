"""
Export the stored scores as the gallery population feed.

Usage (from backend/ with DATABASE_URL set):
  python -m pcbvalues.scripts.export_population --out dist/users.json
"""
from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path

from pcbvalues.components.store.repository import ScoreStore
from pcbvalues.platform.config import settings
from pcbvalues.platform.database import SessionLocal


def export_population(store: ScoreStore, out: Path) -> int:
    rows = [entry.as_tuple() for entry in store.list()]
    out.parent.mkdir(parents=True, exist_ok=True)
    out.write_text(json.dumps(rows), encoding="utf-8")
    return len(rows)


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(description="Export [name, flags, stats] tuples for the gallery.")
    parser.add_argument("--out", default="users.json", help="Output JSON file (default: users.json)")
    args = parser.parse_args(argv)

    db = SessionLocal()
    try:
        count = export_population(ScoreStore(db, axis_count=settings.AXIS_COUNT), Path(args.out))
    finally:
        db.close()
    print(f"Exported {count} scores to {args.out}", file=sys.stderr)


if __name__ == "__main__":
    main()
