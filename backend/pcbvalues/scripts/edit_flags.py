"""
Set the flags bitfield of a stored score (bit 0 = popular).

Usage (from backend/ with DATABASE_URL set):
  python -m pcbvalues.scripts.edit_flags "some name" 1
"""
from __future__ import annotations

import sys

from pcbvalues.components.scoring.catalog import parse_flags
from pcbvalues.components.store.repository import ScoreStore
from pcbvalues.platform.config import settings
from pcbvalues.platform.database import SessionLocal
from pcbvalues.shared.errors import InvalidFlags, RecordNotFound


def main() -> None:
    if len(sys.argv) < 3:
        print("Usage: python -m pcbvalues.scripts.edit_flags <name> <flags>", file=sys.stderr)
        sys.exit(1)
    name = sys.argv[1].strip()
    try:
        flags = int(sys.argv[2])
    except ValueError:
        print(f"Flags must be an integer, got {sys.argv[2]!r}", file=sys.stderr)
        sys.exit(1)

    db = SessionLocal()
    try:
        store = ScoreStore(db, axis_count=settings.AXIS_COUNT, max_flags=settings.MAX_FLAGS)
        entry = store.edit_flags(name, flags)
    except RecordNotFound:
        print(f"No score stored under {name!r}", file=sys.stderr)
        sys.exit(2)
    except InvalidFlags as exc:
        print(exc.message, file=sys.stderr)
        sys.exit(3)
    finally:
        db.close()
    print(f"Updated {entry.name}: flags={entry.flags} {parse_flags(entry.flags)}")


if __name__ == "__main__":
    main()
