"""Score store: a table of results keyed by the submitter's name."""

from __future__ import annotations

import logging
import math
from typing import List, Optional, Sequence

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ...components.matching.service import ScoreEntry
from ...models.score import ScoreRecord
from ...shared.errors import InvalidFlags, LengthMismatch, RangeError, RecordNotFound, StoreError

logger = logging.getLogger(__name__)


def _to_entry(record: ScoreRecord) -> ScoreEntry:
    return ScoreEntry(
        name=record.name,
        flags=int(record.flags or 0),
        stats=tuple(float(s) for s in (record.stats or [])),
    )


class ScoreStore:
    def __init__(self, db: Session, axis_count: int, max_flags: int = 2**31):
        self.db = db
        self.axis_count = axis_count
        self.max_flags = max_flags

    def _get(self, name: str) -> Optional[ScoreRecord]:
        return self.db.query(ScoreRecord).filter(ScoreRecord.name == name.strip()).first()

    def _commit(self, action: str) -> None:
        try:
            self.db.commit()
        except SQLAlchemyError as exc:
            self.db.rollback()
            logger.exception("Score store failed to %s", action)
            raise StoreError(f"Error {action} in database") from exc

    def find(self, name: str) -> Optional[ScoreEntry]:
        record = self._get(name)
        return _to_entry(record) if record else None

    def list(self) -> List[ScoreEntry]:
        return [_to_entry(r) for r in self.db.query(ScoreRecord).order_by(ScoreRecord.id.asc()).all()]

    def add(
        self,
        name: str,
        stats: Sequence[float],
        *,
        edition: Optional[str] = None,
        digest: Optional[str] = None,
        version: Optional[str] = None,
        answered_at: Optional[str] = None,
        takes: Optional[int] = None,
    ) -> ScoreEntry:
        """Insert or overwrite the result stored under ``name``.

        Callers decide whether overwriting is allowed; existing flags survive.
        """
        name = (name or "").strip()
        if not name:
            raise StoreError("A name is required to store a score")
        if len(stats) != self.axis_count:
            raise LengthMismatch(f"Invalid scores length: expected {self.axis_count}, got {len(stats)}")
        values = [float(s) for s in stats]
        if any(not math.isfinite(v) or v < 0 or v > 100 for v in values):
            raise RangeError()

        record = self._get(name)
        if record is None:
            record = ScoreRecord(name=name, flags=0)
            self.db.add(record)
        record.stats = values
        record.edition = edition
        record.digest = digest
        record.version = version
        record.answered_at = answered_at
        record.takes = takes
        self._commit("adding score")
        logger.info("Stored score for name=%s", name)
        return _to_entry(record)

    def edit_flags(self, name: str, flags: int) -> ScoreEntry:
        if isinstance(flags, bool) or not isinstance(flags, int) or flags < 0 or flags >= self.max_flags:
            raise InvalidFlags()
        record = self._get(name)
        if record is None:
            raise RecordNotFound("User not found in database")
        record.flags = flags
        self._commit("editing flags")
        logger.info("Updated flags for name=%s flags=%d", record.name, flags)
        return _to_entry(record)
