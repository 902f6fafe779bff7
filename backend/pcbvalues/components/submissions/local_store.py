"""Client-side session storage for the submission guard.

Holds when each result digest was first produced, the payload currently
being submitted, the last payload the server accepted, and how many
submissions succeeded. Every update is one read-modify-write of a small
JSON file, replaced atomically.
"""

from __future__ import annotations

import json
import logging
import os
import tempfile
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, Optional

from ...shared.utils import isoformat_z, utcnow

logger = logging.getLogger(__name__)

_ANSWER_TIMES = "answer_times"
_PENDING = "pending_submission"
_LAST = "last_submission"
_TAKES = "takes"


class LocalSessionStore:
    def __init__(self, path: str | os.PathLike | None = None):
        self.path = Path(path) if path else None
        self._memory: Dict[str, Any] = {}

    def _load(self) -> Dict[str, Any]:
        if self.path is None:
            return dict(self._memory)
        try:
            with open(self.path, encoding="utf-8") as fh:
                data = json.load(fh)
        except FileNotFoundError:
            return {}
        except json.JSONDecodeError:
            logger.warning("Local session store %s is corrupt, starting afresh", self.path)
            return {}
        return data if isinstance(data, dict) else {}

    def _save(self, data: Dict[str, Any]) -> None:
        if self.path is None:
            self._memory = data
            return
        self.path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp = tempfile.mkstemp(dir=self.path.parent, prefix=".pcbvalues-", suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as fh:
                json.dump(data, fh)
            os.replace(tmp, self.path)
        except OSError:
            Path(tmp).unlink(missing_ok=True)
            raise

    # Answer timestamps keyed by digest

    def record_answer_time(self, digest: str, when: Optional[datetime] = None) -> str:
        """Remember when ``digest`` was first produced; later calls keep the first time."""
        data = self._load()
        times = data.setdefault(_ANSWER_TIMES, {})
        if digest not in times:
            times[digest] = isoformat_z(when or utcnow())
            self._save(data)
        return times[digest]

    def answer_time(self, digest: Optional[str]) -> Optional[str]:
        if not digest:
            return None
        return self._load().get(_ANSWER_TIMES, {}).get(digest)

    # Submission payload cache

    def pending_submission(self) -> Optional[Dict[str, Any]]:
        return self._load().get(_PENDING)

    def set_pending_submission(self, payload: Dict[str, Any]) -> None:
        data = self._load()
        data[_PENDING] = payload
        self._save(data)

    def clear_pending_submission(self) -> None:
        data = self._load()
        if data.pop(_PENDING, None) is not None:
            self._save(data)

    def last_submission(self) -> Optional[Dict[str, Any]]:
        return self._load().get(_LAST)

    def record_success(self, payload: Dict[str, Any]) -> int:
        """Promote ``payload`` to the last accepted submission and bump the counter."""
        data = self._load()
        data.pop(_PENDING, None)
        data[_LAST] = payload
        data[_TAKES] = int(data.get(_TAKES, 0)) + 1
        self._save(data)
        return data[_TAKES]

    def takes(self) -> int:
        return int(self._load().get(_TAKES, 0))
