"""Submission guard: confirmation, single-flight sending and manual fallback.

The guard's ``state`` is both what the UI renders and the in-flight lock:
a ``submit`` that arrives while the state is ``SENDING`` is dropped.
Failures keep the payload so the user can export it and hand it in
manually; there is no automatic retry.
"""

from __future__ import annotations

import logging
from enum import Enum
from pathlib import Path
from typing import Optional, Protocol

from ...platform.brand import SCORES_EXPORT_FILENAME
from ...platform.config import QuizConfig
from ...shared.errors import NetworkFailure, SubmissionCancelled, SubmissionError
from ..scoring.codec import decode
from .client import ScoreApiClient
from .local_store import LocalSessionStore
from .payload import ResultParams, SubmissionPayload, build_payload, check_username

logger = logging.getLogger(__name__)

RESUBMIT_PROMPT = "You already submitted your scores, do you wish to submit a new time?"
FIRST_SUBMIT_PROMPT = 'Do you confirm you wish to submit your scores under the name of "{name}"?'
DUPLICATE_WARNING = "You already submitted this score before"


class SubmissionState(str, Enum):
    IDLE = "idle"
    SENDING = "sending"
    SUCCESS = "success"
    FAILED = "failed"


class SubmissionPrompts(Protocol):
    def ask_name(self, message: str) -> Optional[str]:
        """Ask for a name; ``None`` means the user cancelled."""

    def confirm(self, message: str) -> bool:
        ...


class SubmissionGuard:
    def __init__(
        self,
        config: QuizConfig,
        store: LocalSessionStore,
        prompts: SubmissionPrompts,
        client: ScoreApiClient | None = None,
    ):
        self.config = config
        self.store = store
        self.prompts = prompts
        self.client = client or ScoreApiClient(config.submit_url, timeout=config.submit_timeout)
        self.state = SubmissionState.IDLE
        self.last_error: Optional[str] = None
        self.failed_payload: Optional[SubmissionPayload] = None

    def check_duplicate(self, query: str) -> Optional[str]:
        """Warning text when the result in ``query`` matches the last accepted submission.

        Advisory only; it never blocks a submission.
        """
        last = self.store.last_submission()
        if not last or not last.get("vals"):
            return None
        scores = decode(ResultParams.from_query(query).score, self.config.axis_count)
        previous = list(last["vals"])
        if len(previous) == len(scores) and all(s == p for s, p in zip(scores, previous)):
            return DUPLICATE_WARNING
        return None

    def _confirmed(self, name: str) -> bool:
        if self.store.takes() > 0:
            return self.prompts.confirm(RESUBMIT_PROMPT)
        return self.prompts.confirm(FIRST_SUBMIT_PROMPT.format(name=name))

    async def submit(self, raw_name: Optional[str], query: str) -> SubmissionState:
        if self.state is SubmissionState.SENDING:
            logger.debug("Submission already in flight, dropping duplicate trigger")
            return self.state

        try:
            name = check_username(raw_name, self.prompts.ask_name)
        except SubmissionCancelled:
            logger.info("Submission cancelled at name prompt")
            return self.state
        if not self._confirmed(name):
            return self.state

        payload = build_payload(name, ResultParams.from_query(query), self.config, self.store)
        body = payload.model_dump(mode="json")
        self.store.set_pending_submission(body)

        self.state = SubmissionState.SENDING
        self.last_error = None
        try:
            response = await self.client.submit(payload)
            if response.needs_override:
                message = response.error or f"User {name} already exists, do you want to override the last score?"
                if not self.prompts.confirm(message):
                    logger.info("Override declined for name=%s", name)
                    self.store.clear_pending_submission()
                    self.state = SubmissionState.IDLE
                    return self.state
                response = await self.client.submit(payload, override=True)
                if not response.success:
                    raise NetworkFailure(response.error or "Failed to submit scores")
        except SubmissionError as exc:
            logger.warning("Score submission failed for name=%s: %s", name, exc.message)
            self.last_error = exc.message
            self.failed_payload = payload
            self.state = SubmissionState.FAILED
            return self.state
        except Exception:
            # Never leave the lock held.
            self.failed_payload = payload
            self.state = SubmissionState.FAILED
            raise

        takes = self.store.record_success(body)
        self.failed_payload = None
        self.state = SubmissionState.SUCCESS
        logger.info("Score submitted for name=%s (takes=%d)", name, takes)
        return self.state

    def export_failed_payload(self, directory: str | Path = ".") -> Optional[Path]:
        """Write the payload of the last failed submission for manual hand-in."""
        if self.failed_payload is None:
            return None
        target = Path(directory) / SCORES_EXPORT_FILENAME
        target.write_text(self.failed_payload.model_dump_json(), encoding="utf-8")
        logger.info("Exported failed submission to %s", target)
        return target
