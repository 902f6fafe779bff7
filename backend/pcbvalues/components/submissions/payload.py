"""Submission payloads and the result-URL parameters they are built from."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Annotated, Callable, List, Optional, Sequence
from urllib.parse import parse_qs

from pydantic import BaseModel, Field, StringConstraints

from ...platform.config import QuizConfig
from ...shared.errors import SubmissionCancelled
from ..scoring.codec import decode, format_scores
from ..scoring.digest import fingerprint_async, normalize_token
from ..scoring.quiz import Edition, build_result_query
from .local_store import LocalSessionStore

EMPTY_NAME_PROMPT = "You did not enter a username, please enter one and submit."


class SubmissionPayload(BaseModel):
    """Body of ``POST /api/v1/scores``; also the manual-export file format."""

    name: Annotated[str, StringConstraints(strip_whitespace=True, min_length=1)]
    vals: List[float]
    time: Optional[str] = None
    edition: Optional[str] = None
    digest: Optional[str] = None
    takes: int = Field(default=0, ge=0)
    version: str


@dataclass(frozen=True)
class ResultParams:
    edition: Optional[str]
    digest: Optional[str]
    score: Optional[str]

    @classmethod
    def from_query(cls, query: str) -> "ResultParams":
        parsed = parse_qs(query.lstrip("?"), keep_blank_values=False)

        def first(key: str) -> Optional[str]:
            values = parsed.get(key)
            return values[0] if values else None

        digest = first("digest")
        return cls(
            edition=first("edition"),
            digest=normalize_token(digest) if digest else None,
            score=first("score"),
        )


def check_username(raw: Optional[str], ask_name: Callable[[str], Optional[str]]) -> str:
    """Trim ``raw``; keep asking while it is blank. ``None`` from the prompt cancels."""
    name = (raw or "").strip()
    while not name:
        answer = ask_name(EMPTY_NAME_PROMPT)
        if answer is None:
            raise SubmissionCancelled()
        name = answer.strip()
    return name


async def record_result(scores: Sequence[float], edition: Edition, store: LocalSessionStore) -> str:
    """Build the results query for a finished quiz and timestamp its digest."""
    store.record_answer_time(await fingerprint_async(format_scores(scores)))
    return build_result_query(scores, edition)


def build_payload(
    name: str,
    params: ResultParams,
    config: QuizConfig,
    store: LocalSessionStore,
) -> SubmissionPayload:
    return SubmissionPayload(
        name=name,
        vals=decode(params.score, config.axis_count),
        time=store.answer_time(params.digest),
        edition=params.edition,
        digest=params.digest,
        takes=store.takes(),
        version=config.version,
    )
