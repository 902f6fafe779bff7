"""Pydantic models for quiz content and quiz results."""

from __future__ import annotations

from typing import Dict, List, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field

SHORT_EDITION_FLAG = 0b01
YES_NO_FLAG = 0b10


class Question(BaseModel):
    model_config = ConfigDict(frozen=True)

    text: str
    flags: int = Field(default=0, ge=0)
    effect: Tuple[float, ...]

    @property
    def in_short_edition(self) -> bool:
        return bool(self.flags & SHORT_EDITION_FLAG)

    @property
    def is_yes_no(self) -> bool:
        return bool(self.flags & YES_NO_FLAG)


class Axis(BaseModel):
    """One evaluation dimension, with display metadata for both sides."""

    model_config = ConfigDict(frozen=True)

    name: str
    key: str
    labels: Tuple[str, str]
    icons: Tuple[str, str]
    color: Tuple[str, str]
    # bit 1: low-side label is drawn light-on-dark, bit 0: high-side label
    white: int = Field(default=0, ge=0, le=0b11)
    tiers: Tuple[str, ...] = Field(min_length=1)

    @property
    def white_text(self) -> Tuple[bool, bool]:
        return bool(self.white & 0b10), bool(self.white & 0b01)


class QuizScoreRequest(BaseModel):
    answers: List[float]
    edition: str = Field(default="f", pattern="^[sfSF]$")
    random_seed: Optional[int] = None


class QuizScoreResponse(BaseModel):
    scores: List[float]
    score_string: str
    digest: str
    edition: str
    query: str
    result_url: str


class AxisResult(BaseModel):
    name: str
    key: str
    score: float
    tier: str
    labels: Tuple[str, str]


class MatchSummary(BaseModel):
    name: str
    flags: int
    bias: float
    similarity: float


class ResultsResponse(BaseModel):
    scores: List[float]
    edition: str
    digest_valid: bool
    axes: List[AxisResult]
    closest: Optional[MatchSummary] = None
    others: List[MatchSummary] = []
    flags: Dict[str, bool] = {}
