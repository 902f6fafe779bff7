"""Quiz engine.

A quiz session is an immutable ``QuizState``; ``answer`` and ``back`` return
a new state instead of mutating the old one, so a UI that re-renders in the
middle of a session can never observe a half-applied transition.

    state = start(questions, Edition.FULL)
    state, more = answer(state, button_weight(0))
    ...
    scores = finalize(state)

The engine does not finalize on its own: once ``answer`` reports that no
question remains, the caller invokes ``finalize`` and then serializes and
digests the vector with the codec and digest service.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, replace
from enum import Enum
from typing import List, Sequence, Tuple
from urllib.parse import urlencode

from ...shared.errors import InvalidScore, OutOfRange, RangeError
from .codec import format_scores
from .digest import fingerprint
from .schemas import Question

ANSWER_WEIGHTS = (1.0, 0.5, 0.0, -0.5, -1.0)


class Edition(str, Enum):
    SHORT = "s"
    FULL = "f"

    @classmethod
    def parse(cls, value: str | None) -> "Edition":
        return cls.SHORT if (value or "").lower().startswith("s") else cls.FULL

    @property
    def label(self) -> str:
        return "short edition" if self is Edition.SHORT else "full edition"


@dataclass(frozen=True)
class QuizState:
    questions: Tuple[Question, ...]
    edition: Edition
    index: int
    answers: Tuple[float, ...]

    @property
    def total(self) -> int:
        return len(self.questions)

    @property
    def completed(self) -> bool:
        return self.index >= len(self.questions)

    def _current(self) -> Question:
        if not 0 <= self.index < len(self.questions):
            raise OutOfRange()
        return self.questions[self.index]

    @property
    def current_text(self) -> str:
        return self._current().text

    @property
    def current_is_yes_no(self) -> bool:
        return self._current().is_yes_no

    @property
    def display_index(self) -> int:
        self._current()
        return self.index + 1


def start(questions: Sequence[Question], edition: Edition = Edition.FULL) -> QuizState:
    questions = tuple(questions)
    return QuizState(
        questions=questions,
        edition=Edition(edition),
        index=0,
        answers=tuple(0.0 for _ in questions),
    )


def answer(state: QuizState, weight: float) -> Tuple[QuizState, bool]:
    """Record ``weight`` for the current question and move forward.

    Returns the new state and whether another question remains.
    """
    if state.completed:
        raise OutOfRange("The quiz has no question left to answer")
    if weight not in ANSWER_WEIGHTS:
        raise RangeError(f"Answer weight must be one of {ANSWER_WEIGHTS}, got {weight}")

    answers = list(state.answers)
    answers[state.index] = float(weight)
    new_state = replace(state, index=state.index + 1, answers=tuple(answers))
    return new_state, not new_state.completed


def back(state: QuizState) -> Tuple[QuizState, bool]:
    """Step back one question.

    Returns ``(state, False)`` unchanged at the first question, which tells
    the caller to leave the quiz rather than wrap around.
    """
    if state.index <= 0:
        return state, False
    return replace(state, index=state.index - 1), True


def replay(questions: Sequence[Question], edition: Edition, weights: Sequence[float]) -> QuizState:
    """Run a full list of answers through a fresh session."""
    state = start(questions, edition)
    if len(weights) != state.total:
        raise OutOfRange(f"Expected {state.total} answers, got {len(weights)}")
    for w in weights:
        state, _ = answer(state, w)
    return state


def finalize(state: QuizState) -> List[float]:
    """Reduce the recorded answers into one percentage per axis."""
    if not state.completed:
        raise OutOfRange("The quiz is not finished yet")
    if not state.questions:
        raise InvalidScore("The quiz has no questions")

    axis_count = len(state.questions[0].effect)
    if any(len(q.effect) != axis_count for q in state.questions):
        raise InvalidScore("Questions disagree on the number of axes")

    raw = [0.0] * axis_count
    max_possible = [0.0] * axis_count
    for weight, question in zip(state.answers, state.questions):
        for a, effect in enumerate(question.effect):
            raw[a] += weight * effect
            max_possible[a] += abs(effect)

    scores = []
    for a in range(axis_count):
        m = max_possible[a]
        if m == 0:
            raise InvalidScore(f"Axis {a + 1} is not affected by any question")
        score = abs(100 * (m + raw[a]) / (2 * m))
        if math.isnan(score) or score < 0 or score > 100:
            raise InvalidScore(f"Axis {a + 1} produced an invalid score: {score}")
        scores.append(score)
    return scores


def build_result_query(scores: Sequence[float], edition: Edition) -> str:
    """Query string of the results page: score, digest and edition."""
    score_string = format_scores(scores)
    return urlencode(
        [
            ("score", score_string),
            ("digest", fingerprint(score_string)),
            ("edition", Edition(edition).value),
        ]
    )
