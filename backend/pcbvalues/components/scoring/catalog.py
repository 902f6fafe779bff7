"""Quiz content loading and small lookups over it.

Questions and axes ship as JSON next to the package (or in ``DATA_DIR``).
"""

from __future__ import annotations

import json
import logging
import math
import random
from pathlib import Path
from typing import Dict, List, Optional, Sequence

from pydantic import TypeAdapter, ValidationError

from ...shared.errors import CatalogError, InvalidFlags, LengthMismatch, OutOfRange
from .schemas import Axis, Question

logger = logging.getLogger(__name__)

RESPONSE_BUTTONS = ("stag", "ag", "neut", "disag", "stdisag")
YES_NO_BUTTONS = (0, len(RESPONSE_BUTTONS) - 1)

FLAG_TABLE: Dict[str, int] = {
    "popular": 0b1,
}

_questions_adapter = TypeAdapter(List[Question])
_axes_adapter = TypeAdapter(List[Axis])


def _read_json(path: Path):
    try:
        with open(path, encoding="utf-8") as fh:
            return json.load(fh)
    except (OSError, json.JSONDecodeError) as exc:
        logger.error("Failed to read quiz content from %s: %s", path, exc)
        raise CatalogError(f"Could not read {Path(path).name}") from exc


def load_axes(path: Path) -> List[Axis]:
    try:
        return _axes_adapter.validate_python(_read_json(path))
    except ValidationError as exc:
        raise CatalogError(f"Invalid axis definitions in {Path(path).name}: {exc.error_count()} errors") from exc


def load_questions(path: Path, axis_count: int) -> List[Question]:
    try:
        questions = _questions_adapter.validate_python(_read_json(path))
    except ValidationError as exc:
        raise CatalogError(f"Invalid questions in {Path(path).name}: {exc.error_count()} errors") from exc
    for i, q in enumerate(questions):
        if len(q.effect) != axis_count:
            raise LengthMismatch(
                f"Question {i + 1} has {len(q.effect)} effects, expected {axis_count}"
            )
    return questions


def select_questions(
    questions: Sequence[Question],
    short: bool = False,
    shuffle: bool = False,
    rng: Optional[random.Random] = None,
) -> List[Question]:
    """Filter to the requested edition and optionally shuffle a copy."""
    selected = [q for q in questions if q.in_short_edition] if short else list(questions)
    if shuffle:
        (rng or random.Random()).shuffle(selected)
    return selected


def button_weight(index: int) -> float:
    """Answer weight of response button ``index`` (0 = strongly agree)."""
    if not 0 <= index < len(RESPONSE_BUTTONS):
        raise OutOfRange(f"Response button {index} does not exist")
    return (2 - index) / 2


def visible_buttons(question: Question) -> Sequence[int]:
    if question.is_yes_no:
        return YES_NO_BUTTONS
    return tuple(range(len(RESPONSE_BUTTONS)))


def find_tier(score: float, tiers: Sequence[str]) -> str:
    """Tier name for a score; tiers run from the highest score to the lowest."""
    index = math.floor((100 - score) / 100 * len(tiers))
    if 0 <= index < len(tiers):
        return tiers[index]
    return tiers[-1]


def parse_flags(flags: int) -> Dict[str, bool]:
    if isinstance(flags, bool) or not isinstance(flags, int) or flags < 0:
        raise InvalidFlags("Invalid number provided")
    return {name: bool(flags & mask) for name, mask in FLAG_TABLE.items()}
