"""
Shared FastAPI dependencies: configuration, quiz content, score store, admin check.
"""

import secrets
from functools import lru_cache
from pathlib import Path
from typing import List, Tuple

from fastapi import Depends, Header, HTTPException
from sqlalchemy.orm import Session

from .components.scoring.catalog import load_axes, load_questions
from .components.scoring.schemas import Axis, Question
from .components.store.repository import ScoreStore
from .platform.config import QuizConfig, settings
from .platform.database import get_db
from .shared.errors import CatalogError, ScoringError


def get_quiz_config() -> QuizConfig:
    return settings.quiz_config


@lru_cache(maxsize=4)
def _load_catalog(questions_path: Path, values_path: Path, axis_count: int) -> Tuple[List[Question], List[Axis]]:
    axes = load_axes(values_path)
    try:
        questions = load_questions(questions_path, axis_count)
    except ScoringError as exc:
        raise CatalogError(f"Invalid questions in {questions_path.name}: {exc.message}") from exc
    if len(axes) != axis_count:
        raise CatalogError(f"{values_path.name} defines {len(axes)} axes, expected {axis_count}")
    return questions, axes


def get_catalog(config: QuizConfig = Depends(get_quiz_config)) -> Tuple[List[Question], List[Axis]]:
    return _load_catalog(settings.questions_path, settings.values_path, config.axis_count)


def get_score_store(
    db: Session = Depends(get_db),
    config: QuizConfig = Depends(get_quiz_config),
) -> ScoreStore:
    return ScoreStore(db, axis_count=config.axis_count, max_flags=config.max_flags)


def require_admin(x_admin_token: str | None = Header(default=None)) -> None:
    expected = (settings.ADMIN_TOKEN or "").strip()
    if not expected:
        raise HTTPException(status_code=403, detail="Flag editing is disabled")
    if not x_admin_token or not secrets.compare_digest(expected, x_admin_token):
        raise HTTPException(status_code=403, detail="Invalid admin token")
