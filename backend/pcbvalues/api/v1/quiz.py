import logging
import random
from typing import List, Optional, Tuple

from fastapi import APIRouter, Depends, Query

from ...components.scoring.catalog import select_questions, visible_buttons
from ...components.scoring.codec import format_scores
from ...components.scoring.digest import fingerprint
from ...components.scoring.quiz import Edition, build_result_query, finalize, replay
from ...components.scoring.schemas import Axis, Question, QuizScoreRequest, QuizScoreResponse
from ...deps import get_catalog
from ...platform.brand import brand_result_url

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/quiz", tags=["Quiz"])


def _ordered_questions(questions: List[Question], edition: Edition, seed: Optional[int]) -> List[Question]:
    rng = random.Random(seed) if seed is not None else None
    return select_questions(questions, short=edition is Edition.SHORT, shuffle=seed is not None, rng=rng)


@router.get("/questions")
def list_questions(
    edition: str = Query(default="f", pattern="^[sfSF]$"),
    seed: Optional[int] = Query(default=None),
    catalog: Tuple[List[Question], List[Axis]] = Depends(get_catalog),
):
    """Questions in the order the client must answer them.

    Pass the same ``seed`` to ``POST /quiz/score`` to score a shuffled run.
    """
    questions, _ = catalog
    parsed = Edition.parse(edition)
    ordered = _ordered_questions(questions, parsed, seed)
    return {
        "edition": parsed.value,
        "total": len(ordered),
        "questions": [
            {
                "index": i + 1,
                "text": q.text,
                "yes_no": q.is_yes_no,
                "buttons": list(visible_buttons(q)),
            }
            for i, q in enumerate(ordered)
        ],
    }


@router.get("/values", response_model=List[Axis])
def list_values(catalog: Tuple[List[Question], List[Axis]] = Depends(get_catalog)):
    return catalog[1]


@router.post("/score", response_model=QuizScoreResponse)
def score_quiz(
    data: QuizScoreRequest,
    catalog: Tuple[List[Question], List[Axis]] = Depends(get_catalog),
):
    questions, _ = catalog
    edition = Edition.parse(data.edition)
    ordered = _ordered_questions(questions, edition, data.random_seed)

    state = replay(ordered, edition, data.answers)
    scores = finalize(state)
    score_string = format_scores(scores)
    query = build_result_query(scores, edition)
    logger.info("Scored quiz edition=%s questions=%d", edition.value, state.total)
    return QuizScoreResponse(
        scores=scores,
        score_string=score_string,
        digest=fingerprint(score_string),
        edition=edition.value,
        query=query,
        result_url=brand_result_url(query),
    )
