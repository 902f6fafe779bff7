import logging
from typing import List, Optional, Tuple

from fastapi import APIRouter, Depends, Query

from ...components.matching.service import rank, summarize_matches
from ...components.scoring.catalog import find_tier, parse_flags
from ...components.scoring.codec import decode, format_scores
from ...components.scoring.digest import verify
from ...components.scoring.quiz import Edition
from ...components.scoring.schemas import Axis, AxisResult, MatchSummary, Question, ResultsResponse
from ...components.store.repository import ScoreStore
from ...deps import get_catalog, get_quiz_config, get_score_store
from ...platform.config import QuizConfig

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/results", tags=["Results"])


def _summary(match) -> MatchSummary:
    return MatchSummary(
        name=match.name,
        flags=match.flags,
        bias=match.bias,
        similarity=round(match.similarity, 1),
    )


@router.get("", response_model=ResultsResponse)
def get_results(
    score: Optional[str] = Query(default=None),
    digest: Optional[str] = Query(default=None),
    edition: Optional[str] = Query(default=None),
    config: QuizConfig = Depends(get_quiz_config),
    catalog: Tuple[List[Question], List[Axis]] = Depends(get_catalog),
    store: ScoreStore = Depends(get_score_store),
):
    """Tiers for a result URL plus its closest matches in the gallery."""
    scores = decode(score, config.axis_count)
    _, axes = catalog

    stored = store.list()
    population = [entry for entry in stored if len(entry.stats) == config.axis_count]
    if len(population) != len(stored):
        logger.warning(
            "Skipped %d stored scores that do not have %d axes",
            len(stored) - len(population),
            config.axis_count,
        )

    ranked = rank(scores, population, config.match_weights)
    closest, others = summarize_matches(ranked)

    return ResultsResponse(
        scores=scores,
        edition=Edition.parse(edition).value,
        digest_valid=verify(format_scores(scores), digest),
        axes=[
            AxisResult(name=a.name, key=a.key, score=s, tier=find_tier(s, a.tiers), labels=a.labels)
            for a, s in zip(axes, scores)
        ],
        closest=_summary(closest) if closest else None,
        others=[_summary(m) for m in others],
        flags=parse_flags(closest.flags) if closest else {},
    )
