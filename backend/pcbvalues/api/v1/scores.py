import logging

from fastapi import APIRouter, Depends, Query, status
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from ...components.store.repository import ScoreStore
from ...components.submissions.payload import SubmissionPayload
from ...deps import get_score_store, require_admin
from ...shared.errors import RecordNotFound
from ...shared.utils import parse_bool

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/scores", tags=["Scores"])


class FlagsUpdate(BaseModel):
    flags: int


@router.get("")
def list_scores(store: ScoreStore = Depends(get_score_store)):
    """Population feed: every stored result as ``[name, flags, stats]``."""
    return {"success": True, "scores": [entry.as_tuple() for entry in store.list()]}


@router.get("/{name}")
def find_score(name: str, store: ScoreStore = Depends(get_score_store)):
    entry = store.find(name)
    if entry is None:
        raise RecordNotFound()
    return {"success": True, "score": entry.as_tuple()}


@router.post("")
def submit_score(
    data: SubmissionPayload,
    override: str | None = Query(default=None),
    store: ScoreStore = Depends(get_score_store),
):
    name = data.name.strip()
    existing = store.find(name) if name else None
    if existing is not None and not parse_bool(override):
        logger.info("Name collision for name=%s, asking for override", name)
        return JSONResponse(
            status_code=status.HTTP_409_CONFLICT,
            content={
                "success": False,
                "needs_override": True,
                "error": f"User {name} already exists in the database, do you want to override the last score?",
                "score": existing.as_tuple(),
            },
        )

    store.add(
        name,
        data.vals,
        edition=data.edition,
        digest=data.digest,
        version=data.version,
        answered_at=data.time,
        takes=data.takes,
    )
    return {"success": True, "message": "User successfully inserted into the database"}


@router.patch("/{name}/flags", dependencies=[Depends(require_admin)])
def edit_flags(name: str, data: FlagsUpdate, store: ScoreStore = Depends(get_score_store)):
    entry = store.edit_flags(name, data.flags)
    return {"success": True, "score": entry.as_tuple()}
