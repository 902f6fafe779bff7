"""Score vector <-> URL string codec.

A score vector travels between pages as one-decimal percentages joined with
commas and percent-encoded. Decoding never clamps: a truncated or edited URL
must fail loudly instead of rendering a plausible result.
"""

from __future__ import annotations

import math
import re
from typing import List, Optional, Sequence
from urllib.parse import quote, unquote

from ...shared.errors import LengthMismatch, MissingInput, ParseError, RangeError

# Plain ASCII decimals only: no digit separators, no non-ASCII digits, no inf/nan.
_NUMBER_RE = re.compile(r"[+-]?(?:[0-9]+(?:\.[0-9]*)?|\.[0-9]+)(?:[eE][+-]?[0-9]+)?")


def format_scores(scores: Sequence[float]) -> str:
    """One-decimal, comma-joined score string (the digest input)."""
    return ",".join(f"{float(s):.1f}" for s in scores)


def encode(scores: Sequence[float]) -> str:
    return quote(format_scores(scores), safe="")


def _parse_token(token: str) -> float:
    if not _NUMBER_RE.fullmatch(token):
        raise ParseError(f"Invalid score value: {token!r}")
    try:
        value = float(token)
    except ValueError:
        raise ParseError(f"Invalid score value: {token!r}") from None
    if not math.isfinite(value):
        raise ParseError(f"Invalid score value: {token!r}")
    return value


def decode(raw: Optional[str], expected_count: int) -> List[float]:
    if not raw:
        raise MissingInput()

    tokens = unquote(raw).split(",")
    scores = [_parse_token(t.strip()) for t in tokens]

    if len(scores) != expected_count:
        raise LengthMismatch(f"Expected {expected_count} scores, got {len(scores)}")
    if any(s < 0 or s > 100 for s in scores):
        raise RangeError()
    return scores
