"""Nearest-neighbour ranking of stored scores against a new result.

bias = sum_a(((|target[a] - candidate[a]| / 100) * weight[a]) ** 2) / sum_a(weight[a])

Squares are summed but not rooted, so one large deviation costs more than
several small ones. 0 means an identical score.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

from ...shared.errors import InvalidWeights, LengthMismatch


@dataclass(frozen=True)
class ScoreEntry:
    """One stored result: ``(name, flags, stats)``."""

    name: str
    flags: int
    stats: Tuple[float, ...]

    @classmethod
    def from_tuple(cls, row: Sequence) -> "ScoreEntry":
        name, flags, stats = row
        return cls(name=name, flags=int(flags), stats=tuple(float(s) for s in stats))

    def as_tuple(self) -> list:
        return [self.name, self.flags, list(self.stats)]


@dataclass(frozen=True)
class MatchResult:
    name: str
    flags: int
    stats: Tuple[float, ...]
    bias: float

    @property
    def similarity(self) -> float:
        return (1 - self.bias) * 100


def resolve_weights(weights: Optional[Sequence[float]], axis_count: int) -> Tuple[float, ...]:
    """Per-axis weights padded with 1 for axes the caller did not weigh."""
    given = list(weights or [])
    if len(given) > axis_count:
        raise InvalidWeights(f"Got {len(given)} weights for {axis_count} axes")
    resolved = tuple(float(w) for w in given) + (1.0,) * (axis_count - len(given))
    if any(not math.isfinite(w) or w < 0 for w in resolved):
        raise InvalidWeights("Match weights must be finite non-negative numbers")
    if sum(resolved) == 0:
        raise InvalidWeights("At least one match weight must be positive")
    # A full-scale deviation on every axis must still give a finite bias.
    if not math.isfinite(sum(w * w for w in resolved)) or not math.isfinite(sum(resolved)):
        raise InvalidWeights("Match weights are too large")
    return resolved


def score_bias(target: Sequence[float], stats: Sequence[float], weights: Sequence[float]) -> float:
    if len(stats) != len(target):
        raise LengthMismatch(f"Expected {len(target)} scores, got {len(stats)}")
    total = 0.0
    for t, s, w in zip(target, stats, weights):
        term = (abs(t - s) / 100) * w
        total += term * term
    bias = total / sum(weights)
    if not math.isfinite(bias):
        raise InvalidWeights("Match weights produced a non-finite bias")
    return bias


def rank(
    target: Sequence[float],
    population: Sequence[ScoreEntry],
    weights: Optional[Sequence[float]] = None,
) -> List[MatchResult]:
    """Order ``population`` from the closest to the furthest match.

    ``sorted`` is stable, so equal biases keep their population order.
    """
    resolved = resolve_weights(weights, len(target))
    scored = [
        MatchResult(
            name=entry.name,
            flags=entry.flags,
            stats=tuple(entry.stats),
            bias=score_bias(target, entry.stats, resolved),
        )
        for entry in population
    ]
    return sorted(scored, key=lambda m: m.bias)


def summarize_matches(ranked: Sequence[MatchResult], others: int = 4) -> Tuple[Optional[MatchResult], List[MatchResult]]:
    """Split a ranking into the closest match and the next ``others`` entries."""
    if not ranked:
        return None, []
    return ranked[0], list(ranked[1 : 1 + others])
