"""Priority scoring for dancers."""

from __future__ import annotations

from typing import Iterable, NamedTuple

from dance_floor.config import DEFAULT_WEIGHTS, PriorityWeights
from dance_floor.models import DancerRow


class TimestampRange(NamedTuple):
    earliest: int
    latest: int


def compute_priority(
    dancer: DancerRow,
    timestamps: TimestampRange,
    weights: PriorityWeights = DEFAULT_WEIGHTS,
) -> float:
    """Score a dancer by message, payment and how early they signed up.

    The early-signup bonus is interpolated linearly from the full weight at
    the earliest timestamp down to zero at the latest. Dancers without a
    timestamp, or rosters where every timestamp is equal, get the full bonus.
    """
    score = 0.0
    if dancer.wish:
        score += weights.has_message
    if dancer.paid:
        score += weights.has_paid

    earliest, latest = timestamps
    if dancer.ts is not None and earliest != latest:
        normalized = 1 - (dancer.ts - earliest) / (latest - earliest)
        score += normalized * weights.early_signup
    else:
        score += weights.early_signup
    return score


def max_possible_score(weights: PriorityWeights = DEFAULT_WEIGHTS) -> float:
    return weights.has_message + weights.has_paid + weights.early_signup


def get_timestamp_range(dancers: Iterable[DancerRow]) -> TimestampRange:
    """Return the earliest and latest signup, or zeros when none are known."""
    stamps = [dancer.ts for dancer in dancers if dancer.ts is not None]
    if not stamps:
        return TimestampRange(0, 0)
    return TimestampRange(min(stamps), max(stamps))
