"""
Selection helpers shared by the randomised variants.

All randomness comes from an injected ``RandomSource`` so callers can
seed it for deterministic tests.
"""

from collections.abc import Callable, Sequence
from typing import TypeVar

from zitie.domain.constants import MIN_SAMPLING_WEIGHT
from zitie.domain.models import Catalog, ProgressMap, ProgressRecord
from zitie.domain.ports import RandomSource

T = TypeVar("T")


def pick_uniform(items: Sequence[T], rng: RandomSource) -> T | None:
    """Pick one element uniformly at random, or None if empty."""
    if not items:
        return None
    position = int(rng() * len(items))
    return items[min(position, len(items) - 1)]


def pick_among_top(items: Sequence[T], k: int, rng: RandomSource) -> T | None:
    """Pick uniformly among the first ``k`` elements of an already-ranked sequence."""
    return pick_uniform(items[: max(1, k)], rng)


def sampling_weights(scores: Sequence[float]) -> list[float]:
    """
    Convert raw scores into strictly positive sampling weights.

    Scores are shifted by ``max(0, -min + 1)`` and floored at 0.1 so no
    candidate can be locked out.
    """
    if not scores:
        return []
    offset = max(0, -min(scores) + 1)
    return [max(score + offset, MIN_SAMPLING_WEIGHT) for score in scores]


def weighted_random_select(
    items: Sequence[T],
    get_score: Callable[[T], float],
    rng: RandomSource,
) -> T | None:
    """
    Weighted random selection: higher scores are more likely to be drawn.

    Uses a cumulative-sum draw against ``rng() * total_weight``.
    """
    if not items:
        return None
    if len(items) == 1:
        return items[0]

    weights = sampling_weights([get_score(item) for item in items])
    remaining = rng() * sum(weights)

    for item, weight in zip(items, weights):
        remaining -= weight
        if remaining <= 0:
            return item

    return items[-1]


def record_at(progress: ProgressMap, index: int) -> ProgressRecord | None:
    """
    Return the record for ``index``, treating malformed entries as absent.
    """
    record = progress.get(index)
    return record if isinstance(record, ProgressRecord) else None


def iter_records(catalog: Catalog, progress: ProgressMap):
    """Yield ``(index, record)`` for catalog items that have a valid record."""
    for index in range(len(catalog)):
        record = record_at(progress, index)
        if record is not None:
            yield index, record


def first_new_index(catalog: Catalog, progress: ProgressMap) -> int | None:
    """Lowest catalog index with no record, i.e. the most frequent unseen item."""
    for index in range(len(catalog)):
        if record_at(progress, index) is None:
            return index
    return None
