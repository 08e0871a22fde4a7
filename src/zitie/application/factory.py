"""
Algorithm Factory
Centralizes the logic for turning a variant name into a ready-to-use algorithm.
"""

import logging
from typing import Any

from zitie.application.algorithms import (
    AggressiveAlgorithm,
    AnkiAlgorithm,
    BucketAlgorithm,
    FocusedSetsAlgorithm,
    ImprovedAlgorithm,
    MasteryAlgorithm,
)
from zitie.domain.ports import Clock, RandomSource, SchedulingAlgorithm

logger = logging.getLogger(__name__)

ALGORITHMS: dict[str, type[SchedulingAlgorithm]] = {
    "improved": ImprovedAlgorithm,
    "anki": AnkiAlgorithm,
    "aggressive": AggressiveAlgorithm,
    "mastery": MasteryAlgorithm,
    "bucket": BucketAlgorithm,
    "score": FocusedSetsAlgorithm,
}

ALIASES = {"focused": "score"}

DEFAULT_ALGORITHM = "bucket"


def resolve_algorithm_name(name: str | None) -> str:
    """
    Map a user-supplied name onto a registered variant.

    Unknown names fall back to the default variant instead of failing.
    """
    key = (name or "").strip().lower()
    key = ALIASES.get(key, key)
    if key in ALGORITHMS:
        return key

    if name:
        logger.warning(f"Unknown algorithm '{name}', using '{DEFAULT_ALGORITHM}'")
    return DEFAULT_ALGORITHM


def create_algorithm(
    name: str | None = DEFAULT_ALGORITHM,
    overrides: dict[str, Any] | None = None,
    *,
    clock: Clock | None = None,
    rng: RandomSource | None = None,
) -> SchedulingAlgorithm:
    """
    Returns the algorithm registered under ``name`` with its default
    configuration, optionally adjusted by ``overrides``.
    """
    algorithm_cls = ALGORITHMS[resolve_algorithm_name(name)]
    config = algorithm_cls.default_config().with_overrides(overrides)
    return algorithm_cls(config=config, clock=clock, rng=rng)


def available_algorithms() -> list[tuple[str, str]]:
    """(name, display name) for every registered variant."""
    return [(key, cls.name) for key, cls in ALGORITHMS.items()]
