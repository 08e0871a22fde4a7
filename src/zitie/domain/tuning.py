"""
Tunable knobs shared by every scheduling variant.

Not every variant reads every key; each variant's ``default_config``
starts from these defaults and overrides what it needs.
"""

from dataclasses import asdict, dataclass, fields, replace
from typing import Any

from . import constants as c


@dataclass(frozen=True)
class AlgorithmConfig:
    max_new_cards_per_day: int = c.DEFAULT_MAX_NEW_CARDS_PER_DAY
    max_failed_cards_before_new: int = c.DEFAULT_MAX_FAILED_CARDS_BEFORE_NEW
    min_correct_streak_for_new: int = c.DEFAULT_MIN_CORRECT_STREAK_FOR_NEW
    failed_card_timeout: int = c.DEFAULT_FAILED_CARD_TIMEOUT  # ms
    max_interval: int = c.DEFAULT_MAX_INTERVAL  # ms

    # Bucket-Rotation
    bucket_size: int = c.DEFAULT_BUCKET_SIZE
    mastery_threshold: int = c.DEFAULT_MASTERY_THRESHOLD
    mastered_review_chance: float = c.DEFAULT_MASTERED_REVIEW_CHANCE

    # Score-Weighted
    set_size: int = c.DEFAULT_SET_SIZE
    initial_score: int = c.DEFAULT_INITIAL_SCORE

    # Classic
    starting_ease: float = 2.5
    easy_bonus: float = 1.3
    interval_modifier: float = 1.0

    def with_overrides(self, overrides: dict[str, Any] | None = None) -> "AlgorithmConfig":
        """
        Return a copy with the given keys replaced.

        Unknown keys and ``None`` values are ignored.
        """
        if not overrides:
            return self
        known = {f.name for f in fields(self)}
        changes = {k: v for k, v in overrides.items() if k in known and v is not None}
        return replace(self, **changes) if changes else self

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)
