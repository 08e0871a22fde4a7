"""
Position-Interval scheduling ("Mastery Based").

Scheduling runs on session position (the number of items shown so far)
instead of wall-clock time. Every rating pushes the item a random number
of positions into the future, drawn from a band keyed by difficulty.
"""

import logging
import random
from enum import Enum

from zitie.application.algorithms.sampling import (
    first_new_index,
    iter_records,
    pick_among_top,
)
from zitie.domain import constants as c
from zitie.domain.models import Catalog, ProgressMap, ProgressRecord, Selection, SessionState
from zitie.domain.ports import Clock, RandomSource, SchedulingAlgorithm
from zitie.domain.tuning import AlgorithmConfig

logger = logging.getLogger(__name__)


class MasteryLevel(str, Enum):
    NEW = "new"
    LEARNING = "learning"
    FAMILIAR = "familiar"
    MASTERED = "mastered"


def classify_mastery(record: ProgressRecord | None) -> MasteryLevel:
    """
    Read-only mastery label for display.

    mastered: 5+ reviews at 80%+ success, or 3+ reviews at 90%+.
    familiar: 3+ reviews at 60%+ success.
    """
    if record is None or record.review_count <= 0:
        return MasteryLevel.NEW

    reviews, rate = record.review_count, record.success_rate
    if (reviews >= 5 and rate >= 0.8) or (reviews >= 3 and rate >= 0.9):
        return MasteryLevel.MASTERED
    if reviews >= 3 and rate >= 0.6:
        return MasteryLevel.FAMILIAR
    return MasteryLevel.LEARNING


class MasteryAlgorithm(SchedulingAlgorithm):
    key = "mastery"
    name = "Mastery Based"

    def __init__(
        self,
        config: AlgorithmConfig | None = None,
        clock: Clock | None = None,
        rng: RandomSource | None = None,
    ):
        # Selection is clock-free; ``clock`` keeps the constructor uniform.
        super().__init__(config)
        self.rng = rng or random.random

    @classmethod
    def default_config(cls) -> AlgorithmConfig:
        return AlgorithmConfig(failed_card_timeout=c.MASTERY_FAILED_CARD_TIMEOUT)

    def select_next(
        self, catalog: Catalog, progress: ProgressMap, session: SessionState
    ) -> Selection:
        """
        Advance the session position by one and pick the item for it.

        The position counter in ``session`` is the only state touched.
        """
        if not catalog:
            return Selection.empty()

        session.position += 1
        position = session.position

        due_now: list[tuple[int, int]] = []  # (positions overdue, index)
        due_soon: list[tuple[int, int]] = []  # (positions until due, index)
        due_later: list[tuple[int, int]] = []

        for index, record in iter_records(catalog, progress):
            if record.target_review_position is None:
                # Records from time-based variants carry no position yet.
                due_now.append((0, index))
                continue

            until_due = record.target_review_position - position
            if until_due <= 0:
                due_now.append((-until_due, index))
            elif until_due <= c.DUE_SOON_WINDOW:
                due_soon.append((until_due, index))
            else:
                due_later.append((until_due, index))

        if due_now:
            due_now.sort(key=lambda p: (-p[0], p[1]))
            overdue, index = pick_among_top(due_now, c.DUE_NOW_CANDIDATES, self.rng)
            logger.debug(f"Position {position}: due card {index} ({overdue} overdue)")
            return Selection(index=index, item=catalog[index], priority=overdue)

        new_index = first_new_index(catalog, progress)
        if new_index is not None and session.session_correct_streak >= 1:
            return Selection(index=new_index, item=catalog[new_index], is_new=True)

        for bucket in (due_soon, due_later):
            if bucket:
                until_due, index = min(bucket)
                return Selection(index=index, item=catalog[index], priority=-until_due)

        if new_index is not None:
            return Selection(index=new_index, item=catalog[new_index], is_new=True)

        return Selection(index=0, item=catalog[0])

    def target_review_position(self, difficulty: int, position: int) -> int:
        """Position at which an item rated ``difficulty`` should resurface."""
        band = c.POSITION_BANDS.get(difficulty)
        if band is None:
            return position + c.POSITION_FALLBACK_OFFSET

        low, high = band
        offset = low + int(self.rng() * (high - low + 1))
        return position + min(offset, high)

    def apply_outcome(
        self,
        record: ProgressRecord,
        difficulty: int,
        *,
        selection: Selection,
        session: SessionState,
        catalog: Catalog,
        progress: ProgressMap,
        now: int,
    ) -> None:
        record.target_review_position = self.target_review_position(difficulty, session.position)

    def mastery_level(self, record: ProgressRecord | None) -> MasteryLevel:
        return classify_mastery(record)

    # Intervals are kept on records for compatibility only.
    def initial_interval(self, difficulty: int) -> int:
        return c.PLACEHOLDER_INTERVAL

    def next_interval(self, difficulty: int, current_interval: int, success_rate: float) -> int:
        return c.PLACEHOLDER_INTERVAL
