"""
Time-Interval scheduling ("Improved SSR").

Priority order for the next item:
1. Recently failed items that are due again (recency + severity score)
2. Due items (overdue hours + difficulty + weak success rate)
3. A new item, only while the learner is doing well
4. The least recently seen item, then catalog index 0
"""

import logging

from zitie.application.algorithms.sampling import first_new_index, iter_records
from zitie.application.clock import SystemClock, local_day_start
from zitie.domain import constants as c
from zitie.domain.models import Catalog, ProgressMap, ProgressRecord, Selection, SessionState
from zitie.domain.ports import Clock, RandomSource, SchedulingAlgorithm
from zitie.domain.tuning import AlgorithmConfig

logger = logging.getLogger(__name__)


def new_cards_seen_today(catalog: Catalog, progress: ProgressMap, now: int) -> int:
    """Count items whose first presentation happened since local midnight."""
    today_start = local_day_start(now)
    return sum(1 for _, record in iter_records(catalog, progress) if record.first_seen >= today_start)


def failed_card_priority(record: ProgressRecord, now: int) -> float:
    minutes_since_seen = (now - record.last_seen) / c.MINUTE
    priority = c.FAILED_RECENCY_WINDOW - minutes_since_seen
    if record.last_difficulty == 1:
        priority += c.FAILED_SEVERITY_BONUS
    return max(priority, 0.0)


def review_priority(record: ProgressRecord, now: int) -> float:
    hours_overdue = (now - record.next_review) / c.HOUR
    difficulty = record.last_difficulty or 3
    return hours_overdue + (6 - difficulty) * 10 + (1 - record.success_rate) * 20


class ImprovedAlgorithm(SchedulingAlgorithm):
    key = "improved"
    name = "Improved SSR"

    def __init__(
        self,
        config: AlgorithmConfig | None = None,
        clock: Clock | None = None,
        rng: RandomSource | None = None,
    ):
        super().__init__(config)
        # Deterministic variant; ``rng`` keeps the constructor uniform.
        self.clock = clock or SystemClock()

    def select_next(
        self, catalog: Catalog, progress: ProgressMap, session: SessionState
    ) -> Selection:
        if not catalog:
            return Selection.empty()

        now = self.clock.now()
        failed: list[tuple[float, int]] = []
        due: list[tuple[float, int]] = []

        for index, record in iter_records(catalog, progress):
            if now < record.next_review:
                continue
            if index in session.recent_failed_cards:
                failed.append((failed_card_priority(record, now), index))
            else:
                due.append((review_priority(record, now), index))

        # Highest priority wins; ties go to the lower catalog index.
        if failed:
            priority, index = max(failed, key=lambda p: (p[0], -p[1]))
            logger.debug(f"Failed card {index} (priority {priority:.1f})")
            return Selection(index=index, item=catalog[index], priority=priority)

        if due:
            priority, index = max(due, key=lambda p: (p[0], -p[1]))
            logger.debug(f"Due card {index} (priority {priority:.1f})")
            return Selection(index=index, item=catalog[index], priority=priority)

        new_index = first_new_index(catalog, progress)
        if new_index is not None and self._may_introduce_new(catalog, progress, session, now):
            logger.debug(f"New card {new_index}")
            return Selection(index=new_index, item=catalog[new_index], is_new=True)

        oldest = min(
            iter_records(catalog, progress),
            key=lambda pair: (pair[1].last_seen, pair[0]),
            default=None,
        )
        if oldest is not None:
            return Selection(index=oldest[0], item=catalog[oldest[0]])

        return Selection(index=0, item=catalog[0], is_new=True)

    def _may_introduce_new(
        self, catalog: Catalog, progress: ProgressMap, session: SessionState, now: int
    ) -> bool:
        if len(session.recent_failed_cards) >= self.config.max_failed_cards_before_new:
            return False
        if session.session_correct_streak < self.config.min_correct_streak_for_new:
            return False
        return new_cards_seen_today(catalog, progress, now) < self.config.max_new_cards_per_day

    def initial_interval(self, difficulty: int) -> int:
        return c.IMPROVED_INITIAL_INTERVALS.get(difficulty, c.IMPROVED_DEFAULT_INITIAL_INTERVAL)

    def next_interval(self, difficulty: int, current_interval: int, success_rate: float) -> int:
        if difficulty == 1:
            return c.IMPROVED_MIN_INTERVAL

        factor = c.IMPROVED_GROWTH_FACTORS.get(difficulty, c.IMPROVED_DEFAULT_GROWTH_FACTOR)
        if success_rate < c.LOW_SUCCESS_RATE:
            factor *= c.LOW_SUCCESS_PENALTY
        elif success_rate > c.HIGH_SUCCESS_RATE:
            factor *= c.HIGH_SUCCESS_BONUS

        interval = min(current_interval * factor, self.config.max_interval)
        return int(max(interval, c.IMPROVED_MIN_INTERVAL))


class AggressiveAlgorithm(ImprovedAlgorithm):
    """Same selection as Improved SSR, with shorter intervals and looser new-card gates."""

    key = "aggressive"
    name = "Aggressive Learning"

    @classmethod
    def default_config(cls) -> AlgorithmConfig:
        return AlgorithmConfig(
            max_new_cards_per_day=15,
            max_failed_cards_before_new=5,
            min_correct_streak_for_new=1,
            max_interval=c.AGGRESSIVE_MAX_INTERVAL,
        )

    def initial_interval(self, difficulty: int) -> int:
        return c.AGGRESSIVE_INITIAL_INTERVALS.get(
            difficulty, c.AGGRESSIVE_DEFAULT_INITIAL_INTERVAL
        )

    def next_interval(self, difficulty: int, current_interval: int, success_rate: float) -> int:
        if difficulty == 1:
            return c.AGGRESSIVE_RESET_INTERVAL

        factor = 1 + (difficulty - 1) * 0.25
        factor *= 1.2 if success_rate > 0.8 else 0.8
        return int(min(current_interval * factor, self.config.max_interval))
