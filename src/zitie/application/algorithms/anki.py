"""Classic Anki-style scheduling: fixed ease multipliers, long intervals."""

import logging

from zitie.application.algorithms.improved import new_cards_seen_today
from zitie.application.algorithms.sampling import first_new_index, iter_records
from zitie.application.clock import SystemClock
from zitie.domain import constants as c
from zitie.domain.models import Catalog, ProgressMap, Selection, SessionState
from zitie.domain.ports import Clock, RandomSource, SchedulingAlgorithm
from zitie.domain.tuning import AlgorithmConfig

logger = logging.getLogger(__name__)


class AnkiAlgorithm(SchedulingAlgorithm):
    key = "anki"
    name = "Classic Anki"

    def __init__(
        self,
        config: AlgorithmConfig | None = None,
        clock: Clock | None = None,
        rng: RandomSource | None = None,
    ):
        super().__init__(config)
        # Deterministic variant; ``rng`` keeps the constructor uniform.
        self.clock = clock or SystemClock()

    @classmethod
    def default_config(cls) -> AlgorithmConfig:
        return AlgorithmConfig(max_new_cards_per_day=10, max_interval=c.ANKI_MAX_INTERVAL)

    def select_next(
        self, catalog: Catalog, progress: ProgressMap, session: SessionState
    ) -> Selection:
        if not catalog:
            return Selection.empty()

        now = self.clock.now()
        seen = list(iter_records(catalog, progress))

        due = [(now - record.next_review, index) for index, record in seen if now >= record.next_review]
        if due:
            overdue, index = max(due, key=lambda p: (p[0], -p[1]))
            return Selection(index=index, item=catalog[index], priority=overdue)

        new_index = first_new_index(catalog, progress)
        if (
            new_index is not None
            and new_cards_seen_today(catalog, progress, now) < self.config.max_new_cards_per_day
        ):
            return Selection(index=new_index, item=catalog[new_index], is_new=True)

        # Daily new-card limit reached: study ahead on whatever is due soonest.
        if seen:
            index, _ = min(seen, key=lambda pair: (pair[1].next_review, pair[0]))
            logger.debug(f"Studying ahead on card {index}")
            return Selection(index=index, item=catalog[index])

        if new_index is not None:
            return Selection(index=new_index, item=catalog[new_index], is_new=True)
        return Selection(index=0, item=catalog[0], is_new=True)

    def initial_interval(self, difficulty: int) -> int:
        return c.ANKI_INITIAL_INTERVALS.get(difficulty, c.ANKI_DEFAULT_INITIAL_INTERVAL)

    def next_interval(self, difficulty: int, current_interval: int, success_rate: float) -> int:
        if difficulty == 1:
            return c.ANKI_RESET_INTERVAL

        ease = self.config.starting_ease
        factors = {
            2: ease * 0.6,
            3: ease * 0.8,
            4: ease,
            5: ease * self.config.easy_bonus,
        }
        factor = factors.get(difficulty, ease)
        interval = current_interval * factor * self.config.interval_modifier
        return int(min(interval, self.config.max_interval))
