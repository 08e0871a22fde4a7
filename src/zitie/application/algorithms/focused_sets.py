"""
Score-Weighted scheduling ("Focused Sets").

Rules:
- The learner only sees cards from a small active set.
- Cards enter the set by weighted random draw: higher score, more likely.
- Ratings move the score: 1 -> +5, 2 -> +3, 3 -> +1, 4 -> -1, 5 -> -3.
- A card whose score drops below its score at entry has graduated
  (it got easier) and leaves the set; the next pick backfills the gap.
- Cards that keep getting harder stay in the set indefinitely.

Scores are unbounded in both directions.
"""

import logging
import random

from zitie.application.algorithms.sampling import pick_uniform, record_at, weighted_random_select
from zitie.domain.constants import PLACEHOLDER_INTERVAL, SCORE_DELTAS
from zitie.domain.models import Catalog, ProgressMap, ProgressRecord, Selection, SessionState
from zitie.domain.ports import Clock, RandomSource, SchedulingAlgorithm
from zitie.domain.tuning import AlgorithmConfig

logger = logging.getLogger(__name__)


def update_score(current_score: int, difficulty: int) -> int:
    return current_score + SCORE_DELTAS.get(difficulty, 0)


class FocusedSetsAlgorithm(SchedulingAlgorithm):
    key = "score"
    name = "Focused Sets"

    def __init__(
        self,
        config: AlgorithmConfig | None = None,
        clock: Clock | None = None,
        rng: RandomSource | None = None,
    ):
        # Selection is clock-free; ``clock`` keeps the constructor uniform.
        super().__init__(config)
        self.rng = rng or random.random

    def card_score(self, record: ProgressRecord | None) -> int:
        if record is None or record.score is None:
            return self.config.initial_score
        return record.score

    def active_set(self, catalog: Catalog, progress: ProgressMap) -> list[int]:
        return [
            index
            for index in range(len(catalog))
            if (record := record_at(progress, index)) is not None and record.in_set
        ]

    def set_candidates(
        self, catalog: Catalog, progress: ProgressMap, session: SessionState
    ) -> list[int]:
        """
        Items eligible for admission: everything not currently in the set.

        The item that graduated on the last rating is held back while
        any other candidate exists, so a vacancy is filled by someone else.
        """
        candidates = [
            index
            for index in range(len(catalog))
            if (record := record_at(progress, index)) is None or not record.in_set
        ]
        if session.last_graduated is not None and len(candidates) > 1:
            candidates = [i for i in candidates if i != session.last_graduated]
        return candidates

    def select_next(
        self, catalog: Catalog, progress: ProgressMap, session: SessionState
    ) -> Selection:
        if not catalog:
            return Selection.empty()

        members = self.active_set(catalog, progress)

        if len(members) < self.config.set_size:
            candidates = self.set_candidates(catalog, progress, session)
            if candidates:
                index = weighted_random_select(
                    candidates,
                    lambda i: self.card_score(record_at(progress, i)),
                    self.rng,
                )
                logger.debug(f"Admitting card {index} to set ({len(members)} members)")
                return Selection(
                    index=index,
                    item=catalog[index],
                    add_to_set=True,
                    is_new=record_at(progress, index) is None,
                    priority=self.card_score(record_at(progress, index)),
                )

        # Equal exposure once admitted; weighting only governs admission.
        if members:
            index = pick_uniform(members, self.rng)
            return Selection(index=index, item=catalog[index])

        return Selection(index=0, item=catalog[0], add_to_set=True, is_new=True)

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
        current = self.card_score(record)

        if selection.add_to_set and not record.in_set:
            if len(self.active_set(catalog, progress)) < self.config.set_size:
                record.in_set = True
                record.set_entry_score = current
                session.last_graduated = None

        record.score = update_score(current, difficulty)

        if (
            record.in_set
            and record.set_entry_score is not None
            and record.score < record.set_entry_score
        ):
            record.in_set = False
            session.last_graduated = selection.index
            logger.info(
                f"Card {selection.index} graduated (score {record.score} < {record.set_entry_score})"
            )

    def initial_interval(self, difficulty: int) -> int:
        return PLACEHOLDER_INTERVAL

    def next_interval(self, difficulty: int, current_interval: int, success_rate: float) -> int:
        return PLACEHOLDER_INTERVAL
