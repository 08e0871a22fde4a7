"""
Bucket-Rotation scheduling ("Bucket Learning").

Learns a bounded working set ("bucket") of items at a time. An item
leaves the bucket once it collects ``mastery_threshold`` consecutive
ratings of 4 or better, and comes back if a later review check fails.
While the bucket has room, each pick is a coin flip between a review of
a mastered item and an admission. Seen items waiting outside the bucket
are admitted before the next unseen item.
"""

import logging
import random

from zitie.application.algorithms.sampling import (
    first_new_index,
    iter_records,
    pick_uniform,
    record_at,
)
from zitie.domain.constants import MASTERY_CORRECT_THRESHOLD, PLACEHOLDER_INTERVAL
from zitie.domain.models import Catalog, ProgressMap, ProgressRecord, Selection, SessionState
from zitie.domain.ports import Clock, RandomSource, SchedulingAlgorithm
from zitie.domain.tuning import AlgorithmConfig

logger = logging.getLogger(__name__)


class BucketAlgorithm(SchedulingAlgorithm):
    key = "bucket"
    name = "Bucket Learning"

    def __init__(
        self,
        config: AlgorithmConfig | None = None,
        clock: Clock | None = None,
        rng: RandomSource | None = None,
    ):
        # Selection is clock-free; ``clock`` keeps the constructor uniform.
        super().__init__(config)
        self.rng = rng or random.random

    def is_mastered(self, record: ProgressRecord | None) -> bool:
        if record is None:
            return False
        if record.consecutive_good < self.config.mastery_threshold:
            return False
        return not record.was_unmastered

    def active_bucket(self, catalog: Catalog, progress: ProgressMap) -> list[int]:
        return [
            index
            for index, record in iter_records(catalog, progress)
            if record.in_bucket and not self.is_mastered(record)
        ]

    def mastered_items(self, catalog: Catalog, progress: ProgressMap) -> list[int]:
        return [
            index for index, record in iter_records(catalog, progress) if self.is_mastered(record)
        ]

    def waiting_items(self, catalog: Catalog, progress: ProgressMap) -> list[int]:
        """
        Seen items that are neither in the bucket nor mastered.

        Items unmastered while the bucket was full, or rated outside a
        bucket pick, wait here and are admitted ahead of unseen items.
        """
        return [
            index
            for index, record in iter_records(catalog, progress)
            if not record.in_bucket and not self.is_mastered(record)
        ]

    def select_next(
        self, catalog: Catalog, progress: ProgressMap, session: SessionState
    ) -> Selection:
        if not catalog:
            return Selection.empty()

        bucket = self.active_bucket(catalog, progress)
        mastered = self.mastered_items(catalog, progress)

        if len(bucket) < self.config.bucket_size:
            pull_mastered = self.rng() < self.config.mastered_review_chance
            if pull_mastered and mastered:
                index = pick_uniform(mastered, self.rng)
                logger.debug(f"Mastery check on card {index}")
                return Selection(index=index, item=catalog[index], is_mastery_check=True)

            waiting = self.waiting_items(catalog, progress)
            if waiting:
                index = waiting[0]
                logger.debug(f"Returning card {index} to bucket ({len(bucket)} active)")
                return Selection(index=index, item=catalog[index], add_to_bucket=True)

            new_index = first_new_index(catalog, progress)
            if new_index is not None:
                logger.debug(f"Adding card {new_index} to bucket ({len(bucket)} active)")
                return Selection(
                    index=new_index, item=catalog[new_index], is_new=True, add_to_bucket=True
                )

        if bucket:
            index = pick_uniform(bucket, self.rng)
            return Selection(index=index, item=catalog[index])

        if mastered:
            index = pick_uniform(mastered, self.rng)
            return Selection(index=index, item=catalog[index], is_mastery_check=True)

        return Selection(
            index=0,
            item=catalog[0],
            is_new=record_at(progress, 0) is None,
            add_to_bucket=True,
        )

    def is_correct(self, difficulty: int) -> bool:
        # Only quality recall counts towards mastery in this variant.
        return difficulty >= MASTERY_CORRECT_THRESHOLD

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
        was_mastered = self.is_mastered(record)

        if selection.add_to_bucket and not was_mastered and not record.in_bucket:
            record.in_bucket = self._has_room(catalog, progress)

        if self.is_correct(difficulty):
            record.consecutive_good += 1
            if not was_mastered and record.consecutive_good >= self.config.mastery_threshold:
                record.mastered_at = now
                record.was_unmastered = False
                record.in_bucket = False
                logger.info(f"Card {selection.index} mastered")
            return

        record.consecutive_good = 0
        if was_mastered or record.mastered_at is not None:
            record.was_unmastered = True
            record.mastered_at = None
            record.in_bucket = False
            record.in_bucket = self._has_room(catalog, progress)
            logger.info(f"Card {selection.index} lost mastery")

    def _has_room(self, catalog: Catalog, progress: ProgressMap) -> bool:
        return len(self.active_bucket(catalog, progress)) < self.config.bucket_size

    def initial_interval(self, difficulty: int) -> int:
        return PLACEHOLDER_INTERVAL

    def next_interval(self, difficulty: int, current_interval: int, success_rate: float) -> int:
        return PLACEHOLDER_INTERVAL
