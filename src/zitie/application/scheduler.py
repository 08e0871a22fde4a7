"""
Scheduler facade: the host's single entry point into the scheduling core.

Keeps the read phase (``pick_next``) and the write phase
(``record_outcome``) separate: selection never touches the progress map,
and recording an outcome is the only place records and session counters
change.
"""

import logging
from typing import Any

from zitie.application.clock import SystemClock
from zitie.application.factory import create_algorithm, resolve_algorithm_name
from zitie.application.timers import TimerQueue
from zitie.domain.constants import MAX_DIFFICULTY, MIN_DIFFICULTY
from zitie.domain.models import Catalog, ProgressMap, ProgressRecord, Selection, SessionState
from zitie.domain.ports import Clock, RandomSource, SchedulingAlgorithm

logger = logging.getLogger(__name__)


class Scheduler:
    def __init__(
        self,
        algorithm: SchedulingAlgorithm | str | None = None,
        *,
        clock: Clock | None = None,
        rng: RandomSource | None = None,
        timers: TimerQueue | None = None,
        overrides: dict[str, Any] | None = None,
    ):
        """
        Args:
            algorithm: A ready algorithm instance, or a variant name for the factory.
            clock: "Now" source; wall clock by default.
            rng: Uniform [0, 1) generator handed to randomised variants.
            timers: Queue that expires failed-card entries.
            overrides: Config overrides applied when building from a name.
        """
        self.clock = clock or SystemClock()
        self.rng = rng
        self.timers = timers or TimerQueue()
        self.session = SessionState()

        if isinstance(algorithm, SchedulingAlgorithm):
            self.algorithm = algorithm
            self.algorithm_type = algorithm.key
        else:
            self.algorithm_type = resolve_algorithm_name(algorithm)
            self.algorithm = create_algorithm(
                self.algorithm_type, overrides, clock=self.clock, rng=self.rng
            )

    # ----- Read phase -----

    def pick_next(self, catalog: Catalog, progress: ProgressMap) -> Selection:
        self.timers.run_due(self.clock.now())
        selection = self.algorithm.select_next(catalog, progress, self.session)
        if not selection:
            logger.info("Nothing to study: catalog is empty")
        return selection

    # ----- Write phase -----

    def record_outcome(
        self,
        catalog: Catalog,
        progress: ProgressMap,
        selection: Selection,
        difficulty: int,
    ) -> ProgressRecord | None:
        """
        Apply a 1-5 rating for the selected item.

        Updates the session counters, creates or updates the item's
        progress record in place and returns it. Empty selections are
        ignored.
        """
        if not selection:
            return None
        if not MIN_DIFFICULTY <= difficulty <= MAX_DIFFICULTY:
            raise ValueError(
                f"Difficulty must be between {MIN_DIFFICULTY} and {MAX_DIFFICULTY}, got {difficulty}"
            )

        now = self.clock.now()
        self.timers.run_due(now)
        index = selection.index
        algo = self.algorithm

        self._update_session(index, difficulty, now)

        correct = algo.is_correct(difficulty)
        record = progress.get(index)
        if isinstance(record, ProgressRecord):
            record.register_review(now=now, difficulty=difficulty, correct=correct)
            record.interval = algo.next_interval(difficulty, record.interval, record.success_rate)
            record.next_review = now + record.interval
        else:
            item = selection.item or (catalog[index] if 0 <= index < len(catalog) else None)
            record = ProgressRecord.first_review(
                now=now,
                difficulty=difficulty,
                correct=correct,
                interval=algo.initial_interval(difficulty),
                item_text=item.text if item else None,
            )
            progress[index] = record

        self.session.today_reviews += 1

        algo.apply_outcome(
            record,
            difficulty,
            selection=selection,
            session=self.session,
            catalog=catalog,
            progress=progress,
            now=now,
        )
        logger.debug(
            f"Recorded difficulty {difficulty} for card {index}: "
            f"{record.review_count} reviews, {record.success_rate:.0%} success"
        )
        return record

    def _update_session(self, index: int, difficulty: int, now: int) -> None:
        failed_cards = self.session.recent_failed_cards

        if self.algorithm.is_failed(difficulty):
            failed_cards.add(index)
            self.session.session_correct_streak = 0
            # Removal only; a newer failure may already have re-added it.
            self.timers.schedule(
                now, self.algorithm.config.failed_card_timeout, lambda: failed_cards.discard(index)
            )
        else:
            self.session.session_correct_streak += 1
            failed_cards.discard(index)

    # ----- Session & algorithm management -----

    def switch_algorithm(self, name: str, overrides: dict[str, Any] | None = None) -> bool:
        """
        Replace the active variant and start a fresh session.

        Returns False when ``name`` resolves to the variant already active.
        """
        algorithm_type = resolve_algorithm_name(name)
        if algorithm_type == self.algorithm_type:
            return False

        self.algorithm_type = algorithm_type
        self.algorithm = create_algorithm(algorithm_type, overrides, clock=self.clock, rng=self.rng)
        self.reset_session()
        logger.info(f"Switched to {self.algorithm.name} algorithm")
        return True

    def reset_session(self) -> None:
        self.timers.cancel_all()
        self.session.reset()

    def algorithm_info(self) -> dict[str, Any]:
        return {
            "type": self.algorithm_type,
            "name": self.algorithm.name,
            "config": self.algorithm.config.to_dict(),
        }

    # ----- Helpers delegated to the active variant -----

    def classify_failed(self, difficulty: int) -> bool:
        return self.algorithm.is_failed(difficulty)

    def classify_correct(self, difficulty: int) -> bool:
        return self.algorithm.is_correct(difficulty)

    def initial_interval(self, difficulty: int) -> int:
        return self.algorithm.initial_interval(difficulty)

    def next_interval(self, difficulty: int, current_interval: int, success_rate: float) -> int:
        return self.algorithm.next_interval(difficulty, current_interval, success_rate)
