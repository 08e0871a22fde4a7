"""
Ports (interfaces) for the scheduling core.

These define the contract every scheduling variant implements, plus the
clock and random-source collaborators injected by the host.
"""

from abc import ABC, abstractmethod
from collections.abc import Callable

from .constants import FAILED_THRESHOLD
from .models import Catalog, ProgressMap, ProgressRecord, Selection, SessionState
from .tuning import AlgorithmConfig

# Uniform [0, 1) generator, e.g. ``random.random`` or ``random.Random(7).random``.
RandomSource = Callable[[], float]


class Clock(ABC):
    """Source of "now" as integer epoch milliseconds."""

    @abstractmethod
    def now(self) -> int:
        pass


class SchedulingAlgorithm(ABC):
    """
    Port for a card-scheduling strategy.

    Implementations:
        - ImprovedAlgorithm: time-based intervals with remediation.
        - AggressiveAlgorithm / AnkiAlgorithm: alternate time-based tunings.
        - MasteryAlgorithm: session-position intervals.
        - BucketAlgorithm: bounded working set with mastery rotation.
        - FocusedSetsAlgorithm: score-weighted admission into an active set.
    """

    key: str = ""
    name: str = ""

    def __init__(self, config: AlgorithmConfig | None = None):
        self.config = config or self.default_config()

    @classmethod
    def default_config(cls) -> AlgorithmConfig:
        return AlgorithmConfig()

    @abstractmethod
    def select_next(
        self, catalog: Catalog, progress: ProgressMap, session: SessionState
    ) -> Selection:
        """
        Decide which item to present next.

        Must not mutate ``catalog`` or ``progress``. Returns an empty
        selection for an empty catalog instead of raising.
        """
        pass

    @abstractmethod
    def initial_interval(self, difficulty: int) -> int:
        pass

    @abstractmethod
    def next_interval(self, difficulty: int, current_interval: int, success_rate: float) -> int:
        pass

    def is_failed(self, difficulty: int) -> bool:
        return difficulty <= FAILED_THRESHOLD

    def is_correct(self, difficulty: int) -> bool:
        return difficulty > FAILED_THRESHOLD

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
        """
        Update variant-specific record fields after the shared bookkeeping.

        ``progress`` already contains ``record`` when this runs.
        """
        return None
