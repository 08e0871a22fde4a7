"""
Progress statistics for the host's dashboard.

This is a pure computation module with no I/O; it only reads records.
"""

from collections import Counter
from dataclasses import dataclass, field

from zitie.application.algorithms.mastery import MasteryLevel, classify_mastery
from zitie.application.algorithms.sampling import record_at
from zitie.application.clock import local_day_end, local_day_start
from zitie.domain.models import Catalog, ProgressMap, ProgressRecord


@dataclass
class ProgressSummary:
    total_cards: int
    total_learned: int
    mastered: int
    nearly_mastered: int
    due_today: int
    reviewed_today: int
    mastery_levels: dict[str, int] = field(default_factory=dict)


def is_mastered(record: ProgressRecord) -> bool:
    return record.success_rate >= 0.8 and record.review_count >= 3


def is_nearly_mastered(record: ProgressRecord) -> bool:
    if is_mastered(record):
        return False
    rate, reviews = record.success_rate, record.review_count
    return (0.6 <= rate < 0.8 and reviews >= 2) or (reviews == 2 and rate >= 0.5)


def summarize(catalog: Catalog, progress: ProgressMap, now: int) -> ProgressSummary:
    today_start = local_day_start(now)
    today_end = local_day_end(now)

    levels: Counter[str] = Counter({level.value: 0 for level in MasteryLevel})
    learned = mastered = nearly = due_today = reviewed_today = 0

    for index in range(len(catalog)):
        record = record_at(progress, index)
        levels[classify_mastery(record).value] += 1
        if record is None:
            continue

        learned += 1
        if is_mastered(record):
            mastered += 1
        elif is_nearly_mastered(record):
            nearly += 1
        if record.next_review <= today_end:
            due_today += 1
        if record.last_seen >= today_start:
            reviewed_today += 1

    return ProgressSummary(
        total_cards=len(catalog),
        total_learned=learned,
        mastered=mastered,
        nearly_mastered=nearly,
        due_today=due_today,
        reviewed_today=reviewed_today,
        mastery_levels=dict(levels),
    )
