"""
Domain models for the scheduling core.

These are pure data structures with no I/O or external dependencies.
"""

from collections.abc import Sequence
from dataclasses import asdict, dataclass, field, fields
from typing import Any


@dataclass(frozen=True)
class Item:
    """
    A single learnable catalog entry.

    Attributes:
        text: The character (or word) being practised.
        phonetic: Pronunciation key shown as the prompt (pinyin).
        definition: English gloss shown alongside the prompt.
        frequency_rank: Lower is more frequent; the catalog is sorted by it.
        level: Proficiency tag (e.g. HSK level).
    """

    text: str
    phonetic: str = ""
    definition: str = "No definition"
    frequency_rank: int = 0
    level: str | None = None


# camelCase field names used by browser localStorage exports.
_CAMEL_CASE_KEYS = {
    "firstSeen": "first_seen",
    "lastSeen": "last_seen",
    "reviewCount": "review_count",
    "successCount": "success_count",
    "successRate": "success_rate",
    "lastDifficulty": "last_difficulty",
    "nextReview": "next_review",
    "targetReviewPosition": "target_review_position",
    "consecutiveGood": "consecutive_good",
    "wasUnmastered": "was_unmastered",
    "masteredAt": "mastered_at",
    "inBucket": "in_bucket",
    "inSet": "in_set",
    "setEntryScore": "set_entry_score",
    "character": "item_text",
}


@dataclass
class ProgressRecord:
    """
    Per-item learning state, keyed by the item's catalog index.

    A record only exists once the item has been presented, so
    ``review_count`` is always >= 1 and ``success_rate`` is always defined.
    Build new records with :meth:`first_review`.
    """

    first_seen: int
    last_seen: int
    review_count: int
    success_count: int
    success_rate: float
    last_difficulty: int
    interval: int
    next_review: int
    history: list[int] = field(default_factory=list)
    item_text: str | None = None

    # Position-Interval
    target_review_position: int | None = None

    # Bucket-Rotation
    consecutive_good: int = 0
    was_unmastered: bool = False
    mastered_at: int | None = None
    in_bucket: bool = False

    # Score-Weighted
    in_set: bool = False
    set_entry_score: int | None = None
    score: int | None = None

    @classmethod
    def first_review(
        cls,
        *,
        now: int,
        difficulty: int,
        correct: bool,
        interval: int,
        item_text: str | None = None,
    ) -> "ProgressRecord":
        success_count = 1 if correct else 0
        return cls(
            first_seen=now,
            last_seen=now,
            review_count=1,
            success_count=success_count,
            success_rate=float(success_count),
            last_difficulty=difficulty,
            interval=interval,
            next_review=now + interval,
            history=[difficulty],
            item_text=item_text,
        )

    def register_review(self, *, now: int, difficulty: int, correct: bool) -> None:
        """Apply the shared bookkeeping of one more rating."""
        self.review_count += 1
        self.last_difficulty = difficulty
        self.last_seen = now
        self.history.append(difficulty)
        if correct:
            self.success_count += 1
        self.success_rate = self.success_count / self.review_count

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "ProgressRecord":
        """
        Build a record from stored data.

        Accepts snake_case keys and the camelCase keys of browser exports.
        Raises KeyError, ValueError or TypeError on malformed data.
        """
        if not isinstance(data, dict):
            raise TypeError(f"Expected a mapping, got {type(data).__name__}")

        known = {f.name for f in fields(cls)}
        normalized: dict[str, Any] = {}
        for key, value in data.items():
            name = _CAMEL_CASE_KEYS.get(key, key)
            if name in known:
                normalized[name] = value

        review_count = int(normalized.get("review_count", 0))
        if review_count < 1:
            raise ValueError("Progress record without any review")

        success_count = int(normalized.get("success_count", 0))
        last_seen = int(normalized["last_seen"])
        interval = int(normalized.get("interval", 0))
        history = normalized.get("history") or []
        if not isinstance(history, list):
            raise TypeError("history must be a list")

        return cls(
            first_seen=int(normalized.get("first_seen", last_seen)),
            last_seen=last_seen,
            review_count=review_count,
            success_count=success_count,
            success_rate=success_count / review_count,
            last_difficulty=int(normalized.get("last_difficulty", 3)),
            interval=interval,
            next_review=int(normalized.get("next_review", last_seen + interval)),
            history=[int(h) for h in history],
            item_text=normalized.get("item_text"),
            target_review_position=_optional_int(normalized.get("target_review_position")),
            consecutive_good=int(normalized.get("consecutive_good") or 0),
            was_unmastered=bool(normalized.get("was_unmastered", False)),
            mastered_at=_optional_int(normalized.get("mastered_at")),
            in_bucket=bool(normalized.get("in_bucket", False)),
            in_set=bool(normalized.get("in_set", False)),
            set_entry_score=_optional_int(normalized.get("set_entry_score")),
            score=_optional_int(normalized.get("score")),
        )


def _optional_int(value: Any) -> int | None:
    if value is None:
        return None
    return int(value)


@dataclass
class SessionState:
    """
    Ephemeral context shared across calls within one learning session.

    ``recent_failed_cards`` is a prioritisation hint only: entries expire
    on their own after the variant's failed-card timeout.
    """

    recent_failed_cards: set[int] = field(default_factory=set)
    session_correct_streak: int = 0
    today_reviews: int = 0
    position: int = 0  # Items shown so far (Position-Interval clock)
    last_graduated: int | None = None

    def reset(self) -> None:
        self.recent_failed_cards.clear()
        self.session_correct_streak = 0
        self.today_reviews = 0
        self.position = 0
        self.last_graduated = None


@dataclass(frozen=True)
class Selection:
    """
    Result of a scheduling decision.

    An empty selection (``index is None``) signals an empty catalog and
    evaluates as falsy.
    """

    index: int | None
    item: Item | None
    is_new: bool = False
    add_to_bucket: bool = False
    add_to_set: bool = False
    is_mastery_check: bool = False
    priority: float = 0.0

    @classmethod
    def empty(cls) -> "Selection":
        return cls(index=None, item=None)

    def __bool__(self) -> bool:
        return self.index is not None


# Host-facing aliases
Catalog = Sequence[Item]
ProgressMap = dict[int, ProgressRecord]
