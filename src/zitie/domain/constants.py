"""Centralized constants for the zitie scheduling core.

All durations are integer milliseconds so every layer can do plain
arithmetic against epoch-millisecond timestamps.
"""

# ---------- Time units ----------
SECOND = 1000
MINUTE = 60 * SECOND
HOUR = 60 * MINUTE
DAY = 24 * HOUR

# ---------- Ratings ----------
MIN_DIFFICULTY = 1
MAX_DIFFICULTY = 5
DIFFICULTY_NAMES = {
    1: "No Idea",
    2: "Hard",
    3: "Almost",
    4: "Easy",
    5: "Instant",
}

# Ratings at or below this are failures; above it they are correct.
FAILED_THRESHOLD = 2
# Stricter "correct" gate used where mastery needs quality recall.
MASTERY_CORRECT_THRESHOLD = 4

# ---------- Shared defaults ----------
DEFAULT_MAX_NEW_CARDS_PER_DAY = 5
DEFAULT_MAX_FAILED_CARDS_BEFORE_NEW = 3
DEFAULT_MIN_CORRECT_STREAK_FOR_NEW = 2
DEFAULT_FAILED_CARD_TIMEOUT = 10 * MINUTE
DEFAULT_MAX_INTERVAL = 7 * DAY

# Interval returned by variants that do not schedule on wall-clock time.
PLACEHOLDER_INTERVAL = 1 * SECOND

# ---------- Time-Interval ("improved") ----------
IMPROVED_MIN_INTERVAL = 30 * SECOND
IMPROVED_INITIAL_INTERVALS = {
    1: 30 * SECOND,
    2: 2 * MINUTE,
    3: 15 * MINUTE,
    4: 4 * HOUR,
    5: 1 * DAY,
}
IMPROVED_DEFAULT_INITIAL_INTERVAL = 15 * MINUTE
IMPROVED_GROWTH_FACTORS = {2: 1.1, 3: 1.3, 4: 2.0, 5: 3.0}
IMPROVED_DEFAULT_GROWTH_FACTOR = 1.5
LOW_SUCCESS_RATE = 0.5
LOW_SUCCESS_PENALTY = 0.6
HIGH_SUCCESS_RATE = 0.9
HIGH_SUCCESS_BONUS = 1.3

# Failed-card priority: recency window in minutes plus a severity bonus.
FAILED_RECENCY_WINDOW = 1000
FAILED_SEVERITY_BONUS = 100

# ---------- Aggressive ----------
AGGRESSIVE_INITIAL_INTERVALS = {
    1: 15 * SECOND,
    2: 1 * MINUTE,
    3: 5 * MINUTE,
    4: 30 * MINUTE,
    5: 2 * HOUR,
}
AGGRESSIVE_DEFAULT_INITIAL_INTERVAL = 5 * MINUTE
AGGRESSIVE_RESET_INTERVAL = 15 * SECOND
AGGRESSIVE_MAX_INTERVAL = 3 * DAY

# ---------- Classic ("anki") ----------
ANKI_INITIAL_INTERVALS = {
    1: 1 * MINUTE,
    2: 10 * MINUTE,
    3: 1 * DAY,
    4: 4 * DAY,
    5: 7 * DAY,
}
ANKI_DEFAULT_INITIAL_INTERVAL = 1 * DAY
ANKI_RESET_INTERVAL = 1 * MINUTE
ANKI_MAX_INTERVAL = 365 * DAY

# ---------- Position-Interval ("mastery") ----------
# Inclusive ranges of session positions until an item resurfaces.
POSITION_BANDS = {
    1: (1, 3),
    2: (4, 8),
    3: (9, 20),
    4: (21, 50),
    5: (51, 100),
}
POSITION_FALLBACK_OFFSET = 10
DUE_SOON_WINDOW = 5
DUE_NOW_CANDIDATES = 3
MASTERY_FAILED_CARD_TIMEOUT = 5 * MINUTE

# ---------- Bucket-Rotation ----------
DEFAULT_BUCKET_SIZE = 5
DEFAULT_MASTERY_THRESHOLD = 3
DEFAULT_MASTERED_REVIEW_CHANCE = 0.5

# ---------- Score-Weighted ("focused sets") ----------
DEFAULT_SET_SIZE = 5
DEFAULT_INITIAL_SCORE = 0
SCORE_DELTAS = {1: 5, 2: 3, 3: 1, 4: -1, 5: -3}
MIN_SAMPLING_WEIGHT = 0.1
