"""Tests for the time-interval variants (Improved SSR and Aggressive)."""

import pytest

from zitie.application.algorithms.improved import (
    AggressiveAlgorithm,
    ImprovedAlgorithm,
    failed_card_priority,
    new_cards_seen_today,
    review_priority,
)
from zitie.domain.constants import DAY, HOUR, MINUTE, SECOND
from zitie.domain.models import SessionState


@pytest.fixture
def algo(clock):
    return ImprovedAlgorithm(clock=clock)


class TestSelection:
    def test_empty_catalog_returns_empty_selection(self, algo):
        selection = algo.select_next((), {}, SessionState())
        assert not selection
        assert selection.index is None

    def test_fresh_catalog_falls_back_to_first_item_flagged_new(self, algo, make_items):
        catalog = make_items(3)
        selection = algo.select_next(catalog, {}, SessionState())

        assert selection.index == 0
        assert selection.item == catalog[0]
        assert selection.is_new

    def test_failed_and_due_beats_due(self, algo, clock, catalog, make_record):
        now = clock.now()
        progress = {
            0: make_record(last_seen=now - 2 * HOUR, next_review=now - 5 * HOUR),
            3: make_record(last_seen=now - 1 * MINUTE, next_review=now, last_difficulty=1),
        }
        session = SessionState(recent_failed_cards={3})

        selection = algo.select_next(catalog, progress, session)
        assert selection.index == 3

    def test_failed_but_not_due_is_not_prioritised(self, algo, clock, catalog, make_record):
        now = clock.now()
        progress = {
            2: make_record(next_review=now + 10 * MINUTE),
            4: make_record(next_review=now - MINUTE),
        }
        session = SessionState(recent_failed_cards={2})

        assert algo.select_next(catalog, progress, session).index == 4

    def test_failed_cards_ranked_by_recency_and_severity(self, algo, clock, catalog, make_record):
        now = clock.now()
        progress = {
            1: make_record(last_seen=now - 5 * MINUTE, next_review=now, last_difficulty=2),
            2: make_record(last_seen=now - 50 * MINUTE, next_review=now, last_difficulty=1),
        }
        session = SessionState(recent_failed_cards={1, 2})

        # 995 vs 950 + 100
        assert algo.select_next(catalog, progress, session).index == 2

    def test_due_cards_ranked_by_review_priority(self, algo, clock, catalog, make_record):
        now = clock.now()
        progress = {
            1: make_record(next_review=now - HOUR, last_difficulty=4, success_rate=1.0),
            5: make_record(next_review=now - HOUR, last_difficulty=2, success_rate=0.5),
        }
        assert algo.select_next(catalog, progress, SessionState()).index == 5

    def test_due_ties_go_to_lower_index(self, algo, clock, catalog, make_record):
        now = clock.now()
        progress = {
            6: make_record(next_review=now - HOUR),
            2: make_record(next_review=now - HOUR),
        }
        assert algo.select_next(catalog, progress, SessionState()).index == 2

    def test_due_card_beats_new_card(self, algo, clock, catalog, make_record):
        now = clock.now()
        progress = {4: make_record(next_review=now - MINUTE)}

        selection = algo.select_next(catalog, progress, SessionState(session_correct_streak=5))
        assert selection.index == 4
        assert not selection.is_new

    def test_new_card_requires_correct_streak(self, algo, clock, catalog, make_record):
        now = clock.now()
        progress = {0: make_record(next_review=now + HOUR)}

        no_streak = algo.select_next(catalog, progress, SessionState(session_correct_streak=1))
        assert no_streak.index == 0
        assert not no_streak.is_new

        streak = algo.select_next(catalog, progress, SessionState(session_correct_streak=2))
        assert streak.index == 1
        assert streak.is_new

    def test_new_card_blocked_by_active_failures(self, algo, clock, catalog, make_record):
        now = clock.now()
        progress = {i: make_record(next_review=now + HOUR) for i in range(3)}
        session = SessionState(recent_failed_cards={0, 1, 2}, session_correct_streak=5)

        assert not algo.select_next(catalog, progress, session).is_new

    def test_daily_new_card_limit(self, algo, clock, catalog, make_record):
        now = clock.now()
        progress = {
            i: make_record(last_seen=now - (10 - i) * MINUTE, next_review=now + HOUR)
            for i in range(5)
        }
        session = SessionState(session_correct_streak=3)

        selection = algo.select_next(catalog, progress, session)
        assert not selection.is_new
        assert selection.index == 0  # oldest last_seen

    def test_items_first_seen_yesterday_do_not_count_toward_limit(
        self, algo, clock, catalog, make_record
    ):
        yesterday = clock.now() - DAY
        progress = {
            i: make_record(now=yesterday, next_review=clock.now() + HOUR) for i in range(5)
        }
        session = SessionState(session_correct_streak=3)

        selection = algo.select_next(catalog, progress, session)
        assert selection.is_new
        assert selection.index == 5

    def test_malformed_record_counts_as_new(self, algo, make_items):
        catalog = make_items(2)
        selection = algo.select_next(catalog, {0: {"junk": True}}, SessionState())
        assert selection.index == 0
        assert selection.is_new


class TestPriorities:
    def test_failed_priority_never_negative(self, clock, make_record):
        record = make_record(last_seen=clock.now() - 3 * DAY, last_difficulty=2)
        assert failed_card_priority(record, clock.now()) == 0

    def test_review_priority_formula(self, clock, make_record):
        now = clock.now()
        record = make_record(next_review=now - 2 * HOUR, last_difficulty=3, success_rate=0.5)
        assert review_priority(record, now) == pytest.approx(2 + 30 + 10)

    def test_new_cards_seen_today(self, clock, catalog, make_record):
        now = clock.now()
        progress = {0: make_record(), 1: make_record(now=now - 2 * DAY)}
        assert new_cards_seen_today(catalog, progress, now) == 1


class TestIntervals:
    @pytest.mark.parametrize(
        "difficulty, expected",
        [(1, 30 * SECOND), (2, 2 * MINUTE), (3, 15 * MINUTE), (4, 4 * HOUR), (5, DAY), (9, 15 * MINUTE)],
    )
    def test_initial_interval(self, algo, difficulty, expected):
        assert algo.initial_interval(difficulty) == expected

    def test_difficulty_one_resets(self, algo):
        for current in (30 * SECOND, HOUR, 6 * DAY):
            for rate in (0.0, 0.5, 1.0):
                assert algo.next_interval(1, current, rate) == 30 * SECOND

    def test_growth_factors(self, algo):
        assert algo.next_interval(4, MINUTE, 0.7) == 2 * MINUTE
        assert algo.next_interval(5, MINUTE, 0.95) == pytest.approx(MINUTE * 3.9, abs=1)
        assert algo.next_interval(3, MINUTE, 0.4) == pytest.approx(MINUTE * 0.78, abs=1)

    def test_floor_and_cap(self, algo):
        assert algo.next_interval(2, SECOND, 0.3) == 30 * SECOND
        assert algo.next_interval(5, 6 * DAY, 1.0) == 7 * DAY

    @pytest.mark.parametrize("difficulty", [2, 3, 4, 5])
    @pytest.mark.parametrize("rate", [0.2, 0.7, 0.95])
    def test_monotonic_in_current_interval(self, algo, difficulty, rate):
        currents = [30 * SECOND * 2**k for k in range(16)]
        results = [algo.next_interval(difficulty, c, rate) for c in currents]
        assert results == sorted(results)
        assert max(results) <= algo.config.max_interval


class TestAggressive:
    def test_config_is_looser(self):
        config = AggressiveAlgorithm.default_config()
        assert config.max_new_cards_per_day == 15
        assert config.max_failed_cards_before_new == 5
        assert config.min_correct_streak_for_new == 1
        assert config.max_interval == 3 * DAY

    def test_uses_own_gate_for_new_cards(self, clock, catalog, make_record):
        algo = AggressiveAlgorithm(clock=clock)
        progress = {0: make_record(next_review=clock.now() + HOUR)}

        selection = algo.select_next(catalog, progress, SessionState(session_correct_streak=1))
        assert selection.is_new

    def test_intervals(self):
        algo = AggressiveAlgorithm()
        assert algo.initial_interval(1) == 15 * SECOND
        assert algo.initial_interval(5) == 2 * HOUR
        assert algo.next_interval(1, HOUR, 1.0) == 15 * SECOND
        assert algo.next_interval(3, HOUR, 0.9) == pytest.approx(HOUR * 1.5 * 1.2, abs=1)
        assert algo.next_interval(5, 2 * DAY, 1.0) == 3 * DAY
