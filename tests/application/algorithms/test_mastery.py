import pytest

from zitie.application.algorithms.mastery import MasteryAlgorithm, MasteryLevel, classify_mastery
from zitie.domain.constants import MINUTE, PLACEHOLDER_INTERVAL, POSITION_BANDS
from zitie.domain.models import Selection, SessionState


def fixed(value):
    return lambda: value


@pytest.fixture
def algo(clock):
    return MasteryAlgorithm(clock=clock, rng=fixed(0.0))


class TestTargetPosition:
    @pytest.mark.parametrize("difficulty, band", sorted(POSITION_BANDS.items()))
    def test_band_edges(self, clock, difficulty, band):
        low, high = band
        lowest = MasteryAlgorithm(clock=clock, rng=fixed(0.0))
        highest = MasteryAlgorithm(clock=clock, rng=fixed(0.999))

        assert lowest.target_review_position(difficulty, 10) == 10 + low
        assert highest.target_review_position(difficulty, 10) == 10 + high

    def test_offsets_stay_inside_band(self, clock, rng):
        algo = MasteryAlgorithm(clock=clock, rng=rng)
        for difficulty, (low, high) in POSITION_BANDS.items():
            offsets = {algo.target_review_position(difficulty, 0) for _ in range(500)}
            assert min(offsets) >= low
            assert max(offsets) <= high

    def test_unknown_difficulty_uses_fallback_offset(self, algo):
        assert algo.target_review_position(9, 4) == 14

    def test_apply_outcome_schedules_from_current_position(self, algo, make_record):
        record = make_record()
        session = SessionState(position=7)
        selection = Selection(index=0, item=None)

        algo.apply_outcome(
            record, 3, selection=selection, session=session, catalog=(), progress={0: record}, now=0
        )
        assert record.target_review_position == 16


class TestSelection:
    def test_empty_catalog(self, algo):
        session = SessionState()
        assert not algo.select_next((), {}, session)
        assert session.position == 0

    def test_position_advances_once_per_pick(self, algo, catalog):
        session = SessionState()
        for expected in (1, 2, 3):
            algo.select_next(catalog, {}, session)
            assert session.position == expected

    def test_first_pick_is_first_new_item(self, algo, catalog):
        selection = algo.select_next(catalog, {}, SessionState())
        assert selection.index == 0
        assert selection.is_new

    def test_due_now_picks_among_three_most_overdue(self, clock, catalog, make_record):
        # After the pick advances the position to 1, overdue counts are 5, 3, 2, 1, 0.
        progress = {
            0: make_record(target_review_position=-4),
            1: make_record(target_review_position=-2),
            2: make_record(target_review_position=-1),
            3: make_record(target_review_position=0),
            4: make_record(target_review_position=1),
        }

        first = MasteryAlgorithm(clock=clock, rng=fixed(0.0)).select_next(
            catalog, progress, SessionState()
        )
        third = MasteryAlgorithm(clock=clock, rng=fixed(0.999)).select_next(
            catalog, progress, SessionState()
        )

        assert first.index == 0
        assert first.priority == 5
        assert third.index == 2

    def test_due_now_candidates_with_random_source(self, clock, rng, catalog, make_record):
        progress = {i: make_record(target_review_position=-i) for i in range(6)}
        algo = MasteryAlgorithm(clock=clock, rng=rng)

        picks = {algo.select_next(catalog, progress, SessionState()).index for _ in range(200)}
        assert picks == {3, 4, 5}

    def test_record_without_target_counts_as_due(self, algo, catalog, make_record):
        progress = {
            2: make_record(),
            5: make_record(target_review_position=40),
        }
        selection = algo.select_next(catalog, progress, SessionState(session_correct_streak=3))
        assert selection.index == 2
        assert selection.priority == 0

    def test_new_item_after_correct_answer(self, algo, catalog, make_record):
        progress = {0: make_record(target_review_position=3)}

        selection = algo.select_next(catalog, progress, SessionState(session_correct_streak=1))
        assert selection.index == 1
        assert selection.is_new

    def test_due_soon_before_new_without_streak(self, algo, catalog, make_record):
        progress = {
            0: make_record(target_review_position=50),
            1: make_record(target_review_position=4),
        }

        selection = algo.select_next(catalog, progress, SessionState(session_correct_streak=0))
        assert selection.index == 1
        assert not selection.is_new

    def test_due_later_before_new_without_streak(self, algo, catalog, make_record):
        progress = {
            0: make_record(target_review_position=50),
            1: make_record(target_review_position=30),
        }

        selection = algo.select_next(catalog, progress, SessionState(session_correct_streak=0))
        assert selection.index == 1

    def test_fully_seen_catalog_picks_soonest(self, algo, make_items, make_record):
        catalog = make_items(3)
        progress = {
            0: make_record(target_review_position=90),
            1: make_record(target_review_position=60),
            2: make_record(target_review_position=70),
        }

        assert algo.select_next(catalog, progress, SessionState()).index == 1

    def test_selection_only_touches_position(self, algo, catalog, make_record):
        progress = {0: make_record(target_review_position=1)}
        session = SessionState(session_correct_streak=2, recent_failed_cards={0})

        algo.select_next(catalog, progress, session)

        assert progress[0].target_review_position == 1
        assert session.recent_failed_cards == {0}
        assert session.session_correct_streak == 2


class TestIntervalsAndConfig:
    def test_placeholder_intervals(self, algo):
        assert algo.initial_interval(5) == PLACEHOLDER_INTERVAL
        assert algo.next_interval(1, 123_456, 0.3) == PLACEHOLDER_INTERVAL

    def test_shorter_failed_card_timeout(self):
        assert MasteryAlgorithm.default_config().failed_card_timeout == 5 * MINUTE


class TestClassifyMastery:
    @pytest.mark.parametrize(
        "reviews, successes, level",
        [
            (3, 3, MasteryLevel.MASTERED),
            (5, 4, MasteryLevel.MASTERED),
            (4, 3, MasteryLevel.FAMILIAR),
            (5, 3, MasteryLevel.FAMILIAR),
            (2, 2, MasteryLevel.LEARNING),
            (6, 2, MasteryLevel.LEARNING),
        ],
    )
    def test_levels(self, make_record, reviews, successes, level):
        record = make_record(
            review_count=reviews, success_count=successes, success_rate=successes / reviews
        )
        assert classify_mastery(record) is level

    def test_missing_record_is_new(self):
        assert classify_mastery(None) is MasteryLevel.NEW

    def test_algorithm_delegates(self, algo, make_record):
        assert algo.mastery_level(make_record()) is MasteryLevel.LEARNING
