import pytest

from zitie.domain.models import Item, ProgressRecord, Selection, SessionState
from zitie.domain.tuning import AlgorithmConfig


class TestProgressRecord:
    def test_first_review(self):
        record = ProgressRecord.first_review(
            now=1_000, difficulty=2, correct=False, interval=120_000, item_text="人"
        )

        assert record.first_seen == record.last_seen == 1_000
        assert record.review_count == 1
        assert record.success_count == 0
        assert record.success_rate == 0.0
        assert record.next_review == 121_000
        assert record.history == [2]
        assert record.item_text == "人"

    def test_register_review(self, make_record):
        record = make_record(now=0)
        record.register_review(now=5_000, difficulty=1, correct=False)

        assert record.review_count == 2
        assert record.success_rate == 0.5
        assert record.last_difficulty == 1
        assert record.last_seen == 5_000
        assert record.history == [3, 1]

    def test_round_trip_keeps_variant_fields(self, make_record):
        record = make_record(
            target_review_position=12, consecutive_good=2, in_bucket=True, in_set=True, score=-4
        )
        assert ProgressRecord.from_dict(record.to_dict()) == record

    def test_from_camel_case(self):
        record = ProgressRecord.from_dict(
            {
                "character": "我",
                "firstSeen": 100,
                "lastSeen": 900,
                "reviewCount": 4,
                "successCount": 3,
                "successRate": 0.1,
                "lastDifficulty": 5,
                "interval": 60000,
                "nextReview": 60900,
                "history": [1, 3, 4, 5],
                "consecutiveGood": 2,
                "wasUnmastered": True,
                "inBucket": True,
                "setEntryScore": 3,
                "score": 1,
                "unrelated": "ignored",
            }
        )

        assert record.item_text == "我"
        assert record.first_seen == 100
        assert record.success_rate == 0.75
        assert record.consecutive_good == 2
        assert record.was_unmastered
        assert record.in_bucket
        assert record.set_entry_score == 3
        assert record.target_review_position is None

    def test_missing_optional_fields_get_defaults(self):
        record = ProgressRecord.from_dict({"lastSeen": 500, "reviewCount": 1, "interval": 10})

        assert record.first_seen == 500
        assert record.next_review == 510
        assert record.last_difficulty == 3
        assert record.history == []

    @pytest.mark.parametrize(
        "data, error",
        [
            ({"reviewCount": 1}, KeyError),
            ({"lastSeen": 1, "reviewCount": 0}, ValueError),
            ({"lastSeen": "yesterday", "reviewCount": 1}, ValueError),
            ({"lastSeen": 1, "reviewCount": 1, "history": "1,2"}, TypeError),
            (["not", "a", "dict"], TypeError),
        ],
    )
    def test_malformed_data_raises(self, data, error):
        with pytest.raises(error):
            ProgressRecord.from_dict(data)


class TestSessionAndSelection:
    def test_session_reset(self):
        session = SessionState(
            recent_failed_cards={1, 2}, session_correct_streak=3, today_reviews=9, position=4,
            last_graduated=2,
        )
        session.reset()
        assert session == SessionState()

    def test_selection_truthiness(self):
        assert not Selection.empty()
        assert Selection(index=0, item=Item(text="的"))

    def test_item_defaults(self):
        item = Item(text="一")
        assert item.definition == "No definition"
        assert item.level is None


class TestAlgorithmConfig:
    def test_with_overrides(self):
        base = AlgorithmConfig()
        changed = base.with_overrides({"set_size": 8, "bucket_size": None, "nope": 1})

        assert changed.set_size == 8
        assert changed.bucket_size == base.bucket_size
        assert base.set_size == 5

    def test_empty_overrides_return_same_config(self):
        base = AlgorithmConfig()
        assert base.with_overrides(None) is base
        assert base.with_overrides({"unknown": 1}) is base

    def test_to_dict(self):
        assert AlgorithmConfig().to_dict()["mastered_review_chance"] == 0.5
