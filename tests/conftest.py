import random
from datetime import datetime

import pytest

from zitie.application.clock import ManualClock
from zitie.domain.models import Item, ProgressRecord

# Midday local time keeps "today" comfortably away from midnight.
NOON = int(datetime(2024, 3, 15, 12, 0, 0).timestamp() * 1000)

CHARACTERS = [
    ("的", "de", "possessive particle"),
    ("一", "yī", "one"),
    ("是", "shì", "to be"),
    ("不", "bù", "not"),
    ("了", "le", "completed action marker"),
    ("人", "rén", "person"),
    ("我", "wǒ", "I; me"),
    ("在", "zài", "at; in"),
    ("有", "yǒu", "to have"),
    ("他", "tā", "he; him"),
]


def _make_items(count: int) -> tuple[Item, ...]:
    items = []
    for rank in range(count):
        text, pinyin, definition = CHARACTERS[rank % len(CHARACTERS)]
        items.append(Item(text=text, phonetic=pinyin, definition=definition, frequency_rank=rank + 1))
    return tuple(items)


def _make_record(now: int = NOON, **overrides) -> ProgressRecord:
    """A record seen once at ``now`` and rated 3, with field overrides."""
    record = ProgressRecord.first_review(now=now, difficulty=3, correct=True, interval=60_000)
    for key, value in overrides.items():
        setattr(record, key, value)
    return record


@pytest.fixture
def clock():
    return ManualClock(NOON)


@pytest.fixture
def rng():
    return random.Random(1234).random


@pytest.fixture
def catalog():
    return _make_items(10)


@pytest.fixture
def mock_home(tmp_path, monkeypatch):
    """Mocks Path.home() to point to a temp dir."""
    home = tmp_path / "home"
    home.mkdir()

    # Isolate config files from the developer's real home directory
    monkeypatch.setenv("HOME", str(home))
    for name in ("ZITIE_ALGORITHM", "ZITIE_CATALOG_PATH", "ZITIE_PROGRESS_PATH"):
        monkeypatch.delenv(name, raising=False)
    return home


@pytest.fixture
def make_items():
    return _make_items


@pytest.fixture
def make_record():
    return _make_record
