"""Clock implementations: wall clock for hosts, virtual time for tests."""

import time
from datetime import datetime, timedelta

from zitie.domain.ports import Clock


class SystemClock(Clock):
    def now(self) -> int:
        return int(time.time() * 1000)


class ManualClock(Clock):
    """
    Deterministic clock whose time only moves when told to.
    """

    def __init__(self, start: int = 0):
        self._now = int(start)

    def now(self) -> int:
        return self._now

    def advance(self, ms: int) -> int:
        self._now += int(ms)
        return self._now

    def set(self, ms: int) -> None:
        self._now = int(ms)


def local_day_start(now: int) -> int:
    """Epoch ms of local midnight for the day containing ``now``."""
    day = datetime.fromtimestamp(now / 1000).date()
    return int(datetime.combine(day, datetime.min.time()).timestamp() * 1000)


def local_day_end(now: int) -> int:
    """Epoch ms of the last millisecond of the local day containing ``now``."""
    next_day = datetime.fromtimestamp(now / 1000).date() + timedelta(days=1)
    return int(datetime.combine(next_day, datetime.min.time()).timestamp() * 1000) - 1
