"""
Shared fixtures: a manually advanced clock for debounce tests and a
recording fake encoder that stands in for the real QR encoder.
"""

import heapq
import itertools
import logging

import pytest
from PIL import Image

from qrstudio.color import RGBColor
from qrstudio.errors import EncodingCapacityExceeded


class _ManualTimer:
    def __init__(self, when: float, callback):
        self.when = when
        self.callback = callback
        self.cancelled = False

    def cancel(self):
        self.cancelled = True


class ManualScheduler:
    """Scheduler whose clock only moves when the test calls advance()."""

    def __init__(self):
        self.now = 0.0
        self._queue = []
        self._seq = itertools.count()

    def call_later(self, delay, callback):
        timer = _ManualTimer(self.now + delay, callback)
        heapq.heappush(self._queue, (timer.when, next(self._seq), timer))
        return timer

    @property
    def outstanding(self) -> int:
        return sum(1 for _, _, t in self._queue if not t.cancelled)

    def advance(self, seconds: float):
        target = self.now + seconds
        while self._queue and self._queue[0][0] <= target:
            when, _, timer = heapq.heappop(self._queue)
            self.now = when
            if not timer.cancelled:
                timer.callback()
        self.now = target


class FakeEncoder:
    """Records every call and returns a flat image sized from the text."""

    def __init__(self, side: int = 21):
        self.side = side
        self.calls = []
        self.fail_on = set()
        self.during_encode = None

    def __call__(self, text, ecc, foreground, background, module_size, width=None):
        self.calls.append(text)
        if self.during_encode is not None:
            hook, self.during_encode = self.during_encode, None
            hook()
        if text in self.fail_on:
            raise EncodingCapacityExceeded(len(text), getattr(ecc, "name", str(ecc)))
        side = width or self.side * module_size
        return Image.new("RGB", (side, side), foreground.as_tuple())


@pytest.fixture
def scheduler():
    return ManualScheduler()


@pytest.fixture
def encoder():
    return FakeEncoder()


@pytest.fixture
def white():
    return RGBColor(255, 255, 255)


@pytest.fixture
def black():
    return RGBColor(0, 0, 0)


@pytest.fixture(autouse=True)
def reset_logging():
    """Drop handlers added by setup_logging() so tests don't leak into each other."""
    yield
    logger = logging.getLogger("qrstudio")
    logger.handlers.clear()
    logger.setLevel(logging.NOTSET)
