import heapq
import itertools
from dataclasses import dataclass, field
from typing import Any, Callable, Tuple

import pytest

from pagemotion.engine.frame_scheduler import ManualFrameScheduler
from pagemotion.host.geometry import Rect
from pagemotion.host.memory_page import MemoryPage
from pagemotion.models.enums import LogLevel
from pagemotion.utils.logger import configure_logger


@dataclass(order=True)
class FakeTimerHandle:
    due: float
    seq: int
    callback: Callable[..., Any] = field(compare=False)
    args: Tuple[Any, ...] = field(compare=False, default=())
    cancelled: bool = field(compare=False, default=False)

    def cancel(self) -> None:
        self.cancelled = True


class FakeTimers:
    """
    Deterministic timer host (same call_later contract as an asyncio loop)

    Time is kept in milliseconds; call_later takes seconds like asyncio.
    """

    def __init__(self):
        self.now = 0.0
        self._queue = []
        self._seq = itertools.count()

    def call_later(self, delay, callback, *args):
        handle = FakeTimerHandle(round(self.now + delay * 1000, 6), next(self._seq), callback, args)
        heapq.heappush(self._queue, handle)
        return handle

    def advance(self, ms):
        target = self.now + ms
        while self._queue and self._queue[0].due <= target:
            handle = heapq.heappop(self._queue)
            if handle.cancelled:
                continue
            self.now = handle.due
            handle.callback(*handle.args)
        self.now = target

    def advance_to(self, t):
        self.advance(t - self.now)

    @property
    def armed(self):
        return sum(1 for h in self._queue if not h.cancelled)


@pytest.fixture(autouse=True)
def quiet_logger():
    configure_logger(LogLevel.ERROR, use_colors=False)
    yield
    configure_logger(LogLevel.INFO)


@pytest.fixture
def timers():
    return FakeTimers()


@pytest.fixture
def scheduler():
    return ManualFrameScheduler(frame_ms=16)


@pytest.fixture
def page(scheduler):
    """1280x800 viewport, 3000px tall document"""
    return MemoryPage(viewport_width=1280, viewport_height=800, frame_scheduler=scheduler)


@pytest.fixture
def below_fold():
    """Rect for an element fully below the initial viewport"""
    return Rect(left=0, top=1200, width=400, height=200)
