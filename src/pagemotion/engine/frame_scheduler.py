"""
Frame Scheduler Adapters

"Run this callback before the next repaint" in two flavours:

- AsyncioFrameScheduler: frames paced by the event loop at a target FPS
- ManualFrameScheduler: frames run only when step() is called

Both batch callbacks per frame: everything scheduled before a frame starts
runs in that frame, FIFO; callbacks scheduled from inside a frame run in the
next one. Timestamps are milliseconds and never go backwards.
"""

from __future__ import annotations

import asyncio
import heapq
import itertools
from typing import Any, Callable, Dict, List, Optional, Tuple

from pagemotion.models.enums import LogCategory
from pagemotion.utils.logger import get_logger

log = get_logger().for_category(LogCategory.SCHEDULER)

FrameCallback = Callable[[float], None]


class _FrameQueue:
    """Pending callbacks keyed by handle, in scheduling order"""

    def __init__(self):
        self._handles = itertools.count(1)
        self._pending: Dict[int, FrameCallback] = {}
        self.last_timestamp = 0.0
        self.frames_run = 0

    @property
    def pending(self) -> int:
        return len(self._pending)

    def schedule_frame(self, callback: FrameCallback) -> int:
        handle = next(self._handles)
        self._pending[handle] = callback
        return handle

    def cancel_frame(self, handle: Optional[int]) -> None:
        if handle is not None:
            self._pending.pop(handle, None)

    def cancel_all(self) -> None:
        self._pending.clear()

    def _run_frame(self, timestamp: float) -> int:
        """
        Run every callback queued before this frame started

        One failing callback is logged; the rest of the frame still runs.
        Returns the number of callbacks executed.
        """
        timestamp = max(timestamp, self.last_timestamp)
        self.last_timestamp = timestamp

        batch, self._pending = self._pending, {}
        for handle, callback in batch.items():
            try:
                callback(timestamp)
            except Exception as e:
                log.error(
                    "Frame callback failed",
                    handle=handle,
                    callback=getattr(callback, "__name__", repr(callback)),
                    exception=e,
                )
        self.frames_run += 1
        return len(batch)


class _ManualTimer:
    """Handle returned by ManualFrameScheduler.call_later"""

    __slots__ = ("callback", "args", "cancelled")

    def __init__(self, callback: Callable[..., Any], args: Tuple[Any, ...]):
        self.callback = callback
        self.args = args
        self.cancelled = False

    def cancel(self) -> None:
        self.cancelled = True


class ManualFrameScheduler(_FrameQueue):
    """
    Deterministic scheduler: a frame runs when step() is called

    Also a timer host on the same clock: ``call_later`` timers fire at the
    start of the first frame whose timestamp reaches their due time, so
    throttles and debounces advance together with the frames.

    Example:
        scheduler = ManualFrameScheduler(frame_ms=16)
        task = animator.animate(el, {"opacity": 1}, 100)
        scheduler.run_until_idle()
    """

    def __init__(self, frame_ms: float = 1000 / 60, start: float = 0.0):
        super().__init__()
        self.frame_ms = frame_ms
        self.now = start
        self._timers: List[Tuple[float, int, _ManualTimer]] = []
        self._timer_seq = itertools.count()

    @property
    def pending_timers(self) -> int:
        return sum(1 for _, _, timer in self._timers if not timer.cancelled)

    def call_later(self, delay: float, callback: Callable[..., Any], *args: Any) -> _ManualTimer:
        """Run ``callback(*args)`` once ``delay`` seconds of frame time have passed"""
        timer = _ManualTimer(callback, args)
        heapq.heappush(self._timers, (self.now + delay * 1000, next(self._timer_seq), timer))
        return timer

    def step(self, timestamp: Optional[float] = None) -> int:
        """
        Run one frame

        Args:
            timestamp: Frame time in ms (default: now + frame_ms)
        """
        self.now = self.now + self.frame_ms if timestamp is None else max(self.now, timestamp)
        self._run_timers()
        return self._run_frame(self.now)

    def run_until_idle(self, max_frames: int = 10_000) -> int:
        """Step until nothing is pending; returns frames run"""
        frames = 0
        while self.pending and frames < max_frames:
            self.step()
            frames += 1
        return frames

    def _run_timers(self) -> None:
        while self._timers and self._timers[0][0] <= self.now:
            _, _, timer = heapq.heappop(self._timers)
            if timer.cancelled:
                continue
            try:
                timer.callback(*timer.args)
            except Exception as e:
                log.error("Timer callback failed",
                          callback=getattr(timer.callback, "__name__", repr(timer.callback)), exception=e)


class AsyncioFrameScheduler(_FrameQueue):
    """
    Event-loop paced frames

    A tick is armed with ``loop.call_later`` only while callbacks are
    pending, so an idle page costs nothing.
    """

    def __init__(self, fps: int = 60, loop: Optional[asyncio.AbstractEventLoop] = None):
        super().__init__()
        self.fps = max(1, min(int(fps), 240))
        self.frame_interval = 1.0 / self.fps
        self._loop = loop
        self._tick_handle: Optional[asyncio.TimerHandle] = None

        log.debug("AsyncioFrameScheduler initialized", fps=self.fps)

    @property
    def loop(self) -> asyncio.AbstractEventLoop:
        if self._loop is None:
            self._loop = asyncio.get_running_loop()
        return self._loop

    @property
    def now(self) -> float:
        return self.loop.time() * 1000

    def call_later(self, delay: float, callback: Callable[..., Any], *args: Any) -> asyncio.TimerHandle:
        return self.loop.call_later(delay, callback, *args)

    def schedule_frame(self, callback: FrameCallback) -> int:
        handle = super().schedule_frame(callback)
        if self._tick_handle is None:
            self._tick_handle = self.loop.call_later(self.frame_interval, self._tick)
        return handle

    def cancel_all(self) -> None:
        super().cancel_all()
        if self._tick_handle is not None:
            self._tick_handle.cancel()
            self._tick_handle = None

    def _tick(self) -> None:
        self._tick_handle = None
        self._run_frame(self.now)
        if self.pending and self._tick_handle is None:
            self._tick_handle = self.loop.call_later(self.frame_interval, self._tick)
