"""
Tests for frame scheduler adapters

ManualFrameScheduler is exercised directly; AsyncioFrameScheduler runs on
the pytest-asyncio loop.
"""

import asyncio
from unittest.mock import MagicMock

import pytest

from pagemotion.engine.frame_scheduler import AsyncioFrameScheduler, ManualFrameScheduler


class TestManualFrameScheduler:

    def test_callbacks_run_fifo_with_frame_timestamp(self):
        scheduler = ManualFrameScheduler(frame_ms=16)
        calls = []

        scheduler.schedule_frame(lambda ts: calls.append(("a", ts)))
        scheduler.schedule_frame(lambda ts: calls.append(("b", ts)))
        ran = scheduler.step()

        assert ran == 2
        assert calls == [("a", 16), ("b", 16)]
        assert scheduler.pending == 0

    def test_callback_scheduled_during_frame_runs_next_frame(self):
        scheduler = ManualFrameScheduler(frame_ms=10)
        seen = []

        def first(ts):
            seen.append(ts)
            scheduler.schedule_frame(seen.append)

        scheduler.schedule_frame(first)
        scheduler.step()
        assert seen == [10]

        scheduler.step()
        assert seen == [10, 20]

    def test_cancel_frame(self):
        scheduler = ManualFrameScheduler()
        callback = MagicMock()

        handle = scheduler.schedule_frame(callback)
        scheduler.cancel_frame(handle)
        scheduler.cancel_frame(None)
        scheduler.step()

        callback.assert_not_called()

    def test_handles_are_unique(self):
        scheduler = ManualFrameScheduler()
        handles = {scheduler.schedule_frame(MagicMock()) for _ in range(5)}
        assert len(handles) == 5

    def test_failing_callback_does_not_stop_frame(self):
        scheduler = ManualFrameScheduler()
        after = MagicMock()

        scheduler.schedule_frame(MagicMock(side_effect=RuntimeError("boom")))
        scheduler.schedule_frame(after)
        scheduler.step()

        after.assert_called_once()

    def test_timestamps_never_go_backwards(self):
        scheduler = ManualFrameScheduler(frame_ms=16, start=100)
        seen = []

        scheduler.schedule_frame(seen.append)
        scheduler.step(timestamp=50)
        scheduler.schedule_frame(seen.append)
        scheduler.step()

        assert seen == [100, 116]

    def test_run_until_idle_and_cap(self):
        scheduler = ManualFrameScheduler()

        def forever(ts):
            scheduler.schedule_frame(forever)

        scheduler.schedule_frame(forever)
        assert scheduler.run_until_idle(max_frames=5) == 5
        assert scheduler.pending == 1

        scheduler.cancel_all()
        assert scheduler.run_until_idle() == 0
        assert scheduler.frames_run == 5

    def test_call_later_fires_on_frame_clock(self):
        scheduler = ManualFrameScheduler(frame_ms=16)
        order = []
        scheduler.call_later(0.02, order.append, "timer")
        scheduler.schedule_frame(lambda ts: order.append("frame"))

        scheduler.step()
        assert order == ["frame"]

        scheduler.step()
        assert order == ["frame", "timer"]
        assert scheduler.pending_timers == 0

    def test_call_later_cancel(self):
        scheduler = ManualFrameScheduler(frame_ms=16)
        callback = MagicMock()

        handle = scheduler.call_later(0.01, callback)
        assert scheduler.pending_timers == 1
        handle.cancel()
        scheduler.step()

        callback.assert_not_called()
        assert scheduler.pending_timers == 0

    def test_failing_timer_does_not_stop_others(self):
        scheduler = ManualFrameScheduler(frame_ms=16)
        after = MagicMock()
        scheduler.call_later(0.005, MagicMock(side_effect=RuntimeError("boom")))
        scheduler.call_later(0.01, after)

        scheduler.step()

        after.assert_called_once_with()


class TestAsyncioFrameScheduler:

    def test_call_later_delegates_to_loop(self):
        loop = MagicMock()
        scheduler = AsyncioFrameScheduler(loop=loop)
        callback = MagicMock()

        handle = scheduler.call_later(0.1, callback, 1)

        loop.call_later.assert_called_once_with(0.1, callback, 1)
        assert handle is loop.call_later.return_value


    def test_fps_clamped(self):
        assert AsyncioFrameScheduler(fps=0, loop=MagicMock()).fps == 1
        assert AsyncioFrameScheduler(fps=1000, loop=MagicMock()).fps == 240

    def test_tick_armed_only_when_pending(self):
        loop = MagicMock()
        scheduler = AsyncioFrameScheduler(fps=50, loop=loop)

        loop.call_later.assert_not_called()
        scheduler.schedule_frame(MagicMock())
        scheduler.schedule_frame(MagicMock())

        loop.call_later.assert_called_once_with(pytest.approx(0.02), scheduler._tick)

    def test_cancel_all_cancels_tick(self):
        loop = MagicMock()
        scheduler = AsyncioFrameScheduler(loop=loop)

        scheduler.schedule_frame(MagicMock())
        scheduler.cancel_all()

        loop.call_later.return_value.cancel.assert_called_once()
        assert scheduler.pending == 0

    @pytest.mark.asyncio
    async def test_runs_frames_on_event_loop(self):
        scheduler = AsyncioFrameScheduler(fps=120)
        timestamps = []
        done = asyncio.Event()

        def on_frame(ts):
            timestamps.append(ts)
            if len(timestamps) < 3:
                scheduler.schedule_frame(on_frame)
            else:
                done.set()

        scheduler.schedule_frame(on_frame)
        await asyncio.wait_for(done.wait(), timeout=2)

        assert len(timestamps) == 3
        assert timestamps == sorted(timestamps)
        assert scheduler.pending == 0
        assert scheduler._tick_handle is None
