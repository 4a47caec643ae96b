"""
AnimationTask - one in-flight interpolation

A task is both the unit of work the PropertyAnimator steps each frame and
the completion signal handed back to the caller.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional

from pagemotion.models.easing import EasingFunction, cubic_out
from pagemotion.models.enums import TaskState, LogCategory
from pagemotion.utils.logger import get_category_logger

log = get_category_logger(LogCategory.ANIMATION)

DoneCallback = Callable[["AnimationTask"], None]


@dataclass(eq=False)
class AnimationTask:
    """
    In-flight interpolation of numeric properties on one element

    Attributes:
        element: Host element being mutated (non-owning)
        start_values: Values read when the task was created
        end_values: Exact values written on completion
        duration_ms: Interpolation length; <= 0 completes on the first frame
        easing: Maps progress to eased progress
        start_time: Timestamp of the first frame (None until then)
        progress: Last computed linear progress in [0, 1]
        frame_handle: Pending scheduler handle, None when nothing is scheduled
    """
    element: Any
    start_values: Dict[str, float]
    end_values: Dict[str, float]
    duration_ms: float
    easing: EasingFunction = cubic_out
    start_time: Optional[float] = None
    progress: float = 0.0
    state: TaskState = TaskState.PENDING
    frame_handle: Optional[int] = None
    _callbacks: List[DoneCallback] = field(default_factory=list, repr=False)
    _waiters: List[asyncio.Future] = field(default_factory=list, repr=False)
    # PropertyAnimator stepping this task, if any
    _owner: Any = field(default=None, repr=False)

    # ------------------------------------------------------------
    # Status
    # ------------------------------------------------------------

    @property
    def done(self) -> bool:
        """True once the task completed or was cancelled"""
        return self.state in (TaskState.COMPLETE, TaskState.CANCELLED)

    @property
    def cancelled(self) -> bool:
        return self.state == TaskState.CANCELLED

    def compute_progress(self, timestamp: float) -> float:
        """
        Linear progress for a frame timestamp, clamped to [0, 1]

        The first call pins start_time. Progress never decreases, even if a
        host hands out an out-of-order timestamp.
        """
        if self.start_time is None:
            self.start_time = timestamp

        if self.duration_ms <= 0:
            progress = 1.0
        else:
            elapsed = max(0.0, timestamp - self.start_time)
            progress = min(elapsed / self.duration_ms, 1.0)

        self.progress = max(self.progress, progress)
        return self.progress

    def value_at(self, name: str, eased: float) -> float:
        start = self.start_values.get(name, 0.0)
        return start + (self.end_values[name] - start) * eased

    # ------------------------------------------------------------
    # Completion signal
    # ------------------------------------------------------------

    def add_done_callback(self, callback: DoneCallback) -> None:
        """
        Call ``callback(task)`` when the task finishes

        Runs immediately if the task is already done.
        """
        if self.done:
            callback(self)
        else:
            self._callbacks.append(callback)

    async def wait(self) -> "AnimationTask":
        """Await completion or cancellation from a running event loop"""
        if self.done:
            return self
        future = asyncio.get_running_loop().create_future()
        self._waiters.append(future)
        await future
        return self

    def cancel(self) -> None:
        """Stop the task through its animator so no further frames run"""
        if self._owner is not None:
            self._owner.cancel(self)
        else:
            self.finish(TaskState.CANCELLED)

    def finish(self, state: TaskState) -> None:
        """Move to a terminal state and notify listeners (once)"""
        if self.done:
            return
        self.state = state
        self.frame_handle = None
        if state == TaskState.COMPLETE:
            self.progress = 1.0

        callbacks, self._callbacks = self._callbacks, []
        for callback in callbacks:
            try:
                callback(self)
            except Exception as e:
                log.error("Done callback failed", callback=getattr(callback, "__name__", repr(callback)),
                          exception=e)

        waiters, self._waiters = self._waiters, []
        for future in waiters:
            if not future.done():
                future.set_result(self)
