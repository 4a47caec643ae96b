"""
Property Animator

Interpolates numeric element properties over a duration, one step per
frame, through an easing function. With reduced motion enabled the end
values are written synchronously and no frame is ever scheduled.

Known limitation: overlapping animate() calls on the same element and
property are not coalesced. Each task writes on its own frames, so the
most recently scheduled task wins each frame and writes may interleave.
Callers should not issue overlapping requests.
"""

from __future__ import annotations

import functools
import re
from typing import Any, Callable, Dict, Mapping, Optional, Set, Tuple, Union

from pagemotion.models.animation_task import AnimationTask, DoneCallback
from pagemotion.models.config import clamp_duration
from pagemotion.models.easing import EasingFunction, cubic_out, get_easing
from pagemotion.models.enums import LogCategory, TaskState
from pagemotion.utils.logger import get_logger

log = get_logger().for_category(LogCategory.ANIMATION)

ValueReader = Callable[[Any, str], float]
ValueWriter = Callable[[Any, str, float], None]

_CSS_NUMBER = re.compile(r"^\s*(-?\d+(?:\.\d+)?|-?\.\d+)\s*([a-z%]*)\s*$", re.IGNORECASE)


def parse_style_value(value: Any) -> Tuple[float, str]:
    """
    Split a style value into (number, unit)

    "12.5px" -> (12.5, "px"), 0.3 -> (0.3, ""), None / "auto" -> (0.0, "")
    """
    if isinstance(value, (int, float)):
        return float(value), ""
    if value is None:
        return 0.0, ""
    match = _CSS_NUMBER.match(str(value))
    if not match:
        return 0.0, ""
    return float(match.group(1)), match.group(2)


def format_style_value(value: float, unit: str) -> Union[float, str]:
    """Numbers without a unit stay numeric; with a unit they become "12.5px" """
    if not unit:
        return value
    text = f"{value:.4f}".rstrip("0").rstrip(".")
    return f"{text}{unit}"


def read_style(element: Any, name: str) -> float:
    return parse_style_value(element.get_style(name))[0]


class PropertyAnimator:
    """
    Frame-driven numeric interpolation with first-class cancellation

    Args:
        scheduler: FrameScheduler (schedule_frame / cancel_frame)
        reduced_motion: Apply end values immediately, never schedule frames
        easing: Default easing (cubic_out)
        on_complete: Called with every task that completes

    Example:
        animator = PropertyAnimator(scheduler)
        task = animator.animate(card, {"opacity": 1, "translateY": 0}, 400)
        task.add_done_callback(lambda t: card.add_class("settled"))
    """

    def __init__(
        self,
        scheduler: Any = None,
        reduced_motion: bool = False,
        easing: EasingFunction = cubic_out,
        on_complete: Optional[DoneCallback] = None,
    ):
        if scheduler is None and not reduced_motion:
            log.warn("No frame scheduler available, animations complete immediately")
            reduced_motion = True

        self.scheduler = scheduler
        self.reduced_motion = reduced_motion
        self.easing = easing
        self.on_complete = on_complete
        self._tasks: Set[AnimationTask] = set()
        self._disposed = False

    # ------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------

    @property
    def active_tasks(self) -> int:
        return len(self._tasks)

    @property
    def disposed(self) -> bool:
        return self._disposed

    def animate(
        self,
        element: Any,
        targets: Mapping[str, Any],
        duration: Any,
        easing: Union[str, EasingFunction, None] = None,
        reader: Optional[ValueReader] = None,
        writer: Optional[ValueWriter] = None,
    ) -> AnimationTask:
        """
        Animate ``targets`` on ``element`` over ``duration`` ms

        Returns:
            The AnimationTask, which doubles as the completion signal.
            A missing element or a disposed animator yields an already
            cancelled task.
        """
        easing_fn = get_easing(easing, self.easing)
        duration_ms = clamp_duration(duration)
        end_values = self._numeric_targets(targets)

        if self._disposed:
            log.warn("animate() on disposed animator ignored")
            return self._cancelled(element, end_values, duration_ms, easing_fn)
        if element is None:
            log.warn("animate() called with missing element", targets=list(end_values))
            return self._cancelled(element, end_values, duration_ms, easing_fn)

        if writer is None:
            units = {name: parse_style_value(element.get_style(name))[1] for name in end_values}
            writer = functools.partial(self._write_style, units)

        if self.reduced_motion:
            task = AnimationTask(element, dict(end_values), end_values, 0.0, easing_fn)
            self._attach_listeners(task)
            if self._write(task, writer, end_values):
                task.finish(TaskState.COMPLETE)
            else:
                task.finish(TaskState.CANCELLED)
            return task

        reader = reader or read_style
        try:
            start_values = {name: float(reader(element, name)) for name in end_values}
        except Exception as e:
            log.warn("Cannot read start values, animation skipped", element=element, exception=e)
            return self._cancelled(element, end_values, duration_ms, easing_fn)

        task = AnimationTask(element, start_values, end_values, duration_ms, easing_fn)
        task._owner = self
        self._attach_listeners(task)
        self._tasks.add(task)
        self._schedule(task, writer)

        log.debug("Animation scheduled", element=element, duration_ms=duration_ms,
                  properties=", ".join(end_values))
        return task

    def cancel(self, task: AnimationTask) -> None:
        """Stop ``task``; no further frames are scheduled for it"""
        if task.done:
            return
        if task.frame_handle is not None and self.scheduler is not None:
            self.scheduler.cancel_frame(task.frame_handle)
        self._tasks.discard(task)
        task.finish(TaskState.CANCELLED)

    def cancel_all(self) -> int:
        """Cancel every in-flight task; returns how many were cancelled"""
        tasks = list(self._tasks)
        for task in tasks:
            self.cancel(task)
        return len(tasks)

    def dispose(self) -> None:
        """Cancel everything and refuse new work"""
        if self._disposed:
            return
        cancelled = self.cancel_all()
        self._disposed = True
        log.debug("PropertyAnimator disposed", cancelled=cancelled)

    # ------------------------------------------------------------
    # Frame loop
    # ------------------------------------------------------------

    def _schedule(self, task: AnimationTask, writer: ValueWriter) -> None:
        task.frame_handle = self.scheduler.schedule_frame(
            functools.partial(self._step, task, writer)
        )

    def _step(self, task: AnimationTask, writer: ValueWriter, timestamp: float) -> None:
        task.frame_handle = None
        if task.done:
            return

        task.state = TaskState.RUNNING
        progress = task.compute_progress(timestamp)

        if progress >= 1.0:
            values = task.end_values
        else:
            eased = task.easing(progress)
            values = {name: task.value_at(name, eased) for name in task.end_values}

        if not self._write(task, writer, values):
            self._tasks.discard(task)
            task.finish(TaskState.CANCELLED)
            return

        if progress >= 1.0:
            self._tasks.discard(task)
            task.finish(TaskState.COMPLETE)
        else:
            self._schedule(task, writer)

    # ------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------

    def _write(self, task: AnimationTask, writer: ValueWriter, values: Dict[str, float]) -> bool:
        """Apply values; a failing mutation ends this task only"""
        try:
            for name, value in values.items():
                writer(task.element, name, value)
            return True
        except Exception as e:
            log.error("Element mutation failed, task dropped", element=task.element, exception=e)
            return False

    @staticmethod
    def _write_style(units: Dict[str, str], element: Any, name: str, value: float) -> None:
        element.set_style(name, format_style_value(value, units.get(name, "")))

    @staticmethod
    def _numeric_targets(targets: Mapping[str, Any]) -> Dict[str, float]:
        values = {}
        for name, value in (targets or {}).items():
            try:
                values[name] = float(value)
            except (TypeError, ValueError):
                log.warn(f"Non-numeric target for '{name}' skipped", value=repr(value))
        return values

    def _attach_listeners(self, task: AnimationTask) -> None:
        if self.on_complete is None:
            return
        on_complete = self.on_complete

        def notify(finished: AnimationTask) -> None:
            if finished.state == TaskState.COMPLETE:
                on_complete(finished)

        task.add_done_callback(notify)

    @staticmethod
    def _cancelled(element: Any, end_values: Dict[str, float], duration_ms: float,
                   easing: EasingFunction) -> AnimationTask:
        task = AnimationTask(element, {}, end_values, duration_ms, easing)
        task.finish(TaskState.CANCELLED)
        return task


def animate_properties(
    element: Any,
    targets: Mapping[str, Any],
    duration: Any,
    *,
    scheduler: Any = None,
    reduced_motion: bool = False,
    easing: Union[str, EasingFunction, None] = None,
) -> AnimationTask:
    """
    One-off property animation without a long-lived animator

    Example:
        task = animate_properties(hero, {"opacity": 1}, 500, scheduler=page.frame_scheduler)
        await task.wait()
    """
    animator = PropertyAnimator(scheduler, reduced_motion=reduced_motion)
    return animator.animate(element, targets, duration, easing=easing)
