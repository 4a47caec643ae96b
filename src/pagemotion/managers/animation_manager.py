"""
Animation Manager - root of the animation layer

Wires the visibility observer, trigger record, scroll effects, property
animator and counters together and owns their lifecycle.

State machine:
    UNINITIALIZED → ACTIVE → DISPOSED
    UNINITIALIZED → DISABLED     (reduced motion, or host lacks a capability)

No transition leaves DISABLED or DISPOSED.
"""

from __future__ import annotations

import asyncio
import re
from typing import Any, Dict, List, Optional

from pagemotion.engine.counter import CounterAnimation
from pagemotion.engine.frame_scheduler import AsyncioFrameScheduler
from pagemotion.engine.property_animator import PropertyAnimator
from pagemotion.engine.scroll_effects import ScrollDrivenEffects, ScrollThresholdEffect
from pagemotion.engine.trigger_record import TriggerRecord
from pagemotion.engine.visibility_observer import VisibilityObserver
from pagemotion.errors import HostCapabilityError
from pagemotion.host.dom import find, prefers_reduced_motion
from pagemotion.models.animation_task import AnimationTask
from pagemotion.models.config import MotionConfig, clamp_duration, clamp_threshold
from pagemotion.models.easing import get_easing
from pagemotion.models.enums import AnimationKind, EventSource, LogCategory, ManagerState
from pagemotion.models.events import (
    AnimationCompletedEvent,
    ElementTriggeredEvent,
    ManagerStateChangedEvent,
    ScrollStateChangedEvent,
)
from pagemotion.services.event_bus import EventBus
from pagemotion.utils.formatting import parse_number
from pagemotion.utils.logger import get_logger
from pagemotion.utils.rate_limit import TimerHost, resolve_timer_host
from pagemotion.utils.serialization import Serializer

log = get_logger().for_category(LogCategory.SYSTEM)

_PAIR_SEPARATOR = re.compile(r"[;,]")

MOTION_ATTRIBUTE = "data-motion"


def parse_property_targets(value: Optional[str]) -> Dict[str, float]:
    """
    Parse a ``data-animate`` value such as "opacity: 1; translateY: 0"

    Pairs that are not "name: number" are skipped.
    """
    targets: Dict[str, float] = {}
    for pair in _PAIR_SEPARATOR.split(value or ""):
        name, sep, raw = pair.partition(":")
        if not sep or not name.strip():
            continue
        number = parse_number(raw)
        if number is None:
            log.warn("Ignoring non-numeric animate target", pair=pair.strip())
            continue
        targets[name.strip()] = number
    return targets


def parse_motion_kinds(value: Optional[str]) -> List[AnimationKind]:
    """
    Parse a ``data-motion`` value such as "fade-in counter"

    Unknown names are logged and skipped.
    """
    kinds: List[AnimationKind] = []
    for name in (value or "").split():
        try:
            kind = Serializer.str_to_enum(name, AnimationKind)
        except ValueError:
            log.warn("Unknown animation kind ignored", kind=name)
            continue
        if kind not in kinds:
            kinds.append(kind)
    return kinds


class AnimationManager:
    """
    Page-level animation orchestration

    Responsibilities:
    - Read the reduced-motion preference once at start()
    - Observe fade-in, counter and property elements and play each one
      exactly once (TriggerRecord)
    - Toggle the scroll class on the configured element
    - Cancel everything deterministically on dispose()

    Example:
        manager = AnimationManager(page, config=ConfigManager("motion.yaml").load())
        manager.start()
        ...
        manager.dispose()
    """

    def __init__(
        self,
        page: Any,
        config: Optional[MotionConfig] = None,
        scheduler: Any = None,
        timers: Optional[TimerHost] = None,
        event_bus: Optional[EventBus] = None,
    ):
        """
        Args:
            page: Host page
            config: MotionConfig (default: built-in defaults)
            scheduler: FrameScheduler (default: page.frame_scheduler)
            timers: Timer host for the scroll throttle (default: the scheduler,
                then the page, then the running loop)
            event_bus: Bus for lifecycle events (default: a private one)
        """
        self.page = page
        self.config = config or MotionConfig()
        self.scheduler = scheduler
        self.timers = timers or resolve_timer_host(
            scheduler, page, getattr(page, "frame_scheduler", None)
        )
        if self.timers is None:
            log.debug("No timer host yet, scroll throttle resolves on first use")
        self.event_bus = event_bus or EventBus()

        self.record = TriggerRecord()
        self.state = ManagerState.UNINITIALIZED
        self.reduced_motion = False
        self.disabled_reason: Optional[str] = None

        self.observer: Optional[VisibilityObserver] = None
        self.animator: Optional[PropertyAnimator] = None
        self.counters: Optional[CounterAnimation] = None
        self.scroll_effects: Optional[ScrollDrivenEffects] = None

        # element id → (element, kinds)
        self._registered: Dict[int, tuple] = {}

    # ============================================================
    # Lifecycle
    # ============================================================

    def start(self) -> ManagerState:
        """
        Initialise once; later calls are logged no-ops

        Returns:
            The resulting state (ACTIVE or DISABLED)
        """
        if self.state != ManagerState.UNINITIALIZED:
            log.warn("start() ignored", state=self.state.name)
            return self.state

        self.reduced_motion = prefers_reduced_motion(self.page)
        self._collect_elements()
        self.scroll_effects = self._build_scroll_effects()

        if self.reduced_motion:
            return self._disable("reduced motion preferred")

        scheduler = self._resolve_scheduler()
        if scheduler is None:
            return self._disable("no frame scheduler")

        try:
            observer_cfg = self.config.observer
            self.observer = VisibilityObserver(self.page, observer_cfg.threshold, observer_cfg.root_margin)
        except HostCapabilityError as e:
            return self._disable(e.message)

        self.scheduler = scheduler
        self.animator = PropertyAnimator(
            scheduler,
            easing=get_easing(self.config.property.easing),
            on_complete=self._on_animation_complete,
        )
        self.counters = CounterAnimation(
            self.animator,
            thousands_separator=self.config.counter.thousands_separator,
            default_duration=self.config.counter.duration_ms,
        )

        self._set_state(ManagerState.ACTIVE)

        self.observer.on_visible(self._on_visible)
        if self.scroll_effects.effects:
            self.scroll_effects.attach()
            self.scroll_effects.sync()

        for element, _ in list(self._registered.values()):
            self._observe(element)

        log.info("Animation manager active", elements=len(self._registered),
                 scroll_effects=len(self.scroll_effects.effects))
        return self.state

    def dispose(self, clear_record: bool = False) -> None:
        """
        Tear down an ACTIVE manager

        Disconnects the observer, detaches the scroll listener, cancels all
        in-flight animation tasks. Other states: logged no-op.
        """
        if self.state != ManagerState.ACTIVE:
            log.warn("dispose() ignored", state=self.state.name)
            return

        if self.observer is not None:
            self.observer.disconnect()
        if self.scroll_effects is not None:
            self.scroll_effects.dispose()

        cancelled = 0
        if self.animator is not None:
            cancelled = self.animator.active_tasks
            self.animator.dispose()

        if clear_record:
            self.record.reset_all()

        self._set_state(ManagerState.DISPOSED)
        log.info("Animation manager disposed", cancelled_tasks=cancelled)

    # ============================================================
    # Registration & reset
    # ============================================================

    def register(self, element: Any, *kinds: AnimationKind) -> bool:
        """
        Register an element for one-shot animation

        Before start() it is queued; ACTIVE observes it right away;
        DISABLED applies its final state immediately.

        Returns:
            False for a missing element, no kinds, or a disposed manager
        """
        if element is None or not kinds:
            log.warn("register() needs an element and at least one kind")
            return False
        if self.state == ManagerState.DISPOSED:
            log.warn("register() on disposed manager ignored")
            return False

        key = id(element)
        if key in self._registered:
            existing = self._registered[key][1]
            kinds = tuple(existing) + tuple(k for k in kinds if k not in existing)
        self._registered[key] = (element, list(kinds))

        if self.state == ManagerState.ACTIVE:
            self._observe(element)
        elif self.state == ManagerState.DISABLED:
            self._apply_final_state(element, self._registered[key][1])
        return True

    def reset(self, element: Any = None) -> int:
        """
        Allow element(s) to play again

        Clears the trigger record (one element, or everything), removes the
        fade-in visible class and observes again. ACTIVE only.

        Returns:
            Number of elements re-armed
        """
        if self.state != ManagerState.ACTIVE:
            log.warn("reset() ignored", state=self.state.name)
            return 0

        if element is not None:
            entry = self._registered.get(id(element))
            targets = [entry] if entry else []
        else:
            targets = list(self._registered.values())

        rearmed = 0
        for target, kinds in targets:
            if not self.record.reset(target):
                continue
            if AnimationKind.FADE_IN in kinds:
                self._safe_mutation(target, lambda el: el.remove_class(self.config.fade.visible_class))
            self._observe(target)
            rearmed += 1

        log.debug("Trigger record reset", rearmed=rearmed)
        return rearmed

    def has_triggered(self, element: Any) -> bool:
        return self.record.has_triggered(element)

    # ============================================================
    # Internals - wiring
    # ============================================================

    def _collect_elements(self) -> None:
        selectors = (
            (self.config.fade.selector, AnimationKind.FADE_IN),
            (self.config.counter.selector, AnimationKind.COUNTER),
            (self.config.property.selector, AnimationKind.PROPERTY),
        )
        for selector, kind in selectors:
            for element in find(self.page, selector, all=True) or []:
                self.register(element, kind)

        # Generic declaration: data-motion="fade-in counter"
        for element in find(self.page, f"[{MOTION_ATTRIBUTE}]", all=True) or []:
            kinds = parse_motion_kinds(element.get_attribute(MOTION_ATTRIBUTE))
            if kinds:
                self.register(element, *kinds)

    def _build_scroll_effects(self) -> ScrollDrivenEffects:
        scroll_cfg = self.config.scroll
        effects = ScrollDrivenEffects(
            self.page,
            limit=scroll_cfg.throttle_ms,
            timers=self.timers,
            on_transition=self._on_scroll_transition,
        )
        element = find(self.page, scroll_cfg.selector)
        if element is None:
            log.debug("No scroll effect target", selector=scroll_cfg.selector)
        else:
            effects.add(ScrollThresholdEffect(element, scroll_cfg.threshold_px, scroll_cfg.class_name))
        return effects

    def _observe(self, element: Any) -> None:
        if self.observer is None or self.record.has_triggered(element):
            return
        threshold = element.get_attribute("data-threshold") if hasattr(element, "get_attribute") else None
        self.observer.observe(
            element,
            threshold=None if threshold is None else clamp_threshold(threshold, self.config.observer.threshold),
        )

    def _resolve_scheduler(self) -> Any:
        """Injected scheduler, else the page's, else one paced by the running loop"""
        scheduler = self.scheduler or getattr(self.page, "frame_scheduler", None)
        if scheduler is not None:
            return scheduler
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            return None
        log.debug("Page has no frame scheduler, pacing frames on the event loop",
                  fps=self.config.scheduler.fps)
        return AsyncioFrameScheduler(self.config.scheduler.fps, loop=loop)

    def _disable(self, reason: str) -> ManagerState:
        """Apply every registered element's final state; no observers"""
        self.disabled_reason = reason
        self.animator = PropertyAnimator(None, reduced_motion=True)
        self.counters = CounterAnimation(self.animator, self.config.counter.thousands_separator)
        self._set_state(ManagerState.DISABLED)

        for element, kinds in list(self._registered.values()):
            self._apply_final_state(element, kinds)
        if self.scroll_effects is not None:
            self.scroll_effects.sync()

        log.info("Animations disabled", reason=reason, elements=len(self._registered))
        return self.state

    def _apply_final_state(self, element: Any, kinds: List[AnimationKind]) -> None:
        if self.record.try_mark(element):
            for kind in kinds:
                self._play(element, kind)
                self.event_bus.publish(ElementTriggeredEvent(element, kind))

    def _set_state(self, new_state: ManagerState) -> None:
        old_state, self.state = self.state, new_state
        self.event_bus.publish(ManagerStateChangedEvent(old_state, new_state))

    # ============================================================
    # Internals - playback
    # ============================================================

    def _on_visible(self, element: Any) -> None:
        if self.state != ManagerState.ACTIVE:
            return
        if not self.record.try_mark(element):
            log.debug("Duplicate visibility report ignored", element=element)
            return

        self.observer.unobserve(element)
        entry = self._registered.get(id(element))
        for kind in (entry[1] if entry else []):
            self._play(element, kind)
            self.event_bus.publish(ElementTriggeredEvent(element, kind, EventSource.VISIBILITY_OBSERVER))

    def _play(self, element: Any, kind: AnimationKind) -> Optional[AnimationTask]:
        if kind == AnimationKind.FADE_IN:
            self._safe_mutation(element, lambda el: el.add_class(self.config.fade.visible_class))
            return None

        if kind == AnimationKind.COUNTER:
            start = None
            target = parse_number(element.get_attribute("data-target"))
            if target is None:
                # Final value written in the markup: count up to it from 0
                target, start = parse_number(element.text), 0
            if target is None:
                log.warn("Counter without numeric target skipped", element=element)
                return None
            return self.counters.animate(
                element,
                target,
                self._duration_for(element, self.config.counter.duration_ms),
                start=start,
            )

        if kind == AnimationKind.PROPERTY:
            targets = parse_property_targets(element.get_attribute("data-animate"))
            if not targets:
                log.warn("Property element without targets skipped", element=element)
                return None
            return self.animator.animate(
                element,
                targets,
                self._duration_for(element, self.config.property.duration_ms),
                easing=element.get_attribute("data-easing"),
            )

        log.warn(f"Unsupported animation kind {kind}")
        return None

    @staticmethod
    def _duration_for(element: Any, default: float) -> float:
        value = element.get_attribute("data-duration")
        return default if value is None else clamp_duration(value, default)

    @staticmethod
    def _safe_mutation(element: Any, mutate) -> bool:
        try:
            mutate(element)
            return True
        except Exception as e:
            log.error("Element mutation failed", element=element, exception=e)
            return False

    # ============================================================
    # Internals - event forwarding
    # ============================================================

    def _on_scroll_transition(self, effect: ScrollThresholdEffect, active: bool, offset: float) -> None:
        self.event_bus.publish(ScrollStateChangedEvent(effect.class_name, active, offset))

    def _on_animation_complete(self, task: AnimationTask) -> None:
        self.event_bus.publish(AnimationCompletedEvent(task.element, task.end_values))
