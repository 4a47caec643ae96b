"""
Visibility Observer

Event source over the host's viewport-intersection primitive. Reports
"element became sufficiently visible" at most once per observe() call;
deciding whether that report should start an animation is the caller's
job (TriggerRecord).
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional, Sequence, Tuple

from pagemotion.errors import HostCapabilityError
from pagemotion.host.protocols import IntersectionEntry, IntersectionPrimitive
from pagemotion.models.config import clamp_threshold
from pagemotion.models.enums import LogCategory
from pagemotion.utils.logger import get_logger

log = get_logger().for_category(LogCategory.OBSERVER)

VisibleCallback = Callable[[Any], None]
OptionsKey = Tuple[float, str]


@dataclass
class ObservationSubscription:
    """Element ↔ observer relationship for one observe() call"""
    element: Any
    threshold: float
    root_margin: str
    fired: bool = False
    active: bool = True


class VisibilityObserver:
    """
    Per-element "became visible" notifications

    One host primitive is created per distinct (threshold, root_margin)
    pair. The default pair is created eagerly so a host without the
    primitive is detected at construction.

    Example:
        observer = VisibilityObserver(page, threshold=0.1, root_margin="0px 0px -50px 0px")
        observer.on_visible(lambda el: el.add_class("visible"))
        for el in find(page, ".fade-in", all=True):
            observer.observe(el)
    """

    def __init__(self, page: Any, threshold: float = 0.1, root_margin: str = "0px"):
        self.page = page
        self.threshold = clamp_threshold(threshold)
        self.root_margin = root_margin
        self._subscriptions: Dict[int, ObservationSubscription] = {}
        self._primitives: Dict[OptionsKey, IntersectionPrimitive] = {}
        self._callbacks: List[VisibleCallback] = []
        self._connected = True

        self._primitive_for(self.threshold, self.root_margin)

    # ------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------

    @property
    def connected(self) -> bool:
        return self._connected

    @property
    def observed_count(self) -> int:
        return len(self._subscriptions)

    def is_observing(self, element: Any) -> bool:
        return id(element) in self._subscriptions

    def on_visible(self, callback: VisibleCallback) -> None:
        """Register a listener called with each element that became visible"""
        if not self._connected:
            log.warn("on_visible() on disconnected observer ignored")
            return
        self._callbacks.append(callback)

    def observe(
        self,
        element: Any,
        threshold: Optional[float] = None,
        root_margin: Optional[str] = None
    ) -> Optional[ObservationSubscription]:
        """
        Start watching ``element``

        Re-observing an element replaces its subscription, so it may be
        reported once more.

        Returns:
            The subscription, or None for a missing element or a
            disconnected observer
        """
        if not self._connected:
            log.warn("observe() on disconnected observer ignored")
            return None
        if element is None:
            log.warn("observe() called with missing element")
            return None

        threshold = self.threshold if threshold is None else clamp_threshold(threshold, self.threshold)
        root_margin = self.root_margin if root_margin is None else root_margin

        if id(element) in self._subscriptions:
            self.unobserve(element)

        subscription = ObservationSubscription(element, threshold, root_margin)
        self._subscriptions[id(element)] = subscription

        primitive = self._primitive_for(threshold, root_margin)
        primitive.observe(element)
        return subscription

    def unobserve(self, element: Any) -> None:
        """Stop watching ``element``; unknown elements are ignored"""
        subscription = self._subscriptions.pop(id(element), None)
        if subscription is None:
            return
        subscription.active = False
        primitive = self._primitives.get((subscription.threshold, subscription.root_margin))
        if primitive is not None:
            primitive.unobserve(element)

    def disconnect(self) -> None:
        """Stop all callbacks and release every subscription and primitive"""
        if not self._connected:
            return
        self._connected = False

        for subscription in self._subscriptions.values():
            subscription.active = False
        self._subscriptions.clear()
        self._callbacks.clear()

        for primitive in self._primitives.values():
            try:
                primitive.disconnect()
            except Exception as e:
                log.error("Intersection primitive disconnect failed", exception=e)
        self._primitives.clear()

        log.debug("VisibilityObserver disconnected")

    # ------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------

    def _primitive_for(self, threshold: float, root_margin: str) -> IntersectionPrimitive:
        key = (threshold, root_margin)
        primitive = self._primitives.get(key)
        if primitive is not None:
            return primitive

        factory = getattr(self.page, "create_intersection_observer", None)
        primitive = factory(self._handle_entries, threshold, root_margin) if factory else None
        if primitive is None:
            raise HostCapabilityError("create_intersection_observer")

        self._primitives[key] = primitive
        return primitive

    def _handle_entries(self, entries: Sequence[IntersectionEntry]) -> None:
        if not self._connected:
            return

        for entry in entries:
            subscription = self._subscriptions.get(id(entry.target))
            if subscription is None or not subscription.active or subscription.fired:
                continue
            if not entry.is_intersecting or entry.intersection_ratio < subscription.threshold:
                continue

            subscription.fired = True
            log.debug("Element visible", element=entry.target, ratio=f"{entry.intersection_ratio:.2f}")

            for callback in list(self._callbacks):
                if not self._connected:
                    return
                try:
                    callback(entry.target)
                except Exception as e:
                    log.error("Visibility callback failed", element=entry.target, exception=e)
