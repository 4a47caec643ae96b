"""
Scroll-Driven Effects

Two-state machines toggling a class when the page scrolls past a pixel
threshold. Scroll samples are throttled; transitions are edge-triggered, so
the class is never re-applied or re-removed redundantly.
"""

from typing import Any, Callable, List, Optional

from pagemotion.models.enums import LogCategory
from pagemotion.utils.logger import get_category_logger
from pagemotion.utils.rate_limit import Throttled, TimerHost, throttle

log = get_category_logger(LogCategory.SCROLL)

TransitionListener = Callable[["ScrollThresholdEffect", bool, float], None]


class ScrollThresholdEffect:
    """
    Class toggle bound to one scroll threshold

    offset > threshold  → active, class applied
    offset <= threshold → inactive, class removed
    """

    def __init__(self, element: Any, threshold: float, class_name: str = "scrolled"):
        self.element = element
        self.threshold = threshold
        self.class_name = class_name
        self.active = False
        self.transitions = 0

    def update(self, offset: float) -> bool:
        """
        Feed one scroll sample

        Returns:
            True if the state flipped on this sample
        """
        past = offset > self.threshold
        if past == self.active:
            return False

        self.active = past
        self.transitions += 1
        if self.element is not None:
            if past:
                self.element.add_class(self.class_name)
            else:
                self.element.remove_class(self.class_name)

        log.debug(
            "Scroll threshold crossed",
            state="on" if past else "off",
            offset=offset,
            threshold=self.threshold,
        )
        return True


class ScrollDrivenEffects:
    """
    Feeds throttled scroll samples to a set of ScrollThresholdEffects

    Example:
        effects = ScrollDrivenEffects(page, [ScrollThresholdEffect(navbar, 100)], limit=16)
        effects.attach()
        ...
        effects.dispose()
    """

    def __init__(
        self,
        page: Any,
        effects: Optional[List[ScrollThresholdEffect]] = None,
        limit: float = 16,
        timers: Optional[TimerHost] = None,
        on_transition: Optional[TransitionListener] = None,
    ):
        self.page = page
        self.effects: List[ScrollThresholdEffect] = list(effects or [])
        self.on_transition = on_transition
        self._handler: Throttled = throttle(self._on_scroll, limit, timers)
        self._attached = False

    @property
    def attached(self) -> bool:
        return self._attached

    def add(self, effect: ScrollThresholdEffect) -> None:
        self.effects.append(effect)

    def attach(self) -> bool:
        """Start listening to the page's scroll event"""
        if self._attached or self.page is None:
            return False
        self.page.add_event_listener("scroll", self._handler)
        self._attached = True
        return True

    def sync(self) -> None:
        """Evaluate the current offset immediately (bypasses the throttle)"""
        self.apply(self._current_offset())

    def apply(self, offset: float) -> int:
        """Push one sample through every effect; returns number of transitions"""
        flips = 0
        for effect in self.effects:
            if effect.update(offset):
                flips += 1
                if self.on_transition is not None:
                    self.on_transition(effect, effect.active, offset)
        return flips

    def dispose(self) -> None:
        """Detach the listener and drop the armed throttle timer"""
        if self._attached:
            self.page.remove_event_listener("scroll", self._handler)
            self._attached = False
        self._handler.cancel()

    def _on_scroll(self, *args: Any) -> None:
        self.apply(self._current_offset())

    def _current_offset(self) -> float:
        try:
            return float(self.page.scroll_y)
        except Exception as e:
            log.warn("Cannot read scroll offset", exception=e)
            return 0.0
