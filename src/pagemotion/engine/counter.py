"""
Counter Animation

Counts an element's text up (or down) to a target number. Numeric
specialisation of the PropertyAnimator: the value is rendered as an
integer string instead of a style property, and the last frame always
shows the exact target.
"""

from typing import Any, Optional

from pagemotion.engine.property_animator import PropertyAnimator
from pagemotion.models.animation_task import AnimationTask
from pagemotion.models.enums import LogCategory
from pagemotion.utils.formatting import format_number, parse_number
from pagemotion.utils.logger import get_category_logger

log = get_category_logger(LogCategory.ANIMATION)

COUNTER_PROPERTY = "value"


class CounterAnimation:
    """
    Example:
        counters = CounterAnimation(animator, thousands_separator=",")
        counters.animate(stat_el, 12500, duration=2000)   # "0" … "12,500"
    """

    def __init__(self, animator: PropertyAnimator, thousands_separator: str = "",
                 default_duration: float = 2000):
        self.animator = animator
        self.thousands_separator = thousands_separator
        self.default_duration = default_duration

    def animate(self, element: Any, target: Any, duration: Optional[float] = None,
                easing: Any = None, start: Optional[float] = None) -> AnimationTask:
        """
        Animate displayed text to ``target``

        Counting starts at ``start`` when given, otherwise at the number the
        element currently shows (0 if none).
        """
        reader = self._read if start is None else (lambda el, name: float(start))
        return self.animator.animate(
            element,
            {COUNTER_PROPERTY: target},
            self.default_duration if duration is None else duration,
            easing=easing,
            reader=reader,
            writer=self._write,
        )

    def render(self, value: float) -> str:
        return format_number(value, self.thousands_separator)

    def _read(self, element: Any, name: str) -> float:
        value = parse_number(element.text)
        return 0.0 if value is None else value

    def _write(self, element: Any, name: str, value: float) -> None:
        element.text = self.render(value)
