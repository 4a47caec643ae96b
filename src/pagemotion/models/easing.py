"""
Easing Functions

Map normalized elapsed time t (0.0-1.0) to normalized progress.
Used by the property animator, counters and smooth scrolling.
"""

from typing import Callable, Dict, Union

from pagemotion.models.enums import LogCategory
from pagemotion.utils.logger import get_category_logger

log = get_category_logger(LogCategory.ANIMATION)

EasingFunction = Callable[[float], float]


def linear(t: float) -> float:
    """
    Linear easing (constant speed)

    Args:
        t: Progress (0.0 = start, 1.0 = end)

    Returns:
        Progress factor (0.0 to 1.0)
    """
    return t


def ease_in_quad(t: float) -> float:
    """Quadratic ease-in (slow start → fast end)"""
    return t * t


def ease_out_quad(t: float) -> float:
    """Quadratic ease-out (fast start → slow end)"""
    return 1 - (1 - t) * (1 - t)


def quad_in_out(t: float) -> float:
    """Quadratic ease-in-out (accelerate first half, decelerate second half)"""
    return 2 * t * t if t < 0.5 else 1 - 2 * (1 - t) ** 2


def ease_in_cubic(t: float) -> float:
    """Cubic ease-in (very slow start)"""
    return t * t * t


def cubic_out(t: float) -> float:
    """Cubic ease-out (very slow end)"""
    return 1 - (1 - t) ** 3


def ease_in_out_cubic(t: float) -> float:
    """Cubic ease-in-out (very smooth acceleration/deceleration)"""
    return 4 * t ** 3 if t < 0.5 else 1 - (-2 * t + 2) ** 3 / 2


EASINGS: Dict[str, EasingFunction] = {
    "linear": linear,
    "ease_in_quad": ease_in_quad,
    "ease_out_quad": ease_out_quad,
    "quad_in_out": quad_in_out,
    "ease_in_cubic": ease_in_cubic,
    "cubic_out": cubic_out,
    "ease_in_out_cubic": ease_in_out_cubic,
}


def get_easing(
    easing: Union[str, EasingFunction, None],
    default: EasingFunction = cubic_out
) -> EasingFunction:
    """
    Resolve an easing by registry name or pass a callable through

    Unknown names fall back to ``default`` with a warning.
    """
    if easing is None:
        return default
    if callable(easing):
        return easing

    fn = EASINGS.get(str(easing).strip().lower())
    if fn is None:
        log.warn(f"Unknown easing '{easing}', using {default.__name__}")
        return default
    return fn
