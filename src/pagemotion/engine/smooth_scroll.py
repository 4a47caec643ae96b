"""
Smooth scroll-to

Scrolls the page to an element (or absolute offset) with quad_in_out
easing, one step per frame. Built on the PropertyAnimator so it shares its
cancellation and reduced-motion behaviour.
"""

from typing import Any, Optional

from pagemotion.engine.property_animator import PropertyAnimator
from pagemotion.host.dom import prefers_reduced_motion, resolve
from pagemotion.models.animation_task import AnimationTask
from pagemotion.models.easing import quad_in_out
from pagemotion.models.enums import LogCategory
from pagemotion.utils.logger import get_category_logger

log = get_category_logger(LogCategory.SCROLL)

SCROLL_PROPERTY = "scroll_y"


def _target_offset(page: Any, target: Any) -> Optional[float]:
    if isinstance(target, (int, float)):
        return float(target)
    element = resolve(page, target)
    if element is None:
        return None
    offset_top = getattr(element, "offset_top", None)
    if offset_top is None:
        log.warn("Scroll target has no offset_top", target=target)
        return None
    return float(offset_top)


def smooth_scroll_to(
    page: Any,
    target: Any,
    offset: float = 0,
    duration: float = 800,
    animator: Optional[PropertyAnimator] = None,
    scheduler: Any = None,
) -> AnimationTask:
    """
    Scroll ``page`` so ``target`` sits ``offset`` px below the top

    Args:
        page: Host page (scroll_y, scroll_to)
        target: Element, selector, or absolute offset in px
        offset: Distance to keep above the target (e.g. a fixed navbar height)
        duration: Scroll duration in ms
        animator: Animator to run on (default: a one-off one on ``scheduler``,
            jumping straight to the target when the page prefers reduced motion)

    Returns:
        AnimationTask; already cancelled when the target is missing

    Example:
        smooth_scroll_to(page, "#features", offset=80, duration=1000, scheduler=page.frame_scheduler)
    """
    if animator is None:
        animator = PropertyAnimator(
            scheduler or getattr(page, "frame_scheduler", None),
            reduced_motion=prefers_reduced_motion(page),
        )
    destination = _target_offset(page, target)
    if destination is None:
        log.warn("Smooth scroll target not found", target=target)
        return animator.animate(None, {SCROLL_PROPERTY: 0}, duration)

    def read(_: Any, name: str) -> float:
        return float(page.scroll_y)

    def write(_: Any, name: str, value: float) -> None:
        page.scroll_to(getattr(page, "scroll_x", 0), value)

    return animator.animate(
        page,
        {SCROLL_PROPERTY: destination - offset},
        duration,
        easing=quad_in_out,
        reader=read,
        writer=write,
    )
