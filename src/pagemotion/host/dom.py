"""
Safe DOM helpers

Lookup and listener helpers that never raise: a bad selector or a missing
target is logged and turned into None / a no-op.
"""

from typing import Any, Callable, List, Optional, Union

from pagemotion.host.geometry import is_rect_in_viewport
from pagemotion.models.enums import LogCategory
from pagemotion.utils.logger import get_category_logger

log = get_category_logger(LogCategory.HOST)

REDUCED_MOTION_QUERY = "(prefers-reduced-motion: reduce)"


def find(page: Any, selector: str, all: bool = False) -> Union[Any, List[Any], None]:
    """
    Look up one element (or all matches) by selector

    Args:
        page: Host page
        selector: Selector string
        all: Return every match as a list instead of the first element

    Returns:
        Element, list of elements, or None on error/no match
        (``all=True`` returns [] when nothing matches)
    """
    if page is None:
        return [] if all else None
    try:
        if all:
            return list(page.query_selector_all(selector))
        return page.query_selector(selector)
    except Exception as e:
        log.error(f"Error selecting element: {selector}", exception=e)
        return None


def resolve(page: Any, target: Any) -> Optional[Any]:
    """Accept either an element or a selector string"""
    if isinstance(target, str):
        return find(page, target)
    return target


def add_listener(target: Any, event: str, handler: Callable[..., Any], page: Any = None) -> bool:
    """
    Attach ``handler`` to ``target`` (element, page, or selector with ``page``)

    Returns:
        True if attached, False when the target or handler is unusable
    """
    el = resolve(page, target)
    if el is None or not callable(handler):
        log.debug("Listener not attached, missing target or handler", event=event)
        return False
    try:
        el.add_event_listener(event, handler)
        return True
    except Exception as e:
        log.error("Error adding event listener", event=event, exception=e)
        return False


def remove_listener(target: Any, event: str, handler: Callable[..., Any], page: Any = None) -> bool:
    """Detach ``handler``; no-op when the target is absent"""
    el = resolve(page, target)
    if el is None:
        return False
    try:
        el.remove_event_listener(event, handler)
        return True
    except Exception as e:
        log.error("Error removing event listener", event=event, exception=e)
        return False


def prefers_reduced_motion(page: Any) -> bool:
    """
    Whether the user asked for reduced motion

    A host without media-query support is treated as "no preference".
    """
    matches = getattr(page, "matches_media", None)
    if matches is None:
        return False
    try:
        return bool(matches(REDUCED_MOTION_QUERY))
    except Exception as e:
        log.warn("Reduced-motion query failed, assuming no preference", exception=e)
        return False


def is_element_in_viewport(page: Any, element: Any, threshold: float = 0.1) -> bool:
    """
    Classic rect-based visibility check (no observer involved)

    Needs ``page.client_rect(element)`` plus the viewport size; a host
    without them, or a missing element, reports False.
    """
    if page is None or element is None:
        return False
    client_rect = getattr(page, "client_rect", None)
    if client_rect is None:
        log.debug("Host has no client_rect, visibility unknown")
        return False
    try:
        rect = client_rect(element)
        return is_rect_in_viewport(rect, page.viewport_width, page.viewport_height, threshold)
    except Exception as e:
        log.error("Error measuring element", exception=e)
        return False
