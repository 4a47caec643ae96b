"""
Host layer - protocols the engine consumes, safe DOM helpers and the
headless MemoryPage implementation
"""

from .protocols import Element, Page, FrameScheduler, IntersectionEntry
from .geometry import Rect
from .dom import find, add_listener, remove_listener, prefers_reduced_motion, is_element_in_viewport
from .memory_page import MemoryPage, MemoryElement, GeometryIntersectionObserver

__all__ = [
    "Element",
    "Page",
    "FrameScheduler",
    "IntersectionEntry",
    "Rect",
    "find",
    "add_listener",
    "remove_listener",
    "prefers_reduced_motion",
    "is_element_in_viewport",
    "MemoryPage",
    "MemoryElement",
    "GeometryIntersectionObserver",
]
