"""
Host protocols

The engine never touches a concrete DOM. Everything it needs from the host
is described here: element handles, the page, the viewport-intersection
primitive and the frame-scheduling primitive. MemoryPage implements all of
them headlessly; a browser bridge would implement the same surface.
"""

from dataclasses import dataclass
from typing import Any, Callable, List, Optional, Protocol, Sequence, runtime_checkable


@runtime_checkable
class Element(Protocol):
    """Opaque handle to one animatable element"""

    def add_class(self, name: str) -> None: ...
    def remove_class(self, name: str) -> None: ...
    def has_class(self, name: str) -> bool: ...
    def get_style(self, name: str) -> Optional[str]: ...
    def set_style(self, name: str, value: Any) -> None: ...
    def get_attribute(self, name: str) -> Optional[str]: ...

    @property
    def text(self) -> str: ...

    @text.setter
    def text(self, value: str) -> None: ...


@dataclass(frozen=True)
class IntersectionEntry:
    """One visibility report for an observed element"""
    target: Any
    intersection_ratio: float
    is_intersecting: bool
    time: float = 0.0


IntersectionCallback = Callable[[Sequence[IntersectionEntry]], None]


class IntersectionPrimitive(Protocol):
    """Host viewport-intersection observer"""

    def observe(self, element: Any) -> None: ...
    def unobserve(self, element: Any) -> None: ...
    def disconnect(self) -> None: ...


FrameCallback = Callable[[float], None]


@runtime_checkable
class FrameScheduler(Protocol):
    """
    "Run this before the next repaint" primitive

    The callback runs once, asynchronously, with a monotonically
    non-decreasing timestamp in milliseconds.
    """

    def schedule_frame(self, callback: FrameCallback) -> int: ...
    def cancel_frame(self, handle: int) -> None: ...


@runtime_checkable
class Page(Protocol):
    """
    Document + window surface the engine consumes

    Optional capabilities (looked up with getattr, absence is tolerated):
    - create_intersection_observer(callback, threshold, root_margin)
    - frame_scheduler
    """

    @property
    def scroll_y(self) -> float: ...

    def scroll_to(self, x: float, y: float) -> None: ...
    def query_selector(self, selector: str) -> Optional[Element]: ...
    def query_selector_all(self, selector: str) -> List[Element]: ...
    def add_event_listener(self, event: str, handler: Callable[..., Any]) -> None: ...
    def remove_event_listener(self, event: str, handler: Callable[..., Any]) -> None: ...
    def matches_media(self, query: str) -> bool: ...
