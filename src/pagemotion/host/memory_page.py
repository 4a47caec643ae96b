"""
MemoryPage - headless host

An in-memory page model that implements every host protocol the engine
consumes: elements with classes/styles/attributes/text and a layout rect,
a scrollable viewport, event listeners, a reduced-motion media query, a
geometric intersection primitive and a frame scheduler.

Useful for server-side pre-rendering of final states, for simulations, and
for deterministic tests.

Example:
    page = MemoryPage(viewport_height=800)
    card = page.create_element("div", classes=["fade-in"], rect=Rect(0, 1200, 300, 200))
    manager = AnimationManager(page)
    manager.start()
    page.scroll_to(0, 900)          # card enters the viewport → "visible"
"""

import itertools
import re
from typing import Any, Callable, Dict, Iterable, List, Optional, Sequence

from pagemotion.engine.frame_scheduler import ManualFrameScheduler
from pagemotion.host.geometry import Rect, expand, intersection_ratio, parse_root_margin
from pagemotion.host.dom import REDUCED_MOTION_QUERY, is_element_in_viewport
from pagemotion.host.protocols import IntersectionEntry
from pagemotion.models.enums import LogCategory
from pagemotion.utils.logger import get_category_logger

log = get_category_logger(LogCategory.HOST)

_SIMPLE_SELECTOR = re.compile(
    r"^(?P<tag>[a-zA-Z][\w-]*)?"
    r"(?P<rest>(?:[.#][\w-]+|\[[\w-]+(?:=[\"']?[^\]\"']*[\"']?)?\])*)$"
)
_SELECTOR_PART = re.compile(r"[.#][\w-]+|\[[\w-]+(?:=[\"']?[^\]\"']*[\"']?)?\]")


class MemoryElement:
    """In-memory element handle"""

    _ids = itertools.count(1)

    def __init__(
        self,
        tag: str = "div",
        id: Optional[str] = None,
        classes: Iterable[str] = (),
        attributes: Optional[Dict[str, str]] = None,
        rect: Optional[Rect] = None,
        text: str = "",
        style: Optional[Dict[str, Any]] = None,
    ):
        self.tag = tag.lower()
        self.id = id
        self.classes = set(classes)
        self.attributes: Dict[str, str] = dict(attributes or {})
        self.style: Dict[str, Any] = dict(style or {})
        self._text = text
        self._rect = rect or Rect()
        self._listeners: Dict[str, List[Callable[..., Any]]] = {}
        self.page: Optional["MemoryPage"] = None
        self.serial = next(self._ids)

    def __repr__(self) -> str:
        label = f"#{self.id}" if self.id else "".join(f".{c}" for c in sorted(self.classes))
        return f"<{self.tag}{label} #{self.serial}>"

    # --- classes ---
    def add_class(self, name: str) -> None:
        self.classes.add(name)

    def remove_class(self, name: str) -> None:
        self.classes.discard(name)

    def has_class(self, name: str) -> bool:
        return name in self.classes

    # --- style / attributes / text ---
    def get_style(self, name: str) -> Optional[Any]:
        return self.style.get(name)

    def set_style(self, name: str, value: Any) -> None:
        self.style[name] = value

    def get_attribute(self, name: str) -> Optional[str]:
        return self.attributes.get(name)

    def set_attribute(self, name: str, value: str) -> None:
        self.attributes[name] = value

    @property
    def text(self) -> str:
        return self._text

    @text.setter
    def text(self, value: str) -> None:
        self._text = str(value)

    # --- layout ---
    @property
    def rect(self) -> Rect:
        """Layout rect in document coordinates"""
        return self._rect

    @rect.setter
    def rect(self, value: Rect) -> None:
        self._rect = value
        if self.page is not None:
            self.page.refresh_intersections()

    @property
    def offset_top(self) -> float:
        return self._rect.top

    # --- events ---
    def add_event_listener(self, event: str, handler: Callable[..., Any]) -> None:
        self._listeners.setdefault(event, []).append(handler)

    def remove_event_listener(self, event: str, handler: Callable[..., Any]) -> None:
        handlers = self._listeners.get(event, [])
        if handler in handlers:
            handlers.remove(handler)

    def dispatch(self, event: str, *args: Any) -> None:
        for handler in list(self._listeners.get(event, [])):
            handler(*args)

    # --- selector matching ---
    def matches(self, selector: str) -> bool:
        """Match a compound selector: tag, .class, #id, [attr], [attr=value]"""
        match = _SIMPLE_SELECTOR.match(selector.strip())
        if not match:
            raise ValueError(f"Unsupported selector: {selector!r}")
        tag = match.group("tag")
        if tag and tag.lower() != self.tag:
            return False

        for part in _SELECTOR_PART.findall(match.group("rest") or ""):
            if part[0] == ".":
                if part[1:] not in self.classes:
                    return False
            elif part[0] == "#":
                if part[1:] != self.id:
                    return False
            else:
                body = part[1:-1]
                name, _, value = body.partition("=")
                if name not in self.attributes:
                    return False
                if value and self.attributes[name] != value.strip("\"'"):
                    return False
        return True


class GeometryIntersectionObserver:
    """
    Intersection primitive computed from element rects and the viewport

    Reports an entry on observe and whenever an element's threshold state
    (visible ratio >= threshold) flips after a scroll, resize or layout
    change. Delivery is synchronous.
    """

    def __init__(self, page: "MemoryPage", callback: Callable[[Sequence[IntersectionEntry]], None],
                 threshold: float = 0.0, root_margin: str = "0px"):
        self.page = page
        self.callback = callback
        self.threshold = threshold
        self.root_margin = root_margin
        self._observed: Dict[int, Any] = {}
        self._states: Dict[int, bool] = {}
        self.connected = True

    @property
    def observed_count(self) -> int:
        return len(self._observed)

    def observe(self, element: Any) -> None:
        if not self.connected:
            return
        key = id(element)
        if key in self._observed:
            return
        self._observed[key] = element
        entry = self._measure(element)
        self._states[key] = self._state_of(entry)
        self.callback([entry])

    def unobserve(self, element: Any) -> None:
        key = id(element)
        self._observed.pop(key, None)
        self._states.pop(key, None)

    def disconnect(self) -> None:
        self._observed.clear()
        self._states.clear()
        self.connected = False
        self.page._drop_observer(self)

    def refresh(self) -> None:
        """Re-measure every observed element and report state flips"""
        if not self.connected:
            return
        entries = []
        for key, element in list(self._observed.items()):
            entry = self._measure(element)
            state = self._state_of(entry)
            if state != self._states.get(key):
                self._states[key] = state
                entries.append(entry)
        if entries:
            self.callback(entries)

    def _state_of(self, entry: IntersectionEntry) -> bool:
        if self.threshold <= 0:
            return entry.is_intersecting
        return entry.is_intersecting and entry.intersection_ratio >= self.threshold

    def _measure(self, element: Any) -> IntersectionEntry:
        root = self.page.viewport_rect
        root = expand(root, parse_root_margin(self.root_margin, root))
        target = self.page.client_rect(element)
        ratio, intersecting = intersection_ratio(target, root)
        return IntersectionEntry(
            target=element,
            intersection_ratio=ratio,
            is_intersecting=intersecting,
            time=self.page.now(),
        )


class MemoryPage:
    """Headless page: element tree, viewport, scrolling, listeners, capabilities"""

    def __init__(
        self,
        viewport_width: float = 1280,
        viewport_height: float = 800,
        reduced_motion: bool = False,
        supports_intersection: bool = True,
        supports_frames: bool = True,
        frame_scheduler: Optional[Any] = None,
    ):
        self.viewport_width = viewport_width
        self.viewport_height = viewport_height
        self.reduced_motion = reduced_motion
        self.supports_intersection = supports_intersection
        self.supports_frames = supports_frames
        self._frame_scheduler = frame_scheduler or ManualFrameScheduler()
        self.elements: List[MemoryElement] = []
        self.scroll_x = 0.0
        self._scroll_y = 0.0
        self._listeners: Dict[str, List[Callable[..., Any]]] = {}
        self._observers: List[GeometryIntersectionObserver] = []

    # --- capabilities ---
    @property
    def frame_scheduler(self) -> Optional[Any]:
        return self._frame_scheduler if self.supports_frames else None

    def create_intersection_observer(
        self,
        callback: Callable[[Sequence[IntersectionEntry]], None],
        threshold: float = 0.0,
        root_margin: str = "0px",
    ) -> Optional[GeometryIntersectionObserver]:
        if not self.supports_intersection:
            return None
        observer = GeometryIntersectionObserver(self, callback, threshold, root_margin)
        self._observers.append(observer)
        return observer

    def matches_media(self, query: str) -> bool:
        if query.strip() == REDUCED_MOTION_QUERY:
            return self.reduced_motion
        return False

    def now(self) -> float:
        return float(getattr(self._frame_scheduler, "now", 0.0))

    def call_later(self, delay: float, callback: Callable[..., Any], *args: Any) -> Any:
        """Timers ride the frame clock, even when frames are unsupported"""
        return self._frame_scheduler.call_later(delay, callback, *args)

    # --- elements ---
    def add(self, element: MemoryElement) -> MemoryElement:
        element.page = self
        self.elements.append(element)
        self.refresh_intersections()
        return element

    def create_element(self, tag: str = "div", **kwargs: Any) -> MemoryElement:
        return self.add(MemoryElement(tag, **kwargs))

    def remove(self, element: MemoryElement) -> None:
        if element in self.elements:
            self.elements.remove(element)
            element.page = None
            for observer in list(self._observers):
                observer.unobserve(element)

    def query_selector_all(self, selector: str) -> List[MemoryElement]:
        groups = [s.strip() for s in selector.split(",") if s.strip()]
        if not groups:
            raise ValueError(f"Empty selector: {selector!r}")
        return [el for el in self.elements if any(el.matches(g) for g in groups)]

    def query_selector(self, selector: str) -> Optional[MemoryElement]:
        matches = self.query_selector_all(selector)
        return matches[0] if matches else None

    # --- viewport & scrolling ---
    @property
    def scroll_y(self) -> float:
        return self._scroll_y

    @property
    def viewport_rect(self) -> Rect:
        return Rect(0.0, 0.0, self.viewport_width, self.viewport_height)

    def client_rect(self, element: MemoryElement) -> Rect:
        """Element rect in viewport coordinates"""
        return element.rect.offset(-self.scroll_x, -self._scroll_y)

    def scroll_to(self, x: float, y: float) -> None:
        self.scroll_x = max(0.0, float(x))
        self._scroll_y = max(0.0, float(y))
        self.dispatch("scroll")
        self.refresh_intersections()

    def set_viewport(self, width: float, height: float) -> None:
        self.viewport_width = width
        self.viewport_height = height
        self.dispatch("resize")
        self.refresh_intersections()

    def is_element_in_viewport(self, element: Optional[MemoryElement], threshold: float = 0.1) -> bool:
        return is_element_in_viewport(self, element, threshold)

    # --- events ---
    def add_event_listener(self, event: str, handler: Callable[..., Any]) -> None:
        self._listeners.setdefault(event, []).append(handler)

    def remove_event_listener(self, event: str, handler: Callable[..., Any]) -> None:
        handlers = self._listeners.get(event, [])
        if handler in handlers:
            handlers.remove(handler)

    def listener_count(self, event: str) -> int:
        return len(self._listeners.get(event, []))

    def dispatch(self, event: str, *args: Any) -> None:
        for handler in list(self._listeners.get(event, [])):
            handler(*args)

    # --- intersection bookkeeping ---
    def refresh_intersections(self) -> None:
        for observer in list(self._observers):
            observer.refresh()

    def _drop_observer(self, observer: GeometryIntersectionObserver) -> None:
        if observer in self._observers:
            self._observers.remove(observer)
