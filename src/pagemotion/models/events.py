"""
Event models for the animation layer

Lifecycle notifications published on the EventBus. Page-assembly code can
subscribe to them (analytics, chained effects) without touching the engine.
"""

import time
from dataclasses import dataclass
from enum import Enum, auto
from typing import Any, Dict, Optional

from pagemotion.models.enums import AnimationKind, EventSource, ManagerState


class EventType(Enum):
    """Event types in the system"""
    MANAGER_STATE_CHANGED = auto()
    ELEMENT_TRIGGERED = auto()
    SCROLL_STATE_CHANGED = auto()
    ANIMATION_COMPLETED = auto()


@dataclass
class Event:
    """
    Base event class

    - type: EventType (what kind of event)
    - source: EventSource (which component published it)
    - data: dict (event-specific payload)
    - timestamp: float (when it happened)
    """
    type: EventType
    source: Optional[EventSource]
    data: Dict[str, Any]
    timestamp: float


@dataclass
class ManagerStateChangedEvent(Event):
    """AnimationManager moved to a new lifecycle state"""

    def __init__(self, old_state: ManagerState, new_state: ManagerState):
        super().__init__(
            type=EventType.MANAGER_STATE_CHANGED,
            source=EventSource.ANIMATION_MANAGER,
            data={"old_state": old_state, "new_state": new_state},
            timestamp=time.time()
        )

    @property
    def old_state(self) -> ManagerState:
        return self.data["old_state"]

    @property
    def new_state(self) -> ManagerState:
        return self.data["new_state"]


@dataclass
class ElementTriggeredEvent(Event):
    """
    A one-shot animation fired for an element

    Source is VISIBILITY_OBSERVER when the element scrolled into view and
    ANIMATION_MANAGER when its final state was applied without motion.
    """

    def __init__(self, element: Any, kind: AnimationKind,
                 source: EventSource = EventSource.ANIMATION_MANAGER):
        super().__init__(
            type=EventType.ELEMENT_TRIGGERED,
            source=source,
            data={"element": element, "kind": kind},
            timestamp=time.time()
        )

    @property
    def element(self) -> Any:
        return self.data["element"]

    @property
    def kind(self) -> AnimationKind:
        return self.data["kind"]


@dataclass
class ScrollStateChangedEvent(Event):
    """A scroll threshold effect switched on or off"""

    def __init__(self, class_name: str, active: bool, offset: float):
        super().__init__(
            type=EventType.SCROLL_STATE_CHANGED,
            source=EventSource.SCROLL_EFFECTS,
            data={"class_name": class_name, "active": active, "offset": offset},
            timestamp=time.time()
        )

    @property
    def active(self) -> bool:
        return self.data["active"]


@dataclass
class AnimationCompletedEvent(Event):
    """An AnimationTask reached its end values"""

    def __init__(self, element: Any, targets: Dict[str, float]):
        super().__init__(
            type=EventType.ANIMATION_COMPLETED,
            source=EventSource.PROPERTY_ANIMATOR,
            data={"element": element, "targets": dict(targets)},
            timestamp=time.time()
        )

    @property
    def element(self) -> Any:
        return self.data["element"]
