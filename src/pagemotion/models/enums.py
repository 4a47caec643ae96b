"""
Enums for the animation trigger & playback engine
"""

from enum import Enum, auto


class AnimationKind(Enum):
    """
    Declared animation kind of a page element

    FADE_IN: One-shot reveal, toggles the visible class
    COUNTER: One-shot numeric count-up rendered as element text
    PROPERTY: One-shot interpolation of numeric style properties
    """
    FADE_IN = "fade-in"
    COUNTER = "counter"
    PROPERTY = "property"


class ManagerState(Enum):
    """AnimationManager lifecycle states"""
    UNINITIALIZED = auto()
    ACTIVE = auto()
    DISABLED = auto()   # Reduced motion or missing host capability
    DISPOSED = auto()


class TaskState(Enum):
    """AnimationTask lifecycle states"""
    PENDING = auto()    # Created, first frame not yet run
    RUNNING = auto()
    COMPLETE = auto()
    CANCELLED = auto()


class EventSource(Enum):
    """Event source identifiers for engine events"""
    ANIMATION_MANAGER = auto()
    VISIBILITY_OBSERVER = auto()
    SCROLL_EFFECTS = auto()
    PROPERTY_ANIMATOR = auto()


class LogLevel(Enum):
    """Log severity levels"""
    DEBUG = auto()
    INFO = auto()
    WARN = auto()
    ERROR = auto()


class LogCategory(Enum):
    """Log categories for different subsystems"""
    SYSTEM = auto()
    CONFIG = auto()
    ANIMATION = auto()
    OBSERVER = auto()
    SCROLL = auto()
    SCHEDULER = auto()
    EVENT = auto()
    HOST = auto()
