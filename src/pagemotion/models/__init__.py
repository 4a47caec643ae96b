"""
Models package - data models for the animation layer
"""

from .enums import AnimationKind, ManagerState, TaskState, EventSource, LogLevel, LogCategory
from .events import EventType, Event

__all__ = [
    'AnimationKind',
    'ManagerState',
    'TaskState',
    'EventSource',
    'LogLevel',
    'LogCategory',
    'EventType',
    'Event',
]
