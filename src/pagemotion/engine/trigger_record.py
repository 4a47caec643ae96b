"""
TriggerRecord - idempotence guard for one-shot animations

Holds the identities of elements that already fired. Every one-shot
playback path goes through try_mark(), which checks and marks under one
lock, so an element can never start a second playback.
"""

import threading
from typing import Any, Dict

from pagemotion.models.enums import LogCategory
from pagemotion.utils.logger import get_category_logger

log = get_category_logger(LogCategory.ANIMATION)


class TriggerRecord:
    """
    Set of already-triggered element identities

    Elements are keyed by identity (``id(element)``); a reference is kept
    alongside so the id cannot be recycled while the entry exists.
    """

    def __init__(self):
        self._entries: Dict[int, Any] = {}
        self._lock = threading.Lock()

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, element: Any) -> bool:
        return self.has_triggered(element)

    def has_triggered(self, element: Any) -> bool:
        return id(element) in self._entries

    def mark_triggered(self, element: Any) -> None:
        with self._lock:
            self._entries.setdefault(id(element), element)

    def try_mark(self, element: Any) -> bool:
        """
        Mark ``element`` unless already marked

        Returns:
            True if this call marked it (caller may start playback),
            False if it had already fired
        """
        with self._lock:
            key = id(element)
            if key in self._entries:
                return False
            self._entries[key] = element
            return True

    def reset(self, element: Any) -> bool:
        """Forget ``element`` so it can fire again; True if it was present"""
        with self._lock:
            return self._entries.pop(id(element), None) is not None

    def reset_all(self) -> None:
        with self._lock:
            count = len(self._entries)
            self._entries.clear()
        log.debug("Trigger record cleared", entries=count)
