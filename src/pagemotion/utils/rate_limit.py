"""
Rate limiters - debounce and throttle

Wrap a callback so it runs at most once per window. Times are given in
milliseconds. Deferred work goes through a timer host: anything with
``call_later(delay_seconds, callback, *args)`` returning a handle with
``cancel()``. An asyncio event loop is exactly that, and it is the default
(the running loop, looked up on first call). With no timer host at all the
wrapper degrades to calling straight through, with one warning.

Example:
    page.add_event_listener("scroll", throttle(update_navbar, 16))
    search_box.on_input(debounce(run_search, 300))
"""

import asyncio
import functools
from typing import Any, Callable, Optional, Protocol

from pagemotion.models.enums import LogCategory
from pagemotion.utils.logger import get_category_logger

log = get_category_logger(LogCategory.SCHEDULER)


class TimerHandle(Protocol):
    def cancel(self) -> None: ...


class TimerHost(Protocol):
    """Minimal timer contract (asyncio.AbstractEventLoop satisfies it)"""
    def call_later(self, delay: float, callback: Callable[..., Any], *args: Any) -> TimerHandle: ...


def resolve_timer_host(*candidates: Any) -> Optional[TimerHost]:
    """
    First candidate with a ``call_later``, else the running event loop

    Returns None when nothing qualifies and no loop is running.
    """
    for candidate in candidates:
        if candidate is not None and callable(getattr(candidate, "call_later", None)):
            return candidate
    try:
        return asyncio.get_running_loop()
    except RuntimeError:
        return None


class _RateLimited:
    """Shared plumbing: wrapped function metadata, timer host lookup, cancel()"""

    def __init__(self, fn: Callable[..., Any], timers: Optional[TimerHost]):
        functools.update_wrapper(self, fn)
        self._fn = fn
        self._timers = timers
        self._handle: Optional[TimerHandle] = None
        self._warned = False

    def _host(self) -> Optional[TimerHost]:
        if self._timers is None:
            self._timers = resolve_timer_host()
            if self._timers is None and not self._warned:
                self._warned = True
                log.warn("No timer host, calls pass through unlimited",
                         callback=getattr(self._fn, "__name__", repr(self._fn)))
        return self._timers

    @property
    def pending(self) -> bool:
        """True while a timer is armed"""
        return self._handle is not None

    def cancel(self) -> None:
        """Drop the armed timer, if any"""
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None


class Debounced(_RateLimited):
    """
    Debounce wrapper

    Every call cancels the armed timer and arms a new one ``wait`` ms out.
    - immediate=False: fires on the trailing edge with the latest arguments
    - immediate=True: fires synchronously on the first call of an idle
      period; calls inside the window only extend it
    """

    def __init__(self, fn: Callable[..., Any], wait: float, immediate: bool = False,
                 timers: Optional[TimerHost] = None):
        super().__init__(fn, timers)
        self.wait = max(0.0, float(wait))
        self.immediate = immediate

    def __call__(self, *args: Any, **kwargs: Any) -> None:
        def later() -> None:
            self._handle = None
            if not self.immediate:
                self._fn(*args, **kwargs)

        host = self._host()
        if host is None:
            self._fn(*args, **kwargs)
            return

        call_now = self.immediate and self._handle is None
        self.cancel()
        self._handle = host.call_later(self.wait / 1000, later)
        if call_now:
            self._fn(*args, **kwargs)


class Throttled(_RateLimited):
    """
    Throttle wrapper (leading edge only)

    The first call fires immediately and opens a ``limit`` ms cooldown;
    calls during the cooldown are dropped. When it expires the next call
    fires and starts a new cooldown.
    """

    def __init__(self, fn: Callable[..., Any], limit: float, timers: Optional[TimerHost] = None):
        super().__init__(fn, timers)
        self.limit = max(0.0, float(limit))

    def _release(self) -> None:
        self._handle = None

    def __call__(self, *args: Any, **kwargs: Any) -> None:
        if self._handle is not None:
            return
        host = self._host()
        if host is not None:
            self._handle = host.call_later(self.limit / 1000, self._release)
        self._fn(*args, **kwargs)


def debounce(fn: Callable[..., Any], wait: float, immediate: bool = False,
             timers: Optional[TimerHost] = None) -> Debounced:
    """Return a debounced wrapper around ``fn`` (see Debounced)"""
    return Debounced(fn, wait, immediate, timers)


def throttle(fn: Callable[..., Any], limit: float, timers: Optional[TimerHost] = None) -> Throttled:
    """Return a throttled wrapper around ``fn`` (see Throttled)"""
    return Throttled(fn, limit, timers)
