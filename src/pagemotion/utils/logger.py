"""
Category Logger

One line per record, tagged with a fixed-width category column and a level
glyph; keyword details hang underneath as a tree:

    [14:23:45] SCROLL    ✓ Threshold crossed
               ├─ offset: 150
               └─ threshold: 100

Modules bind a category once at import time:

    log = get_logger().for_category(LogCategory.OBSERVER)
    log.debug("Element visible", element=el)
"""

import sys
from datetime import datetime
from typing import Any, Iterable, List, Optional, TextIO

from pagemotion.models.enums import LogCategory, LogLevel

_RESET = "\033[0m"
_DIM = "\033[2m"

_CATEGORY_COLOR = {
    LogCategory.SYSTEM: "\033[97m",
    LogCategory.CONFIG: "\033[36m",
    LogCategory.ANIMATION: "\033[93m",
    LogCategory.OBSERVER: "\033[92m",
    LogCategory.SCROLL: "\033[96m",
    LogCategory.SCHEDULER: "\033[35m",
    LogCategory.EVENT: "\033[95m",
    LogCategory.HOST: "\033[94m",
}

# level → (glyph, color)
_LEVEL_STYLE = {
    LogLevel.DEBUG: ("·", _DIM),
    LogLevel.INFO: ("✓", "\033[32m"),
    LogLevel.WARN: ("⚠", "\033[33m"),
    LogLevel.ERROR: ("✗", "\033[31m"),
}

_LEVEL_ORDER = list(LogLevel)
_CATEGORY_WIDTH = max(len(c.name) for c in LogCategory)
_DETAIL_INDENT = " " * len("[HH:MM:SS] ")


def _describe(value: Any) -> str:
    if isinstance(value, BaseException):
        return f"{type(value).__name__}: {value}"
    return str(value)


class Logger:
    """
    Console logger shared by every module

    Args:
        min_level: Records below this level are dropped
        use_colors: Wrap columns in ANSI colors
        stream: Target stream, sys.stdout when None (resolved per write so
            pytest capture keeps working)
    """

    def __init__(self, min_level: LogLevel = LogLevel.INFO, use_colors: bool = True,
                 stream: Optional[TextIO] = None):
        self.min_level = min_level
        self.use_colors = use_colors
        self.stream = stream

    def enabled_for(self, level: LogLevel) -> bool:
        return _LEVEL_ORDER.index(level) >= _LEVEL_ORDER.index(self.min_level)

    def _paint(self, text: str, color: str) -> str:
        return f"{color}{text}{_RESET}" if self.use_colors else text

    def format_record(self, category: LogCategory, message: str, level: LogLevel,
                      details: Iterable[str] = ()) -> List[str]:
        """Render one record as its output lines (header first)"""
        glyph, color = _LEVEL_STYLE[level]
        header = " ".join((
            datetime.now().strftime("[%H:%M:%S]"),
            self._paint(category.name.ljust(_CATEGORY_WIDTH), _CATEGORY_COLOR.get(category, "")),
            self._paint(glyph, color),
            self._paint(message, color),
        ))

        lines = [header]
        details = list(details)
        for index, detail in enumerate(details):
            branch = "└─" if index == len(details) - 1 else "├─"
            lines.append(f"{_DETAIL_INDENT}{self._paint(branch, _DIM)} {detail}")
        return lines

    def log(self, category: LogCategory, message: str, level: LogLevel = LogLevel.INFO,
            details: Optional[list] = None, **fields: Any) -> None:
        """
        Emit a record

        ``details`` are preformatted strings; keyword ``fields`` are appended
        after them as ``key: value`` (exceptions rendered as ``Type: text``).
        """
        if not self.enabled_for(level):
            return
        extra = [f"{key}: {_describe(value)}" for key, value in fields.items()]
        out = self.stream or sys.stdout
        for line in self.format_record(category, message, level, list(details or []) + extra):
            print(line, file=out)

    def debug(self, category: LogCategory, message: str, **kw): self.log(category, message, LogLevel.DEBUG, **kw)
    def info(self, category: LogCategory, message: str, **kw): self.log(category, message, LogLevel.INFO, **kw)
    def warn(self, category: LogCategory, message: str, **kw): self.log(category, message, LogLevel.WARN, **kw)
    def error(self, category: LogCategory, message: str, **kw): self.log(category, message, LogLevel.ERROR, **kw)

    def for_category(self, category: LogCategory) -> "BoundLogger":
        return BoundLogger(self, category)


class BoundLogger:
    """Logger facade with a fixed category (overridable per call)"""

    def __init__(self, base: Logger, category: LogCategory):
        self._base = base
        self.category = category

    def log(self, message: str, level: LogLevel = LogLevel.INFO,
            category: Optional[LogCategory] = None, **kw) -> None:
        self._base.log(category or self.category, message, level, **kw)

    def debug(self, message: str, **kw): self.log(message, LogLevel.DEBUG, **kw)
    def info(self, message: str, **kw): self.log(message, LogLevel.INFO, **kw)
    def warn(self, message: str, **kw): self.log(message, LogLevel.WARN, **kw)
    def error(self, message: str, **kw): self.log(message, LogLevel.ERROR, **kw)

    def with_category(self, category: LogCategory) -> "BoundLogger":
        return BoundLogger(self._base, category)


_logger = Logger()


def get_logger() -> Logger:
    return _logger


def get_category_logger(category: LogCategory) -> BoundLogger:
    return _logger.for_category(category)


def configure_logger(min_level: LogLevel = LogLevel.INFO, use_colors: bool = True,
                     stream: Optional[TextIO] = None) -> None:
    """
    Reconfigure the shared logger in place

    Bound loggers hold a reference to the same instance, so modules that
    bound their category at import time pick the change up immediately.
    """
    _logger.min_level = min_level
    _logger.use_colors = use_colors
    _logger.stream = stream
