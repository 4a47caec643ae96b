"""
Configuration models

Typed view over the YAML configuration. Every numeric field is clamped to a
safe range when parsed; a non-numeric value falls back to the field default.
"""

from dataclasses import dataclass, field, fields, asdict
from typing import Any, Dict, Optional

from pagemotion.models.enums import LogCategory
from pagemotion.utils.logger import get_category_logger

log = get_category_logger(LogCategory.CONFIG)


def clamp_number(
    value: Any,
    default: float,
    minimum: Optional[float] = None,
    maximum: Optional[float] = None,
    name: str = "value"
) -> float:
    """
    Coerce ``value`` to float and clamp it into [minimum, maximum]

    Non-numeric input (None, "fast", NaN) returns ``default``.
    """
    try:
        number = float(value)
    except (TypeError, ValueError):
        log.warn(f"Non-numeric {name}, using default", value=repr(value), default=default)
        return default

    if number != number:  # NaN
        log.warn(f"NaN {name}, using default", default=default)
        return default

    clamped = number
    if minimum is not None and clamped < minimum:
        clamped = minimum
    if maximum is not None and clamped > maximum:
        clamped = maximum
    if clamped != number:
        log.warn(f"Clamped {name}", given=number, used=clamped)
    return clamped


def clamp_duration(value: Any, default: float = 0.0) -> float:
    """Duration in milliseconds, never negative"""
    return clamp_number(value, default, minimum=0.0, name="duration")


def clamp_threshold(value: Any, default: float = 0.1) -> float:
    """Visibility ratio in [0, 1]"""
    return clamp_number(value, default, minimum=0.0, maximum=1.0, name="threshold")


@dataclass
class ObserverConfig:
    threshold: float = 0.1
    root_margin: str = "0px 0px -50px 0px"

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ObserverConfig":
        return cls(
            threshold=clamp_threshold(data.get("threshold", cls.threshold), cls.threshold),
            root_margin=str(data.get("root_margin", cls.root_margin)),
        )


@dataclass
class FadeConfig:
    selector: str = ".fade-in"
    visible_class: str = "visible"

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "FadeConfig":
        return cls(
            selector=str(data.get("selector", cls.selector)),
            visible_class=str(data.get("visible_class", cls.visible_class)),
        )


@dataclass
class CounterConfig:
    selector: str = "[data-counter]"
    duration_ms: float = 2000.0
    thousands_separator: str = ""

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "CounterConfig":
        return cls(
            selector=str(data.get("selector", cls.selector)),
            duration_ms=clamp_duration(data.get("duration_ms", cls.duration_ms), cls.duration_ms),
            thousands_separator=str(data.get("thousands_separator") or ""),
        )


@dataclass
class PropertyConfig:
    selector: str = "[data-animate]"
    duration_ms: float = 600.0
    easing: str = "cubic_out"

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "PropertyConfig":
        return cls(
            selector=str(data.get("selector", cls.selector)),
            duration_ms=clamp_duration(data.get("duration_ms", cls.duration_ms), cls.duration_ms),
            easing=str(data.get("easing", cls.easing)),
        )


@dataclass
class ScrollConfig:
    selector: str = ".navbar"
    threshold_px: float = 100.0
    class_name: str = "scrolled"
    throttle_ms: float = 16.0

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ScrollConfig":
        return cls(
            selector=str(data.get("selector", cls.selector)),
            threshold_px=clamp_number(data.get("threshold_px", cls.threshold_px), cls.threshold_px,
                                      name="scroll threshold"),
            class_name=str(data.get("class_name", cls.class_name)),
            throttle_ms=clamp_number(data.get("throttle_ms", cls.throttle_ms), cls.throttle_ms,
                                     minimum=0.0, name="throttle limit"),
        )


@dataclass
class SchedulerConfig:
    fps: int = 60

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "SchedulerConfig":
        return cls(fps=int(clamp_number(data.get("fps", cls.fps), cls.fps, 1, 240, name="fps")))


@dataclass
class MotionConfig:
    """
    Root configuration for the animation layer

    Example YAML:
        observer:
          threshold: 0.1
          root_margin: "0px 0px -50px 0px"
        scroll:
          selector: ".navbar"
          threshold_px: 100
    """
    observer: ObserverConfig = field(default_factory=ObserverConfig)
    fade: FadeConfig = field(default_factory=FadeConfig)
    counter: CounterConfig = field(default_factory=CounterConfig)
    property: PropertyConfig = field(default_factory=PropertyConfig)
    scroll: ScrollConfig = field(default_factory=ScrollConfig)
    scheduler: SchedulerConfig = field(default_factory=SchedulerConfig)

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> "MotionConfig":
        """Build config from a parsed YAML mapping; missing sections use defaults"""
        data = data or {}
        sections = {f.name for f in fields(cls)}
        for key in data:
            if key not in sections:
                log.warn(f"Unknown config section '{key}' ignored")

        def section(name: str) -> Dict[str, Any]:
            value = data.get(name) or {}
            if not isinstance(value, dict):
                log.warn(f"Config section '{name}' is not a mapping, using defaults")
                return {}
            return value

        return cls(
            observer=ObserverConfig.from_dict(section("observer")),
            fade=FadeConfig.from_dict(section("fade")),
            counter=CounterConfig.from_dict(section("counter")),
            property=PropertyConfig.from_dict(section("property")),
            scroll=ScrollConfig.from_dict(section("scroll")),
            scheduler=SchedulerConfig.from_dict(section("scheduler")),
        )

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)
