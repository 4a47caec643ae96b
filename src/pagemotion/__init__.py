"""
pagemotion - animation trigger & playback engine for web pages

Decides when page effects fire (element scrolled into view, page scrolled
past a threshold, a counter should count up) and carries them out (class
toggles, eased property interpolation) exactly once per element, honouring
the reduced-motion preference.
"""

from pagemotion.engine.counter import CounterAnimation
from pagemotion.engine.frame_scheduler import AsyncioFrameScheduler, ManualFrameScheduler
from pagemotion.engine.property_animator import PropertyAnimator, animate_properties
from pagemotion.engine.scroll_effects import ScrollDrivenEffects, ScrollThresholdEffect
from pagemotion.engine.smooth_scroll import smooth_scroll_to
from pagemotion.engine.trigger_record import TriggerRecord
from pagemotion.engine.visibility_observer import VisibilityObserver
from pagemotion.managers.animation_manager import AnimationManager
from pagemotion.managers.config_manager import ConfigManager
from pagemotion.models.config import MotionConfig
from pagemotion.models.easing import linear, quad_in_out, cubic_out
from pagemotion.utils.rate_limit import debounce, throttle

__version__ = "0.1.0"

__all__ = [
    "AnimationManager",
    "ConfigManager",
    "MotionConfig",
    "VisibilityObserver",
    "TriggerRecord",
    "ScrollDrivenEffects",
    "ScrollThresholdEffect",
    "PropertyAnimator",
    "CounterAnimation",
    "AsyncioFrameScheduler",
    "ManualFrameScheduler",
    "animate_properties",
    "smooth_scroll_to",
    "debounce",
    "throttle",
    "linear",
    "quad_in_out",
    "cubic_out",
]
