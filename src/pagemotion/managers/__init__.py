"""Managers - configuration loading and the root animation manager"""

from .config_manager import ConfigManager
from .animation_manager import AnimationManager

__all__ = ["ConfigManager", "AnimationManager"]
