"""
Utility functions for the animation layer
"""

from .rate_limit import debounce, throttle, Debounced, Throttled
from .formatting import format_number, parse_number

__all__ = [
    'debounce',
    'throttle',
    'Debounced',
    'Throttled',
    'format_number',
    'parse_number',
]
