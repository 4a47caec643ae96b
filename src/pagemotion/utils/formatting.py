"""Number formatting helpers for counters"""

import math
import re
from typing import Optional

_THOUSANDS = re.compile(r"\B(?=(\d{3})+(?!\d))")
_NUMBER = re.compile(r"-?\d+(?:\.\d+)?")


def format_number(value: float, separator: str = ",") -> str:
    """
    Integer-format ``value`` with a thousands separator

    Halves round up: 2.5 -> 3, -2.5 -> -2.

    Example:
        format_number(1000000)      -> "1,000,000"
        format_number(1234.6, " ")  -> "1 235"
    """
    text = str(int(math.floor(value + 0.5)))
    if not separator:
        return text
    return _THOUSANDS.sub(separator, text)


def parse_number(text: Optional[str]) -> Optional[float]:
    """
    First number found in ``text`` ignoring separators, or None

    "1,250+" -> 1250.0, "n/a" -> None
    """
    if text is None:
        return None
    match = _NUMBER.search(str(text).replace(",", "").replace(" ", ""))
    if not match:
        return None
    return float(match.group())
