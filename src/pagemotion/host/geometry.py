"""
Viewport geometry

Rect math behind the headless intersection primitive and the classic
"is this element in the viewport" check.
"""

import re
from dataclasses import dataclass
from typing import Tuple

_MARGIN_TOKEN = re.compile(r"^(-?\d+(?:\.\d+)?)(px|%)?$")


@dataclass(frozen=True)
class Rect:
    """Axis-aligned rectangle (top/left origin, y grows downwards)"""
    left: float = 0.0
    top: float = 0.0
    width: float = 0.0
    height: float = 0.0

    @property
    def right(self) -> float:
        return self.left + self.width

    @property
    def bottom(self) -> float:
        return self.top + self.height

    @property
    def area(self) -> float:
        return max(0.0, self.width) * max(0.0, self.height)

    def offset(self, dx: float, dy: float) -> "Rect":
        return Rect(self.left + dx, self.top + dy, self.width, self.height)


def parse_root_margin(margin: str, root: Rect) -> Tuple[float, float, float, float]:
    """
    Parse a CSS margin shorthand into pixel (top, right, bottom, left)

    Accepts 1-4 values in px or %; percentages resolve against the root
    height (top/bottom) or width (left/right). Unparseable input yields
    zero margins.

    Example:
        parse_root_margin("0px 0px -50px 0px", viewport) -> (0, 0, -50, 0)
    """
    parts = str(margin or "0px").split()
    if not 1 <= len(parts) <= 4:
        return 0.0, 0.0, 0.0, 0.0

    values = []
    for part in parts:
        match = _MARGIN_TOKEN.match(part.strip())
        if not match:
            return 0.0, 0.0, 0.0, 0.0
        values.append((float(match.group(1)), match.group(2) == "%"))

    # CSS shorthand expansion
    if len(values) == 1:
        values = values * 4
    elif len(values) == 2:
        values = [values[0], values[1], values[0], values[1]]
    elif len(values) == 3:
        values = [values[0], values[1], values[2], values[1]]

    bases = (root.height, root.width, root.height, root.width)
    top, right, bottom, left = (
        amount * base / 100 if is_percent else amount
        for (amount, is_percent), base in zip(values, bases)
    )
    return top, right, bottom, left


def expand(root: Rect, margin: Tuple[float, float, float, float]) -> Rect:
    """Grow (positive) or shrink (negative) a root rect by a margin"""
    top, right, bottom, left = margin
    return Rect(
        left=root.left - left,
        top=root.top - top,
        width=root.width + left + right,
        height=root.height + top + bottom,
    )


def intersection_ratio(target: Rect, root: Rect) -> Tuple[float, bool]:
    """
    Fraction of ``target``'s area inside ``root``

    Returns:
        (ratio, is_intersecting). A zero-area target touching the root
        counts as fully visible, matching browser behaviour.
    """
    left = max(target.left, root.left)
    top = max(target.top, root.top)
    right = min(target.right, root.right)
    bottom = min(target.bottom, root.bottom)

    if right < left or bottom < top:
        return 0.0, False

    if target.area == 0:
        return 1.0, True

    overlap = (right - left) * (bottom - top)
    ratio = min(1.0, overlap / target.area)
    return ratio, overlap > 0


def is_rect_in_viewport(rect: Rect, viewport_width: float, viewport_height: float,
                        threshold: float = 0.1) -> bool:
    """
    Rect-based visibility check with partial-size tolerance

    ``rect`` is in viewport coordinates. The element counts as visible
    while its top/left edge is inside the viewport, or has left through
    the top/left edge by no more than ``threshold`` of its height/width.
    """
    vert_in_view = rect.top <= viewport_height and (rect.top + rect.height * threshold) >= 0
    hor_in_view = rect.left <= viewport_width and (rect.left + rect.width * threshold) >= 0
    return vert_in_view and hor_in_view
