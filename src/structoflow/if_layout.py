"""
Geometry of the binary decision (if) box.

The header of an if box is drawn as two diagonals running from the top
corners down to an apex above the split between the then and else
columns. The condition label is centered on the apex, so both columns must
be wide enough, and the header tall enough, that the diagonals pass below
the label on either side.

For a column of width w and a label of half width h, the diagonal on that
side is at depth (w - h) / w * header_height where it meets the label's
edge. Requiring that depth to be at least the label's bottom edge gives
header_height >= bottom / ((w - h) / w).
"""

import math
from dataclasses import dataclass
from typing import Callable

from .constants import (
    FONT_SIZE,
    IF_CONDITION_LINE_CLEARANCE,
    IF_CONDITION_SIDE_CLEARANCE,
    IF_CONDITION_TOP_PADDING,
    IF_HEADER_BASE_HEIGHT,
    IF_HEADER_MAX_HEIGHT,
)
from .models import IfLayout, LayoutNode

CONDITION_BOTTOM_Y = IF_CONDITION_TOP_PADDING + FONT_SIZE + IF_CONDITION_LINE_CLEARANCE


@dataclass(frozen=True)
class IfGeometry:
    """Solved column widths and header height of an if box."""

    left_width: int
    right_width: int
    width: int
    header_height: int


def diagonal_ratio(run: float, half_label_width: float) -> float:
    """Fraction of the header height at which a diagonal clears the label."""
    if run <= 0:
        return 0.0
    return (run - half_label_width) / run


def header_height_for_ratio(
    ratio: float, label_bottom: float, base_height: int, max_height: int
) -> int:
    """Smallest header height that keeps the label above the diagonals."""
    if ratio > 0:
        required = math.ceil(label_bottom / ratio)
    else:
        required = max_height
    return max(base_height, min(max_height, required))


def fit_if_geometry(
    condition_width: float, preferred_left: float, preferred_right: float
) -> IfGeometry:
    """
    Solve the if header for a condition label of the given width.

    Args:
        condition_width: Width of the condition label including padding.
        preferred_left: Content width of the then branch.
        preferred_right: Content width of the else branch.

    Returns:
        IfGeometry with both columns at least half the label plus the side
        clearance, widened further when even the tallest allowed header
        would let a diagonal clip the label.
    """
    half_width = condition_width / 2
    required_side = half_width + IF_CONDITION_SIDE_CLEARANCE

    left = max(preferred_left, required_side)
    right = max(preferred_right, required_side)

    ratio_at_max = CONDITION_BOTTOM_Y / IF_HEADER_MAX_HEIGHT
    if 0 < ratio_at_max < 1:
        ratio_safe = half_width / (1 - ratio_at_max)
        left = max(left, ratio_safe)
        right = max(right, ratio_safe)

    left_width = math.ceil(left)
    right_width = math.ceil(right)
    shortfall = math.ceil(condition_width) - (left_width + right_width)
    if shortfall > 0:
        right_width += shortfall

    min_ratio = max(
        0.0,
        min(diagonal_ratio(left, half_width), diagonal_ratio(right, half_width)),
    )
    header_height = header_height_for_ratio(
        min_ratio, CONDITION_BOTTOM_Y, IF_HEADER_BASE_HEIGHT, IF_HEADER_MAX_HEIGHT
    )

    return IfGeometry(
        left_width=left_width,
        right_width=right_width,
        width=left_width + right_width,
        header_height=header_height,
    )


def build_if_layout(
    condition: str,
    then_branch: LayoutNode,
    else_branch: LayoutNode,
    inline_width: Callable[[str], float],
) -> IfLayout:
    """
    Build the layout node of an if box.

    Args:
        condition: Normalized condition text.
        then_branch: Layout of the then column.
        else_branch: Layout of the else column (or the no-else sentinel).
        inline_width: Label width estimator including horizontal padding.
    """
    geometry = fit_if_geometry(
        inline_width(condition), then_branch.width, else_branch.width
    )
    branch_height = max(then_branch.height, else_branch.height)

    return IfLayout(
        condition=condition,
        then_branch=then_branch,
        else_branch=else_branch,
        left_width=geometry.left_width,
        right_width=geometry.right_width,
        header_height=geometry.header_height,
        branch_height=branch_height,
        width=geometry.width,
        height=geometry.header_height + branch_height,
    )
