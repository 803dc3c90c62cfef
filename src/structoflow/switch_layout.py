"""
Geometry of the multi-way decision (switch) box.

A switch header generalizes the if header to N columns. The last column
is the default column: a single diagonal runs from the top-left corner
down to an apex above the default column's left edge, and a second one
runs from the top-right corner to the same apex. The selector expression
is centered on the apex.

The run to the left of the apex spans every non-default column, so when
that run is too short the missing pixels are shared across all of those
columns; the run to the right is the default column alone. A switch with
a single column has no default split and places the apex in the middle,
so its one column must cover twice the minimum run.

Below the selector band sits a fixed-height band holding the case labels.
"""

import math
from dataclasses import dataclass
from typing import Callable, List, Sequence, Tuple

from .columns import distribute_extra_width, spread_to_minimum
from .constants import (
    FONT_SIZE,
    SECTION_HEADER_HEIGHT,
    SWITCH_CONDITION_LINE_CLEARANCE,
    SWITCH_CONDITION_SIDE_CLEARANCE,
    SWITCH_CONDITION_TOP_PADDING,
    SWITCH_SELECTOR_BASE_HEIGHT,
    SWITCH_SELECTOR_MAX_HEIGHT,
)
from .if_layout import diagonal_ratio, header_height_for_ratio
from .models import LayoutNode, SwitchCaseLayout, SwitchLayout

SELECTOR_BOTTOM_Y = (
    SWITCH_CONDITION_TOP_PADDING + FONT_SIZE + SWITCH_CONDITION_LINE_CLEARANCE
)


@dataclass(frozen=True)
class SwitchGeometry:
    """Solved column widths and band heights of a switch box."""

    case_widths: Tuple[int, ...]
    width: int
    selector_band_height: int
    label_band_height: int


def diagonal_runs(case_widths: Sequence[float]) -> Tuple[float, float]:
    """Horizontal runs of the left and right diagonals."""
    total = sum(case_widths)
    if len(case_widths) >= 2:
        right_run = case_widths[-1]
        return total - right_run, right_run
    return total / 2, total / 2


def ensure_minimum_runs(case_widths: Sequence[float], minimum_run: float) -> List[float]:
    """
    Widen columns until both diagonal runs are at least minimum_run.

    Returns a new list; the input is not modified.
    """
    widths = list(case_widths)
    if not widths:
        return widths

    if len(widths) == 1:
        required_total = math.ceil(minimum_run * 2)
        if widths[0] < required_total:
            widths[0] = required_total
        return widths

    default_index = len(widths) - 1
    left_indices = list(range(default_index))

    left_run, right_run = diagonal_runs(widths)
    if left_run < minimum_run:
        widths = distribute_extra_width(
            widths, left_indices, math.ceil(minimum_run - left_run)
        )
        left_run, right_run = diagonal_runs(widths)
    if right_run < minimum_run:
        widths = distribute_extra_width(
            widths, [default_index], math.ceil(minimum_run - right_run)
        )
    return widths


def fit_switch_geometry(
    selector_width: float, preferred_widths: Sequence[float]
) -> SwitchGeometry:
    """
    Solve the switch header for a selector label of the given width.

    Args:
        selector_width: Width of the selector label including padding.
        preferred_widths: Content-driven width of every column, default last.

    Returns:
        SwitchGeometry whose runs clear the selector label, with the
        selector band as short as the diagonal slopes allow.
    """
    half_width = selector_width / 2
    widths = ensure_minimum_runs(
        preferred_widths, half_width + SWITCH_CONDITION_SIDE_CLEARANCE
    )

    ratio_at_max = SELECTOR_BOTTOM_Y / SWITCH_SELECTOR_MAX_HEIGHT
    if 0 < ratio_at_max < 1:
        widths = ensure_minimum_runs(widths, half_width / (1 - ratio_at_max))

    left_run, right_run = diagonal_runs(widths)
    min_ratio = max(
        0.0,
        min(diagonal_ratio(left_run, half_width), diagonal_ratio(right_run, half_width)),
    )
    selector_band_height = header_height_for_ratio(
        min_ratio,
        SELECTOR_BOTTOM_Y,
        SWITCH_SELECTOR_BASE_HEIGHT,
        SWITCH_SELECTOR_MAX_HEIGHT,
    )

    case_widths = tuple(math.ceil(width) for width in widths)
    return SwitchGeometry(
        case_widths=case_widths,
        width=sum(case_widths),
        selector_band_height=selector_band_height,
        label_band_height=SECTION_HEADER_HEIGHT,
    )


def build_switch_layout(
    expression: str,
    cases: Sequence[Tuple[str, LayoutNode]],
    branch_height: int,
    box_width: Callable[[str], int],
    inline_width: Callable[[str], float],
) -> SwitchLayout:
    """
    Build the layout node of a switch box.

    Args:
        expression: Normalized selector expression.
        cases: (label, body) pairs after case merging, default last.
        branch_height: Height of the case body band.
        box_width: Minimum box width of a label.
        inline_width: Label width including padding, without the minimum.
    """
    initial_widths = [max(body.width, box_width(label)) for label, body in cases]
    widths = spread_to_minimum(initial_widths, box_width(expression))
    geometry = fit_switch_geometry(inline_width(expression), widths)

    resolved = tuple(
        SwitchCaseLayout(label=label, body=body, width=geometry.case_widths[index])
        for index, (label, body) in enumerate(cases)
    )
    return SwitchLayout(
        expression=expression,
        cases=resolved,
        selector_band_height=geometry.selector_band_height,
        label_band_height=geometry.label_band_height,
        branch_height=branch_height,
        width=geometry.width,
        height=geometry.selector_band_height + geometry.label_band_height + branch_height,
    )
