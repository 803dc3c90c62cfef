"""
Geometry of try/catch/finally boxes.

Sections are stacked top to bottom: the "try" header and the protected
body, then a "catch (X)" header and body for every catch clause, then an
optional "finally" header and body. Bodies are drawn to the right of a
frame band of TRY_FRAME_SIDE_WIDTH, which is why every body width is
widened by that band.
"""

from typing import Callable, Optional, Sequence

from .constants import (
    FINALLY_HEADER_LABEL,
    HEADER_HEIGHT,
    SECTION_HEADER_HEIGHT,
    TRY_FRAME_SIDE_WIDTH,
    TRY_HEADER_LABEL,
)
from .models import CatchLayout, LayoutNode, TryLayout


def catch_header(exception: str) -> str:
    return f"catch ({exception})"


def build_try_layout(
    body: LayoutNode,
    catches: Sequence[CatchLayout],
    finally_branch: Optional[LayoutNode],
    box_width: Callable[[str], int],
) -> TryLayout:
    """
    Build the layout node of a try box.

    Args:
        body: Layout of the protected body.
        catches: Catch sections in source order.
        finally_branch: Layout of the finally body, or None.
        box_width: Minimum box width of a label.
    """
    section_widths = [
        box_width(TRY_HEADER_LABEL),
        body.width + TRY_FRAME_SIDE_WIDTH,
        box_width(FINALLY_HEADER_LABEL),
    ]
    height = HEADER_HEIGHT + body.height

    for entry in catches:
        section_widths.append(box_width(catch_header(entry.exception)))
        section_widths.append(entry.body.width + TRY_FRAME_SIDE_WIDTH)
        height += SECTION_HEADER_HEIGHT + entry.body.height

    if finally_branch is not None:
        section_widths.append(finally_branch.width + TRY_FRAME_SIDE_WIDTH)
        height += SECTION_HEADER_HEIGHT + finally_branch.height

    return TryLayout(
        body=body,
        catches=tuple(catches),
        finally_branch=finally_branch,
        width=max(section_widths),
        height=height,
    )
