"""
Geometry of loop boxes.

Pre-test loops (while, for, foreach) are drawn as a header row with the
body inset on the right, leaving a band on the left that wraps around the
body. Post-test loops (do-while) are drawn as a "do" header row, the body
at full width and a "while (...)" footer row.
"""

from typing import Callable, Optional, Tuple

from .constants import (
    DO_WHILE_KIND,
    HEADER_HEIGHT,
    LOOP_BODY_INSET_WIDTH,
    ROW_HEIGHT,
)
from .models import LayoutNode, LoopLayout


def loop_labels(loop_kind: Optional[str], condition: str) -> Tuple[str, Optional[str]]:
    """Return the (header, footer) labels of a loop; footer is None for pre-test loops."""
    kind = (loop_kind or "").strip() or "loop"
    if kind == DO_WHILE_KIND:
        return "do", f"while ({condition})"
    return f"{kind} ({condition})", None


def build_loop_layout(
    loop_kind: Optional[str],
    condition: str,
    body: LayoutNode,
    box_width: Callable[[str], int],
) -> LoopLayout:
    """
    Build the layout node of a loop box.

    Args:
        loop_kind: Kind reported by the analyzer; "doWhile" is post-test.
        condition: Normalized loop condition.
        body: Layout of the loop body.
        box_width: Minimum box width of a label.
    """
    header, footer = loop_labels(loop_kind, condition)

    if footer is not None:
        return LoopLayout(
            header=header,
            footer=footer,
            body_inset_width=0,
            body=body,
            width=max(box_width(header), box_width(footer), body.width),
            height=HEADER_HEIGHT + body.height + HEADER_HEIGHT,
        )

    return LoopLayout(
        header=header,
        footer=None,
        body_inset_width=LOOP_BODY_INSET_WIDTH,
        body=body,
        width=max(box_width(header), body.width + LOOP_BODY_INSET_WIDTH),
        height=max(ROW_HEIGHT * 2, body.height),
    )
